"""Offset pagination that renders the ``{status, data: {<items>, pagination}}`` envelope."""

import math

from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response


class EnvelopePagination(PageNumberPagination):
    page_size_query_param = "limit"
    max_page_size         = 100
    # Key the page items are published under, e.g. "shipments".
    results_key           = "results"

    def paginate_queryset(self, queryset, request, view=None):
        self.results_key = getattr(view, "results_key", self.results_key)
        self.request = request
        self.limit = self.get_page_size(request)
        self.page_number = self._page_number(request)
        self.total = queryset.count()
        offset = (self.page_number - 1) * self.limit
        return list(queryset[offset:offset + self.limit])

    def _page_number(self, request):
        try:
            page = int(request.query_params.get(self.page_query_param, 1))
        except (TypeError, ValueError):
            return 1
        return max(page, 1)

    def get_pagination(self):
        return {
            "total":      self.total,
            "page":       self.page_number,
            "limit":      self.limit,
            "totalPages": math.ceil(self.total / self.limit) if self.limit else 0,
        }

    def get_paginated_response(self, data):
        return Response({
            "status": "success",
            "data": {
                self.results_key: data,
                "pagination": self.get_pagination(),
            },
        })

    def get_paginated_response_schema(self, schema):
        return {
            "type": "object",
            "properties": {
                "status": {"type": "string", "example": "success"},
                "data": {
                    "type": "object",
                    "properties": {
                        self.results_key: schema,
                        "pagination": {
                            "type": "object",
                            "properties": {
                                "total":      {"type": "integer"},
                                "page":       {"type": "integer"},
                                "limit":      {"type": "integer"},
                                "totalPages": {"type": "integer"},
                            },
                        },
                    },
                },
            },
        }
