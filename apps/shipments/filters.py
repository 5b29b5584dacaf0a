"""Query-string filters for shipment listings."""

import uuid

import django_filters

from .models import Shipment

ALL = "All"


class ExactOrAllFilter(django_filters.CharFilter):
    """Exact match; the literal "All" (or nothing) leaves the queryset alone."""

    def filter(self, qs, value):
        if value == ALL:
            return qs
        return super().filter(qs, value)


class ShipmentFilter(django_filters.FilterSet):
    search = django_filters.CharFilter(field_name="shipment_id", lookup_expr="icontains")
    status = ExactOrAllFilter(field_name="status")
    branch = ExactOrAllFilter(field_name="branch")
    staff  = django_filters.CharFilter(method="filter_staff")
    date   = django_filters.DateFilter(field_name="dispatch_date", lookup_expr="date")

    class Meta:
        model  = Shipment
        fields = ["search", "status", "branch", "staff", "date"]

    def filter_staff(self, qs, name, value):
        if not value or value == ALL:
            return qs
        try:
            staff_id = uuid.UUID(value)
        except ValueError:
            return qs.none()
        return qs.filter(staff_id=staff_id)
