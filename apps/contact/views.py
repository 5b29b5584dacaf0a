"""Contact messages: public form, admin inbox, staff inbox, replies."""

import logging

from drf_spectacular.utils import extend_schema
from rest_framework import generics, permissions, status
from rest_framework.exceptions import NotFound
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.authentication.permissions import IsAdmin, IsStaffOrAdmin
from apps.authentication.tokens import OptionalBearerAuthentication

from .models import Message
from .serializers import MessageSerializer, ReplySerializer
from .service import MessageService

logger = logging.getLogger("bongoexpress.contact")
message_service = MessageService()


# ── /api/messages/ ────────────────────────────────────────────────────────────
@extend_schema(tags=["Messages"], summary="Send a contact message (public) or list all messages (admin)")
class MessageListCreateView(generics.ListCreateAPIView):
    serializer_class = MessageSerializer
    results_key      = "messages"

    def get_authenticators(self):
        if self.request.method == "POST":
            return [OptionalBearerAuthentication()]
        return super().get_authenticators()

    def get_permissions(self):
        if self.request.method == "POST":
            return [permissions.AllowAny()]
        return [IsAdmin()]

    def get_queryset(self):
        qs = Message.objects.select_related("user")
        status_filter = self.request.query_params.get("status")
        if status_filter and status_filter != "All":
            qs = qs.filter(status=status_filter)
        return qs

    def create(self, request, *args, **kwargs):
        ser = self.get_serializer(data=request.data)
        ser.is_valid(raise_exception=True)
        user = request.user if request.user.is_authenticated else None
        message = ser.save(user=user)
        logger.info("Contact message %s received from %s", message.pk, message.email)
        return Response(
            {"status": "success", "data": {"message": MessageSerializer(message).data}},
            status=status.HTTP_201_CREATED,
        )


class ReplyMixin:
    def reply_to(self, request, message):
        ser = ReplySerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        message = message_service.reply(message, ser.validated_data["reply_body"], request.user)
        return Response({
            "status":  "success",
            "message": "Reply sent successfully.",
            "data":    {"message": MessageSerializer(message).data},
        })


@extend_schema(tags=["Messages"], summary="Reply to a message by email", request=ReplySerializer)
class MessageReplyView(ReplyMixin, APIView):
    permission_classes = [IsAdmin]

    def post(self, request, pk):
        message = Message.objects.filter(pk=pk).first()
        if message is None:
            raise NotFound("Message not found")
        return self.reply_to(request, message)


# ── /api/staff-dashboard/messages/ ────────────────────────────────────────────
@extend_schema(tags=["Staff Dashboard"], summary="Messages from customers of my shipments")
class StaffMessageListView(generics.ListAPIView):
    serializer_class   = MessageSerializer
    permission_classes = [IsStaffOrAdmin]
    results_key        = "messages"

    def get_queryset(self):
        return message_service.visible_to(self.request.user)


@extend_schema(tags=["Staff Dashboard"], summary="Reply to a customer message", request=ReplySerializer)
class StaffMessageReplyView(ReplyMixin, APIView):
    permission_classes = [IsStaffOrAdmin]

    def post(self, request, pk):
        message = message_service.visible_to(request.user).filter(pk=pk).first()
        if message is None:
            raise NotFound("Message not found")
        return self.reply_to(request, message)
