from rest_framework import serializers

from .models import Message


class MessageSerializer(serializers.ModelSerializer):
    user_name = serializers.CharField(source="user.name", read_only=True, default=None)

    class Meta:
        model  = Message
        fields = ["id", "sender", "email", "subject", "body", "status", "reply",
                  "user", "user_name", "created_at", "updated_at"]
        read_only_fields = ["id", "status", "reply", "user", "user_name", "created_at", "updated_at"]


class ReplySerializer(serializers.Serializer):
    reply_body = serializers.CharField()
