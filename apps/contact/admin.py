from django.contrib import admin

from .models import Message


@admin.register(Message)
class MessageAdmin(admin.ModelAdmin):
    list_display  = ("sender", "email", "subject", "status", "user", "created_at")
    list_filter   = ("status",)
    search_fields = ("sender", "email", "subject")
    ordering      = ("-created_at",)
