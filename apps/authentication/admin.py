from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display  = ("email", "name", "role", "status", "branch", "two_factor_enabled", "created_at")
    list_filter   = ("role", "status", "branch", "two_factor_enabled")
    search_fields = ("email", "name", "phone")
    ordering      = ("-created_at",)
    readonly_fields = ("last_login", "created_at", "updated_at", "two_factor_enabled")
    fieldsets = (
        (None,          {"fields": ("email", "password")}),
        ("Personal",    {"fields": ("name", "phone", "location", "profile_picture")}),
        ("Role",        {"fields": ("role", "status", "branch")}),
        ("Security",    {"fields": ("two_factor_enabled", "last_login")}),
        ("Permissions", {"fields": ("is_active", "is_staff", "is_superuser", "groups", "user_permissions")}),
    )
    add_fieldsets = (
        (None, {"classes": ("wide",), "fields": ("email", "name", "role", "password1", "password2")}),
    )
