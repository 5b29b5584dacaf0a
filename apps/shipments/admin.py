from django.contrib import admin

from .models import Shipment, TrackingEvent


class TrackingEventInline(admin.TabularInline):
    model           = TrackingEvent
    extra           = 0
    readonly_fields = ("status", "location", "timestamp")
    can_delete      = False

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Shipment)
class ShipmentAdmin(admin.ModelAdmin):
    list_display    = ("shipment_id", "status", "customer", "guest_name", "staff", "branch", "cost", "created_at")
    list_filter     = ("status", "branch")
    search_fields   = ("shipment_id", "customer__name", "customer__phone", "guest_name", "guest_phone")
    readonly_fields = ("id", "shipment_id", "status", "created_at", "updated_at")
    ordering        = ("-created_at",)
    inlines         = [TrackingEventInline]
