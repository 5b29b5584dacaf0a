from django.contrib import admin

from .models import Payment


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display    = ("payment_id", "shipment", "customer", "amount", "method", "status", "transaction_date")
    list_filter     = ("status", "method")
    search_fields   = ("payment_id", "shipment__shipment_id", "customer__name", "customer__phone")
    readonly_fields = ("id", "created_at", "updated_at")
    ordering        = ("-transaction_date",)
