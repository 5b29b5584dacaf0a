"""Payment serializers."""

from rest_framework import serializers

from apps.shipments.models import Shipment

from .models import Payment


class PaymentSerializer(serializers.ModelSerializer):
    shipment_id    = serializers.CharField(source="shipment.shipment_id", read_only=True)
    customer_name  = serializers.CharField(source="customer.name",  read_only=True, default=None)
    customer_phone = serializers.CharField(source="customer.phone", read_only=True, default=None)

    class Meta:
        model  = Payment
        fields = [
            "id", "payment_id", "shipment", "shipment_id", "customer", "customer_name",
            "customer_phone", "amount", "method", "status", "transaction_date",
            "created_at", "updated_at",
        ]
        read_only_fields = fields


class PaymentCreateSerializer(serializers.Serializer):
    shipment         = serializers.PrimaryKeyRelatedField(queryset=Shipment.objects.all())
    amount           = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False)
    method           = serializers.ChoiceField(choices=Payment.Method.choices)
    status           = serializers.ChoiceField(choices=Payment.Status.choices, required=False)
    transaction_date = serializers.DateTimeField(required=False)


class PaymentStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Payment.Status.choices)
