"""Shipment serializers."""

from decimal import Decimal

from rest_framework import serializers

from apps.authentication.models import User
from apps.payments.models import Payment

from .models import Shipment, TrackingEvent
from .owner import as_dict


class TrackingEventSerializer(serializers.ModelSerializer):
    class Meta:
        model  = TrackingEvent
        fields = ["status", "location", "timestamp"]


class ShipmentSerializer(serializers.ModelSerializer):
    owner           = serializers.SerializerMethodField()
    customer_name   = serializers.CharField(source="customer.name",   read_only=True, default=None)
    staff_name      = serializers.CharField(source="staff.name",      read_only=True, default=None)
    created_by_name = serializers.CharField(source="created_by.name", read_only=True, default=None)
    history         = TrackingEventSerializer(many=True, read_only=True)

    class Meta:
        model  = Shipment
        fields = [
            "id", "shipment_id", "owner",
            "customer", "customer_name", "guest_name", "guest_phone",
            "staff", "staff_name", "created_by", "created_by_name",
            "branch", "origin", "destination", "status",
            "dispatch_date", "estimated_delivery", "weight", "package_details", "cost",
            "history", "created_at", "updated_at",
        ]
        read_only_fields = fields

    def get_owner(self, obj):
        return as_dict(obj.owner)


class PublicShipmentSerializer(serializers.ModelSerializer):
    """What anyone holding a tracking number may see."""
    customer_name = serializers.SerializerMethodField()
    history       = TrackingEventSerializer(many=True, read_only=True)

    class Meta:
        model  = Shipment
        fields = [
            "shipment_id", "customer_name", "origin", "destination", "status",
            "dispatch_date", "estimated_delivery", "weight", "package_details", "history",
        ]

    def get_customer_name(self, obj):
        owner = obj.owner
        return owner.name if owner else None


# ── Request bodies ────────────────────────────────────────────────────────────
class GuestBookingSerializer(serializers.Serializer):
    sender_name     = serializers.CharField(max_length=120)
    sender_email    = serializers.EmailField()
    sender_phone    = serializers.CharField(max_length=20)
    origin          = serializers.CharField(max_length=120)
    destination     = serializers.CharField(max_length=120)
    weight          = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal("0.01"))
    package_details = serializers.CharField()


class ShipmentCreateSerializer(serializers.Serializer):
    customer_name      = serializers.CharField(max_length=120)
    customer_phone     = serializers.CharField(max_length=20)
    origin             = serializers.CharField(max_length=120)
    destination        = serializers.CharField(max_length=120)
    package_details    = serializers.CharField(required=False, allow_blank=True, default="")
    weight             = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0,
                                                  required=False, default=0)
    cost               = serializers.DecimalField(max_digits=12, decimal_places=2)
    payment_method     = serializers.ChoiceField(choices=Payment.Method.choices, required=False)
    payment_status     = serializers.ChoiceField(choices=Payment.Status.choices, required=False)
    estimated_delivery = serializers.DateTimeField(required=False, allow_null=True)
    branch             = serializers.ChoiceField(choices=User.Branch.choices, required=False)
    staff              = serializers.PrimaryKeyRelatedField(
        queryset=User.objects.filter(role=User.Role.STAFF), required=False, allow_null=True,
    )


class ShipmentUpdateSerializer(serializers.Serializer):
    origin             = serializers.CharField(max_length=120, required=False)
    destination        = serializers.CharField(max_length=120, required=False)
    branch             = serializers.CharField(max_length=20, required=False, allow_blank=True)
    staff              = serializers.PrimaryKeyRelatedField(
        queryset=User.objects.filter(role=User.Role.STAFF), required=False, allow_null=True,
    )
    dispatch_date      = serializers.DateTimeField(required=False)
    estimated_delivery = serializers.DateTimeField(required=False, allow_null=True)
    weight             = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0, required=False)
    package_details    = serializers.CharField(required=False, allow_blank=True)
    status             = serializers.ChoiceField(choices=Shipment.Status.choices, required=False)
    location           = serializers.CharField(max_length=120, required=False, allow_blank=True)
    cost               = serializers.DecimalField(max_digits=12, decimal_places=2, required=False)


class StatusUpdateSerializer(serializers.Serializer):
    status   = serializers.ChoiceField(choices=Shipment.Status.choices)
    location = serializers.CharField(max_length=120, required=False, allow_blank=True)


class CostUpdateSerializer(serializers.Serializer):
    cost = serializers.DecimalField(max_digits=12, decimal_places=2)
