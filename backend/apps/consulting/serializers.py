# apps/consulting/serializers.py
"""
Consulting API serializers

Output serializers read domain objects; field names are camelCase on
the wire.
"""
from rest_framework import serializers

from apps.domain.models import RequestStatus, Tier

TIER_CHOICES = [tier.value for tier in Tier]
STATUS_CHOICES = [status.value for status in RequestStatus]

MISSING_FIELDS = "Missing required fields"


class ConsultingRequestSerializer(serializers.Serializer):
    """Serializer for consulting requests"""

    id = serializers.UUIDField(read_only=True)
    tier = serializers.CharField(source="tier.value", read_only=True)
    status = serializers.CharField(source="status.value", read_only=True)
    customerName = serializers.CharField(source="customer_name", read_only=True)
    customerEmail = serializers.EmailField(source="customer_email", read_only=True)
    description = serializers.CharField(read_only=True)
    response = serializers.CharField(read_only=True, allow_null=True)
    amount = serializers.IntegerField(read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)


class CannedAnswerSerializer(serializers.Serializer):
    """Serializer for canned answer entries"""

    id = serializers.UUIDField(read_only=True)
    topic = serializers.CharField(read_only=True)
    answer = serializers.CharField(read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)


class SubmitRequestSerializer(serializers.Serializer):
    """Serializer for direct request submission"""

    tier = serializers.ChoiceField(choices=TIER_CHOICES)
    customerName = serializers.CharField(max_length=255)
    customerEmail = serializers.EmailField()
    description = serializers.CharField()
    amount = serializers.IntegerField(min_value=0)


class CheckoutSerializer(serializers.Serializer):
    """Serializer for checkout session creation"""

    tier = serializers.ChoiceField(choices=TIER_CHOICES)
    customerEmail = serializers.EmailField(required=False, allow_blank=True)
    customerName = serializers.CharField(max_length=255, required=False, allow_blank=True)
    description = serializers.CharField(required=False, allow_blank=True, default="")

    def validate(self, attrs):
        if not attrs.get("customerEmail") or not attrs.get("customerName"):
            raise serializers.ValidationError(MISSING_FIELDS)
        return attrs


class UpdateRequestSerializer(serializers.Serializer):
    """Serializer for admin request updates"""

    status = serializers.ChoiceField(choices=STATUS_CHOICES, required=False)
    response = serializers.CharField(required=False, allow_blank=True)


class CreateCannedAnswerSerializer(serializers.Serializer):
    topic = serializers.CharField(max_length=255)
    answer = serializers.CharField()


class UpdateCannedAnswerSerializer(serializers.Serializer):
    topic = serializers.CharField(max_length=255, required=False)
    answer = serializers.CharField(required=False)


class AdminLoginSerializer(serializers.Serializer):
    password = serializers.CharField(
        required=False, allow_blank=True, trim_whitespace=False
    )

    def validate(self, attrs):
        if not attrs.get("password"):
            raise serializers.ValidationError("Password is required")
        return attrs
