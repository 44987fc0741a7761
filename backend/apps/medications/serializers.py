"""
Medication serializers.
"""

from rest_framework import serializers

from .models import Medication


class MedicationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Medication
        fields = [
            "id",
            "npl_id",
            "trade_name",
            "generic_name",
            "form",
            "strength",
            "route",
            "atc_code",
            "manufacturer",
            "is_available",
            "requires_prescription",
            "price",
            "description",
        ]
        read_only_fields = fields


class MedicationListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for listing and search results."""

    class Meta:
        model = Medication
        fields = ["id", "npl_id", "trade_name", "generic_name", "form", "strength", "is_available"]
        read_only_fields = fields
