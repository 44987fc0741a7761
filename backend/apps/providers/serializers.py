"""
Prescriber and pharmacist serializers.
"""

from rest_framework import serializers

from .models import Pharmacist, Prescriber


def _clean_name(value, label):
    if not value or not value.strip():
        raise serializers.ValidationError(f"{label} is required")
    return " ".join(value.split())


def _clean_license(value):
    value = (value or "").strip().upper()
    if not value:
        raise serializers.ValidationError("License number is required")
    if not value.replace("-", "").isalnum():
        raise serializers.ValidationError("License number may only contain letters, digits and dashes")
    return value


class PrescriberSerializer(serializers.ModelSerializer):
    full_name = serializers.CharField(read_only=True)

    class Meta:
        model = Prescriber
        fields = [
            "id",
            "user_id",
            "first_name",
            "last_name",
            "full_name",
            "license_number",
            "specialty",
            "workplace",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]

    def validate_first_name(self, value):
        return _clean_name(value, "First name")

    def validate_last_name(self, value):
        return _clean_name(value, "Last name")

    def validate_license_number(self, value):
        return _clean_license(value)


class PharmacistSerializer(serializers.ModelSerializer):
    full_name = serializers.CharField(read_only=True)

    class Meta:
        model = Pharmacist
        fields = [
            "id",
            "user_id",
            "first_name",
            "last_name",
            "full_name",
            "license_number",
            "pharmacy_name",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]

    def validate_first_name(self, value):
        return _clean_name(value, "First name")

    def validate_last_name(self, value):
        return _clean_name(value, "Last name")

    def validate_license_number(self, value):
        return _clean_license(value)
