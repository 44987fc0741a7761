"""
Patient serializers.
"""

from datetime import date

from rest_framework import serializers

from apps.core.fields import keyed_digest
from apps.core.validators import NationalIdValidator

from .models import Patient


def mask_national_id(value):
    """19121212-1212 -> ********-1212"""
    if not value:
        return value
    return "*" * max(len(value) - 4, 0) + value[-4:]


class PatientSerializer(serializers.ModelSerializer):
    """Full serializer for Patient model. The national id is write-only."""

    national_id = serializers.CharField(write_only=True)
    national_id_masked = serializers.SerializerMethodField()
    full_name = serializers.CharField(read_only=True)

    class Meta:
        model = Patient
        fields = [
            "id",
            "user_id",
            "national_id",
            "national_id_masked",
            "first_name",
            "last_name",
            "full_name",
            "date_of_birth",
            "gender",
            "email",
            "phone",
            "address_line1",
            "address_line2",
            "postal_code",
            "city",
            "country",
            "emergency_contact_name",
            "emergency_contact_phone",
            "emergency_contact_relationship",
            "allergies",
            "chronic_conditions",
            "weight_kg",
            "height_cm",
            "blood_type",
            "preferred_language",
            "consent_data_sharing",
            "consent_marketing",
            "created_by",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["created_by", "created_at", "updated_at"]

    def get_national_id_masked(self, obj):
        return mask_national_id(obj.national_id)

    def get_fields(self):
        fields = super().get_fields()
        if self.instance is not None and not isinstance(self.instance, (list, tuple)):
            # Primary key is fixed once the patient exists
            fields["id"].read_only = True
        return fields

    def validate_national_id(self, value):
        is_valid, error = NationalIdValidator.validate(value)
        if not is_valid:
            raise serializers.ValidationError(error)
        value = value.strip()

        existing = Patient.all_objects.filter(national_id_digest=keyed_digest(value))
        if self.instance is not None:
            existing = existing.exclude(pk=self.instance.pk)
        if existing.exists():
            raise serializers.ValidationError("A patient with this national id already exists")
        return value

    def validate_date_of_birth(self, value):
        if value and value > date.today():
            raise serializers.ValidationError("Date of birth cannot be in the future")
        return value

    def validate_weight_kg(self, value):
        if value is not None and (value <= 0 or value > 500):
            raise serializers.ValidationError("Weight must be between 0 and 500 kg")
        return value

    def validate_first_name(self, value):
        if not value or not value.strip():
            raise serializers.ValidationError("First name is required")
        return " ".join(value.split())

    def validate_last_name(self, value):
        if not value or not value.strip():
            raise serializers.ValidationError("Last name is required")
        return " ".join(value.split())


class PatientListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for listing patients."""

    full_name = serializers.CharField(read_only=True)

    class Meta:
        model = Patient
        fields = ["id", "user_id", "first_name", "last_name", "full_name", "date_of_birth"]
