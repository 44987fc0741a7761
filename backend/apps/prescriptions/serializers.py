"""
Prescription serializers.

Input serializers only validate shape; the lifecycle rules live in
PrescriptionLifecycleService.
"""

from decimal import Decimal

from rest_framework import serializers

from .models import Dispensation, Prescription


class PrescriptionSerializer(serializers.ModelSerializer):
    """Read representation with medication and prescriber display fields."""

    patient_id = serializers.CharField(read_only=True)
    medication_id = serializers.IntegerField(read_only=True)
    medication_name = serializers.CharField(source="medication.trade_name", read_only=True)
    medication_strength = serializers.CharField(source="medication.strength", read_only=True)
    medication_form = serializers.CharField(source="medication.form", read_only=True)
    prescriber_name = serializers.CharField(source="prescriber.full_name", read_only=True)
    prescriber_specialty = serializers.CharField(source="prescriber.specialty", read_only=True)
    quantity_remaining = serializers.IntegerField(read_only=True)

    class Meta:
        model = Prescription
        fields = [
            "id",
            "prescription_number",
            "status",
            "patient_id",
            "medication_id",
            "medication_name",
            "medication_strength",
            "medication_form",
            "prescriber_name",
            "prescriber_specialty",
            "dose",
            "dose_unit",
            "frequency",
            "frequency_description",
            "route",
            "indication",
            "instructions",
            "prescribed_date",
            "start_date",
            "end_date",
            "refills_allowed",
            "refills_remaining",
            "next_refill_eligible_date",
            "quantity_prescribed",
            "quantity_dispensed",
            "quantity_remaining",
            "quantity_unit",
            "days_supply",
            "is_prn",
            "is_substitution_allowed",
            "is_controlled_substance",
            "cancelled_at",
            "cancellation_reason",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class CreatePrescriptionSerializer(serializers.Serializer):
    patient_id = serializers.CharField(max_length=64)
    medication_id = serializers.IntegerField()

    dose = serializers.DecimalField(max_digits=10, decimal_places=3, min_value=Decimal("0.001"))
    dose_unit = serializers.CharField(max_length=20)
    frequency = serializers.CharField(max_length=50)
    frequency_description = serializers.CharField(max_length=200, required=False, allow_null=True, allow_blank=True)
    route = serializers.CharField(max_length=50)

    indication = serializers.CharField(max_length=500, required=False, allow_null=True, allow_blank=True)
    instructions = serializers.CharField(required=False, allow_null=True, allow_blank=True)

    start_date = serializers.DateField()
    end_date = serializers.DateField(required=False, allow_null=True)

    quantity_prescribed = serializers.IntegerField(min_value=1)
    quantity_unit = serializers.CharField(max_length=20, required=False, allow_null=True)
    days_supply = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    refills_allowed = serializers.IntegerField(min_value=0, required=False, default=0)

    is_prn = serializers.BooleanField(required=False, default=False)
    is_substitution_allowed = serializers.BooleanField(required=False, default=True)
    is_controlled_substance = serializers.BooleanField(required=False, default=False)

    def validate(self, attrs):
        end_date = attrs.get("end_date")
        if end_date and end_date < attrs["start_date"]:
            raise serializers.ValidationError({"end_date": "End date cannot be before start date"})
        return attrs


class UpdatePrescriptionSerializer(serializers.Serializer):
    """Every field optional except ``modification_reason``."""

    dose = serializers.DecimalField(
        max_digits=10, decimal_places=3, min_value=Decimal("0.001"), required=False, allow_null=True
    )
    dose_unit = serializers.CharField(max_length=20, required=False, allow_null=True)
    frequency = serializers.CharField(max_length=50, required=False, allow_null=True)
    frequency_description = serializers.CharField(max_length=200, required=False, allow_null=True)
    route = serializers.CharField(max_length=50, required=False, allow_null=True)
    indication = serializers.CharField(max_length=500, required=False, allow_null=True)
    instructions = serializers.CharField(required=False, allow_null=True)
    end_date = serializers.DateField(required=False, allow_null=True)
    refills_allowed = serializers.IntegerField(min_value=0, required=False, allow_null=True)
    is_substitution_allowed = serializers.BooleanField(required=False, allow_null=True)

    modification_reason = serializers.CharField(max_length=500)

    def validate_modification_reason(self, value):
        if not value.strip():
            raise serializers.ValidationError("Modification reason is required")
        return value.strip()


class CancelPrescriptionSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_null=True, allow_blank=True)


class DispenseSerializer(serializers.Serializer):
    prescription_id = serializers.IntegerField()
    quantity_to_dispense = serializers.IntegerField(min_value=1)
    notes = serializers.CharField(required=False, allow_null=True, allow_blank=True)


class DispensationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Dispensation
        fields = ["id", "prescription_id", "pharmacist_user_id", "quantity", "notes", "dispensed_at"]
        read_only_fields = fields


class PrescriptionDetailSerializer(PrescriptionSerializer):
    """Single prescription with its dispensing history."""

    dispensations = DispensationSerializer(many=True, read_only=True)

    class Meta(PrescriptionSerializer.Meta):
        fields = PrescriptionSerializer.Meta.fields + ["dispensations"]
        read_only_fields = fields
