"""
Adherence serializers.
"""

from rest_framework import serializers

from .models import AdherenceRecord, AdherenceStatus


class RecordAdherenceSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=AdherenceStatus.choices, default=AdherenceStatus.TAKEN)
    notes = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    side_effects_reported = serializers.CharField(required=False, allow_null=True, allow_blank=True)


class AdherenceRecordSerializer(serializers.ModelSerializer):
    prescription_id = serializers.IntegerField(read_only=True)
    medication_name = serializers.CharField(source="prescription.medication.trade_name", read_only=True)

    class Meta:
        model = AdherenceRecord
        fields = [
            "id",
            "prescription_id",
            "medication_name",
            "scheduled_time",
            "actual_time",
            "status",
            "dose_taken",
            "dose_unit",
            "notes",
            "side_effects_reported",
            "source",
            "created_at",
        ]
        read_only_fields = fields
