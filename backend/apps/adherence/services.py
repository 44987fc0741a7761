"""
Adherence service: patient-reported dose events.
"""

import structlog
from django.db import transaction
from django.utils import timezone
from prometheus_client import Counter

from apps.core.exceptions import InvalidReferenceError, NotFoundError
from apps.patients.models import Patient
from apps.prescriptions.models import Prescription

from .models import AdherenceRecord, RecordSource

logger = structlog.get_logger(__name__)

ADHERENCE_RECORDED_TOTAL = Counter(
    "adherence_recorded_total",
    "Adherence events recorded",
    ["status"],  # TAKEN, MISSED, SKIPPED
)


class AdherenceService:
    @staticmethod
    @transaction.atomic
    def record(prescription_id, patient_id, status, notes=None, side_effects=None) -> AdherenceRecord:
        """
        Record that ``patient_id`` took (or missed, or skipped) a dose now.

        Dose and unit are copied from the prescription as it is right now.
        """
        prescription = Prescription.objects.select_related("medication").filter(pk=prescription_id).first()
        if prescription is None:
            raise NotFoundError(message="Prescription not found")

        patient = Patient.objects.filter(pk=patient_id).first()
        if patient is None:
            raise NotFoundError(message="Patient not found")

        if prescription.patient_id != patient.pk:
            raise InvalidReferenceError(message="Prescription does not belong to patient")

        now = timezone.now()
        record = AdherenceRecord.objects.create(
            prescription=prescription,
            patient=patient,
            scheduled_time=now,
            actual_time=now,
            status=status,
            dose_taken=prescription.dose,
            dose_unit=prescription.dose_unit,
            notes=notes,
            side_effects_reported=side_effects,
            source=RecordSource.PATIENT_REPORTED,
        )

        ADHERENCE_RECORDED_TOTAL.labels(status=str(status)).inc()
        logger.info(
            "adherence_recorded",
            adherence_record_id=record.pk,
            prescription_id=prescription.pk,
            patient_id=patient.pk,
            status=str(status),
            side_effects=bool(side_effects),
        )
        return record

    @staticmethod
    def history(prescription_id):
        """Most recent scheduled time first."""
        return (
            AdherenceRecord.objects.select_related("prescription__medication")
            .filter(prescription_id=prescription_id)
            .order_by("-scheduled_time", "-id")
        )

    @classmethod
    def history_between(cls, prescription_id, start=None, end=None):
        """``history`` limited to ``start <= scheduled_time <= end``. Either bound may be open."""
        queryset = cls.history(prescription_id)
        if start is not None:
            queryset = queryset.filter(scheduled_time__gte=start)
        if end is not None:
            queryset = queryset.filter(scheduled_time__lte=end)
        return queryset
