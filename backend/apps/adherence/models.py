"""
Adherence records.
"""

from django.db import models

from apps.core.exceptions import InvalidStateError
from apps.patients.models import Patient
from apps.prescriptions.models import Prescription


class AdherenceStatus(models.TextChoices):
    TAKEN = "TAKEN", "Taken"
    MISSED = "MISSED", "Missed"
    SKIPPED = "SKIPPED", "Skipped"


class RecordSource(models.TextChoices):
    PATIENT_REPORTED = "PATIENT_REPORTED", "Patient reported"
    CAREGIVER_REPORTED = "CAREGIVER_REPORTED", "Caregiver reported"
    DEVICE = "DEVICE", "Device"


class AdherenceRecord(models.Model):
    """
    One dose event for a prescription.

    Append-only: a record is written once and never changed.
    """

    prescription = models.ForeignKey(Prescription, on_delete=models.PROTECT, related_name="adherence_records")
    patient = models.ForeignKey(Patient, on_delete=models.PROTECT, related_name="adherence_records")

    scheduled_time = models.DateTimeField()
    actual_time = models.DateTimeField(blank=True, null=True)
    status = models.CharField(max_length=20, choices=AdherenceStatus.choices)

    dose_taken = models.DecimalField(max_digits=10, decimal_places=3, blank=True, null=True)
    dose_unit = models.CharField(max_length=20, blank=True, null=True)

    notes = models.TextField(blank=True, null=True)
    side_effects_reported = models.TextField(blank=True, null=True)

    source = models.CharField(max_length=20, choices=RecordSource.choices, default=RecordSource.PATIENT_REPORTED)
    device_id = models.CharField(max_length=100, blank=True, null=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "adherence_records"
        ordering = ["-scheduled_time", "-id"]
        indexes = [
            models.Index(fields=["prescription", "scheduled_time"]),
            models.Index(fields=["patient", "scheduled_time"]),
        ]

    def __str__(self):
        return f"{self.status} for prescription {self.prescription_id} at {self.scheduled_time:%Y-%m-%d %H:%M}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise InvalidStateError(message="Adherence records cannot be modified")
        super().save(*args, **kwargs)
