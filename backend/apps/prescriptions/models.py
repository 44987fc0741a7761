"""
Prescription models.
"""

from django.db import models
from django.utils import timezone

from apps.core.validators import validate_prescription_number
from apps.medications.models import Medication
from apps.patients.models import Patient
from apps.providers.models import Prescriber


class PrescriptionStatus(models.TextChoices):
    ACTIVE = "ACTIVE", "Active"
    COMPLETED = "COMPLETED", "Completed"
    CANCELLED = "CANCELLED", "Cancelled"


TERMINAL_STATUSES = frozenset({PrescriptionStatus.COMPLETED, PrescriptionStatus.CANCELLED})


class PrescriptionQuerySet(models.QuerySet):
    def for_patient(self, patient_id, status=None):
        queryset = self.filter(patient_id=patient_id)
        if status is not None:
            queryset = queryset.filter(status=status)
        return queryset

    def for_prescriber(self, prescriber, patient_id=None):
        queryset = self.filter(prescriber=prescriber)
        if patient_id:
            queryset = queryset.filter(patient_id=patient_id)
        return queryset.order_by("-prescribed_date", "-id")

    def refill_eligible(self, patient_id, today):
        return self.filter(
            patient_id=patient_id,
            status=PrescriptionStatus.ACTIVE,
            refills_remaining__gt=0,
            next_refill_eligible_date__lte=today,
        )

    def with_references(self):
        return self.select_related("patient", "medication", "prescriber")


class Prescription(models.Model):
    """
    A prescription issued by a prescriber for one patient and one medication.

    Status only moves forward: ACTIVE -> COMPLETED (fully dispensed) or
    ACTIVE -> CANCELLED (prescriber action). Both are terminal. All
    transitions go through PrescriptionLifecycleService.
    """

    prescription_number = models.CharField(
        max_length=20,
        unique=True,
        validators=[validate_prescription_number],
    )

    patient = models.ForeignKey(Patient, on_delete=models.PROTECT, related_name="prescriptions")
    medication = models.ForeignKey(Medication, on_delete=models.PROTECT, related_name="prescriptions")
    prescriber = models.ForeignKey(Prescriber, on_delete=models.PROTECT, related_name="prescriptions")

    status = models.CharField(
        max_length=20,
        choices=PrescriptionStatus.choices,
        default=PrescriptionStatus.ACTIVE,
    )

    # Dosing
    dose = models.DecimalField(max_digits=10, decimal_places=3)
    dose_unit = models.CharField(max_length=20)
    frequency = models.CharField(max_length=50)
    frequency_description = models.CharField(max_length=200, blank=True, null=True)
    route = models.CharField(max_length=50)
    max_daily_dose = models.DecimalField(max_digits=10, decimal_places=3, blank=True, null=True)
    max_daily_dose_unit = models.CharField(max_length=20, blank=True, null=True)

    # Clinical
    indication = models.CharField(max_length=500, blank=True, null=True)
    instructions = models.TextField(blank=True, null=True)
    clinical_notes = models.TextField(blank=True, null=True)

    # Dates
    prescribed_date = models.DateField(default=timezone.localdate)
    start_date = models.DateField()
    end_date = models.DateField(blank=True, null=True)

    # Refills
    refills_allowed = models.PositiveIntegerField(default=0)
    refills_remaining = models.PositiveIntegerField(default=0)
    last_refill_date = models.DateField(blank=True, null=True)
    next_refill_eligible_date = models.DateField(blank=True, null=True)

    # Quantity
    quantity_prescribed = models.PositiveIntegerField()
    quantity_dispensed = models.PositiveIntegerField(default=0)
    quantity_unit = models.CharField(max_length=20, blank=True, null=True)
    days_supply = models.PositiveIntegerField(blank=True, null=True)

    # Flags
    is_prn = models.BooleanField(default=False, help_text="Take as needed")
    is_substitution_allowed = models.BooleanField(default=True)
    is_controlled_substance = models.BooleanField(default=False)
    requires_prior_authorization = models.BooleanField(default=False)
    prior_authorization_number = models.CharField(max_length=50, blank=True, null=True)

    # External reference (e-prescription exchange)
    external_prescription_id = models.CharField(max_length=100, blank=True, null=True)
    external_system = models.CharField(max_length=50, blank=True, null=True)

    # Audit
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    created_by = models.CharField(max_length=100, blank=True, null=True)

    # Cancellation
    cancelled_at = models.DateTimeField(blank=True, null=True)
    cancelled_by = models.CharField(max_length=100, blank=True, null=True)
    cancellation_reason = models.TextField(blank=True, null=True)

    objects = PrescriptionQuerySet.as_manager()

    class Meta:
        db_table = "prescriptions"
        ordering = ["-prescribed_date", "-id"]
        indexes = [
            models.Index(fields=["patient", "status"]),
            models.Index(fields=["prescriber", "prescribed_date"]),
            models.Index(fields=["status", "next_refill_eligible_date"]),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity_dispensed__lte=models.F("quantity_prescribed")),
                name="prescription_dispensed_within_prescribed",
            ),
        ]

    def __str__(self):
        return f"{self.prescription_number} ({self.status})"

    @property
    def is_terminal(self):
        return self.status in TERMINAL_STATUSES

    @property
    def quantity_remaining(self):
        return self.quantity_prescribed - self.quantity_dispensed


class Dispensation(models.Model):
    """One successful dispense. Append-only."""

    prescription = models.ForeignKey(Prescription, on_delete=models.PROTECT, related_name="dispensations")
    pharmacist_user_id = models.CharField(max_length=100)
    quantity = models.PositiveIntegerField()
    notes = models.TextField(blank=True, null=True)
    dispensed_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "dispensations"
        ordering = ["-dispensed_at"]

    def __str__(self):
        return f"Dispensation of {self.quantity} for prescription {self.prescription_id}"
