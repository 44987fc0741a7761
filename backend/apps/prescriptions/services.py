"""
Prescription lifecycle service.

All status transitions of a Prescription happen here:

    ACTIVE --dispense (fully)--> COMPLETED
    ACTIVE --cancel-----------> CANCELLED

COMPLETED and CANCELLED are terminal. Errors are raised as
BaseAppException subclasses and rendered by the API exception handler.
"""

import secrets
import time
from typing import Optional

import structlog
from django.db import IntegrityError, transaction
from django.utils import timezone
from prometheus_client import Counter, Histogram

from apps.core.exceptions import (
    AppValidationError,
    BaseAppException,
    ForbiddenError,
    InvalidStateError,
    NotFoundError,
    PrescriptionNumberExhausted,
    ReferenceNotFound,
)
from apps.medications.models import Medication
from apps.patients.models import Patient
from apps.providers.models import Pharmacist, Prescriber

from .models import Dispensation, Prescription, PrescriptionStatus

logger = structlog.get_logger(__name__)

# Prometheus metrics
PRESCRIPTION_OPERATION_TOTAL = Counter(
    "prescription_operation_total",
    "Prescription lifecycle operations",
    ["operation", "result"],  # operation: create/update/cancel/dispense, result: success/<error code>
)
PRESCRIPTION_OPERATION_DURATION = Histogram(
    "prescription_operation_duration_seconds",
    "Time spent in a prescription lifecycle operation",
    ["operation"],
    buckets=[0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5],
)
QUANTITY_DISPENSED_TOTAL = Counter(
    "prescription_quantity_dispensed_total",
    "Units dispensed across all prescriptions",
)

PRESCRIPTION_NUMBER_ATTEMPTS = 5

UPDATABLE_FIELDS = (
    "dose",
    "dose_unit",
    "frequency",
    "frequency_description",
    "route",
    "indication",
    "instructions",
    "end_date",
    "refills_allowed",
    "is_substitution_allowed",
)

CREATE_OPTIONAL_FIELDS = (
    "frequency_description",
    "indication",
    "instructions",
    "end_date",
    "quantity_unit",
    "days_supply",
    "is_prn",
    "is_substitution_allowed",
    "is_controlled_substance",
)


def generate_prescription_number() -> str:
    """RX- followed by 8 random uppercase hex characters."""
    return f"RX-{secrets.token_hex(4).upper()}"


class _Timed:
    """Observe duration and count the outcome of one operation."""

    def __init__(self, operation):
        self.operation = operation

    def __enter__(self):
        self.start = time.monotonic()
        return self

    def __exit__(self, exc_type, exc, tb):
        PRESCRIPTION_OPERATION_DURATION.labels(operation=self.operation).observe(
            time.monotonic() - self.start
        )
        if exc is None:
            result = "success"
        elif isinstance(exc, BaseAppException):
            result = exc.code.lower()
        else:
            result = "error"
        PRESCRIPTION_OPERATION_TOTAL.labels(operation=self.operation, result=result).inc()
        return False


class PrescriptionLifecycleService:
    """
    Create, update, cancel and dispense prescriptions.

    Caller ids are always passed in explicitly; the service never reads
    the request.
    """

    # ------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------
    @classmethod
    def create(cls, data: dict, prescriber_user_id: str) -> Prescription:
        """
        Issue a new ACTIVE prescription.

        ``data`` holds validated input: patient_id, medication_id, dose,
        dose_unit, frequency, route, start_date, quantity_prescribed and
        the optional fields in CREATE_OPTIONAL_FIELDS plus refills_allowed.
        """
        with _Timed("create"):
            with transaction.atomic():
                patient = Patient.objects.filter(pk=data["patient_id"]).first()
                if patient is None:
                    raise ReferenceNotFound(message="Patient not found")

                medication = Medication.objects.filter(pk=data["medication_id"]).first()
                if medication is None:
                    raise ReferenceNotFound(message="Medication not found")

                prescriber = cls._prescriber(prescriber_user_id)

                refills_allowed = data.get("refills_allowed") or 0
                prescription = Prescription(
                    patient=patient,
                    medication=medication,
                    prescriber=prescriber,
                    status=PrescriptionStatus.ACTIVE,
                    dose=data["dose"],
                    dose_unit=data["dose_unit"],
                    frequency=data["frequency"],
                    route=data["route"],
                    start_date=data["start_date"],
                    prescribed_date=timezone.localdate(),
                    quantity_prescribed=data["quantity_prescribed"],
                    quantity_dispensed=0,
                    refills_allowed=refills_allowed,
                    refills_remaining=refills_allowed,
                    created_by=prescriber_user_id,
                )
                for field_name in CREATE_OPTIONAL_FIELDS:
                    if data.get(field_name) is not None:
                        setattr(prescription, field_name, data[field_name])

                cls._insert_with_unique_number(prescription)

        logger.info(
            "prescription_created",
            prescription_id=prescription.pk,
            prescription_number=prescription.prescription_number,
            patient_id=patient.pk,
            medication_id=medication.pk,
            prescriber_user_id=prescriber_user_id,
        )
        return prescription

    @classmethod
    def update(cls, prescription_id, data: dict, prescriber_user_id: str) -> Prescription:
        """
        Apply the non-null fields of ``data`` that are in UPDATABLE_FIELDS.

        ``modification_reason`` is required by the API and only logged.
        """
        with _Timed("update"):
            with transaction.atomic():
                prescription = cls._owned_for_change(prescription_id, prescriber_user_id, "modify")

                changed = []
                for field_name in UPDATABLE_FIELDS:
                    value = data.get(field_name)
                    if value is not None:
                        setattr(prescription, field_name, value)
                        changed.append(field_name)

                if changed:
                    prescription.save(update_fields=changed + ["updated_at"])

        logger.info(
            "prescription_updated",
            prescription_id=prescription.pk,
            prescriber_user_id=prescriber_user_id,
            fields=changed,
            reason=data.get("modification_reason"),
        )
        return prescription

    @classmethod
    def cancel(cls, prescription_id, reason: str, prescriber_user_id: str) -> Prescription:
        with _Timed("cancel"):
            with transaction.atomic():
                prescription = cls._owned_prescription(prescription_id, prescriber_user_id)

                if prescription.status == PrescriptionStatus.CANCELLED:
                    raise InvalidStateError(message="Prescription already cancelled")
                if prescription.status == PrescriptionStatus.COMPLETED:
                    raise InvalidStateError(message="Cannot cancel completed prescription")

                prescription.status = PrescriptionStatus.CANCELLED
                prescription.cancelled_at = timezone.now()
                prescription.cancelled_by = prescriber_user_id
                prescription.cancellation_reason = reason
                prescription.save(
                    update_fields=[
                        "status",
                        "cancelled_at",
                        "cancelled_by",
                        "cancellation_reason",
                        "updated_at",
                    ]
                )

        logger.info(
            "prescription_cancelled",
            prescription_id=prescription.pk,
            prescriber_user_id=prescriber_user_id,
        )
        return prescription

    @classmethod
    def dispense(
        cls,
        prescription_id,
        quantity_to_dispense: int,
        pharmacist_user_id: str,
        notes: Optional[str] = None,
    ) -> Prescription:
        """
        Hand out ``quantity_to_dispense`` units.

        The row is locked for the read-modify-write. Reaching the
        prescribed quantity completes the prescription.
        """
        with _Timed("dispense"):
            if quantity_to_dispense is None or quantity_to_dispense < 1:
                raise AppValidationError(
                    message="Quantity to dispense must be at least 1",
                    field_errors={"quantity_to_dispense": "Must be at least 1."},
                )

            with transaction.atomic():
                prescription = (
                    Prescription.objects.select_for_update()
                    .filter(pk=prescription_id)
                    .first()
                )
                if prescription is None:
                    raise NotFoundError(message="Prescription not found")

                if not Pharmacist.objects.filter(user_id=pharmacist_user_id).exists():
                    raise NotFoundError(message="Pharmacist not found")

                if prescription.status != PrescriptionStatus.ACTIVE:
                    raise InvalidStateError(
                        message=f"Cannot dispense from a prescription with status {prescription.status}"
                    )

                new_dispensed = prescription.quantity_dispensed + quantity_to_dispense
                if new_dispensed > prescription.quantity_prescribed:
                    raise InvalidStateError(
                        message="Cannot dispense more than prescribed quantity",
                        detail=[
                            f"quantity_prescribed: {prescription.quantity_prescribed}",
                            f"quantity_dispensed: {prescription.quantity_dispensed}",
                            f"quantity_requested: {quantity_to_dispense}",
                        ],
                    )

                prescription.quantity_dispensed = new_dispensed
                update_fields = ["quantity_dispensed", "updated_at"]
                if new_dispensed >= prescription.quantity_prescribed:
                    prescription.status = PrescriptionStatus.COMPLETED
                    update_fields.append("status")
                prescription.save(update_fields=update_fields)

                Dispensation.objects.create(
                    prescription=prescription,
                    pharmacist_user_id=pharmacist_user_id,
                    quantity=quantity_to_dispense,
                    notes=notes,
                )

        QUANTITY_DISPENSED_TOTAL.inc(quantity_to_dispense)
        logger.info(
            "prescription_dispensed",
            prescription_id=prescription.pk,
            pharmacist_user_id=pharmacist_user_id,
            quantity=quantity_to_dispense,
            quantity_dispensed=prescription.quantity_dispensed,
            status=prescription.status,
        )
        return prescription

    # ------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------
    @staticmethod
    def get(prescription_id) -> Prescription:
        prescription = Prescription.objects.with_references().filter(pk=prescription_id).first()
        if prescription is None:
            raise NotFoundError(message="Prescription not found")
        return prescription

    @staticmethod
    def patient_prescriptions(patient_id: str, status: Optional[str] = None):
        """``status=None`` returns every status."""
        return Prescription.objects.with_references().for_patient(patient_id, status=status)

    @classmethod
    def prescriber_prescriptions(cls, prescriber_user_id: str, patient_id: Optional[str] = None):
        """Newest prescribed first."""
        prescriber = cls._prescriber(prescriber_user_id)
        return Prescription.objects.with_references().for_prescriber(prescriber, patient_id=patient_id)

    @staticmethod
    def refill_eligible(patient_id: str, today=None):
        """
        ACTIVE prescriptions with refills left whose next refill date has
        been reached. Read-only: nothing here consumes a refill.
        """
        today = today or timezone.localdate()
        return Prescription.objects.with_references().refill_eligible(patient_id, today)

    # ------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------
    @staticmethod
    def _prescriber(prescriber_user_id: str) -> Prescriber:
        prescriber = Prescriber.objects.filter(user_id=prescriber_user_id).first()
        if prescriber is None:
            raise NotFoundError(message="Prescriber not found")
        return prescriber

    @classmethod
    def _owned_prescription(cls, prescription_id, prescriber_user_id: str) -> Prescription:
        prescription = Prescription.objects.select_for_update().filter(pk=prescription_id).first()
        if prescription is None:
            raise NotFoundError(message="Prescription not found")

        prescriber = cls._prescriber(prescriber_user_id)
        if prescription.prescriber_id != prescriber.pk:
            raise ForbiddenError(message="Prescriber not authorized to modify this prescription")
        return prescription

    @classmethod
    def _owned_for_change(cls, prescription_id, prescriber_user_id: str, verb: str) -> Prescription:
        prescription = cls._owned_prescription(prescription_id, prescriber_user_id)
        if prescription.is_terminal:
            raise InvalidStateError(
                message=f"Cannot {verb} prescription with status {prescription.status}"
            )
        return prescription

    @staticmethod
    def _insert_with_unique_number(prescription: Prescription) -> None:
        for attempt in range(1, PRESCRIPTION_NUMBER_ATTEMPTS + 1):
            prescription.prescription_number = generate_prescription_number()
            try:
                with transaction.atomic():
                    prescription.save(force_insert=True)
                return
            except IntegrityError:
                if Prescription.objects.filter(
                    prescription_number=prescription.prescription_number
                ).exists():
                    logger.warning("prescription_number_collision", attempt=attempt)
                    prescription.pk = None
                    continue
                raise
        raise PrescriptionNumberExhausted()
