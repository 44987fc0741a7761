"""
Prescription views.

Three audiences, one service:
- prescribers create, update and cancel their own prescriptions
- patients read their prescriptions and record adherence
- pharmacists dispense

Views resolve the caller id from the role header, validate input and
map results to status codes. Everything else is in the services.
"""

from datetime import datetime, time

from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.adherence.serializers import AdherenceRecordSerializer, RecordAdherenceSerializer
from apps.adherence.services import AdherenceService
from apps.core.exceptions import ForbiddenError, NotFoundError
from apps.core.identity import Role, require_identity

from .models import PrescriptionStatus
from .serializers import (
    CancelPrescriptionSerializer,
    CreatePrescriptionSerializer,
    DispenseSerializer,
    PrescriptionDetailSerializer,
    PrescriptionSerializer,
    UpdatePrescriptionSerializer,
)
from .services import PrescriptionLifecycleService

DEFAULT_CANCELLATION_REASON = "No reason provided"
ALL_STATUSES = "ALL"


class PrescriberPrescriptionViewSet(viewsets.ViewSet):
    """
    Prescriber-facing prescriptions (X-Prescriber-Id).

    list: Own prescriptions, newest first (?patient_id= to narrow)
    create: Issue a prescription
    retrieve: One of own prescriptions
    update / partial_update: Change dosing (modification_reason required)
    destroy: Cancel (body: {"reason": "..."})
    """

    lookup_value_regex = r"\d+"

    def list(self, request):
        prescriber_id = require_identity(request, Role.PRESCRIBER)
        prescriptions = PrescriptionLifecycleService.prescriber_prescriptions(
            prescriber_id, patient_id=request.query_params.get("patient_id")
        )
        return Response(PrescriptionSerializer(prescriptions, many=True).data)

    def create(self, request):
        prescriber_id = require_identity(request, Role.PRESCRIBER)
        serializer = CreatePrescriptionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        prescription = PrescriptionLifecycleService.create(serializer.validated_data, prescriber_id)
        return Response(PrescriptionSerializer(prescription).data, status=status.HTTP_201_CREATED)

    def retrieve(self, request, pk=None):
        prescriber_id = require_identity(request, Role.PRESCRIBER)
        prescription = (
            PrescriptionLifecycleService.prescriber_prescriptions(prescriber_id).filter(pk=pk).first()
        )
        if prescription is None:
            raise NotFoundError(message="Prescription not found")
        return Response(PrescriptionDetailSerializer(prescription).data)

    def update(self, request, pk=None):
        prescriber_id = require_identity(request, Role.PRESCRIBER)
        serializer = UpdatePrescriptionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        PrescriptionLifecycleService.update(pk, serializer.validated_data, prescriber_id)
        prescription = PrescriptionLifecycleService.get(pk)
        return Response(PrescriptionSerializer(prescription).data)

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    def destroy(self, request, pk=None):
        prescriber_id = require_identity(request, Role.PRESCRIBER)
        serializer = CancelPrescriptionSerializer(data=request.data or {})
        serializer.is_valid(raise_exception=True)

        reason = (serializer.validated_data.get("reason") or "").strip() or DEFAULT_CANCELLATION_REASON
        PrescriptionLifecycleService.cancel(pk, reason, prescriber_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class PatientPrescriptionViewSet(viewsets.ViewSet):
    """
    Patient-facing prescriptions (X-Patient-Id).

    list: Own prescriptions; ?status= defaults to ACTIVE, ALL for every status
    retrieve: One of own prescriptions
    refill_eligible: Prescriptions that can be refilled today
    take: Record an adherence event
    adherence: Adherence history (?from=&to=)
    """

    lookup_value_regex = r"\d+"

    def list(self, request):
        patient_id = require_identity(request, Role.PATIENT)
        status_filter = _status_filter(request.query_params.get("status"))
        prescriptions = PrescriptionLifecycleService.patient_prescriptions(patient_id, status=status_filter)
        return Response(PrescriptionSerializer(prescriptions, many=True).data)

    def retrieve(self, request, pk=None):
        patient_id = require_identity(request, Role.PATIENT)
        prescription = _patient_owned(pk, patient_id)
        return Response(PrescriptionDetailSerializer(prescription).data)

    @action(detail=False, methods=["get"], url_path="refill-eligible")
    def refill_eligible(self, request):
        patient_id = require_identity(request, Role.PATIENT)
        prescriptions = PrescriptionLifecycleService.refill_eligible(patient_id)
        return Response(PrescriptionSerializer(prescriptions, many=True).data)

    @action(detail=True, methods=["post"])
    def take(self, request, pk=None):
        patient_id = require_identity(request, Role.PATIENT)
        serializer = RecordAdherenceSerializer(data=request.data or {})
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        record = AdherenceService.record(
            pk,
            patient_id,
            data["status"],
            notes=data.get("notes"),
            side_effects=data.get("side_effects_reported"),
        )
        return Response(AdherenceRecordSerializer(record).data, status=status.HTTP_200_OK)

    @action(detail=True, methods=["get"])
    def adherence(self, request, pk=None):
        patient_id = require_identity(request, Role.PATIENT)
        _patient_owned(pk, patient_id)

        start = _parse_bound(request.query_params.get("from"), "from")
        end = _parse_bound(request.query_params.get("to"), "to", end_of_day=True)
        if start and end and start > end:
            raise ValidationError({"from": ["Must not be after 'to'."]})

        if start or end:
            records = AdherenceService.history_between(pk, start, end)
        else:
            records = AdherenceService.history(pk)
        return Response(AdherenceRecordSerializer(records, many=True).data)


class DispenseView(APIView):
    """POST pharmacist/prescriptions/dispense (X-Pharmacist-Id)."""

    def post(self, request):
        pharmacist_id = require_identity(request, Role.PHARMACIST)
        serializer = DispenseSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        PrescriptionLifecycleService.dispense(
            data["prescription_id"],
            data["quantity_to_dispense"],
            pharmacist_id,
            notes=data.get("notes"),
        )
        prescription = PrescriptionLifecycleService.get(data["prescription_id"])
        return Response(PrescriptionDetailSerializer(prescription).data)


def _status_filter(value):
    if not value:
        return PrescriptionStatus.ACTIVE
    value = value.strip().upper()
    if value == ALL_STATUSES:
        return None
    if value not in PrescriptionStatus.values:
        allowed = ", ".join(PrescriptionStatus.values + [ALL_STATUSES])
        raise ValidationError({"status": [f"Must be one of {allowed}."]})
    return value


def _patient_owned(prescription_id, patient_id):
    prescription = PrescriptionLifecycleService.get(prescription_id)
    if prescription.patient_id != patient_id:
        raise ForbiddenError(message="Prescription does not belong to patient")
    return prescription


def _parse_bound(value, name, end_of_day=False):
    """Accept an ISO date or datetime. A bare date as upper bound means end of that day."""
    if not value:
        return None
    try:
        parsed = parse_datetime(value)
        if parsed is None:
            day = parse_date(value)
            if day is None:
                raise ValueError(value)
            parsed = datetime.combine(day, time.max if end_of_day else time.min)
    except ValueError:
        raise ValidationError({name: ["Must be an ISO 8601 date or datetime."]})

    if timezone.is_naive(parsed):
        parsed = timezone.make_aware(parsed)
    return parsed
