"""
Patient views.
"""

import structlog
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from apps.core.exceptions import NotFoundError

from .models import Patient
from .serializers import PatientListSerializer, PatientSerializer

logger = structlog.get_logger(__name__)


class PatientViewSet(viewsets.ModelViewSet):
    """
    ViewSet for Patient model.

    list: List patients (soft-deleted ones are hidden)
    retrieve: Get a single patient
    create: Register a patient
    update: Update a patient
    destroy: Soft-delete a patient
    """

    queryset = Patient.objects.all()
    serializer_class = PatientSerializer

    def get_serializer_class(self):
        if self.action == "list":
            return PatientListSerializer
        return PatientSerializer

    def perform_create(self, serializer):
        patient = serializer.save(created_by=self.request.headers.get("X-User-Id"))
        logger.info("patient_created", patient_id=patient.id)

    def perform_destroy(self, instance):
        instance.soft_delete(deleted_by=self.request.headers.get("X-User-Id"))
        logger.info("patient_soft_deleted", patient_id=instance.id)

    @action(detail=False, methods=["get"], url_path="by-user/(?P<user_id>[^/]+)")
    def by_user(self, request, user_id=None):
        """Get patient by identity provider user id."""
        patient = Patient.objects.filter(user_id=user_id).first()
        if patient is None:
            raise NotFoundError(message="Patient not found")
        return Response(PatientSerializer(patient).data)
