"""
Medication catalog views.
"""

from django.db.models import Q
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response

from .models import Medication
from .serializers import MedicationListSerializer, MedicationSerializer


class MedicationViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Read-only catalog.

    list: All medications
    retrieve: A single medication
    search: Case-insensitive match on trade or generic name (?name=)
    """

    queryset = Medication.objects.all()
    serializer_class = MedicationSerializer

    def get_serializer_class(self):
        if self.action in ("list", "search"):
            return MedicationListSerializer
        return MedicationSerializer

    @action(detail=False, methods=["get"])
    def search(self, request):
        name = (request.query_params.get("name") or "").strip()
        if not name:
            raise ValidationError({"name": ["This query parameter is required."]})

        medications = self.get_queryset().filter(
            Q(trade_name__icontains=name) | Q(generic_name__icontains=name)
        )
        return Response(self.get_serializer(medications, many=True).data)
