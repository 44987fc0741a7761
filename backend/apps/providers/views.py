"""
Prescriber and pharmacist views.
"""

from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from apps.core.exceptions import NotFoundError

from .models import Pharmacist, Prescriber
from .serializers import PharmacistSerializer, PrescriberSerializer


class UserIdLookupMixin:
    """Adds ``by-user/<user_id>`` to a provider viewset."""

    not_found_message = "Not found"

    @action(detail=False, methods=["get"], url_path="by-user/(?P<user_id>[^/]+)")
    def by_user(self, request, user_id=None):
        instance = self.get_queryset().filter(user_id=user_id).first()
        if instance is None:
            raise NotFoundError(message=self.not_found_message)
        return Response(self.get_serializer(instance).data)


class PrescriberViewSet(UserIdLookupMixin, viewsets.ModelViewSet):
    """CRUD for prescribers."""

    queryset = Prescriber.objects.all()
    serializer_class = PrescriberSerializer
    not_found_message = "Prescriber not found"


class PharmacistViewSet(UserIdLookupMixin, viewsets.ModelViewSet):
    """CRUD for pharmacists."""

    queryset = Pharmacist.objects.all()
    serializer_class = PharmacistSerializer
    not_found_message = "Pharmacist not found"
