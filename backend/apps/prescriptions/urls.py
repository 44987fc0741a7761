"""
Prescription URL configuration.
"""

from django.urls import include, path, re_path
from rest_framework.routers import SimpleRouter

from .views import DispenseView, PatientPrescriptionViewSet, PrescriberPrescriptionViewSet

router = SimpleRouter(trailing_slash="/?")
router.register("prescriber/prescriptions", PrescriberPrescriptionViewSet, basename="prescriber-prescription")
router.register("prescriptions", PatientPrescriptionViewSet, basename="patient-prescription")

urlpatterns = [
    re_path(r"^pharmacist/prescriptions/dispense/?$", DispenseView.as_view(), name="pharmacist-dispense"),
    path("", include(router.urls)),
]
