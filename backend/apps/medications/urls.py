"""
Medication URL configuration.
"""

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from .views import MedicationViewSet

router = SimpleRouter(trailing_slash="/?")
router.register("medications", MedicationViewSet, basename="medication")

urlpatterns = [
    path("", include(router.urls)),
]
