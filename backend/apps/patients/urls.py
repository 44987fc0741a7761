"""
Patient URL configuration.
"""

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from .views import PatientViewSet

router = SimpleRouter(trailing_slash="/?")
router.register("patients", PatientViewSet, basename="patient")

urlpatterns = [
    path("", include(router.urls)),
]
