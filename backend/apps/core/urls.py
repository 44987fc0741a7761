"""
API URL configuration.
Includes all app routes.
"""

from django.urls import include, path

urlpatterns = [
    path("", include("apps.patients.urls")),
    path("", include("apps.providers.urls")),
    path("", include("apps.medications.urls")),
    path("", include("apps.prescriptions.urls")),
]
