"""
URL configuration for the medication service.
"""

from django.contrib import admin
from django.urls import include, path

from apps.core.views import health

urlpatterns = [
    path("admin/", admin.site.urls),
    path("health/", health, name="health"),
    path("api/v1/", include("apps.core.urls")),
    # Prometheus metrics endpoint
    path("", include("django_prometheus.urls")),
    # Server-rendered front end
    path("", include("apps.web.urls")),
]
