"""
Prescriber and pharmacist URL configuration.
"""

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from .views import PharmacistViewSet, PrescriberViewSet

router = SimpleRouter(trailing_slash="/?")
router.register("prescribers", PrescriberViewSet, basename="prescriber")
router.register("pharmacists", PharmacistViewSet, basename="pharmacist")

urlpatterns = [
    path("", include(router.urls)),
]
