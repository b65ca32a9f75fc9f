"""URL routing for the parking domain."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import SimpleRouter  # type: ignore

from .views import ParkingSpaceViewSet

router = SimpleRouter()
router.register(r"", ParkingSpaceViewSet, basename="parking")

urlpatterns = [
    path("", include(router.urls)),
]
