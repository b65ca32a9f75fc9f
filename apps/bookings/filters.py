"""FilterSet definitions for booking lists."""

from __future__ import annotations

import django_filters  # type: ignore

from .models import Booking


class BookingFilterSet(django_filters.FilterSet):
    status = django_filters.ChoiceFilter(choices=Booking.Status.choices)
    vehicle_type = django_filters.CharFilter(field_name="vehicle_type", lookup_expr="exact")
    space = django_filters.UUIDFilter(field_name="space_id")

    class Meta:
        model = Booking
        fields = ["status", "vehicle_type", "space"]
