"""FilterSet definitions for parking space search and listing."""

from __future__ import annotations

import django_filters  # type: ignore
from django.db.models import Q  # type: ignore

from apps.parking.domain.entities import VehicleCategory

from .models import COUNT_FIELDS, ParkingSpace, VehicleType


class ParkingSpaceFilterSet(django_filters.FilterSet):
    """Text search over name and address, plus the categories a space offers."""

    search = django_filters.CharFilter(method="filter_search")
    vehicle_type = django_filters.ChoiceFilter(choices=VehicleType.choices, method="filter_vehicle_type")

    class Meta:
        model = ParkingSpace
        fields = ["search", "vehicle_type"]

    def filter_search(self, queryset, name, value):  # type: ignore
        value = (value or "").strip()
        if not value:
            return queryset
        return queryset.filter(Q(place_name__icontains=value) | Q(address__icontains=value))

    def filter_vehicle_type(self, queryset, name, value):  # type: ignore
        if not value:
            return queryset
        count_field = COUNT_FIELDS[VehicleCategory.parse(value)]
        return queryset.filter(**{f"{count_field}__gt": 0})
