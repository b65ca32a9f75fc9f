"""Serializers for the parking domain."""

from __future__ import annotations

from decimal import Decimal

from rest_framework import serializers  # type: ignore

from apps.parking.domain.entities import VehicleCategory

from .models import COUNT_FIELDS, RATE_FIELDS, ParkingSpace, VehicleType


class ParkingSpaceSerializer(serializers.ModelSerializer):
    """Read view of a space with per-category slot counts."""

    owner_id = serializers.ReadOnlyField(source="owner.id")
    slots_summary = serializers.SerializerMethodField()

    class Meta:
        model = ParkingSpace
        fields = [
            "id",
            "owner_id",
            "place_name",
            "address",
            "latitude",
            "longitude",
            "description",
            "price_per_hour_car",
            "price_per_hour_bike",
            "price_per_hour_other",
            "total_slots_car",
            "total_slots_bike",
            "total_slots_other",
            "slots_summary",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_slots_summary(self, obj: ParkingSpace) -> dict:  # type: ignore
        """Counts come from ``with_slot_counts`` annotations on the queryset."""
        return {
            category.value: {
                "total": getattr(obj, f"slots_total_{category.value}"),
                "available": getattr(obj, f"slots_available_{category.value}"),
            }
            for category in VehicleCategory
        }


class ParkingSpaceWriteSerializer(serializers.Serializer):
    """Input for creating and partially updating a space."""

    place_name = serializers.CharField(max_length=255)
    address = serializers.CharField()
    latitude = serializers.DecimalField(
        max_digits=9, decimal_places=6, min_value=Decimal("-90"), max_value=Decimal("90"),
        required=False, allow_null=True,
    )
    longitude = serializers.DecimalField(
        max_digits=9, decimal_places=6, min_value=Decimal("-180"), max_value=Decimal("180"),
        required=False, allow_null=True,
    )
    description = serializers.CharField(required=False, allow_blank=True)
    price_per_hour_car = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal("0"), required=False)
    price_per_hour_bike = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal("0"), required=False)
    price_per_hour_other = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal("0"), required=False)
    total_slots_car = serializers.IntegerField(min_value=0, required=False)
    total_slots_bike = serializers.IntegerField(min_value=0, required=False)
    total_slots_other = serializers.IntegerField(min_value=0, required=False)
    is_active = serializers.BooleanField(required=False)

    def split(self) -> tuple[dict, dict, dict]:
        """Validated data as (details, rates by category, counts by category)."""
        data = dict(self.validated_data)
        rates = {c: data.pop(RATE_FIELDS[c]) for c in VehicleCategory if RATE_FIELDS[c] in data}
        counts = {c: data.pop(COUNT_FIELDS[c]) for c in VehicleCategory if COUNT_FIELDS[c] in data}
        return data, rates, counts


class AvailabilityQuerySerializer(serializers.Serializer):
    vehicle_type = serializers.ChoiceField(choices=VehicleType.choices, required=False)
    window_start = serializers.DateTimeField(required=False)
    window_end = serializers.DateTimeField(required=False)


class SlotAvailabilitySerializer(serializers.Serializer):
    slot_id = serializers.UUIDField()
    slot_number = serializers.IntegerField()
    category = serializers.CharField(source="category.value")
    is_active = serializers.BooleanField()
    status = serializers.CharField(source="status.value")
    occupied_from = serializers.DateTimeField(allow_null=True)
    occupied_until = serializers.DateTimeField(allow_null=True)
