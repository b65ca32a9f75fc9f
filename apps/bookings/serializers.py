"""Serializers for the booking domain."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from apps.parking.models import VehicleType

from .models import Booking


class BookingCreateSerializer(serializers.Serializer):
    """Бронирование слота арендатором.

    ``slot_id`` is optional: without it the lowest-numbered free slot of
    the category is taken. ``end_time`` is optional: without it the
    booking stays open until the renter ends it.
    """

    space_id = serializers.UUIDField()
    vehicle_type = serializers.ChoiceField(choices=VehicleType.choices)
    slot_id = serializers.UUIDField(required=False, allow_null=True)
    start_time = serializers.DateTimeField()
    end_time = serializers.DateTimeField(required=False, allow_null=True)


class BookingEndSerializer(serializers.Serializer):
    end_time = serializers.DateTimeField()


class BookingSerializer(serializers.ModelSerializer):
    """Детальный сериализатор бронирования."""

    renter_id = serializers.ReadOnlyField(source="renter.id")
    space_id = serializers.ReadOnlyField(source="space.id")
    slot_id = serializers.ReadOnlyField(source="slot.id")
    slot_number = serializers.ReadOnlyField(source="slot.slot_number")
    place_name = serializers.ReadOnlyField(source="space.place_name")
    address = serializers.ReadOnlyField(source="space.address")

    class Meta:
        model = Booking
        fields = [
            "id",
            "renter_id",
            "space_id",
            "slot_id",
            "slot_number",
            "place_name",
            "address",
            "vehicle_type",
            "start_time",
            "end_time",
            "hourly_rate",
            "total_amount",
            "status",
            "cancelled_by",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
