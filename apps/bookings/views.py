"""API views for the booking domain."""

from __future__ import annotations

from uuid import UUID

from django.db.models import Q  # type: ignore
from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from shared.application.message_bus import message_bus

from .application.command_handlers import (
    CancelBookingCommand,
    CreateBookingCommand,
    EndBookingCommand,
    OwnerCancelBookingCommand,
)
from .filters import BookingFilterSet
from .models import Booking
from .serializers import BookingCreateSerializer, BookingEndSerializer, BookingSerializer


class BookingViewSet(
    mixins.CreateModelMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """Viewset для создания и управления бронированиями.

    - list: bookings made by the caller
    - owner: bookings on the caller's parking spaces
    - retrieve: visible to the renter and to the space owner
    """

    queryset = Booking.objects.select_related("space", "slot", "renter").all()
    permission_classes = [permissions.IsAuthenticated]
    filter_backends = [DjangoFilterBackend]
    filterset_class = BookingFilterSet
    lookup_value_regex = r"[0-9a-fA-F-]{36}"

    def get_serializer_class(self):  # type: ignore
        if self.action == "create":
            return BookingCreateSerializer
        if self.action == "end":
            return BookingEndSerializer
        return BookingSerializer

    def get_queryset(self):  # type: ignore
        user = self.request.user
        qs = super().get_queryset()
        if self.action == "list":
            return qs.filter(renter=user)
        if self.action == "owner":
            return qs.filter(space__owner=user)
        return qs.filter(Q(renter=user) | Q(space__owner=user))

    def _read(self, booking_id, status_code=status.HTTP_200_OK) -> Response:
        booking = Booking.objects.select_related("space", "slot").get(pk=booking_id)
        return Response(BookingSerializer(booking).data, status=status_code)

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = BookingCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        booking = message_bus.handle_command(CreateBookingCommand(
            renter_id=request.user.id,
            space_id=data["space_id"],
            category=data["vehicle_type"],
            start_time=data["start_time"],
            end_time=data.get("end_time"),
            slot_id=data.get("slot_id"),
        ))
        return self._read(booking.id, status.HTTP_201_CREATED)

    @action(detail=False, methods=["get"])
    def owner(self, request):
        """Бронирования на парковках текущего владельца."""
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        if page is not None:
            return self.get_paginated_response(BookingSerializer(page, many=True).data)
        return Response(BookingSerializer(queryset, many=True).data)

    @action(detail=True, methods=["post"])
    def end(self, request, pk=None):  # type: ignore
        serializer = BookingEndSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        booking = message_bus.handle_command(EndBookingCommand(
            booking_id=UUID(str(pk)),
            renter_id=request.user.id,
            end_time=serializer.validated_data["end_time"],
        ))
        return self._read(booking.id)

    @action(detail=True, methods=["post"])
    def cancel(self, request, pk=None):  # type: ignore
        booking = message_bus.handle_command(CancelBookingCommand(
            booking_id=UUID(str(pk)),
            renter_id=request.user.id,
        ))
        return self._read(booking.id)

    @action(detail=True, methods=["post"], url_path="owner-cancel")
    def owner_cancel(self, request, pk=None):  # type: ignore
        booking = message_bus.handle_command(OwnerCancelBookingCommand(
            booking_id=UUID(str(pk)),
            owner_id=request.user.id,
        ))
        return self._read(booking.id)
