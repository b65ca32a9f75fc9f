"""API views for the parking domain."""

from __future__ import annotations

from uuid import UUID

from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.bookings.application.queries import get_availability
from apps.bookings.infrastructure.repositories import with_slot_counts
from shared.application.message_bus import message_bus
from shared.application.uow import DjangoUnitOfWork

from .application.command_handlers import (
    CreateParkingSpaceCommand,
    DeleteParkingSpaceCommand,
    DeleteSlotCommand,
    UpdateParkingSpaceCommand,
)
from .filters import ParkingSpaceFilterSet
from .models import ParkingSpace
from .serializers import (
    AvailabilityQuerySerializer,
    ParkingSpaceSerializer,
    ParkingSpaceWriteSerializer,
    SlotAvailabilitySerializer,
)

UUID_PATTERN = r"[0-9a-fA-F-]{36}"


class ParkingSpaceViewSet(viewsets.ModelViewSet):
    """Viewset для парковок: поиск, управление владельцем и занятость слотов.

    Writes are dispatched as commands; ownership is checked by the
    command handlers inside the same transaction as the change.
    """

    queryset = ParkingSpace.objects.select_related("owner").all()
    permission_classes = [permissions.IsAuthenticatedOrReadOnly]
    filter_backends = [DjangoFilterBackend]
    filterset_class = ParkingSpaceFilterSet
    http_method_names = ["get", "post", "patch", "delete", "head", "options"]
    lookup_value_regex = UUID_PATTERN

    def get_serializer_class(self):  # type: ignore
        if self.action in {"create", "partial_update"}:
            return ParkingSpaceWriteSerializer
        return ParkingSpaceSerializer

    def get_queryset(self):  # type: ignore
        qs = with_slot_counts(super().get_queryset())
        user = self.request.user
        if self.action == "list":
            qs = qs.filter(is_active=True)
            if user.is_authenticated:
                qs = qs.exclude(owner=user)
        elif self.action == "mine":
            qs = qs.filter(owner=user)
        return qs

    def _read(self, space_id) -> Response:
        space = with_slot_counts(ParkingSpace.objects.select_related("owner")).get(pk=space_id)
        return Response(ParkingSpaceSerializer(space, context=self.get_serializer_context()).data)

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = ParkingSpaceWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        details, rates, counts = serializer.split()

        space = message_bus.handle_command(CreateParkingSpaceCommand(
            owner_id=request.user.id,
            hourly_rates=rates,
            slot_counts=counts,
            **details,
        ))
        response = self._read(space.id)
        response.status_code = status.HTTP_201_CREATED
        return response

    def partial_update(self, request, *args, **kwargs):  # type: ignore
        serializer = ParkingSpaceWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        details, rates, counts = serializer.split()

        space = message_bus.handle_command(UpdateParkingSpaceCommand(
            space_id=UUID(str(kwargs["pk"])),
            owner_id=request.user.id,
            details=details,
            hourly_rates=rates,
            slot_counts=counts,
        ))
        return self._read(space.id)

    def destroy(self, request, *args, **kwargs):  # type: ignore
        message_bus.handle_command(DeleteParkingSpaceCommand(
            space_id=UUID(str(kwargs["pk"])),
            owner_id=request.user.id,
        ))
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=False, methods=["get"], permission_classes=[permissions.IsAuthenticated])
    def mine(self, request):
        """Парковки текущего владельца, включая отключённые."""
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        if page is not None:
            return self.get_paginated_response(ParkingSpaceSerializer(page, many=True).data)
        return Response(ParkingSpaceSerializer(queryset, many=True).data)

    @action(detail=True, methods=["get"])
    def availability(self, request, pk=None):  # type: ignore
        """Status of each slot for a window, ``[now, +inf)`` by default."""
        query = AvailabilityQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        statuses = get_availability(
            DjangoUnitOfWork(),
            UUID(str(pk)),
            category=query.validated_data.get("vehicle_type"),
            window_start=query.validated_data.get("window_start"),
            window_end=query.validated_data.get("window_end"),
        )
        return Response(SlotAvailabilitySerializer(statuses, many=True).data)

    @action(
        detail=True,
        methods=["delete"],
        url_path=rf"slots/(?P<slot_id>{UUID_PATTERN})",
        permission_classes=[permissions.IsAuthenticated],
    )
    def delete_slot(self, request, pk=None, slot_id=None):  # type: ignore
        message_bus.handle_command(DeleteSlotCommand(
            space_id=UUID(str(pk)),
            slot_id=UUID(str(slot_id)),
            owner_id=request.user.id,
        ))
        return Response(status=status.HTTP_204_NO_CONTENT)
