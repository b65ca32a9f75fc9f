"""Django ORM repository for the reservation ledger."""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, List
from uuid import UUID

from django.db.models import Count, Exists, IntegerField, OuterRef, Q, Subquery  # type: ignore
from django.db.models.functions import Coalesce  # type: ignore
from django.utils import timezone  # type: ignore

from apps.bookings.domain.availability import default_window
from apps.bookings.domain.entities import Booking, BookingStatus, CancelledBy
from apps.bookings.domain.repositories import AbstractBookingRepository
from apps.bookings.models import Booking as BookingModel
from apps.parking.domain.entities import VehicleCategory
from apps.parking.models import ParkingSlot
from shared.domain.value_objects import TimeRange
from shared.infrastructure.locking import contention_guard, lock_rows


def booking_to_domain(model: BookingModel) -> Booking:
    return Booking(
        id=model.id,
        created_at=model.created_at,
        renter_id=model.renter_id,
        space_id=model.space_id,
        slot_id=model.slot_id,
        category=VehicleCategory(model.vehicle_type),
        start_time=model.start_time,
        end_time=model.end_time,
        hourly_rate=model.hourly_rate,
        total_amount=model.total_amount,
        status=BookingStatus(model.status),
        cancelled_by=CancelledBy(model.cancelled_by) if model.cancelled_by else None,
    )


def overlap_filter(window: TimeRange) -> Q:
    """ORM form of ``start < window.end AND coalesce(end, +inf) > window.start``."""
    condition = Q(end_time__isnull=True) | Q(end_time__gt=window.start)
    if window.end is not None:
        condition &= Q(start_time__lt=window.end)
    return condition


def _count(queryset) -> Coalesce:
    counted = queryset.order_by().values("space").annotate(n=Count("pk")).values("n")[:1]
    return Coalesce(Subquery(counted, output_field=IntegerField()), 0)


def with_slot_counts(queryset, now: datetime | None = None):
    """
    Annotate a ParkingSpace queryset with per-category slot counts

    Adds ``slots_total_<category>`` and ``slots_available_<category>``
    for every category. Available means active and free from ``now`` on,
    the same rule ``category_counts`` applies, computed in the listing
    query itself.
    """
    window = default_window(now or timezone.now())
    occupying = BookingModel.objects.filter(
        slot=OuterRef("pk"),
        status=BookingStatus.CONFIRMED.value,
    ).filter(overlap_filter(window))

    annotations = {}
    for category in VehicleCategory:
        slots = ParkingSlot.objects.filter(space=OuterRef("pk"), vehicle_type=category.value)
        annotations[f"slots_total_{category.value}"] = _count(slots)
        annotations[f"slots_available_{category.value}"] = _count(
            slots.filter(is_active=True).filter(~Exists(occupying))
        )
    return queryset.annotate(**annotations)


class DjangoBookingRepository(AbstractBookingRepository):

    def __init__(self, using: str | None = None):
        self.using = using

    def _queryset(self):
        return BookingModel.objects.using(self.using)

    def get(self, booking_id: UUID, *, lock: bool = False) -> Booking | None:
        queryset = self._queryset().filter(pk=booking_id)
        rows = lock_rows(queryset, f"booking {booking_id}") if lock else list(queryset)
        return booking_to_domain(rows[0]) if rows else None

    def add(self, booking: Booking):
        with contention_guard(f"booking {booking.id}"):
            self._queryset().create(
                id=booking.id,
                renter_id=booking.renter_id,
                space_id=booking.space_id,
                slot_id=booking.slot_id,
                vehicle_type=booking.category.value,
                start_time=booking.start_time,
                end_time=booking.end_time,
                hourly_rate=booking.hourly_rate,
                total_amount=booking.total_amount,
                status=booking.status.value,
                cancelled_by=booking.cancelled_by.value if booking.cancelled_by else None,
            )

    def save(self, booking: Booking):
        with contention_guard(f"booking {booking.id}"):
            self._queryset().filter(pk=booking.id).update(
                end_time=booking.end_time,
                total_amount=booking.total_amount,
                status=booking.status.value,
                cancelled_by=booking.cancelled_by.value if booking.cancelled_by else None,
                updated_at=timezone.now(),
            )

    def find_confirmed_overlapping(self, slot_ids: Iterable[UUID], window: TimeRange) -> List[Booking]:
        slot_ids = list(slot_ids)
        if not slot_ids:
            return []
        queryset = (
            self._queryset()
            .filter(slot_id__in=slot_ids, status=BookingModel.Status.CONFIRMED)
            .filter(overlap_filter(window))
            .order_by("start_time")
        )
        with contention_guard("bookings"):
            return [booking_to_domain(row) for row in queryset]

    def list_confirmed(
        self,
        *,
        space_id: UUID | None = None,
        slot_id: UUID | None = None,
        lock: bool = False,
    ) -> List[Booking]:
        if space_id is None and slot_id is None:
            raise ValueError("list_confirmed needs a space_id or a slot_id")

        queryset = self._queryset().filter(status=BookingModel.Status.CONFIRMED)
        if space_id is not None:
            queryset = queryset.filter(space_id=space_id)
        if slot_id is not None:
            queryset = queryset.filter(slot_id=slot_id)
        queryset = queryset.order_by("start_time", "id")

        if lock:
            rows = lock_rows(queryset, "bookings")
        else:
            with contention_guard("bookings"):
                rows = list(queryset)
        return [booking_to_domain(row) for row in rows]
