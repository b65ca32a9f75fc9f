"""Booking ledger models for ParkEase."""

from __future__ import annotations

import uuid
from decimal import Decimal

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from apps.bookings.domain.entities import BookingStatus, CancelledBy
from apps.parking.models import VehicleType


class Booking(models.Model):
    """A renter's reservation of one slot for a time interval."""

    class Status(models.TextChoices):
        CONFIRMED = BookingStatus.CONFIRMED.value, _("Confirmed")
        COMPLETED = BookingStatus.COMPLETED.value, _("Completed")
        CANCELLED = BookingStatus.CANCELLED.value, _("Cancelled")

    class CancellationSource(models.TextChoices):
        USER = CancelledBy.USER.value, _("Renter")
        OWNER = CancelledBy.OWNER.value, _("Owner")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    renter = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="bookings",
    )
    space = models.ForeignKey(
        "parking.ParkingSpace",
        on_delete=models.CASCADE,
        related_name="bookings",
    )
    slot = models.ForeignKey(
        "parking.ParkingSlot",
        on_delete=models.CASCADE,
        related_name="bookings",
    )
    vehicle_type = models.CharField(
        max_length=10,
        choices=VehicleType.choices,
        help_text=_("Slot category at booking time."),
    )
    start_time = models.DateTimeField()
    end_time = models.DateTimeField(
        null=True,
        blank=True,
        help_text=_("Empty while the booking is open-ended."),
    )
    hourly_rate = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text=_("Rate fixed at booking time."),
    )
    total_amount = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.CONFIRMED,
    )
    cancelled_by = models.CharField(
        max_length=10,
        choices=CancellationSource.choices,
        null=True,
        blank=True,
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Booking")
        verbose_name_plural = _("Bookings")
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(end_time__isnull=True) | models.Q(end_time__gt=models.F("start_time")),
                name="booking_valid_interval",
            ),
            models.CheckConstraint(
                condition=(
                    models.Q(end_time__isnull=True, total_amount__isnull=True)
                    | models.Q(end_time__isnull=False, total_amount__isnull=False)
                ),
                name="booking_amount_iff_end",
            ),
        ]
        indexes = [
            models.Index(fields=["slot", "status", "start_time"], name="booking_slot_status_idx"),
            models.Index(fields=["renter"], name="booking_renter_idx"),
            models.Index(fields=["space", "status"], name="booking_space_status_idx"),
        ]

    def __str__(self) -> str:
        return f"Booking {self.id} for slot {self.slot_id}"
