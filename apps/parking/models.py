"""Parking inventory models for ParkEase.

A parking space carries one hourly rate and one slot pool per vehicle
category. Rates and counts live in fixed columns reached through the
lookup tables below, never through column names built from input.
"""

from __future__ import annotations

import uuid
from decimal import Decimal

from django.conf import settings  # type: ignore
from django.core.validators import MaxValueValidator, MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from apps.parking.domain.entities import VehicleCategory


class VehicleType(models.TextChoices):
    CAR = VehicleCategory.CAR.value, _("Car")
    BIKE = VehicleCategory.BIKE.value, _("Bike")
    OTHER = VehicleCategory.OTHER.value, _("Other")


RATE_FIELDS = {
    VehicleCategory.CAR: "price_per_hour_car",
    VehicleCategory.BIKE: "price_per_hour_bike",
    VehicleCategory.OTHER: "price_per_hour_other",
}

COUNT_FIELDS = {
    VehicleCategory.CAR: "total_slots_car",
    VehicleCategory.BIKE: "total_slots_bike",
    VehicleCategory.OTHER: "total_slots_other",
}


def _rate_field():
    return models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
    )


class ParkingSpace(models.Model):
    """A parking space listed by its owner."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="parking_spaces",
    )
    place_name = models.CharField(max_length=255)
    address = models.TextField()
    latitude = models.DecimalField(
        max_digits=9,
        decimal_places=6,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal("-90")), MaxValueValidator(Decimal("90"))],
    )
    longitude = models.DecimalField(
        max_digits=9,
        decimal_places=6,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal("-180")), MaxValueValidator(Decimal("180"))],
    )
    description = models.TextField(blank=True)

    price_per_hour_car = _rate_field()
    total_slots_car = models.PositiveIntegerField(default=0)
    price_per_hour_bike = _rate_field()
    total_slots_bike = models.PositiveIntegerField(default=0)
    price_per_hour_other = _rate_field()
    total_slots_other = models.PositiveIntegerField(default=0)

    next_slot_number = models.PositiveIntegerField(
        default=1,
        help_text=_("Next number to issue. Numbers of deleted slots are never reused."),
    )
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Parking space")
        verbose_name_plural = _("Parking spaces")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["owner", "is_active"], name="parking_space_owner_idx"),
            models.Index(fields=["place_name"], name="parking_space_name_idx"),
        ]

    def __str__(self) -> str:
        return self.place_name

    def rate_for(self, category: VehicleCategory) -> Decimal:
        return getattr(self, RATE_FIELDS[category])

    def slot_count(self, category: VehicleCategory) -> int:
        return getattr(self, COUNT_FIELDS[category])


class ParkingSlot(models.Model):
    """One bookable unit. Category and number are fixed at creation."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    space = models.ForeignKey(
        ParkingSpace,
        on_delete=models.CASCADE,
        related_name="slots",
    )
    slot_number = models.PositiveIntegerField()
    vehicle_type = models.CharField(
        max_length=10,
        choices=VehicleType.choices,
        default=VehicleType.CAR,
    )
    is_active = models.BooleanField(default=True)

    class Meta:
        verbose_name = _("Parking slot")
        verbose_name_plural = _("Parking slots")
        ordering = ["space", "slot_number"]
        constraints = [
            models.UniqueConstraint(fields=["space", "slot_number"], name="parking_slot_unique_number"),
        ]
        indexes = [
            models.Index(fields=["space", "vehicle_type"], name="parking_slot_type_idx"),
        ]

    def __str__(self) -> str:
        return f"#{self.slot_number} ({self.vehicle_type})"
