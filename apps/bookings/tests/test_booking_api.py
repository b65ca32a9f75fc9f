"""Integration tests for booking API endpoints."""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal
from unittest import mock

from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookings.models import Booking
from apps.parking.models import ParkingSlot, ParkingSpace
from apps.users.models import User
from shared.domain.exceptions import ContentionError


class BookingAPITests(APITestCase):
    """Covers allocation, conflicts, close-out and cancellation."""

    def setUp(self) -> None:
        self.renter = User.objects.create_user(email="renter@example.com", password="RenterPass123")
        self.owner = User.objects.create_user(email="owner@example.com", password="OwnerPass123")
        self.space = ParkingSpace.objects.create(
            owner=self.owner,
            place_name="Station Parking",
            address="2 Station Road",
            price_per_hour_car=Decimal("10.00"),
            total_slots_car=2,
            next_slot_number=3,
        )
        self.slots = [
            ParkingSlot.objects.create(space=self.space, slot_number=n, vehicle_type="car")
            for n in (1, 2)
        ]
        self.client.force_authenticate(self.renter)
        self.list_url = reverse("booking-list")
        self.start = (timezone.now() + timedelta(days=1)).replace(microsecond=0)

    def _payload(self, start_offset=0, hours=2, **extra) -> dict:
        start = self.start + timedelta(hours=start_offset)
        payload = {
            "space_id": str(self.space.id),
            "vehicle_type": "car",
            "start_time": start.isoformat(),
        }
        if hours is not None:
            payload["end_time"] = (start + timedelta(hours=hours)).isoformat()
        payload.update(extra)
        return payload

    def _create(self, **kwargs):
        return self.client.post(self.list_url, self._payload(**kwargs), format="json")

    def test_renter_can_create_booking(self) -> None:
        response = self._create()

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["status"], Booking.Status.CONFIRMED)
        self.assertEqual(response.data["slot_number"], 1)
        self.assertEqual(response.data["hourly_rate"], "10.00")
        self.assertEqual(response.data["total_amount"], "20.00")
        booking = Booking.objects.get(pk=response.data["id"])
        self.assertEqual(booking.renter, self.renter)
        self.assertEqual(booking.vehicle_type, "car")

    def test_overlapping_bookings_take_different_slots_then_conflict(self) -> None:
        first = self._create()
        second = self._create(start_offset=1)
        third = self._create(start_offset=1, hours=1)

        self.assertEqual(first.data["slot_number"], 1)
        self.assertEqual(second.data["slot_number"], 2)
        self.assertEqual(third.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(third.data["code"], "no_availability")
        self.assertEqual(Booking.objects.count(), 2)

    def test_open_ended_booking_has_no_amount(self) -> None:
        response = self._create(hours=None)
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertIsNone(response.data["end_time"])
        self.assertIsNone(response.data["total_amount"])

    def test_specific_slot(self) -> None:
        response = self._create(slot_id=str(self.slots[1].id))
        self.assertEqual(response.data["slot_id"], self.slots[1].id)

    def test_invalid_interval(self) -> None:
        response = self._create(hours=0)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["code"], "invalid_interval")

    def test_inactive_space(self) -> None:
        ParkingSpace.objects.filter(pk=self.space.pk).update(is_active=False)
        response = self._create()
        self.assertEqual(response.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY)
        self.assertEqual(response.data["code"], "inactive")

    def test_unknown_space(self) -> None:
        response = self._create(space_id="00000000-0000-0000-0000-000000000000")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_end_booking_prices_with_minimum(self) -> None:
        booking_id = self._create(hours=None).data["id"]

        response = self.client.post(
            reverse("booking-end", args=[booking_id]),
            {"end_time": (self.start + timedelta(minutes=10)).isoformat()},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["status"], Booking.Status.COMPLETED)
        self.assertEqual(response.data["total_amount"], "5.00")

        again = self.client.post(
            reverse("booking-end", args=[booking_id]),
            {"end_time": (self.start + timedelta(hours=1)).isoformat()},
            format="json",
        )
        self.assertEqual(again.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(again.data["code"], "invalid_state")

    def test_owner_cancel_then_renter_cancel(self) -> None:
        booking_id = self._create().data["id"]

        self.client.force_authenticate(self.owner)
        response = self.client.post(reverse("booking-owner-cancel", args=[booking_id]))
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["status"], Booking.Status.CANCELLED)
        self.assertEqual(response.data["cancelled_by"], "owner")

        self.client.force_authenticate(self.renter)
        again = self.client.post(reverse("booking-cancel", args=[booking_id]))
        self.assertEqual(again.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(again.data["code"], "invalid_state")

    def test_renter_cancel(self) -> None:
        booking_id = self._create().data["id"]
        response = self.client.post(reverse("booking-cancel", args=[booking_id]))
        self.assertEqual(response.data["cancelled_by"], "user")
        # The slot is free again.
        self.assertEqual(self._create().data["slot_number"], 1)

    def test_strangers_cannot_touch_bookings(self) -> None:
        booking_id = self._create().data["id"]
        stranger = User.objects.create_user(email="stranger@example.com", password="StrangerPass123")
        self.client.force_authenticate(stranger)

        self.assertEqual(
            self.client.post(reverse("booking-cancel", args=[booking_id])).status_code,
            status.HTTP_404_NOT_FOUND,
        )
        self.assertEqual(
            self.client.post(reverse("booking-owner-cancel", args=[booking_id])).status_code,
            status.HTTP_403_FORBIDDEN,
        )
        self.assertEqual(
            self.client.get(reverse("booking-detail", args=[booking_id])).status_code,
            status.HTTP_404_NOT_FOUND,
        )

    def test_lists_for_renter_and_owner(self) -> None:
        first = self._create().data["id"]
        second = self._create(start_offset=5).data["id"]
        self.client.post(reverse("booking-cancel", args=[second]))

        mine = self.client.get(self.list_url)
        confirmed = self.client.get(self.list_url, {"status": "confirmed"})
        self.assertEqual(mine.data["count"], 2)
        self.assertEqual([row["id"] for row in confirmed.data["results"]], [first])

        self.client.force_authenticate(self.owner)
        owner_view = self.client.get(reverse("booking-owner"))
        self.assertEqual(owner_view.data["count"], 2)
        self.assertEqual(self.client.get(self.list_url).data["count"], 0)
        detail = self.client.get(reverse("booking-detail", args=[first]))
        self.assertEqual(detail.status_code, status.HTTP_200_OK)

    def test_contention_is_retryable(self) -> None:
        with mock.patch(
            "apps.bookings.views.message_bus.handle_command",
            side_effect=ContentionError(),
        ):
            response = self._create()

        self.assertEqual(response.status_code, status.HTTP_503_SERVICE_UNAVAILABLE)
        self.assertEqual(response.data["code"], "contention")
        self.assertEqual(response["Retry-After"], "1")
