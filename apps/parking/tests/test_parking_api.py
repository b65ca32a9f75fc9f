"""Integration tests for parking space API endpoints."""

from __future__ import annotations

from datetime import timedelta
from uuid import UUID

from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookings.application.queries import category_counts
from apps.bookings.models import Booking
from apps.parking.models import ParkingSlot, ParkingSpace
from apps.users.models import User
from shared.application.uow import DjangoUnitOfWork


class ParkingAPITests(APITestCase):
    """Covers listing, owner management and slot availability."""

    def setUp(self) -> None:
        self.owner = User.objects.create_user(email="owner@example.com", password="OwnerPass123", name="Owner")
        self.renter = User.objects.create_user(email="renter@example.com", password="RenterPass123", name="Renter")
        self.client.force_authenticate(self.owner)
        self.list_url = reverse("parking-list")
        self.start = (timezone.now() + timedelta(days=1)).replace(microsecond=0)

    def _create(self, **overrides):
        payload = {
            "place_name": "Central Garage",
            "address": "5 Main Road",
            "price_per_hour_car": "10.00",
            "price_per_hour_bike": "4.00",
            "total_slots_car": 2,
            "total_slots_bike": 1,
        }
        payload.update(overrides)
        response = self.client.post(self.list_url, payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        return response

    def _book(self, space_id, vehicle_type="car", hours=2):
        return self.client.post(
            reverse("booking-list"),
            {
                "space_id": str(space_id),
                "vehicle_type": vehicle_type,
                "start_time": self.start.isoformat(),
                "end_time": (self.start + timedelta(hours=hours)).isoformat(),
            },
            format="json",
        )

    def test_owner_can_create_space_with_numbered_slots(self) -> None:
        response = self._create()

        self.assertEqual(response.data["total_slots_car"], 2)
        self.assertEqual(response.data["owner_id"], self.owner.id)
        self.assertEqual(response.data["slots_summary"]["car"], {"total": 2, "available": 2})
        self.assertEqual(response.data["slots_summary"]["other"], {"total": 0, "available": 0})

        slots = ParkingSlot.objects.filter(space_id=response.data["id"]).order_by("slot_number")
        self.assertEqual(
            [(s.slot_number, s.vehicle_type) for s in slots],
            [(1, "car"), (2, "car"), (3, "bike")],
        )

    def test_create_requires_authentication(self) -> None:
        self.client.force_authenticate(None)
        response = self.client.post(self.list_url, {"place_name": "X", "address": "Y"}, format="json")
        self.assertIn(response.status_code, (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN))

    def test_negative_slot_count_is_rejected(self) -> None:
        response = self.client.post(
            self.list_url,
            {"place_name": "X", "address": "Y", "total_slots_car": -1},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_listing_excludes_own_and_inactive_spaces(self) -> None:
        visible = self._create().data["id"]
        self._create(place_name="Closed Lot", is_active=False)

        own = self.client.get(self.list_url)
        self.assertEqual(own.data["count"], 0)

        self.client.force_authenticate(self.renter)
        response = self.client.get(self.list_url)
        self.assertEqual([row["id"] for row in response.data["results"]], [visible])

    def test_search_by_name_or_address(self) -> None:
        self._create(place_name="Harbour Parking", address="1 Dock Street")
        self._create(place_name="Hill Top", address="9 Summit Avenue")
        self.client.force_authenticate(self.renter)

        by_name = self.client.get(self.list_url, {"search": "harbour"})
        by_address = self.client.get(self.list_url, {"search": "summit"})
        nothing = self.client.get(self.list_url, {"search": "airport"})

        self.assertEqual([r["place_name"] for r in by_name.data["results"]], ["Harbour Parking"])
        self.assertEqual([r["place_name"] for r in by_address.data["results"]], ["Hill Top"])
        self.assertEqual(nothing.data["count"], 0)

    def test_listing_counts_slots_in_the_page_query(self) -> None:
        booked = self._create().data["id"]
        for n in range(5):
            self._create(place_name=f"Lot {n}")
        ParkingSlot.objects.filter(space_id=booked, vehicle_type="bike").update(is_active=False)
        self.client.force_authenticate(self.renter)
        self.assertEqual(self._book(booked).status_code, status.HTTP_201_CREATED)

        with self.assertNumQueries(2):
            response = self.client.get(self.list_url)

        self.assertEqual(response.data["count"], 6)
        summaries = {row["id"]: row["slots_summary"] for row in response.data["results"]}
        self.assertEqual(summaries[booked]["car"], {"total": 2, "available": 1})
        self.assertEqual(summaries[booked]["bike"], {"total": 1, "available": 0})
        others = [s for space_id, s in summaries.items() if space_id != booked]
        self.assertTrue(all(s["car"] == {"total": 2, "available": 2} for s in others))

        counts = category_counts(DjangoUnitOfWork(), UUID(booked))
        self.assertEqual(
            summaries[booked],
            {c.value: {"total": n.total, "available": n.available} for c, n in counts.items()},
        )

    def test_mine_lists_own_spaces_including_inactive(self) -> None:
        self._create()
        self._create(place_name="Closed Lot", is_active=False)

        response = self.client.get(reverse("parking-mine"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["count"], 2)

    def test_partial_update_grows_but_never_shrinks(self) -> None:
        space_id = self._create().data["id"]
        url = reverse("parking-detail", args=[space_id])

        grown = self.client.patch(url, {"total_slots_car": 4, "price_per_hour_car": "12.00"}, format="json")
        self.assertEqual(grown.status_code, status.HTTP_200_OK, grown.data)
        self.assertEqual(grown.data["total_slots_car"], 4)
        self.assertEqual(grown.data["price_per_hour_car"], "12.00")

        shrunk = self.client.patch(url, {"total_slots_car": 1}, format="json")
        self.assertEqual(shrunk.data["total_slots_car"], 4)
        self.assertEqual(ParkingSlot.objects.filter(space_id=space_id, vehicle_type="car").count(), 4)
        numbers = ParkingSlot.objects.filter(space_id=space_id).values_list("slot_number", flat=True)
        self.assertEqual(sorted(numbers), [1, 2, 3, 4, 5])

    def test_only_owner_can_update_or_delete(self) -> None:
        space_id = self._create().data["id"]
        url = reverse("parking-detail", args=[space_id])
        self.client.force_authenticate(self.renter)

        patch = self.client.patch(url, {"place_name": "Mine now"}, format="json")
        delete = self.client.delete(url)

        self.assertEqual(patch.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(patch.data["code"], "unauthorized")
        self.assertEqual(delete.status_code, status.HTTP_403_FORBIDDEN)
        self.assertTrue(ParkingSpace.objects.filter(pk=space_id).exists())

    def test_availability_reports_occupied_slots(self) -> None:
        space_id = self._create().data["id"]
        self.client.force_authenticate(self.renter)
        self.assertEqual(self._book(space_id).status_code, status.HTTP_201_CREATED)

        response = self.client.get(
            reverse("parking-availability", args=[space_id]),
            {
                "vehicle_type": "car",
                "window_start": (self.start + timedelta(hours=1)).isoformat(),
                "window_end": (self.start + timedelta(hours=3)).isoformat(),
            },
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row["slot_number"] for row in response.data], [1, 2])
        self.assertEqual([row["status"] for row in response.data], ["occupied", "available"])
        self.assertIsNone(response.data[1]["occupied_from"])

    def test_availability_of_unknown_space(self) -> None:
        response = self.client.get(reverse("parking-availability", args=["00000000-0000-0000-0000-000000000000"]))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["code"], "not_found")

    def test_availability_rejects_inverted_window(self) -> None:
        space_id = self._create().data["id"]
        response = self.client.get(
            reverse("parking-availability", args=[space_id]),
            {"window_start": self.start.isoformat(), "window_end": self.start.isoformat()},
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["code"], "invalid_interval")

    def test_delete_slot_cancels_and_retires_it(self) -> None:
        space_id = self._create().data["id"]
        self.client.force_authenticate(self.renter)
        booking_id = self._book(space_id).data["id"]
        slot = ParkingSlot.objects.get(space_id=space_id, slot_number=1)

        self.client.force_authenticate(self.owner)
        response = self.client.delete(reverse("parking-delete-slot", args=[space_id, slot.id]))

        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(ParkingSlot.objects.filter(pk=slot.id).exists())
        self.assertFalse(Booking.objects.filter(pk=booking_id).exists())
        space = ParkingSpace.objects.get(pk=space_id)
        self.assertEqual(space.total_slots_car, 1)
        self.assertEqual(space.next_slot_number, 4)

    def test_delete_space(self) -> None:
        space_id = self._create().data["id"]
        self.client.force_authenticate(self.renter)
        self._book(space_id)

        self.client.force_authenticate(self.owner)
        response = self.client.delete(reverse("parking-detail", args=[space_id]))

        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(ParkingSpace.objects.filter(pk=space_id).exists())
        self.assertFalse(Booking.objects.exists())

    def test_delete_unknown_space(self) -> None:
        response = self.client.delete(reverse("parking-detail", args=["00000000-0000-0000-0000-000000000000"]))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
