"""No double-booking under randomized concurrent allocation."""

from __future__ import annotations

import random
import threading
from collections import defaultdict
from uuid import uuid4

from apps.bookings.application.command_handlers import (
    CancelBookingCommand,
    CancelBookingHandler,
    CreateBookingCommand,
    CreateBookingHandler,
)
from apps.bookings.domain.entities import BookingStatus
from apps.parking.domain.entities import VehicleCategory
from shared.domain.exceptions import NoAvailabilityError

WORKERS = 8
REQUESTS_PER_WORKER = 25


def _confirmed_overlaps(bookings):
    by_slot = defaultdict(list)
    for booking in bookings:
        if booking.status == BookingStatus.CONFIRMED:
            by_slot[booking.slot_id].append(booking)

    clashes = []
    for slot_bookings in by_slot.values():
        for i, a in enumerate(slot_bookings):
            for b in slot_bookings[i + 1:]:
                if a.period.overlaps_with(b.period):
                    clashes.append((a, b))
    return clashes


def test_no_two_confirmed_bookings_overlap_on_a_slot(make_space, uow_factory, store, hours):
    space = make_space(cars=3, bikes=2)
    store.lock_timeout = 10.0
    barrier = threading.Barrier(WORKERS)
    outcomes = defaultdict(int)
    unexpected = []
    tally = threading.Lock()

    def worker(seed):
        rng = random.Random(seed)
        renter = uuid4()
        mine = []
        barrier.wait()
        for _ in range(REQUESTS_PER_WORKER):
            start = rng.randint(0, 20)
            length = rng.choice([None, 1, 2, 3, 5])
            category = rng.choice([VehicleCategory.CAR, VehicleCategory.BIKE])
            try:
                if mine and rng.random() < 0.2:
                    CancelBookingHandler(uow_factory()).handle(
                        CancelBookingCommand(booking_id=mine.pop(), renter_id=renter)
                    )
                    result = "cancelled"
                else:
                    booking = CreateBookingHandler(uow_factory()).handle(CreateBookingCommand(
                        renter_id=renter,
                        space_id=space.id,
                        category=category,
                        start_time=hours(start),
                        end_time=hours(start + length) if length else None,
                    ))
                    mine.append(booking.id)
                    result = "created"
            except NoAvailabilityError:
                result = "no_availability"
            except Exception as exc:  # noqa: BLE001
                with tally:
                    unexpected.append(exc)
                continue
            with tally:
                outcomes[result] += 1

    threads = [threading.Thread(target=worker, args=(seed,)) for seed in range(WORKERS)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert unexpected == []
    assert outcomes["created"] > 0
    assert outcomes["no_availability"] > 0

    bookings = list(store.tables["bookings"].values())
    assert _confirmed_overlaps(bookings) == []

    slots = {slot.id: slot for slot in store.tables["slots"].values()}
    for booking in bookings:
        assert slots[booking.slot_id].category == booking.category
