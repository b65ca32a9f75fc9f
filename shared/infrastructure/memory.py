"""
In-process storage for the parking ledger.

InMemoryStore keeps committed spaces, slots and bookings in plain
dicts plus one ``threading.Lock`` per row. InMemoryUnitOfWork follows
the same contract as DjangoUnitOfWork:

- ``lock=True`` reads take the row lock, waiting at most
  ``store.lock_timeout`` seconds before raising ContentionError
- writes are staged and only become visible to other units of work
  when the unit of work commits
- deleting a space cascades to its slots and bookings, deleting a slot
  cascades to its bookings

Handlers run against it unchanged, which lets the allocation rules be
exercised from many threads without a database.
"""

from __future__ import annotations

import copy
import logging
import threading
from typing import Dict, Iterable, List, Tuple
from uuid import UUID

from apps.bookings.domain.entities import Booking, BookingStatus
from apps.bookings.domain.repositories import AbstractBookingRepository
from apps.parking.domain.entities import ParkingSpace, Slot, VehicleCategory
from apps.parking.domain.repositories import AbstractSlotRepository, AbstractSpaceRepository
from shared.application.uow import AbstractUnitOfWork
from shared.domain.base import DomainEvent
from shared.domain.exceptions import ContentionError
from shared.domain.value_objects import TimeRange

logger = logging.getLogger(__name__)

SPACES = 'spaces'
SLOTS = 'slots'
BOOKINGS = 'bookings'

_DELETED = object()

RowKey = Tuple[str, UUID]


class InMemoryStore:
    """Committed state shared by every unit of work opened on it."""

    def __init__(self, lock_timeout: float = 5.0):
        self.lock_timeout = lock_timeout
        self.tables: Dict[str, Dict[UUID, object]] = {SPACES: {}, SLOTS: {}, BOOKINGS: {}}
        self._row_locks: Dict[RowKey, threading.Lock] = {}
        self._registry = threading.Lock()
        self._data_lock = threading.RLock()

    def row_lock(self, key: RowKey) -> threading.Lock:
        with self._registry:
            lock = self._row_locks.get(key)
            if lock is None:
                lock = self._row_locks[key] = threading.Lock()
            return lock

    def snapshot(self, table: str) -> Dict[UUID, object]:
        with self._data_lock:
            return dict(self.tables[table])

    def apply(self, staged: Dict[str, Dict[UUID, object]]):
        """Apply staged writes atomically. Deletes run last and cascade."""
        with self._data_lock:
            for table in (SPACES, SLOTS, BOOKINGS):
                for row_id, value in staged[table].items():
                    if value is not _DELETED:
                        self.tables[table][row_id] = value
            for table in (SPACES, SLOTS, BOOKINGS):
                for row_id, value in staged[table].items():
                    if value is _DELETED:
                        self._delete(table, row_id)

    def _delete(self, table: str, row_id: UUID):
        self.tables[table].pop(row_id, None)
        with self._registry:
            # Holders keep their reference; a deleted id is never read back.
            self._row_locks.pop((table, row_id), None)
        if table == SPACES:
            for slot_id in [s.id for s in self.tables[SLOTS].values() if s.space_id == row_id]:
                self._delete(SLOTS, slot_id)
            for booking_id in [b.id for b in self.tables[BOOKINGS].values() if b.space_id == row_id]:
                self._delete(BOOKINGS, booking_id)
        elif table == SLOTS:
            for booking_id in [b.id for b in self.tables[BOOKINGS].values() if b.slot_id == row_id]:
                self._delete(BOOKINGS, booking_id)


class _InMemoryTable:
    """Read-your-writes view of one table for a single unit of work."""

    table: str

    def __init__(self, uow: 'InMemoryUnitOfWork'):
        self.uow = uow

    def _rows(self) -> List:
        rows = self.uow.store.snapshot(self.table)
        for row_id, value in self.uow.staged[self.table].items():
            if value is _DELETED:
                rows.pop(row_id, None)
            else:
                rows[row_id] = value
        return [copy.deepcopy(row) for row in rows.values()]

    def _get(self, row_id: UUID, lock: bool):
        if lock:
            self.uow.acquire((self.table, row_id))
        value = self.uow.staged[self.table].get(row_id)
        if value is _DELETED:
            return None
        if value is None:
            value = self.uow.store.snapshot(self.table).get(row_id)
        return copy.deepcopy(value) if value is not None else None

    def _put(self, entity):
        stored = copy.deepcopy(entity)
        if hasattr(stored, 'clear_events'):
            stored.clear_events()
        self.uow.staged[self.table][entity.id] = stored

    def _delete(self, row_id: UUID):
        self.uow.staged[self.table][row_id] = _DELETED


class InMemorySpaceRepository(_InMemoryTable, AbstractSpaceRepository):
    table = SPACES

    def get(self, space_id: UUID, *, lock: bool = False) -> ParkingSpace | None:
        return self._get(space_id, lock)

    def add(self, space: ParkingSpace):
        self._put(space)

    def save(self, space: ParkingSpace):
        self._put(space)

    def delete(self, space_id: UUID):
        self._delete(space_id)

    def list_all(self) -> List[ParkingSpace]:
        return self._rows()


class InMemorySlotRepository(_InMemoryTable, AbstractSlotRepository):
    table = SLOTS

    def get(self, slot_id: UUID, *, lock: bool = False) -> Slot | None:
        return self._get(slot_id, lock)

    def list_for_space(
        self,
        space_id: UUID,
        category: VehicleCategory | None = None,
        *,
        slot_id: UUID | None = None,
        active_only: bool = False,
        lock: bool = False,
    ) -> List[Slot]:
        def select():
            return sorted(
                (
                    slot for slot in self._rows()
                    if slot.space_id == space_id
                    and (category is None or slot.category == category)
                    and (slot_id is None or slot.id == slot_id)
                    and (not active_only or slot.is_active)
                ),
                key=lambda s: s.number,
            )

        slots = select()
        if not lock:
            return slots
        for slot in slots:
            self.uow.acquire((SLOTS, slot.id))
        # Re-read under the locks so callers see the latest committed rows.
        locked = {slot.id for slot in slots}
        return [slot for slot in select() if slot.id in locked]

    def add_many(self, slots: List[Slot]):
        for slot in slots:
            self._put(slot)

    def delete(self, slot_id: UUID):
        self._delete(slot_id)


class InMemoryBookingRepository(_InMemoryTable, AbstractBookingRepository):
    table = BOOKINGS

    def get(self, booking_id: UUID, *, lock: bool = False) -> Booking | None:
        return self._get(booking_id, lock)

    def add(self, booking: Booking):
        self._put(booking)

    def save(self, booking: Booking):
        self._put(booking)

    def find_confirmed_overlapping(self, slot_ids: Iterable[UUID], window: TimeRange) -> List[Booking]:
        wanted = set(slot_ids)
        return sorted(
            (b for b in self._rows() if b.slot_id in wanted and b.occupies(window)),
            key=lambda b: b.start_time,
        )

    def list_confirmed(
        self,
        *,
        space_id: UUID | None = None,
        slot_id: UUID | None = None,
        lock: bool = False,
    ) -> List[Booking]:
        if space_id is None and slot_id is None:
            raise ValueError("list_confirmed needs a space_id or a slot_id")

        def select():
            return sorted(
                (
                    b for b in self._rows()
                    if b.status == BookingStatus.CONFIRMED
                    and (space_id is None or b.space_id == space_id)
                    and (slot_id is None or b.slot_id == slot_id)
                ),
                key=lambda b: (b.start_time, str(b.id)),
            )

        bookings = select()
        if not lock:
            return bookings
        for booking in bookings:
            self.uow.acquire((BOOKINGS, booking.id))
        locked = {booking.id for booking in bookings}
        return [b for b in select() if b.id in locked]

    def list_all(self) -> List[Booking]:
        return self._rows()


class InMemoryUnitOfWork(AbstractUnitOfWork):
    """
    Unit of work over an InMemoryStore

    One instance per thread. Row locks are held until the unit of work
    commits or rolls back; events are published synchronously after the
    staged writes are applied.
    """

    def __init__(self, store: InMemoryStore):
        super().__init__()
        self.store = store
        self.staged: Dict[str, Dict[UUID, object]] = {}
        self._held: Dict[RowKey, threading.Lock] = {}
        self.spaces = InMemorySpaceRepository(self)
        self.slots = InMemorySlotRepository(self)
        self.bookings = InMemoryBookingRepository(self)
        self._reset()

    def _reset(self):
        self.staged = {SPACES: {}, SLOTS: {}, BOOKINGS: {}}

    def __enter__(self):
        super().__enter__()
        self._reset()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        try:
            super().__exit__(exc_type, exc_val, exc_tb)
        finally:
            self._release_all()

    def acquire(self, key: RowKey):
        if key in self._held:
            return
        lock = self.store.row_lock(key)
        if not lock.acquire(timeout=self.store.lock_timeout):
            table, row_id = key
            logger.warning(f"Timed out waiting for {table} row {row_id}")
            raise ContentionError(f"Could not lock {table} row {row_id} in time. Please retry.")
        self._held[key] = lock

    def _release_all(self):
        held, self._held = self._held, {}
        for lock in reversed(list(held.values())):
            lock.release()

    def _commit(self):
        self.store.apply(self.staged)
        self._reset()
        self._release_all()

    def _rollback(self):
        self._reset()
        self._release_all()

    def _after_commit(self, events: List[DomainEvent]):
        self._publish_events(events)
