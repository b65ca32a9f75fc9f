"""Shared pytest fixtures for the in-memory parking ledger."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from uuid import uuid4

import pytest

from apps.parking.application.command_handlers import CreateParkingSpaceCommand, CreateParkingSpaceHandler
from apps.parking.domain.entities import VehicleCategory
from shared.infrastructure.memory import InMemoryStore, InMemoryUnitOfWork


@pytest.fixture
def store():
    return InMemoryStore(lock_timeout=2.0)


@pytest.fixture
def uow_factory(store):
    return lambda: InMemoryUnitOfWork(store)


@pytest.fixture
def owner_id():
    return uuid4()


@pytest.fixture
def renter_id():
    return uuid4()


@pytest.fixture
def base_time():
    return datetime(2030, 1, 7, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def hours(base_time):
    """``hours(1.5)`` is base_time plus ninety minutes."""
    return lambda h: base_time + timedelta(hours=h)


@pytest.fixture
def make_space(uow_factory, owner_id):
    def _make(cars=2, bikes=0, other=0, car_rate="10.00", bike_rate="5.00", other_rate="8.00", **kwargs):
        return CreateParkingSpaceHandler(uow_factory()).handle(CreateParkingSpaceCommand(
            owner_id=kwargs.pop("owner", owner_id),
            place_name=kwargs.pop("place_name", "Market Street Lot"),
            address=kwargs.pop("address", "12 Market Street"),
            hourly_rates={
                VehicleCategory.CAR: Decimal(car_rate),
                VehicleCategory.BIKE: Decimal(bike_rate),
                VehicleCategory.OTHER: Decimal(other_rate),
            },
            slot_counts={
                VehicleCategory.CAR: cars,
                VehicleCategory.BIKE: bikes,
                VehicleCategory.OTHER: other,
            },
            **kwargs,
        ))
    return _make
