"""Parking inventory event handlers."""

import structlog

from apps.parking.domain.events import ParkingSpaceCreated, ParkingSpaceDeleted, SlotDeleted, SlotsAdded

logger = structlog.get_logger(__name__)


def log_space_created(event: ParkingSpaceCreated):
    logger.info("parking.space_created", **event.to_dict())


def log_slots_added(event: SlotsAdded):
    logger.info("parking.slots_added", **event.to_dict())


def log_slot_deleted(event: SlotDeleted):
    logger.info("parking.slot_deleted", **event.to_dict())


def log_space_deleted(event: ParkingSpaceDeleted):
    logger.info("parking.space_deleted", **event.to_dict())


def register_handlers(bus):
    bus.register_event_handler(ParkingSpaceCreated, log_space_created)
    bus.register_event_handler(SlotsAdded, log_slots_added)
    bus.register_event_handler(SlotDeleted, log_slot_deleted)
    bus.register_event_handler(ParkingSpaceDeleted, log_space_deleted)
