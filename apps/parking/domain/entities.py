"""
Parking Domain Entities

- VehicleCategory: the fixed set of slot pools a space can offer
- Slot: one bookable unit of a category within a space
- ParkingSpace: aggregate root owning rates, pool sizes and numbering
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from uuid import UUID

from shared.domain.base import Aggregate, Entity
from shared.domain.exceptions import InactiveError, UnauthorizedError


class VehicleCategory(Enum):
    """
    Vehicle categories

    Rates and slot counts are looked up per category through fixed
    tables (see apps.parking.models.RATE_FIELDS); a category name is
    never turned into a column name by string building.
    """
    CAR = 'car'
    BIKE = 'bike'
    OTHER = 'other'

    @classmethod
    def parse(cls, value) -> 'VehicleCategory':
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(
                f"Unknown vehicle category {value!r}. "
                f"Expected one of: {', '.join(c.value for c in cls)}"
            ) from None


# Order in which pools are numbered when a space is created.
CATEGORY_ORDER = (VehicleCategory.CAR, VehicleCategory.BIKE, VehicleCategory.OTHER)


@dataclass(eq=False, kw_only=True)
class Slot(Entity):
    """A slot's category and number never change after creation."""
    space_id: UUID
    category: VehicleCategory
    number: int
    is_active: bool = True

    def __str__(self):
        return f"Slot #{self.number} ({self.category.value})"


@dataclass(eq=False, kw_only=True)
class ParkingSpace(Aggregate):
    """
    Parking Space Aggregate Root

    Key invariants:
    - Slot numbers are unique within a space and never reused:
      ``next_slot_number`` is a high-water mark that only grows
    - Rates and counts exist for every category (zero when not offered)
    """

    owner_id: UUID
    place_name: str
    address: str
    latitude: Decimal | None = None
    longitude: Decimal | None = None
    description: str = ''
    hourly_rates: dict[VehicleCategory, Decimal] = field(default_factory=dict)
    total_slots: dict[VehicleCategory, int] = field(default_factory=dict)
    next_slot_number: int = 1
    is_active: bool = True

    def __post_init__(self):
        for category in VehicleCategory:
            self.hourly_rates.setdefault(category, Decimal('0'))
            self.total_slots.setdefault(category, 0)
            if self.hourly_rates[category] < 0:
                raise ValueError(f"Hourly rate for {category.value} cannot be negative")
            if self.total_slots[category] < 0:
                raise ValueError(f"Slot count for {category.value} cannot be negative")

    def rate_for(self, category: VehicleCategory) -> Decimal:
        return self.hourly_rates[category]

    def slot_count(self, category: VehicleCategory) -> int:
        return self.total_slots[category]

    def is_owned_by(self, user_id: UUID) -> bool:
        return self.owner_id == user_id

    def ensure_owned_by(self, user_id: UUID):
        if not self.is_owned_by(user_id):
            raise UnauthorizedError("You are not authorized to manage this parking space.")

    def ensure_bookable(self):
        if not self.is_active:
            raise InactiveError("This parking space is currently unavailable.")

    def __str__(self):
        return f"{self.place_name} ({self.address})"
