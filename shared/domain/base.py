"""
Base Domain Classes

Building blocks for the parking and booking domains:
- Entity: Objects with unique identity
- ValueObject: Immutable objects compared by value
- Aggregate: Consistency boundaries that collect domain events
- DomainEvent: Something that happened, published after commit
"""

from abc import ABC
from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from typing import Any, List
from uuid import UUID, uuid4


def utcnow() -> datetime:
    """Timezone-aware current time used as the default for timestamps."""
    return datetime.now(timezone.utc)


@dataclass
class Entity(ABC):
    """
    Base class for all entities

    Entities are compared by identity only. Two copies of the same
    row loaded in different units of work are equal.
    """
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=utcnow)

    def __eq__(self, other):
        if not isinstance(other, self.__class__):
            return False
        return self.id == other.id

    def __hash__(self):
        return hash(self.id)


@dataclass(frozen=True)
class ValueObject(ABC):
    """Immutable object compared by value."""
    pass


@dataclass(eq=False)
class Aggregate(Entity):
    """
    Base class for aggregate roots

    Events added here are picked up by the unit of work and published
    only once the enclosing transaction has committed.
    """
    _events: List['DomainEvent'] = field(default_factory=list, repr=False, init=False, compare=False)

    def add_event(self, event: 'DomainEvent'):
        self._events.append(event)

    def clear_events(self):
        self._events.clear()

    @property
    def events(self) -> List['DomainEvent']:
        return self._events.copy()


@dataclass
class DomainEvent:
    """
    Base class for domain events

    Subclasses declare their payload as dataclass fields; ``to_dict``
    flattens them for logging and hand-off to external collaborators.
    """
    event_id: UUID = field(default_factory=uuid4, kw_only=True)
    occurred_at: datetime = field(default_factory=utcnow, kw_only=True)
    aggregate_id: UUID | None = field(default=None, kw_only=True)

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {
            'event_id': str(self.event_id),
            'event_type': self.__class__.__name__,
            'occurred_at': self.occurred_at.isoformat(),
            'aggregate_id': str(self.aggregate_id) if self.aggregate_id else None,
        }
        for f in fields(self):
            if f.name in payload:
                continue
            value = getattr(self, f.name)
            if isinstance(value, datetime):
                value = value.isoformat()
            elif value is not None and not isinstance(value, (int, float, bool, str)):
                value = str(value)
            payload[f.name] = value
        return payload
