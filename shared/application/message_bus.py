"""
Message Bus

Routes commands to their single handler and published domain events to
any number of subscribers. API views dispatch commands through the bus;
units of work publish events through it after commit.
"""

from typing import Any, Callable, Dict, List, Type
import logging

from shared.domain.base import DomainEvent
from shared.domain.exceptions import DomainError

logger = logging.getLogger(__name__)


class MessageBus:
    """
    Message bus for commands and events

    Commands: One handler per command (1:1)
    Events: Multiple handlers per event (1:N)
    """

    def __init__(self):
        self._event_handlers: Dict[Type[DomainEvent], List[Callable]] = {}
        self._command_handlers: Dict[Type, Callable] = {}

    def register_event_handler(
        self,
        event_type: Type[DomainEvent],
        handler: Callable[[DomainEvent], None]
    ):
        handlers = self._event_handlers.setdefault(event_type, [])
        if handler not in handlers:
            handlers.append(handler)
            logger.debug(f"Registered event handler for {event_type.__name__}")

    def register_command_handler(
        self,
        command_type: Type,
        handler: Callable[[Any], Any],
        *,
        replace: bool = False,
    ):
        """
        Register a command handler

        Only one handler can be registered per command type. Pass
        ``replace=True`` to swap it, e.g. to bind an in-memory ledger.
        """
        if command_type in self._command_handlers and not replace:
            raise ValueError(
                f"Handler for {command_type.__name__} is already registered. "
                "Commands can have only one handler."
            )
        self._command_handlers[command_type] = handler
        logger.debug(f"Registered command handler for {command_type.__name__}")

    def handle_command(self, command: Any) -> Any:
        """
        Handle a command and return the handler's result

        Domain errors are expected outcomes and propagate unchanged to
        the caller; anything else is logged as a failure first.
        """
        command_type = type(command)
        handler = self._command_handlers.get(command_type)

        if not handler:
            raise ValueError(
                f"No handler registered for command {command_type.__name__}"
            )

        logger.info(f"Handling command: {command_type.__name__}")
        try:
            result = handler(command)
        except DomainError as e:
            logger.info(f"Command {command_type.__name__} rejected: {e.code}: {e.message}")
            raise
        except Exception as e:
            logger.error(f"Error handling command {command_type.__name__}: {e}", exc_info=True)
            raise
        logger.debug(f"Command {command_type.__name__} handled successfully")
        return result

    def publish_events(self, events: List[DomainEvent]):
        """
        Publish domain events

        Errors in one handler are logged and do not stop the others.
        """
        for event in events:
            event_type = type(event)
            handlers = self._event_handlers.get(event_type, [])

            if not handlers:
                logger.debug(f"No handlers registered for event {event_type.__name__}")
                continue

            logger.info(f"Publishing event: {event_type.__name__} (ID: {event.event_id})")

            for handler in handlers:
                try:
                    handler(event)
                except Exception as e:
                    logger.error(
                        f"Error in event handler {getattr(handler, '__name__', handler)} "
                        f"for event {event_type.__name__}: {e}",
                        exc_info=True
                    )


# Global message bus instance
message_bus = MessageBus()
