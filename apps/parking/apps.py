from django.apps import AppConfig


class ParkingConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.parking"
    label = "parking"

    def ready(self) -> None:
        from shared.application.message_bus import message_bus
        from shared.application.uow import DjangoUnitOfWork

        from .application import command_handlers, event_handlers

        command_handlers.register_handlers(message_bus, DjangoUnitOfWork, replace=True)
        event_handlers.register_handlers(message_bus)
