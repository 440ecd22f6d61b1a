from django.apps import AppConfig  # type: ignore


class BookingsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.bookings"
    verbose_name = "Bookings"

    def ready(self) -> None:
        from shared.application.message_bus import message_bus

        from .domain.events import BookingCreated, BookingStatusChanged
        from .handlers import on_booking_created, on_booking_status_changed

        message_bus.register_event_handler(BookingCreated, on_booking_created)
        message_bus.register_event_handler(BookingStatusChanged, on_booking_status_changed)
