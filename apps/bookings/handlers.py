"""Event handlers for the booking domain: hand committed events to Celery."""

import logging

from .domain.events import BookingCreated, BookingStatusChanged

logger = logging.getLogger(__name__)


def on_booking_created(event: BookingCreated) -> None:
    from .tasks import notify_facility_new_booking

    notify_facility_new_booking.delay(event.booking_id)
    logger.debug(f"Queued facility notification for booking {event.booking_id}")


def on_booking_status_changed(event: BookingStatusChanged) -> None:
    from .tasks import notify_player_booking_status

    notify_player_booking_status.delay(event.booking_id, event.old_status, event.new_status)
    logger.debug(f"Queued player notification for booking {event.booking_id}")
