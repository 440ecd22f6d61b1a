"""Celery tasks for the booking domain."""

from __future__ import annotations

import logging

from celery import shared_task  # type: ignore

from .models import Booking

logger = logging.getLogger(__name__)


# ============================================================================
# NOTIFICATION TASKS
# ============================================================================

@shared_task(name="bookings.notify_facility_new_booking")
def notify_facility_new_booking(booking_id: int) -> bool:
    """Уведомление владельцу площадки о новом запросе на бронирование."""
    try:
        booking = Booking.objects.select_related("player", "pitch", "facility__owner").get(id=booking_id)
    except Booking.DoesNotExist:
        logger.error(f"Booking {booking_id} not found for new booking notification")
        return False

    logger.info(
        f"[NOTIFICATION] New booking request #{booking.pk} for {booking.pitch.name} "
        f"on {booking.booking_date:%d.%m.%Y} {booking.slot} sent to {booking.facility.owner.email}"
    )
    return True


@shared_task(name="bookings.notify_player_booking_status")
def notify_player_booking_status(booking_id: int, old_status: str, new_status: str) -> bool:
    """Уведомление игроку о решении по бронированию."""
    try:
        booking = Booking.objects.select_related("player", "pitch").get(id=booking_id)
    except Booking.DoesNotExist:
        logger.error(f"Booking {booking_id} not found for status notification")
        return False

    logger.info(
        f"[NOTIFICATION] Booking #{booking.pk} ({booking.pitch.name}, {booking.booking_date:%d.%m.%Y} "
        f"{booking.slot}) changed {old_status} -> {new_status}, sent to {booking.player.email}"
    )
    return True
