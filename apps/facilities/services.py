"""Read access to pitches for the booking engine."""

from __future__ import annotations

from .models import Pitch


def find_active_pitch_with_facility(pitch_id) -> Pitch | None:
    """
    Return the pitch joined with its facility when both are active.

    The returned pitch is the source of truth for the hourly rate and for
    the facility id denormalised onto bookings.
    """

    return (
        Pitch.objects.select_related("facility")
        .filter(pk=pitch_id, is_active=True, facility__is_active=True)
        .first()
    )


def bookable_pitches():
    return Pitch.objects.select_related("facility").filter(is_active=True, facility__is_active=True)
