"""Read access to users for the booking and wallet engines."""

from __future__ import annotations

from .models import CustomUser


def find_active_user(user_id) -> CustomUser | None:
    """Return the user if it exists and is active, otherwise None."""

    return CustomUser.objects.filter(pk=user_id, is_active=True).first()
