"""Row locking helpers shared by the booking and wallet engines."""

from __future__ import annotations

from django.db import transaction  # type: ignore


def lock_queryset_if_possible(queryset):
    """Apply select_for_update when inside transaction.atomic().

    Backends without SELECT ... FOR UPDATE (SQLite) ignore the clause and
    rely on their database-level write lock instead.
    """

    if not transaction.get_connection(queryset.db).in_atomic_block:
        return queryset
    return queryset.select_for_update()
