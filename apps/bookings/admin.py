"""Admin registration for bookings."""

from __future__ import annotations

from django.contrib import admin

from .models import Booking, PitchSchedule


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "pitch",
        "facility",
        "player",
        "booking_date",
        "start_time",
        "end_time",
        "status",
        "total_amount",
        "created_at",
    )
    list_filter = ("status", "booking_date", "facility")
    search_fields = ("pitch__name", "facility__name", "player__email")
    # Status changes go through the booking engine so overlaps stay checked.
    readonly_fields = (
        "player",
        "pitch",
        "facility",
        "booking_date",
        "start_time",
        "end_time",
        "status",
        "total_amount",
        "created_at",
        "updated_at",
    )


@admin.register(PitchSchedule)
class PitchScheduleAdmin(admin.ModelAdmin):
    list_display = ("pitch", "booking_date", "version", "updated_at")
    list_filter = ("booking_date",)
    readonly_fields = ("pitch", "booking_date", "version", "updated_at")
