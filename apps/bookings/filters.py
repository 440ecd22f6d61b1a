"""FilterSet definitions for booking listings."""

from __future__ import annotations

import django_filters  # type: ignore

from .models import Booking


class BookingFilterSet(django_filters.FilterSet):
    """Filters for the booking list: by participant, pitch, day and status."""

    player = django_filters.NumberFilter(field_name="player_id", lookup_expr="exact")
    facility = django_filters.NumberFilter(field_name="facility_id", lookup_expr="exact")
    pitch = django_filters.NumberFilter(field_name="pitch_id", lookup_expr="exact")
    booking_date = django_filters.DateFilter(field_name="booking_date")
    date_from = django_filters.DateFilter(field_name="booking_date", lookup_expr="gte")
    date_to = django_filters.DateFilter(field_name="booking_date", lookup_expr="lte")
    status = django_filters.ChoiceFilter(choices=Booking.Status.choices)

    class Meta:
        model = Booking
        fields = [
            "player",
            "facility",
            "pitch",
            "booking_date",
            "status",
        ]
