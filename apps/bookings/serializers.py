"""Serializers for the booking domain.

Times travel as "HH:MM" strings and are parsed by the booking engine, so
malformed or inverted ranges come back as the same InvalidTimeRange error
whichever entry point is used.
"""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from apps.facilities.models import Pitch

from .domain.slots import format_time_of_day
from .models import Booking


class TimeOfDayField(serializers.ReadOnlyField):
    """Time as HH:MM; the end of day reads "24:00"."""

    def to_representation(self, value):
        return format_time_of_day(value)


class BookingSerializer(serializers.ModelSerializer):
    start_time = TimeOfDayField()
    end_time = TimeOfDayField()
    pitch_name = serializers.CharField(source="pitch.name", read_only=True)
    facility_name = serializers.CharField(source="facility.name", read_only=True)

    class Meta:
        model = Booking
        fields = [
            "id",
            "player",
            "pitch",
            "pitch_name",
            "facility",
            "facility_name",
            "booking_date",
            "start_time",
            "end_time",
            "status",
            "total_amount",
            "notes",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class BookingCreateSerializer(serializers.Serializer):
    """Запрос игрока на бронирование площадки."""

    pitch = serializers.IntegerField()
    booking_date = serializers.DateField()
    start_time = serializers.CharField(max_length=5)
    end_time = serializers.CharField(max_length=5)
    notes = serializers.CharField(required=False, allow_null=True, allow_blank=True)


class BookingStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Booking.Status.choices)
    notes = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    pay_with_wallet = serializers.BooleanField(required=False, default=False)


class AvailablePitchQuerySerializer(serializers.Serializer):
    booking_date = serializers.DateField()
    start_time = serializers.CharField(max_length=5)
    end_time = serializers.CharField(max_length=5)
    city = serializers.CharField(required=False)
    pitch_type = serializers.CharField(required=False)
    max_hourly_rate = serializers.DecimalField(max_digits=10, decimal_places=2, required=False)


class AvailablePitchSerializer(serializers.ModelSerializer):
    facility_name = serializers.CharField(source="facility.name", read_only=True)
    city = serializers.CharField(source="facility.city", read_only=True)
    slot_total = serializers.DecimalField(max_digits=10, decimal_places=2, read_only=True)

    class Meta:
        model = Pitch
        fields = [
            "id",
            "name",
            "type",
            "hourly_rate",
            "facility",
            "facility_name",
            "city",
            "slot_total",
        ]
        read_only_fields = fields
