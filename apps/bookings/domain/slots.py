"""
Time slot value object

A booking occupies a half-open interval [start, end) of wall-clock time
on a single date. Comparison is at minute resolution, so adjacent slots
(10:00-11:00 and 11:00-12:00) do not overlap.
"""

import re
from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal

from apps.bookings.exceptions import InvalidBookingDate, InvalidTimeRange
from shared.domain.base import ValueObject
from shared.domain.value_objects import Money

TIME_PATTERN = re.compile(r"^([01]?\d|2[0-3]):([0-5]\d)$")
# Stored form of "24:00"; only valid as the end of a slot.
END_OF_DAY = time.max
MINUTES_PER_DAY = 24 * 60
MINUTES_PER_HOUR = Decimal(60)


def parse_time_of_day(value) -> time:
    """
    Parse "HH:MM" (24h) or accept a time, truncated to the minute.

    "24:00" parses to END_OF_DAY.
    """
    if isinstance(value, time):
        if value == END_OF_DAY:
            return value
        return value.replace(second=0, microsecond=0)
    text = str(value).strip()
    if text == "24:00":
        return END_OF_DAY
    match = TIME_PATTERN.match(text)
    if not match:
        raise InvalidTimeRange(
            f"Invalid time of day {value!r}, expected HH:MM",
            value=value,
        )
    return time(int(match.group(1)), int(match.group(2)))


def parse_booking_date(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip()[:10])
    except ValueError as exc:
        raise InvalidBookingDate(value=value) from exc


def minute_of_day(value: time) -> int:
    if value == END_OF_DAY:
        return MINUTES_PER_DAY
    return value.hour * 60 + value.minute


def format_time_of_day(value: time) -> str:
    if value == END_OF_DAY:
        return "24:00"
    return f"{value:%H:%M}"


@dataclass(frozen=True)
class TimeSlot(ValueObject):
    """
    Time slot value object

    Immutable [start, end) interval within one day; end is strictly
    after start.
    """
    start: time
    end: time

    def __post_init__(self):
        if minute_of_day(self.end) <= minute_of_day(self.start):
            raise InvalidTimeRange(
                f"End time {format_time_of_day(self.end)} must be after "
                f"start time {format_time_of_day(self.start)}",
                start_time=format_time_of_day(self.start),
                end_time=format_time_of_day(self.end),
            )

    @classmethod
    def parse(cls, start, end) -> 'TimeSlot':
        return cls(parse_time_of_day(start), parse_time_of_day(end))

    @property
    def minutes(self) -> int:
        return minute_of_day(self.end) - minute_of_day(self.start)

    @property
    def duration_hours(self) -> Decimal:
        """Length in hours; fractional, e.g. 90 minutes -> 1.5"""
        return Decimal(self.minutes) / MINUTES_PER_HOUR

    def overlaps_with(self, other: 'TimeSlot') -> bool:
        """
        Check if this slot overlaps with another

        Examples:
            - 10:00-12:00 overlaps with 11:00-13:00 -> True
            - 10:00-11:00 overlaps with 11:00-12:00 -> False (adjacent)
        """
        if not isinstance(other, TimeSlot):
            raise TypeError("Can only check overlap with another TimeSlot")

        # Overlap formula: start1 < end2 AND end1 > start2
        return (minute_of_day(self.start) < minute_of_day(other.end) and
                minute_of_day(self.end) > minute_of_day(other.start))

    def price(self, hourly_rate: Money) -> Money:
        """hourly_rate x duration, rounded half-up to cents"""
        return (hourly_rate * self.duration_hours).quantized()

    def __str__(self):
        return f"{format_time_of_day(self.start)}-{format_time_of_day(self.end)}"

    def __repr__(self):
        return f"TimeSlot({self})"
