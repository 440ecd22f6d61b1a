"""Errors raised by the booking engine."""

from shared.domain.exceptions import ConflictError, NotFoundError, ValidationError


class PlayerNotFound(NotFoundError):
    default_message = "Player not found or inactive"
    code = "player_not_found"


class PitchNotFound(NotFoundError):
    default_message = "Pitch not found or inactive"
    code = "pitch_not_found"


class BookingNotFound(NotFoundError):
    default_message = "Booking not found"
    code = "booking_not_found"


class InvalidTimeRange(ValidationError):
    default_message = "End time must be after start time"
    code = "invalid_time_range"


class InvalidBookingDate(ValidationError):
    default_message = "Booking date must be an ISO date (YYYY-MM-DD)"
    code = "invalid_booking_date"


class InvalidStatusTransition(ValidationError):
    default_message = "Booking status cannot change this way"
    code = "invalid_status_transition"


class SlotConflict(ConflictError):
    default_message = "Time slot conflicts with existing confirmed booking"
    code = "slot_conflict"
