"""
Booking Domain Events

Events that represent things that have happened in the booking domain.
These are published after successful transaction commits.
"""

from dataclasses import dataclass
from datetime import date

from apps.bookings.domain.slots import TimeSlot
from shared.domain.base import DomainEvent
from shared.domain.value_objects import Money


@dataclass
class BookingCreated(DomainEvent):
    """
    Event: A player requested a slot (new PENDING booking)

    Triggers:
    - Notify the facility owner that a request awaits a decision
    """
    booking_id: int
    player_id: int
    pitch_id: int
    facility_id: int
    booking_date: date
    slot: TimeSlot
    total_amount: Money


@dataclass
class BookingStatusChanged(DomainEvent):
    """
    Event: The facility confirmed, rejected or cancelled a booking

    Triggers:
    - Notify the player about the decision
    """
    booking_id: int
    player_id: int
    facility_id: int
    old_status: str
    new_status: str
