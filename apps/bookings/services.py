"""Domain services for booking workflows.

Only CONFIRMED bookings occupy a slot. Creation and confirmation both take
the (pitch, date) schedule lock before looking for overlaps, so two
requests for the same pitch and day are decided one after the other.
"""

from __future__ import annotations

import logging
from datetime import date

from django.db import IntegrityError, transaction  # type: ignore
from django.db.models import Exists, F, OuterRef, Q  # type: ignore

from apps.facilities.models import Pitch
from apps.facilities.services import bookable_pitches, find_active_pitch_with_facility
from apps.users.services import find_active_user
from shared.application.uow import DjangoUnitOfWork
from shared.domain.clock import Clock, system_clock
from shared.domain.value_objects import Money
from shared.infrastructure.locking import lock_queryset_if_possible

from .domain.events import BookingCreated, BookingStatusChanged
from .domain.slots import TimeSlot, parse_booking_date
from .exceptions import (
    BookingNotFound,
    InvalidStatusTransition,
    PitchNotFound,
    PlayerNotFound,
    SlotConflict,
)
from .models import Booking, PitchSchedule

logger = logging.getLogger(__name__)


# --- Locking and conflict detection -----------------------------------------

def lock_pitch_day(pitch_id, booking_date: date, *, clock: Clock | None = None) -> PitchSchedule:
    """
    Take the write lock on the (pitch, date) schedule row, creating it if absent.

    Must run inside a transaction; the lock is held until it ends.
    """

    clock = clock or system_clock
    schedule, _ = PitchSchedule.objects.get_or_create(
        pitch_id=pitch_id,
        booking_date=booking_date,
        defaults={"updated_at": clock.now()},
    )
    # The UPDATE is what serialises writers on backends without SELECT ... FOR UPDATE.
    PitchSchedule.objects.filter(pk=schedule.pk).update(
        version=F("version") + 1,
        updated_at=clock.now(),
    )
    return lock_queryset_if_possible(PitchSchedule.objects.filter(pk=schedule.pk)).get()


def find_confirmed_bookings(pitch_id, booking_date: date, slot: TimeSlot | None = None):
    """Confirmed bookings of the pitch on the date, optionally only those overlapping ``slot``."""

    queryset = Booking.objects.filter(
        pitch_id=pitch_id,
        booking_date=booking_date,
        status=Booking.Status.CONFIRMED,
    )
    if slot is not None:
        queryset = queryset.filter(Q(start_time__lt=slot.end) & Q(end_time__gt=slot.start))
    return queryset.order_by("start_time")


def ensure_slot_is_free(
    pitch_id,
    booking_date: date,
    slot: TimeSlot,
    *,
    exclude_booking_id=None,
) -> None:
    """Raise SlotConflict if a confirmed booking overlaps ``slot``; touching ends are fine."""

    conflicts = find_confirmed_bookings(pitch_id, booking_date, slot)
    if exclude_booking_id is not None:
        conflicts = conflicts.exclude(pk=exclude_booking_id)

    conflicting = conflicts.first()
    if conflicting is not None:
        logger.info(
            f"Slot {slot} on {booking_date} for pitch {pitch_id} conflicts "
            f"with confirmed booking {conflicting.pk} ({conflicting.slot})"
        )
        raise SlotConflict(
            pitch_id=pitch_id,
            booking_date=booking_date.isoformat(),
            conflicting_booking_id=conflicting.pk,
        )


# --- Commands ----------------------------------------------------------------

def create_booking(
    player_id,
    pitch_id,
    booking_date,
    start_time,
    end_time,
    notes: str | None = None,
    *,
    clock: Clock | None = None,
) -> Booking:
    """
    Request a slot on a pitch; the booking starts out PENDING.

    Checks, in order: the player is active (PlayerNotFound), the pitch and
    its facility are active (PitchNotFound), the times form a valid range
    (InvalidTimeRange) and no confirmed booking overlaps (SlotConflict).
    The price is the pitch's hourly rate times the duration in hours.
    """

    clock = clock or system_clock

    with DjangoUnitOfWork() as uow:
        player = find_active_user(player_id)
        if player is None:
            raise PlayerNotFound(player_id=player_id)

        pitch = find_active_pitch_with_facility(pitch_id)
        if pitch is None:
            raise PitchNotFound(pitch_id=pitch_id)

        slot = TimeSlot.parse(start_time, end_time)
        booking_date = parse_booking_date(booking_date)

        lock_pitch_day(pitch.pk, booking_date, clock=clock)
        ensure_slot_is_free(pitch.pk, booking_date, slot)

        total = slot.price(Money(pitch.hourly_rate))
        now = clock.now()
        booking = Booking.objects.create(
            player=player,
            pitch=pitch,
            facility_id=pitch.facility_id,
            booking_date=booking_date,
            start_time=slot.start,
            end_time=slot.end,
            status=Booking.Status.PENDING,
            total_amount=total.amount,
            notes=notes,
            created_at=now,
            updated_at=now,
        )

        uow.add_event(BookingCreated(
            booking_id=booking.pk,
            player_id=player.pk,
            pitch_id=pitch.pk,
            facility_id=pitch.facility_id,
            booking_date=booking_date,
            slot=slot,
            total_amount=total,
        ))

    logger.info(
        f"Booking {booking.pk} created: player {player.pk}, pitch {pitch.pk}, "
        f"{booking_date} {slot}, total {total}"
    )
    return booking


def update_booking_status(
    booking_id,
    status: str,
    notes: str | None = None,
    *,
    pay_with_wallet: bool = False,
    clock: Clock | None = None,
) -> Booking:
    """
    Move a booking along pending -> confirmed/rejected/cancelled or
    confirmed -> cancelled.

    Confirming re-checks the slot under the schedule lock. With
    ``pay_with_wallet`` the player's wallet is debited the booking total in
    the same transaction; if the debit is refused the booking stays as it was.
    """

    clock = clock or system_clock

    with DjangoUnitOfWork() as uow:
        booking = lock_queryset_if_possible(Booking.objects.filter(pk=booking_id)).first()
        if booking is None:
            raise BookingNotFound(booking_id=booking_id)

        old_status = booking.status
        if status not in Booking.Status.values or not booking.can_transition_to(status):
            raise InvalidStatusTransition(
                f"Cannot move booking {booking.pk} from {old_status} to {status}",
                booking_id=booking.pk,
                from_status=old_status,
                to_status=status,
            )

        confirming = status == Booking.Status.CONFIRMED
        if confirming:
            lock_pitch_day(booking.pitch_id, booking.booking_date, clock=clock)
            ensure_slot_is_free(
                booking.pitch_id,
                booking.booking_date,
                booking.slot,
                exclude_booking_id=booking.pk,
            )

        booking.status = status
        booking.updated_at = clock.now()
        update_fields = ["status", "updated_at"]
        if notes is not None:
            booking.notes = notes
            update_fields.append("notes")

        try:
            with transaction.atomic():
                booking.save(update_fields=update_fields)
        except IntegrityError as exc:
            # Exclusion constraint on PostgreSQL
            raise SlotConflict(
                pitch_id=booking.pitch_id,
                booking_date=booking.booking_date.isoformat(),
                booking_id=booking.pk,
            ) from exc

        if confirming and pay_with_wallet and booking.total_amount > 0:
            from apps.wallets.services import debit
            from apps.wallets.models import WalletTransaction

            debit(
                booking.player_id,
                booking.total_amount,
                WalletTransaction.Type.BOOKING_PAYMENT,
                description=f"Booking #{booking.pk} on {booking.booking_date} {booking.slot}",
                reference_id=booking.payment_reference,
                clock=clock,
            )

        uow.add_event(BookingStatusChanged(
            booking_id=booking.pk,
            player_id=booking.player_id,
            facility_id=booking.facility_id,
            old_status=old_status,
            new_status=status,
        ))

    logger.info(f"Booking {booking.pk} status changed: {old_status} -> {status}")
    return booking


# --- Queries -----------------------------------------------------------------

def _with_relations(queryset):
    return queryset.select_related("player", "pitch", "facility")


def get_player_bookings(player_id):
    """All bookings of a player, latest date first."""
    return _with_relations(Booking.objects.filter(player_id=player_id)).order_by(
        "-booking_date", "-start_time"
    )


def get_facility_bookings(facility_id, booking_date=None):
    """Bookings of a facility in schedule order, optionally for one date."""
    queryset = Booking.objects.filter(facility_id=facility_id)
    if booking_date is not None:
        queryset = queryset.filter(booking_date=parse_booking_date(booking_date))
    return _with_relations(queryset).order_by("booking_date", "start_time", "pitch_id")


def get_pending_bookings(facility_id=None):
    """Requests awaiting a facility decision, oldest first."""
    queryset = Booking.objects.filter(status=Booking.Status.PENDING)
    if facility_id is not None:
        queryset = queryset.filter(facility_id=facility_id)
    return _with_relations(queryset).order_by("created_at", "pk")


def check_player_daily_booking_limit(player_id, booking_date) -> bool:
    """True while the player has no confirmed booking on that date."""
    return not Booking.objects.filter(
        player_id=player_id,
        booking_date=parse_booking_date(booking_date),
        status=Booking.Status.CONFIRMED,
    ).exists()


def search_available_pitches(
    booking_date,
    start_time,
    end_time,
    city: str | None = None,
    pitch_type: str | None = None,
    max_hourly_rate=None,
) -> list[Pitch]:
    """
    Active pitches with no confirmed booking overlapping the slot.

    Each returned pitch carries ``slot_total``: the price of the slot.
    """

    booking_date = parse_booking_date(booking_date)
    slot = TimeSlot.parse(start_time, end_time)

    if pitch_type and pitch_type not in Pitch.PitchType.values:
        return []

    overlapping = Booking.objects.filter(
        pitch=OuterRef("pk"),
        booking_date=booking_date,
        status=Booking.Status.CONFIRMED,
        start_time__lt=slot.end,
        end_time__gt=slot.start,
    )
    queryset = bookable_pitches().filter(~Exists(overlapping))
    if city:
        queryset = queryset.filter(facility__city__iexact=city)
    if pitch_type:
        queryset = queryset.filter(type=pitch_type)
    if max_hourly_rate is not None:
        queryset = queryset.filter(hourly_rate__lte=max_hourly_rate)

    pitches = list(queryset.order_by("hourly_rate", "facility__name", "name"))
    for pitch in pitches:
        pitch.slot_total = slot.price(Money(pitch.hourly_rate)).amount
    return pitches
