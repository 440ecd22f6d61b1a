"""Tests for status transitions, wallet payment on confirmation and booking queries."""

from __future__ import annotations

from datetime import time
from decimal import Decimal
from unittest import mock

import pytest

from apps.bookings import services
from apps.bookings.exceptions import BookingNotFound, InvalidStatusTransition, SlotConflict
from apps.bookings.models import Booking
from apps.wallets.exceptions import InsufficientBalance
from apps.wallets.models import Wallet, WalletTransaction
from apps.wallets.services import top_up


@pytest.fixture
def pending(player, pitch, booking_date, clock) -> Booking:
    return services.create_booking(player.id, pitch.id, booking_date, "10:00", "12:00", clock=clock)


@pytest.mark.django_db
def test_facility_confirms_pending_booking(pending, clock):
    clock.tick(minutes=5)

    booking = services.update_booking_status(pending.id, "confirmed", notes="See you", clock=clock)

    booking.refresh_from_db()
    assert booking.status == Booking.Status.CONFIRMED
    assert booking.notes == "See you"
    assert booking.updated_at == clock.now()
    assert booking.created_at < booking.updated_at


@pytest.mark.django_db
@pytest.mark.parametrize("target", ["rejected", "cancelled"])
def test_pending_booking_can_be_closed(target, pending, clock):
    booking = services.update_booking_status(pending.id, target, clock=clock)

    assert booking.status == target


@pytest.mark.django_db
def test_confirmed_booking_can_be_cancelled(pending, clock):
    services.update_booking_status(pending.id, "confirmed", clock=clock)

    booking = services.update_booking_status(pending.id, "cancelled", clock=clock)

    assert booking.status == Booking.Status.CANCELLED


@pytest.mark.django_db
@pytest.mark.parametrize(
    "first,second",
    [
        ("rejected", "confirmed"),
        ("cancelled", "pending"),
        ("confirmed", "rejected"),
        ("confirmed", "pending"),
    ],
)
def test_disallowed_transitions_are_refused(first, second, pending, clock):
    services.update_booking_status(pending.id, first, clock=clock)

    with pytest.raises(InvalidStatusTransition):
        services.update_booking_status(pending.id, second, clock=clock)

    pending.refresh_from_db()
    assert pending.status == first


@pytest.mark.django_db
def test_unknown_status_value_is_refused(pending, clock):
    with pytest.raises(InvalidStatusTransition):
        services.update_booking_status(pending.id, "archived", clock=clock)


@pytest.mark.django_db
def test_unknown_booking_is_not_found(clock):
    with pytest.raises(BookingNotFound):
        services.update_booking_status(424242, "confirmed", clock=clock)


@pytest.mark.django_db
def test_confirming_overlapping_pending_booking_conflicts(pending, other_player, pitch, booking_date, clock):
    rival = services.create_booking(other_player.id, pitch.id, booking_date, "11:00", "13:00", clock=clock)
    services.update_booking_status(pending.id, "confirmed", clock=clock)

    with pytest.raises(SlotConflict):
        services.update_booking_status(rival.id, "confirmed", clock=clock)

    rival.refresh_from_db()
    assert rival.status == Booking.Status.PENDING


@pytest.mark.django_db
def test_confirmed_bookings_never_overlap(player, other_player, pitch, booking_date, clock):
    requests = [
        services.create_booking(player.id, pitch.id, booking_date, "09:00", "10:30", clock=clock),
        services.create_booking(other_player.id, pitch.id, booking_date, "10:00", "11:00", clock=clock),
        services.create_booking(player.id, pitch.id, booking_date, "10:30", "12:00", clock=clock),
        services.create_booking(other_player.id, pitch.id, booking_date, "11:30", "12:30", clock=clock),
    ]
    for booking in requests:
        try:
            services.update_booking_status(booking.id, "confirmed", clock=clock)
        except SlotConflict:
            pass

    confirmed = list(services.find_confirmed_bookings(pitch.id, booking_date))
    assert [str(b.slot) for b in confirmed] == ["09:00-10:30", "10:30-12:00"]
    for index, booking in enumerate(confirmed):
        for other in confirmed[index + 1:]:
            assert not booking.slot.overlaps_with(other.slot)


@pytest.mark.django_db
def test_confirming_with_wallet_debits_booking_total(pending, player, clock):
    top_up(player.id, "150.00", "flouci", clock=clock)

    services.update_booking_status(pending.id, "confirmed", pay_with_wallet=True, clock=clock)

    wallet = Wallet.objects.get(user=player)
    assert wallet.balance == Decimal("50.00")
    payment = wallet.transactions.get(type=WalletTransaction.Type.BOOKING_PAYMENT)
    assert payment.amount == Decimal("-100.00")
    assert payment.reference_id == f"booking:{pending.id}"


@pytest.mark.django_db
def test_refused_wallet_payment_keeps_booking_pending(pending, player, clock):
    top_up(player.id, "20.00", "d17", clock=clock)

    with pytest.raises(InsufficientBalance):
        services.update_booking_status(pending.id, "confirmed", pay_with_wallet=True, clock=clock)

    pending.refresh_from_db()
    assert pending.status == Booking.Status.PENDING
    wallet = Wallet.objects.get(user=player)
    assert wallet.balance == Decimal("20.00")
    assert wallet.transactions.count() == 1


@pytest.mark.django_db
def test_status_change_publishes_event_after_commit(pending, clock, django_capture_on_commit_callbacks):
    from apps.bookings import tasks

    with mock.patch.object(tasks.notify_player_booking_status, "delay") as delay:
        with django_capture_on_commit_callbacks(execute=True):
            services.update_booking_status(pending.id, "rejected", clock=clock)

    delay.assert_called_once_with(pending.id, "pending", "rejected")


@pytest.mark.django_db
def test_refused_transition_publishes_nothing(pending, clock, django_capture_on_commit_callbacks):
    services.update_booking_status(pending.id, "rejected", clock=clock)

    with django_capture_on_commit_callbacks() as callbacks:
        with pytest.raises(InvalidStatusTransition):
            services.update_booking_status(pending.id, "confirmed", clock=clock)

    assert callbacks == []


# --- Queries -----------------------------------------------------------------

@pytest.mark.django_db
def test_player_and_facility_booking_lists(player, other_player, pitch, facility, booking_date, clock):
    first = services.create_booking(player.id, pitch.id, booking_date, "10:00", "11:00", clock=clock)
    later_day = services.create_booking(
        player.id, pitch.id, booking_date.replace(day=20), "09:00", "10:00", clock=clock
    )
    theirs = services.create_booking(other_player.id, pitch.id, booking_date, "08:00", "09:00", clock=clock)

    assert list(services.get_player_bookings(player.id)) == [later_day, first]
    assert list(services.get_facility_bookings(facility.id)) == [theirs, first, later_day]
    assert list(services.get_facility_bookings(facility.id, booking_date)) == [theirs, first]


@pytest.mark.django_db
def test_pending_bookings_are_listed_oldest_first(player, pitch, booking_date, clock):
    first = services.create_booking(player.id, pitch.id, booking_date, "10:00", "11:00", clock=clock)
    clock.tick(minutes=1)
    second = services.create_booking(player.id, pitch.id, booking_date, "11:00", "12:00", clock=clock)
    clock.tick(minutes=1)
    decided = services.create_booking(player.id, pitch.id, booking_date, "12:00", "13:00", clock=clock)
    services.update_booking_status(decided.id, "confirmed", clock=clock)

    assert list(services.get_pending_bookings()) == [first, second]
    assert list(services.get_pending_bookings(facility_id=pitch.facility_id)) == [first, second]
    assert list(services.get_pending_bookings(facility_id=999_999)) == []


@pytest.mark.django_db
def test_daily_limit_counts_only_confirmed_bookings(pending, player, booking_date, clock):
    assert services.check_player_daily_booking_limit(player.id, booking_date) is True

    services.update_booking_status(pending.id, "confirmed", clock=clock)

    assert services.check_player_daily_booking_limit(player.id, booking_date) is False
    assert services.check_player_daily_booking_limit(player.id, booking_date.replace(day=16)) is True


@pytest.mark.django_db
def test_daily_limit_is_not_enforced_on_creation(pending, player, pitch, booking_date, clock):
    services.update_booking_status(pending.id, "confirmed", clock=clock)

    second = services.create_booking(player.id, pitch.id, booking_date, "14:00", "15:00", clock=clock)

    assert second.start_time == time(14, 0)
