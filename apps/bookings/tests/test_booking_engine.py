"""Tests for booking creation: validation order, pricing and slot conflicts."""

from __future__ import annotations

from datetime import datetime, time
from decimal import Decimal

import pytest

from apps.bookings.exceptions import InvalidTimeRange, PitchNotFound, PlayerNotFound, SlotConflict
from apps.bookings.models import Booking, PitchSchedule
from apps.bookings.services import create_booking, ensure_slot_is_free, find_confirmed_bookings
from apps.bookings.domain.slots import TimeSlot


def _existing(pitch, player, booking_date, start, end, status=Booking.Status.CONFIRMED) -> Booking:
    return Booking.objects.create(
        player=player,
        pitch=pitch,
        facility=pitch.facility,
        booking_date=booking_date,
        start_time=start,
        end_time=end,
        status=status,
        total_amount=Decimal("0.00"),
    )


@pytest.mark.django_db
def test_two_hour_booking_is_priced_from_hourly_rate(player, pitch, booking_date, clock):
    booking = create_booking(player.id, pitch.id, booking_date, "10:00", "12:00", clock=clock)

    assert booking.status == Booking.Status.PENDING
    assert booking.total_amount == Decimal("100.00")
    assert booking.facility_id == pitch.facility_id
    assert booking.start_time == time(10, 0)
    assert booking.end_time == time(12, 0)
    assert booking.created_at == clock.now()


@pytest.mark.django_db
def test_fractional_hours_are_priced_proportionally(player, pitch, booking_date, clock):
    booking = create_booking(player.id, pitch.id, booking_date, "14:00", "15:30", clock=clock)

    assert booking.total_amount == Decimal("75.00")


@pytest.mark.django_db
def test_price_is_rounded_half_up_to_cents(player, pitch, booking_date, clock):
    pitch.hourly_rate = Decimal("33.33")
    pitch.save()

    booking = create_booking(player.id, pitch.id, booking_date, "10:00", "10:45", clock=clock)

    # 33.33 * 0.75 = 24.9975
    assert booking.total_amount == Decimal("25.00")


@pytest.mark.django_db
def test_overlapping_confirmed_booking_is_rejected(player, other_player, pitch, booking_date, clock):
    confirmed = _existing(pitch, other_player, booking_date, time(11, 0), time(13, 0))

    with pytest.raises(SlotConflict) as excinfo:
        create_booking(player.id, pitch.id, booking_date, "10:30", "11:30", clock=clock)

    assert excinfo.value.context["conflicting_booking_id"] == confirmed.pk
    assert excinfo.value.context["pitch_id"] == pitch.id
    assert Booking.objects.count() == 1


@pytest.mark.django_db
def test_pending_booking_does_not_block_the_slot(player, other_player, pitch, booking_date, clock):
    _existing(pitch, other_player, booking_date, time(11, 0), time(13, 0), status=Booking.Status.PENDING)

    booking = create_booking(player.id, pitch.id, booking_date, "10:30", "11:30", clock=clock)

    assert booking.status == Booking.Status.PENDING
    assert Booking.objects.count() == 2


@pytest.mark.django_db
@pytest.mark.parametrize("status", [Booking.Status.REJECTED, Booking.Status.CANCELLED])
def test_closed_bookings_do_not_block_the_slot(status, player, other_player, pitch, booking_date, clock):
    _existing(pitch, other_player, booking_date, time(10, 0), time(12, 0), status=status)

    create_booking(player.id, pitch.id, booking_date, "10:00", "12:00", clock=clock)


@pytest.mark.django_db
@pytest.mark.parametrize("start,end", [("15:00", "15:00"), ("15:00", "14:00")])
def test_end_not_after_start_is_invalid(start, end, player, pitch, booking_date, clock):
    with pytest.raises(InvalidTimeRange):
        create_booking(player.id, pitch.id, booking_date, start, end, clock=clock)

    assert Booking.objects.count() == 0


@pytest.mark.django_db
@pytest.mark.parametrize("value", ["25:00", "10:60", "noon", "10h30", ""])
def test_malformed_time_is_invalid(value, player, pitch, booking_date, clock):
    with pytest.raises(InvalidTimeRange):
        create_booking(player.id, pitch.id, booking_date, value, "23:00", clock=clock)


@pytest.mark.django_db
def test_touching_boundaries_do_not_conflict(player, other_player, pitch, booking_date, clock):
    _existing(pitch, other_player, booking_date, time(11, 0), time(13, 0))

    before = create_booking(player.id, pitch.id, booking_date, "09:00", "11:00", clock=clock)
    after = create_booking(player.id, pitch.id, booking_date, "13:00", "14:00", clock=clock)

    assert before.pk and after.pk


@pytest.mark.django_db
def test_conflicts_are_per_pitch_and_date(player, other_player, pitch, booking_date, clock):
    from apps.facilities.models import Pitch

    _existing(pitch, other_player, booking_date, time(10, 0), time(12, 0))
    second_pitch = Pitch.objects.create(
        facility=pitch.facility,
        name="Terrain B",
        type=Pitch.PitchType.FOOTBALL_7,
        hourly_rate=Decimal("80.00"),
    )

    on_other_pitch = create_booking(player.id, second_pitch.id, booking_date, "10:00", "12:00", clock=clock)
    on_other_day = create_booking(
        player.id, pitch.id, booking_date.replace(day=16), "10:00", "12:00", clock=clock
    )

    assert on_other_pitch.total_amount == Decimal("160.00")
    assert on_other_day.pitch_id == pitch.id


@pytest.mark.django_db
def test_unknown_player_is_reported_before_anything_else(pitch, booking_date, clock):
    with pytest.raises(PlayerNotFound):
        create_booking(999_999, 999_999, booking_date, "15:00", "14:00", clock=clock)


@pytest.mark.django_db
def test_inactive_player_is_not_found(player, pitch, booking_date, clock):
    player.is_active = False
    player.save()

    with pytest.raises(PlayerNotFound):
        create_booking(player.id, pitch.id, booking_date, "10:00", "11:00", clock=clock)


@pytest.mark.django_db
def test_unknown_pitch_is_reported_before_time_range(player, booking_date, clock):
    with pytest.raises(PitchNotFound):
        create_booking(player.id, 999_999, booking_date, "15:00", "14:00", clock=clock)


@pytest.mark.django_db
def test_inactive_pitch_or_facility_is_not_found(player, pitch, booking_date, clock):
    pitch.is_active = False
    pitch.save()
    with pytest.raises(PitchNotFound):
        create_booking(player.id, pitch.id, booking_date, "10:00", "11:00", clock=clock)

    pitch.is_active = True
    pitch.save()
    pitch.facility.is_active = False
    pitch.facility.save()
    with pytest.raises(PitchNotFound):
        create_booking(player.id, pitch.id, booking_date, "10:00", "11:00", clock=clock)


@pytest.mark.django_db
def test_schedule_lock_row_counts_accepted_writes(player, pitch, booking_date, clock):
    create_booking(player.id, pitch.id, booking_date, "08:00", "09:00", clock=clock)
    create_booking(player.id, pitch.id, booking_date, "09:00", "10:00", clock=clock)

    schedule = PitchSchedule.objects.get(pitch=pitch, booking_date=booking_date)
    assert schedule.version == 2


@pytest.mark.django_db
def test_time_objects_are_accepted(player, pitch, booking_date, clock):
    booking = create_booking(player.id, pitch.id, booking_date, time(18, 0), time(19, 30), clock=clock)

    assert booking.total_amount == Decimal("75.00")


@pytest.mark.django_db
def test_late_evening_slot_runs_until_end_of_day(player, other_player, pitch, booking_date, clock):
    booking = create_booking(player.id, pitch.id, booking_date, "22:00", "24:00", clock=clock)
    booking.status = Booking.Status.CONFIRMED
    booking.save()

    booking.refresh_from_db()
    assert booking.total_amount == Decimal("100.00")
    assert booking.slot == TimeSlot.parse("22:00", "24:00")
    with pytest.raises(SlotConflict):
        create_booking(other_player.id, pitch.id, booking_date, "23:00", "24:00", clock=clock)
    create_booking(other_player.id, pitch.id, booking_date, "21:00", "22:00", clock=clock)


@pytest.mark.django_db
def test_datetime_booking_date_is_stored_as_a_date(player, other_player, pitch, booking_date, clock):
    moment = datetime.combine(booking_date, time(7, 30))
    booking = create_booking(player.id, pitch.id, moment, "10:00", "11:00", clock=clock)
    booking.status = Booking.Status.CONFIRMED
    booking.save()

    assert booking.booking_date == booking_date
    with pytest.raises(SlotConflict) as excinfo:
        create_booking(other_player.id, pitch.id, moment, "10:30", "11:30", clock=clock)
    assert excinfo.value.context["booking_date"] == booking_date.isoformat()


@pytest.mark.django_db
def test_find_confirmed_bookings_only_returns_overlaps(player, pitch, booking_date):
    overlapping = _existing(pitch, player, booking_date, time(10, 0), time(11, 0))
    _existing(pitch, player, booking_date, time(11, 0), time(12, 0))
    _existing(pitch, player, booking_date, time(9, 0), time(12, 0), status=Booking.Status.PENDING)

    found = list(find_confirmed_bookings(pitch.id, booking_date, TimeSlot(time(9, 30), time(10, 30))))

    assert found == [overlapping]


@pytest.mark.django_db
def test_ensure_slot_is_free_can_ignore_the_booking_itself(player, pitch, booking_date):
    confirmed = _existing(pitch, player, booking_date, time(10, 0), time(11, 0))

    ensure_slot_is_free(pitch.id, booking_date, confirmed.slot, exclude_booking_id=confirmed.pk)
    with pytest.raises(SlotConflict):
        ensure_slot_is_free(pitch.id, booking_date, confirmed.slot)
