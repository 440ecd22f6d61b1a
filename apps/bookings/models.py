"""Booking domain models."""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from .domain.slots import TimeSlot


class Booking(models.Model):
    """Бронирование площадки на интервал времени в пределах одного дня."""

    class Status(models.TextChoices):
        PENDING = "pending", _("Awaiting facility decision")
        CONFIRMED = "confirmed", _("Confirmed")
        REJECTED = "rejected", _("Rejected")
        CANCELLED = "cancelled", _("Cancelled")

    # Only CONFIRMED bookings occupy their slot.
    ALLOWED_TRANSITIONS = {
        Status.PENDING: {Status.CONFIRMED, Status.REJECTED, Status.CANCELLED},
        Status.CONFIRMED: {Status.CANCELLED},
        Status.REJECTED: set(),
        Status.CANCELLED: set(),
    }

    player = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="bookings",
    )
    pitch = models.ForeignKey(
        "facilities.Pitch",
        on_delete=models.CASCADE,
        related_name="bookings",
    )
    facility = models.ForeignKey(
        "facilities.Facility",
        on_delete=models.CASCADE,
        related_name="bookings",
        help_text=_("Copied from the pitch at booking time."),
    )
    booking_date = models.DateField()
    start_time = models.TimeField()
    end_time = models.TimeField()
    status = models.CharField(
        max_length=16,
        choices=Status.choices,
        default=Status.PENDING,
    )
    total_amount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text=_("Hourly rate x duration, fixed at booking time."),
    )
    notes = models.TextField(null=True, blank=True)
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(default=timezone.now)

    class Meta:
        verbose_name = _("Booking")
        verbose_name_plural = _("Bookings")
        ordering = ["-booking_date", "-start_time"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(end_time__gt=models.F("start_time")),
                name="booking_end_after_start",
            ),
            models.CheckConstraint(
                condition=models.Q(total_amount__gte=0),
                name="booking_total_non_negative",
            ),
        ]
        indexes = [
            models.Index(fields=["pitch", "booking_date", "status"], name="booking_pitch_day_status_idx"),
            models.Index(fields=["facility", "booking_date"], name="booking_facility_day_idx"),
            models.Index(fields=["player", "booking_date"], name="booking_player_day_idx"),
        ]

    def __str__(self) -> str:
        return f"Booking #{self.pk} {self.booking_date} {self.slot} ({self.status})"

    @property
    def slot(self) -> TimeSlot:
        return TimeSlot.parse(self.start_time, self.end_time)

    @property
    def payment_reference(self) -> str:
        return f"booking:{self.pk}"

    def can_transition_to(self, status: str) -> bool:
        return status in self.ALLOWED_TRANSITIONS.get(self.status, set())


class PitchSchedule(models.Model):
    """
    Lock row for one pitch on one date.

    Booking creation and confirmation update this row before checking for
    overlaps, which serialises them per (pitch, date) on every backend.
    """

    pitch = models.ForeignKey(
        "facilities.Pitch",
        on_delete=models.CASCADE,
        related_name="schedules",
    )
    booking_date = models.DateField()
    version = models.PositiveIntegerField(default=0)
    updated_at = models.DateTimeField(default=timezone.now)

    class Meta:
        verbose_name = _("Pitch schedule")
        verbose_name_plural = _("Pitch schedules")
        constraints = [
            models.UniqueConstraint(
                fields=["pitch", "booking_date"],
                name="pitch_schedule_one_per_day",
            ),
        ]

    def __str__(self) -> str:
        return f"Schedule {self.pitch_id} {self.booking_date} v{self.version}"
