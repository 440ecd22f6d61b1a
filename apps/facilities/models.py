"""Facility and pitch models."""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings  # type: ignore
from django.core.validators import MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Facility(models.Model):
    """Спортивный объект владельца площадок."""

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="facilities",
    )
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    address = models.CharField(max_length=255)
    city = models.CharField(max_length=100, db_index=True)
    phone = models.CharField(max_length=20, blank=True)
    email = models.EmailField(blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Facility")
        verbose_name_plural = _("Facilities")
        ordering = ["name"]

    def __str__(self) -> str:
        return f"{self.name} ({self.city})"


class Pitch(models.Model):
    """Площадка, которую можно забронировать по часовой ставке."""

    class PitchType(models.TextChoices):
        FOOTBALL_11 = "football_11", _("Football 11-a-side")
        FOOTBALL_7 = "football_7", _("Football 7-a-side")
        FOOTBALL_5 = "football_5", _("Football 5-a-side")
        BASKETBALL = "basketball", _("Basketball")
        TENNIS = "tennis", _("Tennis")
        VOLLEYBALL = "volleyball", _("Volleyball")

    facility = models.ForeignKey(
        Facility,
        on_delete=models.CASCADE,
        related_name="pitches",
    )
    name = models.CharField(max_length=255)
    type = models.CharField(max_length=20, choices=PitchType.choices)
    hourly_rate = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text=_("Price per hour of play."),
    )
    description = models.TextField(blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Pitch")
        verbose_name_plural = _("Pitches")
        ordering = ["facility_id", "name"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(hourly_rate__gte=0),
                name="pitch_hourly_rate_non_negative",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.name} @ {self.facility_id}"
