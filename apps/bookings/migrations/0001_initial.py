import django.db.models.deletion
import django.utils.timezone
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("facilities", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Booking",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("booking_date", models.DateField()),
                ("start_time", models.TimeField()),
                ("end_time", models.TimeField()),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending", "Awaiting facility decision"),
                            ("confirmed", "Confirmed"),
                            ("rejected", "Rejected"),
                            ("cancelled", "Cancelled"),
                        ],
                        default="pending",
                        max_length=16,
                    ),
                ),
                (
                    "total_amount",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        help_text="Hourly rate x duration, fixed at booking time.",
                        max_digits=10,
                    ),
                ),
                ("notes", models.TextField(blank=True, null=True)),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("updated_at", models.DateTimeField(default=django.utils.timezone.now)),
                (
                    "facility",
                    models.ForeignKey(
                        help_text="Copied from the pitch at booking time.",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="bookings",
                        to="facilities.facility",
                    ),
                ),
                (
                    "pitch",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="bookings",
                        to="facilities.pitch",
                    ),
                ),
                (
                    "player",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="bookings",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Booking",
                "verbose_name_plural": "Bookings",
                "ordering": ["-booking_date", "-start_time"],
                "indexes": [
                    models.Index(fields=["pitch", "booking_date", "status"], name="booking_pitch_day_status_idx"),
                    models.Index(fields=["facility", "booking_date"], name="booking_facility_day_idx"),
                    models.Index(fields=["player", "booking_date"], name="booking_player_day_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(end_time__gt=models.F("start_time")),
                        name="booking_end_after_start",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(total_amount__gte=0),
                        name="booking_total_non_negative",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="PitchSchedule",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("booking_date", models.DateField()),
                ("version", models.PositiveIntegerField(default=0)),
                ("updated_at", models.DateTimeField(default=django.utils.timezone.now)),
                (
                    "pitch",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="schedules",
                        to="facilities.pitch",
                    ),
                ),
            ],
            options={
                "verbose_name": "Pitch schedule",
                "verbose_name_plural": "Pitch schedules",
                "constraints": [
                    models.UniqueConstraint(
                        fields=("pitch", "booking_date"),
                        name="pitch_schedule_one_per_day",
                    )
                ],
            },
        ),
    ]
