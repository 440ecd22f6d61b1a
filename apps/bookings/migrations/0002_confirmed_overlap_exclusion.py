"""PostgreSQL-only: forbid overlapping CONFIRMED bookings on one pitch and date."""

from django.db import migrations

CONSTRAINT = "booking_confirmed_no_overlap"


def add_exclusion_constraint(apps, schema_editor):
    if schema_editor.connection.vendor != "postgresql":
        return
    schema_editor.execute("CREATE EXTENSION IF NOT EXISTS btree_gist")
    schema_editor.execute(
        f"""
        ALTER TABLE bookings_booking
        ADD CONSTRAINT {CONSTRAINT}
        EXCLUDE USING gist (
            pitch_id WITH =,
            tsrange(booking_date + start_time, booking_date + end_time, '[)') WITH &&
        )
        WHERE (status = 'confirmed')
        """
    )


def drop_exclusion_constraint(apps, schema_editor):
    if schema_editor.connection.vendor != "postgresql":
        return
    schema_editor.execute(f"ALTER TABLE bookings_booking DROP CONSTRAINT IF EXISTS {CONSTRAINT}")


class Migration(migrations.Migration):

    dependencies = [
        ("bookings", "0001_initial"),
    ]

    operations = [
        migrations.RunPython(add_exclusion_constraint, drop_exclusion_constraint),
    ]
