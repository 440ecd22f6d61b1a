import os

from celery import Celery
from celery.schedules import crontab  # type: ignore

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.dev")

app = Celery("pitch_booking")

app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()


# ============================================================================
# CELERY BEAT SCHEDULE (Periodic Tasks)
# ============================================================================

app.conf.beat_schedule = {
    # Расчёты с владельцами площадок - 1-го числа каждого месяца
    "report-financial-settlements": {
        "task": "wallets.report_financial_settlements",
        "schedule": crontab(minute=0, hour=6, day_of_month=1),
    },
}

app.conf.timezone = "Africa/Tunis"
