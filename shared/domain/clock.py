"""
Clock abstraction

Services stamp records with clock.now() instead of relying on column
defaults, so tests can pin "now" to a known instant.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta

from django.utils import timezone  # type: ignore


class Clock(ABC):

    @abstractmethod
    def now(self) -> datetime:
        """Current aware datetime"""

    def today(self):
        return timezone.localdate(self.now())


class SystemClock(Clock):

    def now(self) -> datetime:
        return timezone.now()


class FixedClock(Clock):
    """Clock frozen at a given instant; tick() moves it forward."""

    def __init__(self, at: datetime):
        if timezone.is_naive(at):
            at = timezone.make_aware(at)
        self._at = at

    def now(self) -> datetime:
        return self._at

    def tick(self, **delta) -> datetime:
        self._at = self._at + timedelta(**delta)
        return self._at


system_clock = SystemClock()
