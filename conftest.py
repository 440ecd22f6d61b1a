"""Shared pytest fixtures: users, a facility with a pitch, and a fixed clock."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

import pytest
from django.utils import timezone

from shared.domain.clock import FixedClock


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(timezone.make_aware(datetime(2024, 6, 1, 9, 0)))


@pytest.fixture
def booking_date() -> date:
    return date(2024, 6, 15)


@pytest.fixture
def player(db):
    from apps.users.models import User

    return User.objects.create_user(
        email="player@example.com",
        password="PlayerPass123",
        full_name="Sami Player",
        role=User.RoleChoices.PLAYER,
    )


@pytest.fixture
def other_player(db):
    from apps.users.models import User

    return User.objects.create_user(
        email="player2@example.com",
        password="PlayerPass123",
        full_name="Rania Player",
        role=User.RoleChoices.PLAYER,
    )


@pytest.fixture
def owner(db):
    from apps.users.models import User

    return User.objects.create_user(
        email="owner@example.com",
        password="OwnerPass123",
        full_name="Karim Owner",
        role=User.RoleChoices.FACILITY_OWNER,
    )


@pytest.fixture
def facility(owner):
    from apps.facilities.models import Facility

    return Facility.objects.create(
        owner=owner,
        name="Complexe Sportif El Menzah",
        address="Rue du Stade 12",
        city="Tunis",
    )


@pytest.fixture
def pitch(facility):
    from apps.facilities.models import Pitch

    return Pitch.objects.create(
        facility=facility,
        name="Terrain A",
        type=Pitch.PitchType.FOOTBALL_5,
        hourly_rate=Decimal("50.00"),
    )
