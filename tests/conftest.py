"""Shared pytest fixtures for all test suites."""

from collections.abc import Iterator
from datetime import date

import pytest

from trip_engine.config import get_settings
from trip_engine.models import Activity, DateWindow, Destination, Money, Trip


@pytest.fixture(autouse=True)
def fresh_settings() -> Iterator[None]:
    """Drop cached settings so monkeypatched env vars take effect."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def paris_trip() -> Trip:
    """Two-destination trip starting 2025-06-01.

    Paris has a $500 ceiling; Lyon has none. One Lyon activity is undated.
    """
    paris = Destination.create(
        "Paris",
        window=DateWindow.create(date(2025, 6, 1), date(2025, 6, 4)),
        budget_ceiling=Money.parse("$500"),
        activities=[
            Activity(name="Arrival", day_index=1, time_of_day="09:00", budget="$0"),
            Activity(name="Louvre", day_index=2, time_of_day="10:00", budget="$22.50"),
            Activity(name="Seine cruise", day_index=2, time_of_day="19:30", budget="$45"),
        ],
    )
    lyon = Destination.create(
        "Lyon",
        window=DateWindow.create(date(2025, 6, 4), date(2025, 6, 7)),
        notes="Train from Gare de Lyon",
        activities=[
            Activity(name="Food tour", day_index=5, budget="$80"),
            Activity(name="Souvenirs", budget="$30"),
        ],
    )
    return Trip.create(
        "France 2025",
        date(2025, 6, 1),
        date(2025, 6, 7),
        description="Paris then Lyon",
        destinations=[paris, lyon],
    )
