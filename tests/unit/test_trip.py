"""Tests for Trip aggregates, status derivation and destination mutations."""

from datetime import date, datetime

import pytest

from trip_engine.errors import BudgetExceeded, IndexOutOfRange, InvalidRange
from trip_engine.models import Activity, Destination, DestinationPatch, Money, Trip, TripStatus


@pytest.fixture
def january_trip() -> Trip:
    return Trip.create("Ski week", date(2025, 1, 1), date(2025, 1, 10))


class TestStatus:
    """Status is derived from the window against a caller-supplied now."""

    def test_status_scenarios(self, january_trip: Trip) -> None:
        assert january_trip.status(date(2025, 1, 5)) == TripStatus.ongoing
        assert january_trip.status(date(2024, 12, 1)) == TripStatus.upcoming
        assert january_trip.status(date(2025, 2, 1)) == TripStatus.completed

    def test_status_boundaries_are_ongoing(self, january_trip: Trip) -> None:
        assert january_trip.status(date(2025, 1, 1)) == TripStatus.ongoing
        assert january_trip.status(date(2025, 1, 10)) == TripStatus.ongoing
        assert january_trip.status(date(2024, 12, 31)) == TripStatus.upcoming
        assert january_trip.status(date(2025, 1, 11)) == TripStatus.completed

    def test_status_accepts_datetime(self, january_trip: Trip) -> None:
        assert january_trip.status(datetime(2025, 1, 10, 23, 59)) == TripStatus.ongoing

    def test_status_follows_window_changes(self, january_trip: Trip) -> None:
        now = date(2025, 1, 5)
        assert january_trip.status(now) == TripStatus.ongoing
        january_trip.window = january_trip.window.create(date(2025, 3, 1), date(2025, 3, 5))
        assert january_trip.status(now) == TripStatus.upcoming


def test_create_rejects_inverted_window() -> None:
    with pytest.raises(InvalidRange):
        Trip.create("Backwards", date(2025, 1, 10), date(2025, 1, 1))


def test_duration_days(paris_trip: Trip) -> None:
    assert paris_trip.duration_days() == 6


def test_total_budget_uses_ceiling_else_activity_sum(paris_trip: Trip) -> None:
    """Paris contributes its $500 ceiling; Lyon (no ceiling) its $110 of activities."""
    assert paris_trip.total_budget() == Money.parse("$610")


def test_total_activity_budget(paris_trip: Trip) -> None:
    assert paris_trip.total_activity_budget() == Money.parse("$177.50")


def test_total_activities(paris_trip: Trip) -> None:
    assert paris_trip.total_activities() == 5


def test_totals_are_recomputed_after_mutation(paris_trip: Trip) -> None:
    paris_trip.add_activity(1, Activity(name="Wine tasting", budget="$40"))
    assert paris_trip.total_activities() == 6
    assert paris_trip.total_budget() == Money.parse("$650")


def test_empty_trip_totals() -> None:
    trip = Trip.create("Empty", date(2025, 1, 1), date(2025, 1, 2))
    assert trip.total_budget() == Money.zero()
    assert trip.total_activities() == 0


def test_remove_destination_cascades_to_activities(paris_trip: Trip) -> None:
    removed = paris_trip.remove_destination(0)
    assert removed.name == "Paris"
    assert [d.name for d in paris_trip.destinations] == ["Lyon"]
    assert paris_trip.total_activities() == 2
    assert all(dest.name == "Lyon" for _, dest, _, _ in paris_trip.iter_activities())


@pytest.mark.parametrize("index", [-1, 2])
def test_remove_destination_out_of_range(paris_trip: Trip, index: int) -> None:
    with pytest.raises(IndexOutOfRange):
        paris_trip.remove_destination(index)
    assert len(paris_trip.destinations) == 2


def test_add_destination_preserves_order(paris_trip: Trip) -> None:
    paris_trip.add_destination(Destination.create("Nice"))
    assert [d.name for d in paris_trip.destinations] == ["Paris", "Lyon", "Nice"]


def test_update_destination(paris_trip: Trip) -> None:
    updated = paris_trip.update_destination(1, DestinationPatch(budget_ceiling="$200", notes=None))
    assert updated is paris_trip.destinations[1]
    assert updated.budget_ceiling == Money.parse("$200")
    assert updated.notes is None
    assert paris_trip.total_budget() == Money.parse("$700")


def test_update_destination_out_of_range(paris_trip: Trip) -> None:
    with pytest.raises(IndexOutOfRange):
        paris_trip.update_destination(5, DestinationPatch(name="Nowhere"))


def test_add_activity_routes_through_ceiling(paris_trip: Trip) -> None:
    """Paris already holds $67.50 of a $500 ceiling."""
    with pytest.raises(BudgetExceeded) as exc_info:
        paris_trip.add_activity(0, Activity(name="Michelin dinner", budget="$450"))

    assert exc_info.value.current_total == Money.parse("$67.50")
    assert len(paris_trip.destinations[0].activities) == 3


def test_remove_activity_routes_to_destination(paris_trip: Trip) -> None:
    remaining = paris_trip.remove_activity(1, 1)
    assert [a.name for a in remaining] == ["Food tour"]
    with pytest.raises(IndexOutOfRange):
        paris_trip.remove_activity(7, 0)
