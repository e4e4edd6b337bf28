"""Tests for day-wise, per-destination and calendar views."""

from datetime import date

import pytest

from trip_engine.config import get_settings
from trip_engine.errors import InvalidRange
from trip_engine.itinerary.builder import (
    activity_listing,
    build_calendar_grid,
    build_day_wise_view,
    contextualize,
    day_total,
    group_by_destination,
    trip_months,
)
from trip_engine.models import Activity, Destination, Money, Trip
from trip_engine.query.pipeline import QuerySpec
from trip_engine.query.surfaces import GROUP_BY_DESTINATION, SORT_PRESETS


def names(items: list) -> list[str]:
    """Helper to pull activity names out of contextualized items."""
    return [item.activity.name for item in items]


class TestDayWiseView:
    """Grouping dated activities by trip day."""

    def test_day_wise_scenario(self) -> None:
        trip = Trip.create(
            "City break",
            date(2025, 6, 1),
            date(2025, 6, 5),
            destinations=[
                Destination.create(
                    "Berlin",
                    activities=[
                        Activity(name="Museum", day_index=2),
                        Activity(name="Arrival", day_index=1),
                        Activity(name="Undated"),
                    ],
                )
            ],
        )

        days = build_day_wise_view(trip)

        assert [d.day_number for d in days] == [1, 2]
        assert names(days[0].activities) == ["Arrival"]
        assert names(days[1].activities) == ["Museum"]
        assert days[0].date == date(2025, 6, 1)
        assert days[1].date == date(2025, 6, 2)
        assert "Undated" not in {n for d in days for n in names(d.activities)}

    def test_days_ascending_with_gaps(self, paris_trip: Trip) -> None:
        days = build_day_wise_view(paris_trip)
        assert [d.day_number for d in days] == [1, 2, 5]
        assert names(days[1].activities) == ["Louvre", "Seine cruise"]
        assert days[2].activities[0].destination_name == "Lyon"
        assert days[2].date == date(2025, 6, 5)

    def test_within_day_destination_then_insertion_order(self) -> None:
        first = Destination.create(
            "A",
            activities=[
                Activity(name="a-late", day_index=3),
                Activity(name="a1", day_index=1),
                Activity(name="a2", day_index=1),
            ],
        )
        second = Destination.create("B", activities=[Activity(name="b1", day_index=1)])
        trip = Trip.create("T", date(2025, 1, 1), date(2025, 1, 5), destinations=[first, second])

        days = build_day_wise_view(trip)

        assert names(days[0].activities) == ["a1", "a2", "b1"]
        assert names(days[1].activities) == ["a-late"]

    def test_group_then_flatten_reproduces_dated_activities(self, paris_trip: Trip) -> None:
        """Property: every dated activity appears exactly once, on its resolved date."""
        days = build_day_wise_view(paris_trip)
        flattened = [item for day in days for item in day.activities]
        dated = [item for item in contextualize(paris_trip) if item.activity.is_dated]

        key = lambda i: (i.destination_index, i.activity_index)  # noqa: E731
        assert sorted(flattened, key=key) == sorted(dated, key=key)
        assert len({key(i) for i in flattened}) == len(flattened)
        for day in days:
            for item in day.activities:
                assert item.activity.day_index == day.day_number
                assert item.resolved_date == item.activity.resolved_date(paris_trip.start)

    def test_no_dated_activities_gives_empty_view(self) -> None:
        trip = Trip.create("T", date(2025, 1, 1), date(2025, 1, 5))
        assert build_day_wise_view(trip) == []

    def test_day_total(self, paris_trip: Trip) -> None:
        days = build_day_wise_view(paris_trip)
        assert day_total(days[1]) == Money.parse("$67.50")
        assert day_total(days[0]) == Money.zero()


def test_contextualize_marks_undated(paris_trip: Trip) -> None:
    items = contextualize(paris_trip)
    souvenirs = [i for i in items if i.activity.name == "Souvenirs"][0]
    assert souvenirs.resolved_date is None
    assert souvenirs.destination_index == 1
    assert souvenirs.activity_index == 1


def test_group_by_destination(paris_trip: Trip) -> None:
    paris_trip.add_destination(Destination.create("Nice"))
    groups = group_by_destination(paris_trip)

    assert [g.name for g in groups] == ["Paris", "Lyon", "Nice"]
    assert names(groups[1].activities) == ["Food tour", "Souvenirs"]
    assert groups[1].total() == Money.parse("$110")
    assert groups[2].activities == []
    assert groups[0].budget_ceiling == Money.parse("$500")


class TestActivityListing:
    """The trip's activity search reuses the shared pipeline."""

    def test_search(self, paris_trip: Trip) -> None:
        result = activity_listing(paris_trip, QuerySpec(search_text="LOU"))
        assert names(result) == ["Louvre"]

    def test_search_matches_destination_name(self, paris_trip: Trip) -> None:
        result = activity_listing(paris_trip, QuerySpec(search_text="lyon"))
        assert names(result) == ["Food tour", "Souvenirs"]

    def test_sort_by_cost(self, paris_trip: Trip) -> None:
        result = activity_listing(paris_trip, QuerySpec(sort=SORT_PRESETS["cost"]))
        assert names(result) == ["Food tour", "Seine cruise", "Souvenirs", "Louvre", "Arrival"]

    def test_sort_by_date_puts_undated_last(self, paris_trip: Trip) -> None:
        result = activity_listing(paris_trip, QuerySpec(sort=SORT_PRESETS["date"]))
        assert names(result)[-1] == "Souvenirs"

    def test_group_by_destination(self, paris_trip: Trip) -> None:
        result = activity_listing(paris_trip, QuerySpec(group=GROUP_BY_DESTINATION))
        assert isinstance(result, dict)
        assert list(result) == ["Paris", "Lyon"]


class TestCalendarGrid:
    """Month grid with leading blanks and no trailing padding."""

    def test_june_2025_sunday_first(self, paris_trip: Trip) -> None:
        """June 1, 2025 is a Sunday, so a Sunday-first grid has no leading blanks."""
        grid = build_calendar_grid(paris_trip, 6, 2025)

        assert grid.leading_blanks == 0
        assert len(grid.cells) == 30
        assert [len(week) for week in grid.weeks()] == [7, 7, 7, 7, 2]

    def test_june_2025_monday_first(self, paris_trip: Trip) -> None:
        grid = build_calendar_grid(paris_trip, 6, 2025, first_weekday=0)
        assert grid.leading_blanks == 6
        assert grid.cells[:6] == [None] * 6
        assert len(grid.cells) == 36

    def test_first_weekday_from_settings(
        self, paris_trip: Trip, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("CALENDAR_FIRST_WEEKDAY", "0")
        # paris_trip already read settings while parsing its budgets
        get_settings.cache_clear()
        grid = build_calendar_grid(paris_trip, 6, 2025)
        assert grid.first_weekday == 0
        assert grid.leading_blanks == 6

    def test_cells_hold_activities_on_resolved_dates(self, paris_trip: Trip) -> None:
        grid = build_calendar_grid(paris_trip, 6, 2025)

        june_2 = grid.cell_for(date(2025, 6, 2))
        assert june_2 is not None
        assert names(june_2.activities) == ["Louvre", "Seine cruise"]
        assert june_2.total() == Money.parse("$67.50")

        june_5 = grid.cell_for(date(2025, 6, 5))
        assert june_5 is not None
        assert names(june_5.activities) == ["Food tour"]

        june_3 = grid.cell_for(date(2025, 6, 3))
        assert june_3 is not None
        assert june_3.activities == []

    def test_undated_activities_never_appear(self, paris_trip: Trip) -> None:
        grid = build_calendar_grid(paris_trip, 6, 2025)
        all_names = {n for cell in grid.cells if cell for n in names(cell.activities)}
        assert "Souvenirs" not in all_names

    def test_in_trip_flag(self, paris_trip: Trip) -> None:
        grid = build_calendar_grid(paris_trip, 6, 2025)
        assert grid.cell_for(date(2025, 6, 1)).in_trip  # type: ignore[union-attr]
        assert grid.cell_for(date(2025, 6, 7)).in_trip  # type: ignore[union-attr]
        assert not grid.cell_for(date(2025, 6, 8)).in_trip  # type: ignore[union-attr]

    def test_month_without_activities(self, paris_trip: Trip) -> None:
        """July 1, 2025 is a Tuesday: two leading blanks Sunday-first."""
        grid = build_calendar_grid(paris_trip, 7, 2025)
        assert grid.leading_blanks == 2
        assert len(grid.cells) == 2 + 31
        assert all(cell is None or cell.activities == [] for cell in grid.cells)

    def test_leap_february(self, paris_trip: Trip) -> None:
        grid = build_calendar_grid(paris_trip, 2, 2024)
        assert len(grid.cells) - grid.leading_blanks == 29

    @pytest.mark.parametrize("month", [0, 13])
    def test_invalid_month(self, paris_trip: Trip, month: int) -> None:
        with pytest.raises(InvalidRange):
            build_calendar_grid(paris_trip, month, 2025)


def test_trip_months_spans_year_boundary() -> None:
    trip = Trip.create("New Year", date(2024, 12, 30), date(2025, 1, 2))
    assert trip_months(trip) == [(2024, 12), (2025, 1)]


def test_trip_months_single_month(paris_trip: Trip) -> None:
    assert trip_months(paris_trip) == [(2025, 6)]
