"""Itinerary builder - day-wise, per-destination and calendar views of a trip."""

import calendar
from datetime import date, timedelta

from trip_engine.config import get_settings
from trip_engine.errors import InvalidRange
from trip_engine.itinerary.views import (
    ActivityWithContext,
    CalendarCell,
    CalendarGrid,
    DayGroup,
    DestinationGroup,
)
from trip_engine.models.money import Money
from trip_engine.models.trip import Trip
from trip_engine.query.pipeline import (
    QuerySpec,
    SortKey,
    at_least,
    evaluate,
    filter_items,
    group_items,
    sort_items,
)
from trip_engine.query.surfaces import ACTIVITY_SCHEMA, GROUP_BY_DAY


def contextualize(trip: Trip) -> list[ActivityWithContext]:
    """Every activity of the trip in destination-then-insertion order.

    Undated activities get resolved_date=None rather than an error.
    """
    return [
        ActivityWithContext(
            activity=activity,
            destination_index=dest_index,
            destination_name=destination.name,
            activity_index=act_index,
            resolved_date=activity.resolved_date(trip.start) if activity.is_dated else None,
        )
        for dest_index, destination, act_index, activity in trip.iter_activities()
    ]


def build_day_wise_view(trip: Trip) -> list[DayGroup]:
    """Group dated activities by day index, ascending.

    Within a day, activities keep destination order then insertion order.
    Activities without a day index are left out.
    """
    dated = filter_items(
        contextualize(trip), QuerySpec(filters={"day": at_least(1)}), ACTIVITY_SCHEMA
    )
    by_day = sort_items(dated, SortKey("day"), ACTIVITY_SCHEMA)
    grouped = group_items(by_day, GROUP_BY_DAY, ACTIVITY_SCHEMA)

    return [
        DayGroup(
            day_number=day_number,
            date=trip.start + timedelta(days=day_number - 1),
            activities=items,
        )
        for day_number, items in grouped.items()
    ]


def group_by_destination(trip: Trip) -> list[DestinationGroup]:
    """One group per destination in trip order, including empty ones."""
    items = contextualize(trip)
    return [
        DestinationGroup(
            destination_index=index,
            name=destination.name,
            window=destination.window,
            budget_ceiling=destination.budget_ceiling,
            activities=[item for item in items if item.destination_index == index],
        )
        for index, destination in enumerate(trip.destinations)
    ]


def activity_listing(trip: Trip, spec: QuerySpec) -> list[ActivityWithContext] | dict:
    """Search/sort/group the trip's activities with the shared pipeline."""
    return evaluate(contextualize(trip), spec, ACTIVITY_SCHEMA)


def day_total(day_group: DayGroup) -> Money:
    """Sum of the budgets of one day's activities."""
    return day_group.total()


def build_calendar_grid(
    trip: Trip,
    month: int,
    year: int,
    *,
    first_weekday: int | None = None,
) -> CalendarGrid:
    """Month grid of the trip's dated activities.

    Args:
        trip: Trip to render
        month: 1-12
        year: Calendar year
        first_weekday: Weekday of the first column (0=Monday ... 6=Sunday);
            defaults to the configured calendar_first_weekday

    Returns:
        Grid with leading None cells for the weekday offset of the 1st, then
        one cell per day of the month. No trailing padding.

    Raises:
        InvalidRange: If month or year is out of range
    """
    if not 1 <= month <= 12:
        raise InvalidRange(f"month must be 1-12, got {month}")
    if not 1 <= year <= 9999:
        raise InvalidRange(f"year must be 1-9999, got {year}")
    if first_weekday is None:
        first_weekday = get_settings().calendar_first_weekday

    first_of_month = date(year, month, 1)
    leading = (first_of_month.weekday() - first_weekday) % 7
    _, days_in_month = calendar.monthrange(year, month)

    by_date: dict[date, list[ActivityWithContext]] = {}
    for item in contextualize(trip):
        if item.resolved_date is not None:
            by_date.setdefault(item.resolved_date, []).append(item)

    cells: list[CalendarCell | None] = [None] * leading
    for offset in range(days_in_month):
        day = first_of_month + timedelta(days=offset)
        cells.append(
            CalendarCell(
                date=day,
                activities=by_date.get(day, []),
                in_trip=trip.window.contains(day),
            )
        )

    return CalendarGrid(year=year, month=month, first_weekday=first_weekday, cells=cells)


def trip_months(trip: Trip) -> list[tuple[int, int]]:
    """(year, month) pairs touched by the trip window, for calendar paging."""
    months: list[tuple[int, int]] = []
    year, month = trip.start.year, trip.start.month
    while (year, month) <= (trip.end.year, trip.end.month):
        months.append((year, month))
        year, month = (year + 1, 1) if month == 12 else (year, month + 1)
    return months
