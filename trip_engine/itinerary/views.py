"""View models produced by the itinerary builder for presentation."""

from datetime import date

from pydantic import BaseModel, ConfigDict

from trip_engine.models.activity import Activity
from trip_engine.models.dates import DateWindow
from trip_engine.models.money import Money


class ActivityWithContext(BaseModel):
    """Activity plus where it sits in the trip."""

    model_config = ConfigDict(frozen=True)

    activity: Activity
    destination_index: int
    destination_name: str
    activity_index: int
    resolved_date: date | None


class DayGroup(BaseModel):
    """All dated activities that fall on one trip day."""

    day_number: int
    date: date
    activities: list[ActivityWithContext]

    def total(self) -> Money:
        return Money.sum(item.activity.budget for item in self.activities)


class DestinationGroup(BaseModel):
    """Activities of a single destination, dated or not."""

    destination_index: int
    name: str
    window: DateWindow | None
    budget_ceiling: Money | None
    activities: list[ActivityWithContext]

    def total(self) -> Money:
        return Money.sum(item.activity.budget for item in self.activities)


class CalendarCell(BaseModel):
    """One day of a month grid."""

    date: date
    activities: list[ActivityWithContext]
    in_trip: bool

    @property
    def day(self) -> int:
        return self.date.day

    def total(self) -> Money:
        return Money.sum(item.activity.budget for item in self.activities)


class CalendarGrid(BaseModel):
    """Month grid: leading blanks, then one cell per day.

    Trailing blanks after the last day are not emitted, so the final week row
    may hold fewer than seven entries.
    """

    year: int
    month: int
    first_weekday: int
    cells: list[CalendarCell | None]

    @property
    def leading_blanks(self) -> int:
        return sum(1 for cell in self.cells if cell is None)

    def weeks(self) -> list[list[CalendarCell | None]]:
        """Cells split into rows of seven."""
        return [self.cells[i : i + 7] for i in range(0, len(self.cells), 7)]

    def cell_for(self, day: date) -> CalendarCell | None:
        for cell in self.cells:
            if cell is not None and cell.date == day:
                return cell
        return None
