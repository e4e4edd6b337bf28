"""Trip - top-level itinerary container."""

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, Field, field_validator

from trip_engine.errors import IndexOutOfRange
from trip_engine.models.activity import Activity
from trip_engine.models.dates import DateWindow, as_date
from trip_engine.models.destination import Destination, DestinationPatch
from trip_engine.models.money import Money
from trip_engine.utils.logging import mutation_log


class TripStatus(str, Enum):
    """Lifecycle status derived from the trip window and the current date."""

    upcoming = "upcoming"
    ongoing = "ongoing"
    completed = "completed"


class Trip(BaseModel):
    """Trip with a date window and an ordered list of destinations.

    Totals and status are recomputed on every call; nothing derived is stored.
    """

    name: str
    description: str = ""
    window: DateWindow
    destinations: list[Destination] = Field(default_factory=list)
    cover_image: str | None = None

    @field_validator("name")
    @classmethod
    def validate_name_not_blank(cls, v: str) -> str:
        """Ensure name has visible characters."""
        v = v.strip()
        if not v:
            raise ValueError("trip name must not be empty")
        return v

    @classmethod
    def create(
        cls,
        name: str,
        start: date | datetime,
        end: date | datetime,
        *,
        description: str = "",
        cover_image: str | None = None,
        destinations: list[Destination] | None = None,
    ) -> "Trip":
        """Build a trip; raises InvalidRange if end <= start."""
        return cls(
            name=name,
            description=description,
            window=DateWindow.create(start, end),
            destinations=list(destinations or []),
            cover_image=cover_image,
        )

    @property
    def start(self) -> date:
        return self.window.start

    @property
    def end(self) -> date:
        return self.window.end

    def _check_index(self, index: int, operation: str) -> None:
        if not 0 <= index < len(self.destinations):
            mutation_log.log_mutation(
                entity="trip",
                operation=operation,
                outcome="rejected",
                name=self.name,
                reason="index_out_of_range",
                index=index,
                size=len(self.destinations),
            )
            raise IndexOutOfRange("destination", index, len(self.destinations))

    # Destination mutations

    def add_destination(self, destination: Destination) -> list[Destination]:
        self.destinations.append(destination)
        mutation_log.log_mutation(
            entity="trip",
            operation="add_destination",
            outcome="accepted",
            name=self.name,
            destination=destination.name,
        )
        return list(self.destinations)

    def remove_destination(self, index: int) -> Destination:
        """Remove a destination together with all of its activities."""
        self._check_index(index, "remove_destination")
        removed = self.destinations.pop(index)
        mutation_log.log_mutation(
            entity="trip",
            operation="remove_destination",
            outcome="accepted",
            name=self.name,
            destination=removed.name,
            activities_removed=len(removed.activities),
        )
        return removed

    def update_destination(self, index: int, patch: DestinationPatch) -> Destination:
        self._check_index(index, "update_destination")
        return self.destinations[index].apply(patch)

    # Activity mutations routed to the owning destination

    def add_activity(self, destination_index: int, activity: Activity) -> list[Activity]:
        self._check_index(destination_index, "add_activity")
        return self.destinations[destination_index].add_activity(activity)

    def remove_activity(self, destination_index: int, activity_index: int) -> list[Activity]:
        self._check_index(destination_index, "remove_activity")
        return self.destinations[destination_index].remove_activity(activity_index)

    # Derived values

    def status(self, now: date | datetime) -> TripStatus:
        """Derive status from the window; `now` is always supplied by the caller."""
        today = as_date(now)
        if today < self.window.start:
            return TripStatus.upcoming
        if today > self.window.end:
            return TripStatus.completed
        return TripStatus.ongoing

    def duration_days(self) -> int:
        return self.window.duration_days()

    def total_budget(self) -> Money:
        """Sum of destination ceilings, falling back to activity totals where no ceiling is set."""
        return Money.sum(
            d.budget_ceiling if d.has_ceiling and d.budget_ceiling is not None
            else d.total_activity_budget()
            for d in self.destinations
        )

    def total_activity_budget(self) -> Money:
        """Sum of every activity budget across all destinations."""
        return Money.sum(d.total_activity_budget() for d in self.destinations)

    def total_activities(self) -> int:
        return sum(len(d.activities) for d in self.destinations)

    def iter_activities(self) -> list[tuple[int, Destination, int, Activity]]:
        """Every activity with its destination and positions, in display order."""
        return [
            (dest_index, destination, act_index, activity)
            for dest_index, destination in enumerate(self.destinations)
            for act_index, activity in enumerate(destination.activities)
        ]
