"""Activity - leaf unit of an itinerary."""

import re
from datetime import date, timedelta

from pydantic import BaseModel, ConfigDict, Field, field_validator

from trip_engine.errors import NoDayIndex
from trip_engine.models.money import Money, MoneyField

_TIME_OF_DAY_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


class Activity(BaseModel):
    """Single planned item inside a destination."""

    model_config = ConfigDict(frozen=True)

    name: str
    day_index: int | None = Field(default=None, ge=1, description="1-based, relative to trip start")
    time_of_day: str | None = Field(default=None, description="24h 'HH:MM'")
    budget: MoneyField = Field(default_factory=Money.zero)

    @field_validator("name")
    @classmethod
    def validate_name_not_blank(cls, v: str) -> str:
        """Ensure name has visible characters."""
        v = v.strip()
        if not v:
            raise ValueError("activity name must not be empty")
        return v

    @field_validator("time_of_day")
    @classmethod
    def validate_time_of_day(cls, v: str | None) -> str | None:
        """Ensure HH:MM in 24h clock; blank means no time."""
        if v is None:
            return None
        v = v.strip()
        if not v:
            return None
        if not _TIME_OF_DAY_RE.match(v):
            raise ValueError(f"time_of_day must be HH:MM, got {v!r}")
        return v

    @field_validator("budget")
    @classmethod
    def validate_budget_non_negative(cls, v: Money) -> Money:
        """Budgets are never negative."""
        if v.amount_cents < 0:
            raise ValueError("activity budget must not be negative")
        return v

    @classmethod
    def from_name(cls, name: str) -> "Activity":
        """Normalize a legacy bare-string activity."""
        return cls(name=name)

    @property
    def is_dated(self) -> bool:
        return self.day_index is not None

    def resolved_date(self, trip_start: date) -> date:
        """Calendar date of this activity: trip_start + (day_index - 1) days.

        Raises:
            NoDayIndex: If the activity has no day index
        """
        if self.day_index is None:
            raise NoDayIndex(self.name)
        return trip_start + timedelta(days=self.day_index - 1)
