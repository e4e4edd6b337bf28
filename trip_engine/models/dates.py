"""Calendar date ranges."""

import math
from collections.abc import Iterator
from datetime import date, datetime, time, timedelta

from pydantic import BaseModel, ConfigDict, model_validator

from trip_engine.errors import InvalidRange

_ONE_DAY = timedelta(days=1)


def as_date(value: date | datetime) -> date:
    """Reduce a datetime to its calendar date; dates pass through."""
    if isinstance(value, datetime):
        return value.date()
    return value


def _as_datetime(value: date | datetime) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, time.min)


class DateWindow(BaseModel):
    """Date range with start strictly before end."""

    model_config = ConfigDict(frozen=True)

    start: date
    end: date

    @model_validator(mode="after")
    def validate_end_after_start(self) -> "DateWindow":
        """Ensure end > start."""
        if self.end <= self.start:
            raise InvalidRange(f"end must be after start: {self.start} .. {self.end}")
        return self

    @classmethod
    def create(cls, start: date | datetime, end: date | datetime) -> "DateWindow":
        """Build a window, raising InvalidRange (not ValidationError) if end <= start.

        Datetimes are compared as given and then reduced to dates. A range that
        starts and ends on the same calendar day (09:00 to 17:00) becomes a
        one-day window ending the next day, so duration_days() == 1.
        """
        if _as_datetime(end) <= _as_datetime(start):
            raise InvalidRange(f"end must be after start: {start} .. {end}")

        start_day, end_day = as_date(start), as_date(end)
        if end_day == start_day:
            end_day = start_day + _ONE_DAY
        return cls(start=start_day, end=end_day)

    def duration_days(self) -> int:
        """Trip-length day count; a window within one calendar day counts as 1."""
        return math.ceil((self.end - self.start) / _ONE_DAY)

    def contains(self, day: date | datetime) -> bool:
        """True if start <= day <= end (both ends inclusive)."""
        return self.start <= as_date(day) <= self.end

    def overlaps(self, other: "DateWindow") -> bool:
        """True if the two closed ranges share at least one day."""
        return self.start <= other.end and other.start <= self.end

    def days(self) -> Iterator[date]:
        """Iterate every date from start to end inclusive."""
        current = self.start
        while current <= self.end:
            yield current
            current += _ONE_DAY
