"""Conversion between stored JSON documents and engine models.

Stored trips use camelCase keys, dates as ISO strings (sometimes full
timestamps), budgets as free-form currency strings, and activities either as
bare strings (legacy) or as {name, day, time, budget} objects. All of that is
normalized here, once, so the engine only ever sees typed values.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from trip_engine.models.activity import Activity
from trip_engine.models.dates import DateWindow
from trip_engine.models.destination import Destination
from trip_engine.models.money import Money
from trip_engine.models.trip import Trip


def _coerce_date(value: Any) -> Any:
    """Accept 'YYYY-MM-DD', full ISO timestamps and datetimes; blank means None."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if len(text) > 10:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        return date.fromisoformat(text)
    return value


DocumentDate = Annotated[date | None, BeforeValidator(_coerce_date)]
RawAmount = str | int | float | None


class ActivityDocument(BaseModel):
    """Stored activity object."""

    model_config = ConfigDict(extra="ignore")

    name: str
    day: int | None = None
    time: str | None = None
    budget: RawAmount = "0"


class DestinationDocument(BaseModel):
    """Stored destination section."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    name: str
    start_date: DocumentDate = Field(default=None, alias="startDate")
    end_date: DocumentDate = Field(default=None, alias="endDate")
    budget: RawAmount = ""
    activities: list[ActivityDocument | str] = Field(default_factory=list)
    notes: str | None = ""


class TripDocument(BaseModel):
    """Stored trip."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    trip_name: str = Field(alias="tripName")
    description: str = ""
    start_date: DocumentDate = Field(alias="startDate")
    end_date: DocumentDate = Field(alias="endDate")
    cover_photo: str | None = Field(default="", alias="coverPhoto")
    destinations: list[DestinationDocument] = Field(default_factory=list)


def _parse_amount(raw: RawAmount) -> Money | None:
    """Stored amount as Money; None for a missing or blank amount."""
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return None
    if isinstance(raw, float):
        # Numbers from JSON are major units; repr() keeps the written digits
        # but may use exponent notation ("1e+16"), so go through Decimal
        return Money.parse(Decimal(repr(raw)))
    return Money.parse(raw)


def activity_from_document(doc: ActivityDocument | str) -> Activity:
    """Normalize one stored activity; bare strings become undated, zero-budget activities."""
    if isinstance(doc, str):
        return Activity.from_name(doc)
    budget = _parse_amount(doc.budget)
    return Activity(
        name=doc.name,
        day_index=doc.day,
        time_of_day=doc.time,
        budget=budget if budget is not None else Money.zero(),
    )


def destination_from_document(doc: DestinationDocument) -> Destination:
    """Normalize one stored destination.

    Activities are loaded as stored, without re-checking the ceiling: the
    ceiling may have been lowered after they were added.
    """
    window = None
    if doc.start_date is not None and doc.end_date is not None:
        window = DateWindow.create(doc.start_date, doc.end_date)

    return Destination(
        name=doc.name,
        window=window,
        budget_ceiling=_parse_amount(doc.budget),
        activities=[activity_from_document(a) for a in doc.activities],
        notes=doc.notes or None,
    )


def trip_from_document(raw: dict[str, Any]) -> Trip:
    """Build a Trip from a stored JSON document.

    Raises:
        pydantic.ValidationError: If the document shape is wrong
        InvalidRange: If a trip or destination window is empty or inverted
        InvalidAmount: If a stored budget is not a valid amount
    """
    doc = TripDocument.model_validate(raw)
    if doc.start_date is None or doc.end_date is None:
        raise ValueError("trip document requires startDate and endDate")

    return Trip(
        name=doc.trip_name,
        description=doc.description,
        window=DateWindow.create(doc.start_date, doc.end_date),
        destinations=[destination_from_document(d) for d in doc.destinations],
        cover_image=doc.cover_photo or None,
    )


def activity_to_document(activity: Activity) -> dict[str, Any]:
    return {
        "name": activity.name,
        "day": activity.day_index,
        "time": activity.time_of_day or "",
        "budget": activity.budget.format(),
    }


def destination_to_document(destination: Destination) -> dict[str, Any]:
    window = destination.window
    return {
        "name": destination.name,
        "startDate": window.start.isoformat() if window else None,
        "endDate": window.end.isoformat() if window else None,
        "budget": destination.budget_ceiling.format() if destination.budget_ceiling else "",
        "activities": [activity_to_document(a) for a in destination.activities],
        "notes": destination.notes or "",
    }


def trip_to_document(trip: Trip) -> dict[str, Any]:
    """Serialize a Trip into the stored JSON document shape."""
    return {
        "tripName": trip.name,
        "description": trip.description,
        "startDate": trip.window.start.isoformat(),
        "endDate": trip.window.end.isoformat(),
        "coverPhoto": trip.cover_image or "",
        "destinations": [destination_to_document(d) for d in trip.destinations],
    }
