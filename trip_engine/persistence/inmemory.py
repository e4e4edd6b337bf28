"""In-memory trip repository with ownership checks and per-trip locks."""

import itertools
import logging
import threading
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any

from trip_engine.models.trip import Trip
from trip_engine.persistence.context import RequestContext
from trip_engine.persistence.documents import trip_from_document, trip_to_document

logger = logging.getLogger(__name__)


class TripNotFoundError(LookupError):
    """Trip does not exist or belongs to another user."""

    pass


@dataclass
class StoredTrip:
    """Stored trip record."""

    trip_id: uuid.UUID
    user_id: uuid.UUID
    document: dict[str, Any]
    version: int
    sequence: int


class InMemoryTripRepository:
    """In-memory implementation of a trip store.

    Trips are held as JSON-shaped documents, so every read hands out a fresh
    Trip and callers never share an object graph. Edits to one trip are
    serialized by a lock per trip.
    """

    def __init__(self) -> None:
        self._trips: dict[uuid.UUID, StoredTrip] = {}
        self._locks: dict[uuid.UUID, threading.Lock] = {}
        self._registry_lock = threading.Lock()
        self._sequence = itertools.count()

    def _owned(self, trip_id: uuid.UUID, ctx: RequestContext) -> StoredTrip | None:
        record = self._trips.get(trip_id)
        if record is None:
            return None

        # Enforce ownership
        if record.user_id != ctx.user_id:
            return None

        return record

    def create_trip(self, trip: Trip, ctx: RequestContext) -> uuid.UUID:
        """Store a new trip owned by the acting user."""
        trip_id = uuid.uuid4()
        with self._registry_lock:
            self._trips[trip_id] = StoredTrip(
                trip_id=trip_id,
                user_id=ctx.user_id,
                document=trip_to_document(trip),
                version=1,
                sequence=next(self._sequence),
            )
            self._locks[trip_id] = threading.Lock()

        logger.info(
            "Trip created",
            extra={"structured": {"trip_id": str(trip_id), "user_id": str(ctx.user_id)}},
        )
        return trip_id

    def get_trip(self, trip_id: uuid.UUID, ctx: RequestContext) -> Trip | None:
        """Load a trip, or None if missing or not owned by the acting user."""
        record = self._owned(trip_id, ctx)
        if record is None:
            return None
        return trip_from_document(record.document)

    def get_version(self, trip_id: uuid.UUID, ctx: RequestContext) -> int | None:
        record = self._owned(trip_id, ctx)
        return record.version if record else None

    def save_trip(self, trip_id: uuid.UUID, trip: Trip, ctx: RequestContext) -> int:
        """Overwrite a stored trip and return its new version.

        Raises:
            TripNotFoundError: If the trip is missing or not owned by the acting user
        """
        record = self._owned(trip_id, ctx)
        if record is None:
            raise TripNotFoundError(str(trip_id))

        record.document = trip_to_document(trip)
        record.version += 1
        return record.version

    def delete_trip(self, trip_id: uuid.UUID, ctx: RequestContext) -> bool:
        """Delete a trip with all of its destinations and activities."""
        with self._registry_lock:
            if self._owned(trip_id, ctx) is None:
                return False
            del self._trips[trip_id]
            del self._locks[trip_id]

        logger.info("Trip deleted", extra={"structured": {"trip_id": str(trip_id)}})
        return True

    def list_trips(self, ctx: RequestContext) -> list[tuple[uuid.UUID, Trip]]:
        """All trips of the acting user, most recently created first."""
        with self._registry_lock:
            records = [r for r in self._trips.values() if r.user_id == ctx.user_id]
        records.sort(key=lambda r: r.sequence, reverse=True)
        return [(r.trip_id, trip_from_document(r.document)) for r in records]

    @contextmanager
    def edit(self, trip_id: uuid.UUID, ctx: RequestContext) -> Iterator[Trip]:
        """Hold the trip's lock while the caller mutates it; save on clean exit.

        If the block raises (for example BudgetExceeded), nothing is saved and
        the error propagates.

        Raises:
            TripNotFoundError: If the trip is missing or not owned by the acting user
        """
        with self._registry_lock:
            lock = self._locks.get(trip_id)
        if lock is None or self._owned(trip_id, ctx) is None:
            raise TripNotFoundError(str(trip_id))

        with lock:
            trip = self.get_trip(trip_id, ctx)
            if trip is None:
                raise TripNotFoundError(str(trip_id))
            yield trip
            self.save_trip(trip_id, trip, ctx)
