"""Models package - re-exports for convenience."""

from trip_engine.models.activity import Activity
from trip_engine.models.dates import DateWindow
from trip_engine.models.destination import Destination, DestinationPatch
from trip_engine.models.listings import (
    CatalogActivity,
    CatalogCategory,
    CatalogTrip,
    City,
    CommunityPost,
    Continent,
)
from trip_engine.models.money import Money, MoneyField
from trip_engine.models.trip import Trip, TripStatus

__all__ = [
    # Values
    "Money",
    "MoneyField",
    "DateWindow",
    # Itinerary
    "Activity",
    "Destination",
    "DestinationPatch",
    "Trip",
    "TripStatus",
    # Listings
    "CommunityPost",
    "CatalogTrip",
    "CatalogCategory",
    "Continent",
    "CatalogActivity",
    "City",
]
