"""Query schemas for the trip, activity, community-post and catalog listings.

Each listing screen keeps its own field set and group-ordering policy; the
filter/sort/group mechanics all come from the shared pipeline.
"""

from datetime import date, datetime

from trip_engine.itinerary.views import ActivityWithContext
from trip_engine.models.listings import CatalogActivity, CatalogTrip, City, CommunityPost
from trip_engine.models.trip import Trip
from trip_engine.query.pipeline import (
    GroupKey,
    GroupOrder,
    QuerySchema,
    SortDirection,
    SortKey,
)


def trip_schema(now: date | datetime) -> QuerySchema[Trip]:
    """Schema for the user's trip list; status is derived against `now`."""
    return QuerySchema(
        fields={
            "name": lambda t: t.name,
            "description": lambda t: t.description,
            "destinations": lambda t: [d.name for d in t.destinations],
            "status": lambda t: t.status(now),
            "start": lambda t: t.window.start,
            "end": lambda t: t.window.end,
            "duration_days": lambda t: t.duration_days(),
            "total_budget": lambda t: t.total_budget(),
            "total_activities": lambda t: t.total_activities(),
        },
        search_fields=("name", "description", "destinations"),
    )


ACTIVITY_SCHEMA: QuerySchema[ActivityWithContext] = QuerySchema(
    fields={
        "name": lambda a: a.activity.name,
        "destination": lambda a: a.destination_name,
        "day": lambda a: a.activity.day_index,
        "date": lambda a: a.resolved_date,
        "time": lambda a: a.activity.time_of_day,
        "budget": lambda a: a.activity.budget,
    },
    search_fields=("name", "destination"),
)

POST_SCHEMA: QuerySchema[CommunityPost] = QuerySchema(
    fields={
        "place_name": lambda p: p.place_name,
        "location": lambda p: p.location,
        "city": lambda p: p.city,
        "description": lambda p: p.description,
        "tips": lambda p: p.tips,
        "user_name": lambda p: p.user_name,
        "created_at": lambda p: p.created_at,
    },
    search_fields=("place_name", "location", "description"),
)

CATALOG_SCHEMA: QuerySchema[CatalogTrip] = QuerySchema(
    fields={
        "destination": lambda c: c.destination,
        "country": lambda c: c.country,
        "description": lambda c: c.description,
        "continent": lambda c: c.continent.value,
        "category": lambda c: c.category,
        "price": lambda c: c.price,
        "start": lambda c: c.window.start,
        "recommended": lambda c: c.recommended_by_travelers,
        "active": lambda c: c.is_active,
    },
    search_fields=("destination", "country", "description"),
)

CATALOG_ACTIVITY_SCHEMA: QuerySchema[CatalogActivity] = QuerySchema(
    fields={
        "title": lambda a: a.title,
        "location": lambda a: a.location,
        "city": lambda a: a.city,
        "category": lambda a: a.category,
        "price": lambda a: a.price,
        "rating": lambda a: a.rating,
        "duration_hours": lambda a: a.duration_hours,
    },
    search_fields=("title", "location"),
)

CITY_SCHEMA: QuerySchema[City] = QuerySchema(
    fields={
        "name": lambda c: c.name,
        "country": lambda c: c.country,
        "cost": lambda c: c.average_cost,
        "rating": lambda c: c.rating,
    },
    search_fields=("name", "country"),
)

# Sort dropdown presets
SORT_PRESETS: dict[str, SortKey] = {
    "newest": SortKey("created_at", SortDirection.desc),
    "oldest": SortKey("created_at", SortDirection.asc),
    "price_asc": SortKey("price", SortDirection.asc),
    "price_desc": SortKey("price", SortDirection.desc),
    "date": SortKey("date", SortDirection.asc),
    "cost": SortKey("budget", SortDirection.desc),
    "rating": SortKey("rating", SortDirection.desc),
    "popularity": SortKey("rating", SortDirection.desc),
    "cost_asc": SortKey("cost", SortDirection.asc),
    "cost_desc": SortKey("cost", SortDirection.desc),
}

# Continents read alphabetically; locations, countries and days keep first-seen order
GROUP_BY_CONTINENT = GroupKey("continent", GroupOrder.alphabetical)
GROUP_BY_CITY = GroupKey("city", GroupOrder.first_seen)
GROUP_BY_DESTINATION = GroupKey("destination", GroupOrder.first_seen)
GROUP_BY_DAY = GroupKey("day", GroupOrder.first_seen)
GROUP_BY_LOCATION = GroupKey("location", GroupOrder.first_seen)
GROUP_BY_COUNTRY = GroupKey("country", GroupOrder.first_seen)
