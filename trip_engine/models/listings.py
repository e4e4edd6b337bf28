"""Listing models - community posts, catalog trips, catalog activities and cities.

These are inputs to the query pipeline only; their CRUD lives elsewhere.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from trip_engine.models.dates import DateWindow
from trip_engine.models.money import MoneyField


class Continent(str, Enum):
    """Continent of a catalog trip (empty when unknown)."""

    africa = "Africa"
    antarctica = "Antarctica"
    asia = "Asia"
    europe = "Europe"
    north_america = "North America"
    oceania = "Oceania"
    south_america = "South America"
    unknown = ""


class CatalogCategory(str, Enum):
    """Curation bucket for a catalog trip."""

    recommended = "recommended"
    popular = "popular"
    featured = "featured"


class CommunityPost(BaseModel):
    """Traveler post shared with the community."""

    user_name: str
    place_name: str
    location: str
    description: str
    tips: str | None = None
    image_url: str | None = None
    created_at: datetime

    @property
    def city(self) -> str:
        """First component of "City, Country" locations."""
        return self.location.split(",")[0].strip()


class CatalogTrip(BaseModel):
    """Curated trip package offered to all users."""

    destination: str
    country: str = ""
    continent: Continent = Continent.asia
    description: str
    window: DateWindow
    price: MoneyField
    category: CatalogCategory = CatalogCategory.recommended
    activities: list[str] = Field(default_factory=list)
    special_offer: int = Field(default=0, ge=0, le=100, description="Discount percent")
    recommended_by_travelers: bool = False
    is_active: bool = True


class CatalogActivity(BaseModel):
    """Bookable activity in the activity catalog."""

    title: str
    location: str
    price: MoneyField
    rating: float = Field(default=0.0, ge=0, le=5)
    category: str = ""
    duration_hours: float = Field(default=0.0, ge=0)
    description: str = ""

    @property
    def city(self) -> str:
        """First component of "City, Country" locations."""
        return self.location.split(",")[0].strip()


class City(BaseModel):
    """Destination city as listed on the city search screen."""

    name: str
    country: str
    average_cost: MoneyField
    rating: float = Field(default=0.0, ge=0, le=5)
    description: str = ""
