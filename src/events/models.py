"""Shapes shared by every event provider."""

from __future__ import annotations

from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

EventCategory = Literal[
    "singles",
    "youth",
    "family",
    "couples",
    "nightlife",
    "food",
    "music",
    "community",
    "holiday",
    "sports",
]
EventSource = Literal["eventbrite", "ticketmaster", "rss"]


class CityInfo(BaseModel):
    """One city of the events directory."""

    model_config = ConfigDict(frozen=True)

    name: str
    slug: str
    county: str


class UnifiedEvent(BaseModel):
    """Normalized event; serialized with camelCase keys for the site."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    description: str = ""
    image: str
    source_url: Optional[str] = Field(default=None, alias="sourceUrl")
    start_date: Optional[str] = Field(default=None, alias="startDate")
    end_date: Optional[str] = Field(default=None, alias="endDate")
    city: str
    city_name: str = Field(alias="cityName")
    county: str
    category: EventCategory
    source: EventSource

    def to_api(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class LiveEvent(BaseModel):
    """Ticketmaster event as shown on the live regional feed."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    description: str = ""
    date: str
    time: Optional[str] = None
    image: str
    source_url: Optional[str] = Field(default=None, alias="sourceUrl")
    city: str
    county: Optional[str] = None
    category: str

    def to_api(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class RegionalEvent(BaseModel):
    """Item of a regional newspaper/tourism feed."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    description: str
    date: Optional[str] = None
    county: str
    category: str = "General"
    image: str
    link: Optional[str] = None
    source: str

    def to_api(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)
