"""
Domain models for tree survey records.

These models represent the core domain entities and should be independent
of any infrastructure concerns (API clients, databases, etc.). Field names
match the columns of the remote record store.
"""
from datetime import date, datetime
from enum import Enum
from typing import Literal, Optional, Union
from zoneinfo import ZoneInfo
from pydantic import BaseModel, Field, field_validator

from treelog.config import settings


TreeStatus = Literal["alive", "dead"]
SpeciesGroup = Literal["A", "B"]


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


class GrowthRecord(BaseModel):
    """One survey observation of one tree at one point in time."""
    tree_code: str = Field(min_length=1)
    tag_label: str
    plot_code: str = Field(min_length=1)
    species_code: str = Field(min_length=1)
    species_group: SpeciesGroup
    species_name: str = ""
    tree_number: int = Field(ge=1)
    row_main: str
    row_sub: str
    dbh_cm: Optional[float] = Field(default=None, description="Diameter at breast height in cm")
    height_m: Optional[float] = Field(default=None, description="Tree height in m")
    status: Optional[TreeStatus] = None
    note: str = ""
    recorder: str = ""
    survey_date: date
    log_id: Optional[str] = None
    timestamp: Optional[str] = None

    class Config:
        coerce_numbers_to_str = True
        frozen = True

    @field_validator("dbh_cm", "height_m", "status", "log_id", "timestamp", mode="before")
    @classmethod
    def _nullable_blank(cls, value):
        return _blank_to_none(value)

    @field_validator("note", "recorder", "species_name", mode="before")
    @classmethod
    def _text_default(cls, value):
        return "" if value is None else value

    @field_validator("survey_date", mode="before")
    @classmethod
    def _date_part(cls, value):
        # Sheets serialise date cells as UTC instants of local midnight
        if isinstance(value, str) and "T" in value:
            moment = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
            if moment.tzinfo is not None:
                moment = moment.astimezone(ZoneInfo(settings.store_timezone))
            return moment.date()
        return value


class SpatialRecord(BaseModel):
    """
    One coordinate placement for a tree.

    lat/lng are derived from utm_x/utm_y by the record store on load;
    values arriving from the wire are only a cache.
    """
    tree_code: str = Field(min_length=1)
    plot_code: str = ""
    utm_x: float = Field(description="UTM easting in meters")
    utm_y: float = Field(description="UTM northing in meters")
    lat: Optional[float] = None
    lng: Optional[float] = None
    note: str = ""
    tag_label: Optional[str] = None
    species_code: Optional[str] = None
    species_group: Optional[str] = None
    species_name: Optional[str] = None
    tree_number: Optional[Union[int, str]] = None
    row_main: Optional[str] = None
    row_sub: Optional[str] = None

    class Config:
        coerce_numbers_to_str = True
        frozen = True

    @field_validator(
        "lat", "lng", "tag_label", "species_code", "species_group",
        "species_name", "tree_number", "row_main", "row_sub",
        mode="before",
    )
    @classmethod
    def _nullable_blank(cls, value):
        return _blank_to_none(value)

    @field_validator("plot_code", "note", mode="before")
    @classmethod
    def _text_default(cls, value):
        return "" if value is None else value


class SpeciesInfo(BaseModel):
    """Species catalog entry."""
    code: str
    name: str
    group: SpeciesGroup


class PlotInfo(BaseModel):
    """Plot catalog entry."""
    code: str
    name: str
    short: str


class WriteOutcome(str, Enum):
    """Result of appending a record to the remote store."""
    CONFIRMED = "confirmed"
    FAILED = "failed"
    UNKNOWN_PENDING_RELOAD = "unknown_pending_reload"


class Notice(BaseModel):
    """Transient user-facing notification."""
    level: Literal["info", "success", "error"] = "info"
    message: str
