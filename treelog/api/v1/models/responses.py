"""
API response models using Pydantic.
"""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field

from treelog.domain.models import GrowthRecord, Notice, SpatialRecord, WriteOutcome
from treelog.services.domain.observation_join import MapMarker


class SyncResponse(BaseModel):
    """Response model for the sync endpoint."""
    growth_count: int = Field(description="Growth records held after the sync")
    spatial_count: int = Field(description="Coordinate placements held after the sync")
    last_synced_at: Optional[datetime] = Field(
        default=None,
        description="Time of the last fully successful sync"
    )
    notices: List[Notice]


class GrowthLogsResponse(BaseModel):
    """Response model for the growth table."""
    total: int = Field(description="Number of loaded growth records")
    count: int = Field(description="Number of records matching the filters")
    results: List[GrowthRecord]


class SubmissionResponse(BaseModel):
    """Response model for a growth submission."""
    outcome: WriteOutcome = Field(
        description="confirmed, failed, or unknown_pending_reload"
    )
    tree_code: str
    tag_label: str
    detail: str = ""
    notices: List[Notice]

    class Config:
        json_schema_extra = {
            "example": {
                "outcome": "confirmed",
                "tree_code": "P1A02014",
                "tag_label": "14 HMS1 03 (2) Burmese Padauk",
                "detail": "",
                "notices": [{"level": "success", "message": "Saved P1A02014"}],
            }
        }


class TreeHistoryResponse(BaseModel):
    """Observation history of one tree."""
    tree_code: str
    observations: List[GrowthRecord]


class CoordinatesResponse(BaseModel):
    """Response model for placements."""
    count: int
    results: List[SpatialRecord]


class ConvertedCoordinate(BaseModel):
    """Single converted coordinate."""
    utm_x: float
    utm_y: float
    zone: int
    hemisphere: str
    latitude: float = Field(
        description="Latitude coordinate in degrees",
        examples=[18.49]
    )
    longitude: float = Field(
        description="Longitude coordinate in degrees",
        examples=[98.38]
    )


class MapMarkersResponse(BaseModel):
    """Response model for the map layer."""
    center_latitude: float
    center_longitude: float
    marker_count: int
    markers: List[MapMarker]
