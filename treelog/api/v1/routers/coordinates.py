"""
API router for coordinate and map endpoints.
"""
from fastapi import APIRouter, Query
from typing import Annotated, Optional

from treelog.api.dependencies import SurveyServiceDep
from treelog.api.v1.models.responses import (
    ConvertedCoordinate,
    CoordinatesResponse,
    MapMarkersResponse,
)
from treelog.config import settings
from treelog.utils.geo_projection import utm_to_latlng


router = APIRouter(
    tags=["coordinates"],
)


@router.get(
    "/coordinates",
    response_model=CoordinatesResponse,
    summary="List tree placements",
    description="Coordinate placements with latitude/longitude derived from UTM.",
)
async def list_coordinates(
    survey_service: SurveyServiceDep,
) -> CoordinatesResponse:
    placements = list(survey_service.state.spatial)
    return CoordinatesResponse(count=len(placements), results=placements)


@router.get(
    "/coordinates/convert",
    response_model=ConvertedCoordinate,
    summary="Convert a UTM coordinate",
    description="Convert a UTM easting/northing to latitude/longitude. "
                "Zone and hemisphere default to the survey area settings.",
    responses={400: {"description": "Unknown UTM zone or hemisphere"}},
)
async def convert_coordinate(
    utm_x: Annotated[float, Query(description="Easting in meters")],
    utm_y: Annotated[float, Query(description="Northing in meters")],
    zone: Annotated[Optional[int], Query(description="UTM zone (1-60)")] = None,
    hemisphere: Annotated[Optional[str], Query(description="N or S")] = None,
) -> ConvertedCoordinate:
    zone = zone if zone is not None else settings.utm_zone
    hemisphere = hemisphere or settings.utm_hemisphere
    lat, lng = utm_to_latlng(utm_x, utm_y, zone, hemisphere)
    return ConvertedCoordinate(
        utm_x=utm_x,
        utm_y=utm_y,
        zone=zone,
        hemisphere=hemisphere.upper(),
        latitude=lat,
        longitude=lng,
    )


@router.get(
    "/map/markers",
    response_model=MapMarkersResponse,
    summary="Map markers colored by status",
    description="""
    One marker per placed tree, joined with its representative growth
    observation. Trees without an observation are returned with status
    `unknown` and a neutral color.
    """,
)
async def map_markers(
    survey_service: SurveyServiceDep,
) -> MapMarkersResponse:
    markers, (center_lat, center_lng) = survey_service.map_markers()
    return MapMarkersResponse(
        center_latitude=center_lat,
        center_longitude=center_lng,
        marker_count=len(markers),
        markers=markers,
    )
