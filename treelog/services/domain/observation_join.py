"""
Domain service: cross-referencing spatial placements with growth observations.

Growth records sharing a tree code form the observation history of one tree.
A placement is joined to a single representative observation chosen by an
ObservationPolicy; a placement without any observation is a normal state and
maps to the 'unknown' status.
"""
from enum import Enum
from typing import Iterable, Literal, Optional, Sequence, Tuple
import logging
import numpy as np
from pydantic import BaseModel

from treelog.domain.models import GrowthRecord, SpatialRecord

logger = logging.getLogger(__name__)

StatusCategory = Literal["alive", "dead", "unknown"]

STATUS_COLORS: dict[str, str] = {
    "alive": "#22c55e",
    "dead": "#ef4444",
    "unknown": "#9ca3af",
}


class ObservationPolicy(str, Enum):
    """Which observation represents a tree with several survey entries."""
    LATEST = "latest"
    FIRST_LOADED = "first_loaded"


class MapMarker(BaseModel):
    """A placement ready to be drawn on the map."""
    tree_code: str
    lat: float
    lng: float
    status: StatusCategory
    color: str
    tag_label: Optional[str] = None
    species_name: Optional[str] = None
    plot_code: Optional[str] = None
    dbh_cm: Optional[float] = None
    height_m: Optional[float] = None
    survey_date: Optional[str] = None


def resolve_growth_for(
    spatial_record: SpatialRecord,
    growth_records: Sequence[GrowthRecord],
    policy: ObservationPolicy = ObservationPolicy.LATEST,
) -> Optional[GrowthRecord]:
    """
    Find the growth observation that represents a placed tree.

    Args:
        spatial_record: Placement to resolve
        growth_records: Growth records in load order
        policy: LATEST picks the most recent survey_date (later-loaded entry
            on ties); FIRST_LOADED picks the first match in load order

    Returns:
        Matching GrowthRecord, or None when the tree has no observation yet
    """
    resolved = None
    for record in growth_records:
        if record.tree_code != spatial_record.tree_code:
            continue
        if policy == ObservationPolicy.FIRST_LOADED:
            return record
        if resolved is None or record.survey_date >= resolved.survey_date:
            resolved = record
    return resolved


def current_placements(spatial_records: Iterable[SpatialRecord]) -> list[SpatialRecord]:
    """
    Reduce placements to one per tree code.

    The last-loaded placement of a tree wins; the result is ordered by the
    first appearance of each tree code.
    """
    by_code: dict[str, SpatialRecord] = {}
    duplicates = 0
    for record in spatial_records:
        if record.tree_code in by_code:
            duplicates += 1
        by_code[record.tree_code] = record

    if duplicates:
        logger.warning(f"Found {duplicates} duplicate placements; using the last-loaded entry")
    return list(by_code.values())


def status_category(record: Optional[GrowthRecord]) -> StatusCategory:
    if record is None or record.status is None:
        return "unknown"
    return record.status


def build_map_markers(
    spatial_records: Sequence[SpatialRecord],
    growth_records: Sequence[GrowthRecord],
    policy: ObservationPolicy = ObservationPolicy.LATEST,
) -> list[MapMarker]:
    """
    Join placements with observations and color them by survival status.

    Placements without derived lat/lng are skipped.

    Args:
        spatial_records: Placements with derived lat/lng
        growth_records: Growth records in load order
        policy: Observation selection policy

    Returns:
        One marker per placed tree
    """
    markers = []
    for placement in current_placements(spatial_records):
        if placement.lat is None or placement.lng is None:
            continue

        growth = resolve_growth_for(placement, growth_records, policy)
        category = status_category(growth)
        markers.append(MapMarker(
            tree_code=placement.tree_code,
            lat=placement.lat,
            lng=placement.lng,
            status=category,
            color=STATUS_COLORS[category],
            tag_label=growth.tag_label if growth else placement.tag_label,
            species_name=growth.species_name if growth else placement.species_name,
            plot_code=growth.plot_code if growth else (placement.plot_code or None),
            dbh_cm=growth.dbh_cm if growth else None,
            height_m=growth.height_m if growth else None,
            survey_date=growth.survey_date.isoformat() if growth else None,
        ))

    unresolved = sum(1 for m in markers if m.status == "unknown")
    logger.debug(f"Built {len(markers)} map markers ({unresolved} without known status)")
    return markers


def map_center(
    markers: Sequence[MapMarker],
    default: Tuple[float, float],
) -> Tuple[float, float]:
    """Mean position of the markers, or the default when there are none."""
    if not markers:
        return default
    lats = np.array([m.lat for m in markers])
    lngs = np.array([m.lng for m in markers])
    return float(lats.mean()), float(lngs.mean())


def observation_history(
    tree_code: str,
    growth_records: Iterable[GrowthRecord],
) -> list[GrowthRecord]:
    """Observations of one tree ordered by survey date, load order on ties."""
    history = [r for r in growth_records if r.tree_code == tree_code]
    return sorted(history, key=lambda r: r.survey_date)
