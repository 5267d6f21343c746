"""
Domain service: survey statistics for reporting.

Statistics are recomputed from scratch on every call. Collection sizes are
bounded by manual field-survey volume.
"""
from collections import Counter
from fractions import Fraction
from typing import Iterable, Sequence
import logging
from pydantic import BaseModel

from treelog.domain.models import GrowthRecord, SpatialRecord

logger = logging.getLogger(__name__)


class BreakdownEntry(BaseModel):
    """Count of records sharing one value."""
    name: str
    value: int


class SurveyStatistics(BaseModel):
    """Statistics snapshot over the loaded records."""
    total: int
    alive_count: int
    dead_count: int
    unknown_status_count: int
    alive_pct: int
    dead_pct: int
    distinct_tree_count: int
    species_breakdown: list[BreakdownEntry]
    plot_breakdown: list[BreakdownEntry]
    group_a_count: int
    group_b_count: int
    coordinate_count: int
    coordinate_coverage_pct: int


def percentage(part: int, total: int) -> int:
    """
    Whole-number percentage of part in total, 0 when total is 0.

    The exact ratio is rounded half-to-even, so complementary percentages
    never add up to more than 100.
    """
    if total <= 0:
        return 0
    return round(Fraction(100 * part, total))


def breakdown(values: Iterable[str]) -> list[BreakdownEntry]:
    """
    Count occurrences and sort by count, highest first.

    Counts that tie keep the order in which their value first appeared.
    """
    counts = Counter(values)
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [BreakdownEntry(name=name, value=count) for name, count in ranked]


def compute_statistics(
    growth_records: Sequence[GrowthRecord],
    spatial_records: Sequence[SpatialRecord],
    top_species: int = 10,
) -> SurveyStatistics:
    """
    Compute the reporting statistics.

    Args:
        growth_records: Growth observations in load order
        spatial_records: Coordinate placements
        top_species: Maximum number of species breakdown entries

    Returns:
        SurveyStatistics snapshot
    """
    total = len(growth_records)
    status_counts = Counter(r.status for r in growth_records)
    group_counts = Counter(r.species_group for r in growth_records)
    alive = status_counts["alive"]
    dead = status_counts["dead"]
    coordinates = len(spatial_records)

    stats = SurveyStatistics(
        total=total,
        alive_count=alive,
        dead_count=dead,
        unknown_status_count=total - alive - dead,
        alive_pct=percentage(alive, total),
        dead_pct=percentage(dead, total),
        distinct_tree_count=len({r.tree_code for r in growth_records}),
        species_breakdown=breakdown(r.species_name for r in growth_records)[:top_species],
        plot_breakdown=breakdown(r.plot_code for r in growth_records),
        group_a_count=group_counts["A"],
        group_b_count=group_counts["B"],
        coordinate_count=coordinates,
        coordinate_coverage_pct=percentage(coordinates, total),
    )

    logger.debug(f"Statistics: total={total}, alive={alive}, dead={dead}, coordinates={coordinates}")
    return stats
