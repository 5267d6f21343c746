"""
Domain service: in-memory record collections and their state transitions.

The current state is an immutable SurveyState snapshot. Every change (a new
filter, a reload, a submission) produces a new snapshot through a pure
transition function; RecordStore only holds the latest one.
"""
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Iterable, Optional, Sequence
import logging

from treelog.domain.models import GrowthRecord, Notice, SpatialRecord, WriteOutcome
from treelog.utils.geo_projection import utm_to_latlng_many

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GrowthFilter:
    """Filter values for the growth table. Empty means 'any'."""
    search_text: str = ""
    plot_code: str = ""
    status: str = ""

    def matches(self, record: GrowthRecord) -> bool:
        search = self.search_text.strip().lower()
        matches_search = (
            not search
            or search in record.tree_code.lower()
            or search in record.species_name.lower()
        )
        matches_plot = not self.plot_code or record.plot_code == self.plot_code
        matches_status = not self.status or record.status == self.status
        return matches_search and matches_plot and matches_status


def filter_growth(
    records: Iterable[GrowthRecord],
    growth_filter: GrowthFilter,
) -> list[GrowthRecord]:
    """
    Select growth records matching all filter values, keeping load order.

    Args:
        records: Growth records in load order
        growth_filter: Search text (tree code or species name), plot and status

    Returns:
        Matching records in their original order
    """
    return [r for r in records if growth_filter.matches(r)]


def place_spatial_records(
    records: Sequence[SpatialRecord],
    zone: int,
    hemisphere: str,
) -> tuple[SpatialRecord, ...]:
    """
    Recompute lat/lng of spatial records from their UTM coordinates.

    Args:
        records: Spatial records as loaded from the store
        zone: UTM zone of the recorded coordinates
        hemisphere: "N" or "S"

    Returns:
        New records whose lat/lng are derived from utm_x/utm_y
    """
    lats, lngs = utm_to_latlng_many(
        [r.utm_x for r in records],
        [r.utm_y for r in records],
        zone,
        hemisphere,
    )
    return tuple(
        r.model_copy(update={"lat": float(lat), "lng": float(lng)})
        for r, lat, lng in zip(records, lats, lngs)
    )


@dataclass(frozen=True)
class SurveyState:
    """Snapshot of everything the views are computed from."""
    growth: tuple[GrowthRecord, ...] = ()
    spatial: tuple[SpatialRecord, ...] = ()
    growth_filter: GrowthFilter = field(default_factory=GrowthFilter)
    is_loading: bool = False
    notices: tuple[Notice, ...] = ()
    last_synced_at: Optional[datetime] = None

    @property
    def filtered_growth(self) -> list[GrowthRecord]:
        return filter_growth(self.growth, self.growth_filter)


def apply_filter(state: SurveyState, growth_filter: GrowthFilter) -> SurveyState:
    return replace(state, growth_filter=growth_filter)


def begin_reload(state: SurveyState) -> SurveyState:
    return replace(state, is_loading=True, notices=())


def complete_reload(
    state: SurveyState,
    growth: Optional[Sequence[GrowthRecord]],
    spatial: Optional[Sequence[SpatialRecord]],
    errors: Sequence[str] = (),
) -> SurveyState:
    """
    Finish a reload.

    A collection passed as None failed to load and keeps its previous
    contents; the other collection is still replaced.

    Args:
        state: State before the reload finished
        growth: Newly loaded growth records, or None on failure
        spatial: Newly loaded spatial records (already placed), or None on failure
        errors: Messages describing the failures

    Returns:
        New state with loading cleared and one notice per outcome
    """
    notices = [Notice(level="error", message=f"Sync failed: {message}") for message in errors]
    if growth is not None or spatial is not None:
        if not errors:
            notices.append(Notice(level="success", message="Data synced with store"))

    return replace(
        state,
        growth=tuple(growth) if growth is not None else state.growth,
        spatial=tuple(spatial) if spatial is not None else state.spatial,
        is_loading=False,
        notices=tuple(notices),
        last_synced_at=datetime.now(timezone.utc) if not errors else state.last_synced_at,
    )


def record_submission(
    state: SurveyState,
    tree_code: str,
    outcome: WriteOutcome,
    detail: str = "",
) -> SurveyState:
    """Add the notice that reports a submission outcome."""
    if outcome == WriteOutcome.CONFIRMED:
        notice = Notice(level="success", message=f"Saved {tree_code}")
    elif outcome == WriteOutcome.UNKNOWN_PENDING_RELOAD:
        notice = Notice(level="info", message=f"Sent {tree_code}, verifying...")
    else:
        message = f"{tree_code} may not have been saved, please check and resubmit"
        notice = Notice(level="error", message=f"{message}: {detail}" if detail else message)
    return replace(state, notices=state.notices + (notice,))


class RecordStore:
    """Process-wide holder of the current SurveyState."""

    def __init__(self, state: Optional[SurveyState] = None):
        self._state = state or SurveyState()

    @property
    def state(self) -> SurveyState:
        return self._state

    def commit(self, state: SurveyState) -> SurveyState:
        self._state = state
        logger.debug(
            f"Committed state: {len(state.growth)} growth, {len(state.spatial)} spatial records"
        )
        return state


# Singleton instance
_record_store: Optional[RecordStore] = None


def get_record_store() -> RecordStore:
    """
    Get or create the singleton record store.

    Returns:
        RecordStore instance
    """
    global _record_store
    if _record_store is None:
        _record_store = RecordStore()
    return _record_store
