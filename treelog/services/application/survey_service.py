"""
Application service: Orchestration layer for survey record operations.
"""
from typing import Optional
import asyncio
import logging

from treelog.config import settings
from treelog.domain.catalogs import Catalog
from treelog.domain.models import GrowthRecord, SpatialRecord, WriteOutcome
from treelog.infrastructure.sheet_store_client import (
    SheetStoreClient,
    StoreError,
    WriteResult,
)
from treelog.services.domain.identity import GrowthForm, build_growth_record
from treelog.services.domain.observation_join import (
    MapMarker,
    ObservationPolicy,
    build_map_markers,
    map_center,
    observation_history,
)
from treelog.services.domain.record_store import (
    GrowthFilter,
    RecordStore,
    SurveyState,
    begin_reload,
    complete_reload,
    filter_growth,
    place_spatial_records,
    record_submission,
)
from treelog.services.domain.statistics import SurveyStatistics, compute_statistics

logger = logging.getLogger(__name__)

_SUBMITTED_FIELDS = set(GrowthRecord.model_fields) - {"log_id", "timestamp"}


class SurveyService:
    """
    Application service for survey record operations.

    Orchestrates store I/O and state transitions. Derivations and
    aggregations live in the domain layer; this class only coordinates.
    """

    def __init__(
        self,
        store_client: SheetStoreClient,
        record_store: RecordStore,
        catalog: Catalog,
    ):
        """
        Initialize the service with dependencies.

        Args:
            store_client: Client for the remote record store
            record_store: Holder of the in-memory state
            catalog: Species/plot reference lists
        """
        self.store_client = store_client
        self.record_store = record_store
        self.catalog = catalog

    @property
    def state(self) -> SurveyState:
        return self.record_store.state

    @property
    def policy(self) -> ObservationPolicy:
        return ObservationPolicy(settings.join_policy)

    async def _load_growth(self) -> list[GrowthRecord]:
        return await self.store_client.fetch_records(settings.growth_collection, GrowthRecord)

    async def _load_spatial(self) -> tuple[SpatialRecord, ...]:
        records = await self.store_client.fetch_records(settings.spatial_collection, SpatialRecord)
        return place_spatial_records(records, settings.utm_zone, settings.utm_hemisphere)

    async def sync(self) -> SurveyState:
        """
        Reload both collections from the store.

        The collections are fetched independently; one failing does not
        prevent the other from being replaced, and never clears existing
        data.

        Returns:
            The committed state, with notices describing the outcome
        """
        self.record_store.commit(begin_reload(self.state))

        growth, spatial = await asyncio.gather(
            self._load_growth(),
            self._load_spatial(),
            return_exceptions=True,
        )

        errors = []
        for name, result in (("growth logs", growth), ("coordinates", spatial)):
            if isinstance(result, StoreError):
                logger.error(f"Failed to load {name}: {result.message}")
                errors.append(result.message)
            elif isinstance(result, Exception):
                logger.exception(f"Unexpected error loading {name}", exc_info=result)
                errors.append(f"Could not load {name}: {result}")
            elif isinstance(result, BaseException):
                raise result

        state = complete_reload(
            self.state,
            growth=None if isinstance(growth, BaseException) else growth,
            spatial=None if isinstance(spatial, BaseException) else spatial,
            errors=errors,
        )
        logger.info(
            f"Sync finished: {len(state.growth)} growth records, "
            f"{len(state.spatial)} placements, {len(errors)} error(s)"
        )
        return self.record_store.commit(state)

    async def submit(self, form: GrowthForm) -> tuple[GrowthRecord, WriteResult]:
        """
        Validate, derive and append a new growth observation.

        After a write the store is reloaded. A write whose acknowledgement
        was unreadable is confirmed only if the reload holds more rows with
        exactly the submitted values than the state held before the write.
        Otherwise it stays pending, since the store does not guarantee
        read-after-write and an earlier identical entry proves nothing.

        Args:
            form: Submitted form values

        Returns:
            Tuple of the derived record and the write result

        Raises:
            SubmissionValidationError: If required fields are missing
        """
        record = build_growth_record(form, self.catalog)
        copies_before = self._count_written(record)
        result = await self.store_client.append_growth_log(record)

        if result.outcome != WriteOutcome.FAILED:
            await self.sync()
            pending = result.outcome == WriteOutcome.UNKNOWN_PENDING_RELOAD
            if pending and self._count_written(record) > copies_before:
                result = WriteResult(outcome=WriteOutcome.CONFIRMED)

        logger.info(f"Submission of {record.tree_code}: {result.outcome.value}")
        self.record_store.commit(
            record_submission(self.state, record.tree_code, result.outcome, result.detail)
        )
        return record, result

    def _count_written(self, record: GrowthRecord) -> int:
        # Rows carrying every submitted value; the server-assigned fields are ignored
        written = record.model_dump(include=_SUBMITTED_FIELDS)
        return sum(
            1 for r in self.state.growth
            if r.model_dump(include=_SUBMITTED_FIELDS) == written
        )

    def filter_growth(
        self,
        search_text: str = "",
        plot_code: str = "",
        status: str = "",
    ) -> list[GrowthRecord]:
        """Apply the growth table filters and return the matching records."""
        growth_filter = GrowthFilter(search_text=search_text, plot_code=plot_code, status=status)
        return filter_growth(self.state.growth, growth_filter)

    def statistics(self) -> SurveyStatistics:
        state = self.state
        return compute_statistics(state.growth, state.spatial, settings.top_species_limit)

    def map_markers(self) -> tuple[list[MapMarker], tuple[float, float]]:
        """Markers for every placed tree plus the map center."""
        state = self.state
        markers = build_map_markers(state.spatial, state.growth, self.policy)
        center = map_center(markers, (settings.map_default_lat, settings.map_default_lng))
        return markers, center

    def history(self, tree_code: str) -> list[GrowthRecord]:
        return observation_history(tree_code, self.state.growth)
