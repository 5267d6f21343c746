"""
Infrastructure layer: record store client with retry logic.
"""
from typing import Any, Dict, List, Optional, Type, TypeVar
import logging
from pydantic import BaseModel, ValidationError
import httpx
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)

from treelog.config import settings
from treelog.domain.models import GrowthRecord, WriteOutcome
from treelog.infrastructure.store_constants import SheetStoreActions, StoreConstants

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)


class StoreResponse(BaseModel):
    """Envelope returned by the store on reads and acknowledged writes."""
    success: bool
    data: List[Dict[str, Any]] = []
    error: Optional[str] = None


class WriteResult(BaseModel):
    """Outcome of a write request."""
    outcome: WriteOutcome
    detail: str = ""


class StoreError(Exception):
    """Raised when the record store cannot be read."""

    def __init__(self, message: str, status_code: int = 502):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class _RetryableStoreError(StoreError):
    """Server-side failure worth retrying."""


class SheetStoreClient:
    """
    Client for the spreadsheet-backed record store.

    Reads are retried with exponential backoff on server and network errors.
    Writes are sent once: the store appends rows, so a retry could duplicate
    an observation.
    """

    def __init__(self):
        """Initialize the store client with configuration."""
        self.base_url = settings.store_url
        self.client = httpx.AsyncClient(
            headers={"accept": StoreConstants.CONTENT_TYPE_JSON},
            timeout=settings.store_timeout,
            follow_redirects=True,
        )

    async def __aenter__(self) -> "SheetStoreClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()

    @retry(
        stop=stop_after_attempt(settings.max_retry_attempts),
        wait=wait_exponential(
            multiplier=settings.retry_backoff_multiplier,
            min=settings.retry_min_wait,
            max=settings.retry_max_wait,
        ),
        retry=retry_if_exception_type((_RetryableStoreError, httpx.TransportError)),
        reraise=True,
    )
    async def _get(self, collection: str) -> Dict[str, Any]:
        """
        Read one sheet with retry logic.

        Args:
            collection: Sheet name

        Returns:
            Response data as dictionary

        Raises:
            StoreError: If the request fails after retries
            httpx.TransportError: If the store stays unreachable
        """
        try:
            response = await self.client.get(
                self.base_url,
                params={StoreConstants.SHEET_PARAM: collection},
            )
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            # Retry on server errors (5xx)
            if status >= 500:
                raise _RetryableStoreError(f"HTTP Error: {status}", status_code=status) from e
            # Don't retry on client errors (4xx)
            raise StoreError(f"HTTP Error: {status} - {e.response.text}", status_code=status) from e
        except ValueError as e:
            raise StoreError(f"Invalid JSON from store: {e}") from e

    async def fetch_collection(self, collection: str) -> List[Dict[str, Any]]:
        """
        Fetch all rows of a sheet.

        Args:
            collection: Sheet name, e.g. "growth_logs"

        Returns:
            Raw rows in sheet order

        Raises:
            StoreError: If the store is unreachable or reports failure
        """
        try:
            data = await self._get(collection)
        except httpx.TransportError as e:
            raise StoreError(f"Could not fetch {collection}: {e}") from e

        try:
            response = StoreResponse(**data)
        except (TypeError, ValidationError) as e:
            raise StoreError(f"Unexpected response for {collection}: {e}") from e

        if not response.success:
            raise StoreError(
                f"Store reported failure for {collection}: {response.error or 'unknown error'}"
            )

        logger.info(f"Fetched {len(response.data)} rows from {collection}")
        return response.data

    async def fetch_records(self, collection: str, model: Type[RecordT]) -> List[RecordT]:
        """
        Fetch a sheet and parse its rows.

        Rows that do not validate are skipped and logged.

        Args:
            collection: Sheet name
            model: Record model for the rows

        Returns:
            Parsed records in sheet order
        """
        rows = await self.fetch_collection(collection)
        records = []
        for index, row in enumerate(rows):
            try:
                records.append(model.model_validate(row))
            except ValidationError as e:
                logger.warning(
                    f"Skipping invalid row {index} in {collection}: {e.error_count()} error(s)"
                )
        return records

    async def append_growth_log(self, record: GrowthRecord) -> WriteResult:
        """
        Append a growth observation.

        Args:
            record: Validated growth record

        Returns:
            WriteResult: CONFIRMED when the store acknowledges the row,
            UNKNOWN_PENDING_RELOAD when the request went through without a
            readable acknowledgement, FAILED otherwise
        """
        fields = record.model_dump(mode="json", include=set(StoreConstants.GROWTH_LOG_FIELDS))
        payload = SheetStoreActions.payload(SheetStoreActions.ADD_GROWTH_LOG, fields)

        try:
            response = await self.client.post(self.base_url, json=payload)
        except httpx.TimeoutException as e:
            logger.error(f"Write of {record.tree_code} timed out: {e}")
            return WriteResult(outcome=WriteOutcome.FAILED, detail="no response from store")
        except httpx.TransportError as e:
            logger.error(f"Write of {record.tree_code} failed: {e}")
            return WriteResult(outcome=WriteOutcome.FAILED, detail=str(e))

        if response.is_error:
            logger.error(f"Write of {record.tree_code} rejected: HTTP {response.status_code}")
            return WriteResult(
                outcome=WriteOutcome.FAILED,
                detail=f"HTTP Error: {response.status_code}",
            )

        try:
            ack = StoreResponse(**response.json())
        except (TypeError, ValueError):
            logger.info(f"Write of {record.tree_code} sent without acknowledgement")
            return WriteResult(outcome=WriteOutcome.UNKNOWN_PENDING_RELOAD)

        if not ack.success:
            logger.error(f"Store refused {record.tree_code}: {ack.error}")
            return WriteResult(outcome=WriteOutcome.FAILED, detail=ack.error or "store refused the record")

        logger.info(f"Store acknowledged {record.tree_code}")
        return WriteResult(outcome=WriteOutcome.CONFIRMED)


# Singleton instance
_store_client: Optional[SheetStoreClient] = None


def get_store_client() -> SheetStoreClient:
    """
    Get or create the singleton store client instance.

    Returns:
        SheetStoreClient instance
    """
    global _store_client
    if _store_client is None:
        _store_client = SheetStoreClient()
    return _store_client
