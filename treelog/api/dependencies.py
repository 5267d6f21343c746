"""
Dependency injection for FastAPI.
"""
from typing import Annotated
from fastapi import Depends

from treelog.domain.catalogs import Catalog, get_catalog
from treelog.infrastructure.sheet_store_client import (
    SheetStoreClient,
    get_store_client,
)
from treelog.services.domain.record_store import RecordStore, get_record_store
from treelog.services.application.survey_service import SurveyService


def get_survey_service(
    store_client: Annotated[SheetStoreClient, Depends(get_store_client)],
    record_store: Annotated[RecordStore, Depends(get_record_store)],
    catalog: Annotated[Catalog, Depends(get_catalog)],
) -> SurveyService:
    """
    Dependency factory for SurveyService.

    Args:
        store_client: Record store client (injected)
        record_store: In-memory state holder (injected)
        catalog: Species/plot catalog (injected)

    Returns:
        SurveyService instance
    """
    return SurveyService(store_client=store_client, record_store=record_store, catalog=catalog)


# Type aliases for cleaner route signatures
SurveyServiceDep = Annotated[SurveyService, Depends(get_survey_service)]
CatalogDep = Annotated[Catalog, Depends(get_catalog)]
