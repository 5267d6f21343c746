"""
Shared pytest fixtures for all tests.

This module provides common fixtures including:
- Growth record and placement factories
- Sample survey data
- Mock store client
- FastAPI test client
"""
import os

# Settings are read at import time; keep retries instant and startup offline
os.environ.setdefault("STORE_URL", "https://store.test/exec")
os.environ.setdefault("RETRY_MIN_WAIT", "0")
os.environ.setdefault("RETRY_MAX_WAIT", "0")
os.environ.setdefault("RETRY_BACKOFF_MULTIPLIER", "0")
os.environ.setdefault("SYNC_ON_STARTUP", "false")

import pytest
from datetime import date
from unittest.mock import AsyncMock
from fastapi.testclient import TestClient

from treelog.main import app
from treelog.config import settings
from treelog.domain.catalogs import Catalog
from treelog.domain.models import GrowthRecord, SpatialRecord
from treelog.infrastructure.sheet_store_client import SheetStoreClient
from treelog.services.application.survey_service import SurveyService
from treelog.services.domain.record_store import RecordStore


# ============================================================
# Record Factories
# ============================================================

@pytest.fixture
def make_growth():
    """Factory for growth records with sensible defaults."""
    def _make(**overrides) -> GrowthRecord:
        fields = {
            "tree_code": "P1A02014",
            "tag_label": "14 HMS1 03 (2) Burmese Padauk",
            "plot_code": "P1",
            "species_code": "A02",
            "species_group": "A",
            "species_name": "Burmese Padauk",
            "tree_number": 14,
            "row_main": "3",
            "row_sub": "2",
            "dbh_cm": 12.5,
            "height_m": 4.2,
            "status": "alive",
            "note": "",
            "recorder": "Somchai",
            "survey_date": date(2024, 1, 15),
        }
        fields.update(overrides)
        return GrowthRecord(**fields)
    return _make


@pytest.fixture
def make_spatial():
    """Factory for placements in UTM zone 47N."""
    def _make(**overrides) -> SpatialRecord:
        fields = {
            "tree_code": "P1A02014",
            "plot_code": "P1",
            "utm_x": 435000.0,
            "utm_y": 2045000.0,
        }
        fields.update(overrides)
        return SpatialRecord(**fields)
    return _make


# ============================================================
# Sample Data Fixtures
# ============================================================

@pytest.fixture
def sample_growth_records(make_growth) -> list[GrowthRecord]:
    """A small survey across two plots with one repeated observation."""
    return [
        make_growth(),
        make_growth(
            tree_code="P1B01003", plot_code="P1", species_code="B01",
            species_group="B", species_name="Mango", tree_number=3,
            status="dead",
        ),
        make_growth(
            tree_code="P2A01007", plot_code="P2", species_code="A01",
            species_name="Teak", tree_number=7, status="alive",
        ),
        make_growth(
            tree_code="P2B02010", plot_code="P2", species_code="B02",
            species_group="B", species_name="Longan", tree_number=10,
            status=None, dbh_cm=None, height_m=None,
        ),
        make_growth(status="dead", survey_date=date(2024, 7, 1)),
    ]


@pytest.fixture
def sample_spatial_records(make_spatial) -> list[SpatialRecord]:
    """Placements: two known trees and one without observations."""
    return [
        make_spatial(),
        make_spatial(tree_code="P2A01007", plot_code="P2", utm_x=435120.0, utm_y=2045080.0),
        make_spatial(tree_code="P3A05001", plot_code="P3", utm_x=436000.0, utm_y=2046000.0),
    ]


@pytest.fixture
def growth_rows(sample_growth_records) -> list[dict]:
    """Growth records as the store returns them."""
    return [r.model_dump(mode="json") for r in sample_growth_records]


@pytest.fixture
def spatial_rows(sample_spatial_records) -> list[dict]:
    """Placements as the store returns them, with stale lat/lng."""
    return [
        {**r.model_dump(mode="json"), "lat": 0, "lng": 0}
        for r in sample_spatial_records
    ]


@pytest.fixture
def catalog() -> Catalog:
    """Built-in species/plot catalog."""
    return Catalog()


# ============================================================
# Mock Store Client Fixtures
# ============================================================

@pytest.fixture
def mock_store_client(sample_growth_records, sample_spatial_records):
    """Create a mock store client serving the sample data."""
    mock_client = AsyncMock(spec=SheetStoreClient)

    def fetch_records(collection, model):
        if collection == settings.growth_collection:
            return list(sample_growth_records)
        return list(sample_spatial_records)

    mock_client.fetch_records.side_effect = fetch_records
    return mock_client


@pytest.fixture
def record_store() -> RecordStore:
    """Fresh, empty record store."""
    return RecordStore()


@pytest.fixture
def survey_service(mock_store_client, record_store, catalog) -> SurveyService:
    """Survey service wired to the mock store client."""
    return SurveyService(
        store_client=mock_store_client,
        record_store=record_store,
        catalog=catalog,
    )


# ============================================================
# FastAPI Test Client Fixtures
# ============================================================

@pytest.fixture
def test_client() -> TestClient:
    """Create a synchronous test client for FastAPI."""
    return TestClient(app)
