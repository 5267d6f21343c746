"""
API router for statistics and reference data.
"""
from fastapi import APIRouter
from typing import List

from treelog.api.dependencies import CatalogDep, SurveyServiceDep
from treelog.domain.models import PlotInfo, SpeciesInfo
from treelog.services.domain.statistics import SurveyStatistics


router = APIRouter()


@router.get(
    "/statistics",
    response_model=SurveyStatistics,
    summary="Survey statistics",
    description="""
    Counts, survival percentages, species (top 10) and plot breakdowns,
    species group counts and coordinate coverage over all loaded records.
    """,
    tags=["statistics"],
)
async def get_statistics(
    survey_service: SurveyServiceDep,
) -> SurveyStatistics:
    return survey_service.statistics()


@router.get(
    "/catalogs/species",
    response_model=List[SpeciesInfo],
    summary="Species catalog",
    tags=["catalogs"],
)
async def list_species(catalog: CatalogDep) -> List[SpeciesInfo]:
    return catalog.species


@router.get(
    "/catalogs/plots",
    response_model=List[PlotInfo],
    summary="Plot catalog",
    tags=["catalogs"],
)
async def list_plots(catalog: CatalogDep) -> List[PlotInfo]:
    return catalog.plots
