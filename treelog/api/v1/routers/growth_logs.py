"""
API router for growth observation endpoints.
"""
from fastapi import APIRouter, Path, Query, Request
from typing import Annotated, Literal, Optional

from treelog.api.dependencies import CatalogDep, SurveyServiceDep
from treelog.api.v1.models.responses import (
    GrowthLogsResponse,
    SubmissionResponse,
    SyncResponse,
    TreeHistoryResponse,
)
from treelog.services.domain.identity import GrowthForm, IdentityPreview, preview_identity
from treelog.api.rate_limit import limiter
from treelog.config import settings


router = APIRouter(
    tags=["growth"],
)

RATE_LIMIT = f"{settings.rate_limit_requests}/minute"


@router.post(
    "/sync",
    response_model=SyncResponse,
    summary="Reload records from the store",
    description="""
    Reload growth logs and coordinate placements from the record store.

    Each collection is fetched independently. A collection that fails to load
    keeps its previous contents and the failure is reported as a notice.
    """,
)
@limiter.limit(RATE_LIMIT)
async def sync_records(
    request: Request,
    survey_service: SurveyServiceDep,
) -> SyncResponse:
    state = await survey_service.sync()
    return SyncResponse(
        growth_count=len(state.growth),
        spatial_count=len(state.spatial),
        last_synced_at=state.last_synced_at,
        notices=list(state.notices),
    )


@router.get(
    "/growth-logs",
    response_model=GrowthLogsResponse,
    summary="List growth observations",
    responses={429: {"description": "Rate limit exceeded"}},
)
@limiter.limit(RATE_LIMIT)
async def list_growth_logs(
    request: Request,
    survey_service: SurveyServiceDep,
    search: Annotated[str, Query(description="Substring of tree code or species name")] = "",
    plot_code: Annotated[str, Query(description="Exact plot code")] = "",
    status: Annotated[
        Optional[Literal["alive", "dead"]],
        Query(description="Survival status"),
    ] = None,
) -> GrowthLogsResponse:
    """
    List growth observations matching the filters, in load order.

    Args:
        search: Case-insensitive search over tree code and species name
        plot_code: Plot filter
        status: Status filter
        survey_service: Survey service (injected dependency)

    Returns:
        GrowthLogsResponse with the matching records
    """
    results = survey_service.filter_growth(search, plot_code, status or "")
    return GrowthLogsResponse(
        total=len(survey_service.state.growth),
        count=len(results),
        results=results,
    )


@router.post(
    "/growth-logs",
    response_model=SubmissionResponse,
    summary="Submit a growth observation",
    description="""
    Validate a field form, derive the tree code, tag label and species group,
    and append the observation to the record store.

    The outcome is `confirmed` when the store acknowledged the row or it was
    visible after the follow-up reload, `unknown_pending_reload` when the row
    was sent but could not be verified yet, and `failed` otherwise.
    """,
    responses={
        400: {"description": "Missing or invalid required fields"},
        429: {"description": "Rate limit exceeded"},
    },
)
@limiter.limit(RATE_LIMIT)
async def submit_growth_log(
    request: Request,
    form: GrowthForm,
    survey_service: SurveyServiceDep,
) -> SubmissionResponse:
    record, result = await survey_service.submit(form)
    return SubmissionResponse(
        outcome=result.outcome,
        tree_code=record.tree_code,
        tag_label=record.tag_label,
        detail=result.detail,
        notices=list(survey_service.state.notices),
    )


@router.post(
    "/growth-logs/preview",
    response_model=IdentityPreview,
    summary="Preview derived identity",
    description="Derive tree code and tag label for a partially filled form. "
                "Missing inputs yield the placeholder '—'.",
)
async def preview_growth_log(
    form: GrowthForm,
    catalog: CatalogDep,
) -> IdentityPreview:
    return preview_identity(form, catalog)


@router.get(
    "/trees/{tree_code}/history",
    response_model=TreeHistoryResponse,
    summary="Observation history of a tree",
)
async def tree_history(
    tree_code: Annotated[str, Path(description="Canonical tree code")],
    survey_service: SurveyServiceDep,
) -> TreeHistoryResponse:
    return TreeHistoryResponse(
        tree_code=tree_code,
        observations=survey_service.history(tree_code),
    )
