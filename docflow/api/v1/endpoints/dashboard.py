"""Dashboard API: per-caller document counts."""

from typing import Annotated

from fastapi import APIRouter, Depends

from docflow.api.v1.dependencies import get_document_query_service, get_identity
from docflow.application.use_cases.documents import DocumentQueryService
from docflow.domain.value_objects.core import IdentityContext
from docflow.schemas.document import DashboardStatsResponse

router = APIRouter()


@router.get("/stats", response_model=DashboardStatsResponse)
async def get_dashboard_stats(
    identity: Annotated[IdentityContext, Depends(get_identity)],
    query_svc: DocumentQueryService = Depends(get_document_query_service),
):
    """Totals for documents the caller can see, plus their pending assignments."""
    stats = await query_svc.get_dashboard_stats(identity)
    return DashboardStatsResponse.model_validate(stats)
