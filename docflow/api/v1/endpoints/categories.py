"""Document category lookup API."""

from typing import Annotated

from fastapi import APIRouter, Depends

from docflow.api.v1.dependencies import get_document_query_service, get_identity
from docflow.application.use_cases.documents import DocumentQueryService
from docflow.domain.value_objects.core import IdentityContext
from docflow.schemas.document import CategoryItem

router = APIRouter()


@router.get("", response_model=list[CategoryItem])
async def list_categories(
    _identity: Annotated[IdentityContext, Depends(get_identity)],
    query_svc: DocumentQueryService = Depends(get_document_query_service),
):
    """Active categories ordered by name."""
    return [CategoryItem.model_validate(c) for c in await query_svc.list_categories()]
