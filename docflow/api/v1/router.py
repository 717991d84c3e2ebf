"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. All routes
use dependencies from docflow.api.v1.dependencies.
"""

from fastapi import APIRouter

from docflow.api.v1.endpoints import (
    categories,
    dashboard,
    documents,
    health,
    notifications,
    workflow,
)

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(documents.router, prefix="/documents", tags=["documents"])
api_router.include_router(workflow.router, prefix="/documents", tags=["workflow"])
api_router.include_router(categories.router, prefix="/categories", tags=["categories"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
api_router.include_router(
    notifications.router, prefix="/notifications", tags=["notifications"]
)
