"""
Health Check Router - TRL Assessment Engine
trl_engine/routers/health.py

Reports service status and the state of in-process components.
"""
from datetime import datetime, timezone
from typing import Dict

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from trl_engine.config import settings
from trl_engine.core.dependencies import get_workflow_repository
from trl_engine.repositories.context_repository import WorkflowContextRepository
from trl_engine.scale.levels import TRL_LEVELS

router = APIRouter(tags=["Health"])


class HealthResponse(BaseModel):
    status: str
    service: str
    timestamp: datetime
    version: str
    dependencies: Dict[str, str]


def check_reference_table() -> str:
    sublevels = sum(len(level.sublevels) for level in TRL_LEVELS.values())
    if len(TRL_LEVELS) != 9 or sublevels != 27:
        return f"unhealthy: {len(TRL_LEVELS)} levels / {sublevels} sub-levels loaded"
    return "healthy (27 sub-levels)"


def check_workflow_store(repo: WorkflowContextRepository) -> str:
    return f"healthy ({len(repo.list_ids())} workflows)"


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={
        200: {"description": "All components healthy"},
        503: {"description": "One or more components unhealthy"},
    },
    summary="Health check",
)
async def health_check(repo: WorkflowContextRepository = Depends(get_workflow_repository)):
    dependencies = {
        "reference_table": check_reference_table(),
        "workflow_store": check_workflow_store(repo),
    }
    all_healthy = all(v.startswith("healthy") for v in dependencies.values())

    response = HealthResponse(
        status="healthy" if all_healthy else "degraded",
        service=settings.APP_NAME,
        timestamp=datetime.now(timezone.utc),
        version=settings.APP_VERSION,
        dependencies=dependencies,
    )
    if all_healthy:
        return response
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content=response.model_dump(mode="json"),
    )
