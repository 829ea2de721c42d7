"""
dispatch HTTP API

Exposes batch distribution, single-task recommendations, manual
assignment and run statistics.
"""

import logging
import os
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

# Set up logging first
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

from dotenv import load_dotenv

load_dotenv()

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from dispatch.assignment.models import CommitResult, CommitStatus
from dispatch.delegation.models import Recommendation
from dispatch.policy.models import DistributionSettings, Staff, Task
from dispatch.policy.rules import ConfigurationError, parse_settings
from dispatch.workflows.models import BatchResult, BatchStats, TaskOutcome
from dispatch.workflows.service import (
    DistributionService,
    TaskNotFoundError,
    get_default_service,
    preview_distribution,
)


def get_service() -> DistributionService:
    """Dependency returning the process-wide distribution service."""
    return get_default_service()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start the scheduled passes when an interval is configured."""
    from dispatch.triggers.scheduler import start_scheduler, stop_scheduler

    interval = os.getenv("DISPATCH_SCHEDULE_INTERVAL_SECONDS")
    if interval:
        service = app.dependency_overrides.get(get_service, get_service)()
        start_scheduler(service, float(interval))
        logger.info(f"Distribution scheduler starting (every {interval}s)")

    yield

    stop_scheduler()


app = FastAPI(
    title="dispatch",
    description="Task-to-staff assignment engine",
    version="0.1.0",
    lifespan=lifespan,
)


class RunRequest(BaseModel):
    """Optional overrides on top of the service's default settings."""
    settings: Optional[Dict[str, Any]] = None


class AssignRequest(BaseModel):
    staff_id: str


class PreviewRequest(BaseModel):
    tasks: List[Task]
    staff: List[Staff]
    settings: Optional[Dict[str, Any]] = None


class PreviewResponse(BaseModel):
    recommendations: List[Recommendation]
    outcomes: List[TaskOutcome]
    stats: BatchStats


def _merge_settings(base: DistributionSettings, overrides: Optional[Dict[str, Any]]) -> DistributionSettings:
    if not overrides:
        return base
    return parse_settings({**base.model_dump(), **overrides})


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    return JSONResponse(
        status_code=422,
        content={"detail": str(exc), "problems": exc.problems},
    )


@app.get("/")
async def root():
    """API root - shows available endpoints."""
    return {
        "service": "dispatch",
        "version": "0.1.0",
        "docs": "/docs",
        "endpoints": {
            "health": "/health",
            "run": "/distribution/run",
            "cancel": "/distribution/cancel",
            "preview": "/distribution/preview",
            "stats": "/distribution/stats",
            "recommendation": "/tasks/{task_id}/recommendation",
            "assign": "/tasks/{task_id}/assign",
        }
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "ok", "service": "dispatch"}


@app.post("/distribution/run", response_model=BatchResult)
def run_distribution(
    request: Optional[RunRequest] = None,
    service: DistributionService = Depends(get_service),
):
    """Run one distribution pass over the pending tasks."""
    settings = _merge_settings(service.settings, request.settings if request else None)
    return service.run_batch(settings)


@app.post("/distribution/cancel")
def cancel_distribution(service: DistributionService = Depends(get_service)):
    """Stop a running pass after its current task."""
    return {"cancelled": service.cancel_batch()}


@app.post("/distribution/preview", response_model=PreviewResponse)
def preview(request: PreviewRequest, service: DistributionService = Depends(get_service)):
    """Run a pass over the given snapshots without touching stored state."""
    settings = _merge_settings(service.settings, request.settings)
    result = preview_distribution(request.tasks, request.staff, settings, service.policy)
    return PreviewResponse(
        recommendations=[o.recommendation for o in result.outcomes],
        outcomes=result.outcomes,
        stats=result.stats,
    )


@app.get("/distribution/stats", response_model=BatchStats)
def distribution_stats(service: DistributionService = Depends(get_service)):
    """Counters of the last pass, including manual overrides since."""
    return service.get_stats()


@app.get("/tasks/{task_id}/recommendation", response_model=Recommendation)
def task_recommendation(task_id: str, service: DistributionService = Depends(get_service)):
    """Preview the ranked candidates for one task."""
    try:
        return service.recommend(task_id)
    except TaskNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@app.post("/tasks/{task_id}/assign", response_model=CommitResult)
def assign_task(
    task_id: str,
    request: AssignRequest,
    service: DistributionService = Depends(get_service),
):
    """Manually assign a task, bypassing the auto-assign threshold."""
    result = service.commit(task_id, request.staff_id)
    if result.status == CommitStatus.ALREADY_ASSIGNED:
        raise HTTPException(status_code=409, detail=result.message)
    if result.status == CommitStatus.NOT_FOUND:
        raise HTTPException(status_code=404, detail=result.message)
    return result


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "8080")))
