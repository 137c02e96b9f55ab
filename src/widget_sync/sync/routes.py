"""Job control and manual sync routes."""
import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from .. import runtime as runtime_module
from ..schemas import CommandResponse, JobStatusResponse, SyncRunResponse
from ..utils.errors import ConfigurationError
from .jobs import sync_once
from .scheduler import JOB_NAME

logger = logging.getLogger("widget_sync.routes")

router = APIRouter(prefix="/api")


@router.post(f"/jobs/{JOB_NAME}/start", response_model=CommandResponse)
def start_job() -> CommandResponse:
    result = runtime_module.get_runtime().jobs.start()
    return CommandResponse(text=result.text, appearance=result.appearance)


@router.post(f"/jobs/{JOB_NAME}/stop", response_model=CommandResponse)
def stop_job() -> CommandResponse:
    result = runtime_module.get_runtime().jobs.stop()
    return CommandResponse(text=result.text, appearance=result.appearance)


@router.get(f"/jobs/{JOB_NAME}", response_model=JobStatusResponse)
def job_status() -> JobStatusResponse:
    status = runtime_module.get_runtime().jobs.status()
    return JobStatusResponse(
        name=JOB_NAME,
        scheduled=status.scheduled,
        job_id=status.job_id,
        stored_job_id=status.stored_job_id,
        cron=status.cron,
        next_run_time=status.next_run_time,
    )


@router.post("/sync/run", response_model=SyncRunResponse)
async def run_sync() -> SyncRunResponse | JSONResponse:
    """Run one sync immediately, outside the schedule."""
    try:
        outcome = await sync_once(runtime_module.get_runtime())
    except ConfigurationError as exc:
        return JSONResponse(status_code=exc.status_code, content={"error": "configuration", "detail": exc.message})
    except Exception:
        logger.exception({"event": "sync.manual_run.failed"})
        return JSONResponse(status_code=502, content={"error": "sync_failed"})
    return SyncRunResponse(
        status=outcome.status.value,
        reason=outcome.reason.value if outcome.reason else None,
        widget_id=outcome.widget_id,
    )
