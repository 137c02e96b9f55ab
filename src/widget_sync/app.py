import logging

from fastapi import FastAPI

from . import runtime as runtime_module
from .config import settings
from .schemas import HealthResponse
from .storage import get_engine, init_db
from .sync.routes import router as sync_router
from .telemetry import setup_logging

logger = logging.getLogger("widget_sync")


app = FastAPI(title="Widget Sync")
app.include_router(sync_router)


@app.on_event("startup")
async def on_startup() -> None:
    setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)
    logger.info(
        {
            "event": "boot",
            "service": settings.APP_NAME,
            "version": settings.VERSION,
            "env": settings.ENV,
        }
    )

    init_db(get_engine(settings.DB_PATH))
    logger.info({"event": "storage.initialized", "db": settings.DB_PATH.name})

    runtime = runtime_module.get_runtime()
    runtime.scheduler.start()
    # Jobs live in memory; bring back the one that was running before this process started.
    if runtime.jobs.rearm():
        logger.info({"event": "job.restarted"})


@app.on_event("shutdown")
async def on_shutdown() -> None:
    await runtime_module.get_runtime().aclose()
    runtime_module.reset_runtime()


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    logger.debug({"event": "health.check"})
    return HealthResponse(ok=True, version=settings.VERSION, service=settings.APP_NAME)
