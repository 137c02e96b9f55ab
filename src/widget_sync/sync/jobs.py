"""Entry points run by the scheduler and the manual sync route."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from pydantic import ValidationError

from ..config import Settings
from ..models import SyncOutcome, SyncTarget
from ..telemetry import bind, log_error
from ..utils.errors import ConfigurationError
from .scheduler import JOB_NAME

if TYPE_CHECKING:
    from ..runtime import Runtime

logger = logging.getLogger("widget_sync.jobs")


def resolve_target(cfg: Settings) -> tuple[str, SyncTarget]:
    """Community name and sync target from the current settings.

    Raises:
        ConfigurationError: When a required setting is missing or invalid
    """
    if not cfg.COMMUNITY_NAME.strip():
        raise ConfigurationError("Community name setting is missing.")
    if not cfg.WIDGET_NAME.strip():
        raise ConfigurationError("Widget name setting is missing.")
    if not cfg.WIDGET_DOMAIN:
        raise ConfigurationError("Widget domain setting is missing.")
    try:
        target = SyncTarget(name=cfg.WIDGET_NAME, source_url=cfg.source_url)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid sync target: {exc.errors()[0]['msg']}") from exc
    return cfg.COMMUNITY_NAME.strip(), target


async def sync_once(runtime: "Runtime") -> SyncOutcome:
    """Run the routine once with the runtime's current settings."""
    community, target = resolve_target(runtime.settings)
    log = bind(logger, job=JOB_NAME, community=community, widget=target.name)
    outcome = await runtime.build_routine(community, log).synchronize(target)
    log.info(
        {
            "event": "job.finished",
            "status": outcome.status.value,
            "reason": outcome.reason.value if outcome.reason else None,
        }
    )
    return outcome


async def run_summary_update(runtime: "Runtime") -> Optional[SyncOutcome]:
    """Scheduled job body. Never raises; the next scheduled run is the retry."""
    try:
        return await sync_once(runtime)
    except ConfigurationError as exc:
        logger.error({"event": "job.config_missing", "job": JOB_NAME, "error": exc.message})
    except Exception as exc:
        log_error(logger, "job.failed", exc, {"job": JOB_NAME})
    return None
