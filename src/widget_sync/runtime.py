"""Process-wide service wiring."""
from __future__ import annotations

import logging
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from . import config
from .config import Settings
from .platform import PlatformClient
from .storage import KeyValueStore
from .sync.jobs import run_summary_update
from .sync.routine import Logger, SyncRoutine
from .sync.scheduler import JobManager
from .sync.source_client import SourceClient

logger = logging.getLogger("widget_sync.runtime")


class Runtime:
    """Owns the store, HTTP clients, scheduler and job manager."""

    def __init__(
        self,
        cfg: Settings,
        *,
        store: Optional[KeyValueStore] = None,
        source: Optional[SourceClient] = None,
        platform: Optional[PlatformClient] = None,
        scheduler: Optional[AsyncIOScheduler] = None,
    ) -> None:
        self.settings = cfg
        self.store = store or KeyValueStore()
        self.source = source or SourceClient(timeout=cfg.HTTP_TIMEOUT, user_agent=cfg.USER_AGENT)
        self.platform = platform or PlatformClient(
            base_url=cfg.PLATFORM_API_BASE,
            token=cfg.PLATFORM_TOKEN,
            user_agent=cfg.USER_AGENT,
            timeout=cfg.HTTP_TIMEOUT,
        )
        self.scheduler = scheduler or AsyncIOScheduler(timezone="UTC")
        self.jobs = JobManager(
            self.scheduler,
            self.store,
            run_summary_update,
            job_args=(self,),
            frequency=lambda: self.settings.UPDATE_FREQUENCY,
        )

    def build_routine(self, community: str, log: Optional[Logger] = None) -> SyncRoutine:
        return SyncRoutine(
            community=community,
            fetcher=self.source,
            store=self.store,
            widgets=self.platform,
            uploader=self.platform,
            logger=log,
        )

    async def aclose(self) -> None:
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
        await self.source.aclose()
        await self.platform.aclose()
        logger.info({"event": "runtime.closed"})


_runtime: Optional[Runtime] = None


def get_runtime() -> Runtime:
    global _runtime
    if _runtime is None:
        _runtime = Runtime(config.settings)
    return _runtime


def reset_runtime() -> None:
    global _runtime
    _runtime = None
