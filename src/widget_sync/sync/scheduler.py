"""Scheduled widget refresh management."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Awaitable, Callable, Optional, Sequence
from uuid import uuid4

from apscheduler.job import Job
from apscheduler.schedulers.base import BaseScheduler
from apscheduler.triggers.cron import CronTrigger

from .interfaces import KeyValueStoreProtocol

logger = logging.getLogger("widget_sync.scheduler")

JOB_NAME = "summary-update"
JOB_ID_KEY = "summary:job:id"


def build_cron_expression(frequency: int) -> str:
    """Crontab string running every `frequency` minutes (1-60)."""
    if frequency == 1:
        return "* * * * *"
    if frequency == 60:
        return "0 * * * *"
    return f"*/{frequency} * * * *"


@dataclass(slots=True)
class CommandResult:
    text: str
    appearance: str = "neutral"


@dataclass(slots=True)
class JobStatus:
    scheduled: bool
    job_id: Optional[str] = None
    stored_job_id: Optional[str] = None
    cron: Optional[str] = None
    next_run_time: Optional[datetime] = None


class JobManager:
    """Start, stop and re-arm the periodic widget refresh job."""

    def __init__(
        self,
        scheduler: BaseScheduler,
        store: KeyValueStoreProtocol,
        job_func: Callable[..., Awaitable[Any]],
        *,
        frequency: Callable[[], int],
        job_args: Sequence[Any] = (),
    ) -> None:
        self._scheduler = scheduler
        self._store = store
        self._job_func = job_func
        self._job_args = tuple(job_args)
        self._frequency = frequency
        self._cron: Optional[str] = None

    def find_job(self) -> Optional[Job]:
        return next((job for job in self._scheduler.get_jobs() if job.name == JOB_NAME), None)

    def _schedule(self) -> Job:
        expression = build_cron_expression(self._frequency())
        job = self._scheduler.add_job(
            self._job_func,
            trigger=CronTrigger.from_crontab(expression, timezone="UTC"),
            args=self._job_args,
            id=uuid4().hex,
            name=JOB_NAME,
            max_instances=1,
            coalesce=True,
        )
        try:
            self._store.set(JOB_ID_KEY, job.id)
        except Exception:
            # Scheduler and stored id must agree.
            self._scheduler.remove_job(job.id)
            raise
        self._cron = expression
        return job

    def start(self) -> CommandResult:
        step = 1
        try:
            existing = self.find_job()
            step = 2
            if existing is not None:
                logger.info({"event": "job.start.already_scheduled", "job_id": existing.id})
                return CommandResult("Summary Widget updates are already running.")

            step = 3
            job = self._schedule()
            logger.info({"event": "job.start.scheduled", "job_id": job.id, "cron": self._cron})
            return CommandResult(f"Summary Widget updates scheduled! ID: {job.id}", "success")
        except Exception:
            logger.exception({"event": "job.start.failed", "step": step})
            return CommandResult(
                f"There was an error ({step}) while scheduling the Summary Widget update job."
            )

    def stop(self) -> CommandResult:
        step = 1
        try:
            existing = self.find_job()
            step = 2
            if existing is None:
                logger.info({"event": "job.stop.not_scheduled"})
                return CommandResult("Summary Widget updates are not currently scheduled.")

            step = 3
            self._scheduler.remove_job(existing.id)
            step = 4
            self._store.delete(JOB_ID_KEY)
            self._cron = None
            logger.info({"event": "job.stop.removed", "job_id": existing.id})
            return CommandResult("Summary Widget updates stopped!", "success")
        except Exception:
            logger.exception({"event": "job.stop.failed", "step": step})
            return CommandResult(
                f"There was an error ({step}) while stopping the Summary Widget update job."
            )

    def rearm(self) -> bool:
        """Reschedule after an upgrade or restart if the job was running before.

        Returns True when a job was scheduled.
        """
        try:
            if not self._store.get(JOB_ID_KEY):
                logger.info({"event": "job.rearm.not_requested", "hint": "start the job manually"})
                return False

            existing = self.find_job()
            if existing is not None:
                logger.info({"event": "job.rearm.already_scheduled", "job_id": existing.id})
                return False

            job = self._schedule()
            logger.info({"event": "job.rearm.rescheduled", "job_id": job.id, "cron": self._cron})
            return True
        except Exception:
            logger.exception({"event": "job.rearm.failed"})
            return False

    def status(self) -> JobStatus:
        job = self.find_job()
        return JobStatus(
            scheduled=job is not None,
            job_id=job.id if job is not None else None,
            stored_job_id=self._store.get(JOB_ID_KEY),
            cron=self._cron if job is not None else None,
            next_run_time=getattr(job, "next_run_time", None),
        )
