from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel


class HealthResponse(BaseModel):
    ok: bool
    version: str
    service: str


class CommandResponse(BaseModel):
    text: str
    appearance: Literal["success", "neutral"] = "neutral"


class JobStatusResponse(BaseModel):
    name: str
    scheduled: bool
    job_id: Optional[str] = None
    stored_job_id: Optional[str] = None
    cron: Optional[str] = None
    next_run_time: Optional[datetime] = None


class SyncRunResponse(BaseModel):
    status: str
    reason: Optional[str] = None
    widget_id: Optional[str] = None
