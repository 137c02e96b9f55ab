"""Widget synchronization: the routine, its HTTP source and job scheduling."""

from .routine import SyncRoutine, cache_key
from .scheduler import JOB_NAME, JobManager, build_cron_expression
from .source_client import SourceClient

__all__ = ["JOB_NAME", "JobManager", "SourceClient", "SyncRoutine", "build_cron_expression", "cache_key"]
