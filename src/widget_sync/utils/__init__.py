"""Shared helpers."""

from .errors import ConfigurationError, PlatformAPIError, WidgetSyncError

__all__ = ["ConfigurationError", "PlatformAPIError", "WidgetSyncError"]
