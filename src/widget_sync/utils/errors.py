"""Error types and response checks shared by the HTTP clients."""
from typing import Any, Optional

import httpx
from fastapi import status


class WidgetSyncError(Exception):
    """Base exception for application errors."""
    def __init__(self, message: str, status_code: int = 500):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class ConfigurationError(WidgetSyncError):
    """Settings required for a sync run are missing."""
    def __init__(self, message: str):
        super().__init__(message, status.HTTP_409_CONFLICT)


class PlatformAPIError(WidgetSyncError):
    """The community platform rejected a request."""
    def __init__(self, status_code: int, message: str, *, body: Any = None):
        self.body = body
        super().__init__(message, status_code)


def raise_for_platform_response(response: httpx.Response) -> None:
    """
    Check a platform API response.

    Args:
        response: The httpx response to check

    Raises:
        PlatformAPIError: For any 4xx/5xx status
    """
    if not response.is_error:
        return

    body: Optional[Any]
    try:
        body = response.json()
    except ValueError:
        body = response.text or None

    message = None
    if isinstance(body, dict):
        message = body.get("message") or body.get("error") or body.get("explanation")
    if not message:
        message = f"Platform returned HTTP {response.status_code}"
    raise PlatformAPIError(response.status_code, str(message), body=body)
