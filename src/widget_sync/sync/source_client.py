"""HTTP client for the content source polled by the sync job."""
from typing import Optional

import httpx

from ..models import FetchResult


class SourceClient:
    """Conditional GET against the content source."""

    def __init__(
        self,
        http_client: Optional[httpx.AsyncClient] = None,
        *,
        timeout: float = 30.0,
        user_agent: str = "widget-sync",
    ):
        self._owns_client = http_client is None
        self.client = http_client or httpx.AsyncClient(
            timeout=timeout, headers={"User-Agent": user_agent}
        )

    async def fetch(self, url: str, if_modified_since: Optional[str] = None) -> FetchResult:
        """
        Fetch the source, short-circuiting when it has not changed.

        Args:
            url: Source endpoint
            if_modified_since: Last-Modified value from the previous successful sync

        Returns:
            FetchResult; status 304 when the source reports no change

        Raises:
            httpx.TransportError: When the source cannot be reached
        """
        headers = {"If-Modified-Since": if_modified_since} if if_modified_since else None
        response = await self.client.get(url, headers=headers, follow_redirects=True)

        content_type = response.headers.get("Content-Type")
        return FetchResult(
            status_code=response.status_code,
            body=response.content,
            content_type=content_type.strip().lower() if content_type else None,
            last_modified=response.headers.get("Last-Modified"),
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()
