"""Community platform REST client: widget CRUD and media upload."""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx

from ..models import ImageData, MediaAsset, Widget, WidgetKind
from ..utils.errors import PlatformAPIError, raise_for_platform_response

logger = logging.getLogger("widget_sync.platform")

_DEFAULT_STYLES = {"backgroundColor": "", "headerColor": ""}


class PlatformClient:
    """Widget store and asset uploader backed by the platform API."""

    def __init__(
        self,
        *,
        base_url: str = "https://oauth.reddit.com",
        token: str = "",
        user_agent: str = "widget-sync",
        timeout: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        headers = {"User-Agent": user_agent, "Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._headers = headers
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(base_url=base_url, timeout=timeout)

    # Widgets ---------------------------------------------------------------

    async def list_widgets(self, community: str) -> list[Widget]:
        response = await self._client.get(
            f"{_community_path(community)}/api/widgets", headers=self._headers
        )
        raise_for_platform_response(response)
        try:
            data = response.json()
        except ValueError:
            data = None
        items = (data.get("items") or {}) if isinstance(data, dict) else None
        if not isinstance(items, dict) or not all(isinstance(item, dict) for item in items.values()):
            # Never reconcile against a partial listing.
            raise PlatformAPIError(response.status_code, "Unexpected widget list payload", body=data)
        widgets = [_parse_widget(item, fallback_id=key) for key, item in items.items()]
        logger.debug({"event": "platform.widgets.listed", "community": community, "count": len(widgets)})
        return widgets

    async def create_widget(self, community: str, widget: Widget) -> Optional[Widget]:
        response = await self._client.post(
            f"{_community_path(community)}/api/widget",
            json=_serialize_widget(widget),
            headers=self._headers,
        )
        raise_for_platform_response(response)
        return _parse_response_widget(response)

    async def update_widget(self, community: str, widget: Widget) -> Optional[Widget]:
        if not widget.id:
            raise ValueError("Cannot update a widget without an id")
        response = await self._client.put(
            f"{_community_path(community)}/api/widget/{quote(widget.id, safe='')}",
            json=_serialize_widget(widget),
            headers=self._headers,
        )
        raise_for_platform_response(response)
        return _parse_response_widget(response)

    async def delete_widget(self, community: str, widget_id: str) -> None:
        response = await self._client.delete(
            f"{_community_path(community)}/api/widget/{quote(widget_id, safe='')}",
            headers=self._headers,
        )
        raise_for_platform_response(response)

    # Media -----------------------------------------------------------------

    async def upload_image(self, source_url: str) -> Optional[MediaAsset]:
        """Have the platform pull `source_url` and host it; None if no asset came back."""
        response = await self._client.post(
            "/api/media/upload",
            json={"url": source_url, "type": "image"},
            headers=self._headers,
        )
        raise_for_platform_response(response)
        try:
            data = response.json()
        except ValueError:
            logger.warning({"event": "platform.upload.unreadable", "status_code": response.status_code})
            return None
        if not isinstance(data, dict) or not data.get("mediaUrl"):
            return None
        return MediaAsset(media_id=str(data.get("mediaId") or ""), media_url=data["mediaUrl"])

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()


def _community_path(community: str) -> str:
    return f"/r/{quote(community, safe='')}"


def _parse_widget(item: Dict[str, Any], fallback_id: str | None = None) -> Widget:
    kind = WidgetKind.from_platform(item.get("kind"))
    images = []
    entries = item.get("data")
    if kind is WidgetKind.IMAGE and isinstance(entries, list):
        images = [
            ImageData(
                url=entry.get("url") or "",
                link_url=entry.get("linkUrl") or "",
                width=_as_int(entry.get("width")),
                height=_as_int(entry.get("height")),
            )
            for entry in entries
            if isinstance(entry, dict)
        ]
    return Widget(
        id=item.get("id") or fallback_id,
        name=str(item.get("shortName") or ""),
        kind=kind,
        text=item.get("text") if kind is WidgetKind.TEXT else None,
        images=images,
    )


def _as_int(value: Any) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0


def _parse_response_widget(response: httpx.Response) -> Optional[Widget]:
    try:
        data = response.json()
    except ValueError:
        return None
    if not isinstance(data, dict) or not data.get("id"):
        return None
    return _parse_widget(data)


def _serialize_widget(widget: Widget) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "kind": widget.kind.value,
        "shortName": widget.name,
        "styles": dict(_DEFAULT_STYLES),
    }
    if widget.kind is WidgetKind.TEXT:
        payload["text"] = widget.text or ""
    elif widget.kind is WidgetKind.IMAGE:
        payload["data"] = [
            {
                "url": image.url,
                "linkUrl": image.link_url,
                "width": image.width,
                "height": image.height,
            }
            for image in widget.images
        ]
    else:
        raise ValueError(f"Cannot serialize widget of kind {widget.kind.value!r}")
    return payload
