from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from ..models import FetchResult, MediaAsset, Widget


@runtime_checkable
class ConditionalFetcher(Protocol):
    async def fetch(self, url: str, if_modified_since: Optional[str] = None) -> FetchResult: ...


@runtime_checkable
class KeyValueStoreProtocol(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


@runtime_checkable
class WidgetStore(Protocol):
    async def list_widgets(self, community: str) -> list[Widget]: ...

    async def create_widget(self, community: str, widget: Widget) -> Optional[Widget]: ...

    async def update_widget(self, community: str, widget: Widget) -> Optional[Widget]: ...

    async def delete_widget(self, community: str, widget_id: str) -> None: ...


@runtime_checkable
class AssetUploader(Protocol):
    async def upload_image(self, source_url: str) -> Optional[MediaAsset]: ...
