"""Keep one named community widget in step with an HTTP content source."""
from __future__ import annotations

import logging
from typing import Optional, Union

from ..models import (
    ImageData,
    OutcomeStatus,
    SkipReason,
    SyncOutcome,
    SyncTarget,
    Widget,
    WidgetKind,
)
from ..utils.errors import PlatformAPIError
from .interfaces import AssetUploader, ConditionalFetcher, KeyValueStoreProtocol, WidgetStore

Logger = Union[logging.Logger, logging.LoggerAdapter]


def cache_key(target: SyncTarget) -> str:
    """Key-value store key holding the Last-Modified token for `target`."""
    return f"widget:{target.name.casefold()}:last_modified"


class SyncRoutine:
    """Fetch, classify, reconcile, persist.

    Each run performs at most one delete, one upload, one create-or-update
    and one cache token write. Nothing is retried within a run; the next
    scheduled run is the retry.
    """

    def __init__(
        self,
        *,
        community: str,
        fetcher: ConditionalFetcher,
        store: KeyValueStoreProtocol,
        widgets: WidgetStore,
        uploader: AssetUploader,
        logger: Optional[Logger] = None,
    ):
        self.community = community
        self.fetcher = fetcher
        self.store = store
        self.widgets = widgets
        self.uploader = uploader
        self.log = logger or logging.getLogger("widget_sync.sync")

    async def synchronize(self, target: SyncTarget) -> SyncOutcome:
        token_key = cache_key(target)
        last_modified = self.store.get(token_key)

        result = await self.fetcher.fetch(target.source_url, if_modified_since=last_modified)

        if result.not_modified:
            self.log.info({"event": "sync.unchanged", "widget": target.name})
            return SyncOutcome(status=OutcomeStatus.UNCHANGED)

        if not result.ok:
            self.log.error({"event": "sync.http_error", "status_code": result.status_code})
            return SyncOutcome.skipped(SkipReason.HTTP_ERROR)

        content_kind = result.content_kind()
        if content_kind is None:
            self.log.error(
                {
                    "event": "sync.invalid_content_type",
                    "content_type": result.content_type,
                    "expected": ["text/plain", "image/*"],
                }
            )
            return SyncOutcome.skipped(SkipReason.INVALID_CONTENT_TYPE)

        self.log.info({"event": "sync.content_changed", "kind": content_kind.value})

        matches = [w for w in await self.widgets.list_widgets(self.community) if target.matches(w.name)]
        if len(matches) > 1:
            self.log.error(
                {"event": "sync.ambiguous_existing", "widget": target.name, "count": len(matches)}
            )
            return SyncOutcome.skipped(SkipReason.AMBIGUOUS_EXISTING)

        existing = matches[0] if matches else None
        if existing is not None and existing.kind is WidgetKind.UNKNOWN:
            self.log.error({"event": "sync.unknown_existing_type", "widget_id": existing.id})
            return SyncOutcome.skipped(SkipReason.UNKNOWN_EXISTING_TYPE)

        if existing is not None and existing.kind is not content_kind:
            self.log.warning(
                {
                    "event": "sync.replacing_widget",
                    "widget_id": existing.id,
                    "existing_kind": existing.kind.value,
                    "content_kind": content_kind.value,
                }
            )
            await self.widgets.delete_widget(self.community, existing.id)
            existing = None

        candidate = Widget(
            id=existing.id if existing is not None else None,
            name=target.name,
            kind=content_kind,
        )
        if content_kind is WidgetKind.IMAGE:
            asset = await self._upload(target.source_url)
            if asset is None:
                self.log.error({"event": "sync.upload_failed", "source_url": target.source_url})
                return SyncOutcome.skipped(SkipReason.UPLOAD_FAILED)
            candidate.images = [ImageData(url=asset.media_url)]
        else:
            candidate.text = result.text

        if candidate.id:
            saved = await self._save(self.widgets.update_widget, candidate)
            if saved is None:
                self.log.error({"event": "sync.update_failed", "kind": content_kind.value})
                return SyncOutcome.skipped(SkipReason.UPDATE_FAILED)
            outcome = SyncOutcome(status=OutcomeStatus.UPDATED, widget_id=saved.id)
        else:
            saved = await self._save(self.widgets.create_widget, candidate)
            if saved is None:
                self.log.error({"event": "sync.create_failed", "kind": content_kind.value})
                return SyncOutcome.skipped(SkipReason.CREATE_FAILED)
            outcome = SyncOutcome(status=OutcomeStatus.CREATED, widget_id=saved.id)

        self.log.info(
            {"event": f"sync.{outcome.status.value}", "kind": content_kind.value, "widget_id": outcome.widget_id}
        )

        if result.last_modified:
            self.store.set(token_key, result.last_modified)
            self.log.info({"event": "sync.token_saved", "last_modified": result.last_modified})
        else:
            self.log.warning({"event": "sync.no_last_modified"})
        return outcome

    async def _upload(self, source_url: str):
        try:
            return await self.uploader.upload_image(source_url)
        except PlatformAPIError as exc:
            self.log.warning({"event": "sync.upload_rejected", "status_code": exc.status_code, "error": exc.message})
            return None

    async def _save(self, operation, widget: Widget) -> Optional[Widget]:
        try:
            return await operation(self.community, widget)
        except PlatformAPIError as exc:
            self.log.warning({"event": "sync.save_rejected", "status_code": exc.status_code, "error": exc.message})
            return None
