"""Media references and their asynchronous preview metadata."""

from __future__ import annotations

import asyncio
import logging
from pathlib import PurePosixPath
from typing import Any, Iterable, Mapping, Optional, Protocol
from urllib.parse import urlparse

import requests
from pydantic import BaseModel

from ..consts import MEDIA_TIMEOUT_DEFAULT
from ..enums import MediaState
from ..errors import NotFoundError, SpiderBoxesException
from ..i18n import gettext as _
from .base import FieldControl, ValidationResult, as_list

logger = logging.getLogger(__name__)


class MediaInfo(BaseModel):
    id: str
    url: str
    filename: str = ""
    mime_type: str = ""


class MediaSlot(BaseModel):
    id: str
    state: MediaState = MediaState.LOADING
    info: Optional[MediaInfo] = None


class MediaResolver(Protocol):
    async def resolve(self, media_id: str) -> MediaInfo: ...


class StaticMediaResolver:
    """Resolver backed by a fixed mapping of id to metadata."""

    def __init__(self, items: Mapping[str, MediaInfo | Mapping[str, Any]]):
        self._items = {
            str(media_id): item if isinstance(item, MediaInfo) else MediaInfo(id=str(media_id), **item)
            for media_id, item in items.items()
        }

    async def resolve(self, media_id: str) -> MediaInfo:
        info = self._items.get(str(media_id))
        if info is None:
            raise NotFoundError("Media", str(media_id))
        return info


class HttpMediaResolver:
    """Resolver fetching ``{base_url}/{id}`` as JSON.

    The blocking request runs in a worker thread so concurrent lookups do
    not hold up the event loop.
    """

    def __init__(self, base_url: str, timeout: int = MEDIA_TIMEOUT_DEFAULT):
        parsed_url = urlparse(str(base_url))
        if not parsed_url.scheme or not parsed_url.netloc:
            raise SpiderBoxesException("Invalid media URL format: missing scheme or netloc")
        self.base_url = str(base_url).rstrip("/")
        self.timeout = timeout

    async def resolve(self, media_id: str) -> MediaInfo:
        return await asyncio.to_thread(self.fetch, str(media_id))

    def fetch(self, media_id: str) -> MediaInfo:
        url = f"{self.base_url}/{media_id}"
        logger.debug(f"Fetching media metadata: {url}")
        try:
            response = requests.get(url, timeout=self.timeout)
            if response.status_code == 404:
                raise NotFoundError("Media", media_id)
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as e:
            status_code = getattr(e.response, "status_code", "N/A")
            logger.error(f"Failed to fetch media {media_id}: status_code={status_code}")
            raise SpiderBoxesException(
                f"Failed to fetch media {media_id} (status: {status_code})"
            ) from e
        except ValueError as e:
            raise SpiderBoxesException(f"Invalid media response for {media_id}") from e

        media_url = data.get("url") or data.get("source_url")
        if not media_url:
            raise SpiderBoxesException(f"Invalid media response for {media_id}: missing 'url'")
        return MediaInfo(
            id=str(data.get("id", media_id)),
            url=media_url,
            filename=data.get("filename") or PurePosixPath(urlparse(media_url).path).name,
            mime_type=data.get("mime_type") or data.get("mime") or "",
        )


class MediaPreview:
    """Per-id preview slots filled lazily by a resolver.

    Ids already resolved keep their slot; only unknown ids are fetched, all
    at once, and each slot is updated as soon as its own lookup finishes.
    A failed lookup leaves the slot in the ``not_found`` state.
    """

    def __init__(self, resolver: MediaResolver):
        self.resolver = resolver
        self.slots: dict[str, MediaSlot] = {}

    def slot(self, media_id: Any) -> MediaSlot:
        return self.slots.get(str(media_id)) or MediaSlot(id=str(media_id))

    def is_known(self, media_id: Any) -> bool:
        return str(media_id) in self.slots

    async def load(self, media_ids: Iterable[Any]) -> list[MediaSlot]:
        ids = [str(media_id) for media_id in media_ids]
        pending = []
        for media_id in dict.fromkeys(ids):
            if media_id not in self.slots:
                self.slots[media_id] = MediaSlot(id=media_id)
                pending.append(media_id)

        if pending:
            await asyncio.gather(*(self._resolve(media_id) for media_id in pending))
        return [self.slots[media_id] for media_id in ids]

    async def _resolve(self, media_id: str) -> None:
        try:
            info = await self.resolver.resolve(media_id)
        except NotFoundError:
            logger.info(f"Media not found: {media_id}")
            self.slots[media_id] = MediaSlot(id=media_id, state=MediaState.NOT_FOUND)
        except Exception as e:
            logger.warning(f"Failed to resolve media {media_id}: {e}")
            self.slots[media_id] = MediaSlot(id=media_id, state=MediaState.NOT_FOUND)
        else:
            self.slots[media_id] = MediaSlot(id=media_id, state=MediaState.READY, info=info)


def _coerce_id(raw: Any) -> Any:
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    text = str(raw).strip()
    if not text:
        return None
    return int(text) if text.isdecimal() else text


class MediaControl(FieldControl):
    """Single media id, or a list of ids when ``multiple``."""

    kind = "media"

    def __init__(self, descriptor, name=None, media_preview: Optional[MediaPreview] = None, **options):
        super().__init__(descriptor, name, **options)
        self.preview = media_preview

    def _attributes(self):
        return {
            "multiple": self.descriptor.multiple,
            "media_type": self.setting("media_type"),
            "file_extensions": self.setting("file_extensions"),
            "button_text": self.setting("button_text", _("Choose Media")),
        }

    def slot(self, media_id) -> MediaSlot:
        if self.preview is None:
            return MediaSlot(id=str(media_id))
        return self.preview.slot(media_id)

    def _render(self, value):
        rendered = super()._render(value)
        rendered.attributes["media"] = [
            self.slot(media_id).model_dump(mode="json") for media_id in as_list(value)
        ]
        return rendered

    def sanitize(self, raw):
        if self.descriptor.multiple:
            ids = [_coerce_id(item) for item in as_list(raw)]
            return [media_id for media_id in ids if media_id is not None]
        if isinstance(raw, (list, tuple)):
            raw = raw[0] if raw else None
        if raw is None:
            return ""
        media_id = _coerce_id(raw)
        return "" if media_id is None else media_id

    def _validate(self, value):
        ids = as_list(value)
        if not self.descriptor.multiple and len(ids) > 1:
            return ValidationResult.fail(_("Only one media file may be selected"))
        for media_id in ids:
            if isinstance(media_id, (list, dict)) or _coerce_id(media_id) is None:
                return ValidationResult.fail(_("Invalid media file"))
            if self.preview is not None and self.slot(media_id).state == MediaState.NOT_FOUND:
                return ValidationResult.fail(_("Invalid media file"))
        return ValidationResult.ok()
