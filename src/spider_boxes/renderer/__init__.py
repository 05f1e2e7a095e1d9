"""Polymorphic field controls and the renderer that drives them."""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Mapping, Optional

from ..consts import FILTER_AFTER_RENDER, FILTER_BEFORE_RENDER
from ..hooks import HookManager
from ..schema import FieldDescriptor
from .base import FieldControl, RenderedControl, ValidationResult
from .factory import CONTROLS, control_for
from .media import (
    HttpMediaResolver,
    MediaInfo,
    MediaPreview,
    MediaResolver,
    MediaSlot,
    StaticMediaResolver,
)
from .repeater import move_row

__all__ = [
    "CONTROLS",
    "DynamicFieldRenderer",
    "FieldControl",
    "HttpMediaResolver",
    "MediaInfo",
    "MediaPreview",
    "MediaResolver",
    "MediaSlot",
    "RenderedControl",
    "StaticMediaResolver",
    "ValidationResult",
    "control_for",
    "move_row",
]

logger = logging.getLogger(__name__)

OnChange = Callable[[str, bool, Any], None]


class DynamicFieldRenderer:
    """Render, edit and validate fields described by :class:`FieldDescriptor`.

    Edits are kept as local state and reported synchronously through
    ``on_change(field_id, is_meta, value)``. Media metadata is fetched only
    through :meth:`load_media`; rendering never waits for it.
    """

    def __init__(
        self,
        on_change: Optional[OnChange] = None,
        media_resolver: Optional[MediaResolver] = None,
        hooks: Optional[HookManager] = None,
    ):
        self.on_change = on_change
        self.hooks = hooks or HookManager()
        self.media = MediaPreview(media_resolver) if media_resolver is not None else None
        self.values: dict[str, Any] = {}

    def control(self, descriptor: FieldDescriptor) -> FieldControl:
        return control_for(descriptor, media_preview=self.media)

    def render(self, descriptor: FieldDescriptor, value: Any = None) -> RenderedControl:
        descriptor = self.hooks.apply_filter(FILTER_BEFORE_RENDER, descriptor)
        if value is None:
            value = self.values.get(descriptor.id)
        rendered = self.control(descriptor).render(value)
        return self.hooks.apply_filter(FILTER_AFTER_RENDER, rendered, descriptor)

    def render_all(
        self, descriptors: Iterable[FieldDescriptor], values: Optional[Mapping[str, Any]] = None
    ) -> list[RenderedControl]:
        values = values or {}
        return [self.render(descriptor, values.get(descriptor.id)) for descriptor in descriptors]

    def change(self, descriptor: FieldDescriptor, value: Any, is_meta: bool = False) -> Any:
        self.values[descriptor.id] = value
        if self.on_change is not None:
            self.on_change(descriptor.id, is_meta, value)
        return value

    def sanitize(self, descriptor: FieldDescriptor, value: Any) -> Any:
        return self.control(descriptor).sanitize(value)

    def validate(self, descriptor: FieldDescriptor, value: Any) -> ValidationResult:
        return self.control(descriptor).validate(value)

    def validate_form(
        self,
        descriptors: Iterable[FieldDescriptor],
        values: Mapping[str, Any],
        visible_only: bool = True,
    ) -> dict[str, str]:
        """Validate every field and return ``{path: message}`` for failures.

        Fields hidden by their ``conditional`` are skipped unless
        ``visible_only`` is false.
        """
        errors: dict[str, str] = {}
        for descriptor in descriptors:
            if visible_only and descriptor.conditional and not descriptor.conditional.matches(values):
                continue
            result = self.validate(descriptor, values.get(descriptor.id))
            if result.valid:
                continue
            errors[descriptor.id] = result.message
            errors.update(result.errors)
        return errors

    async def load_media(self, media_ids: Iterable[Any]) -> list[MediaSlot]:
        if self.media is None:
            logger.debug("No media resolver configured, skipping media lookup")
            return []
        return await self.media.load(media_ids)
