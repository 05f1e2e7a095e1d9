"""In-memory catalogs of type definitions, one per namespace."""

from __future__ import annotations

import logging
from typing import Any, Generic, Iterator, Mapping, Optional, TypeVar

from pydantic import ValidationError

from .consts import ACTION_REGISTER_TYPES, ACTION_TYPE_REGISTERED, FILTER_GET_TYPES
from .enums import Namespace
from .hooks import HookManager
from .schema import TypeDefinition

logger = logging.getLogger(__name__)

V = TypeVar("V")


class OrderedRegistry(Generic[V]):
    """Insertion-ordered map where the first write for a key wins."""

    def __init__(self):
        self._items: dict[str, V] = {}

    def insert_if_absent(self, key: str, value: V) -> bool:
        if key in self._items:
            return False
        self._items[key] = value
        return True

    def get(self, key: str) -> Optional[V]:
        return self._items.get(key)

    def has(self, key: str) -> bool:
        return key in self._items

    def remove(self, key: str) -> bool:
        return self._items.pop(key, None) is not None

    def items(self):
        return self._items.items()

    def values(self):
        return self._items.values()

    def to_dict(self) -> dict[str, V]:
        return dict(self._items)

    def __contains__(self, key: object) -> bool:
        return key in self._items

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)


NAMESPACE_CATEGORY = {
    Namespace.FIELD: "general",
    Namespace.COMPONENT: "layout",
    Namespace.SECTION: "general",
}


def default_field_types() -> dict[str, dict[str, Any]]:
    return {
        "button": {
            "handler_ref": "spider_boxes.renderer.controls.ButtonControl",
            "supports": ["label", "description", "class", "onclick"],
        },
        "checkbox": {
            "handler_ref": "spider_boxes.renderer.controls.CheckboxControl",
            "supports": ["label", "description", "options", "multiple", "value"],
        },
        "media": {
            "handler_ref": "spider_boxes.renderer.media.MediaControl",
            "supports": ["label", "description", "multiple", "media_type", "value"],
        },
        "radio": {
            "handler_ref": "spider_boxes.renderer.controls.RadioControl",
            "supports": ["label", "description", "options", "value"],
        },
        "repeater": {
            "handler_ref": "spider_boxes.renderer.repeater.RepeaterControl",
            "supports": ["label", "description", "repeater", "min", "max", "value"],
        },
        "select": {
            "handler_ref": "spider_boxes.renderer.controls.SelectControl",
            "supports": ["label", "description", "options", "multiple", "value"],
        },
        "react-select": {
            "handler_ref": "spider_boxes.renderer.controls.SelectControl",
            "supports": [
                "label",
                "description",
                "options",
                "multiple",
                "async",
                "ajax_action",
                "value",
            ],
        },
        "range": {
            "handler_ref": "spider_boxes.renderer.controls.RangeControl",
            "supports": ["label", "description", "min", "max", "step", "value"],
        },
        "switcher": {
            "handler_ref": "spider_boxes.renderer.controls.SwitcherControl",
            "supports": ["label", "description", "value"],
        },
        "text": {
            "handler_ref": "spider_boxes.renderer.controls.TextControl",
            "supports": ["label", "description", "placeholder", "value"],
        },
        "datetime": {
            "handler_ref": "spider_boxes.renderer.controls.DateTimeControl",
            "supports": ["label", "description", "format", "value"],
        },
        "textarea": {
            "handler_ref": "spider_boxes.renderer.controls.TextareaControl",
            "supports": ["label", "description", "placeholder", "rows", "value"],
        },
        "wysiwyg": {
            "handler_ref": "spider_boxes.renderer.controls.TextareaControl",
            "supports": ["label", "description", "settings", "value"],
        },
        "tags": {
            "handler_ref": "spider_boxes.renderer.controls.TagsControl",
            "supports": ["label", "description", "placeholder", "max", "value"],
        },
    }


def default_component_types() -> dict[str, dict[str, Any]]:
    return {
        "accordion": {
            "handler_ref": "accordion",
            "supports": ["title", "description", "panes"],
            "children": ["pane"],
        },
        "pane": {
            "handler_ref": "pane",
            "supports": ["title", "description", "fields", "collapsed"],
            "parent": "accordion",
        },
        "tabs": {
            "handler_ref": "tabs",
            "supports": ["title", "tabs"],
            "children": ["tab"],
        },
        "tab": {
            "handler_ref": "tab",
            "supports": ["title", "icon", "fields", "active"],
            "parent": "tabs",
        },
        "row": {
            "handler_ref": "row",
            "supports": ["title", "columns", "gap", "align"],
            "children": ["column"],
        },
        "column": {
            "handler_ref": "column",
            "supports": ["width", "fields", "align"],
            "parent": "row",
        },
    }


def default_section_types() -> dict[str, dict[str, Any]]:
    return {
        "section": {
            "handler_ref": "section",
            "supports": ["title", "description", "components", "collapsible"],
        },
        "form": {
            "handler_ref": "form",
            "supports": ["title", "description", "components", "action", "method"],
        },
    }


DEFAULT_TYPES = {
    Namespace.FIELD: default_field_types,
    Namespace.COMPONENT: default_component_types,
    Namespace.SECTION: default_section_types,
}


class TypeRegistry:
    """Canonical catalog of type definitions for one namespace.

    Registration is a one-time bootstrap guard: the first definition for an
    id wins and later attempts return ``False`` without touching the entry.
    Concurrent registrations of the same new id may both pass the presence
    check; callers treat a ``False`` return as non-fatal.
    """

    def __init__(self, namespace: Namespace | str, hooks: Optional[HookManager] = None):
        self.namespace = Namespace(namespace)
        self.hooks = hooks or HookManager()
        self._types: OrderedRegistry[TypeDefinition] = OrderedRegistry()

    def bootstrap(self, extra_types: Optional[list[Mapping[str, Any]]] = None) -> "TypeRegistry":
        """Register the built-in types, then let extension code add more."""
        for type_id, definition in DEFAULT_TYPES[self.namespace]().items():
            self.register_type(type_id, definition)

        self.hooks.emit(ACTION_REGISTER_TYPES.format(namespace=self.namespace.value), self)

        for definition in extra_types or []:
            type_id = definition.get("id") or definition.get("type")
            if not type_id:
                logger.warning(f"Skipping configured {self.namespace.value} type without id")
                continue
            self.register_type(type_id, definition)

        logger.info(f"Registered {len(self._types)} {self.namespace.value} types")
        return self

    def register_type(self, type_id: str, definition: TypeDefinition | Mapping[str, Any]) -> bool:
        if self._types.has(type_id):
            logger.debug(f"{self.namespace.value} type already registered: {type_id}")
            return False

        type_definition = self._build_definition(type_id, definition)
        if not self._types.insert_if_absent(type_id, type_definition):
            return False

        self.hooks.emit(
            ACTION_TYPE_REGISTERED.format(namespace=self.namespace.value),
            type_id,
            type_definition,
        )
        return True

    def get_type(self, type_id: str) -> Optional[TypeDefinition]:
        return self._types.get(type_id)

    def get_all_types(self) -> dict[str, TypeDefinition]:
        return self.hooks.apply_filter(
            FILTER_GET_TYPES.format(namespace=self.namespace.value),
            self._types.to_dict(),
        )

    def type_exists(self, type_id: str) -> bool:
        return self._types.has(type_id)

    def has_children(self, type_id: str) -> bool:
        definition = self.get_type(type_id)
        return bool(definition and definition.children)

    def is_child_type(self, type_id: str) -> bool:
        definition = self.get_type(type_id)
        return bool(definition and definition.parent)

    def get_parent_type(self, type_id: str) -> Optional[str]:
        definition = self.get_type(type_id)
        return definition.parent if definition else None

    def get_allowed_children(self, type_id: str) -> list[str]:
        definition = self.get_type(type_id)
        return list(definition.children) if definition else []

    def __len__(self) -> int:
        return len(self._types)

    def _build_definition(self, type_id, definition) -> TypeDefinition:
        if isinstance(definition, TypeDefinition):
            data = definition.model_dump()
        else:
            data = dict(definition)
        data["id"] = type_id
        data.setdefault("category", NAMESPACE_CATEGORY[self.namespace])
        try:
            return TypeDefinition.model_validate(data)
        except ValidationError as e:
            raise ValueError(f"Invalid {self.namespace.value} type '{type_id}': {e}") from e
