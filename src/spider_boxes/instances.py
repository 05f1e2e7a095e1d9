"""Type-aware CRUD over configured fields, components and sections."""

from __future__ import annotations

import copy
import logging
import re
from typing import Any, Mapping, Optional

from pydantic import ValidationError

from .consts import (
    ACTION_CHILD_ADDED,
    ACTION_CHILD_REMOVED,
    ACTION_INSTANCE_CREATED,
    ACTION_INSTANCE_REMOVED,
    ACTION_INSTANCE_UPDATED,
    CHILD_DEFAULTS,
    DEFAULT_CHILD_TITLES,
    FILTER_GET_INSTANCES,
    INSTANCE_ID_PATTERN,
    REQUIRED_INSTANCE_FIELDS,
)
from .enums import Namespace
from .errors import NotFoundError, SpiderBoxesException, ValidationFailedError
from .generator import ConfigFieldGenerator, flatten_descriptors
from .hooks import HookManager
from .i18n import gettext as _
from .renderer.factory import control_for
from .resolver import TypeResolver
from .schema import Instance
from .stores.base import MetaStore, OverrideStore
from .utils import get_now, is_empty

logger = logging.getLogger(__name__)

_ID_RE = re.compile(INSTANCE_ID_PATTERN)


class InstanceStore:
    """CRUD for one namespace's instances.

    Every write is validated in full before anything is persisted, so a
    rejected create or update leaves the store untouched.
    """

    def __init__(
        self,
        namespace: Namespace | str,
        resolver: TypeResolver,
        store: OverrideStore,
        hooks: Optional[HookManager] = None,
        meta_store: Optional[MetaStore] = None,
    ):
        self.namespace = Namespace(namespace)
        self.resolver = resolver
        self.store = store
        self.hooks = hooks or HookManager()
        self.meta_store = meta_store
        self.generator = ConfigFieldGenerator(self.hooks)

    @property
    def label(self) -> str:
        return self.namespace.value.capitalize()

    def _hook(self, template: str) -> str:
        return template.format(namespace=self.namespace.value)

    # ==================== Reads ====================

    def get(self, instance_id: str) -> Instance:
        record = self.store.get(instance_id)
        if record is None:
            raise NotFoundError(self.label, instance_id)
        return Instance.model_validate(record)

    def exists(self, instance_id: str) -> bool:
        return self.store.get(instance_id) is not None

    def list(
        self,
        parent_id: Optional[str] = None,
        context: Optional[str] = None,
        section_id: Optional[str] = None,
    ) -> list[Instance]:
        instances = [Instance.model_validate(record) for record in self.store.list()]
        if parent_id is not None:
            instances = [i for i in instances if i.parent_id == parent_id]
        if context is not None:
            instances = [i for i in instances if i.context == context]
        if section_id is not None:
            instances = [i for i in instances if i.section_id == section_id]
        instances.sort(key=lambda i: i.sort_order)
        return self.hooks.apply_filter(self._hook(FILTER_GET_INSTANCES), instances)

    # ==================== Writes ====================

    def create(self, data: Mapping[str, Any]) -> Instance:
        data = dict(data)
        self._check_required(data)

        instance_id = data["id"]
        if self.exists(instance_id):
            raise ValidationFailedError(
                [_("{label} already exists: {id}").format(label=self.label, id=instance_id)],
                ["id"],
            )

        now = get_now()
        data["namespace"] = self.namespace
        data["created_at"] = now
        data["updated_at"] = now
        instance = self._build(data)
        self._raise_for_settings(instance)

        self._save(instance)
        logger.info(f"{self.label} created: {instance.id} ({instance.type})")
        self.hooks.emit(self._hook(ACTION_INSTANCE_CREATED), instance)
        return instance

    def update(self, instance_id: str, patch: Mapping[str, Any]) -> Instance:
        existing = self.get(instance_id)

        data = existing.model_dump()
        data.update(patch)
        data["id"] = instance_id
        data["namespace"] = self.namespace
        data["created_at"] = existing.created_at
        data["updated_at"] = get_now()

        self._check_required(data)
        instance = self._build(data)
        self._raise_for_settings(instance)

        self._save(instance)
        logger.info(f"{self.label} updated: {instance_id}")
        self.hooks.emit(self._hook(ACTION_INSTANCE_UPDATED), instance)
        return instance

    def delete(self, instance_id: str) -> bool:
        instance = self.get(instance_id)
        self.store.delete(instance_id)
        if self.meta_store is not None:
            removed = self.meta_store.delete_meta_by_key(instance_id)
            logger.debug(f"Removed {removed} meta rows for {instance_id}")
        logger.info(f"{self.label} deleted: {instance_id}")
        self.hooks.emit(self._hook(ACTION_INSTANCE_REMOVED), instance)
        return True

    # ==================== Validation ====================

    def validate_settings(self, instance: Instance) -> dict[str, str]:
        """Validate supplied settings against the type's generated descriptors.

        Keys without a matching descriptor are not checked.

        Returns:
            Mapping of setting key (or nested repeater path) to error message
        """
        type_definition = self.resolver.resolve(instance.type)
        descriptors = flatten_descriptors(
            self.generator.generate(type_definition, instance.settings)
        )

        errors: dict[str, str] = {}
        for key, value in instance.settings.items():
            descriptor = descriptors.get(key)
            if descriptor is None:
                continue
            result = control_for(descriptor).validate(value)
            if not result.valid:
                errors[key] = result.message
                errors.update(result.errors)
        return errors

    def _check_required(self, data: Mapping[str, Any]) -> None:
        messages = []
        fields = []
        for name in REQUIRED_INSTANCE_FIELDS[self.namespace.value]:
            if is_empty(data.get(name)):
                messages.append(_("Missing required field: {name}").format(name=name))
                fields.append(name)

        instance_id = data.get("id")
        if not is_empty(instance_id) and not _ID_RE.match(str(instance_id)):
            messages.append(
                _("Invalid {namespace} id: {id}").format(
                    namespace=self.namespace.value, id=instance_id
                )
            )
            fields.append("id")

        type_name = data.get("type")
        if not is_empty(type_name) and not self.resolver.exists(str(type_name)):
            messages.append(
                _("Invalid {namespace} type: {type}").format(
                    namespace=self.namespace.value, type=type_name
                )
            )
            fields.append("type")

        if messages:
            logger.debug(f"{self.label} rejected: {'; '.join(messages)}")
            raise ValidationFailedError(messages, fields)

    def _raise_for_settings(self, instance: Instance) -> None:
        errors = self.validate_settings(instance)
        if errors:
            raise ValidationFailedError(
                [f"{key}: {message}" for key, message in errors.items()],
                list(errors),
            )

    @staticmethod
    def _build(data: Mapping[str, Any]) -> Instance:
        try:
            return Instance.model_validate(data)
        except ValidationError as e:
            messages = []
            fields = []
            for error in e.errors():
                loc = ".".join(str(part) for part in error["loc"])
                messages.append(f"{loc}: {error['msg']}")
                fields.append(str(error["loc"][0]) if error["loc"] else "")
            raise ValidationFailedError(messages, fields) from e

    def _save(self, instance: Instance) -> None:
        self.store.put(instance.id, instance.model_dump(mode="json"))

    # ==================== Container children ====================

    def add_child(self, parent_id: str, child_config: Optional[Mapping[str, Any]] = None) -> str:
        """Add a child (tab, pane, column) to a container component.

        Returns:
            The new child id, ``{parent}_{kind}_{n}``
        """
        self._require_components()
        parent = self.get(parent_id)
        children = copy.deepcopy(parent.children)

        child_id, child = self._make_child(parent, children, child_config or {})
        children[child_id] = child

        parent.children = children
        parent.updated_at = get_now()
        self._save(parent)
        logger.info(f"Added {child['type']} {child_id} to {parent_id}")
        self.hooks.emit(self._hook(ACTION_CHILD_ADDED), parent, child_id, child)
        return child_id

    def remove_child(self, parent_id: str, child_id: str) -> bool:
        self._require_components()
        record = self.store.get(parent_id)
        if record is None:
            return False
        parent = Instance.model_validate(record)
        if child_id not in parent.children:
            return False

        del parent.children[child_id]
        parent.updated_at = get_now()
        self._save(parent)
        logger.info(f"Removed child {child_id} from {parent_id}")
        self.hooks.emit(self._hook(ACTION_CHILD_REMOVED), parent, child_id)
        return True

    def create_with_defaults(
        self, type_name: str, instance_id: str, data: Optional[Mapping[str, Any]] = None
    ) -> Instance:
        """Create a container seeded with one child per allowed child kind."""
        self._require_components()
        data = dict(data or {})
        data["id"] = instance_id
        data["type"] = type_name
        if is_empty(data.get("title")) and self.resolver.exists(type_name):
            data["title"] = self.resolver.resolve(type_name).display_name
        self._check_required(data)

        parent = Instance(id=instance_id, type=type_name, namespace=self.namespace)
        children = dict(data.get("children") or {})
        for kind in self.resolver.resolve(type_name).children:
            config = {"type": kind}
            if kind == "tab":
                config["active"] = not any(c.get("type") == "tab" for c in children.values())
            child_id, child = self._make_child(parent, children, config)
            children[child_id] = child
        data["children"] = children
        return self.create(data)

    def _make_child(
        self,
        parent: Instance,
        children: dict[str, dict[str, Any]],
        child_config: Mapping[str, Any],
    ) -> tuple[str, dict[str, Any]]:
        allowed = self.resolver.resolve(parent.type).children
        if not allowed:
            raise ValidationFailedError(
                [_("{type} does not accept children").format(type=parent.type)], ["type"]
            )

        kind = child_config.get("type") or allowed[0]
        if kind not in allowed:
            raise ValidationFailedError(
                [
                    _("Invalid child type {kind} for {type}").format(
                        kind=kind, type=parent.type
                    )
                ],
                ["type"],
            )

        position = len(children) + 1
        child_id = f"{parent.id}_{kind}_{position}"
        while child_id in children:
            position += 1
            child_id = f"{parent.id}_{kind}_{position}"

        child: dict[str, Any] = {
            "type": kind,
            "title": DEFAULT_CHILD_TITLES.get(kind, "{n}").format(n=position),
            "description": "",
            "fields": [],
            **CHILD_DEFAULTS.get(kind, {}),
        }
        child.update(child_config)
        child["type"] = kind

        if kind == "tab" and child.get("active"):
            for sibling in children.values():
                if sibling.get("type") == "tab":
                    sibling["active"] = False

        return child_id, child

    def _require_components(self) -> None:
        if self.namespace != Namespace.COMPONENT:
            raise SpiderBoxesException(
                f"Children are only supported for components, not {self.namespace.value}s"
            )
