"""Two-source type resolution: bootstrap registry plus runtime overrides."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from pydantic import ValidationError

from .errors import NotFoundError, ValidationFailedError
from .registry import TypeRegistry
from .schema import TypeDefinition
from .stores.base import OverrideStore

logger = logging.getLogger(__name__)


class TypeResolver:
    """Resolve type ids against a registry and an override store.

    The registry is authoritative for what a type is; the store holds
    records administrators add or change at runtime. A store record matching
    a registry type is shallow-merged onto it field by field, store winning.
    A store record with no registry counterpart is a type on its own.
    """

    def __init__(self, registry: TypeRegistry, store: OverrideStore):
        self.registry = registry
        self.store = store

    @property
    def namespace(self):
        return self.registry.namespace

    def resolve(self, type_id: str) -> TypeDefinition:
        base = self.registry.get_type(type_id)
        record = self._find_record(type_id)

        if base is None and record is None:
            raise NotFoundError(f"{self.namespace.value.capitalize()} type", type_id)

        if record is None:
            return base.model_copy(deep=True)

        if base is None:
            return self._build(record)

        logger.debug(f"Merging override record '{record.get('id')}' onto type '{type_id}'")
        return self._merge(base, record)

    def exists(self, type_id: str) -> bool:
        return self.registry.type_exists(type_id) or self._find_record(type_id) is not None

    def list_types(self) -> list[TypeDefinition]:
        records = self.store.list()
        consumed: set[str] = set()
        resolved = []

        for type_id, base in self.registry.get_all_types().items():
            record = self._match(records, type_id)
            if record is None:
                resolved.append(base.model_copy(deep=True))
                continue
            consumed.add(record["id"])
            resolved.append(self._merge(base, record))

        for record in records:
            if record["id"] in consumed:
                continue
            if self.registry.type_exists(record.get("type") or record["id"]):
                continue
            try:
                resolved.append(self._build(record))
            except ValidationFailedError as e:
                logger.warning(f"Skipping invalid override record '{record['id']}': {e}")
        return resolved

    def get_override(self, type_id: str) -> Optional[dict[str, Any]]:
        return self._find_record(type_id)

    def save_override(self, type_id: str, data: Mapping[str, Any]) -> TypeDefinition:
        """Create or replace the override record for ``type_id``."""
        record = dict(data)
        record.pop("id", None)
        record.setdefault("type", type_id)

        if self.registry.get_type(type_id) is None:
            # Store-only types must stand on their own.
            self._build({**record, "id": type_id})

        self.store.put(type_id, record)
        logger.info(f"Saved {self.namespace.value} type override: {type_id}")
        return self.resolve(type_id)

    def delete_override(self, type_id: str) -> bool:
        record = self._find_record(type_id)
        if record is None:
            raise NotFoundError(f"{self.namespace.value.capitalize()} type override", type_id)
        deleted = self.store.delete(record["id"])
        logger.info(f"Deleted {self.namespace.value} type override: {record['id']}")
        return deleted

    def _find_record(self, type_id: str) -> Optional[dict[str, Any]]:
        record = self.store.find_by_type(type_id)
        if record is None:
            record = self.store.get(type_id)
        return record

    @staticmethod
    def _match(records: list[dict[str, Any]], type_id: str) -> Optional[dict[str, Any]]:
        for record in records:
            if record.get("type") == type_id:
                return record
        for record in records:
            if record.get("id") == type_id:
                return record
        return None

    def _merge(self, base: TypeDefinition, record: Mapping[str, Any]) -> TypeDefinition:
        data = base.model_dump()
        for key, value in record.items():
            if key == "id":
                continue
            data[key] = value
        return self._build(data)

    def _build(self, record: Mapping[str, Any]) -> TypeDefinition:
        try:
            return TypeDefinition.model_validate(dict(record))
        except ValidationError as e:
            messages = [f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()]
            fields = [str(err["loc"][0]) for err in e.errors() if err["loc"]]
            raise ValidationFailedError(messages, fields) from e
