import copy
import logging
from typing import Any, Optional

logger = logging.getLogger(__name__)


class MemoryStore:
    def __init__(self, name: str = "memory", records: Optional[dict[str, dict]] = None) -> None:
        self.name = name
        self._records: dict[str, dict[str, Any]] = {}
        for record_id, record in (records or {}).items():
            self.put(record_id, record)

    def list(self) -> list[dict[str, Any]]:
        return [copy.deepcopy(record) for record in self._records.values()]

    def get(self, record_id: str) -> Optional[dict[str, Any]]:
        record = self._records.get(record_id)
        return copy.deepcopy(record) if record is not None else None

    def put(self, record_id: str, record: dict[str, Any]) -> dict[str, Any]:
        stored = copy.deepcopy(dict(record))
        stored["id"] = record_id
        self._records[record_id] = stored
        return copy.deepcopy(stored)

    def delete(self, record_id: str) -> bool:
        return self._records.pop(record_id, None) is not None

    def find_by_type(self, type_name: str) -> Optional[dict[str, Any]]:
        for record in self._records.values():
            if record.get("type") == type_name:
                return copy.deepcopy(record)
        return None


class MemoryMetaStore:
    def __init__(self) -> None:
        self._values: dict[tuple[str, str, str, str], Any] = {}

    def get_meta(
        self, object_id: str, object_type: str, meta_key: str, context: str = "default"
    ) -> Any:
        return copy.deepcopy(self._values.get((str(object_id), object_type, meta_key, context)))

    def save_meta(
        self,
        object_id: str,
        object_type: str,
        meta_key: str,
        meta_value: Any,
        context: str = "default",
    ) -> bool:
        self._values[(str(object_id), object_type, meta_key, context)] = copy.deepcopy(meta_value)
        return True

    def delete_meta_by_key(self, meta_key: str, context: Optional[str] = None) -> int:
        doomed = [
            key
            for key in self._values
            if key[2] == meta_key and (context is None or key[3] == context)
        ]
        for key in doomed:
            del self._values[key]
        return len(doomed)
