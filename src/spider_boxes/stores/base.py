from typing import Any, Optional, Protocol


class OverrideStore(Protocol):
    """Keyed record collection backing type overrides and instances.

    Records are plain JSON-compatible dicts; ``list()`` returns them in
    insertion order with their ``id`` included. Reads see prior writes.
    """

    def list(self) -> list[dict[str, Any]]: ...

    def get(self, record_id: str) -> Optional[dict[str, Any]]: ...

    def put(self, record_id: str, record: dict[str, Any]) -> dict[str, Any]: ...

    def delete(self, record_id: str) -> bool: ...

    def find_by_type(self, type_name: str) -> Optional[dict[str, Any]]: ...


class MetaStore(Protocol):
    """Host storage for field values keyed by object, meta key and context."""

    def get_meta(
        self, object_id: str, object_type: str, meta_key: str, context: str = "default"
    ) -> Any: ...

    def save_meta(
        self,
        object_id: str,
        object_type: str,
        meta_key: str,
        meta_value: Any,
        context: str = "default",
    ) -> bool: ...

    def delete_meta_by_key(self, meta_key: str, context: Optional[str] = None) -> int: ...
