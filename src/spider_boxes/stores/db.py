import logging
from functools import wraps
from typing import Any, Optional

from peewee import PeeweeException

from spider_boxes.errors import StoreUnavailableError

logger = logging.getLogger(__name__)


def _wrap_store_errors(func):
    @wraps(func)
    def wrapper(self, *args, **kwargs):
        try:
            return func(self, *args, **kwargs)
        except PeeweeException as e:
            logger.error(f"Store '{self.name}' failed in {func.__name__}: {e}")
            raise StoreUnavailableError(f"Store '{self.name}' unavailable: {e}") from e

    return wrapper


class DBStore:
    """Record collection persisted in the ``records`` table."""

    def __init__(self, name: str) -> None:
        self.name = name

    @_wrap_store_errors
    def list(self) -> list[dict[str, Any]]:
        from spider_boxes.models import Record

        query = Record.select().where(Record.collection == self.name).order_by(Record.id)
        return [self._to_dict(row) for row in query]

    @_wrap_store_errors
    def get(self, record_id: str) -> Optional[dict[str, Any]]:
        from spider_boxes.models import Record

        row = Record.get_or_none(
            (Record.collection == self.name) & (Record.key == record_id)
        )
        return self._to_dict(row) if row is not None else None

    @_wrap_store_errors
    def put(self, record_id: str, record: dict[str, Any]) -> dict[str, Any]:
        from spider_boxes.models import Record

        data = dict(record)
        data["id"] = record_id
        type_name = str(data.get("type") or "")

        row = Record.get_or_none(
            (Record.collection == self.name) & (Record.key == record_id)
        )
        if row is None:
            row = Record.create(collection=self.name, key=record_id, type=type_name, data=data)
            logger.debug(f"Record created: {self.name}/{record_id}")
        else:
            row.type = type_name
            row.data = data
            row.save()
            logger.debug(f"Record updated: {self.name}/{record_id}")
        return self._to_dict(row)

    @_wrap_store_errors
    def delete(self, record_id: str) -> bool:
        from spider_boxes.models import Record

        deleted = (
            Record.delete()
            .where((Record.collection == self.name) & (Record.key == record_id))
            .execute()
        )
        return deleted > 0

    @_wrap_store_errors
    def find_by_type(self, type_name: str) -> Optional[dict[str, Any]]:
        from spider_boxes.models import Record

        row = (
            Record.select()
            .where((Record.collection == self.name) & (Record.type == type_name))
            .order_by(Record.id)
            .first()
        )
        return self._to_dict(row) if row is not None else None

    @staticmethod
    def _to_dict(row) -> dict[str, Any]:
        data = dict(row.data or {})
        data["id"] = row.key
        return data


class DBMetaStore:
    name = "meta"

    @_wrap_store_errors
    def get_meta(
        self, object_id: str, object_type: str, meta_key: str, context: str = "default"
    ) -> Any:
        from spider_boxes.models import MetaRecord

        row = MetaRecord.get_or_none(
            (MetaRecord.object_id == str(object_id))
            & (MetaRecord.object_type == object_type)
            & (MetaRecord.meta_key == meta_key)
            & (MetaRecord.context == context)
        )
        return row.meta_value if row is not None else None

    @_wrap_store_errors
    def save_meta(
        self,
        object_id: str,
        object_type: str,
        meta_key: str,
        meta_value: Any,
        context: str = "default",
    ) -> bool:
        from spider_boxes.models import MetaRecord

        row = MetaRecord.get_or_none(
            (MetaRecord.object_id == str(object_id))
            & (MetaRecord.object_type == object_type)
            & (MetaRecord.meta_key == meta_key)
            & (MetaRecord.context == context)
        )
        if row is None:
            MetaRecord.create(
                object_id=str(object_id),
                object_type=object_type,
                meta_key=meta_key,
                meta_value=meta_value,
                context=context,
            )
        else:
            row.meta_value = meta_value
            row.save()
        return True

    @_wrap_store_errors
    def delete_meta_by_key(self, meta_key: str, context: Optional[str] = None) -> int:
        from spider_boxes.models import MetaRecord

        condition = MetaRecord.meta_key == meta_key
        if context is not None:
            condition = condition & (MetaRecord.context == context)
        deleted = MetaRecord.delete().where(condition).execute()
        logger.info(f"Deleted {deleted} meta rows for key: {meta_key}")
        return deleted
