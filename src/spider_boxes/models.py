"""Peewee ORM model definitions"""

from datetime import datetime
from zoneinfo import ZoneInfo

from peewee import CharField, DatabaseProxy, DateTimeField, Model
from playhouse.shortcuts import ThreadSafeDatabaseMetadata
from playhouse.sqlite_ext import JSONField

UTC = ZoneInfo("UTC")

# Use DatabaseProxy for deferred database binding
database_proxy = DatabaseProxy()


class BaseModel(Model):
    """Base model class - supports thread-safe metadata"""

    class Meta:
        database = database_proxy
        model_metadata_class = ThreadSafeDatabaseMetadata


class Record(BaseModel):
    """One keyed JSON record of a collection (type overrides or instances)"""

    collection = CharField()
    key = CharField()
    type = CharField(default="")
    data = JSONField(default=dict)
    created_at = DateTimeField(default=lambda: datetime.now(UTC))
    updated_at = DateTimeField(default=lambda: datetime.now(UTC))

    class Meta:
        table_name = "records"
        indexes = (
            (("collection", "key"), True),
            (("collection", "type"), False),
        )

    def save(self, *args, **kwargs):
        """Override save method to auto-update updated_at"""
        if self._pk is not None:
            self.updated_at = datetime.now(UTC)
        return super().save(*args, **kwargs)


class MetaRecord(BaseModel):
    """Field value stored against a host object"""

    object_id = CharField()
    object_type = CharField()
    meta_key = CharField()
    meta_value = JSONField(null=True)
    context = CharField(default="default")
    created_at = DateTimeField(default=lambda: datetime.now(UTC))
    updated_at = DateTimeField(default=lambda: datetime.now(UTC))

    class Meta:
        table_name = "meta"
        indexes = (
            (("object_id", "object_type", "meta_key", "context"), True),
            (("meta_key",), False),
        )

    def save(self, *args, **kwargs):
        if self._pk is not None:
            self.updated_at = datetime.now(UTC)
        return super().save(*args, **kwargs)
