from spider_boxes.config import Config
from spider_boxes.enums import StorageBackend
from spider_boxes.errors import ConfigException

from .base import MetaStore, OverrideStore
from .db import DBMetaStore, DBStore
from .memory import MemoryMetaStore, MemoryStore

__all__ = [
    "DBMetaStore",
    "DBStore",
    "MemoryMetaStore",
    "MemoryStore",
    "MetaStore",
    "OverrideStore",
    "get_meta_store",
    "get_store",
]


def get_store(*, config: Config, name: str) -> OverrideStore:
    backend = config.storage.backend

    if backend == StorageBackend.DB:
        return DBStore(name)

    if backend == StorageBackend.MEMORY:
        return MemoryStore(name)

    raise ConfigException(f"Unknown storage backend: {backend}")


def get_meta_store(*, config: Config) -> MetaStore:
    backend = config.storage.backend

    if backend == StorageBackend.DB:
        return DBMetaStore()

    if backend == StorageBackend.MEMORY:
        return MemoryMetaStore()

    raise ConfigException(f"Unknown storage backend: {backend}")
