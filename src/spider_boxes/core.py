"""Wiring of registries, resolvers and stores for one process."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from .config import Config
from .enums import Namespace, StorageBackend
from .generator import ConfigFieldGenerator
from .hooks import HookManager
from .instances import InstanceStore
from .registry import TypeRegistry
from .renderer import DynamicFieldRenderer, HttpMediaResolver, MediaResolver
from .resolver import TypeResolver
from .schema import ConfigFieldsResponse
from .stores import get_meta_store, get_store

logger = logging.getLogger(__name__)


class Core:
    """Per-namespace registries, resolvers and instance stores.

    Built once at startup and passed to whatever needs it; nothing here is
    global.
    """

    def __init__(self, config: Optional[Config] = None, hooks: Optional[HookManager] = None):
        self.config = config or Config()
        self.hooks = hooks or HookManager()
        self.generator = ConfigFieldGenerator(self.hooks)
        self.meta_store = get_meta_store(config=self.config)

        self.registries: dict[Namespace, TypeRegistry] = {}
        self.resolvers: dict[Namespace, TypeResolver] = {}
        self.instance_stores: dict[Namespace, InstanceStore] = {}

        for namespace in Namespace:
            registry = TypeRegistry(namespace, self.hooks).bootstrap(
                self.config.registry.extra_types(namespace)
            )
            resolver = TypeResolver(
                registry, get_store(config=self.config, name=f"{namespace.value}_types")
            )
            self.registries[namespace] = registry
            self.resolvers[namespace] = resolver
            self.instance_stores[namespace] = InstanceStore(
                namespace,
                resolver,
                get_store(config=self.config, name=f"{namespace.value}s"),
                self.hooks,
                self.meta_store,
            )

        logger.info(f"Core initialized with {self.config.storage.backend.value} storage")

    @property
    def uses_database(self) -> bool:
        return self.config.storage.backend == StorageBackend.DB

    def registry(self, namespace: Namespace | str) -> TypeRegistry:
        return self.registries[Namespace(namespace)]

    def resolver(self, namespace: Namespace | str) -> TypeResolver:
        return self.resolvers[Namespace(namespace)]

    def instances(self, namespace: Namespace | str) -> InstanceStore:
        return self.instance_stores[Namespace(namespace)]

    def config_fields(
        self,
        namespace: Namespace | str,
        type_id: str,
        existing_settings: Optional[Mapping[str, Any]] = None,
    ) -> ConfigFieldsResponse:
        """Resolved type plus its generated configuration descriptors."""
        type_definition = self.resolver(namespace).resolve(type_id)
        return ConfigFieldsResponse(
            type_definition=type_definition,
            config_fields=self.generator.generate(type_definition, existing_settings or {}),
        )

    def media_resolver(self) -> Optional[MediaResolver]:
        if self.config.media.base_url is None:
            return None
        return HttpMediaResolver(str(self.config.media.base_url), timeout=self.config.media.timeout)

    def renderer(self, on_change=None, media_resolver: Optional[MediaResolver] = None) -> DynamicFieldRenderer:
        return DynamicFieldRenderer(
            on_change,
            media_resolver=media_resolver or self.media_resolver(),
            hooks=self.hooks,
        )
