"""Configuration file loading and validation."""

import logging
from pathlib import Path
from typing import Any, List, Optional

from pydantic import BaseModel, Field, HttpUrl, ValidationError, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)

from .consts import (
    DATA_DIR_DEFAULT,
    DATABASE_PATH,
    LOG_FILE_DEFAULT,
    LOG_LEVELS,
    MEDIA_TIMEOUT_DEFAULT,
)
from .enums import Namespace, StorageBackend
from .errors import ConfigException

logger = logging.getLogger(__name__)

ENV_PREFIX = "SPIDER_BOXES_"


class StorageConfig(BaseModel):
    """Persistence backend for override, instance and meta stores."""

    backend: StorageBackend = StorageBackend.DB
    database_path: str = Field(default=DATABASE_PATH)


class WebConfig(BaseModel):
    """REST service configuration."""

    host: str = Field(default="127.0.0.1")
    port: int = Field(default=8000, ge=1, le=65535)
    reload: bool = Field(default=False)


class MediaConfig(BaseModel):
    """Media metadata lookup used by the media control."""

    base_url: Optional[HttpUrl] = None
    timeout: int = Field(default=MEDIA_TIMEOUT_DEFAULT, ge=1)


class ExtraTypeConfig(BaseModel):
    """Type definition declared in the configuration file."""

    model_config = {"extra": "allow"}

    id: str
    supports: List[str] = Field(default_factory=list)

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Type id cannot be empty")
        return v.strip()


class RegistryConfig(BaseModel):
    field_types: List[ExtraTypeConfig] = Field(default_factory=list)
    component_types: List[ExtraTypeConfig] = Field(default_factory=list)
    section_types: List[ExtraTypeConfig] = Field(default_factory=list)

    def extra_types(self, namespace: Namespace) -> list[dict[str, Any]]:
        entries = getattr(self, f"{Namespace(namespace).value}_types")
        return [entry.model_dump() for entry in entries]


class Config(BaseSettings):
    """Application configuration."""

    language: str = Field(default="en")
    data_dir: str = Field(default=DATA_DIR_DEFAULT)
    log_file: str = Field(default=LOG_FILE_DEFAULT)
    log_level: str = Field(default="INFO")

    storage: StorageConfig = Field(default_factory=StorageConfig)
    web: WebConfig = Field(default_factory=WebConfig)
    media: MediaConfig = Field(default_factory=MediaConfig)
    registry: RegistryConfig = Field(default_factory=RegistryConfig)

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_nested_delimiter="__",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            TomlConfigSettingsSource(settings_cls),
        )

    @classmethod
    def load_from_file(cls, config_path: str) -> "Config":
        """Load configuration from specified path."""
        path = Path(config_path)
        if not path.exists():
            raise ConfigException(f"Configuration file not found: {config_path}")

        class _Config(cls):
            model_config = SettingsConfigDict(
                toml_file=str(path),
                env_prefix=ENV_PREFIX,
                env_nested_delimiter="__",
            )

        try:
            return _Config()
        except ValidationError as e:
            error_lines = ["Configuration validation failed:"]
            for error in e.errors():
                loc = " -> ".join(str(item) for item in error["loc"])
                error_lines.append(f"  - {loc}: {error['msg']}")
            raise ConfigException("\n".join(error_lines)) from e
        except ValueError as e:
            raise ConfigException(f"Invalid configuration file {config_path}: {e}") from e
