"""Configuration module unit tests"""

import os
import tempfile
from pathlib import Path

import pytest

from spider_boxes.config import Config
from spider_boxes.enums import Namespace, StorageBackend
from spider_boxes.errors import ConfigException


@pytest.fixture
def temp_config_file():
    """Create a temporary config file"""
    fd, path = tempfile.mkstemp(suffix=".toml")
    os.close(fd)
    yield path
    os.unlink(path)


# ========== Test Cases ==========


def test_load_from_empty_file_uses_defaults(temp_config_file):
    Path(temp_config_file).write_text("")

    config = Config.load_from_file(temp_config_file)

    assert config.language == "en"
    assert config.storage.backend == StorageBackend.DB
    assert config.storage.database_path == "data/spider_boxes.db"
    assert config.web.host == "127.0.0.1"
    assert config.web.port == 8000
    assert config.media.base_url is None
    assert config.registry.field_types == []


def test_load_from_file_with_nested_sections(temp_config_file):
    content = """
language = "zh-hans"

[storage]
backend = "memory"

[web]
host = "0.0.0.0"
port = 9000

[media]
base_url = "https://media.example.com/api"
timeout = 3
"""
    Path(temp_config_file).write_text(content)

    config = Config.load_from_file(temp_config_file)

    assert config.language == "zh-hans"
    assert config.storage.backend == StorageBackend.MEMORY
    assert config.web.host == "0.0.0.0"
    assert config.web.port == 9000
    assert str(config.media.base_url) == "https://media.example.com/api"
    assert config.media.timeout == 3


def test_env_overrides_file(temp_config_file, monkeypatch):
    Path(temp_config_file).write_text("[web]\nport = 9000\n")
    monkeypatch.setenv("SPIDER_BOXES_WEB__PORT", "9100")
    monkeypatch.setenv("SPIDER_BOXES_STORAGE__BACKEND", "memory")

    config = Config.load_from_file(temp_config_file)

    assert config.web.port == 9100
    assert config.storage.backend == StorageBackend.MEMORY


def test_log_level_is_normalized(temp_config_file):
    Path(temp_config_file).write_text('log_level = "debug"\n')

    assert Config.load_from_file(temp_config_file).log_level == "DEBUG"

    Path(temp_config_file).write_text('log_level = "chatty"\n')
    with pytest.raises(ConfigException, match="log_level"):
        Config.load_from_file(temp_config_file)


def test_missing_file_raises():
    with pytest.raises(ConfigException, match="Configuration file not found"):
        Config.load_from_file("/nonexistent/spider-boxes.toml")


def test_invalid_values_raise_readable_error(temp_config_file):
    Path(temp_config_file).write_text('[web]\nport = 70000\n\n[storage]\nbackend = "redis"\n')

    with pytest.raises(ConfigException) as exc_info:
        Config.load_from_file(temp_config_file)

    message = str(exc_info.value)
    assert message.startswith("Configuration validation failed:")
    assert "web -> port" in message
    assert "storage -> backend" in message


def test_extra_types_from_file(temp_config_file):
    content = """
[[registry.field_types]]
id = "rating"
supports = ["min", "max", "step"]
category = "advanced"

[[registry.component_types]]
id = "card"
supports = ["title"]
"""
    Path(temp_config_file).write_text(content)

    config = Config.load_from_file(temp_config_file)

    assert config.registry.extra_types(Namespace.FIELD) == [
        {"id": "rating", "supports": ["min", "max", "step"], "category": "advanced"}
    ]
    assert [t["id"] for t in config.registry.extra_types("component")] == ["card"]
    assert config.registry.extra_types(Namespace.SECTION) == []


def test_blank_extra_type_id_is_rejected(temp_config_file):
    Path(temp_config_file).write_text('[[registry.field_types]]\nid = "  "\n')

    with pytest.raises(ConfigException, match="Type id cannot be empty"):
        Config.load_from_file(temp_config_file)
