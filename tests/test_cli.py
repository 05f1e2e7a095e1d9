"""Test CLI functionality."""

import json
from pathlib import Path
from unittest.mock import patch

import pytest
import tomlkit
from click.testing import CliRunner

from spider_boxes.cli import cli


@pytest.fixture(autouse=True)
def no_log_setup():
    with patch("spider_boxes.cli.setup_log"):
        yield


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text(
        f"""
log_file = "{(tmp_path / 'spider_boxes.log').as_posix()}"

[storage]
backend = "memory"
database_path = "{(tmp_path / 'db' / 'spider_boxes.db').as_posix()}"

[[registry.field_types]]
id = "rating"
supports = ["min", "max"]
category = "advanced"
"""
    )
    return path


@pytest.fixture
def run(config_file):
    runner = CliRunner()

    def invoke(*args):
        return runner.invoke(cli, ["--config", str(config_file), *args], obj={})

    return invoke


def test_types_lists_builtin_and_configured_types(run):
    result = run("types")

    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    assert lines[0] == "id\tcategory\tsupports"
    assert "text\tgeneral\tlabel,description,placeholder,value" in lines
    assert "rating\tadvanced\tmin,max" in lines


def test_types_for_component_namespace(run):
    result = run("types", "-n", "component")

    assert result.exit_code == 0, result.output
    ids = [line.split("\t")[0] for line in result.output.splitlines()[1:]]
    assert ids == ["accordion", "pane", "tabs", "tab", "row", "column"]


def test_config_fields_outputs_json(run):
    result = run("config-fields", "select", "--settings", '{"multiple": true}')

    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["type_definition"]["id"] == "select"
    ids = [field["id"] for field in data["config_fields"]]
    assert ids[:5] == ["label", "description", "required", "context", "meta_field"]
    multiple = next(f for f in data["config_fields"] if f["id"] == "multiple")
    assert multiple["current_value"] is True


def test_config_fields_rejects_invalid_json(run):
    result = run("config-fields", "text", "--settings", "{not json")

    assert result.exit_code == 2
    assert "Invalid JSON" in result.output


def test_config_fields_rejects_non_object(run):
    result = run("config-fields", "text", "-s", "[1, 2]")

    assert result.exit_code == 2
    assert "Settings must be a JSON object" in result.output


def test_config_fields_unknown_type(run):
    result = run("config-fields", "hologram")

    assert result.exit_code == 1
    assert "Field type not found: hologram" in result.output


def test_export_types_to_file(run, tmp_path):
    output = tmp_path / "types.toml"

    result = run("export-types", "--output", str(output))

    assert result.exit_code == 0, result.output
    assert f"Exported types to {output}" in result.output
    doc = tomlkit.parse(output.read_text(encoding="utf-8"))
    assert [t["id"] for t in doc["section_types"]] == ["section", "form"]
    field_ids = [t["id"] for t in doc["field_types"]]
    assert "text" in field_ids
    assert "rating" in field_ids
    tabs = next(t for t in doc["component_types"] if t["id"] == "tabs")
    assert list(tabs["children"]) == ["tab"]


def test_export_types_to_stdout(run):
    result = run("export-types")

    assert result.exit_code == 0, result.output
    assert "[[field_types]]" in result.output


def test_init_db_creates_database(run, tmp_path):
    result = run("init-db")

    assert result.exit_code == 0, result.output
    db_path = tmp_path / "db" / "spider_boxes.db"
    assert f"Database initialized: {db_path.as_posix()}" in result.output
    assert Path(db_path).exists()
