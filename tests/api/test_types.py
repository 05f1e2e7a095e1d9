import pytest
from fastapi.testclient import TestClient

from spider_boxes.config import Config
from spider_boxes.core import Core


@pytest.fixture
def core():
    return Core(Config(storage={"backend": "memory"}))


@pytest.fixture
def client(core):
    from spider_boxes.api import create_app

    app = create_app(core=core)
    with TestClient(app) as client:
        yield client


def test_list_field_types(client: TestClient):
    response = client.get("/api/v1/field-types")

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    ids = [t["id"] for t in data["types"]]
    assert "text" in ids
    assert "repeater" in ids


def test_list_component_types_keeps_registry_order(client: TestClient):
    response = client.get("/api/v1/component-types")

    ids = [t["id"] for t in response.json()["types"]]
    assert ids == ["accordion", "pane", "tabs", "tab", "row", "column"]


def test_get_type(client: TestClient):
    response = client.get("/api/v1/section-types/form")

    assert response.status_code == 200
    assert response.json()["supports"] == ["title", "description", "components", "action", "method"]


def test_get_unknown_type_returns_404(client: TestClient):
    response = client.get("/api/v1/field-types/hologram")

    assert response.status_code == 404
    assert response.json() == {"detail": "Field type not found: hologram"}


def test_create_store_only_type(client: TestClient):
    response = client.post(
        "/api/v1/field-types", json={"id": "rating", "supports": ["min", "max"]}
    )

    assert response.status_code == 201
    assert response.json()["id"] == "rating"
    assert response.json()["supports"] == ["min", "max"]
    ids = [t["id"] for t in client.get("/api/v1/field-types").json()["types"]]
    assert ids[-1] == "rating"


def test_create_requires_id(client: TestClient):
    response = client.post("/api/v1/field-types", json={"supports": ["min"]})

    assert response.status_code == 400
    assert response.json()["errors"] == ["Missing required field: id"]
    assert response.json()["fields"] == ["id"]


def test_create_existing_type_conflicts(client: TestClient):
    assert client.post("/api/v1/field-types", json={"id": "text"}).status_code == 409

    client.post("/api/v1/field-types", json={"id": "rating"})
    assert client.post("/api/v1/field-types", json={"id": "rating"}).status_code == 409


def test_update_registry_type_merges_override(client: TestClient):
    response = client.put("/api/v1/field-types/text", json={"category": "advanced"})

    assert response.status_code == 200
    data = response.json()
    assert data["id"] == "text"
    assert data["category"] == "advanced"
    assert data["supports"] == ["label", "description", "placeholder", "value"]

    client.put("/api/v1/field-types/text", json={"icon": "edit"})
    data = client.get("/api/v1/field-types/text").json()
    assert data["category"] == "advanced"
    assert data["icon"] == "edit"


def test_update_unknown_type_returns_404(client: TestClient):
    response = client.put("/api/v1/field-types/hologram", json={"category": "x"})

    assert response.status_code == 404


def test_delete_override_restores_registry_definition(client: TestClient):
    client.put("/api/v1/field-types/text", json={"category": "advanced"})

    response = client.delete("/api/v1/field-types/text")

    assert response.status_code == 200
    assert response.json() == {"success": True}
    assert client.get("/api/v1/field-types/text").json()["category"] == "general"
    assert client.delete("/api/v1/field-types/text").status_code == 404


def test_get_type_config(client: TestClient):
    response = client.get("/api/v1/field-types/range/config")

    assert response.status_code == 200
    data = response.json()
    assert data["type_definition"]["id"] == "range"
    ids = [f["id"] for f in data["config_fields"]]
    assert ids[:5] == ["label", "description", "required", "context", "meta_field"]
    assert "step" in ids


def test_type_config_response_filter(client: TestClient, core: Core):
    core.hooks.register_filter(
        "rest_component_type_config",
        lambda response, type_id: {**response, "preview": f"{type_id}-preview"},
    )

    response = client.get("/api/v1/component-types/row/config")

    assert response.json()["preview"] == "row-preview"
    ids = [f["id"] for f in response.json()["config_fields"]]
    assert "columns" in ids
