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


def create_field(client, **overrides):
    payload = {"id": "email", "type": "text", "title": "Email"}
    payload.update(overrides)
    return client.post("/api/v1/fields", json=payload)


# ========== Fields ==========


def test_create_and_get_field(client: TestClient):
    response = create_field(client, settings={"placeholder": "you@example.com"})

    assert response.status_code == 201
    assert response.json()["namespace"] == "field"

    data = client.get("/api/v1/fields/email").json()
    assert data["title"] == "Email"
    assert data["settings"] == {"placeholder": "you@example.com"}


def test_create_invalid_field_returns_all_errors(client: TestClient):
    response = client.post("/api/v1/fields", json={"id": "email", "type": "hologram"})

    assert response.status_code == 400
    data = response.json()
    assert data["errors"] == ["Missing required field: title", "Invalid field type: hologram"]
    assert data["fields"] == ["title", "type"]
    assert client.get("/api/v1/fields/email").status_code == 404


def test_create_duplicate_field(client: TestClient):
    create_field(client)

    response = create_field(client, title="Other")

    assert response.status_code == 400
    assert response.json()["errors"] == ["Field already exists: email"]


def test_update_field(client: TestClient):
    create_field(client)

    response = client.put("/api/v1/fields/email", json={"title": "E-mail", "sort_order": 3})

    assert response.status_code == 200
    assert response.json()["title"] == "E-mail"
    assert response.json()["sort_order"] == 3
    assert response.json()["type"] == "text"


def test_update_missing_field_returns_404(client: TestClient):
    response = client.put("/api/v1/fields/missing", json={"title": "x"})

    assert response.status_code == 404
    assert response.json() == {"detail": "Field not found: missing"}


def test_delete_field(client: TestClient):
    create_field(client)

    response = client.delete("/api/v1/fields/email")

    assert response.status_code == 200
    assert response.json() == {"success": True}
    assert client.get("/api/v1/fields/email").status_code == 404
    assert client.delete("/api/v1/fields/email").status_code == 404


def test_list_fields_with_filters(client: TestClient):
    create_field(client, id="b", sort_order=2, context="review")
    create_field(client, id="a", sort_order=1, context="review")
    create_field(client, id="c", sort_order=0)

    all_items = client.get("/api/v1/fields").json()
    review = client.get("/api/v1/fields", params={"context": "review"}).json()

    assert all_items["success"] is True
    assert [i["id"] for i in all_items["items"]] == ["c", "a", "b"]
    assert [i["id"] for i in review["items"]] == ["a", "b"]


def test_sections_are_a_separate_namespace(client: TestClient):
    response = client.post(
        "/api/v1/sections", json={"id": "checkout", "type": "form", "title": "Checkout"}
    )

    assert response.status_code == 201
    assert client.get("/api/v1/fields/checkout").status_code == 404
    assert [i["id"] for i in client.get("/api/v1/sections").json()["items"]] == ["checkout"]


# ========== Components ==========


def test_create_component_with_defaults(client: TestClient):
    response = client.post(
        "/api/v1/components/with-defaults", json={"id": "tabs1", "type": "tabs"}
    )

    assert response.status_code == 201
    data = response.json()
    assert data["title"] == "Tabs"
    assert list(data["children"]) == ["tabs1_tab_1"]
    assert data["children"]["tabs1_tab_1"]["active"] is True


def test_create_with_defaults_requires_id_and_type(client: TestClient):
    response = client.post("/api/v1/components/with-defaults", json={"title": "x"})

    assert response.status_code == 400
    assert response.json()["fields"] == ["id", "type"]


def test_add_and_remove_children(client: TestClient):
    client.post("/api/v1/components/with-defaults", json={"id": "tabs1", "type": "tabs"})

    response = client.post("/api/v1/components/tabs1/children", json={"active": True})

    assert response.status_code == 201
    data = response.json()
    assert data["success"] is True
    assert data["child_id"] == "tabs1_tab_2"
    assert data["component"]["children"]["tabs1_tab_1"]["active"] is False
    assert data["component"]["children"]["tabs1_tab_2"]["active"] is True

    response = client.delete("/api/v1/components/tabs1/children/tabs1_tab_1")
    assert response.status_code == 200
    children = client.get("/api/v1/components/tabs1").json()["children"]
    assert list(children) == ["tabs1_tab_2"]


def test_add_child_without_body(client: TestClient):
    client.post("/api/v1/components", json={"id": "acc", "type": "accordion", "title": "FAQ"})

    response = client.post("/api/v1/components/acc/children")

    assert response.status_code == 201
    assert response.json()["child_id"] == "acc_pane_1"


def test_add_child_to_missing_component_returns_404(client: TestClient):
    response = client.post("/api/v1/components/missing/children", json={})

    assert response.status_code == 404


def test_remove_missing_child_returns_404(client: TestClient):
    client.post("/api/v1/components/with-defaults", json={"id": "tabs1", "type": "tabs"})

    response = client.delete("/api/v1/components/tabs1/children/tabs1_tab_9")

    assert response.status_code == 404
    assert list(client.get("/api/v1/components/tabs1").json()["children"]) == ["tabs1_tab_1"]


# ========== Meta ==========


def test_meta_round_trip(client: TestClient):
    url = "/api/v1/meta/post/10/color"

    assert client.get(url).json()["value"] is None

    response = client.put(url, json={"value": ["red", "blue"]})
    assert response.status_code == 200

    data = client.get(url).json()
    assert data == {
        "success": True,
        "object_type": "post",
        "object_id": "10",
        "meta_key": "color",
        "context": "default",
        "value": ["red", "blue"],
    }


def test_meta_values_are_scoped_by_context(client: TestClient):
    url = "/api/v1/meta/post/10/color"
    client.put(url, params={"context": "review"}, json={"value": "green"})

    assert client.get(url).json()["value"] is None
    assert client.get(url, params={"context": "review"}).json()["value"] == "green"


def test_deleting_field_removes_its_meta(client: TestClient):
    create_field(client)
    client.put("/api/v1/meta/post/10/email", json={"value": "a@example.com"})

    client.delete("/api/v1/fields/email")

    assert client.get("/api/v1/meta/post/10/email").json()["value"] is None
