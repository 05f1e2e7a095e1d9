from unittest.mock import patch

import pytest
from peewee import OperationalError

from spider_boxes.db import close_db, create_tables, init_db
from spider_boxes.errors import StoreUnavailableError
from spider_boxes.stores.db import DBMetaStore, DBStore


@pytest.fixture
def database(tmp_path):
    init_db(str(tmp_path / "db" / "spider_boxes.db"))
    create_tables()
    yield
    close_db()


def test_db_store_put_get_and_update(database):
    store = DBStore("field_types")

    store.put("text", {"type": "text", "description": "first"})
    store.put("text", {"type": "text", "description": "second"})

    assert store.get("text") == {"id": "text", "type": "text", "description": "second"}
    assert len(store.list()) == 1


def test_db_store_collections_are_isolated(database):
    DBStore("fields").put("a", {"type": "text"})

    assert DBStore("components").get("a") is None
    assert DBStore("components").list() == []


def test_db_store_find_by_type_and_delete(database):
    store = DBStore("field_types")
    store.put("override", {"type": "select", "display_name": "Picker"})

    assert store.find_by_type("select")["id"] == "override"
    assert store.delete("override") is True
    assert store.delete("override") is False
    assert store.find_by_type("select") is None


def test_db_store_list_keeps_insertion_order(database):
    store = DBStore("fields")
    for key in ("c", "a", "b"):
        store.put(key, {"type": "text"})

    assert [r["id"] for r in store.list()] == ["c", "a", "b"]


def test_db_meta_store(database):
    meta = DBMetaStore()

    meta.save_meta("7", "post", "gallery", [1, 2])
    meta.save_meta("7", "post", "gallery", [3])
    meta.save_meta("8", "user", "gallery", [4], context="review")

    assert meta.get_meta("7", "post", "gallery") == [3]
    assert meta.get_meta("9", "post", "gallery") is None
    assert meta.delete_meta_by_key("gallery") == 2
    assert meta.get_meta("8", "user", "gallery", context="review") is None


def test_db_errors_become_store_unavailable(database):
    with patch("spider_boxes.models.Record.get_or_none", side_effect=OperationalError("locked")):
        with pytest.raises(StoreUnavailableError):
            DBStore("fields").get("a")
