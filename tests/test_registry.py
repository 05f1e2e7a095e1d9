"""Type registry unit tests"""

from unittest.mock import Mock

import pytest

from spider_boxes.enums import Namespace
from spider_boxes.hooks import HookManager
from spider_boxes.registry import OrderedRegistry, TypeRegistry


def test_ordered_registry_first_write_wins():
    registry = OrderedRegistry()

    assert registry.insert_if_absent("a", 1) is True
    assert registry.insert_if_absent("b", 2) is True
    assert registry.insert_if_absent("a", 3) is False

    assert registry.get("a") == 1
    assert list(registry) == ["a", "b"]
    assert len(registry) == 2
    assert "b" in registry
    assert registry.remove("b") is True
    assert registry.has("b") is False


def test_bootstrap_registers_default_field_types():
    registry = TypeRegistry(Namespace.FIELD).bootstrap()

    for type_id in (
        "button",
        "checkbox",
        "media",
        "radio",
        "repeater",
        "select",
        "react-select",
        "range",
        "switcher",
        "text",
        "datetime",
        "textarea",
        "wysiwyg",
    ):
        assert registry.type_exists(type_id), type_id

    text = registry.get_type("text")
    assert text.type == "text"
    assert text.display_name == "Text"
    assert text.supports == ["label", "description", "placeholder", "value"]
    assert registry.get_type("react-select").display_name == "React Select"


def test_bootstrap_registers_component_and_section_types():
    components = TypeRegistry(Namespace.COMPONENT).bootstrap()
    sections = TypeRegistry(Namespace.SECTION).bootstrap()

    assert components.get_allowed_children("tabs") == ["tab"]
    assert components.get_parent_type("tab") == "tabs"
    assert components.has_children("row") is True
    assert components.is_child_type("column") is True
    assert components.get_type("accordion").category == "layout"
    assert sections.type_exists("section")
    assert sections.type_exists("form")


def test_register_type_twice_returns_true_then_false():
    registry = TypeRegistry(Namespace.FIELD).bootstrap()
    size = len(registry.get_all_types())

    assert registry.register_type("color", {"supports": ["color"]}) is True
    assert registry.register_type("color", {"supports": ["placeholder"]}) is False

    assert len(registry.get_all_types()) == size + 1
    assert registry.get_type("color").supports == ["color"]


def test_register_type_emits_hook_on_success_only():
    hooks = HookManager()
    handler = Mock()
    hooks.on_action("field_type_registered", handler)
    registry = TypeRegistry(Namespace.FIELD, hooks)

    registry.register_type("color", {"supports": ["color"]})
    registry.register_type("color", {"supports": ["color"]})

    handler.assert_called_once()
    type_id, definition = handler.call_args.args
    assert type_id == "color"
    assert definition.supports == ["color"]


def test_register_hook_lets_extensions_add_types():
    hooks = HookManager()
    hooks.on_action(
        "register_field_types",
        lambda registry: registry.register_type("rating", {"supports": ["min", "max"]}),
    )

    registry = TypeRegistry(Namespace.FIELD, hooks).bootstrap()

    assert registry.type_exists("rating")


def test_bootstrap_registers_configured_extra_types():
    registry = TypeRegistry(Namespace.FIELD).bootstrap(
        [{"id": "rating", "supports": ["min", "max"]}, {"id": "text", "supports": []}]
    )

    assert registry.get_type("rating").supports == ["min", "max"]
    # built-in definition is kept
    assert "placeholder" in registry.get_type("text").supports


def test_get_all_types_passes_through_filter():
    hooks = HookManager()
    hooks.register_filter(
        "get_field_types", lambda types: {k: v for k, v in types.items() if k != "button"}
    )
    registry = TypeRegistry(Namespace.FIELD, hooks).bootstrap()

    assert "button" not in registry.get_all_types()
    assert registry.type_exists("button")


def test_supports_accepts_comma_separated_string():
    registry = TypeRegistry(Namespace.FIELD)
    registry.register_type("custom", {"supports": "label, options, options"})

    assert registry.get_type("custom").supports == ["label", "options"]


def test_register_invalid_definition_raises_value_error():
    registry = TypeRegistry(Namespace.FIELD)

    with pytest.raises(ValueError):
        registry.register_type("bad", {"children": "not-a-list"})
