"""Domain model unit tests"""

from spider_boxes.enums import Namespace
from spider_boxes.schema import (
    Conditional,
    FieldDescriptor,
    Instance,
    TypeDefinition,
    parse_options_text,
)


def test_type_definition_fills_type_and_display_name():
    definition = TypeDefinition(id="react-select")

    assert definition.type == "react-select"
    assert definition.display_name == "React Select"
    assert definition.supports == []
    assert definition.is_active is True


def test_type_definition_keeps_extra_fields():
    definition = TypeDefinition(id="text", custom_flag=True)

    assert definition.model_dump()["custom_flag"] is True


def test_options_from_mapping_keep_order():
    descriptor = FieldDescriptor(id="f", kind="select", options={"b": "Bee", "a": "Ay"})

    assert descriptor.option_values() == ["b", "a"]
    assert descriptor.options[0].label == "Bee"


def test_options_from_list_of_strings_and_nested_labels():
    from_list = FieldDescriptor(id="f", kind="select", options=["x", "y"])
    nested = FieldDescriptor(id="f", kind="select", options={"x": {"label": "Ex"}})

    assert [(o.value, o.label) for o in from_list.options] == [("x", "x"), ("y", "y")]
    assert nested.options[0].label == "Ex"


def test_parse_options_text():
    assert parse_options_text("a|Apple\n\n b | Banana \nc") == [
        {"value": "a", "label": "Apple"},
        {"value": "b", "label": "Banana"},
        {"value": "c", "label": "c"},
    ]


def test_conditional_matches_values():
    conditional = Conditional(field="multiple")

    assert conditional.matches({"multiple": True}) is True
    assert conditional.matches({"multiple": False}) is False
    assert conditional.matches({}) is False


def test_descriptor_from_instance_maps_settings():
    instance = Instance(
        id="rating",
        type="range",
        title="Rating",
        settings={
            "label": "Rating label",
            "min_value": 1,
            "max_value": 5,
            "step": 1,
            "value": 3,
            "required": True,
            "suffix": "stars",
        },
    )

    descriptor = FieldDescriptor.from_instance(instance)

    assert descriptor.kind == "range"
    assert descriptor.title == "Rating"
    assert (descriptor.min, descriptor.max, descriptor.step) == (1, 5, 1)
    assert descriptor.current_value == 3
    assert descriptor.required is True
    assert descriptor.meta["suffix"] == "stars"


def test_instance_defaults_and_blank_parent():
    instance = Instance(id="f1", type="text", parent_id="", section_id=None)

    assert instance.namespace == Namespace.FIELD
    assert instance.context == "default"
    assert instance.parent_id is None
    assert instance.children == {}
