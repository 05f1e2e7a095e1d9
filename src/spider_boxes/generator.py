"""Capability-driven generation of configuration field descriptors.

A type definition declares what its instances can be configured with through
its ``supports`` tags. :func:`generate_config_fields` maps those tags onto an
ordered list of :class:`FieldDescriptor` objects: a fixed base set first, then
the output of one generator per known tag, in ``supports`` order. Unknown
tags contribute nothing.

The function is pure. Every descriptor takes its ``current_value`` from the
existing settings when the key is present and from a static default
otherwise, so the same inputs always yield the same list.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Optional

from .consts import FILTER_CONFIG_FIELDS, FILTER_CONFIG_FIELDS_FOR_TYPE
from .enums import Context
from .hooks import HookManager
from .i18n import gettext as _
from .schema import FieldDescriptor, TypeDefinition

logger = logging.getLogger(__name__)

Settings = Mapping[str, Any]
CapabilityGenerator = Callable[[Settings], list[FieldDescriptor]]


def _field(
    existing: Settings,
    field_id: str,
    kind: str,
    title: str,
    description: str = "",
    default: Any = None,
    **constraints: Any,
) -> FieldDescriptor:
    return FieldDescriptor(
        id=field_id,
        kind=kind,
        title=title,
        description=description,
        current_value=existing[field_id] if field_id in existing else default,
        **constraints,
    )


def _sub_field(field_id: str, kind: str, title: str, **constraints: Any) -> FieldDescriptor:
    return FieldDescriptor(id=field_id, kind=kind, title=title, **constraints)


def context_options() -> dict[str, str]:
    labels = {
        Context.DEFAULT: _("Default"),
        Context.REVIEW: _("Review"),
        Context.PRODUCT: _("Product"),
        Context.POST: _("Post"),
        Context.PAGE: _("Page"),
        Context.USER: _("User Profile"),
        Context.COMMENT: _("Comment"),
        Context.TERM: _("Term/Category"),
        Context.SETTINGS: _("Settings"),
        Context.CHECKOUT: _("Checkout"),
        Context.REGISTRATION: _("Registration"),
    }
    return {context.value: label for context, label in labels.items()}


def base_config_fields(existing: Settings) -> list[FieldDescriptor]:
    """Descriptors present for every type regardless of ``supports``."""
    return [
        _field(
            existing,
            "label",
            "text",
            _("Label"),
            _("The display label for this field"),
            default="",
            required=True,
            placeholder=_("Enter field label"),
        ),
        _field(
            existing,
            "description",
            "textarea",
            _("Description"),
            _("Optional description for this field"),
            default="",
            rows=3,
            placeholder=_("Enter field description"),
        ),
        _field(
            existing,
            "required",
            "checkbox",
            _("Required Field"),
            _("Mark this field as required"),
            default=False,
        ),
        _field(
            existing,
            "context",
            "select",
            _("Context"),
            _("Where this field is used"),
            default=Context.DEFAULT.value,
            options=context_options(),
        ),
        _field(
            existing,
            "meta_field",
            "checkbox",
            _("Is Meta Field"),
            _("Store this field as metadata"),
            default=False,
        ),
    ]


# ==================== Field capabilities ====================


def placeholder_fields(existing: Settings) -> list[FieldDescriptor]:
    return [
        _field(
            existing,
            "placeholder",
            "text",
            _("Placeholder"),
            _("Placeholder text for this field"),
            default="",
            placeholder=_("Enter placeholder text"),
        )
    ]


def default_value_fields(existing: Settings) -> list[FieldDescriptor]:
    return [
        _field(
            existing,
            "default_value",
            "text",
            _("Default Value"),
            _("Default value for this field"),
            default="",
            placeholder=_("Enter default value"),
        )
    ]


def options_fields(existing: Settings) -> list[FieldDescriptor]:
    return [
        _field(
            existing,
            "options",
            "textarea",
            _("Options"),
            _("One option per line (value|label format)"),
            default="",
            rows=5,
            placeholder="option1|Option 1\noption2|Option 2\noption3|Option 3",
        ),
        _field(
            existing,
            "options_source",
            "select",
            _("Options Source"),
            _("Where to load options from"),
            default="manual",
            options={
                "manual": _("Manual Entry"),
                "posts": _("Posts"),
                "pages": _("Pages"),
                "users": _("Users"),
                "terms": _("Terms/Categories"),
                "custom": _("Custom Function"),
                "ajax": _("AJAX Load"),
            },
        ),
    ]


def multiple_fields(existing: Settings) -> list[FieldDescriptor]:
    return [
        _field(
            existing,
            "multiple",
            "checkbox",
            _("Multiple Selection"),
            _("Allow multiple values to be selected"),
            default=False,
        ),
        _field(
            existing,
            "max_selections",
            "number",
            _("Maximum Selections"),
            _("Maximum number of items that can be selected (0 for unlimited)"),
            default=0,
            min=0,
            conditional={"field": "multiple", "value": True},
        ),
    ]


def rows_fields(existing: Settings) -> list[FieldDescriptor]:
    return [
        _field(
            existing,
            "rows",
            "number",
            _("Rows"),
            _("Number of rows for textarea"),
            default=5,
            min=1,
            max=20,
        ),
        _field(
            existing,
            "cols",
            "number",
            _("Columns"),
            _("Number of columns for textarea"),
            default=50,
            min=10,
            max=200,
        ),
    ]


def min_fields(existing: Settings) -> list[FieldDescriptor]:
    return [
        _field(
            existing,
            "min_value",
            "number",
            _("Minimum Value"),
            _("Minimum allowed value"),
            default="",
        ),
        _field(
            existing,
            "min_length",
            "number",
            _("Minimum Length"),
            _("Minimum number of characters"),
            default="",
            min=0,
        ),
    ]


def max_fields(existing: Settings) -> list[FieldDescriptor]:
    return [
        _field(
            existing,
            "max_value",
            "number",
            _("Maximum Value"),
            _("Maximum allowed value"),
            default="",
        ),
        _field(
            existing,
            "max_length",
            "number",
            _("Maximum Length"),
            _("Maximum number of characters"),
            default="",
            min=1,
        ),
    ]


def step_fields(existing: Settings) -> list[FieldDescriptor]:
    return [
        _field(
            existing,
            "step",
            "number",
            _("Step"),
            _("Step increment for range/number fields"),
            default=1,
            min=0.01,
            step=0.01,
        )
    ]


def format_fields(existing: Settings) -> list[FieldDescriptor]:
    return [
        _field(
            existing,
            "date_format",
            "select",
            _("Date Format"),
            _("Date display format"),
            default="Y-m-d",
            options={
                "Y-m-d": "YYYY-MM-DD (2024-01-15)",
                "m/d/Y": "MM/DD/YYYY (01/15/2024)",
                "d/m/Y": "DD/MM/YYYY (15/01/2024)",
                "F j, Y": "Month DD, YYYY (January 15, 2024)",
                "j F Y": "DD Month YYYY (15 January 2024)",
            },
        ),
        _field(
            existing,
            "time_format",
            "select",
            _("Time Format"),
            _("Time display format"),
            default="H:i",
            options={
                "H:i": "24 Hour (14:30)",
                "h:i A": "12 Hour (2:30 PM)",
                "H:i:s": "24 Hour with Seconds (14:30:45)",
                "h:i:s A": "12 Hour with Seconds (2:30:45 PM)",
            },
        ),
    ]


def media_type_fields(existing: Settings) -> list[FieldDescriptor]:
    return [
        _field(
            existing,
            "media_type",
            "select",
            _("Media Type"),
            _("Type of media to allow"),
            default="image",
            options={
                "image": _("Image"),
                "video": _("Video"),
                "audio": _("Audio"),
                "document": _("Document"),
                "archive": _("Archive"),
                "any": _("Any File Type"),
            },
        ),
        _field(
            existing,
            "file_extensions",
            "text",
            _("Allowed Extensions"),
            _("Comma-separated list of allowed file extensions"),
            default="",
            placeholder="jpg,png,gif,pdf",
        ),
        _field(
            existing,
            "max_file_size",
            "number",
            _("Max File Size (MB)"),
            _("Maximum file size in megabytes"),
            default=10,
            min=1,
            max=100,
        ),
    ]


def validation_fields(existing: Settings) -> list[FieldDescriptor]:
    # Re-emits "required" after the base set; see flatten_descriptors().
    return [
        _field(
            existing,
            "required",
            "checkbox",
            _("Required"),
            _("This component must be completed"),
            default=False,
        ),
        _field(
            existing,
            "validation_rules",
            "repeater",
            _("Validation Rules"),
            _("Custom validation rules for this component"),
            default=[],
            fields=[
                _sub_field(
                    "rule_type",
                    "select",
                    _("Rule Type"),
                    options={
                        "min_length": _("Minimum Length"),
                        "max_length": _("Maximum Length"),
                        "regex": _("Regular Expression"),
                        "custom": _("Custom Function"),
                    },
                ),
                _sub_field("rule_value", "text", _("Rule Value")),
                _sub_field("error_message", "text", _("Error Message")),
            ],
        ),
    ]


def ajax_action_fields(existing: Settings) -> list[FieldDescriptor]:
    return [
        _field(
            existing,
            "ajax_action",
            "text",
            _("AJAX Action"),
            _("Action name used to load options"),
            default="",
            placeholder="my_ajax_action",
        ),
        _field(
            existing,
            "ajax_nonce",
            "text",
            _("AJAX Nonce Action"),
            _("Nonce action for security"),
            default="",
            placeholder="my_ajax_nonce",
        ),
    ]


def settings_fields(existing: Settings) -> list[FieldDescriptor]:
    return [
        _field(
            existing,
            "additional_settings",
            "textarea",
            _("Additional Settings"),
            _("JSON object with additional field settings"),
            default="",
            rows=5,
            placeholder='{"custom_attribute": "value", "data_source": "api_endpoint"}',
        )
    ]


def autocomplete_fields(existing: Settings) -> list[FieldDescriptor]:
    return [
        _field(
            existing,
            "autocomplete_source",
            "select",
            _("Autocomplete Source"),
            _("Data source for autocomplete suggestions"),
            default="ajax",
            options={
                "ajax": _("AJAX Endpoint"),
                "static": _("Static Options"),
                "posts": _("Posts"),
                "users": _("Users"),
            },
        ),
        _field(
            existing,
            "min_characters",
            "number",
            _("Minimum Characters"),
            _("Minimum characters before showing suggestions"),
            default=2,
            min=1,
            max=10,
        ),
    ]


def conditional_fields(existing: Settings) -> list[FieldDescriptor]:
    return [
        _field(
            existing,
            "conditional_logic",
            "checkbox",
            _("Enable Conditional Logic"),
            _("Show/hide this field based on other field values"),
            default=False,
        ),
        _field(
            existing,
            "conditional_rules",
            "textarea",
            _("Conditional Rules"),
            _("JSON array of conditional rules"),
            default="",
            rows=6,
            placeholder='[{"field": "field_id", "operator": "equals", "value": "show_value"}]',
            conditional={"field": "conditional_logic", "value": True},
        ),
    ]


def repeater_fields(existing: Settings) -> list[FieldDescriptor]:
    return [
        _field(
            existing,
            "sub_fields",
            "repeater",
            _("Sub Fields"),
            _("Fields rendered in every repeater row"),
            default=[],
            fields=[
                _sub_field("field_id", "text", _("Field ID"), required=True),
                _sub_field(
                    "field_type",
                    "select",
                    _("Field Type"),
                    options={
                        "text": _("Text"),
                        "textarea": _("Textarea"),
                        "select": _("Select"),
                        "checkbox": _("Checkbox"),
                        "media": _("Media"),
                    },
                ),
                _sub_field("field_label", "text", _("Field Label")),
            ],
        ),
        _field(
            existing,
            "min_rows",
            "number",
            _("Minimum Rows"),
            _("Minimum number of rows"),
            default=0,
            min=0,
        ),
        _field(
            existing,
            "max_rows",
            "number",
            _("Maximum Rows"),
            _("Maximum number of rows (0 for unlimited)"),
            default=0,
            min=0,
        ),
    ]


def color_fields(existing: Settings) -> list[FieldDescriptor]:
    return [
        _field(
            existing,
            "color_format",
            "select",
            _("Color Format"),
            _("Format for color value storage"),
            default="hex",
            options={
                "hex": _("Hexadecimal (#ffffff)"),
                "rgb": _("RGB (255, 255, 255)"),
                "rgba": _("RGBA (255, 255, 255, 1)"),
                "hsl": _("HSL (0, 0%, 100%)"),
            },
        ),
        _field(
            existing,
            "alpha_channel",
            "checkbox",
            _("Enable Alpha Channel"),
            _("Allow transparency/opacity selection"),
            default=False,
        ),
    ]


def relationship_fields(existing: Settings) -> list[FieldDescriptor]:
    return [
        _field(
            existing,
            "post_type",
            "select",
            _("Post Type"),
            _("Which post type to relate to"),
            default="post",
            options={
                "post": _("Posts"),
                "page": _("Pages"),
                "product": _("Products"),
            },
        ),
        _field(
            existing,
            "return_format",
            "select",
            _("Return Format"),
            _("How to return the selected data"),
            default="id",
            options={
                "id": _("Post ID"),
                "object": _("Post Object"),
                "url": _("Post URL"),
            },
        ),
    ]


# ==================== Layout capabilities ====================


def icon_fields(existing: Settings) -> list[FieldDescriptor]:
    return [
        _field(existing, "icon", "text", _("Icon"), _("Component icon class or name"), default="")
    ]


def class_fields(existing: Settings) -> list[FieldDescriptor]:
    return [
        _field(existing, "class", "text", _("CSS Class"), _("Additional CSS classes"), default="")
    ]


def collapsed_fields(existing: Settings) -> list[FieldDescriptor]:
    return [
        _field(
            existing,
            "collapsed",
            "switcher",
            _("Collapsed"),
            _("Whether the component should be collapsed by default"),
            default=False,
        )
    ]


def active_fields(existing: Settings) -> list[FieldDescriptor]:
    return [
        _field(
            existing,
            "active",
            "switcher",
            _("Active"),
            _("Whether the component should be active by default"),
            default=False,
        )
    ]


def width_fields(existing: Settings) -> list[FieldDescriptor]:
    return [
        _field(
            existing,
            "width",
            "select",
            _("Width"),
            _("Component width"),
            default="auto",
            options={
                "auto": _("Auto"),
                "25%": "25%",
                "50%": "50%",
                "75%": "75%",
                "100%": "100%",
            },
        )
    ]


def columns_fields(existing: Settings) -> list[FieldDescriptor]:
    return [
        _field(
            existing,
            "columns",
            "range",
            _("Columns"),
            _("Number of columns"),
            default=1,
            min=1,
            max=12,
            step=1,
        )
    ]


def gap_fields(existing: Settings) -> list[FieldDescriptor]:
    return [
        _field(
            existing,
            "gap",
            "select",
            _("Gap"),
            _("Space between items"),
            default="medium",
            options={
                "none": _("None"),
                "small": _("Small"),
                "medium": _("Medium"),
                "large": _("Large"),
            },
        )
    ]


def align_fields(existing: Settings) -> list[FieldDescriptor]:
    return [
        _field(
            existing,
            "align",
            "select",
            _("Alignment"),
            _("Content alignment"),
            default="left",
            options={"left": _("Left"), "center": _("Center"), "right": _("Right")},
        )
    ]


def collapsible_fields(existing: Settings) -> list[FieldDescriptor]:
    return [
        _field(
            existing,
            "collapsible",
            "switcher",
            _("Collapsible"),
            _("Allow the section to be collapsed"),
            default=False,
        )
    ]


def action_fields(existing: Settings) -> list[FieldDescriptor]:
    return [
        _field(
            existing,
            "action",
            "text",
            _("Form Action"),
            _("URL the form submits to"),
            default="",
            placeholder="/submit",
        )
    ]


def method_fields(existing: Settings) -> list[FieldDescriptor]:
    return [
        _field(
            existing,
            "method",
            "select",
            _("Form Method"),
            _("HTTP method used to submit the form"),
            default="post",
            options={"post": "POST", "get": "GET"},
        )
    ]


CAPABILITY_GENERATORS: dict[str, CapabilityGenerator] = {
    "placeholder": placeholder_fields,
    "value": default_value_fields,
    "default_value": default_value_fields,
    "options": options_fields,
    "multiple": multiple_fields,
    "rows": rows_fields,
    "min": min_fields,
    "max": max_fields,
    "step": step_fields,
    "format": format_fields,
    "media_type": media_type_fields,
    "validation": validation_fields,
    "ajax_action": ajax_action_fields,
    "settings": settings_fields,
    "autocomplete": autocomplete_fields,
    "conditional": conditional_fields,
    "repeater": repeater_fields,
    "color": color_fields,
    "relationship": relationship_fields,
    "icon": icon_fields,
    "class": class_fields,
    "collapsed": collapsed_fields,
    "active": active_fields,
    "width": width_fields,
    "columns": columns_fields,
    "gap": gap_fields,
    "align": align_fields,
    "collapsible": collapsible_fields,
    "action": action_fields,
    "method": method_fields,
}


def known_capabilities() -> list[str]:
    return list(CAPABILITY_GENERATORS)


def generate_config_fields(
    type_definition: TypeDefinition | Mapping[str, Any],
    existing_settings: Optional[Settings] = None,
) -> list[FieldDescriptor]:
    """Return the ordered configuration descriptors for a type.

    Args:
        type_definition: Resolved type definition (or its mapping form)
        existing_settings: Settings of the instance being edited, if any

    Returns:
        Base descriptors followed by capability descriptors in ``supports``
        order. Descriptor ids are not de-duplicated.
    """
    if isinstance(type_definition, TypeDefinition):
        supports = type_definition.supports
    else:
        supports = list(type_definition.get("supports") or [])
    existing = existing_settings or {}

    fields = base_config_fields(existing)
    for capability in supports:
        generator = CAPABILITY_GENERATORS.get(capability)
        if generator is None:
            continue
        fields.extend(generator(existing))
    return fields


def flatten_descriptors(descriptors: list[FieldDescriptor]) -> dict[str, FieldDescriptor]:
    """Index descriptors by id; a later descriptor replaces an earlier one."""
    flat: dict[str, FieldDescriptor] = {}
    for descriptor in descriptors:
        if descriptor.id in flat:
            logger.debug(f"Descriptor id '{descriptor.id}' emitted more than once, keeping last")
        flat[descriptor.id] = descriptor
    return flat


class ConfigFieldGenerator:
    """Runs :func:`generate_config_fields` through the extensibility filters."""

    def __init__(self, hooks: Optional[HookManager] = None):
        self.hooks = hooks or HookManager()

    def generate(
        self, type_definition: TypeDefinition, existing_settings: Optional[Settings] = None
    ) -> list[FieldDescriptor]:
        existing = existing_settings or {}
        fields = generate_config_fields(type_definition, existing)
        fields = self.hooks.apply_filter(FILTER_CONFIG_FIELDS, fields, type_definition, existing)
        return self.hooks.apply_filter(
            FILTER_CONFIG_FIELDS_FOR_TYPE.format(type=type_definition.type),
            fields,
            existing,
        )
