from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .consts import DEFAULT_CONTEXT
from .enums import Namespace
from .utils import humanize


class TypeDefinition(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    type: str = ""
    display_name: str = ""
    handler_ref: str = ""
    supports: list[str] = Field(default_factory=list)
    category: str = "general"
    description: str = ""
    icon: str = ""
    is_active: bool = True
    parent: Optional[str] = None
    children: list[str] = Field(default_factory=list)
    sort_order: int = 0

    @field_validator("supports", mode="before")
    @classmethod
    def coerce_supports(cls, v):
        if v is None:
            return []
        if isinstance(v, str):
            try:
                v = json.loads(v)
            except ValueError:
                v = [part.strip() for part in v.split(",")]
        seen = []
        for tag in v:
            if tag and tag not in seen:
                seen.append(tag)
        return seen

    @model_validator(mode="after")
    def fill_derived_names(self) -> "TypeDefinition":
        if not self.type:
            self.type = self.id
        if not self.display_name:
            self.display_name = humanize(self.id)
        return self


class FieldOption(BaseModel):
    value: str
    label: str


class Conditional(BaseModel):
    field: str
    value: Any = True

    def matches(self, values: dict[str, Any]) -> bool:
        return values.get(self.field) == self.value


def parse_options_text(text: str) -> list[dict[str, str]]:
    """Parse the ``value|label`` one-per-line format of the options setting.

    Examples:
        >>> parse_options_text("a|Apple\\nb")
        [{'value': 'a', 'label': 'Apple'}, {'value': 'b', 'label': 'b'}]
    """
    options = []
    for line in text.splitlines():
        line = line.strip()
        if not line:
            continue
        value, _, label = line.partition("|")
        value = value.strip()
        options.append({"value": value, "label": label.strip() or value})
    return options


def coerce_options(v: Any) -> list[Any]:
    """Normalize every accepted options shape into ``[{value, label}]``."""
    if v is None or v == "":
        return []
    if isinstance(v, str):
        return parse_options_text(v)
    if isinstance(v, dict):
        options = []
        for value, label in v.items():
            if isinstance(label, dict):
                label = label.get("label", value)
            options.append({"value": str(value), "label": str(label)})
        return options
    options = []
    for item in v:
        if isinstance(item, (FieldOption, dict)):
            options.append(item)
        else:
            options.append({"value": str(item), "label": str(item)})
    return options


class FieldDescriptor(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    kind: str
    title: str = ""
    description: str = ""
    current_value: Any = None
    required: bool = False
    placeholder: Optional[str] = None
    min: Optional[float] = None
    max: Optional[float] = None
    step: Optional[float] = None
    rows: Optional[int] = None
    options: list[FieldOption] = Field(default_factory=list)
    multiple: bool = False
    conditional: Optional[Conditional] = None
    fields: Optional[list[FieldDescriptor]] = None
    meta: dict[str, Any] = Field(default_factory=dict)

    @field_validator("options", mode="before")
    @classmethod
    def normalize_options(cls, v):
        return coerce_options(v)

    def option_values(self) -> list[str]:
        return [option.value for option in self.options]

    @classmethod
    def from_instance(cls, instance: "Instance") -> "FieldDescriptor":
        """Build the descriptor that renders a configured field instance.

        The instance's ``type`` becomes the control kind and its settings
        supply the constraints; ``min_value``/``max_value`` map onto the
        numeric bounds, ``min``/``max`` win when both are present.
        """
        settings = dict(instance.settings)
        data: dict[str, Any] = {
            "id": instance.id,
            "kind": instance.type,
            "title": instance.title or settings.get("label", ""),
            "description": instance.description or settings.get("description", ""),
            "current_value": settings.get("value", settings.get("default_value")),
            "required": bool(settings.get("required", False)),
            "placeholder": settings.get("placeholder") or None,
            "options": settings.get("options"),
            "multiple": bool(settings.get("multiple", False)),
        }
        for bound, alias in (("min", "min_value"), ("max", "max_value")):
            raw = settings.get(bound, settings.get(alias))
            if raw not in (None, ""):
                data[bound] = raw
        for key in ("step", "rows"):
            if settings.get(key) not in (None, ""):
                data[key] = settings[key]
        if settings.get("fields"):
            data["fields"] = settings["fields"]
        if settings.get("conditional"):
            data["conditional"] = settings["conditional"]
        data["meta"] = {
            k: v for k, v in settings.items() if k not in data and k not in ("label", "value")
        }
        return cls.model_validate(data)


class Instance(BaseModel):
    id: str
    type: str
    namespace: Namespace = Namespace.FIELD
    title: str = ""
    description: str = ""
    parent_id: Optional[str] = None
    section_id: Optional[str] = None
    context: str = DEFAULT_CONTEXT
    settings: dict[str, Any] = Field(default_factory=dict)
    children: dict[str, dict[str, Any]] = Field(default_factory=dict)
    sort_order: int = 0
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("parent_id", "section_id", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        return v or None


class ConfigFieldsResponse(BaseModel):
    type_definition: TypeDefinition
    config_fields: list[FieldDescriptor]
