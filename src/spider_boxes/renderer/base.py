from __future__ import annotations

import logging
import math
from typing import Any, Optional

from pydantic import BaseModel, Field

from ..i18n import gettext as _
from ..schema import FieldDescriptor, FieldOption
from ..utils import is_empty

logger = logging.getLogger(__name__)


class ValidationResult(BaseModel):
    valid: bool = True
    message: str = ""
    errors: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls()

    @classmethod
    def fail(cls, message: str, errors: Optional[dict[str, str]] = None) -> "ValidationResult":
        return cls(valid=False, message=message, errors=errors or {})

    def __bool__(self) -> bool:
        return self.valid


class RenderedControl(BaseModel):
    """Render-ready view of one control: its path, value and attributes."""

    id: str
    kind: str
    name: str
    label: str = ""
    description: str = ""
    value: Any = None
    required: bool = False
    attributes: dict[str, Any] = Field(default_factory=dict)
    options: list[FieldOption] = Field(default_factory=list)
    children: list[RenderedControl] = Field(default_factory=list)
    message: str = ""


class FieldControl:
    """Base control for one field kind.

    ``render`` and ``validate`` never raise. ``sanitize`` coerces a raw
    value into the kind's safe shape; ``validate`` checks a value and
    reports the first failing rule, starting with ``required``.
    """

    kind = "text"
    has_value = True

    def __init__(self, descriptor: FieldDescriptor, name: Optional[str] = None, **options: Any):
        self.descriptor = descriptor
        self.name = name or descriptor.id
        self.options = options

    @property
    def title(self) -> str:
        return self.descriptor.title or self.descriptor.id

    def setting(self, key: str, default: Any = None) -> Any:
        value = getattr(self.descriptor, key, None)
        if value is None:
            value = self.descriptor.meta.get(key)
        if value is None and self.descriptor.model_extra:
            value = self.descriptor.model_extra.get(key)
        return default if value is None else value

    def current(self, value: Any) -> Any:
        return self.descriptor.current_value if value is None else value

    def is_empty(self, value: Any) -> bool:
        return is_empty(value)

    def render(self, value: Any = None) -> RenderedControl:
        try:
            return self._render(self.current(value))
        except Exception as e:
            logger.error(f"Failed to render field '{self.descriptor.id}': {e}", exc_info=True)
            return RenderedControl(
                id=self.descriptor.id,
                kind=self.descriptor.kind,
                name=self.name,
                label=self.title,
                message=_("Unable to render field: {field}").format(field=self.title),
            )

    def sanitize(self, raw: Any) -> Any:
        return raw

    def validate(self, value: Any) -> ValidationResult:
        if self.descriptor.required and self.is_empty(value):
            return ValidationResult.fail(_("{title} is required").format(title=self.title))
        if self.is_empty(value):
            return ValidationResult.ok()
        try:
            return self._validate(value)
        except (TypeError, ValueError) as e:
            logger.debug(f"Validation of '{self.descriptor.id}' failed: {e}")
            return ValidationResult.fail(_("Invalid value for {title}").format(title=self.title))

    def _validate(self, value: Any) -> ValidationResult:
        return ValidationResult.ok()

    def _attributes(self) -> dict[str, Any]:
        return {}

    def _render(self, value: Any) -> RenderedControl:
        return RenderedControl(
            id=self.descriptor.id,
            kind=self.kind,
            name=self.name,
            label=self.title,
            description=self.descriptor.description,
            value=value if self.has_value else None,
            required=self.descriptor.required,
            attributes={k: v for k, v in self._attributes().items() if v is not None},
            options=list(self.descriptor.options),
        )


def format_number(value: float) -> str:
    """Render a bound without a trailing ``.0`` for whole numbers."""
    number = float(value)
    return str(int(number)) if number.is_integer() else str(number)


def to_number(raw: Any) -> Optional[float]:
    """Finite float for ``raw``, or None. NaN and infinities count as not a number."""
    if isinstance(raw, bool) or raw is None:
        return None
    try:
        number = float(raw) if isinstance(raw, (int, float)) else float(str(raw).strip())
    except (OverflowError, ValueError):
        return None
    return number if math.isfinite(number) else None


def round_half_up(number: float) -> int:
    """Round to the nearest integer, ties away from zero (2.5 -> 3, -2.5 -> -3)."""
    return int(math.copysign(math.floor(abs(number) + 0.5), number))


def as_list(value: Any) -> list[Any]:
    if value is None or value == "":
        return []
    if isinstance(value, (list, tuple, set)):
        return list(value)
    return [value]
