"""Scalar and choice controls."""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Any, Optional

from ..consts import RANGE_DEFAULT_MAX, RANGE_DEFAULT_MIN, RANGE_DEFAULT_STEP, TEXTAREA_DEFAULT_ROWS
from ..i18n import gettext as _
from .base import (
    FieldControl,
    RenderedControl,
    ValidationResult,
    as_list,
    format_number,
    round_half_up,
    to_number,
)

_TAG_RE = re.compile(r"<[^>]*>")

_TRUTHY = {"1", "true", "on", "yes"}


def strip_tags(value: str) -> str:
    return _TAG_RE.sub("", value)


class TextControl(FieldControl):
    kind = "text"

    def _attributes(self):
        return {
            "placeholder": self.descriptor.placeholder,
            "minlength": self.setting("min_length"),
            "maxlength": self.setting("max_length"),
        }

    def sanitize(self, raw):
        if raw is None:
            return ""
        if isinstance(raw, (list, dict)):
            return raw
        return " ".join(strip_tags(str(raw)).split())

    def _validate(self, value):
        if not isinstance(value, str):
            return ValidationResult.ok()
        min_length = to_number(self.setting("min_length"))
        max_length = to_number(self.setting("max_length"))
        if min_length is not None and len(value) < min_length:
            return ValidationResult.fail(
                _("Must be at least {count} characters").format(count=format_number(min_length))
            )
        if max_length is not None and max_length > 0 and len(value) > max_length:
            return ValidationResult.fail(
                _("Must be at most {count} characters").format(count=format_number(max_length))
            )
        return ValidationResult.ok()


class TextareaControl(TextControl):
    kind = "textarea"

    def _attributes(self):
        attributes = super()._attributes()
        attributes["rows"] = self.descriptor.rows or TEXTAREA_DEFAULT_ROWS
        return attributes

    def sanitize(self, raw):
        if raw is None:
            return ""
        if isinstance(raw, (list, dict)):
            return raw
        return strip_tags(str(raw)).strip()


class WysiwygControl(TextareaControl):
    kind = "wysiwyg"

    def sanitize(self, raw):
        if raw is None:
            return ""
        return str(raw).strip()


class NumberControl(FieldControl):
    kind = "number"

    def _attributes(self):
        return {
            "min": self.descriptor.min,
            "max": self.descriptor.max,
            "step": self.descriptor.step,
            "placeholder": self.descriptor.placeholder,
        }

    def sanitize(self, raw):
        if raw is None or (isinstance(raw, str) and not raw.strip()):
            return ""
        number = to_number(raw)
        if number is None:
            return ""
        return int(number) if number.is_integer() else number

    def _validate(self, value):
        number = to_number(value)
        if number is None:
            return ValidationResult.fail(_("{title} must be a number").format(title=self.title))
        return check_bounds(number, self.descriptor.min, self.descriptor.max)


def check_bounds(number: float, minimum: Optional[float], maximum: Optional[float]):
    if minimum is not None and maximum is not None:
        if number < minimum or number > maximum:
            return ValidationResult.fail(
                _("Value must be between {min} and {max}").format(
                    min=format_number(minimum), max=format_number(maximum)
                )
            )
    elif minimum is not None and number < minimum:
        return ValidationResult.fail(
            _("Value must be at least {min}").format(min=format_number(minimum))
        )
    elif maximum is not None and number > maximum:
        return ValidationResult.fail(
            _("Value must be at most {max}").format(max=format_number(maximum))
        )
    return ValidationResult.ok()


class RangeControl(FieldControl):
    """Slider over ``[min, max]`` snapping to multiples of ``step``."""

    kind = "range"

    @property
    def bounds(self) -> tuple[float, float, float]:
        minimum = self.descriptor.min
        maximum = self.descriptor.max
        step = self.descriptor.step
        return (
            RANGE_DEFAULT_MIN if minimum is None else minimum,
            RANGE_DEFAULT_MAX if maximum is None else maximum,
            RANGE_DEFAULT_STEP if not step else step,
        )

    def _attributes(self):
        minimum, maximum, step = self.bounds
        return {"min": minimum, "max": maximum, "step": step}

    def current(self, value):
        value = super().current(value)
        if value is None or value == "":
            return self.bounds[0]
        return value

    def sanitize(self, raw):
        minimum, maximum, step = self.bounds
        number = to_number(raw)
        if number is None:
            number = minimum
        number = min(max(number, minimum), maximum)
        number = round_half_up(number / step) * step
        number = min(max(number, minimum), maximum)
        return int(number) if float(number).is_integer() else number

    def _validate(self, value):
        minimum, maximum, _step = self.bounds
        number = to_number(value)
        if number is None:
            return ValidationResult.fail(_("{title} must be a number").format(title=self.title))
        return check_bounds(number, minimum, maximum)


class SelectControl(FieldControl):
    """Single or multiple choice constrained to ``options``.

    Sanitize drops values that are not option keys; validate reports them.
    A select without options (e.g. one loading its options remotely)
    accepts any value.
    """

    kind = "select"

    @property
    def multiple(self) -> bool:
        return self.descriptor.multiple

    def _attributes(self):
        return {
            "multiple": self.multiple,
            "placeholder": self.descriptor.placeholder,
            "max_selections": self.setting("max_selections"),
        }

    def _allowed(self, value) -> bool:
        allowed = self.descriptor.option_values()
        return not allowed or str(value) in allowed

    def sanitize(self, raw):
        if self.multiple:
            return [str(v) for v in as_list(raw) if self._allowed(v)]
        if raw is None or raw == "" or isinstance(raw, (list, dict)):
            return ""
        return str(raw) if self._allowed(raw) else ""

    def _validate(self, value):
        if self.multiple:
            if not isinstance(value, (list, tuple)):
                return ValidationResult.fail(_("Multiple selection value must be a list"))
            values = list(value)
            max_selections = to_number(self.setting("max_selections"))
            if max_selections and len(values) > max_selections:
                return ValidationResult.fail(
                    _("Select no more than {count} items").format(
                        count=format_number(max_selections)
                    )
                )
        else:
            values = [value]
        for item in values:
            if not self._allowed(item):
                return ValidationResult.fail(_("Invalid option selected"))
        return ValidationResult.ok()


class ReactSelectControl(SelectControl):
    kind = "react-select"

    def _attributes(self):
        attributes = super()._attributes()
        attributes["async"] = bool(self.setting("async", False))
        attributes["ajax_action"] = self.setting("ajax_action")
        return attributes


class RadioControl(SelectControl):
    kind = "radio"

    @property
    def multiple(self) -> bool:
        return False


class CheckboxControl(SelectControl):
    """Boolean toggle, or a checkbox group when ``options`` are given."""

    kind = "checkbox"

    @property
    def is_group(self) -> bool:
        return bool(self.descriptor.options)

    @property
    def multiple(self) -> bool:
        return self.is_group and self.descriptor.multiple

    def is_empty(self, value):
        if not self.is_group and value is False:
            return True
        return super().is_empty(value)

    def sanitize(self, raw):
        if self.is_group:
            return super().sanitize(raw)
        return to_bool(raw)

    def _validate(self, value):
        if self.is_group:
            return super()._validate(value)
        if isinstance(value, bool) or str(value).strip().lower() in _TRUTHY | {"0", "false", ""}:
            return ValidationResult.ok()
        return ValidationResult.fail(_("Invalid checkbox value"))


class SwitcherControl(FieldControl):
    """On/off toggle storing ``on_value`` or ``off_value``."""

    kind = "switcher"

    @property
    def on_value(self):
        return self.setting("on_value", True)

    @property
    def off_value(self):
        return self.setting("off_value", False)

    def _attributes(self):
        return {
            "on_value": self.on_value,
            "off_value": self.off_value,
            "on_label": self.setting("on_label", _("On")),
            "off_label": self.setting("off_label", _("Off")),
        }

    def is_empty(self, value):
        return value is None or value == self.off_value

    def sanitize(self, raw):
        if raw == self.on_value:
            return self.on_value
        if raw == self.off_value:
            return self.off_value
        return self.on_value if to_bool(raw) else self.off_value

    def _validate(self, value):
        if value == self.on_value or value == self.off_value:
            return ValidationResult.ok()
        return ValidationResult.fail(_("Invalid switcher value"))


def to_bool(raw: Any) -> bool:
    if isinstance(raw, bool):
        return raw
    if raw is None:
        return False
    if isinstance(raw, (int, float)):
        return raw != 0
    return str(raw).strip().lower() in _TRUTHY


def parse_datetime(raw: Any) -> Optional[datetime]:
    if isinstance(raw, datetime):
        return raw
    if isinstance(raw, bool) or raw is None:
        return None
    if isinstance(raw, (int, float)):
        return _from_timestamp(raw)
    text = str(raw).strip()
    if not text:
        return None
    if text.isdecimal():
        return _from_timestamp(int(text))
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def _from_timestamp(seconds: float) -> Optional[datetime]:
    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        # Outside the platform's time_t range, or NaN.
        return None


class DateTimeControl(FieldControl):
    kind = "datetime"

    def _attributes(self):
        return {
            "date_format": self.setting("date_format"),
            "time_format": self.setting("time_format"),
            "min": self.setting("min_date"),
            "max": self.setting("max_date"),
        }

    def sanitize(self, raw):
        parsed = parse_datetime(raw)
        if parsed is None:
            return ""
        return parsed.isoformat()

    def _validate(self, value):
        parsed = parse_datetime(value)
        if parsed is None:
            return ValidationResult.fail(_("Invalid date/time format"))
        earliest = parse_datetime(self.setting("min_date"))
        latest = parse_datetime(self.setting("max_date"))
        try:
            if earliest is not None and parsed < earliest:
                return ValidationResult.fail(_("Date/time is too early"))
            if latest is not None and parsed > latest:
                return ValidationResult.fail(_("Date/time is too late"))
        except TypeError:
            # naive vs aware comparison
            return ValidationResult.fail(_("Invalid date/time format"))
        return ValidationResult.ok()


class TagsControl(FieldControl):
    """Free-form list of strings."""

    kind = "tags"

    def _attributes(self):
        return {"placeholder": self.descriptor.placeholder, "max": self.descriptor.max}

    def sanitize(self, raw):
        if isinstance(raw, str):
            raw = raw.split(",")
        tags = []
        for item in as_list(raw):
            tag = " ".join(strip_tags(str(item)).split())
            if tag and tag not in tags:
                tags.append(tag)
        return tags

    def _validate(self, value):
        if not isinstance(value, (list, tuple)):
            return ValidationResult.fail(_("Tags value must be a list"))
        maximum = self.descriptor.max
        if maximum and len(value) > maximum:
            return ValidationResult.fail(
                _("Cannot have more than {count} tags").format(count=format_number(maximum))
            )
        return ValidationResult.ok()


class ButtonControl(FieldControl):
    kind = "button"
    has_value = False

    def _attributes(self):
        return {"class": self.setting("class"), "onclick": self.setting("onclick")}

    def sanitize(self, raw):
        return None

    def validate(self, value):
        return ValidationResult.ok()


class UnsupportedControl(FieldControl):
    """Placeholder for kinds with no control; renders a visible notice."""

    kind = "unsupported"
    has_value = False

    def _render(self, value):
        return RenderedControl(
            id=self.descriptor.id,
            kind=self.kind,
            name=self.name,
            label=self.title,
            message=_("Unsupported field type: {type}").format(type=self.descriptor.kind),
        )

    def validate(self, value):
        return ValidationResult.ok()
