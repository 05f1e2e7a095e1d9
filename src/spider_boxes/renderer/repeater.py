"""Repeater: a list of rows, each rendered against the same sub-fields."""

from __future__ import annotations

from typing import Any, Callable, Optional

from ..i18n import gettext as _
from ..i18n import ngettext
from ..schema import FieldDescriptor
from .base import FieldControl, RenderedControl, ValidationResult, to_number


def move_row(rows: list[Any], source: int, destination: int) -> list[Any]:
    """Return a copy of ``rows`` with one row moved to a new position.

    Examples:
        >>> move_row(["a", "b", "c"], 0, 2)
        ['b', 'c', 'a']
    """
    reordered = list(rows)
    if not -len(reordered) <= source < len(reordered):
        raise IndexError(f"Row index out of range: {source}")
    row = reordered.pop(source)
    destination = max(0, min(destination, len(reordered)))
    reordered.insert(destination, row)
    return reordered


class RepeaterControl(FieldControl):
    kind = "repeater"

    def __init__(
        self,
        descriptor: FieldDescriptor,
        name: Optional[str] = None,
        factory: Optional[Callable[..., FieldControl]] = None,
        **options: Any,
    ):
        super().__init__(descriptor, name, **options)
        if factory is None:
            from .factory import control_for

            factory = control_for
        self.factory = factory

    @property
    def sub_fields(self) -> list[FieldDescriptor]:
        return list(self.descriptor.fields or [])

    @property
    def min_rows(self) -> int:
        value = self.descriptor.min
        if value is None:
            value = to_number(self.setting("min_rows"))
        return int(value or 0)

    @property
    def max_rows(self) -> Optional[int]:
        value = self.descriptor.max
        if value is None:
            value = to_number(self.setting("max_rows"))
        return int(value) if value else None

    def row_path(self, index: int, sub_id: str) -> str:
        return f"{self.name}[{index}][{sub_id}]"

    def sub_control(self, index: int, sub_field: FieldDescriptor) -> FieldControl:
        return self.factory(sub_field, name=self.row_path(index, sub_field.id), **self.options)

    def _attributes(self):
        return {
            "min_rows": self.min_rows,
            "max_rows": self.max_rows,
            "add_button_text": self.setting("add_button_text", _("Add Item")),
            "remove_button_text": self.setting("remove_button_text", _("Remove")),
        }

    def _render(self, value):
        rows = value if isinstance(value, list) else []
        rendered = super()._render(rows)
        for index, row in enumerate(rows):
            row = row if isinstance(row, dict) else {}
            rendered.children.append(
                RenderedControl(
                    id=f"{self.descriptor.id}_{index}",
                    kind="repeater-row",
                    name=f"{self.name}[{index}]",
                    label=_("Item {number}").format(number=index + 1),
                    value=row,
                    children=[
                        self.sub_control(index, sub_field).render(row.get(sub_field.id))
                        for sub_field in self.sub_fields
                    ],
                )
            )
        return rendered

    def sanitize(self, raw):
        if not isinstance(raw, (list, tuple)):
            return []
        sub_fields = self.sub_fields
        rows = []
        for index, item in enumerate(raw):
            if not isinstance(item, dict):
                continue
            if not sub_fields:
                rows.append(dict(item))
                continue
            rows.append(
                {
                    sub_field.id: self.sub_control(index, sub_field).sanitize(item.get(sub_field.id))
                    for sub_field in sub_fields
                }
            )
        return rows

    def validate(self, value):
        if self.descriptor.required and self.is_empty(value):
            return ValidationResult.fail(_("{title} is required").format(title=self.title))
        return self._validate([] if value is None or value == "" else value)

    def _validate(self, value):
        if not isinstance(value, (list, tuple)):
            return ValidationResult.fail(_("Repeater value must be a list"))

        if len(value) < self.min_rows:
            return ValidationResult.fail(
                ngettext(
                    "Repeater must have at least {count} item",
                    "Repeater must have at least {count} items",
                    self.min_rows,
                ).format(count=self.min_rows)
            )
        if self.max_rows is not None and len(value) > self.max_rows:
            return ValidationResult.fail(
                ngettext(
                    "Repeater cannot have more than {count} item",
                    "Repeater cannot have more than {count} items",
                    self.max_rows,
                ).format(count=self.max_rows)
            )

        errors: dict[str, str] = {}
        first_message = ""
        for index, row in enumerate(value):
            if not isinstance(row, dict):
                errors[f"{self.name}[{index}]"] = _("Invalid row")
                first_message = first_message or _("Item {number}: invalid row").format(
                    number=index + 1
                )
                continue
            for sub_field in self.sub_fields:
                result = self.sub_control(index, sub_field).validate(row.get(sub_field.id))
                if result.valid:
                    continue
                errors[self.row_path(index, sub_field.id)] = result.message
                errors.update(result.errors)
                if not first_message:
                    first_message = _('Item {number}, field "{field}": {message}').format(
                        number=index + 1,
                        field=sub_field.title or sub_field.id,
                        message=result.message,
                    )

        if errors:
            return ValidationResult.fail(first_message, errors)
        return ValidationResult.ok()
