from __future__ import annotations

from typing import Any, Optional

from ..schema import FieldDescriptor
from .base import FieldControl
from .controls import (
    ButtonControl,
    CheckboxControl,
    DateTimeControl,
    NumberControl,
    RadioControl,
    RangeControl,
    ReactSelectControl,
    SelectControl,
    SwitcherControl,
    TagsControl,
    TextareaControl,
    TextControl,
    UnsupportedControl,
    WysiwygControl,
)
from .media import MediaControl
from .repeater import RepeaterControl

CONTROLS: dict[str, type[FieldControl]] = {
    "text": TextControl,
    "textarea": TextareaControl,
    "wysiwyg": WysiwygControl,
    "number": NumberControl,
    "select": SelectControl,
    "react-select": ReactSelectControl,
    "checkbox": CheckboxControl,
    "radio": RadioControl,
    "range": RangeControl,
    "switcher": SwitcherControl,
    "media": MediaControl,
    "datetime": DateTimeControl,
    "repeater": RepeaterControl,
    "tags": TagsControl,
    "button": ButtonControl,
}


def control_for(descriptor: FieldDescriptor, name: Optional[str] = None, **options: Any) -> FieldControl:
    """Instantiate the control for ``descriptor.kind``.

    Kinds without a control get :class:`UnsupportedControl`. Extra options
    (such as ``media_preview``) are handed to every control and passed on
    to repeater rows.
    """
    control_class = CONTROLS.get(descriptor.kind, UnsupportedControl)
    return control_class(descriptor, name, **options)
