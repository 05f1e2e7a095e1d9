"""Utility functions for Spider Boxes"""

import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo

logger = logging.getLogger(__name__)

UTC = ZoneInfo("UTC")

_KEY_RE = re.compile(r"[^a-z0-9_\-]")


def canonicalify(p: Path | str) -> Path:
    return Path(p).expanduser().resolve()


def ensure_path(p: Path | str) -> Path:
    path = canonicalify(p)
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_now(tz: ZoneInfo = UTC) -> datetime:
    return datetime.now(tz)


def sanitize_key(value: Any) -> str:
    """Lowercase a key and strip everything but ``a-z0-9_-``.

    Examples:
        >>> sanitize_key("My-Field_1!")
        'my-field_1'
    """
    if value is None:
        return ""
    return _KEY_RE.sub("", str(value).lower())


def humanize(identifier: str) -> str:
    """Turn a type id into a display name.

    Examples:
        >>> humanize("react-select")
        'React Select'
    """
    return " ".join(part.capitalize() for part in re.split(r"[_\-]+", identifier) if part)


def is_empty(value: Any) -> bool:
    """True for ``None``, blank strings and empty collections.

    ``0`` and ``False`` are values, not emptiness.
    """
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, tuple, set, dict)):
        return len(value) == 0
    return False
