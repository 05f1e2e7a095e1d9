"""Action and filter hooks that let host code extend the core.

Actions are fire-and-forget notifications; filters are synchronous transform
pipelines. Both are keyed by name and run in priority order, then in
registration order.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass, field
from typing import Any, Callable

logger = logging.getLogger(__name__)

DEFAULT_PRIORITY = 10


@dataclass(order=True)
class _Callback:
    priority: int
    sequence: int
    fn: Callable[..., Any] = field(compare=False)


class HookManager:
    """Registry of action handlers and filter functions."""

    def __init__(self):
        self._actions: dict[str, list[_Callback]] = {}
        self._filters: dict[str, list[_Callback]] = {}
        self._sequence = itertools.count()

    def on_action(
        self, name: str, handler: Callable[..., Any], priority: int = DEFAULT_PRIORITY
    ) -> None:
        self._add(self._actions, name, handler, priority)

    def register_filter(
        self, name: str, fn: Callable[..., Any], priority: int = DEFAULT_PRIORITY
    ) -> None:
        self._add(self._filters, name, fn, priority)

    def remove_action(self, name: str, handler: Callable[..., Any]) -> bool:
        return self._remove(self._actions, name, handler)

    def remove_filter(self, name: str, fn: Callable[..., Any]) -> bool:
        return self._remove(self._filters, name, fn)

    def has_action(self, name: str) -> bool:
        return bool(self._actions.get(name))

    def has_filter(self, name: str) -> bool:
        return bool(self._filters.get(name))

    def emit(self, name: str, *payload: Any) -> None:
        """Notify every handler of ``name``.

        A failing handler is logged and skipped; the remaining handlers
        still run and nothing is returned to the caller.
        """
        for callback in list(self._actions.get(name, ())):
            try:
                callback.fn(*payload)
            except Exception as e:
                logger.error(f"Action handler for '{name}' failed: {e}", exc_info=True)

    def apply_filter(self, name: str, value: Any, *context: Any) -> Any:
        """Pass ``value`` through every filter of ``name``.

        With no filters registered the value is returned unchanged.
        Exceptions raised by filters propagate.
        """
        for callback in list(self._filters.get(name, ())):
            value = callback.fn(value, *context)
        return value

    def _add(self, table, name, fn, priority):
        callbacks = table.setdefault(name, [])
        callbacks.append(_Callback(priority, next(self._sequence), fn))
        callbacks.sort()

    @staticmethod
    def _remove(table, name, fn) -> bool:
        callbacks = table.get(name, [])
        for callback in callbacks:
            if callback.fn == fn:
                callbacks.remove(callback)
                return True
        return False
