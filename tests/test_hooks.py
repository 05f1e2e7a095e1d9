"""Hook manager unit tests"""

from unittest.mock import Mock

import pytest

from spider_boxes.hooks import HookManager


def test_apply_filter_without_filters_returns_value_unchanged():
    hooks = HookManager()
    value = {"a": 1}

    assert hooks.apply_filter("anything", value) is value


def test_apply_filter_reduces_in_registration_order():
    hooks = HookManager()
    hooks.register_filter("name", lambda v: v + "a")
    hooks.register_filter("name", lambda v: v + "b")

    assert hooks.apply_filter("name", "") == "ab"


def test_apply_filter_honours_priority_before_registration_order():
    hooks = HookManager()
    hooks.register_filter("name", lambda v: v + "late", priority=20)
    hooks.register_filter("name", lambda v: v + "early", priority=5)

    assert hooks.apply_filter("name", "") == "earlylate"


def test_apply_filter_passes_context():
    hooks = HookManager()
    hooks.register_filter("name", lambda v, ctx: v * ctx)

    assert hooks.apply_filter("name", 3, 2) == 6


def test_apply_filter_propagates_errors():
    hooks = HookManager()

    def broken(value):
        raise RuntimeError("boom")

    hooks.register_filter("name", broken)

    with pytest.raises(RuntimeError):
        hooks.apply_filter("name", 1)


def test_emit_calls_handlers_with_payload():
    hooks = HookManager()
    handler = Mock()
    hooks.on_action("created", handler)

    hooks.emit("created", "id", {"x": 1})

    handler.assert_called_once_with("id", {"x": 1})


def test_emit_skips_failing_handler_and_runs_the_rest():
    hooks = HookManager()
    failing = Mock(side_effect=RuntimeError("boom"))
    second = Mock()
    hooks.on_action("created", failing)
    hooks.on_action("created", second)

    hooks.emit("created", 1)

    failing.assert_called_once_with(1)
    second.assert_called_once_with(1)


def test_remove_action_and_filter():
    hooks = HookManager()
    handler = Mock()
    fn = Mock(return_value=1)
    hooks.on_action("a", handler)
    hooks.register_filter("f", fn)

    assert hooks.has_action("a") is True
    assert hooks.has_filter("f") is True
    assert hooks.remove_action("a", handler) is True
    assert hooks.remove_filter("f", fn) is True
    assert hooks.remove_filter("f", fn) is False

    hooks.emit("a")
    handler.assert_not_called()
    assert hooks.has_action("a") is False
    assert hooks.apply_filter("f", 0) == 0
