"""
Tests for the navigation stack and the panel focus controller.
"""

import sys
from pathlib import Path

import pytest

# Add scripts directory to path so datalathe_tui package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "scripts"))

from datalathe_tui.focus import Panel, PanelFocus  # noqa: E402
from datalathe_tui.navigation import (  # noqa: E402
    CHIP_DETAIL, CONNECT, HOME, QUERY, NavigationStack,
)


class TestNavigationStack:
    """Push, pop and reset semantics."""

    def test_starts_with_one_entry(self):
        nav = NavigationStack(HOME)
        assert nav.depth() == 1
        assert nav.current.screen == HOME

    def test_push_then_pop_restores_previous(self):
        nav = NavigationStack(HOME)
        nav.push(CHIP_DETAIL, {"chip_id": "abc"})
        assert nav.current.screen == CHIP_DETAIL
        assert nav.current.get("chip_id") == "abc"

        assert nav.pop() is True
        assert nav.current.screen == HOME
        assert nav.depth() == 1

    def test_pop_at_root_is_noop(self):
        nav = NavigationStack(HOME)
        assert nav.pop() is False
        assert nav.pop() is False
        assert nav.depth() == 1
        assert nav.current.screen == HOME

    def test_reset_replaces_history(self):
        nav = NavigationStack(CONNECT)
        nav.push(HOME)
        nav.push(QUERY)
        nav.reset_to(HOME)
        assert [e.screen for e in nav.entries] == [HOME]

    def test_params_are_read_only(self):
        nav = NavigationStack(HOME)
        params = {"chip_id": "abc"}
        nav.push(CHIP_DETAIL, params)
        params["chip_id"] = "changed"
        assert nav.current.get("chip_id") == "abc"
        with pytest.raises(TypeError):
            nav.current.params["chip_id"] = "x"

    def test_missing_param_defaults(self):
        nav = NavigationStack(HOME)
        assert nav.current.get("chip_id") is None
        assert nav.current.get("chip_id", "") == ""

    def test_listeners_see_new_top(self):
        nav = NavigationStack(HOME)
        seen = []
        nav.subscribe(lambda entry: seen.append(entry.screen))

        nav.push(QUERY)
        nav.pop()
        nav.pop()  # root, no notification
        nav.reset_to(HOME)

        assert seen == [QUERY, HOME, HOME]

    def test_unsubscribe(self):
        nav = NavigationStack(HOME)
        seen = []
        listener = seen.append
        nav.subscribe(listener)
        nav.unsubscribe(listener)
        nav.push(QUERY)
        assert seen == []

    def test_title_and_breadcrumbs(self):
        nav = NavigationStack(HOME)
        nav.push(CHIP_DETAIL)
        nav.push(QUERY)
        assert nav.title() == "Query Chips"
        assert nav.breadcrumbs() == "Home > Chip Detail > Query Chips"

    def test_pop_never_empties_stack(self):
        nav = NavigationStack(HOME)
        for i in range(5):
            nav.push(CHIP_DETAIL, {"chip_id": str(i)})
        for _ in range(20):
            nav.pop()
            assert nav.depth() >= 1
        assert nav.current.screen == HOME


class TestPanelFocus:
    """Panel cycling and suppression while a text field owns input."""

    def test_cycles_forward_and_wraps(self):
        focus = PanelFocus()
        order = []
        for _ in range(3):
            assert focus.focus_next() is True
            order.append(focus.active)
        assert order == [Panel.DATABASES, Panel.CHIPS, Panel.MAIN]

    def test_cycles_backward_and_wraps(self):
        focus = PanelFocus()
        assert focus.focus_previous() is True
        assert focus.active == Panel.CHIPS

    def test_input_active_suppresses_cycling(self):
        focus = PanelFocus()
        focus.set_input_active(True)
        assert focus.handle_key("tab") is False
        assert focus.handle_key("shift+tab") is False
        assert focus.active == Panel.MAIN

        focus.set_input_active(False)
        assert focus.handle_key("tab") is True
        assert focus.active == Panel.DATABASES

    def test_focus_panel_ignores_input_active(self):
        focus = PanelFocus()
        focus.set_input_active(True)
        focus.focus_panel(Panel.CHIPS)
        assert focus.active == Panel.CHIPS

    def test_handle_key_ignores_other_keys(self):
        focus = PanelFocus()
        assert focus.handle_key("enter") is False
        assert focus.handle_key("backtab") is True
        assert focus.active == Panel.CHIPS

    def test_listener_called_only_on_change(self):
        focus = PanelFocus()
        seen = []
        focus.subscribe(seen.append)
        focus.focus_panel(Panel.MAIN)
        focus.focus_next()
        focus.focus_panel(Panel.DATABASES)
        assert seen == [Panel.DATABASES]

    def test_unknown_panel_rejected(self):
        focus = PanelFocus(order=(Panel.MAIN, Panel.CHIPS))
        with pytest.raises(ValueError):
            focus.focus_panel(Panel.DATABASES)
        with pytest.raises(ValueError):
            PanelFocus(order=(Panel.CHIPS,), initial=Panel.MAIN)
