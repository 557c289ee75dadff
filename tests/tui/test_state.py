"""Tests for AppState."""

from __future__ import annotations

import logging

from harpooner.tui.state import AppState


class TestAppState:
    def test_defaults(self) -> None:
        state = AppState()
        assert state.help_panel_visible is False
        assert state.message is None
        assert state.should_quit is False

    def test_set_message_records_level(self) -> None:
        state = AppState()
        state.set_message("No file at index 3", logging.WARNING)
        assert state.message == "No file at index 3"
        assert state.message_level == logging.WARNING

    def test_repr(self) -> None:
        state = AppState(message="hi")
        assert "message='hi'" in repr(state)
