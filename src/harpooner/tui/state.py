"""Mutable view state of the TUI application."""

from __future__ import annotations

import logging
from dataclasses import dataclass


@dataclass
class AppState:
    """What the main loop renders besides the bookmark surface."""

    help_panel_visible: bool = False
    message: str | None = None
    message_level: int = logging.INFO
    should_quit: bool = False

    def set_message(self, message: str | None, level: int = logging.INFO) -> None:
        self.message = message
        self.message_level = level

    def __repr__(self) -> str:
        return (
            f"AppState(help={self.help_panel_visible}, quit={self.should_quit}, "
            f"message={self.message!r})"
        )
