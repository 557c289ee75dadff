"""Keyboard input handling for TUI application.

This module maps keyboard inputs to actions: list commands while the
bookmark surface is open, and global commands (toggle, add, save, load,
file navigation, help, quit) otherwise.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..exceptions import SurfaceError

if TYPE_CHECKING:
    from ..commands import Commands
    from ..config import Keymaps
    from .state import AppState

logger = logging.getLogger(__name__)

ENTER_KEYS = ("enter", "\n", "\r")
ESCAPE_KEY = "\x1b"


class KeybindingHandler:
    """Handles keyboard input and dispatches actions with validation."""

    def __init__(self, app_state: AppState, commands: Commands, keymaps: Keymaps) -> None:
        """Initialize keybinding handler.

        Args:
            app_state: Application view state (help panel, quit flag)
            commands: Command entry points bound to the program context
            keymaps: Configured global key bindings
        """
        self.app_state = app_state
        self.commands = commands
        self.keymaps = keymaps

    @property
    def display(self):
        return self.commands.display

    def handle_key(self, key: str) -> tuple[bool, str | None]:
        """Process keyboard input and execute corresponding action.

        Args:
            key: Key press identifier (e.g., "j", "enter", "q")

        Returns:
            Tuple of (handled, message):
                - handled: True if key was recognized and handled, False otherwise
                - message: Optional feedback message for user (success/error/info)
        """
        if self.display.is_open:
            result = self._handle_surface_key(key)
            if result is not None:
                return result

        # Toggle and list commands
        if key == self.keymaps.toggle_ui and key:
            return self._handle_toggle()
        if key == self.keymaps.add_file and key:
            self.commands.prompt_add()
            return True, None
        if key == self.keymaps.save_list and key:
            self.commands.prompt_save()
            return True, None
        if key == self.keymaps.load_list and key:
            self.commands.load()
            return True, None

        nav_index = self.keymaps.nav_index(key)
        if nav_index is not None:
            self.commands.navigate(nav_index)
            return True, None

        # Meta handlers
        if key == "?":
            return self._handle_help()
        if key == "q":
            return self._handle_quit()
        if key == ESCAPE_KEY:
            return self._handle_escape()

        # Unhandled key - provide feedback
        if len(key) == 1 and key.isprintable():
            return True, f"Key '{key}' not assigned"
        return True, f"Key {repr(key)} not assigned"

    def _handle_surface_key(self, key: str) -> tuple[bool, str | None] | None:
        """Keys bound while the bookmark surface is open; None falls through."""
        if key in ENTER_KEYS:
            return self._result(self.display.activate())
        if key == "d":
            return self._result(self.display.delete())
        if key == "J":
            return self._result(self.display.move_down())
        if key == "K":
            return self._result(self.display.move_up())
        if key in ("j", "down"):
            return self._result(self.display.cursor_down())
        if key in ("k", "up"):
            return self._result(self.display.cursor_up())
        if key in ("q", ESCAPE_KEY) or key == self.keymaps.toggle_ui:
            self.display.close()
            return True, None
        return None

    @staticmethod
    def _result(result: tuple[bool, str | None]) -> tuple[bool, str | None]:
        _, message = result
        return True, message

    def _handle_toggle(self) -> tuple[bool, str | None]:
        """Open or close the bookmark surface."""
        try:
            self.commands.toggle_display()
        except SurfaceError as err:
            logger.error(f"Failed to open bookmark list: {err}")
            return True, f"Error: {err}"
        return True, None

    def _handle_help(self) -> tuple[bool, str | None]:
        """Toggle help panel visibility."""
        self.app_state.help_panel_visible = not self.app_state.help_panel_visible
        state = "visible" if self.app_state.help_panel_visible else "hidden"
        return True, f"Help panel {state}"

    def _handle_escape(self) -> tuple[bool, str | None]:
        """Handle ESC key - close help panel if open."""
        if self.app_state.help_panel_visible:
            self.app_state.help_panel_visible = False
        return True, None

    def _handle_quit(self) -> tuple[bool, str | None]:
        """Signal quit action."""
        # Handled by the main app loop
        return True, "quit"
