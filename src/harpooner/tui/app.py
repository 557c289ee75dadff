"""Main TUI application loop and layout.

This module orchestrates the interactive application: it reads keys,
dispatches them through the KeybindingHandler, drains deferred callbacks
once per turn, and renders the bookmark surface or list overview with Rich.
"""

from __future__ import annotations

import logging
import select
import sys
from collections.abc import Iterator, Sequence
from contextlib import contextmanager

from rich.align import Align
from rich.console import Console
from rich.layout import Layout
from rich.live import Live

from ..commands import Commands
from ..config import Config
from ..context import build_context
from ..prompts import EditorOpener, console_confirm, console_input, console_pick
from .keybindings import KeybindingHandler
from .state import AppState
from .tui_utils import get_terminal_size
from .views.footer_bar import render_footer_bar
from .views.help_panel import render_help_panel
from .views.list_panel import render_list_panel

logger = logging.getLogger(__name__)

_ARROW_KEYS = {"[A": "up", "[B": "down", "[C": "right", "[D": "left"}


class HarpoonerApp:
    """Main TUI application orchestrating all components."""

    def __init__(self, config: Config, console: Console | None = None):
        """Initialize TUI application.

        Args:
            config: Runtime configuration
            console: Rich console to render to
        """
        self.config = config
        self.console = console or Console()
        self.app_state = AppState()

        self.ctx = build_context(
            config,
            notify=self._notify,
            confirm=self._confirm,
            pick=self._pick,
            text_input=self._text_input,
            open_path=self._open_path,
        )
        self.commands = Commands(self.ctx)
        self.keybinding_handler = KeybindingHandler(self.app_state, self.commands, config.keymaps)
        self.editor = EditorOpener(config.editor_command, notify=self._notify)

        self._live: Live | None = None
        self._terminal_attrs: list | None = None

    # Collaborators

    def _notify(self, message: str, level: int = logging.INFO) -> None:
        logger.log(level, message)
        self.app_state.set_message(message, level)

    def _confirm(self, message: str) -> bool:
        with self._suspended():
            return console_confirm(message, console=self.console)

    def _pick(self, prompt: str, choices: Sequence[str]) -> str | None:
        with self._suspended():
            return console_pick(prompt, choices, console=self.console)

    def _text_input(self, prompt: str) -> str | None:
        with self._suspended():
            return console_input(prompt, console=self.console)

    def _open_path(self, path: str) -> None:
        with self._suspended():
            self.editor(path)

    # Terminal handling

    @contextmanager
    def _cbreak(self) -> Iterator[None]:
        """Read keys one at a time without echo while the TUI runs."""
        if not sys.stdin.isatty():
            yield
            return

        import termios
        import tty

        fd = sys.stdin.fileno()
        self._terminal_attrs = termios.tcgetattr(fd)
        try:
            tty.setcbreak(fd)
            yield
        finally:
            termios.tcsetattr(fd, termios.TCSADRAIN, self._terminal_attrs)
            self._terminal_attrs = None

    @contextmanager
    def _suspended(self) -> Iterator[None]:
        """Hand the terminal back for a prompt or an editor, then resume."""
        live = self._live
        if live is None:
            yield
            return

        import termios
        import tty

        live.stop()
        attrs = self._terminal_attrs
        fd = sys.stdin.fileno()
        if attrs is not None:
            termios.tcsetattr(fd, termios.TCSADRAIN, attrs)
        try:
            yield
        finally:
            if attrs is not None:
                tty.setcbreak(fd)
            live.start()

    def _poll_keyboard(self, timeout: float = 0.1) -> str | None:
        """Poll for keyboard input with timeout.

        Args:
            timeout: Timeout in seconds

        Returns:
            Key string if key pressed, None otherwise
        """
        ready, _, _ = select.select([sys.stdin], [], [], timeout)
        if not ready:
            return None
        try:
            key = sys.stdin.read(1)
        except Exception as err:
            logger.warning(f"Error reading keyboard input: {err}")
            return None

        if key != "\x1b":
            return key

        # Arrow keys arrive as ESC [ X
        sequence = ""
        while len(sequence) < 2 and select.select([sys.stdin], [], [], 0.01)[0]:
            sequence += sys.stdin.read(1)
        return _ARROW_KEYS.get(sequence, key)

    # Rendering

    def _build_layout(self) -> Layout:
        """Build the two-row layout: main content and footer."""
        layout = Layout()
        layout.split_column(
            Layout(name="main", ratio=1),
            Layout(name="footer", size=1),
        )
        return layout

    def _render_layout(self, layout: Layout) -> None:
        """Render the current view into the layout."""
        store = self.ctx.store
        display = self.ctx.display

        if self.app_state.help_panel_visible:
            layout["main"].update(render_help_panel(self.config.keymaps))
        elif display.surface is not None:
            layout["main"].update(Align.center(display.surface, vertical="middle"))
        else:
            layout["main"].update(
                render_list_panel(
                    lines=self.commands.current_lines(),
                    list_name=store.current_list_name,
                    dirty=store.dirty,
                    toggle_key=self.config.keymaps.toggle_ui,
                )
            )

        terminal_width, _ = get_terminal_size()
        layout["footer"].update(
            render_footer_bar(
                path_count=len(store),
                list_name=store.current_list_name,
                dirty=store.dirty,
                message=self.app_state.message,
                message_level=self.app_state.message_level,
                terminal_width=terminal_width,
            )
        )

    def handle_key(self, key: str) -> None:
        """Dispatch one key press and record its feedback message."""
        handled, message = self.keybinding_handler.handle_key(key)
        if not handled or not message:
            return
        if message == "quit":
            self.app_state.should_quit = True
        elif message.startswith("Error:"):
            self.app_state.set_message(message, logging.ERROR)
        else:
            self.app_state.set_message(message, logging.INFO)

    def run(self) -> int:
        """Run the main TUI event loop.

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        try:
            layout = self._build_layout()
            self._render_layout(layout)

            with self._cbreak(), Live(
                layout,
                console=self.console,
                refresh_per_second=10,
                screen=True,
            ) as live:
                self._live = live
                logger.info("TUI main loop started")

                while not self.app_state.should_quit:
                    self.ctx.scheduler.run_pending()

                    key = self._poll_keyboard(timeout=0.1)
                    if key:
                        self.handle_key(key)

                    self._render_layout(layout)
                    live.update(layout)

            self._live = None
            logger.info("TUI main loop exited")
            return 0

        except KeyboardInterrupt:
            logger.info("TUI interrupted by user")
            return 130

        except Exception as err:
            logger.error(f"TUI crashed: {err}", exc_info=True)
            self.console.print(f"[red]Error: {err}[/red]")
            return 1

        finally:
            self._live = None
            self.shutdown()

    def shutdown(self) -> None:
        """Close the surface, run pending teardown, and persist the list."""
        if self.ctx.display.is_open:
            self.ctx.display.close()
        self.ctx.scheduler.run_pending()
        self.commands.shutdown()
        logger.info("TUI shutdown complete")
