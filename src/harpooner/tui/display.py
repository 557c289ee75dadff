"""Open/close lifecycle of the bookmark surface and its list commands.

The controller owns at most one ListSurface. Closing is two-phase: logical
state is cleared immediately, while the surface itself is released on the
next main-loop turn so a close triggered from the surface's own key handler
never tears it down mid-dispatch.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum

from ..config import UISettings
from ..exceptions import HarpoonerError, SurfaceError
from ..list_store import ListStore
from ..prompts import Notifier, PathOpener
from .surface import ListSurface
from .tui_utils import display_path, get_terminal_size, surface_size

logger = logging.getLogger(__name__)

SurfaceFactory = Callable[[int, int, UISettings], ListSurface]
CommandResult = tuple[bool, "str | None"]


class SurfaceState(Enum):
    """Display surface lifecycle state."""

    CLOSED = "closed"
    OPEN = "open"
    CLOSING = "closing"


def create_list_surface(width: int, height: int, settings: UISettings) -> ListSurface:
    return ListSurface(
        width=width,
        height=height,
        title=settings.title,
        border=settings.border,
        show_numbers=settings.show_numbers,
    )


class DisplayController:
    """Drives the single bookmark surface and dispatches commands to the store."""

    def __init__(
        self,
        store: ListStore,
        settings: UISettings,
        schedule: Callable[[Callable[[], None]], None],
        open_path: PathOpener,
        notify: Notifier,
        surface_factory: SurfaceFactory = create_list_surface,
        terminal_size: Callable[[], tuple[int, int]] = get_terminal_size,
    ):
        """Initialize display controller.

        Args:
            store: List store the surface displays and edits
            settings: UI settings (geometry, save_on_toggle, ...)
            schedule: Runs a callback on the next main-loop turn
            open_path: Opens a path for editing
            notify: Receives user-facing messages
            surface_factory: Allocates a surface for a (width, height)
            terminal_size: Returns the current (columns, rows)
        """
        self.store = store
        self.settings = settings
        self.schedule = schedule
        self.open_path = open_path
        self.notify = notify
        self.surface_factory = surface_factory
        self.terminal_size = terminal_size
        self.surface: ListSurface | None = None
        self.closing = False

    @property
    def is_open(self) -> bool:
        return self.surface is not None

    @property
    def state(self) -> SurfaceState:
        if self.closing:
            return SurfaceState.CLOSING
        if self.surface is not None:
            return SurfaceState.OPEN
        return SurfaceState.CLOSED

    @property
    def cursor(self) -> int | None:
        """1-based cursor line, or None when closed."""
        return self.surface.cursor if self.surface is not None else None

    # Lifecycle

    def open(self) -> bool:
        """Allocate and render the surface.

        Returns:
            True if a surface was opened, False if one is already open or a
            previous close is still tearing down

        Raises:
            SurfaceError: If the surface cannot be allocated
        """
        if self.surface is not None:
            return False
        if self.closing:
            logger.debug("Open requested while previous surface is closing, ignored")
            return False

        columns, rows = self.terminal_size()
        width, height = surface_size(
            columns,
            rows,
            self.settings.width_ratio,
            self.settings.max_width,
            self.settings.fallback_width,
            self.settings.height_in_lines,
        )
        logger.debug(f"Opening surface {width}x{height} (terminal {columns}x{rows})")

        try:
            surface = self.surface_factory(width, height, self.settings)
        except SurfaceError:
            raise
        except Exception as err:
            raise SurfaceError(f"Failed to create Harpooner window: {err}") from err

        try:
            surface.set_lines(self._display_lines())
        except Exception as err:
            surface.release()
            logger.error(f"Failed to set up bookmark surface: {err}")
            raise SurfaceError(f"Failed to create Harpooner window: {err}") from err

        self.surface = surface
        return True

    def close(self) -> bool:
        """Close the surface, deferring its release to the next loop turn.

        Returns:
            True if a close was started, False if already closed or closing
        """
        if self.closing or self.surface is None:
            return False
        self.closing = True

        if self.settings.save_on_toggle:
            try:
                self.store.save_default_snapshot()
            except HarpoonerError as err:
                self.notify(f"Error saving current list state: {err}", logging.ERROR)

        surface = self.surface
        self.surface = None

        def release() -> None:
            try:
                surface.release()
            finally:
                self.closing = False

        self.schedule(release)
        return True

    def toggle(self) -> bool:
        """Close the surface if open, otherwise open it.

        Returns:
            True if the surface is open afterwards
        """
        if self.surface is not None:
            self.close()
            return False
        self.open()
        return self.surface is not None

    def refresh(self) -> None:
        """Re-render the list into the open surface."""
        if self.surface is None:
            return
        self.surface.set_lines(self._display_lines())

    def _display_lines(self) -> list[str]:
        return [display_path(path) for path in self.store.get_all()]

    # Cursor motion

    def cursor_up(self) -> CommandResult:
        if self.surface is None:
            return False, None
        self.surface.set_cursor(self.surface.cursor - 1)
        return True, None

    def cursor_down(self) -> CommandResult:
        if self.surface is None:
            return False, None
        self.surface.set_cursor(self.surface.cursor + 1)
        return True, None

    # Position-based commands

    def _resolve_index(self, index: int | None) -> int | None:
        if self.surface is None:
            return None
        return self.surface.cursor if index is None else index

    def activate(self, index: int | None = None) -> CommandResult:
        """Close the surface and open the path at ``index``."""
        line = self._resolve_index(index)
        if line is None:
            return False, "Error: Bookmark list is not open"

        path = self.store.get_by_index(line)
        if path is None:
            return False, "Error: Invalid line selected"

        self.close()
        self.schedule(lambda: self.open_path(path))
        return True, f"Opening {display_path(path)}"

    def delete(self, index: int | None = None) -> CommandResult:
        """Delete the entry at ``index`` and keep the cursor in range."""
        line = self._resolve_index(index)
        if line is None:
            return False, "Error: Bookmark list is not open"

        path = self.store.get_by_index(line)
        if path is None or not self.store.delete_by_index(line):
            return False, f"Error: Invalid index to delete: {line}"

        self.refresh()
        new_length = len(self.store)
        if new_length > 0:
            self.surface.set_cursor(min(line, new_length))
        return True, f"Removed: {display_path(path)}"

    def move_down(self, index: int | None = None) -> CommandResult:
        """Swap the entry at ``index`` with the one below it."""
        line = self._resolve_index(index)
        if line is None:
            return False, "Error: Bookmark list is not open"
        if not 1 <= line <= len(self.store):
            return False, "Error: Invalid line selected"
        if line == len(self.store):
            return False, None

        if not self.store.reorder(line, line + 1):
            return False, "Error: Invalid reorder indices"
        self.refresh()
        self.surface.set_cursor(line + 1)
        return True, "Item moved"

    def move_up(self, index: int | None = None) -> CommandResult:
        """Swap the entry at ``index`` with the one above it."""
        line = self._resolve_index(index)
        if line is None:
            return False, "Error: Bookmark list is not open"
        if not 1 <= line <= len(self.store):
            return False, "Error: Invalid line selected"
        if line == 1:
            return False, None

        if not self.store.reorder(line, line - 1):
            return False, "Error: Invalid reorder indices"
        self.refresh()
        self.surface.set_cursor(line - 1)
        return True, "Item moved"
