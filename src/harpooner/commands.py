"""User-facing entry points.

Each command runs one store or display operation, turns its outcome into a
notification, and never lets a HarpoonerError escape (except surface
allocation failure, which is fatal to the toggle call).
"""

from __future__ import annotations

import logging
import os

from .context import HarpoonerContext
from .exceptions import HarpoonerError, ValidationError
from .tui.selector import select_and_load
from .tui.tui_utils import display_path

logger = logging.getLogger(__name__)


def normalize_path(path: str) -> str:
    """Absolute form of ``path`` so the same file always matches itself."""
    return os.path.abspath(os.path.expanduser(path))


class Commands:
    """Command entry points bound to a program context."""

    def __init__(self, ctx: HarpoonerContext):
        self.ctx = ctx

    @property
    def store(self):
        return self.ctx.store

    @property
    def display(self):
        return self.ctx.display

    def _error(self, message: str) -> bool:
        self.ctx.notify(message, logging.ERROR)
        return False

    def add_current(self, path: str | None) -> bool:
        """Add ``path`` to the current list."""
        if not path:
            return self._error("No file path to add.")
        path = normalize_path(path)
        try:
            added = self.store.add(path)
        except ValidationError as err:
            return self._error(str(err))

        name = os.path.basename(path)
        if not added:
            self.ctx.notify(f"Path already in list: {name}", logging.INFO)
            return False
        self.ctx.notify(f"Added: {name}", logging.INFO)
        self.display.refresh()
        return True

    def prompt_add(self) -> bool:
        path = self.ctx.text_input("Add file path")
        if not path:
            self.ctx.notify("Add cancelled.", logging.INFO)
            return False
        return self.add_current(path)

    def toggle_display(self) -> bool:
        """Open or close the bookmark surface.

        Raises:
            SurfaceError: If the surface cannot be allocated
        """
        return self.display.toggle()

    def save_as(self, name: str | None) -> bool:
        if not name:
            return self._error("Usage: save <list_name>")
        try:
            self.store.save_as(name)
        except HarpoonerError as err:
            return self._error(f"Error saving list '{name}': {err}")
        self.ctx.notify(f"List saved as '{name}'", logging.INFO)
        return True

    def prompt_save(self) -> bool:
        name = self.ctx.text_input("Save Harpooner list as")
        if not name:
            self.ctx.notify("List save cancelled.", logging.INFO)
            return False
        return self.save_as(name)

    def load(self, name: str | None = None) -> bool:
        """Load ``name``, or let the user pick a saved list when omitted."""
        if name is None:
            loaded = select_and_load(self.store, self.ctx.pick, self.ctx.notify) is not None
        else:
            try:
                self.store.load(name)
            except HarpoonerError as err:
                return self._error(f"Could not load list '{name}': {err}")
            self.ctx.notify(f"Loaded list '{name}'", logging.INFO)
            loaded = True

        if loaded:
            self.display.refresh()
        return loaded

    def delete_saved(self, name: str | None) -> bool:
        if not name:
            return self._error("Usage: delete <list_name>")
        try:
            deleted = self.store.delete_saved(name, self.ctx.confirm)
        except HarpoonerError as err:
            return self._error(f"Error deleting list '{name}': {err}")
        if not deleted:
            self.ctx.notify("List deletion cancelled.", logging.INFO)
            return False
        self.ctx.notify(f"Deleted list '{name}'.", logging.INFO)
        return True

    def navigate(self, index: int) -> bool:
        """Open the path at ``index``, closing the surface first if open."""
        path = self.store.get_by_index(index)
        if path is None:
            self.ctx.notify(f"No file at index {index}", logging.WARNING)
            return False
        if self.display.is_open:
            self.display.close()
        self.ctx.scheduler.schedule(lambda: self.ctx.open_path(path))
        return True

    def list_saved(self) -> list[str]:
        return self.store.list_saved_names()

    def current_lines(self) -> list[str]:
        return [display_path(path) for path in self.store.get_all()]

    def shutdown(self) -> None:
        """Persist unsaved changes when save_on_exit is enabled."""
        if not self.ctx.config.save_on_exit:
            return
        try:
            self.store.save_default_snapshot()
        except HarpoonerError as err:
            self._error(f"Error saving current list state: {err}")
