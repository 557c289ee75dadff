"""In-memory bookmark list and its named-list persistence.

The store owns the ordered list of paths, the name of the list it was last
saved or loaded as, and a dirty flag tracking changes that have not reached
the default snapshot yet.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from .exceptions import DecodeError, NotFoundError, StorageError, ValidationError
from .storage import StorageBackend, decode_list, encode_list

logger = logging.getLogger(__name__)

DEFAULT_SNAPSHOT_NAME = "_current_list"


def validate_list_name(name: str | None) -> str:
    """Return ``name`` if it can be used for a saved list.

    Raises:
        ValidationError: If the name is empty, reserved, or would escape the
            data directory
    """
    if not name:
        raise ValidationError("No list name provided")
    if name == DEFAULT_SNAPSHOT_NAME:
        raise ValidationError(f"'{DEFAULT_SNAPSHOT_NAME}' is reserved for the internal state file")
    if "/" in name or "\\" in name or name.startswith("."):
        raise ValidationError(f"Invalid list name: {name!r}")
    return name


class ListStore:
    """Ordered bookmark list with save/load under names."""

    def __init__(self, storage: StorageBackend):
        """Initialize list store.

        Args:
            storage: Backend used for named lists and the default snapshot
        """
        self.storage = storage
        self._paths: list[str] = []
        self._current_list_name: str | None = None
        self._dirty = False

    def __len__(self) -> int:
        return len(self._paths)

    @property
    def current_list_name(self) -> str | None:
        return self._current_list_name

    @property
    def dirty(self) -> bool:
        return self._dirty

    def initialize(self) -> None:
        """Restore the list from the default snapshot.

        A missing or corrupt snapshot starts an empty list; first run is
        expected and never an error.
        """
        data = self.storage.read(DEFAULT_SNAPSHOT_NAME)
        if data is None:
            logger.info("No saved list state found, starting empty")
            self._paths = []
        else:
            try:
                self._paths = decode_list(data)
                logger.info(f"Restored {len(self._paths)} path(s) from last session")
            except DecodeError as err:
                logger.warning(f"Error loading last list, starting fresh: {err}")
                self._paths = []
        self._dirty = False

    # Path operations

    def add(self, path: str) -> bool:
        """Append ``path`` unless it is already in the list.

        Returns:
            True if added, False for a duplicate

        Raises:
            ValidationError: If path is empty
        """
        if not path:
            raise ValidationError("No file path to add")
        if path in self._paths:
            logger.info(f"Path already in list: {path}")
            return False
        self._paths.append(path)
        self._dirty = True
        logger.info(f"Added path {path}")
        return True

    def get_by_index(self, index: int) -> str | None:
        """Return the path at 1-based ``index``, or None if out of range."""
        if not self._in_range(index):
            return None
        return self._paths[index - 1]

    def get_all(self) -> list[str]:
        return list(self._paths)

    def delete_by_index(self, index: int) -> bool:
        """Remove the path at 1-based ``index``."""
        if not self._in_range(index):
            logger.warning(f"Invalid index to delete: {index}")
            return False
        removed = self._paths.pop(index - 1)
        self._dirty = True
        logger.info(f"Removed path {removed}")
        return True

    def reorder(self, from_index: int, to_index: int) -> bool:
        """Move the path at ``from_index`` to ``to_index`` (both 1-based)."""
        if not self._in_range(from_index) or not self._in_range(to_index) or from_index == to_index:
            logger.warning(f"Invalid reorder indices: {from_index} -> {to_index}")
            return False
        item = self._paths.pop(from_index - 1)
        self._paths.insert(to_index - 1, item)
        self._dirty = True
        logger.debug(f"Moved {item} from {from_index} to {to_index}")
        return True

    def _in_range(self, index: int) -> bool:
        return 1 <= index <= len(self._paths)

    # Persistence

    def save_as(self, name: str) -> None:
        """Save the current list under ``name``.

        Raises:
            ValidationError: If the name is empty or reserved
            StorageError: If the file cannot be written
        """
        validate_list_name(name)
        self.storage.write(name, encode_list(self._paths))
        self._current_list_name = name
        logger.info(f"List saved as '{name}' ({len(self._paths)} path(s))")
        self._write_snapshot_after(f"Saved '{name}'")

    def save_default_snapshot(self, force: bool = False) -> bool:
        """Write the current list to the default snapshot.

        Args:
            force: Write even when there are no unsaved changes

        Returns:
            True if the snapshot was written, False if there was nothing to save

        Raises:
            StorageError: If the snapshot cannot be written (dirty stays set)
        """
        if not self._dirty and not force:
            return False
        self.storage.write(DEFAULT_SNAPSHOT_NAME, encode_list(self._paths))
        self._dirty = False
        logger.debug("Current list state saved")
        return True

    def load(self, name: str) -> None:
        """Replace the current list with the saved list ``name``.

        The previous list is discarded without an implicit save.

        Raises:
            ValidationError: If the name is empty, reserved or unsafe
            NotFoundError: If the list does not exist or cannot be decoded
        """
        validate_list_name(name)
        data = self.storage.read(name)
        if data is None:
            raise NotFoundError(f"List '{name}' not found")
        try:
            paths = decode_list(data)
        except DecodeError as err:
            logger.warning(f"Error decoding list '{name}': {err}")
            raise NotFoundError(f"List '{name}' could not be read: {err}") from err

        self._paths = paths
        self._current_list_name = name
        logger.info(f"Loaded list '{name}' ({len(paths)} path(s))")
        self._write_snapshot_after(f"Loaded '{name}'")

    def _write_snapshot_after(self, action: str) -> None:
        """Force the default snapshot so the list survives a restart.

        A failed write leaves the list dirty so the next save retries it.
        """
        self._dirty = True
        try:
            self.save_default_snapshot(force=True)
        except StorageError as err:
            logger.error(f"{action} but could not update current list state: {err}")

    def delete_saved(self, name: str, confirm: Callable[[str], bool]) -> bool:
        """Delete the saved list ``name`` after confirmation.

        Args:
            name: Saved list to delete
            confirm: Asked a yes/no question, returns the answer

        Returns:
            True if deleted, False if the user cancelled

        Raises:
            ValidationError: If the name is empty or reserved
            NotFoundError: If no such saved list exists
            StorageError: If the file cannot be removed
        """
        validate_list_name(name)
        if not self.storage.exists(name):
            raise NotFoundError(f"List '{name}' not found")

        if not confirm(f"Are you sure you want to delete the Harpooner list '{name}'?"):
            logger.info(f"Deletion of list '{name}' cancelled")
            return False

        if not self.storage.delete(name):
            raise NotFoundError(f"List '{name}' not found")

        if self._current_list_name == name:
            # In-memory list is kept until another list is loaded
            self._current_list_name = None
        return True

    def list_saved_names(self) -> list[str]:
        """Return saved list names in lexicographic order."""
        return sorted(name for name in self.storage.list_names() if name != DEFAULT_SNAPSHOT_NAME)
