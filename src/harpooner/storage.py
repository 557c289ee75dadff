"""Named list files on disk.

Each list is a ``<name>.json`` file in the data directory containing a JSON
array of path strings. Writes go through a temp file and an atomic rename so
a failed write never leaves a truncated list behind.
"""

from __future__ import annotations

import json
import logging
import tempfile
from pathlib import Path

from .exceptions import DecodeError, StorageError

logger = logging.getLogger(__name__)

LIST_SUFFIX = ".json"


def encode_list(paths: list[str]) -> bytes:
    """Serialize an ordered list of paths to UTF-8 JSON."""
    return json.dumps(list(paths), indent=2).encode("utf-8")


def decode_list(data: bytes) -> list[str]:
    """Deserialize list file content.

    Args:
        data: Raw file content

    Returns:
        The ordered list of paths

    Raises:
        DecodeError: If content is empty, not JSON, or not an array of strings
    """
    if not data or not data.strip():
        raise DecodeError("Empty data")
    try:
        payload = json.loads(data.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as err:
        raise DecodeError(f"Failed to decode JSON: {err}") from err

    if not isinstance(payload, list):
        raise DecodeError(f"Expected a JSON array, got {type(payload).__name__}")
    for item in payload:
        if not isinstance(item, str):
            raise DecodeError(f"Expected string entries, got {type(item).__name__}")
    return payload


class StorageBackend:
    """Reads and writes named list files in a single data directory."""

    def __init__(self, data_dir: Path):
        """Initialize storage backend.

        Args:
            data_dir: Directory holding the list files (created on first write)
        """
        self.data_dir = data_dir

    def path_for(self, name: str) -> Path:
        """Return the file path backing the list called ``name``."""
        return self.data_dir / f"{name}{LIST_SUFFIX}"

    def exists(self, name: str) -> bool:
        return self.path_for(name).is_file()

    def read(self, name: str) -> bytes | None:
        """Return the raw content of a list file, or None if it is missing."""
        path = self.path_for(name)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as err:
            logger.warning(f"Failed to read list file {path}: {err}")
            return None

    def write(self, name: str, data: bytes) -> None:
        """Atomically write a list file.

        Args:
            name: List name
            data: Serialized list content

        Raises:
            StorageError: If the directory or file cannot be written
        """
        path = self.path_for(name)
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            temp_fd, temp_path_str = tempfile.mkstemp(
                dir=self.data_dir,
                prefix=f".{path.name}.",
                suffix=".tmp",
            )
        except OSError as err:
            logger.error(f"Failed to prepare write of {path}: {err}")
            raise StorageError(f"Could not open {path} for writing: {err}") from err

        temp_path = Path(temp_path_str)
        try:
            with open(temp_fd, "wb") as f:
                f.write(data)
            temp_path.replace(path)
        except OSError as err:
            temp_path.unlink(missing_ok=True)
            logger.error(f"Failed to write list file {path}: {err}")
            raise StorageError(f"Failed to write {path}: {err}") from err

        logger.debug(f"Wrote list file {path} ({len(data)} bytes)")

    def delete(self, name: str) -> bool:
        """Delete a list file.

        Returns:
            True if the file was removed, False if it did not exist

        Raises:
            StorageError: If the file exists but cannot be removed
        """
        path = self.path_for(name)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as err:
            logger.error(f"Failed to delete list file {path}: {err}")
            raise StorageError(f"Failed to delete {path}: {err}") from err
        logger.info(f"Deleted list file {path}")
        return True

    def list_names(self) -> set[str]:
        """Return the names of all list files in the data directory."""
        if not self.data_dir.is_dir():
            return set()
        return {
            path.stem
            for path in self.data_dir.glob(f"*{LIST_SUFFIX}")
            if path.is_file() and not path.name.startswith(".")
        }
