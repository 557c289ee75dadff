"""harpooner: an ordered bookmark list of files with named save/load.

The list store and its storage are usable on their own; the ``tui``
subpackage adds the interactive bookmark surface.
"""

from __future__ import annotations

from .config import Config, Keymaps, UISettings, load_config
from .exceptions import (
    ConfigError,
    DecodeError,
    HarpoonerError,
    NotFoundError,
    StorageError,
    SurfaceError,
    ValidationError,
)
from .list_store import DEFAULT_SNAPSHOT_NAME, ListStore
from .storage import StorageBackend

__version__ = "0.1.0"

__all__ = [
    "Config",
    "ConfigError",
    "DEFAULT_SNAPSHOT_NAME",
    "DecodeError",
    "HarpoonerError",
    "Keymaps",
    "ListStore",
    "NotFoundError",
    "StorageBackend",
    "StorageError",
    "SurfaceError",
    "UISettings",
    "ValidationError",
    "load_config",
]
