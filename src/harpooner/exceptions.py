"""Custom exceptions for harpooner operations.

This module defines a hierarchy of exceptions for the different failure
scenarios of the list store, its storage and the display surface, so callers
can report each one with a specific message.
"""


class HarpoonerError(Exception):
    """Base exception for all harpooner errors."""


class ValidationError(HarpoonerError):
    """Raised for empty/reserved list names or empty paths."""


class NotFoundError(HarpoonerError):
    """Raised when a saved list does not exist or cannot be decoded."""


class StorageError(HarpoonerError):
    """Raised when writing or deleting a list file fails."""


class DecodeError(HarpoonerError):
    """Raised when list file content is not a JSON array of strings."""


class SurfaceError(HarpoonerError):
    """Raised when the display surface cannot be allocated."""


class ConfigError(HarpoonerError):
    """Raised when configuration is invalid or cannot be loaded."""
