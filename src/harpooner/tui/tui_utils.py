"""TUI utility functions for formatting and display helpers."""

import math
import os
import shutil


def truncate_text(text: str, max_len: int) -> str:
    """
    Truncate text to max length, adding ellipsis if needed.

    Args:
        text: Text to truncate
        max_len: Maximum length including ellipsis

    Returns:
        Truncated text with "..." suffix if text exceeds max_len

    Examples:
        >>> truncate_text("short", 10)
        'short'
        >>> truncate_text("this is a long text", 10)
        'this is...'
    """
    if len(text) <= max_len:
        return text

    if max_len <= 3:
        return "..."[:max_len]

    return text[: max_len - 3] + "..."


def truncate_left(text: str, max_len: int) -> str:
    """
    Truncate text from the left so the end of a path stays visible.

    Examples:
        >>> truncate_left("/very/long/path/file.py", 12)
        '...h/file.py'
    """
    if len(text) <= max_len:
        return text

    if max_len <= 3:
        return "..."[:max_len]

    return "..." + text[len(text) - (max_len - 3) :]


def get_terminal_size() -> tuple[int, int]:
    """
    Get terminal size as (columns, rows) tuple.

    Returns:
        Tuple of (columns, rows), defaults to (80, 24) if unavailable

    Examples:
        >>> cols, rows = get_terminal_size()
        >>> isinstance(cols, int) and isinstance(rows, int)
        True
    """
    try:
        size = shutil.get_terminal_size(fallback=(80, 24))
        return (size.columns, size.lines)
    except Exception:
        return (80, 24)


def display_path(path: str, cwd: str | None = None, home: str | None = None) -> str:
    """
    Shorten a path for display: relative to cwd when inside it, else ``~``-based.

    Examples:
        >>> display_path("/home/me/src/app.py", cwd="/home/me/src", home="/home/me")
        'app.py'
        >>> display_path("/home/me/notes.md", cwd="/tmp", home="/home/me")
        '~/notes.md'
        >>> display_path("/etc/hosts", cwd="/tmp", home="/home/me")
        '/etc/hosts'
    """
    cwd = cwd if cwd is not None else os.getcwd()
    home = home if home is not None else os.path.expanduser("~")

    if cwd and cwd != os.sep and path.startswith(cwd.rstrip(os.sep) + os.sep):
        return path[len(cwd.rstrip(os.sep)) + 1 :]
    if home and home != os.sep and path.startswith(home.rstrip(os.sep) + os.sep):
        return "~" + path[len(home.rstrip(os.sep)) :]
    return path


def surface_size(
    terminal_width: int,
    terminal_height: int,
    width_ratio: float,
    max_width: int,
    fallback_width: int,
    height_in_lines: int,
    margin: int = 4,
) -> tuple[int, int]:
    """
    Compute (width, height) of the bookmark surface for a terminal size.

    Width is the ratio of the terminal capped at ``max_width`` and never
    below ``fallback_width``. Height is the configured line count, at most
    the terminal height minus ``margin``.

    Examples:
        >>> surface_size(200, 50, 0.5, 100, 60, 12)
        (100, 12)
        >>> surface_size(80, 50, 0.5, 100, 60, 12)
        (60, 12)
        >>> surface_size(160, 10, 0.5, 100, 60, 12)
        (80, 6)
    """
    width = math.floor(terminal_width * width_ratio)
    width = min(width, max_width)
    width = max(width, fallback_width)

    height = min(height_in_lines, terminal_height - margin)
    return (width, height)
