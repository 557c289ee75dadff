"""Footer bar renderer for status indicators.

This module provides the render_footer_bar function that displays a status
bar with the list summary, the latest message, and a help hint.
"""

from __future__ import annotations

import logging

from rich.text import Text

from ..tui_utils import truncate_text

_MESSAGE_STYLES = {
    logging.INFO: "green",
    logging.WARNING: "yellow",
    logging.ERROR: "red",
}


def _list_summary(path_count: int, list_name: str | None, dirty: bool) -> str:
    noun = "path" if path_count == 1 else "paths"
    summary = f"{path_count} {noun}"
    if list_name:
        summary = f"{list_name}: {summary}"
    if dirty:
        summary += " (modified)"
    return summary


def render_footer_bar(
    path_count: int,
    list_name: str | None = None,
    dirty: bool = False,
    message: str | None = None,
    message_level: int = logging.INFO,
    terminal_width: int = 80,
) -> Text:
    """Build Rich Text displaying footer status bar.

    Args:
        path_count: Number of paths in the current list
        list_name: Name of the loaded/saved list, if any
        dirty: Whether the list has unsaved changes
        message: Latest user message to display, if any
        message_level: Logging level of the message (selects its colour)
        terminal_width: Terminal width for truncation calculations

    Returns:
        Rich Text component ready for rendering
    """
    parts = [(_list_summary(path_count, list_name, dirty), "yellow" if dirty else "green")]

    if message:
        # Format: "[summary] | [message] | Press ? for help"
        help_hint = " | Press ? for help"
        summary_part = parts[0][0] + " | "
        available_width = terminal_width - len(summary_part) - len(help_hint)

        if available_width > 10:  # Minimum space for a meaningful message
            style = _MESSAGE_STYLES.get(message_level, "white")
            parts.append((" | ", "dim"))
            parts.append((truncate_text(message, available_width), style))

    parts.append((" | ", "dim"))
    parts.append(("Press ? for help", "cyan"))

    footer = Text()
    for text, style in parts:
        footer.append(text, style=style)

    return footer
