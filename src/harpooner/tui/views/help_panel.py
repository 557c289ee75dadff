"""Help panel renderer for keybinding reference.

This module provides the render_help_panel function that displays a table
of the configured keybindings organized by category.
"""

from __future__ import annotations

from rich.panel import Panel
from rich.table import Table

from ...config import Keymaps


def _key_label(key: str) -> str:
    return key if key else "[dim]disabled[/dim]"


def render_help_panel(keymaps: Keymaps) -> Panel:
    """Build Rich Panel displaying keybinding reference table.

    Args:
        keymaps: Configured global bindings

    Returns:
        Rich Panel component with categorized keybindings
    """
    table = Table(
        show_header=True,
        header_style="bold magenta",
        border_style="blue",
        padding=(0, 1),
    )
    table.add_column("Key", style="cyan", no_wrap=True)
    table.add_column("Action", style="yellow")
    table.add_column("Description", style="white")

    # Global keybindings
    table.add_row("", "", "")
    table.add_row("", "[bold cyan]Bookmarks[/bold cyan]", "", style="bold")
    table.add_row(_key_label(keymaps.toggle_ui), "Toggle list", "Show/hide the bookmark list")
    table.add_row(_key_label(keymaps.add_file), "Add", "Add a file path to the list")
    table.add_row(_key_label(keymaps.save_list), "Save as", "Save the current list under a name")
    table.add_row(_key_label(keymaps.load_list), "Load", "Pick a saved list to load")
    for trigger, index in keymaps.nav:
        if trigger:
            table.add_row(trigger, f"Open #{index}", f"Open bookmark {index} in the editor")

    # Bookmark list keybindings
    table.add_row("", "", "")
    table.add_row("", "[bold green]Bookmark List[/bold green]", "", style="bold")
    table.add_row("k/j", "Navigate", "Move the cursor up/down")
    table.add_row("Enter", "Open", "Close the list and open the selected file")
    table.add_row("d", "Delete", "Remove the selected entry")
    table.add_row("K/J", "Move", "Move the selected entry up/down")
    table.add_row("q/ESC", "Close", "Close the bookmark list")

    # Meta keybindings
    table.add_row("", "", "")
    table.add_row("", "[bold magenta]Meta[/bold magenta]", "", style="bold")
    table.add_row("?", "Help", "Toggle this help panel")
    table.add_row("ESC", "Close", "Close help panel")
    table.add_row("q", "Quit", "Exit (saves the current list)")

    return Panel(
        table,
        title="[bold white]Keybindings[/bold white]",
        border_style="blue",
        padding=(1, 2),
    )
