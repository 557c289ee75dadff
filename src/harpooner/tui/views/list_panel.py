"""Overview panel shown while the bookmark surface is closed."""

from __future__ import annotations

from rich.markup import escape
from rich.panel import Panel
from rich.table import Table


def render_list_panel(
    lines: list[str],
    list_name: str | None,
    dirty: bool,
    toggle_key: str = "e",
) -> Panel:
    """Build Rich Panel summarising the current list.

    Args:
        lines: Display form of the current paths, in list order
        list_name: Name of the loaded/saved list, if any
        dirty: Whether the list has unsaved changes
        toggle_key: Key that opens the bookmark list, for the hint

    Returns:
        Rich Panel component with one row per path
    """
    table = Table(show_header=False, box=None, padding=(0, 1), expand=True)
    table.add_column("#", style="cyan", no_wrap=True, justify="right")
    table.add_column("Path", style="white", overflow="ellipsis", no_wrap=True)

    if lines:
        for index, line in enumerate(lines, start=1):
            table.add_row(str(index), escape(line))
    else:
        table.add_row("", "[dim italic]No bookmarks yet[/dim italic]")

    name = list_name or "unnamed"
    status = " [yellow](modified)[/yellow]" if dirty else ""
    hint = f"[dim]({toggle_key}: edit list · ?: help)[/dim]" if toggle_key else "[dim](?: help)[/dim]"
    title = f"[bold white]Current list: {escape(name)}[/bold white]{status} {hint}"

    return Panel(
        table,
        title=title,
        border_style="blue",
        padding=(1, 2),
    )
