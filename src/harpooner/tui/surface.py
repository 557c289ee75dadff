"""Rich-backed display surface for the bookmark list.

A ListSurface is a fixed-size, read-only panel with a cursor row. It is
created by the display controller on open and released on close.
"""

from __future__ import annotations

import logging

from rich import box
from rich.console import Console, ConsoleOptions, RenderResult
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text

from ..exceptions import SurfaceError
from .tui_utils import truncate_left

logger = logging.getLogger(__name__)

BOX_STYLES = {
    "rounded": box.ROUNDED,
    "square": box.SQUARE,
    "double": box.DOUBLE,
    "heavy": box.HEAVY,
    "ascii": box.ASCII,
}

EMPTY_PLACEHOLDER = "(empty list)"


class ListSurface:
    """A fixed-size panel showing one line per list entry."""

    def __init__(
        self,
        width: int,
        height: int,
        title: str = "",
        border: str = "rounded",
        show_numbers: bool = True,
    ):
        """Allocate a surface.

        Args:
            width: Total panel width including the border
            height: Number of content rows
            title: Panel title
            border: Border style name
            show_numbers: Prefix lines with their 1-based index

        Raises:
            SurfaceError: If the geometry does not fit or the border is unknown
        """
        if width < 8:
            raise SurfaceError(f"Surface too narrow: {width} columns")
        if height < 1:
            raise SurfaceError(f"Terminal too small for bookmark list ({height} rows available)")
        if border not in BOX_STYLES:
            raise SurfaceError(f"Unknown border style: {border}")

        self.width = width
        self.height = height
        self.title = title
        self.box = BOX_STYLES[border]
        self.show_numbers = show_numbers
        self.lines: list[str] = []
        self.is_placeholder = False
        self.cursor = 1
        self.scroll_offset = 0
        self.released = False
        logger.debug(f"Surface allocated ({width}x{height})")

    def set_lines(self, lines: list[str]) -> None:
        """Replace the displayed lines; an empty list shows the placeholder."""
        if self.released:
            raise SurfaceError("Surface already released")
        if lines:
            self.lines = list(lines)
            self.is_placeholder = False
        else:
            self.lines = [EMPTY_PLACEHOLDER]
            self.is_placeholder = True
        self.set_cursor(self.cursor)

    def set_cursor(self, line: int) -> None:
        """Move the cursor, clamped to the displayed lines, scrolling if needed."""
        line = max(1, min(line, len(self.lines) or 1))
        self.cursor = line
        if line - 1 < self.scroll_offset:
            self.scroll_offset = line - 1
        elif line > self.scroll_offset + self.height:
            self.scroll_offset = line - self.height

    def release(self) -> None:
        """Free the surface. Safe to call more than once."""
        if self.released:
            return
        self.released = True
        self.lines = []
        logger.debug("Surface released")

    def render(self) -> Panel:
        """Build the Rich Panel for the visible window of lines."""
        inner_width = self.width - 4
        number_width = len(str(len(self.lines))) if self.show_numbers else 0

        body = Text(no_wrap=True, overflow="ellipsis")
        visible = self.lines[self.scroll_offset : self.scroll_offset + self.height]
        for row, line in enumerate(visible, start=self.scroll_offset + 1):
            if row > self.scroll_offset + 1:
                body.append("\n")
            selected = row == self.cursor and not self.is_placeholder
            line_style = "reverse" if selected else ""

            if self.is_placeholder:
                body.append(line, style="dim italic")
                continue
            text_width = inner_width
            if self.show_numbers:
                body.append(f"{row:>{number_width}} ", style="cyan" if not selected else "reverse cyan")
                text_width -= number_width + 1
            body.append(truncate_left(line, max(text_width, 1)), style=line_style)

        hints = "[dim]Enter: open · d: delete · J/K: move · q: close[/dim]"
        return Panel(
            body,
            title=f"[bold white]{escape(self.title)}[/bold white]" if self.title else None,
            subtitle=hints,
            box=self.box,
            border_style="blue",
            width=self.width,
            height=self.height + 2,
            padding=(0, 1),
        )

    def __rich_console__(self, console: Console, options: ConsoleOptions) -> RenderResult:
        yield self.render()
