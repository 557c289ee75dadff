"""Console collaborators: notifications, prompts, and opening files.

The list store and display controller only talk to the outside world through
the small protocols defined here, so the TUI and the one-shot CLI can plug in
their own implementations.
"""

from __future__ import annotations

import logging
import os
import subprocess
from collections.abc import Sequence
from typing import Protocol

from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm, Prompt

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    def __call__(self, message: str, level: int = logging.INFO) -> None: ...


class ConfirmPrompt(Protocol):
    def __call__(self, message: str) -> bool: ...


class Picker(Protocol):
    def __call__(self, prompt: str, choices: Sequence[str]) -> str | None: ...


class TextInput(Protocol):
    def __call__(self, prompt: str) -> str | None: ...


class PathOpener(Protocol):
    def __call__(self, path: str) -> None: ...


_LEVEL_STYLES = {
    logging.DEBUG: "dim",
    logging.INFO: "green",
    logging.WARNING: "yellow",
    logging.ERROR: "red",
}


class ConsoleNotifier:
    """Prints user messages to the console, coloured by severity."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    def __call__(self, message: str, level: int = logging.INFO) -> None:
        logger.log(level, message)
        style = _LEVEL_STYLES.get(level, "white")
        self.console.print(f"Harpooner: {message}", style=style, markup=False, highlight=False)


def console_confirm(message: str, console: Console | None = None) -> bool:
    """Ask a yes/no question; defaults to no."""
    return Confirm.ask(message, console=console, default=False)


def console_input(prompt: str, console: Console | None = None) -> str | None:
    """Read a line of text. Empty input means cancelled."""
    answer = Prompt.ask(prompt, console=console, default="", show_default=False)
    answer = answer.strip()
    return answer or None


def console_pick(prompt: str, choices: Sequence[str], console: Console | None = None) -> str | None:
    """Show a numbered list and let the user pick one entry.

    Returns:
        The chosen entry, or None if the user entered nothing
    """
    console = console or Console()
    console.print(f"[bold]{escape(prompt)}[/bold]")
    for number, choice in enumerate(choices, start=1):
        console.print(f"  [cyan]{number}[/cyan] {escape(choice)}", highlight=False)

    valid = [str(number) for number in range(1, len(choices) + 1)]
    answer = Prompt.ask(
        "Number (empty to cancel)",
        console=console,
        choices=valid,
        show_choices=False,
        default="",
        show_default=False,
    )
    if not answer:
        return None
    return choices[int(answer) - 1]


def resolve_editor_command(configured: Sequence[str] | None = None) -> list[str]:
    """Return the command used to open files.

    Order: configured command, $VISUAL, $EDITOR, then ``vi``.
    """
    if configured:
        return list(configured)
    for variable in ("VISUAL", "EDITOR"):
        value = os.environ.get(variable, "").strip()
        if value:
            return value.split()
    return ["vi"]


class EditorOpener:
    """Opens a path in the user's editor as a blocking subprocess."""

    def __init__(self, command: Sequence[str] | None = None, notify: Notifier | None = None):
        self.command = resolve_editor_command(command)
        self.notify = notify

    def __call__(self, path: str) -> None:
        if not os.path.exists(path):
            # Editors create missing files, so only warn
            self._report(f"File no longer exists: {path}", logging.WARNING)

        command = [*self.command, path]
        logger.info(f"Opening {path}: {' '.join(command)}")
        try:
            result = subprocess.run(command, check=False)
        except OSError as err:
            self._report(f"Could not start editor {self.command[0]!r}: {err}", logging.ERROR)
            return
        if result.returncode != 0:
            self._report(f"Editor exited with code {result.returncode}", logging.WARNING)

    def _report(self, message: str, level: int) -> None:
        if self.notify is not None:
            self.notify(message, level)
        else:
            logger.log(level, message)
