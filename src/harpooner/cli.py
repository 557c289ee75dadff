"""CLI entry point for harpooner.

This module handles command-line argument parsing, logging setup, signal
handling, and dispatch to either a one-shot command or the interactive TUI.
"""

from __future__ import annotations

import argparse
import json
import logging
import logging.handlers
import signal
import sys
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from .commands import Commands, normalize_path
from .config import DEFAULT_CONFIG_PATH, Config, load_config
from .context import build_context
from .exceptions import HarpoonerError
from .prompts import ConsoleNotifier, console_confirm, console_input, console_pick

logger = logging.getLogger(__name__)


class JSONFormatter(logging.Formatter):
    """Custom JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON.

        Args:
            record: Log record to format

        Returns:
            JSON-formatted log line
        """
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "event": record.getMessage(),
            "context": {
                "module": record.module,
                "function": record.funcName,
                "line": record.lineno,
            },
        }

        # Add exception info if present
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # Add extra context from record if present
        if hasattr(record, "extra_context"):
            log_data["context"].update(record.extra_context)

        return json.dumps(log_data)


def _setup_logging(log_file: Path, debug: bool) -> None:
    """Setup structured JSON logging to file.

    Args:
        log_file: Path to log file
        debug: Enable debug level logging
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if debug else logging.INFO)

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        # Rotating file handler (10MB max, 3 backups)
        file_handler: logging.Handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,
            backupCount=3,
            encoding="utf-8",
        )
    except OSError:
        # Logging must never stop the tool from running
        file_handler = logging.NullHandler()
    file_handler.setFormatter(JSONFormatter())
    file_handler.setLevel(logging.DEBUG if debug else logging.INFO)

    root_logger.addHandler(file_handler)

    logger.info(
        "Logging initialized",
        extra={"extra_context": {"log_file": str(log_file), "debug": debug}},
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="harpooner",
        description="Keep a short, ordered list of bookmarked files and jump between them",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=DEFAULT_CONFIG_PATH,
        help=f"Path to config.json (default: {DEFAULT_CONFIG_PATH})",
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=None,
        help="Directory holding saved lists (overrides config)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    add = subparsers.add_parser("add", help="Add a file to the current list")
    add.add_argument("path", help="File path to bookmark")

    subparsers.add_parser("show", help="Print the current list")

    open_ = subparsers.add_parser("open", help="Open the Nth bookmark in the editor")
    open_.add_argument("index", type=int, help="1-based position in the list")

    save = subparsers.add_parser("save", help="Save the current list under a name")
    save.add_argument("name", help="List name")

    load = subparsers.add_parser("load", help="Load a saved list (picker if no name)")
    load.add_argument("name", nargs="?", default=None, help="List name")

    delete = subparsers.add_parser("delete", help="Delete a saved list")
    delete.add_argument("name", help="List name")
    delete.add_argument("--yes", "-y", action="store_true", help="Do not ask for confirmation")

    subparsers.add_parser("lists", help="Show saved list names")

    return parser


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    Returns:
        Parsed arguments
    """
    return _build_parser().parse_args(argv)


def _load_config(args: argparse.Namespace) -> Config:
    config = load_config(args.config.expanduser())
    if args.data_dir is not None:
        config = replace(config, data_dir=args.data_dir.expanduser().resolve())
    return config


def _run_command(args: argparse.Namespace, config: Config, console: Console) -> int:
    """Run a one-shot subcommand.

    Returns:
        Exit code (0=success, 1=error)
    """
    notify = ConsoleNotifier(console)

    def confirm(message: str) -> bool:
        if getattr(args, "yes", False):
            return True
        return console_confirm(message, console=console)

    ctx = build_context(
        config,
        notify=notify,
        confirm=confirm,
        pick=lambda prompt, choices: console_pick(prompt, choices, console=console),
        text_input=lambda prompt: console_input(prompt, console=console),
    )
    commands = Commands(ctx)

    try:
        if args.command == "add":
            ok = commands.add_current(args.path)
            # A duplicate is informational, not a failure
            return 0 if ok or normalize_path(args.path) in ctx.store.get_all() else 1
        if args.command == "show":
            lines = commands.current_lines()
            if not lines:
                console.print("[dim](empty list)[/dim]")
            for index, line in enumerate(lines, start=1):
                console.print(f"[cyan]{index:>3}[/cyan] {escape(line)}", highlight=False)
            return 0
        if args.command == "open":
            ok = commands.navigate(args.index)
            ctx.scheduler.run_pending()
            return 0 if ok else 1
        if args.command == "save":
            return 0 if commands.save_as(args.name) else 1
        if args.command == "load":
            return 0 if commands.load(args.name) else 1
        if args.command == "delete":
            return 0 if commands.delete_saved(args.name) else 1
        if args.command == "lists":
            names = commands.list_saved()
            if not names:
                console.print("[dim]No saved lists found.[/dim]")
            for name in names:
                console.print(name, highlight=False)
            return 0
        raise ValueError(f"Unknown command: {args.command}")
    finally:
        commands.shutdown()


def _signal_handler(signum: int, frame) -> None:
    """Turn SIGTERM into a normal interrupt so cleanup still runs.

    Args:
        signum: Signal number
        frame: Current stack frame
    """
    logger.info(f"Received signal {signum}, shutting down")
    raise KeyboardInterrupt


def main(argv: list[str] | None = None) -> int:
    """Main entry point for harpooner.

    Returns:
        Exit code (0=success, 1=error, 130=SIGINT)
    """
    args = _parse_args(argv)
    console = Console()

    try:
        config = _load_config(args)
    except HarpoonerError as err:
        console.print(f"[red]Error loading config: {err}[/red]")
        return 1

    _setup_logging(config.log_file, args.debug)
    logger.info(
        "harpooner starting",
        extra={
            "extra_context": {
                "command": args.command or "tui",
                "config_path": str(args.config),
                "data_dir": str(config.data_dir),
            }
        },
    )

    signal.signal(signal.SIGTERM, _signal_handler)

    try:
        if args.command is None:
            from .tui.app import HarpoonerApp

            exit_code = HarpoonerApp(config, console=console).run()
        else:
            exit_code = _run_command(args, config, console)

        logger.info("harpooner exited", extra={"extra_context": {"exit_code": exit_code}})
        return exit_code

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130

    except Exception as err:
        logger.error(
            "harpooner crashed with unhandled exception",
            extra={"extra_context": {"error": str(err)}},
            exc_info=True,
        )
        console.print(f"[red]Fatal error: {err}[/red]")
        console.print(f"[dim]Check logs at: {config.log_file}[/dim]")
        return 1


if __name__ == "__main__":
    sys.exit(main())
