"""Tests for the user-facing command layer."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from unittest.mock import Mock

import pytest

from harpooner.commands import Commands, normalize_path
from harpooner.config import Config
from harpooner.context import HarpoonerContext, build_context
from harpooner.exceptions import SurfaceError
from harpooner.tui.display import SurfaceState


@pytest.fixture
def config(tmp_path: Path) -> Config:
    """Configuration pointing at a temporary data directory."""
    return Config.from_dict(
        {"data_dir": str(tmp_path / "data"), "log_file": str(tmp_path / "log.json")}
    )


@pytest.fixture
def ctx(config: Config) -> HarpoonerContext:
    """Context with mocked collaborators and a fixed terminal size."""
    context = build_context(
        config,
        notify=Mock(),
        confirm=Mock(return_value=True),
        pick=Mock(return_value=None),
        text_input=Mock(return_value=None),
        open_path=Mock(),
    )
    context.display.terminal_size = lambda: (120, 40)
    return context


@pytest.fixture
def commands(ctx: HarpoonerContext) -> Commands:
    return Commands(ctx)


def _messages(ctx: HarpoonerContext) -> list[tuple[str, int]]:
    return [(c.args[0], c.args[1]) for c in ctx.notify.call_args_list]


class TestNormalizePath:
    def test_relative_becomes_absolute(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        assert normalize_path("src/app.py") == os.path.join(str(tmp_path), "src", "app.py")

    def test_expands_home(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HOME", str(tmp_path))
        assert normalize_path("~/notes.md") == os.path.join(str(tmp_path), "notes.md")


class TestAdd:
    def test_add_notifies_basename(self, commands: Commands, ctx: HarpoonerContext) -> None:
        assert commands.add_current("/proj/src/app.py") is True
        assert ctx.store.get_all() == ["/proj/src/app.py"]
        assert _messages(ctx)[-1] == ("Added: app.py", logging.INFO)

    def test_add_duplicate(self, commands: Commands, ctx: HarpoonerContext) -> None:
        commands.add_current("/proj/app.py")
        assert commands.add_current("/proj/app.py") is False
        assert ctx.store.get_all() == ["/proj/app.py"]
        assert _messages(ctx)[-1] == ("Path already in list: app.py", logging.INFO)

    def test_add_empty(self, commands: Commands, ctx: HarpoonerContext) -> None:
        assert commands.add_current("") is False
        assert ctx.store.get_all() == []
        assert _messages(ctx)[-1][1] == logging.ERROR

    def test_add_refreshes_open_surface(self, commands: Commands, ctx: HarpoonerContext) -> None:
        ctx.display.open()
        commands.add_current("/proj/app.py")
        assert ctx.display.surface.lines == ["/proj/app.py"]

    def test_prompt_add(self, commands: Commands, ctx: HarpoonerContext) -> None:
        ctx.text_input.return_value = "/proj/app.py"
        assert commands.prompt_add() is True
        ctx.text_input.assert_called_once_with("Add file path")

    def test_prompt_add_cancelled(self, commands: Commands, ctx: HarpoonerContext) -> None:
        assert commands.prompt_add() is False
        assert ctx.store.get_all() == []


class TestSaveLoadDelete:
    def test_save_as(self, commands: Commands, ctx: HarpoonerContext) -> None:
        commands.add_current("/a")
        assert commands.save_as("work") is True
        assert ctx.storage.exists("work")
        assert _messages(ctx)[-1] == ("List saved as 'work'", logging.INFO)

    def test_save_without_name_prints_usage(self, commands: Commands, ctx: HarpoonerContext) -> None:
        assert commands.save_as("") is False
        assert _messages(ctx)[-1] == ("Usage: save <list_name>", logging.ERROR)

    def test_save_reserved_name_reports_error(self, commands: Commands, ctx: HarpoonerContext) -> None:
        assert commands.save_as("_current_list") is False
        assert _messages(ctx)[-1][1] == logging.ERROR

    def test_prompt_save(self, commands: Commands, ctx: HarpoonerContext) -> None:
        ctx.text_input.return_value = "work"
        assert commands.prompt_save() is True
        assert ctx.store.current_list_name == "work"

    def test_prompt_save_cancelled(self, commands: Commands, ctx: HarpoonerContext) -> None:
        assert commands.prompt_save() is False
        assert _messages(ctx)[-1] == ("List save cancelled.", logging.INFO)

    def test_load_by_name(self, commands: Commands, ctx: HarpoonerContext) -> None:
        commands.add_current("/a")
        commands.save_as("work")
        commands.add_current("/b")

        assert commands.load("work") is True
        assert ctx.store.get_all() == ["/a"]
        assert _messages(ctx)[-1] == ("Loaded list 'work'", logging.INFO)

    def test_load_missing(self, commands: Commands, ctx: HarpoonerContext) -> None:
        assert commands.load("nope") is False
        message, level = _messages(ctx)[-1]
        assert level == logging.ERROR
        assert "nope" in message

    def test_load_without_name_uses_picker(self, commands: Commands, ctx: HarpoonerContext) -> None:
        commands.add_current("/a")
        commands.save_as("work")
        ctx.pick.return_value = "work"

        assert commands.load() is True
        ctx.pick.assert_called_once_with("Select list to load:", ["work"])

    def test_load_refreshes_open_surface(self, commands: Commands, ctx: HarpoonerContext) -> None:
        commands.add_current("/a")
        commands.save_as("work")
        commands.add_current("/b")
        ctx.display.open()

        commands.load("work")

        assert ctx.display.surface.lines == ["/a"]

    def test_delete_saved(self, commands: Commands, ctx: HarpoonerContext) -> None:
        commands.save_as("old")
        assert commands.delete_saved("old") is True
        assert not ctx.storage.exists("old")
        assert _messages(ctx)[-1] == ("Deleted list 'old'.", logging.INFO)

    def test_delete_cancelled(self, commands: Commands, ctx: HarpoonerContext) -> None:
        commands.save_as("old")
        ctx.confirm.return_value = False

        assert commands.delete_saved("old") is False
        assert ctx.storage.exists("old")
        assert _messages(ctx)[-1] == ("List deletion cancelled.", logging.INFO)

    def test_delete_missing(self, commands: Commands, ctx: HarpoonerContext) -> None:
        assert commands.delete_saved("nope") is False
        assert _messages(ctx)[-1][1] == logging.ERROR
        ctx.confirm.assert_not_called()

    def test_list_saved(self, commands: Commands) -> None:
        commands.save_as("b")
        commands.save_as("a")
        assert commands.list_saved() == ["a", "b"]


class TestNavigate:
    def test_navigate_schedules_open(self, commands: Commands, ctx: HarpoonerContext) -> None:
        commands.add_current("/a")
        commands.add_current("/b")

        assert commands.navigate(2) is True
        ctx.open_path.assert_not_called()

        ctx.scheduler.run_pending()
        ctx.open_path.assert_called_once_with("/b")

    def test_navigate_out_of_range(self, commands: Commands, ctx: HarpoonerContext) -> None:
        commands.add_current("/a")
        assert commands.navigate(5) is False
        assert _messages(ctx)[-1] == ("No file at index 5", logging.WARNING)
        assert len(ctx.scheduler) == 0

    def test_navigate_closes_open_surface(self, commands: Commands, ctx: HarpoonerContext) -> None:
        commands.add_current("/a")
        ctx.display.open()

        commands.navigate(1)

        assert ctx.display.state is SurfaceState.CLOSING
        ctx.scheduler.run_pending()
        assert ctx.display.state is SurfaceState.CLOSED
        ctx.open_path.assert_called_once_with("/a")


class TestToggleAndShutdown:
    def test_toggle_opens_and_closes(self, commands: Commands, ctx: HarpoonerContext) -> None:
        assert commands.toggle_display() is True
        assert ctx.display.is_open
        assert commands.toggle_display() is False
        assert not ctx.display.is_open

    def test_toggle_propagates_surface_error(self, commands: Commands, ctx: HarpoonerContext) -> None:
        ctx.display.surface_factory = Mock(side_effect=SurfaceError("no room"))
        with pytest.raises(SurfaceError):
            commands.toggle_display()

    def test_shutdown_saves_dirty_list(self, commands: Commands, ctx: HarpoonerContext) -> None:
        commands.add_current("/a")
        commands.shutdown()
        assert ctx.storage.exists("_current_list")
        assert ctx.store.dirty is False

    def test_shutdown_respects_save_on_exit(self, tmp_path: Path) -> None:
        config = Config.from_dict({"data_dir": str(tmp_path / "data"), "save_on_exit": False})
        context = build_context(
            config, notify=Mock(), confirm=Mock(), pick=Mock(), text_input=Mock(), open_path=Mock()
        )
        commands = Commands(context)
        commands.add_current("/a")

        commands.shutdown()

        assert not context.storage.exists("_current_list")

    def test_current_lines(self, commands: Commands) -> None:
        commands.add_current("/etc/hosts")
        assert commands.current_lines() == ["/etc/hosts"]
