"""Tests for the DisplayController open/close lifecycle and list commands."""

from __future__ import annotations

import logging
from pathlib import Path
from unittest.mock import Mock, patch

import pytest

from harpooner.config import UISettings
from harpooner.exceptions import StorageError, SurfaceError
from harpooner.list_store import DEFAULT_SNAPSHOT_NAME, ListStore
from harpooner.storage import StorageBackend
from harpooner.tui.display import DisplayController, SurfaceState, create_list_surface
from harpooner.tui.scheduler import DeferredQueue
from harpooner.tui.surface import EMPTY_PLACEHOLDER


@pytest.fixture
def store(tmp_path: Path) -> ListStore:
    list_store = ListStore(StorageBackend(tmp_path / "data"))
    list_store.initialize()
    return list_store


@pytest.fixture
def scheduler() -> DeferredQueue:
    return DeferredQueue()


@pytest.fixture
def open_path() -> Mock:
    return Mock()


@pytest.fixture
def notify() -> Mock:
    return Mock()


@pytest.fixture
def display(
    store: ListStore, scheduler: DeferredQueue, open_path: Mock, notify: Mock
) -> DisplayController:
    """Controller with a fixed 120x40 terminal."""
    return DisplayController(
        store=store,
        settings=UISettings(),
        schedule=scheduler.schedule,
        open_path=open_path,
        notify=notify,
        terminal_size=lambda: (120, 40),
    )


@pytest.fixture
def filled(store: ListStore) -> ListStore:
    for path in ("/a", "/b", "/c"):
        store.add(path)
    return store


class TestOpen:
    def test_initially_closed(self, display: DisplayController) -> None:
        assert display.state is SurfaceState.CLOSED
        assert display.cursor is None

    def test_open_renders_list(self, display: DisplayController, filled: ListStore) -> None:
        assert display.open() is True
        assert display.state is SurfaceState.OPEN
        assert display.surface.lines == ["/a", "/b", "/c"]
        assert display.cursor == 1

    def test_open_empty_list_shows_placeholder(self, display: DisplayController) -> None:
        display.open()
        assert display.surface.lines == [EMPTY_PLACEHOLDER]
        assert display.surface.is_placeholder

    def test_open_uses_computed_geometry(self, store, scheduler, open_path, notify) -> None:
        factory = Mock(side_effect=create_list_surface)
        controller = DisplayController(
            store,
            UISettings(width_ratio=0.5, max_width=100, fallback_width=60, height_in_lines=12),
            scheduler.schedule,
            open_path,
            notify,
            surface_factory=factory,
            terminal_size=lambda: (300, 10),
        )

        controller.open()

        width, height, _ = factory.call_args.args
        assert (width, height) == (100, 6)

    def test_open_twice_is_noop(self, display: DisplayController) -> None:
        display.open()
        first = display.surface
        assert display.open() is False
        assert display.surface is first

    def test_allocation_failure_raises(self, display: DisplayController) -> None:
        display.surface_factory = Mock(side_effect=SurfaceError("no room"))
        with pytest.raises(SurfaceError):
            display.open()
        assert display.state is SurfaceState.CLOSED

    def test_unexpected_factory_error_is_wrapped(self, display: DisplayController) -> None:
        display.surface_factory = Mock(side_effect=RuntimeError("boom"))
        with pytest.raises(SurfaceError, match="Failed to create Harpooner window"):
            display.open()

    def test_failed_setup_releases_surface(self, display: DisplayController) -> None:
        surface = Mock()
        surface.set_lines.side_effect = RuntimeError("render failed")
        display.surface_factory = Mock(return_value=surface)

        with pytest.raises(SurfaceError):
            display.open()

        surface.release.assert_called_once()
        assert display.surface is None

    def test_terminal_too_small(self, display: DisplayController) -> None:
        display.terminal_size = lambda: (120, 4)
        with pytest.raises(SurfaceError):
            display.open()


class TestClose:
    def test_close_is_deferred(self, display: DisplayController, scheduler: DeferredQueue) -> None:
        display.open()
        surface = display.surface

        assert display.close() is True
        assert display.state is SurfaceState.CLOSING
        assert display.surface is None
        assert surface.released is False

        scheduler.run_pending()

        assert surface.released is True
        assert display.state is SurfaceState.CLOSED

    def test_close_when_closed(self, display: DisplayController, scheduler: DeferredQueue) -> None:
        assert display.close() is False
        assert len(scheduler) == 0

    def test_close_while_closing_is_ignored(
        self, display: DisplayController, scheduler: DeferredQueue
    ) -> None:
        display.open()
        display.close()
        assert display.close() is False
        assert len(scheduler) == 1

    def test_open_while_closing_is_ignored(
        self, display: DisplayController, scheduler: DeferredQueue
    ) -> None:
        display.open()
        display.close()

        assert display.open() is False
        assert display.state is SurfaceState.CLOSING

        scheduler.run_pending()
        assert display.open() is True

    def test_close_saves_snapshot(self, display: DisplayController, filled: ListStore) -> None:
        display.open()
        display.close()
        assert filled.dirty is False
        assert filled.storage.exists(DEFAULT_SNAPSHOT_NAME)

    def test_close_without_save_on_toggle(self, display: DisplayController, filled: ListStore) -> None:
        display.settings = UISettings(save_on_toggle=False)
        display.open()
        display.close()
        assert filled.dirty is True

    def test_save_failure_still_closes(
        self, display: DisplayController, filled: ListStore, notify: Mock, scheduler: DeferredQueue
    ) -> None:
        display.open()
        with patch.object(filled.storage, "write", side_effect=StorageError("disk full")):
            display.close()

        assert display.state is SurfaceState.CLOSING
        message, level = notify.call_args.args
        assert "disk full" in message
        assert level == logging.ERROR
        scheduler.run_pending()
        assert display.state is SurfaceState.CLOSED

    def test_release_failure_clears_closing(
        self, display: DisplayController, scheduler: DeferredQueue
    ) -> None:
        surface = Mock()
        surface.release.side_effect = RuntimeError("already gone")
        display.surface_factory = Mock(return_value=surface)
        display.open()
        display.close()

        scheduler.run_pending()

        assert display.state is SurfaceState.CLOSED


class TestToggle:
    def test_toggle_cycle(self, display: DisplayController, scheduler: DeferredQueue) -> None:
        assert display.toggle() is True
        assert display.toggle() is False
        scheduler.run_pending()
        assert display.toggle() is True

    def test_toggle_while_closing(self, display: DisplayController) -> None:
        display.open()
        display.close()
        assert display.toggle() is False
        assert display.state is SurfaceState.CLOSING


class TestCursor:
    def test_cursor_moves_and_clamps(self, display: DisplayController, filled: ListStore) -> None:
        display.open()
        display.cursor_down()
        display.cursor_down()
        display.cursor_down()
        assert display.cursor == 3
        display.cursor_up()
        assert display.cursor == 2
        for _ in range(5):
            display.cursor_up()
        assert display.cursor == 1

    def test_cursor_when_closed(self, display: DisplayController) -> None:
        assert display.cursor_down() == (False, None)

    def test_refresh_keeps_cursor_in_range(self, display: DisplayController, filled: ListStore) -> None:
        display.open()
        display.surface.set_cursor(3)
        filled.delete_by_index(3)
        filled.delete_by_index(2)

        display.refresh()

        assert display.cursor == 1


class TestActivate:
    def test_activate_opens_path_after_close(
        self, display: DisplayController, filled: ListStore, scheduler: DeferredQueue, open_path: Mock
    ) -> None:
        display.open()
        display.cursor_down()

        handled, message = display.activate()

        assert handled is True
        assert message == "Opening /b"
        assert display.state is SurfaceState.CLOSING
        open_path.assert_not_called()

        scheduler.run_pending()

        open_path.assert_called_once_with("/b")
        assert display.state is SurfaceState.CLOSED

    def test_activate_explicit_index(
        self, display: DisplayController, filled: ListStore, scheduler: DeferredQueue, open_path: Mock
    ) -> None:
        display.open()
        display.activate(3)
        scheduler.run_pending()
        open_path.assert_called_once_with("/c")

    def test_activate_empty_list(self, display: DisplayController, open_path: Mock) -> None:
        display.open()
        assert display.activate() == (False, "Error: Invalid line selected")
        assert display.is_open
        open_path.assert_not_called()

    def test_activate_when_closed(self, display: DisplayController) -> None:
        assert display.activate() == (False, "Error: Bookmark list is not open")


class TestDelete:
    def test_delete_under_cursor(self, display: DisplayController, filled: ListStore) -> None:
        display.open()
        display.cursor_down()

        handled, message = display.delete()

        assert handled is True
        assert message == "Removed: /b"
        assert filled.get_all() == ["/a", "/c"]
        assert display.surface.lines == ["/a", "/c"]
        assert display.cursor == 2

    def test_delete_last_line_moves_cursor_up(self, display: DisplayController, filled: ListStore) -> None:
        display.open()
        display.surface.set_cursor(3)
        display.delete()
        assert display.cursor == 2

    def test_delete_only_entry_shows_placeholder(self, display: DisplayController, store: ListStore) -> None:
        store.add("/only")
        display.open()
        display.delete()
        assert store.get_all() == []
        assert display.surface.is_placeholder
        assert display.cursor == 1

    def test_delete_on_placeholder(self, display: DisplayController) -> None:
        display.open()
        handled, message = display.delete()
        assert handled is False
        assert message.startswith("Error:")


class TestMove:
    def test_move_down(self, display: DisplayController, filled: ListStore) -> None:
        display.open()
        assert display.move_down() == (True, "Item moved")
        assert filled.get_all() == ["/b", "/a", "/c"]
        assert display.cursor == 2

    def test_move_up(self, display: DisplayController, filled: ListStore) -> None:
        display.open()
        display.surface.set_cursor(3)
        assert display.move_up() == (True, "Item moved")
        assert filled.get_all() == ["/a", "/c", "/b"]
        assert display.cursor == 2

    def test_move_down_at_bottom_is_noop(self, display: DisplayController, filled: ListStore) -> None:
        display.open()
        display.surface.set_cursor(3)
        assert display.move_down() == (False, None)
        assert filled.get_all() == ["/a", "/b", "/c"]

    def test_move_up_at_top_is_noop(self, display: DisplayController, filled: ListStore) -> None:
        display.open()
        assert display.move_up() == (False, None)
        assert filled.get_all() == ["/a", "/b", "/c"]

    def test_move_invalid_index(self, display: DisplayController, filled: ListStore) -> None:
        display.open()
        assert display.move_down(7) == (False, "Error: Invalid line selected")
        assert display.move_up(0) == (False, "Error: Invalid line selected")

    def test_move_on_empty_list(self, display: DisplayController) -> None:
        display.open()
        assert display.move_down() == (False, "Error: Invalid line selected")
