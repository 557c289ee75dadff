"""Program context: the single owner of the store, display and collaborators."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .config import Config
from .list_store import ListStore
from .prompts import ConfirmPrompt, EditorOpener, Notifier, PathOpener, Picker, TextInput
from .storage import StorageBackend
from .tui.display import DisplayController
from .tui.scheduler import DeferredQueue

logger = logging.getLogger(__name__)


@dataclass
class HarpoonerContext:
    """Everything a command needs, passed explicitly instead of globals."""

    config: Config
    storage: StorageBackend
    store: ListStore
    scheduler: DeferredQueue
    display: DisplayController
    notify: Notifier
    confirm: ConfirmPrompt
    pick: Picker
    text_input: TextInput
    open_path: PathOpener


def build_context(
    config: Config,
    notify: Notifier,
    confirm: ConfirmPrompt,
    pick: Picker,
    text_input: TextInput,
    open_path: PathOpener | None = None,
    initialize: bool = True,
) -> HarpoonerContext:
    """Wire up storage, store, scheduler and display for ``config``.

    Args:
        config: Runtime configuration
        notify: User notification sink
        confirm: Yes/no prompt
        pick: Single-choice picker
        text_input: Free-text prompt
        open_path: Opens a path for editing (defaults to the configured editor)
        initialize: Restore the list from the default snapshot
    """
    storage = StorageBackend(config.data_dir)
    store = ListStore(storage)
    if initialize:
        store.initialize()

    if open_path is None:
        open_path = EditorOpener(config.editor_command, notify=notify)

    scheduler = DeferredQueue()
    display = DisplayController(
        store=store,
        settings=config.ui,
        schedule=scheduler.schedule,
        open_path=open_path,
        notify=notify,
    )
    logger.debug(f"Context built (data_dir={config.data_dir})")

    return HarpoonerContext(
        config=config,
        storage=storage,
        store=store,
        scheduler=scheduler,
        display=display,
        notify=notify,
        confirm=confirm,
        pick=pick,
        text_input=text_input,
        open_path=open_path,
    )
