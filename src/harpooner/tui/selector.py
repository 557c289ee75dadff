"""One-shot picker over saved list names."""

from __future__ import annotations

import logging

from ..exceptions import HarpoonerError
from ..list_store import ListStore
from ..prompts import Notifier, Picker

logger = logging.getLogger(__name__)


def select_and_load(store: ListStore, picker: Picker, notify: Notifier) -> str | None:
    """Let the user pick a saved list and load it.

    Args:
        store: List store to load into
        picker: Single-choice collaborator
        notify: Receives user-facing messages

    Returns:
        Name of the loaded list, or None if nothing was loaded
    """
    names = store.list_saved_names()
    if not names:
        notify("No saved lists found.", logging.INFO)
        return None

    choice = picker("Select list to load:", names)
    if not choice:
        notify("List selection cancelled.", logging.INFO)
        return None

    try:
        store.load(choice)
    except HarpoonerError as err:
        notify(f"Could not load list '{choice}': {err}", logging.ERROR)
        return None

    notify(f"Loaded list '{choice}'", logging.INFO)
    return choice
