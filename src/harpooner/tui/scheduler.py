"""Deferred execution for the TUI main loop.

Callbacks scheduled here run on the next loop turn, after the key handler
that scheduled them has returned. The display surface uses this to release
itself outside of its own event handling.
"""

from __future__ import annotations

import logging
import queue
from collections.abc import Callable

logger = logging.getLogger(__name__)


class DeferredQueue:
    """FIFO of callbacks drained once per main-loop iteration."""

    def __init__(self) -> None:
        self._queue: queue.Queue[Callable[[], None]] = queue.Queue()

    def __len__(self) -> int:
        return self._queue.qsize()

    def schedule(self, callback: Callable[[], None]) -> None:
        """Run ``callback`` on the next call to run_pending()."""
        self._queue.put(callback)

    def run_pending(self) -> int:
        """Run the callbacks queued before this call.

        Callbacks scheduled while draining wait for the next turn. A failing
        callback is logged and does not prevent the others from running.

        Returns:
            Number of callbacks executed
        """
        pending = self._queue.qsize()
        executed = 0
        for _ in range(pending):
            try:
                callback = self._queue.get_nowait()
            except queue.Empty:
                break
            try:
                callback()
            except Exception as err:
                logger.error(f"Deferred callback failed: {err}", exc_info=True)
            executed += 1
        return executed
