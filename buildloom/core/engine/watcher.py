"""
Path watcher — mtime polling over glob patterns.

A watch task re-runs its wrapped task whenever any file matched by its
globs is added, removed or modified. Changes are detected by comparing
mtime snapshots between poll cycles, one re-run at a time.

Whatever a re-run hands back is reduced to one outcome by
:func:`settle`: a receipt or report, a raised exception, an awaitable,
or a future. Every outcome is logged and the watcher re-arms; only the
stop event ends the loop.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import glob
import inspect
import logging
import os
import threading
from collections.abc import Callable, Iterable
from typing import Any

logger = logging.getLogger(__name__)

POLL_INTERVAL_S = 1.0


def snapshot(patterns: Iterable[str]) -> dict[str, float]:
    """Map every file matched by ``patterns`` to its mtime."""
    result: dict[str, float] = {}
    for pattern in patterns:
        for path in glob.glob(pattern, recursive=True):
            try:
                if os.path.isfile(path):
                    result[path] = os.stat(path).st_mtime
            except OSError:
                continue  # removed between glob and stat
    return result


def settle(outcome: Any) -> tuple[bool, str]:
    """Reduce the result of one run to ``(ok, detail)``.

    Accepts None, anything with a boolean ``ok`` or ``all_ok`` attribute,
    an exception instance, an awaitable (run to completion) or a
    ``concurrent.futures.Future`` (waited on).
    """
    try:
        if isinstance(outcome, concurrent.futures.Future):
            outcome = outcome.result()
        elif inspect.isawaitable(outcome):
            outcome = asyncio.run(_await(outcome))
    except Exception as e:
        return False, f"{type(e).__name__}: {e}"

    if outcome is None:
        return True, "completed"
    if isinstance(outcome, BaseException):
        return False, f"{type(outcome).__name__}: {outcome}"
    if hasattr(outcome, "all_ok"):
        return bool(outcome.all_ok), getattr(outcome, "status", "")
    if hasattr(outcome, "ok"):
        return bool(outcome.ok), getattr(outcome, "error", None) or getattr(outcome, "status", "")
    return True, "completed"


async def _await(awaitable: Any) -> Any:
    return await awaitable


class PathWatcher:
    """Polls a set of globs for changes.

    Args:
        paths: Globs to monitor.
        poll_interval: Seconds between poll cycles.
    """

    def __init__(self, paths: Iterable[str], poll_interval: float = POLL_INTERVAL_S):
        self._paths = list(paths)
        self._poll_interval = poll_interval
        self._last = snapshot(self._paths)
        self.runs = 0

    @property
    def paths(self) -> list[str]:
        return list(self._paths)

    def check(self) -> bool:
        """Whether anything changed since the previous check."""
        current = snapshot(self._paths)
        changed = current != self._last
        self._last = current
        return changed

    def run(self, on_change: Callable[[], Any], stop_event: threading.Event) -> int:
        """Call ``on_change`` after every detected change until stopped.

        Returns:
            Number of runs performed.
        """
        logger.info("Watching %d patterns (poll every %.1fs)", len(self._paths), self._poll_interval)
        while not stop_event.wait(self._poll_interval):
            if not self.check():
                continue

            self.runs += 1
            try:
                outcome = on_change()
            except Exception as e:
                outcome = e
            ok, detail = settle(outcome)
            if ok:
                logger.info("Watch run %d completed", self.runs)
            else:
                logger.error("Watch run %d failed: %s", self.runs, detail)

        logger.info("Watcher stopped after %d runs", self.runs)
        return self.runs
