"""Polling file watcher for mock directories.

Snapshots the mtime of every file under the mock roots and polls for
differences.  A burst of changes (an editor writing several files, a
``git checkout``) is coalesced: after the first change the watcher keeps
polling until the tree has been quiet for ``debounce`` seconds, then
calls the refresh callback once.  Every poll runs in a worker thread.
"""

import asyncio
import logging
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any

from mockingbird._internal.invoke import invoke
from mockingbird.routing.constants import DEFAULT_EXCLUDED_DIRS
from mockingbird.scanning.files import collect_files

logger = logging.getLogger("mockingbird.server")


class FileWatcher:
    """Calls *callback* after mock files are added, modified or deleted.

    Usage::

        watcher = FileWatcher(["mock"], server.refresh, interval=0.5)
        await watcher.start()
        ...
        await watcher.stop()
    """

    __slots__ = ("_callback", "_dirs", "_exclude_dirs", "_mtimes", "_task", "debounce", "interval")

    def __init__(
        self,
        dirs: Iterable[str | Path],
        callback: Callable[[], Any],
        *,
        interval: float = 0.5,
        debounce: float = 0.1,
        exclude_dirs: Iterable[str] = DEFAULT_EXCLUDED_DIRS,
    ) -> None:
        self._dirs = tuple(Path(entry) for entry in dirs)
        self._callback = callback
        self._exclude_dirs = frozenset(exclude_dirs)
        self._mtimes: dict[Path, float] = {}
        self._task: asyncio.Task[None] | None = None
        self.interval = interval
        self.debounce = debounce

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def snapshot(self) -> dict[Path, float]:
        """Current mtime of every file under the watched roots."""
        mtimes: dict[Path, float] = {}
        for candidate in collect_files(self._dirs, exclude_dirs=self._exclude_dirs):
            try:
                mtimes[candidate.file] = candidate.file.stat().st_mtime
            except OSError:
                # Deleted between listing and stat
                continue
        return mtimes

    def detect_changes(self) -> set[Path]:
        """Files added, modified or deleted since the last call."""
        current = self.snapshot()
        changed = {
            path for path, mtime in current.items() if self._mtimes.get(path) != mtime
        }
        changed.update(self._mtimes.keys() - current.keys())
        self._mtimes = current
        return changed

    async def start(self) -> None:
        if self.running:
            logger.warning("File watcher already running")
            return
        self._mtimes = await asyncio.to_thread(self.snapshot)
        self._task = asyncio.create_task(self._watch_loop())
        logger.info("Watching %s", ", ".join(str(d) for d in self._dirs))

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    async def wait_for_quiet(self, changed: set[Path]) -> set[Path]:
        """Keep polling until no new change shows up for ``debounce`` seconds."""
        while True:
            await asyncio.sleep(self.debounce)
            more = await asyncio.to_thread(self.detect_changes)
            if not more:
                return changed
            changed |= more

    async def _watch_loop(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            changed = await asyncio.to_thread(self.detect_changes)
            if not changed:
                continue
            changed = await self.wait_for_quiet(changed)
            logger.info("%d mock file(s) changed, refreshing", len(changed))
            try:
                await invoke(self._callback)
            except Exception:
                logger.exception("Refresh after file change failed")
