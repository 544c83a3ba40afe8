from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Iterable
from pathlib import Path

from watchfiles import Change, awatch

from todo_index.core.ports.watcher import ChangeHandler

logger = logging.getLogger(__name__)


def _split_changes(changes: Iterable[tuple[Change, str]]) -> tuple[list[str], list[str], list[str]]:
    added: set[str] = set()
    modified: set[str] = set()
    deleted: set[str] = set()
    for change, path in changes:
        if change == Change.added:
            added.add(path)
        elif change == Change.modified:
            modified.add(path)
        elif change == Change.deleted:
            deleted.add(path)
    return sorted(added), sorted(modified - added), sorted(deleted)


class WatchfilesWatcher:
    """Watch a directory and forward file events to a change handler.

    watchfiles reports a rename as a deletion plus an addition in the same
    batch; a batch holding exactly one of each is forwarded as a rename.

    Implements the ``FileWatcherPort`` protocol.
    """

    def __init__(self, directory: str | Path, handler: ChangeHandler) -> None:
        self._directory = Path(directory)
        self._handler = handler
        self._task: asyncio.Task[None] | None = None

    async def start(self) -> None:
        if self._task is not None:
            return
        self._task = asyncio.create_task(self._watch())
        logger.info("Watcher started for %s", self._directory)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        logger.info("Watcher stopped for %s", self._directory)

    async def _watch(self) -> None:
        async for changes in awatch(self._directory):
            logger.debug("Detected %d change(s)", len(changes))
            try:
                await self._dispatch(changes)
            except Exception:
                logger.exception("Error in watcher callback")

    async def _dispatch(self, changes: Iterable[tuple[Change, str]]) -> None:
        added, modified, deleted = _split_changes(changes)

        if len(added) == 1 and len(deleted) == 1:
            await self._handler.file_renamed(deleted[0], added[0])
            added, deleted = [], []

        for path in deleted:
            await self._handler.file_deleted(path)
        for path in [*added, *modified]:
            await self._handler.file_modified(path)
