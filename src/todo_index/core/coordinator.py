"""Keep the todo index in step with file changes.

The coordinator is the only writer of the index.  Full scans extract files
concurrently, but results are merged under a single lock and only after the
whole batch is done, so observers of ``todos:updated`` always see a complete
snapshot.  Each full scan or scope change starts a new generation; a batch
that finishes after a newer one has started is dropped, and entries written
by file events while a scan was reading take precedence over its results.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence

from todo_index.core.events import SETTINGS_LOADED, TODOS_UPDATED, EventBus
from todo_index.core.extract import extract_comments
from todo_index.core.ports.documents import DocumentSource
from todo_index.core.ports.index import TodoStore
from todo_index.core.tags import TagRegistry
from todo_index.models import Comment, FileEntry
from todo_index.settings import Scope, TodoSettings

logger = logging.getLogger(__name__)

_DEFAULT_CONCURRENCY = 8


class ChangeCoordinator:
    def __init__(
        self,
        index: TodoStore,
        documents: DocumentSource,
        events: EventBus,
        settings: TodoSettings | None = None,
        settings_loader: Callable[[], TodoSettings] | None = None,
        concurrency: int = _DEFAULT_CONCURRENCY,
    ) -> None:
        self._index = index
        self._documents = documents
        self._events = events
        self._settings_loader = settings_loader
        self._semaphore = asyncio.Semaphore(max(1, concurrency))
        self._lock = asyncio.Lock()
        self._generation = 0
        self._touched: dict[str, None] = {}
        self._active_path: str | None = None
        self._apply_settings(settings if settings is not None else TodoSettings())

    @property
    def index(self) -> TodoStore:
        return self._index

    @property
    def events(self) -> EventBus:
        return self._events

    @property
    def settings(self) -> TodoSettings:
        return self._settings

    @property
    def registry(self) -> TagRegistry:
        return self._registry

    @property
    def scope(self) -> Scope:
        return self._settings.scope

    @property
    def active_path(self) -> str | None:
        return self._active_path

    def _apply_settings(self, settings: TodoSettings) -> None:
        self._settings = settings
        self._registry = TagRegistry.from_settings(settings)
        self._documents.configure(settings.search)

    def _is_settings_file(self, path: str) -> bool:
        return path == str(self._documents.settings_path)

    # ------------------------------------------------------------------
    # Settings and scope
    # ------------------------------------------------------------------

    async def load_settings(self) -> None:
        """Reload settings, clear the index and scan again."""
        self._generation += 1
        if self._settings_loader is not None:
            settings = await asyncio.to_thread(self._settings_loader)
            self._apply_settings(settings)

        async with self._lock:
            self._index.replace_all([])
        await self._events.publish(SETTINGS_LOADED)
        await self.rescan()

    async def set_scope(self, scope: Scope) -> None:
        if scope == self.scope:
            return
        search = self._settings.search.model_copy(update={"scope": scope})
        self._settings = self._settings.model_copy(update={"search": search})
        await self.rescan()

    async def set_active_document(self, path: str | None) -> None:
        """Record the document shown in the editor.

        In current-file scope the index is rebuilt from that document alone.
        """
        self._active_path = self._documents.normalize(path) if path else None
        if self.scope == "current":
            await self.rescan()

    # ------------------------------------------------------------------
    # Full scan
    # ------------------------------------------------------------------

    async def rescan(self) -> bool:
        """Rebuild the whole index for the current scope.

        Returns ``False`` when a newer scan superseded this one.
        """
        self._generation += 1
        generation = self._generation
        registry = self._registry
        self._touched = {}

        if self.scope == "current":
            paths = [self._active_path] if self._active_path else []
            keep_empty = True
        else:
            paths = await self._documents.list_files()
            keep_empty = False

        entries = await self._extract_batch(paths, registry, keep_empty=keep_empty)

        async with self._lock:
            if generation != self._generation:
                logger.debug("Discarding superseded scan (generation %d)", generation)
                return False
            entries = self._merge_touched(entries, keep_empty)
            self._index.replace_all(entries)

        logger.info("Indexed %d file(s) with todos", len(entries))
        await self._events.publish(TODOS_UPDATED)
        return True

    async def _extract_batch(
        self, paths: Sequence[str], registry: TagRegistry, keep_empty: bool = False
    ) -> list[FileEntry]:
        results = await asyncio.gather(*(self._extract(path, registry) for path in paths))
        entries: list[FileEntry] = []
        for path, comments in zip(paths, results, strict=True):
            if comments is None:
                continue
            if comments or keep_empty:
                entries.append(FileEntry(path=path, comments=comments))
        return entries

    def _merge_touched(self, entries: list[FileEntry], keep_empty: bool) -> list[FileEntry]:
        """Prefer index entries written by file events while the scan was reading.

        Must be called with the lock held.
        """
        if not self._touched:
            return entries

        merged: list[FileEntry] = []
        for entry in entries:
            if entry.path not in self._touched:
                merged.append(entry)
                continue
            current = self._index.get(entry.path)
            if current is not None and (current.comments or keep_empty):
                merged.append(current)

        scanned = {entry.path for entry in entries}
        for path in self._touched:
            if path in scanned:
                continue
            current = self._index.get(path)
            if current is not None and (current.comments or keep_empty):
                merged.append(current)
        return merged

    async def _extract(self, path: str, registry: TagRegistry) -> list[Comment] | None:
        async with self._semaphore:
            try:
                text = await self._documents.read_text(path)
            except OSError as exc:
                logger.warning("Skipping %s: %s", path, exc)
                return None
        return extract_comments(path, text, registry)

    # ------------------------------------------------------------------
    # File events
    # ------------------------------------------------------------------

    async def file_modified(self, path: str) -> None:
        file_path = self._documents.normalize(path)
        if self._is_settings_file(file_path):
            await self.load_settings()
            return

        if not self._documents.accepts(file_path):
            logger.debug("Ignoring change to unindexed path: %s", file_path)
            await self._drop(file_path)
            return

        if self.scope == "current" and file_path != self._active_path:
            return

        generation = self._generation
        registry = self._registry
        comments = await self._extract(file_path, registry)
        if comments is None:
            return

        async with self._lock:
            if registry is not self._registry or (
                generation != self._generation and self.scope == "current" and file_path != self._active_path
            ):
                logger.debug("Discarding stale update for %s", file_path)
                return
            if not comments and self._index.get(file_path) is None:
                return
            self._index.upsert(file_path, comments)
            self._touched[file_path] = None

        await self._events.publish(TODOS_UPDATED)

    async def _drop(self, file_path: str) -> None:
        """Remove a path that can no longer be indexed, if it was."""
        async with self._lock:
            removed = self._index.remove(file_path)
            self._touched[file_path] = None
        if removed:
            logger.debug("Removed %s from the index", file_path)
            await self._events.publish(TODOS_UPDATED)

    async def file_deleted(self, path: str) -> None:
        file_path = self._documents.normalize(path)
        if self._is_settings_file(file_path):
            await self.load_settings()
            return

        if not self._documents.in_scope(file_path):
            return

        async with self._lock:
            removed = self._index.remove(file_path)
            self._touched[file_path] = None

        if removed:
            logger.debug("Removed %s from the index", file_path)
        await self._events.publish(TODOS_UPDATED)

    async def file_renamed(self, old_path: str, new_path: str) -> None:
        old_file = self._documents.normalize(old_path)
        new_file = self._documents.normalize(new_path)

        if self._is_settings_file(old_file) or self._is_settings_file(new_file):
            await self.load_settings()
            return

        if not self._documents.in_scope(old_file) and not self._documents.in_scope(new_file):
            return

        if self.scope == "current" and old_file == self._active_path:
            self._active_path = new_file
        await self.rescan()
