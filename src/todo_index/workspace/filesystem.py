"""Local filesystem workspace: file enumeration and document access."""

from __future__ import annotations

import asyncio
import fnmatch
import logging
import os
from pathlib import Path

from todo_index.core.extract import read_document
from todo_index.settings import SearchSettings, settings_path_for

logger = logging.getLogger(__name__)


def _matches_any(name: str, patterns: tuple[str, ...]) -> bool:
    return any(fnmatch.fnmatch(name, pattern) for pattern in patterns)


class FilesystemWorkspace:
    """A project directory on disk.

    Implements the ``DocumentSource`` protocol.
    """

    def __init__(
        self,
        root: str | Path,
        search: SearchSettings | None = None,
        settings_path: str | Path | None = None,
    ) -> None:
        self._root = Path(os.path.abspath(root))
        self._settings_path = Path(self.normalize(settings_path or settings_path_for(self._root)))
        self._exclude_folders: tuple[str, ...] = ()
        self._exclude_files: tuple[str, ...] = ()
        self._max_file_size = 0
        self.configure(search or SearchSettings())

    @property
    def root(self) -> Path:
        return self._root

    @property
    def settings_path(self) -> Path:
        return self._settings_path

    def configure(self, search: SearchSettings) -> None:
        self._exclude_folders = tuple(search.exclude_folders)
        self._exclude_files = tuple(search.exclude_files)
        self._max_file_size = search.max_file_size

    def normalize(self, path: str | Path) -> str:
        candidate = Path(path)
        if not candidate.is_absolute():
            candidate = self._root / candidate
        return os.path.normpath(candidate)

    def in_scope(self, path: str | Path) -> bool:
        try:
            relative = Path(self.normalize(path)).relative_to(self._root)
        except ValueError:
            return False
        if not relative.parts:
            return False
        if any(_matches_any(part, self._exclude_folders) for part in relative.parts[:-1]):
            return False
        return not _matches_any(relative.name, self._exclude_files)

    def is_file(self, path: str | Path) -> bool:
        return Path(self.normalize(path)).is_file()

    def accepts(self, path: str | Path) -> bool:
        """Whether a full scan would pick up *path*."""
        file_path = self.normalize(path)
        if file_path == str(self._settings_path):
            return False
        if not self.in_scope(file_path) or not self.is_file(file_path):
            return False
        return not (self._max_file_size and self._too_large(file_path))

    async def list_files(self) -> list[str]:
        return await asyncio.to_thread(self._walk)

    async def read_text(self, path: str) -> str:
        return await asyncio.to_thread(read_document, path)

    def _walk(self) -> list[str]:
        files: list[str] = []
        settings_path = str(self._settings_path)
        for dirpath, dirnames, filenames in os.walk(self._root):
            dirnames[:] = sorted(d for d in dirnames if not _matches_any(d, self._exclude_folders))
            for filename in sorted(filenames):
                if _matches_any(filename, self._exclude_files):
                    continue
                full_path = os.path.join(dirpath, filename)
                if full_path == settings_path:
                    continue
                if self._max_file_size and self._too_large(full_path):
                    continue
                files.append(full_path)
        logger.debug("Enumerated %d file(s) under %s", len(files), self._root)
        return files

    def _too_large(self, path: str) -> bool:
        try:
            return os.path.getsize(path) > self._max_file_size
        except OSError:
            return True
