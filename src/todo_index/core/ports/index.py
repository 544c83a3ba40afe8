from collections.abc import Iterable, Sequence
from typing import Protocol

from todo_index.models import Comment, FileEntry


class TodoStore(Protocol):
    def upsert(self, file_path: str, comments: Iterable[Comment]) -> FileEntry: ...

    def remove(self, file_path: str) -> bool: ...

    def replace_all(self, entries: Iterable[FileEntry]) -> None: ...

    def entries(self) -> Sequence[FileEntry]: ...

    def get(self, file_path: str) -> FileEntry | None: ...
