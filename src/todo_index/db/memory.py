from collections.abc import Iterable, Iterator

from todo_index.models import Comment, FileEntry


class InMemoryTodoIndex:
    """Ordered mapping of file path to :class:`FileEntry`.

    Iteration order is the order in which paths were first stored.  Replacing
    an entry keeps its position.
    """

    def __init__(self, entries: Iterable[FileEntry] = ()) -> None:
        self._files: dict[str, FileEntry] = {}
        self.replace_all(entries)

    def upsert(self, file_path: str, comments: Iterable[Comment]) -> FileEntry:
        previous = self._files.get(file_path)
        entry = FileEntry(
            path=file_path,
            comments=list(comments),
            expanded=previous.expanded if previous is not None else False,
        )
        # Assigning to an existing key keeps its insertion position.
        self._files[file_path] = entry
        return entry

    def remove(self, file_path: str) -> bool:
        return self._files.pop(file_path, None) is not None

    def replace_all(self, entries: Iterable[FileEntry]) -> None:
        files: dict[str, FileEntry] = {}
        for entry in entries:
            files[entry.path] = entry
        self._files = files

    def entries(self) -> tuple[FileEntry, ...]:
        return tuple(self._files.values())

    def get(self, file_path: str) -> FileEntry | None:
        return self._files.get(file_path)

    def paths(self) -> list[str]:
        return list(self._files)

    def __contains__(self, file_path: object) -> bool:
        return file_path in self._files

    def __iter__(self) -> Iterator[FileEntry]:
        return iter(self.entries())

    def __len__(self) -> int:
        return len(self._files)
