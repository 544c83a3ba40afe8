from pathlib import Path
from typing import Protocol

from todo_index.settings import SearchSettings


class DocumentSource(Protocol):
    @property
    def root(self) -> Path: ...

    @property
    def settings_path(self) -> Path: ...

    def configure(self, search: SearchSettings) -> None: ...

    def normalize(self, path: str | Path) -> str: ...

    def in_scope(self, path: str | Path) -> bool: ...

    def accepts(self, path: str | Path) -> bool: ...

    async def list_files(self) -> list[str]: ...

    async def read_text(self, path: str) -> str: ...
