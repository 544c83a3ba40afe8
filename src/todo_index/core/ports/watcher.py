from typing import Protocol


class FileWatcherPort(Protocol):
    async def start(self) -> None: ...

    async def stop(self) -> None: ...


class ChangeHandler(Protocol):
    async def file_modified(self, path: str) -> None: ...

    async def file_deleted(self, path: str) -> None: ...

    async def file_renamed(self, old_path: str, new_path: str) -> None: ...
