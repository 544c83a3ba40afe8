import asyncio
from pathlib import Path

from rich.console import Console

from todo_index.cli.todos import RootArgument, _build_coordinator, render_snapshot
from todo_index.core.events import TODOS_UPDATED
from todo_index.core.state import ExpandedState, HiddenTags
from todo_index.watcher.watchfiles_adapter import WatchfilesWatcher

console = Console()


async def _wait_until_interrupted() -> None:
    await asyncio.Event().wait()


def watch(root: RootArgument = Path(".")) -> None:
    """Scan ROOT, then re-list todos whenever files change."""
    coordinator = _build_coordinator(root)
    hidden = HiddenTags()
    expanded = ExpandedState()

    def _on_updated() -> None:
        console.rule("todos")
        expanded.save_expanded(entry.path for entry in coordinator.index.entries())
        render_snapshot(coordinator, root, hidden, expanded)

    coordinator.events.subscribe(TODOS_UPDATED, _on_updated)

    async def _run() -> None:
        await coordinator.load_settings()
        watcher = WatchfilesWatcher(root, coordinator)
        await watcher.start()
        try:
            await _wait_until_interrupted()
        finally:
            await watcher.stop()

    try:
        asyncio.run(_run())
    except KeyboardInterrupt:
        console.print("[yellow]Stopped watching[/yellow]")
