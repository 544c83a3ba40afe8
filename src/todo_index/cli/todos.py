import asyncio
import os
from collections.abc import Sequence
from enum import Enum
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from todo_index.core.coordinator import ChangeCoordinator
from todo_index.core.events import EventBus
from todo_index.core.query import count_by_tag, count_tags, render_entries
from todo_index.core.state import ExpandedState, HiddenTags
from todo_index.db.memory import InMemoryTodoIndex
from todo_index.models import FileEntry
from todo_index.settings import Scope, load_settings
from todo_index.workspace.filesystem import FilesystemWorkspace

console = Console()


class ScopeOption(str, Enum):
    project = "project"
    current = "current"


RootArgument = Annotated[
    Path,
    typer.Argument(help="Project root to scan.", exists=True, file_okay=False, dir_okay=True, resolve_path=True),
]


def _build_coordinator(root: Path) -> ChangeCoordinator:
    workspace = FilesystemWorkspace(root)
    settings_path = workspace.settings_path
    return ChangeCoordinator(
        InMemoryTodoIndex(),
        workspace,
        EventBus(),
        settings_loader=lambda: load_settings(settings_path),
    )


async def _prepare(
    coordinator: ChangeCoordinator,
    scope: Scope | None = None,
    file: Path | None = None,
) -> None:
    await coordinator.load_settings()
    if file is not None:
        await coordinator.set_active_document(str(file))
    if scope is not None:
        await coordinator.set_scope(scope)


def _display_path(path: str, root: Path) -> str:
    try:
        return os.path.relpath(path, root)
    except ValueError:
        return path


def render_snapshot(
    coordinator: ChangeCoordinator,
    root: Path,
    hidden: HiddenTags,
    expanded: ExpandedState | None,
    sort_done_last: bool | None = None,
) -> None:
    entries = coordinator.index.entries()
    if sort_done_last is None:
        sort_done_last = coordinator.settings.sort_done_last
    rendered = render_entries(entries, hidden_tags=hidden, expanded=expanded, sort_done_last=sort_done_last)
    colors = {tag.name: tag.color for tag in coordinator.registry.tags()}

    if rendered:
        console.print(_build_tree(rendered, root, colors))
    else:
        console.print("[dim]No todos found.[/dim]")

    summary = []
    for name, tag_count in count_tags(entries, coordinator.registry).items():
        style = "dim strike" if name in hidden else colors.get(name) or "bold"
        summary.append(f"[{style}]{escape(name)}[/{style}] {tag_count}")
    if summary:
        console.print("  ".join(summary))


def _build_tree(entries: Sequence[FileEntry], root: Path, colors: dict[str, str | None]) -> Tree:
    tree = Tree(f"[bold]{escape(str(root))}[/bold]")
    for entry in entries:
        label = f"{escape(_display_path(entry.path, root))} [dim]({len(entry.comments)})[/dim]"
        branch = tree.add(label)
        if not entry.expanded:
            continue
        for comment in entry.comments:
            style = colors.get(comment.tag) or "bold"
            text = escape(comment.text)
            if comment.done:
                text = f"[strike]{text}[/strike]"
            branch.add(f"[dim]{comment.line}:{comment.char}[/dim] [{style}]{escape(comment.tag)}[/{style}] {text}")
    return tree


def list_todos(
    root: RootArgument = Path("."),
    scope: Annotated[ScopeOption | None, typer.Option(help="Search the whole project or only --file.")] = None,
    file: Annotated[Path | None, typer.Option(help="Active document for the 'current' scope.")] = None,
    hide: Annotated[list[str] | None, typer.Option(help="Tag to hide (repeatable).")] = None,
    sort_done_last: Annotated[
        bool | None, typer.Option("--sort-done-last/--no-sort-done-last", help="Show done todos last.")
    ] = None,
    expand: Annotated[bool, typer.Option("--expand/--collapse", help="Show comments under each file.")] = True,
) -> None:
    """List todo comments grouped by file."""
    if scope is ScopeOption.current and file is None:
        raise typer.BadParameter("--file is required with --scope current", param_hint="--file")

    coordinator = _build_coordinator(root)
    asyncio.run(_prepare(coordinator, scope.value if scope else None, file))

    hidden = HiddenTags()
    hidden.save_hidden(hide or [])
    expanded = ExpandedState()
    if expand:
        expanded.save_expanded(entry.path for entry in coordinator.index.entries())
    render_snapshot(coordinator, root, hidden, expanded, sort_done_last)


def count(
    root: RootArgument = Path("."),
    tag: Annotated[str | None, typer.Option(help="Only count this tag.")] = None,
) -> None:
    """Count todo comments per tag."""
    coordinator = _build_coordinator(root)
    asyncio.run(_prepare(coordinator))

    entries = coordinator.index.entries()
    if tag is not None:
        counts = {tag: count_by_tag(entries, tag, case_sensitive=coordinator.registry.case_sensitive)}
    else:
        counts = count_tags(entries, coordinator.registry)

    table = Table(show_lines=False)
    table.add_column("tag")
    table.add_column("count", justify="right")
    for name, value in counts.items():
        table.add_row(name, str(value))
    console.print(table)
    console.print(f"({sum(counts.values())} todos in {sum(1 for e in entries if e.has_todos())} files)")
