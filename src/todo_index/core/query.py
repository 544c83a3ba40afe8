"""Read-only projections over the todo index.

Every function here returns new objects; stored entries are never mutated.
"""

from collections.abc import Container, Iterable, Sequence

from todo_index.core.state import ExpandedState
from todo_index.core.tags import TagRegistry
from todo_index.models import Comment, FileEntry


def filter_visible(entries: Iterable[FileEntry], hidden_tags: Container[str]) -> list[FileEntry]:
    """Drop comments whose tag is hidden, and files left without comments."""
    visible: list[FileEntry] = []
    for entry in entries:
        comments = [comment for comment in entry.comments if comment.tag not in hidden_tags]
        if comments:
            visible.append(entry.model_copy(update={"comments": comments}))
    return visible


def _done_last_key(comment: Comment) -> tuple[bool, int]:
    return (comment.done, comment.line)


def sort_within_file(entries: Iterable[FileEntry], sort_done_last: bool) -> list[FileEntry]:
    if not sort_done_last:
        return list(entries)
    return [
        entry.model_copy(update={"comments": sorted(entry.comments, key=_done_last_key)})
        for entry in entries
    ]


def count_by_tag(entries: Iterable[FileEntry], tag_name: str, case_sensitive: bool = True) -> int:
    if case_sensitive:
        return sum(1 for entry in entries for comment in entry.comments if comment.tag == tag_name)
    wanted = tag_name.casefold()
    return sum(1 for entry in entries for comment in entry.comments if comment.tag.casefold() == wanted)


def count_tags(entries: Iterable[FileEntry], registry: TagRegistry) -> dict[str, int]:
    """Count comments per configured tag, in registry order."""
    snapshot: Sequence[FileEntry] = list(entries)
    return {
        tag.name: count_by_tag(snapshot, tag.name, case_sensitive=registry.case_sensitive)
        for tag in registry.tags()
    }


def apply_expanded(entries: Iterable[FileEntry], expanded: ExpandedState) -> list[FileEntry]:
    return [entry.model_copy(update={"expanded": expanded.is_expanded(entry.path)}) for entry in entries]


def render_entries(
    entries: Iterable[FileEntry],
    *,
    hidden_tags: Container[str] = frozenset(),
    expanded: ExpandedState | None = None,
    sort_done_last: bool = False,
) -> list[FileEntry]:
    """Filter, sort and attach expanded state, in that order, for display."""
    result = sort_within_file(filter_visible(entries, hidden_tags), sort_done_last)
    if expanded is not None:
        result = apply_expanded(result, expanded)
    return result
