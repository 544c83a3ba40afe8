"""Per-session presentation state kept apart from extraction results."""

from collections.abc import Iterable


class ExpandedState:
    """Which file paths are expanded in the presentation."""

    def __init__(self, expanded: Iterable[str] = ()) -> None:
        self._expanded: set[str] = set(expanded)

    def is_expanded(self, path: str) -> bool:
        return path in self._expanded

    def save_expanded(self, paths: Iterable[str]) -> None:
        self._expanded = set(paths)


class HiddenTags:
    """Names of tags hidden from the presentation."""

    def __init__(self, hidden: Iterable[str] = ()) -> None:
        self._hidden: set[str] = set(hidden)

    def save_hidden(self, tag_names: Iterable[str]) -> None:
        self._hidden = set(tag_names)

    def __contains__(self, tag_name: object) -> bool:
        return tag_name in self._hidden
