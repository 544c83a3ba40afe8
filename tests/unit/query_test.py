"""Unit tests for the read-only query layer."""

from todo_index.core.query import (
    apply_expanded,
    count_by_tag,
    count_tags,
    filter_visible,
    render_entries,
    sort_within_file,
)
from todo_index.core.state import ExpandedState, HiddenTags
from todo_index.core.tags import TagRegistry
from todo_index.models import Comment, FileEntry


def _entry(path: str, *comments: tuple[str, int, bool]) -> FileEntry:
    return FileEntry(
        path=path,
        comments=[
            Comment(file_path=path, tag=tag, line=line, char=0, text=f"{tag} {line}", done=done)
            for tag, line, done in comments
        ],
    )


def _entries() -> list[FileEntry]:
    return [
        _entry("/p/a.js", ("TODO", 1, False), ("FIXME", 4, True), ("TODO", 9, False)),
        _entry("/p/b.js", ("FIXME", 2, False)),
        _entry("/p/c.js", ("NOTE", 3, False), ("TODO", 5, True)),
    ]


class TestFilterVisible:
    def test_nothing_hidden_keeps_everything(self) -> None:
        entries = _entries()
        assert filter_visible(entries, HiddenTags()) == entries

    def test_hidden_tag_comments_are_removed(self) -> None:
        result = filter_visible(_entries(), {"FIXME"})

        assert [e.path for e in result] == ["/p/a.js", "/p/c.js"]
        assert [c.tag for c in result[0].comments] == ["TODO", "TODO"]

    def test_file_with_only_hidden_tags_is_dropped(self) -> None:
        result = filter_visible(_entries(), {"TODO", "FIXME"})
        assert [e.path for e in result] == ["/p/c.js"]

    def test_reshowing_a_tag_restores_only_its_comments(self) -> None:
        hidden = HiddenTags(["TODO", "FIXME", "NOTE"])
        assert filter_visible(_entries(), hidden) == []

        hidden.save_hidden(["TODO", "NOTE"])
        result = filter_visible(_entries(), hidden)

        assert [e.path for e in result] == ["/p/a.js", "/p/b.js"]
        assert all(c.tag == "FIXME" for e in result for c in e.comments)

    def test_empty_entries_are_not_rendered(self) -> None:
        entries = [FileEntry(path="/p/empty.js"), *_entries()]
        assert [e.path for e in filter_visible(entries, set())] == ["/p/a.js", "/p/b.js", "/p/c.js"]

    def test_does_not_mutate_input(self) -> None:
        entries = _entries()
        filter_visible(entries, {"TODO"})
        assert len(entries[0].comments) == 3


class TestSortWithinFile:
    def test_disabled_keeps_line_order(self) -> None:
        entries = _entries()
        result = sort_within_file(entries, sort_done_last=False)
        assert [c.line for c in result[0].comments] == [1, 4, 9]

    def test_done_comments_go_last(self) -> None:
        result = sort_within_file(_entries(), sort_done_last=True)

        assert [(c.line, c.done) for c in result[0].comments] == [(1, False), (9, False), (4, True)]
        assert [(c.line, c.done) for c in result[2].comments] == [(3, False), (5, True)]

    def test_line_order_is_kept_within_each_group(self) -> None:
        entry = _entry(
            "/p/d.js",
            ("TODO", 8, True),
            ("TODO", 2, True),
            ("TODO", 6, False),
            ("TODO", 1, False),
        )
        [result] = sort_within_file([entry], sort_done_last=True)
        assert [(c.line, c.done) for c in result.comments] == [(1, False), (6, False), (2, True), (8, True)]

    def test_does_not_mutate_input(self) -> None:
        entries = _entries()
        sort_within_file(entries, sort_done_last=True)
        assert [c.line for c in entries[0].comments] == [1, 4, 9]


class TestCounts:
    def test_count_by_tag(self) -> None:
        entries = _entries()
        assert count_by_tag(entries, "TODO") == 3
        assert count_by_tag(entries, "FIXME") == 2
        assert count_by_tag(entries, "HACK") == 0

    def test_count_ignores_visibility(self) -> None:
        entries = _entries()
        visible = filter_visible(entries, {"FIXME"})
        assert count_by_tag(entries, "FIXME") == 2
        assert count_by_tag(visible, "FIXME") == 0

    def test_count_case_handling(self) -> None:
        entries = _entries()
        assert count_by_tag(entries, "fixme") == 0
        assert count_by_tag(entries, "fixme", case_sensitive=False) == 2

    def test_count_tags_follows_registry_order(self, registry: TagRegistry) -> None:
        counts = count_tags(_entries(), registry)
        assert list(counts.items()) == [("TODO", 3), ("FIXME", 2), ("NOTE", 1)]


class TestExpandedAndRender:
    def test_apply_expanded_uses_state(self) -> None:
        state = ExpandedState(["/p/b.js"])
        result = apply_expanded(_entries(), state)
        assert [e.expanded for e in result] == [False, True, False]

    def test_render_pipeline(self) -> None:
        entries = _entries()
        result = render_entries(
            entries,
            hidden_tags=HiddenTags(["NOTE"]),
            expanded=ExpandedState(["/p/c.js"]),
            sort_done_last=True,
        )

        assert [(e.path, e.expanded) for e in result] == [
            ("/p/a.js", False),
            ("/p/b.js", False),
            ("/p/c.js", True),
        ]
        assert [c.line for c in result[0].comments] == [1, 9, 4]
        assert [c.tag for c in result[2].comments] == ["TODO"]
        assert entries[2].expanded is False
