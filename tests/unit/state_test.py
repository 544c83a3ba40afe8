from todo_index.core.state import ExpandedState, HiddenTags


class TestExpandedState:
    def test_collapsed_by_default(self) -> None:
        assert ExpandedState().is_expanded("/p/a.js") is False

    def test_save_expanded_replaces_set(self) -> None:
        state = ExpandedState(["/p/a.js"])
        state.save_expanded(["/p/b.js", "/p/c.js"])
        assert state.is_expanded("/p/a.js") is False
        assert state.is_expanded("/p/c.js") is True


class TestHiddenTags:
    def test_all_visible_by_default(self) -> None:
        assert "TODO" not in HiddenTags()

    def test_save_hidden_replaces_set(self) -> None:
        hidden = HiddenTags(["TODO"])
        hidden.save_hidden(["NOTE"])
        assert "NOTE" in hidden
        assert "TODO" not in hidden
