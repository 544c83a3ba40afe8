import logging
import re
from collections.abc import Iterable

from todo_index.models import Tag
from todo_index.settings import TodoSettings

logger = logging.getLogger(__name__)

# Line and block comment leaders: // # /* * <!-- -- ; %
_COMMENT_LEADER = r"(?:/\*+|/{2,}|#+|<!--|-{2,}|;+|%+|\*)"
_DONE_MARK = "~~"


def _build_pattern(tag_body: str) -> str:
    return (
        rf"{_COMMENT_LEADER}[ \t]*@?"
        rf"(?P<done>{re.escape(_DONE_MARK)})?"
        rf"(?P<tag>{tag_body})(?!\w)"
        r"[ \t]*:?[ \t]*"
        r"(?P<text>.*?)"
        rf"[ \t]*(?:{re.escape(_DONE_MARK)})?"
        r"[ \t]*(?:\*+/|-->)?[ \t]*$"
    )


class TagRegistry:
    """Ordered set of configured tags and their compiled matchers."""

    def __init__(self, tags: Iterable[Tag] = (), case_sensitive: bool = False) -> None:
        self.case_sensitive = case_sensitive
        self._tags: tuple[Tag, ...] = ()
        self._patterns: dict[str, re.Pattern[str]] = {}

        candidates = tuple(tags)
        try:
            patterns = self._compile(candidates)
        except (ValueError, re.error) as exc:
            logger.warning("Tag configuration is invalid, no tags will be matched: %s", exc)
            return

        self._tags = candidates
        self._patterns = patterns

    def _compile(self, tags: tuple[Tag, ...]) -> dict[str, re.Pattern[str]]:
        flags = 0 if self.case_sensitive else re.IGNORECASE
        patterns: dict[str, re.Pattern[str]] = {}
        for tag in tags:
            name = tag.name.strip()
            if not name:
                raise ValueError("tag name must not be empty")
            body = tag.pattern if tag.pattern else re.escape(name)
            patterns[tag.name] = re.compile(_build_pattern(body), flags)
        return patterns

    @classmethod
    def from_settings(cls, settings: TodoSettings) -> "TagRegistry":
        return cls(settings.tags, case_sensitive=settings.case_sensitive)

    @property
    def is_empty(self) -> bool:
        return not self._tags

    def tags(self) -> tuple[Tag, ...]:
        return self._tags

    def names(self) -> list[str]:
        return [tag.name for tag in self._tags]

    def pattern_for(self, tag: Tag | str) -> re.Pattern[str] | None:
        name = tag.name if isinstance(tag, Tag) else tag
        return self._patterns.get(name)

    def __len__(self) -> int:
        return len(self._tags)
