from pathlib import Path

from todo_index.core.tags import TagRegistry
from todo_index.models import Comment


class UnreadableFileError(OSError):
    """Raised when a file cannot be read as text."""


def extract_comments(file_path: str, text: str, registry: TagRegistry) -> list[Comment]:
    """Return the tagged comments found in *text*, in line order.

    Each line is matched against the tags in registry order and only the first
    matching tag is recorded for that line.
    """
    comments: list[Comment] = []
    if not text or registry.is_empty:
        return comments

    matchers = [(tag.name, registry.pattern_for(tag)) for tag in registry.tags()]

    for line_number, line in enumerate(text.splitlines(), start=1):
        for tag_name, pattern in matchers:
            if pattern is None:
                continue
            match = pattern.search(line)
            if match is None:
                continue
            comments.append(
                Comment(
                    file_path=file_path,
                    tag=tag_name,
                    line=line_number,
                    char=match.start("tag"),
                    text=match.group("text").strip(),
                    done=match.group("done") is not None,
                )
            )
            break

    return comments


def read_document(path: str | Path) -> str:
    file_path = Path(path)
    try:
        text = file_path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise UnreadableFileError(f"Not a UTF-8 text file: {path}") from exc
    if "\x00" in text:
        raise UnreadableFileError(f"Binary content in file: {path}")
    return text
