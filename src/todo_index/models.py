from pydantic import BaseModel, Field


class Tag(BaseModel):
    name: str
    pattern: str | None = None
    color: str | None = None


class Comment(BaseModel):
    file_path: str
    tag: str
    line: int = Field(ge=1)
    char: int = Field(ge=0)
    text: str = ""
    done: bool = False


class FileEntry(BaseModel):
    path: str
    comments: list[Comment] = Field(default_factory=list)
    expanded: bool = False

    def has_todos(self) -> bool:
        return len(self.comments) > 0
