"""Settings for a todo-index workspace.

Settings are read from a ``.todo`` JSON file in the workspace root::

    {
      "tags": ["TODO", {"name": "FIXME", "color": "red"}],
      "case": false,
      "search": {"scope": "project", "excludeFolders": ["node_modules"]},
      "sort": {"done": true}
    }
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from todo_index.models import Tag

logger = logging.getLogger(__name__)

SETTINGS_FILE_NAME = ".todo"
SETTINGS_ENV_VAR = "TODO_INDEX_SETTINGS"

DEFAULT_TAGS = ("TODO", "NOTE", "FIXME", "CHANGES", "FUTURE")
DEFAULT_EXCLUDE_FOLDERS = (".git", "node_modules", "__pycache__", ".venv")
DEFAULT_MAX_FILE_SIZE = 100_000

Scope = Literal["project", "current"]


class SearchSettings(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    scope: Scope = "project"
    exclude_folders: list[str] = Field(default_factory=lambda: list(DEFAULT_EXCLUDE_FOLDERS), alias="excludeFolders")
    exclude_files: list[str] = Field(default_factory=list, alias="excludeFiles")
    max_file_size: int = Field(default=DEFAULT_MAX_FILE_SIZE, alias="maxFileSize", ge=0)


class SortSettings(BaseModel):
    done: bool = False


class TodoSettings(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    tags: list[Tag] = Field(default_factory=lambda: [Tag(name=name) for name in DEFAULT_TAGS])
    case_sensitive: bool = Field(default=False, alias="case")
    search: SearchSettings = Field(default_factory=SearchSettings)
    sort: SortSettings = Field(default_factory=SortSettings)

    @field_validator("tags", mode="before")
    @classmethod
    def _coerce_tags(cls, value: Any) -> Any:
        # Plain strings are shorthand for {"name": ...}.
        if isinstance(value, list):
            return [{"name": item} if isinstance(item, str) else item for item in value]
        return value

    @property
    def scope(self) -> Scope:
        return self.search.scope

    @property
    def sort_done_last(self) -> bool:
        return self.sort.done


def settings_path_for(root: str | Path) -> Path:
    override = os.getenv(SETTINGS_ENV_VAR)
    if override:
        path = Path(override)
        return path if path.is_absolute() else Path(root) / path
    return Path(root) / SETTINGS_FILE_NAME


def parse_settings(raw: str) -> TodoSettings:
    """Parse the contents of a settings file.

    Invalid content does not raise: the defaults are used for every option and
    the tag list is emptied, so nothing is matched until the file is fixed.
    """
    try:
        return TodoSettings.model_validate(json.loads(raw))
    except (json.JSONDecodeError, ValidationError) as exc:
        logger.warning("Ignoring malformed settings: %s", exc)
        return TodoSettings(tags=[])


def load_settings(path: str | Path) -> TodoSettings:
    settings_file = Path(path)
    try:
        raw = settings_file.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.debug("No settings file at %s, using defaults", settings_file)
        return TodoSettings()
    except OSError as exc:
        logger.warning("Could not read settings file %s: %s", settings_file, exc)
        return TodoSettings()
    return parse_settings(raw)
