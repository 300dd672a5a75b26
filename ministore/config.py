"""Store options with YAML support."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any
from urllib.parse import unquote

import yaml
from pydantic import BaseModel, ConfigDict, Field, model_validator


JOURNAL_MODE_WAL = "PRAGMA journal_mode = WAL"

_MEMORY_DATABASE = ":memory:"


class StoreOptions(BaseModel):
    """Connection descriptor plus the commands to run once after bootstrap.

    ``database`` is handed to ``sqlite3.connect``: a file path, or a SQLite
    ``file:`` URI when ``uri`` is set. ``uri`` defaults to ``True`` for
    descriptors that start with ``file:``.
    """

    model_config = ConfigDict(frozen=True)

    database: str = Field(min_length=1)
    uri: bool = False
    # Seconds SQLite waits on a locked database before raising.
    timeout: float = Field(default=5.0, ge=0)
    pre_commands: tuple[str, ...] = ()

    @model_validator(mode="before")
    @classmethod
    def infer_uri(cls, data: Any) -> Any:
        if isinstance(data, Mapping) and "uri" not in data:
            database = data.get("database")
            if isinstance(database, str) and database.startswith("file:"):
                return {**data, "uri": True}
        return data

    @classmethod
    def from_path(cls, path: str | Path, *, journal_mode_wal: bool = False) -> "StoreOptions":
        pre_commands = (JOURNAL_MODE_WAL,) if journal_mode_wal else ()
        return cls(database=str(path), uri=False, pre_commands=pre_commands)

    def with_pre_command(self, sql: str) -> "StoreOptions":
        """Return a copy with ``sql`` appended to the pre-commands."""
        return self.model_copy(update={"pre_commands": (*self.pre_commands, sql)})

    def file_path(self) -> Path | None:
        """Filesystem path of the database, or None for in-memory databases."""
        if not self.uri:
            if self.database == _MEMORY_DATABASE:
                return None
            return Path(self.database)
        location, _, query = self.database.removeprefix("file:").partition("?")
        if "mode=memory" in query.split("&") or location in ("", _MEMORY_DATABASE):
            return None
        return Path(unquote(location))


def load_options(yaml_path: str | Path) -> StoreOptions:
    """Load store options from a YAML file.

    Args:
        yaml_path: Path to YAML options file

    Returns:
        StoreOptions instance

    Raises:
        FileNotFoundError: If YAML file doesn't exist
        ValueError: If YAML is invalid or missing required fields
    """
    yaml_path = Path(yaml_path)

    if not yaml_path.exists():
        raise FileNotFoundError(f"Options file not found: {yaml_path}")

    with open(yaml_path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Malformed YAML in {yaml_path}: {e}") from e

    if not data:
        raise ValueError(f"Empty or invalid YAML file: {yaml_path}")

    try:
        return StoreOptions.model_validate(data)
    except Exception as e:
        raise ValueError(f"Invalid options in {yaml_path}: {e}") from e


def save_options(options: StoreOptions, yaml_path: str | Path) -> None:
    """Save store options to a YAML file."""
    yaml_path = Path(yaml_path)
    yaml_path.parent.mkdir(parents=True, exist_ok=True)

    data = options.model_dump(mode="json")

    with open(yaml_path, "w", encoding="utf-8") as f:
        yaml.dump(data, f, default_flow_style=False, sort_keys=False, indent=2)
