"""Static game-mode table mapping mode names to their data files."""

from __future__ import annotations

from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Optional

__all__ = [
    "BUILTIN_MODES",
    "GameMode",
    "ModeConfigError",
    "UnknownModeError",
    "build_mode_table",
    "resolve_mode",
]

DATA_PACKAGE = "quizdrill.data"


class UnknownModeError(KeyError):
    """Raised when a mode name is not present in the mode table."""

    def __init__(self, name: str, available: tuple[str, ...]) -> None:
        super().__init__(name)
        self.name = name
        self.available = available

    def __str__(self) -> str:
        choices = ", ".join(self.available) or "(none)"
        return f"Invalid game mode '{self.name}'. Available modes: {choices}."


class ModeConfigError(ValueError):
    """Raised when a configured ``[modes.<name>]`` table is invalid."""


@dataclass(frozen=True)
class GameMode:
    """A named drill with a human description and its data file."""

    name: str
    description: str
    data_path: Path


def _packaged(filename: str) -> Path:
    return Path(str(resources.files(DATA_PACKAGE).joinpath(filename)))


BUILTIN_MODES: Mapping[str, GameMode] = MappingProxyType(
    {
        mode.name: mode
        for mode in (
            GameMode(
                "katakana",
                "basic katakana quiz",
                _packaged("katakana-simple.quiz"),
            ),
            GameMode(
                "katakana-fancy",
                "fancy katakana quiz",
                _packaged("katakana-fancy.quiz"),
            ),
            GameMode(
                "katakana-transcription",
                "katakana to romaji transcription quiz",
                _packaged("katakana-transcription.csv"),
            ),
        )
    }
)


def build_mode_table(
    extra: Optional[Mapping[str, Any]] = None,
    *,
    base_dir: Optional[Path] = None,
) -> Mapping[str, GameMode]:
    """Return built-in modes merged with configured ``extra`` modes.

    ``extra`` maps mode names to tables with ``path`` and an optional
    ``description``. Relative paths resolve against ``base_dir`` (the
    workspace home) or the current directory. Configured modes replace
    built-ins of the same name.
    """

    table: dict[str, GameMode] = dict(BUILTIN_MODES)
    for raw_name, entry in (extra or {}).items():
        name = str(raw_name).strip().lower()
        if not name:
            raise ModeConfigError("Mode names must be non-empty.")
        if not isinstance(entry, Mapping):
            raise ModeConfigError(f"[modes.{raw_name}] must be a table.")
        raw_path = entry.get("path")
        if not isinstance(raw_path, str) or not raw_path.strip():
            raise ModeConfigError(
                f"[modes.{raw_name}] requires a non-empty 'path' string."
            )
        path = Path(raw_path.strip()).expanduser()
        if not path.is_absolute():
            path = (base_dir or Path.cwd()) / path
        description = str(entry.get("description", "")).strip()
        table[name] = GameMode(name, description or f"{name} quiz", path)
    return MappingProxyType(table)


def resolve_mode(
    name: str, table: Mapping[str, GameMode] = BUILTIN_MODES
) -> GameMode:
    """Look up ``name`` case-insensitively in ``table``."""

    wanted = name.strip().lower()
    for key, mode in table.items():
        if key.lower() == wanted:
            return mode
    raise UnknownModeError(name, tuple(table))
