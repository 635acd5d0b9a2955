"""TOML configuration helpers shared by quizdrill commands.

Config files are layered onto a table of defaults. The defaults decide which
keys exist and what type each leaf holds; a leaf whose default is ``None``
takes its type from the ``types`` mapping instead (keyed by dotted path).
Free-form tables such as ``[modes.*]`` are split off before the merge via
``passthrough`` and validated by their owner.
"""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any, Iterable, Mapping, MutableMapping, Optional, Union

__all__ = [
    "TomlConfigError",
    "LeafTypes",
    "load_toml",
    "load_sections",
    "merge_defaults",
    "write_toml_template",
]

LeafType = Union[type, tuple[type, ...]]
LeafTypes = Mapping[str, LeafType]

_TYPE_NAMES = {
    bool: "a boolean",
    int: "an integer",
    float: "a number",
    str: "a string",
}


class TomlConfigError(RuntimeError):
    """Raised when TOML config IO or validation fails."""


def load_toml(path: Path) -> Mapping[str, Any]:
    """Load a TOML document from ``path``.

    Errors are surfaced as :class:`TomlConfigError` so callers can translate
    them into command-specific exceptions.
    """

    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except FileNotFoundError as exc:
        raise TomlConfigError(f"Config file not found: {path}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise TomlConfigError(f"Failed to parse config TOML: {exc}") from exc


def load_sections(
    path: Path,
    defaults: MutableMapping[str, Any],
    *,
    types: Optional[LeafTypes] = None,
    passthrough: Iterable[str] = (),
) -> dict[str, Mapping[str, Any]]:
    """Merge the document at ``path`` into ``defaults`` in place.

    Top-level tables named in ``passthrough`` skip the merge and are
    returned as-is, keyed by name.
    """

    document = dict(load_toml(path))
    extras: dict[str, Mapping[str, Any]] = {}
    for name in passthrough:
        if name not in document:
            continue
        table = document.pop(name)
        if not isinstance(table, Mapping):
            raise TomlConfigError(
                f"Expected table for '{name}', found {type(table).__name__}."
            )
        extras[name] = table
    merge_defaults(defaults, document, types=types)
    return extras


def merge_defaults(
    base: MutableMapping[str, Any],
    override: Mapping[str, Any],
    *,
    path: str = "",
    types: Optional[LeafTypes] = None,
) -> None:
    """Recursively merge ``override`` into ``base``.

    Unknown keys, scalars in place of tables and leaves of the wrong type
    raise :class:`TomlConfigError` naming the dotted key.
    """

    for key, value in override.items():
        dotted = f"{path}{key}"
        if key not in base:
            raise TomlConfigError(f"Unknown configuration key '{dotted}'.")
        base_value = base[key]
        if isinstance(base_value, MutableMapping):
            if not isinstance(value, Mapping):
                raise TomlConfigError(
                    f"Expected table for '{dotted}', found "
                    f"{type(value).__name__}."
                )
            merge_defaults(base_value, value, path=f"{dotted}.", types=types)
            continue
        expected = _leaf_type(dotted, base_value, types)
        if expected is not None and not _matches(value, expected):
            raise TomlConfigError(
                f"Expected {_describe(expected)} for '{dotted}', found "
                f"{type(value).__name__}."
            )
        base[key] = value


def _leaf_type(
    dotted: str, default: object, types: Optional[LeafTypes]
) -> Optional[LeafType]:
    if types is not None and dotted in types:
        return types[dotted]
    if default is None:
        return None
    return type(default)


def _matches(value: object, expected: LeafType) -> bool:
    kinds = expected if isinstance(expected, tuple) else (expected,)
    # bool is an int subclass; ``count = true`` must not pass as a number.
    if isinstance(value, bool):
        return bool in kinds
    return isinstance(value, kinds)


def _describe(expected: LeafType) -> str:
    kinds = expected if isinstance(expected, tuple) else (expected,)
    return " or ".join(
        _TYPE_NAMES.get(kind, kind.__name__) for kind in kinds
    )


def write_toml_template(
    path: Path,
    *,
    template: str,
    overwrite: bool = False,
    mode: int = 0o600,
) -> Path:
    """Write ``template`` to ``path``, refusing to clobber unless asked."""

    path.parent.mkdir(parents=True, exist_ok=True)
    if path.exists() and not overwrite:
        raise TomlConfigError(f"Config already exists: {path}")
    path.write_text(template, encoding="utf-8")
    try:
        path.chmod(mode)
    except PermissionError:  # pragma: no cover - depends on filesystem
        pass
    return path
