"""Configuration loader for the play, check and modes commands."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, MutableMapping, Optional

from quizdrill import modes as modes_mod
from quizdrill.core import config as core_config
from quizdrill.core import workspace as workspace_mod

CONFIG_FILENAME = "quizdrill.toml"
CONFIG_ENV = "QUIZDRILL_CONFIG"
ENV_PREFIX = "QUIZDRILL_"

_DEFAULT_LOG_LEVEL = "INFO"
_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}
# Leaves defaulting to None carry no type of their own.
_LEAF_TYPES = {"session.seed": int}


class PlayConfigError(RuntimeError):
    """Raised when configuration parsing or validation fails."""


@dataclass(frozen=True)
class PlayConfig:
    """Fully resolved settings for a drill run.

    ``count`` of ``0`` means "every record in the mode"; ``seed`` of ``None``
    means the caller picks one from the wall clock.
    """

    count: int
    plain: bool
    seed: Optional[int]
    log_level: str
    modes: Mapping[str, modes_mod.GameMode]


@dataclass(frozen=True)
class ConfigOverrides:
    """CLI-sourced overrides applied on top of file/env options."""

    count: Optional[int] = None
    plain: Optional[bool] = None
    seed: Optional[int] = None
    log_level: Optional[str] = None


@dataclass(frozen=True)
class LoadResult:
    """Result of loading configuration, including workspace context."""

    config: PlayConfig
    layout: workspace_mod.WorkspaceLayout
    config_path: Optional[Path]


def load_config(
    *,
    config_path: Optional[Path] = None,
    overrides: Optional[ConfigOverrides] = None,
    env: Optional[Mapping[str, str]] = None,
    workspace_path: Optional[Path] = None,
) -> LoadResult:
    """Load configuration applying precedence CLI > env > TOML > defaults."""

    overrides = overrides or ConfigOverrides()
    env_map = os.environ if env is None else env

    try:
        layout = workspace_mod.ensure_workspace(
            env=env_map, path=workspace_path
        )
    except workspace_mod.WorkspaceError as exc:
        raise PlayConfigError(str(exc)) from exc
    default_path = layout.path_for("config") / CONFIG_FILENAME

    requested_path = _resolve_config_path(
        config_path=config_path,
        env_map=env_map,
        default_path=default_path,
    )

    defaults = _default_table()
    extra_modes: Mapping[str, Any] = {}
    loaded_path: Optional[Path] = None

    if requested_path.exists():
        loaded_path = requested_path
        try:
            extras = core_config.load_sections(
                requested_path,
                defaults,
                types=_LEAF_TYPES,
                passthrough=("modes",),
            )
        except core_config.TomlConfigError as exc:
            raise PlayConfigError(str(exc)) from exc
        extra_modes = extras.get("modes", {})
    elif config_path is not None or (env_map.get(CONFIG_ENV) or "").strip():
        raise PlayConfigError(f"Config file not found: {requested_path}")

    session = defaults["session"]
    count = _pick_first(
        overrides.count,
        _parse_env_int(env_map, "COUNT"),
        session["count"],
    )
    plain = _pick_first(
        overrides.plain,
        _parse_env_bool(env_map, "PLAIN"),
        session["plain"],
    )
    seed = _pick_first(
        overrides.seed,
        _parse_env_int(env_map, "SEED"),
        session["seed"],
    )
    log_level = _pick_first(
        overrides.log_level,
        _parse_env_string(env_map, "LOG_LEVEL"),
        defaults["logging"]["level"],
    )

    try:
        mode_table = modes_mod.build_mode_table(
            extra_modes, base_dir=layout.home
        )
    except modes_mod.ModeConfigError as exc:
        raise PlayConfigError(str(exc)) from exc

    config = PlayConfig(
        count=count,
        plain=plain,
        seed=seed,
        log_level=_normalize_level(log_level),
        modes=mode_table,
    )
    return LoadResult(config=config, layout=layout, config_path=loaded_path)


def _default_table() -> MutableMapping[str, MutableMapping[str, Any]]:
    return {
        "session": {"count": 0, "plain": False, "seed": None},
        "logging": {"level": _DEFAULT_LOG_LEVEL},
    }


def _resolve_config_path(
    *,
    config_path: Optional[Path],
    env_map: Mapping[str, str],
    default_path: Path,
) -> Path:
    if config_path is not None:
        return config_path.expanduser()
    env_candidate = (env_map.get(CONFIG_ENV) or "").strip()
    if env_candidate:
        return Path(env_candidate).expanduser()
    return default_path


def _normalize_level(value: object) -> str:
    if not isinstance(value, str) or not value.strip():
        raise PlayConfigError("logging.level must be a non-empty string.")
    return value.strip().upper()


def _parse_env_int(env_map: Mapping[str, str], key: str) -> Optional[int]:
    raw = _parse_env_string(env_map, key)
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError as exc:
        raise PlayConfigError(
            f"{ENV_PREFIX}{key} must be an integer, got '{raw}'."
        ) from exc


def _parse_env_bool(env_map: Mapping[str, str], key: str) -> Optional[bool]:
    raw = _parse_env_string(env_map, key)
    if raw is None:
        return None
    lowered = raw.lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise PlayConfigError(f"{ENV_PREFIX}{key} must be a boolean, got '{raw}'.")


def _parse_env_string(env_map: Mapping[str, str], key: str) -> Optional[str]:
    raw = env_map.get(f"{ENV_PREFIX}{key}")
    if raw is None:
        return None
    value = raw.strip()
    return value or None


def _pick_first(*candidates: object) -> object:
    for candidate in candidates:
        if candidate is not None:
            return candidate
    return None
