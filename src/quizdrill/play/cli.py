"""CLI entry points for playing, checking and listing drill modes."""

from __future__ import annotations

import argparse
import logging
import random
import sys
import time
from pathlib import Path
from typing import Mapping, Optional, Sequence

from rich.console import Console

from quizdrill.core import config_templates
from quizdrill.core import workspace as workspace_mod
from quizdrill.core.config_templates import ConfigTemplateError
from quizdrill.core.logging import configure_logger
from quizdrill.core.workspace import WorkspaceError
from quizdrill.gamedata import LoadError, RecordSet, dumps, load, sample
from quizdrill.modes import GameMode, UnknownModeError, resolve_mode
from quizdrill.session import (
    InputProvider,
    render_summary,
    run_drill_session,
)

from .config import (
    CONFIG_FILENAME,
    ConfigOverrides,
    LoadResult,
    PlayConfigError,
    load_config,
)

LOGGER_NAME = "quizdrill"
LOG_FILENAME = "play.log"

logger = logging.getLogger(__name__)


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to quizdrill.toml (defaults to the workspace config).",
    )
    parser.add_argument(
        "--workspace",
        type=Path,
        help="Override the workspace root used for config and logs.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="drill play",
        description="Drill yourself on a randomized set of quiz records.",
        epilog=(
            "Run `drill play help` to list modes or `drill play config init` "
            "to scaffold quizdrill.toml."
        ),
    )
    parser.add_argument(
        "mode",
        nargs="?",
        help="Game mode to play (see `drill modes`).",
    )
    parser.add_argument(
        "-n",
        "--count",
        type=int,
        help="Number of questions to ask (0 or less asks every record).",
    )
    parser.add_argument(
        "-p",
        "--plain",
        action="store_true",
        default=None,
        help="Disable colour output and cursor movement.",
    )
    parser.add_argument(
        "-s",
        "--seed",
        type=int,
        help="Seed for the question shuffle (defaults to the wall clock).",
    )
    parser.add_argument(
        "--data",
        type=Path,
        help="Play an arbitrary data file instead of a mode's file.",
    )
    _add_common_arguments(parser)
    parser.add_argument(
        "--log-level",
        help="Set the logging level for the run (defaults to INFO).",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Mirror debug logs to stderr.",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args_list = list(argv) if argv is not None else list(sys.argv[1:])

    if args_list[:1] == ["config"]:
        return _handle_config(args_list[1:])

    parser = _build_parser()
    args = parser.parse_args(args_list)

    overrides = ConfigOverrides(
        count=args.count,
        plain=args.plain,
        seed=args.seed,
        log_level=args.log_level,
    )
    try:
        load_result = load_config(
            config_path=args.config,
            overrides=overrides,
            workspace_path=args.workspace,
        )
    except PlayConfigError as exc:
        parser.error(str(exc))

    if args.mode is not None and args.mode.lower() == "help":
        _print_modes(load_result.config.modes)
        return 0

    if args.mode is None and args.data is None:
        parser.error("a game mode or --data is required.")

    try:
        mode = _select_mode(args.mode, args.data, load_result)
    except UnknownModeError as exc:
        sys.stderr.write(f"Error: {exc}\n")
        return 2

    config = load_result.config
    _, log_path = configure_logger(
        LOGGER_NAME,
        log_dir=load_result.layout.path_for("logs"),
        level=config.log_level,
        verbose=args.verbose,
        filename=LOG_FILENAME,
    )

    try:
        records = load(mode.data_path)
    except LoadError as exc:
        sys.stderr.write(f"Error: {exc}\n")
        return 1

    seed = config.seed if config.seed is not None else int(time.time())
    count = config.count if config.count > 0 else len(records)
    order = sample(records, count, random.Random(seed))
    logger.info(
        "Starting drill",
        extra={
            "mode": mode.name,
            "seed": seed,
            "requested": count,
            "records": len(records),
            "log_path": log_path,
        },
    )

    plain = config.plain or not sys.stdout.isatty()
    console = _build_console(plain)
    if not records:
        console.print(f"No records found in {mode.data_path}.")
    summary = run_drill_session(
        records,
        order,
        console,
        _build_input_provider(console),
        plain=plain,
    )
    render_summary(console, summary, plain=plain)
    logger.info(
        "Finished drill",
        extra={
            "mode": mode.name,
            "asked": summary.asked,
            "correct": summary.correct,
            "interrupted": summary.interrupted,
        },
    )
    return 0


def _build_check_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="drill check",
        description="Validate a mode's data file and report its records.",
    )
    parser.add_argument("mode", nargs="?", help="Game mode to validate.")
    parser.add_argument(
        "--data",
        type=Path,
        help="Validate an arbitrary data file instead of a mode's file.",
    )
    parser.add_argument(
        "--normalize",
        action="store_true",
        help="Print the records in canonical key:answer,answer; form.",
    )
    _add_common_arguments(parser)
    return parser


def check_main(argv: Sequence[str] | None = None) -> int:
    parser = _build_check_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    if args.mode is None and args.data is None:
        parser.error("a game mode or --data is required.")

    try:
        load_result = load_config(
            config_path=args.config, workspace_path=args.workspace
        )
    except PlayConfigError as exc:
        parser.error(str(exc))

    try:
        mode = _select_mode(args.mode, args.data, load_result)
    except UnknownModeError as exc:
        sys.stderr.write(f"Error: {exc}\n")
        return 2

    try:
        records = load(mode.data_path)
    except LoadError as exc:
        sys.stderr.write(f"Error: {exc}\n")
        return 1

    if args.normalize:
        try:
            sys.stdout.write(dumps(records))
        except ValueError as exc:
            sys.stderr.write(f"Error: {exc}\n")
            return 1
        return 0

    sys.stdout.write(_describe_records(mode, records) + "\n")
    return 0


def _build_modes_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="drill modes",
        description="List built-in and configured game modes.",
    )
    _add_common_arguments(parser)
    return parser


def modes_main(argv: Sequence[str] | None = None) -> int:
    parser = _build_modes_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    try:
        load_result = load_config(
            config_path=args.config, workspace_path=args.workspace
        )
    except PlayConfigError as exc:
        parser.error(str(exc))
    _print_modes(load_result.config.modes, show_paths=True)
    return 0


def _select_mode(
    name: Optional[str], data: Optional[Path], load_result: LoadResult
) -> GameMode:
    if data is not None:
        path = data.expanduser().resolve()
        label = name or path.stem
        return GameMode(label, f"ad-hoc quiz from {path.name}", path)
    assert name is not None
    return resolve_mode(name, load_result.config.modes)


def _build_console(plain: bool) -> Console:
    if plain:
        return Console(color_system=None, highlight=False, emoji=False)
    return Console(highlight=False, emoji=False)


def _build_input_provider(console: Console) -> InputProvider:
    return console.input


def _print_modes(
    table: Mapping[str, GameMode], *, show_paths: bool = False
) -> None:
    width = max((len(name) for name in table), default=0)
    lines = ["Available modes:"]
    for name, mode in table.items():
        lines.append(f"  {name.ljust(width)} - {mode.description}")
        if show_paths:
            lines.append(f"  {''.ljust(width)}   {mode.data_path}")
    sys.stdout.write("\n".join(lines) + "\n")


def _describe_records(mode: GameMode, records: RecordSet) -> str:
    answers = sum(len(record.answers) for record in records)
    return (
        f"{mode.data_path}: {len(records)} record(s), "
        f"{answers} accepted answer(s)"
    )


def _handle_config(argv: Sequence[str]) -> int:
    parser = argparse.ArgumentParser(
        prog="drill play config",
        description="Manage the quizdrill.toml configuration file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    init_parser = subparsers.add_parser(
        "init",
        help="Write the default quizdrill.toml template.",
    )
    init_parser.add_argument(
        "--path",
        type=Path,
        help=(
            "Destination for the config TOML (defaults to the workspace "
            "config directory)."
        ),
    )
    init_parser.add_argument(
        "--workspace",
        type=Path,
        help="Workspace root used when resolving the default config path.",
    )
    init_parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite the destination if a config already exists.",
    )
    args = parser.parse_args(argv)

    try:
        target = _resolve_config_target(args)
    except WorkspaceError as exc:
        sys.stderr.write(str(exc) + "\n")
        return 1

    template = config_templates.get_template("play")
    try:
        written = template.write(target, overwrite=args.force)
    except ConfigTemplateError as exc:
        sys.stderr.write(str(exc) + "\n")
        return 1

    sys.stdout.write(f"Wrote quizdrill config to {written}\n")
    return 0


def _resolve_config_target(args: argparse.Namespace) -> Path:
    if args.path is not None:
        candidate = args.path.expanduser()
        if not candidate.is_absolute():
            candidate = (Path.cwd() / candidate).resolve()
        return candidate

    layout = workspace_mod.ensure_workspace(path=args.workspace)
    return layout.path_for("config") / CONFIG_FILENAME


if __name__ == "__main__":  # pragma: no cover - module CLI guard
    raise SystemExit(main())
