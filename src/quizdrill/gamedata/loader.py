"""Load data files into record sets and render record sets back to text."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Literal, Union

from .parser import ParseError, QuestionRecord, RecordSet, parse
from .tokens import LexFailure, tokenize

__all__ = [
    "LoadError",
    "LoadStage",
    "dumps",
    "load",
    "render",
]

LoadStage = Literal["io", "lex", "parse"]

_RESERVED = frozenset(",;:")
_LEADING_WHITESPACE = frozenset(" \t\n\v\f\r")

logger = logging.getLogger(__name__)


class LoadError(RuntimeError):
    """Raised when a data file cannot be opened, read or parsed."""

    def __init__(self, message: str, *, path: Path, stage: LoadStage) -> None:
        super().__init__(message)
        self.path = path
        self.stage = stage


def load(path: Union[str, Path]) -> RecordSet:
    """Open, tokenize and parse the data file at ``path``.

    Every failure surfaces as :class:`LoadError` with the original exception
    chained, so callers only need one ``except`` clause.
    """

    target = Path(path)
    logger.debug("Loading game data", extra={"path": target})
    try:
        with target.open("rb") as handle:
            tokens = tokenize(handle)
    except LexFailure as exc:
        logger.error("Failed to read game data", extra={"path": target})
        raise LoadError(str(exc), path=target, stage="lex") from exc
    except OSError as exc:
        reason = exc.strerror or str(exc)
        logger.error(
            "Failed to open game data",
            extra={"path": target, "reason": reason},
        )
        raise LoadError(
            f"Failed to open gamemode data {target}: {reason}",
            path=target,
            stage="io",
        ) from exc

    try:
        records = parse(tokens, source=str(target))
    except ParseError as exc:
        logger.error(
            "Malformed game data",
            extra={"path": target, "line": exc.line, "column": exc.column},
        )
        raise LoadError(str(exc), path=target, stage="parse") from exc

    logger.info(
        "Loaded game data",
        extra={"path": target, "records": len(records), "tokens": len(tokens)},
    )
    return records


def render(record: QuestionRecord) -> str:
    """Serialize one record as a ``key:answer[,answer...];`` row."""

    for value in (record.key, *record.answers):
        _check_representable(value)
    return f"{record.key}:{','.join(record.answers)};"


def dumps(records: Iterable[QuestionRecord]) -> str:
    """Serialize ``records`` to the data-file grammar, one row per line."""

    return "".join(render(record) + "\n" for record in records)


def _check_representable(value: str) -> None:
    if not value:
        raise ValueError("Empty keys or answers cannot be serialized.")
    if value[0] in _LEADING_WHITESPACE:
        raise ValueError(
            f"Value {value!r} starts with whitespace and cannot round-trip."
        )
    if _RESERVED.intersection(value):
        raise ValueError(
            f"Value {value!r} contains one of the reserved characters ,;:"
        )
