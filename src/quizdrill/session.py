"""Rich-powered drill session: ask sampled records and tally the results.

The loop is synchronous and reads answers through an injected callable so
tests can script a session without a terminal. Styling is dropped entirely
in plain mode, which prints literal ``CORRECT``/``INCORRECT`` verdicts.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Callable, Optional

from rich.console import Console
from rich.control import Control
from rich.text import Text

from .gamedata import QuestionRecord

InputProvider = Callable[[], str]

_PROMPT_STYLE = "bold"
_CORRECT_STYLE = "color(82)"
_INCORRECT_STYLE = "color(124)"
_ACCEPTED_STYLE = "color(93)"


@dataclass(frozen=True)
class DrillResponse:
    """One presented record and what the user typed for it."""

    index: int
    key: str
    answer: Optional[str]
    accepted: tuple[str, ...]
    is_correct: bool


@dataclass(frozen=True)
class DrillSummary:
    """Outcome of ``run_drill_session``."""

    asked: int
    correct: int
    responses: tuple[DrillResponse, ...]
    interrupted: bool = False

    @property
    def accuracy(self) -> float:
        if self.asked == 0:
            return 0.0
        return self.correct / self.asked

    @property
    def perfect(self) -> bool:
        return self.asked > 0 and self.correct == self.asked


def run_drill_session(
    records: Sequence[QuestionRecord],
    order: Sequence[int],
    console: Console,
    input_provider: InputProvider,
    *,
    plain: bool = False,
) -> DrillSummary:
    """Ask ``records[i]`` for each ``i`` in ``order``.

    Every scheduled item counts towards ``asked``; when the provider raises
    ``EOFError`` or ``KeyboardInterrupt`` the remaining items are recorded as
    unanswered and incorrect.
    """

    responses: list[DrillResponse] = []
    interrupted = False

    for position, index in enumerate(order):
        record = records[index]
        _render_prompt(console, record, plain=plain)
        try:
            raw = input_provider()
        except (EOFError, KeyboardInterrupt):
            console.print()
            interrupted = True
            responses.extend(
                _unanswered(records, skipped)
                for skipped in order[position:]
            )
            break
        answer = raw.rstrip("\r\n")
        is_correct = record.accepts(answer)
        responses.append(
            DrillResponse(
                index=index,
                key=record.key,
                answer=answer,
                accepted=record.answers,
                is_correct=is_correct,
            )
        )
        _render_verdict(console, record, answer, is_correct, plain=plain)

    correct = sum(1 for response in responses if response.is_correct)
    return DrillSummary(
        asked=len(order),
        correct=correct,
        responses=tuple(responses),
        interrupted=interrupted,
    )


def render_summary(
    console: Console, summary: DrillSummary, *, plain: bool = False
) -> None:
    """Print the closing score line."""

    style = "" if plain else "bold"
    if summary.interrupted:
        console.print(
            Text("Session interrupted.", style="" if plain else "yellow")
        )
    console.print(
        Text(
            f"Summary: {summary.correct}/{summary.asked} correct",
            style=style,
        )
    )
    if summary.perfect:
        console.print(
            Text(
                "Perfect score. You're a REAL gamer :3",
                style="" if plain else _CORRECT_STYLE,
            )
        )


def _unanswered(
    records: Sequence[QuestionRecord], index: int
) -> DrillResponse:
    record = records[index]
    return DrillResponse(
        index=index,
        key=record.key,
        answer=None,
        accepted=record.answers,
        is_correct=False,
    )


def _render_prompt(
    console: Console, record: QuestionRecord, *, plain: bool
) -> None:
    style = "" if plain else _PROMPT_STYLE
    console.print(Text(f">> {record.key}", style=style))
    console.print(Text("<< ", style=style), end="")


def _render_verdict(
    console: Console,
    record: QuestionRecord,
    answer: str,
    is_correct: bool,
    *,
    plain: bool,
) -> None:
    if plain:
        verdict = "CORRECT" if is_correct else "INCORRECT"
        console.print(verdict, highlight=False)
        return

    if console.is_terminal:
        # Overwrite the echoed input line with the coloured verdict.
        console.control(Control.move(0, -1))
    style = _CORRECT_STYLE if is_correct else _INCORRECT_STYLE
    console.print(Text(f">> {answer}", style=style))
    if not is_correct:
        accepted = " ".join(record.answers)
        console.print(Text(f"[ {accepted} ]", style=_ACCEPTED_STYLE))
