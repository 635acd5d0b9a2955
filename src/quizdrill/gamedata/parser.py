"""Parser turning a token sequence into validated question records.

Grammar::

    file := row*
    row  := STRING COLON STRING (COMMA STRING)* SEMICOLON

A single malformed row fails the whole parse; callers never see a partial
record set.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from .tokens import Token, TokenKind

__all__ = [
    "ParseError",
    "QuestionRecord",
    "RecordSet",
    "parse",
]


@dataclass(frozen=True)
class QuestionRecord:
    """One prompt with the answers accepted for it."""

    key: str
    answers: tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.answers:
            raise ValueError(f"Record '{self.key}' has no accepted answers.")

    def accepts(self, response: str) -> bool:
        """Return ``True`` if ``response`` equals an answer, ignoring case."""

        folded = response.casefold()
        return any(answer.casefold() == folded for answer in self.answers)


RecordSet = tuple[QuestionRecord, ...]


class ParseError(RuntimeError):
    """Raised when the token stream does not match the row grammar."""

    def __init__(
        self,
        *,
        source: str,
        line: int,
        column: int,
        expected: TokenKind,
        actual: Optional[TokenKind],
    ) -> None:
        self.source = source
        self.line = line
        self.column = column
        self.expected = expected
        self.actual = actual
        got = str(actual) if actual is not None else "end of input"
        super().__init__(
            "Unexpected token in gamemode data at "
            f"{source}:{line}:{column}: Expected {expected}, got {got}"
        )


class _TokenCursor:
    def __init__(self, tokens: Sequence[Token], source: str) -> None:
        self._tokens = tokens
        self._source = source
        self.index = 0

    def at_end(self) -> bool:
        return self.index >= len(self._tokens)

    def peek(self) -> Optional[Token]:
        if self.at_end():
            return None
        return self._tokens[self.index]

    def accept(self, kind: TokenKind) -> Optional[Token]:
        token = self.peek()
        if token is None or token.kind is not kind:
            return None
        self.index += 1
        return token

    def expect(self, kind: TokenKind) -> Token:
        token = self.peek()
        if token is None:
            # Point at the last token so the dangling row is locatable.
            last = self._tokens[-1]
            raise self._error(last, kind, None)
        if token.kind is not kind:
            raise self._error(token, kind, token.kind)
        self.index += 1
        return token

    def _error(
        self, token: Token, expected: TokenKind, actual: Optional[TokenKind]
    ) -> ParseError:
        return ParseError(
            source=self._source,
            line=token.line,
            column=token.column,
            expected=expected,
            actual=actual,
        )


def parse(tokens: Sequence[Token], *, source: str = "<memory>") -> RecordSet:
    """Build the record set for ``tokens``.

    ``source`` names the data file in error messages only.
    """

    cursor = _TokenCursor(tokens, source)
    records: list[QuestionRecord] = []
    while not cursor.at_end():
        records.append(_parse_row(cursor))
    return tuple(records)


def _parse_row(cursor: _TokenCursor) -> QuestionRecord:
    key = cursor.expect(TokenKind.STRING)
    cursor.expect(TokenKind.COLON)
    answers = [_text(cursor.expect(TokenKind.STRING))]
    while cursor.accept(TokenKind.COMMA) is not None:
        answers.append(_text(cursor.expect(TokenKind.STRING)))
    cursor.expect(TokenKind.SEMICOLON)
    return QuestionRecord(key=_text(key), answers=tuple(answers))


def _text(token: Token) -> str:
    return token.text if token.text is not None else ""
