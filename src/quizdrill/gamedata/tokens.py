"""Tokenizer for the ``KEY : ANSWER [, ANSWER ...] ;`` data format."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import BinaryIO, Optional, TextIO, Union

__all__ = [
    "LexFailure",
    "Token",
    "TokenKind",
    "tokenize",
]

# Matches C ``isspace`` in the "C" locale.
_WHITESPACE = frozenset(" \t\n\v\f\r")

Source = Union[bytes, str, BinaryIO, TextIO]


class LexFailure(RuntimeError):
    """Raised when the data stream cannot be read or decoded."""


class TokenKind(Enum):
    """Kinds of tokens produced by :func:`tokenize`."""

    STRING = "STRING"
    COLON = "COLON"
    COMMA = "COMMA"
    SEMICOLON = "SEMICOLON"

    def __str__(self) -> str:
        return self.value


_DELIMITERS = {
    ",": TokenKind.COMMA,
    ";": TokenKind.SEMICOLON,
    ":": TokenKind.COLON,
}


@dataclass(frozen=True)
class Token:
    """A typed token tagged with its 1-based source position."""

    kind: TokenKind
    text: Optional[str]
    line: int
    column: int


def tokenize(source: Source) -> list[Token]:
    """Split ``source`` into tokens.

    ``source`` is read completely before scanning starts. Whitespace outside
    a string span separates tokens and is never emitted. ``,``, ``;`` and
    ``:`` are always delimiters; every other run of characters becomes a
    STRING token, kept verbatim up to (not including) the next delimiter.
    """

    text = _read_source(source)
    tokens: list[Token] = []
    line, column = 1, 1
    pos, end = 0, len(text)

    while pos < end:
        char = text[pos]

        if char in _WHITESPACE:
            if char == "\n":
                line += 1
                column = 1
            else:
                column += 1
            pos += 1
            continue

        kind = _DELIMITERS.get(char)
        if kind is not None:
            tokens.append(Token(kind, None, line, column))
            column += 1
            pos += 1
            continue

        # String spans do not track lines; every character counts as a column.
        start = pos
        while pos < end and text[pos] not in _DELIMITERS:
            pos += 1
        tokens.append(Token(TokenKind.STRING, text[start:pos], line, column))
        column += pos - start

    return tokens


def _read_source(source: Source) -> str:
    if isinstance(source, str):
        return source
    if isinstance(source, (bytes, bytearray)):
        raw = bytes(source)
    else:
        try:
            raw = source.read()
        except UnicodeDecodeError as exc:
            raise _decode_failure(exc) from exc
        except OSError as exc:
            raise LexFailure(f"Failed to read data stream: {exc}") from exc
        if isinstance(raw, str):
            return raw
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise _decode_failure(exc) from exc


def _decode_failure(exc: UnicodeDecodeError) -> LexFailure:
    return LexFailure(
        f"Data stream is not valid UTF-8 (byte offset {exc.start})."
    )
