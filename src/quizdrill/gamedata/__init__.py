"""Game data engine: tokenizer, parser, loader and drill sampler."""

from __future__ import annotations

from .loader import LoadError, dumps, load, render
from .parser import ParseError, QuestionRecord, RecordSet, parse
from .sampler import sample, sample_indices
from .tokens import LexFailure, Token, TokenKind, tokenize

__all__ = [
    "LexFailure",
    "LoadError",
    "ParseError",
    "QuestionRecord",
    "RecordSet",
    "Token",
    "TokenKind",
    "dumps",
    "load",
    "parse",
    "render",
    "sample",
    "sample_indices",
    "tokenize",
]
