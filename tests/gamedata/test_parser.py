from __future__ import annotations

import pytest

from quizdrill.gamedata import (
    ParseError,
    QuestionRecord,
    TokenKind,
    parse,
    tokenize,
)


def parse_text(text: str, source: str = "data/test.quiz"):
    return parse(tokenize(text), source=source)


def test_parse_rows_in_file_order():
    records = parse_text("ア:a;\nシ:shi,si;\nア:a;")

    assert records == (
        QuestionRecord("ア", ("a",)),
        QuestionRecord("シ", ("shi", "si")),
        QuestionRecord("ア", ("a",)),
    )


@pytest.mark.parametrize("text", ["", "   ", "\n\n\t  \r\n"])
def test_empty_or_blank_file_parses_to_empty_record_set(text):
    assert parse_text(text) == ()


def test_comma_without_following_answer_fails():
    with pytest.raises(ParseError) as excinfo:
        parse_text("a : b , ;")

    error = excinfo.value
    assert error.expected is TokenKind.STRING
    assert error.actual is TokenKind.SEMICOLON
    assert (error.line, error.column) == (1, 9)


def test_missing_semicolon_fails_at_end_of_input():
    with pytest.raises(ParseError) as excinfo:
        parse_text("a:b\n")

    # "b\n" is one string span, so the parser runs off the end.
    assert excinfo.value.expected is TokenKind.SEMICOLON
    assert excinfo.value.actual is None


def test_row_without_colon_fails():
    with pytest.raises(ParseError) as excinfo:
        parse_text("ok:yes;\nkey;")

    assert excinfo.value.expected is TokenKind.COLON
    assert excinfo.value.actual is TokenKind.SEMICOLON
    assert excinfo.value.line == 2


def test_row_must_start_with_string():
    with pytest.raises(ParseError) as excinfo:
        parse_text(":a;")

    assert excinfo.value.expected is TokenKind.STRING
    assert excinfo.value.actual is TokenKind.COLON
    assert (excinfo.value.line, excinfo.value.column) == (1, 1)


def test_error_reports_line_of_dangling_second_row():
    with pytest.raises(ParseError) as excinfo:
        parse_text("a:b;\nbadrow")

    error = excinfo.value
    assert error.line == 2
    assert error.column == 1
    assert error.expected is TokenKind.COLON
    assert error.actual is None


def test_error_message_names_source_position_and_kinds():
    with pytest.raises(ParseError) as excinfo:
        parse_text("a:b;\nbadrow", source="data/katakana.quiz")

    assert str(excinfo.value) == (
        "Unexpected token in gamemode data at data/katakana.quiz:2:1: "
        "Expected COLON, got end of input"
    )
    assert excinfo.value.source == "data/katakana.quiz"


def test_error_message_names_actual_kind():
    with pytest.raises(ParseError, match="Expected STRING, got COMMA"):
        parse_text("a:,b;")


def test_answers_keep_their_spelling_but_match_case_insensitively():
    (record,) = parse_text("Tokyo:TOKYO,Toukyou;")

    assert record.answers == ("TOKYO", "Toukyou")
    assert record.accepts("tokyo")
    assert record.accepts("TOUKYOU")
    assert not record.accepts("kyoto")


def test_record_requires_an_answer():
    with pytest.raises(ValueError):
        QuestionRecord("lonely", ())
