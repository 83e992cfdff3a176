from __future__ import annotations

from pathlib import Path

import pytest

from envcachectl.envfile import format_env_line, load_env_file, parse_env_text, unquote_value
from envcachectl.errors import InputMissing


def test_parse_skips_blank_comment_and_malformed_lines() -> None:
    text = "\n# comment\n   # indented comment\nNOT A PAIR\n=novalue\nAPP_ENV=local\n"
    entries = parse_env_text(text)
    assert list(entries) == ["APP_ENV"]
    assert entries["APP_ENV"].value == "local"
    assert entries["APP_ENV"].line == 6


def test_parse_rejects_names_that_are_not_identifiers() -> None:
    entries = parse_env_text("app.name=Demo\n1ST=x\nMY-VAR=y\nAPP_NAME=Demo\n")
    assert list(entries) == ["APP_NAME"]


def test_parse_strips_matching_quotes_only() -> None:
    entries = parse_env_text(
        'DOUBLE="hello world"\nSINGLE=\'x y\'\nMIXED="abc\'\nINNER=a"b"c\nLONE="\n'
    )
    assert entries["DOUBLE"].value == "hello world"
    assert entries["DOUBLE"].quote == '"'
    assert entries["SINGLE"].value == "x y"
    assert entries["MIXED"].value == "\"abc'"
    assert entries["INNER"].value == 'a"b"c'
    assert entries["LONE"].value == '"'


def test_parse_keeps_inline_hash_and_does_not_expand() -> None:
    entries = parse_env_text("PASS=abc#def\nURL=${APP_URL}/api\nQUOTED=\"${HOME}\"\n")
    assert entries["PASS"].value == "abc#def"
    assert entries["URL"].value == "${APP_URL}/api"
    assert entries["QUOTED"].value == "${HOME}"


def test_parse_trims_name_and_value_whitespace() -> None:
    entries = parse_env_text("  DB_HOST =  127.0.0.1   \n")
    assert entries["DB_HOST"].value == "127.0.0.1"


def test_parse_duplicate_name_last_value_wins_first_position_kept() -> None:
    entries = parse_env_text("A=1\nB=2\nA=3\n")
    assert list(entries) == ["A", "B"]
    assert entries["A"].value == "3"
    assert entries["A"].line == 3


def test_parse_drops_export_prefix() -> None:
    entries = parse_env_text("export APP_KEY=base64:abc=\n")
    assert entries["APP_KEY"].value == "base64:abc="


def test_parse_splits_on_first_equals_only() -> None:
    entries = parse_env_text("APP_KEY=base64:abc==\n")
    assert entries["APP_KEY"].value == "base64:abc=="


def test_parse_empty_value() -> None:
    entries = parse_env_text('EMPTY=\nQUOTED_EMPTY=""\n')
    assert entries["EMPTY"].value == ""
    assert entries["QUOTED_EMPTY"].value == ""


def test_unquote_value_reports_quote_character() -> None:
    assert unquote_value("'a'") == ("a", "'")
    assert unquote_value(" plain ") == ("plain", "")


def test_format_env_line_requotes_when_original_was_quoted() -> None:
    entries = parse_env_text('A="x y"\nB=z\n')
    assert format_env_line(entries["A"]) == 'A="x y"'
    assert format_env_line(entries["B"]) == "B=z"


def test_load_env_file_missing_raises_input_missing(tmp_path: Path) -> None:
    with pytest.raises(InputMissing) as exc:
        load_env_file(tmp_path / ".env")
    assert ".env" in str(exc.value)
    assert exc.value.code == 3


def test_load_env_file_reads_file(tmp_path: Path) -> None:
    path = tmp_path / ".env"
    path.write_text("A=1\n", encoding="utf-8")
    assert load_env_file(path)["A"].value == "1"
