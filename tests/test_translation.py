from pathlib import Path

import pytest

from ailscript.exceptions import TranslationFormatError
from ailscript.translation import (
    escape,
    format_entries,
    load_translation,
    parse_translation,
    unescape,
    write_translation,
)


def test_format_entries_layout() -> None:
    text = format_entries([(0x2A, "Hello"), (0x100, "World")])
    assert text == (
        "◇0000002A◇Hello\n"
        "◆0000002A◆Hello\n"
        "\n"
        "◇00000100◇World\n"
        "◆00000100◆World\n"
        "\n"
    )


def test_format_no_entries() -> None:
    assert format_entries([]) == ""


def test_escape_keeps_entries_on_one_line() -> None:
    assert escape("a\\b\r\nc\td") == "a\\\\b\\r\\nc\\td"
    assert unescape("a\\\\b\\r\\nc\\td") == "a\\b\r\nc\td"


def test_unescape_keeps_unknown_sequences() -> None:
    assert unescape("50\\% and \\x") == "50\\% and \\x"
    assert unescape("trailing\\") == "trailing\\"


def test_parse_reads_only_translation_lines() -> None:
    text = "◇0000002A◇Hello\n◆0000002A◆Bonjour\n\n◇00000030◇Left\n"
    assert parse_translation(text) == {0x2A: "Bonjour"}


def test_parse_handles_bom_crlf_and_escapes() -> None:
    text = "\ufeff◆0000002A◆one\\ntwo\r\n◆0000002b◆\r\n"
    assert parse_translation(text) == {0x2A: "one\ntwo", 0x2B: ""}


def test_parse_keeps_unicode_line_separators_inside_text() -> None:
    text = "◆00000001◆a\u2028b\n"
    assert parse_translation(text) == {1: "a\u2028b"}


def test_parse_later_duplicate_wins() -> None:
    text = "◆00000001◆first\n◆00000001◆second\n"
    assert parse_translation(text) == {1: "second"}


def test_parse_malformed_line_reports_line_number() -> None:
    with pytest.raises(TranslationFormatError) as excinfo:
        parse_translation("◇00000001◇ok\n◆0001◆short address\n")
    assert excinfo.value.line_number == 2


def test_mismatched_marks_are_rejected() -> None:
    with pytest.raises(TranslationFormatError):
        parse_translation("◆00000001◇text\n")


def test_write_then_load(tmp_path: Path) -> None:
    entries = [(0x02, "Hello"), (0x19, "行\n二")]
    target = write_translation(tmp_path / "out" / "script.txt", entries)

    assert target.read_text(encoding="utf-8").count("\n") == 6
    assert load_translation(target) == dict(entries)


def test_load_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_translation(tmp_path / "missing.txt")
