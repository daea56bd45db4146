import logging

import pytest

from ailscript.exceptions import InvalidStringOffsetError, StringPoolOverflowError, TextEncodingError
from ailscript.pool import MAX_OFFSET, PoolBuilder, normalise_encoding, read_cstring, resolve


def test_resolve_reads_up_to_first_zero() -> None:
    pool = b"AB\x00CDE\x00"
    assert resolve(pool, 0) == "AB"
    assert resolve(pool, 3) == "CDE"


def test_resolve_mid_string_offset() -> None:
    assert resolve(b"AB\x00CDE\x00", 5) == "E"


def test_resolve_zero_byte_is_empty_string() -> None:
    assert resolve(b"AB\x00CDE\x00", 2) == ""


def test_resolve_without_terminator_reads_to_pool_end() -> None:
    assert read_cstring(b"ABC", 1) == b"BC"
    assert resolve(b"ABC", 1) == "BC"


def test_resolve_out_of_range_offset() -> None:
    with pytest.raises(InvalidStringOffsetError) as excinfo:
        resolve(b"AB\x00CDE\x00", 7, address=0x20)
    assert excinfo.value.offset == 7
    assert excinfo.value.pool_length == 7
    assert excinfo.value.address == 0x20
    assert "00000020" in str(excinfo.value)


def test_resolve_shift_jis_text() -> None:
    pool = "こんにちは".encode("cp932") + b"\x00\x00"
    assert resolve(pool, 0, "cp932") == "こんにちは"


def test_resolve_replaces_undecodable_bytes() -> None:
    assert resolve(b"A\x81\x00", 0, "cp932") == "A\ufffd"


def test_builder_deduplicates_by_text() -> None:
    builder = PoolBuilder(encoding="cp932")
    first = builder.add("Hi")
    second = builder.add("There")
    again = builder.add("Hi")

    assert (first, second, again) == (0, 4, 0)
    assert builder.getvalue() == b"Hi\x00\x00There\x00\x00"
    assert builder.cache[b"There"] == 4


def test_builder_appends_behind_base() -> None:
    builder = PoolBuilder(base=b"Old\x00\x00")
    assert builder.add("New") == 5
    assert builder.getvalue() == b"Old\x00\x00New\x00\x00"
    assert len(builder) == 10


def test_builder_encodes_with_output_encoding() -> None:
    builder = PoolBuilder(encoding="utf-8")
    builder.add("é")
    assert builder.getvalue() == "é".encode("utf-8") + b"\x00\x00"


def test_builder_rejects_unencodable_text() -> None:
    builder = PoolBuilder(encoding="cp932")
    with pytest.raises(TextEncodingError) as excinfo:
        builder.add("Caf\u00e9", code_address=0x12)
    assert excinfo.value.code_address == 0x12
    assert excinfo.value.text == "Caf\u00e9"
    assert "00000012" in str(excinfo.value)
    assert builder.getvalue() == b""


def test_builder_add_raw_shares_entry_with_equal_text() -> None:
    builder = PoolBuilder(encoding="cp932")
    assert builder.add_raw(b"A\x81") == 0
    assert builder.add_raw(b"Hi") == 4
    assert builder.add("Hi") == 4
    assert builder.getvalue() == b"A\x81\x00\x00Hi\x00\x00"


def test_builder_overflow_raises_by_default() -> None:
    builder = PoolBuilder(base=b"\x00" * (MAX_OFFSET + 1))
    with pytest.raises(StringPoolOverflowError) as excinfo:
        builder.add("late", code_address=0x40)
    assert excinfo.value.offset == MAX_OFFSET + 1
    assert excinfo.value.code_address == 0x40


def test_builder_overflow_wraps_when_allowed(caplog: pytest.LogCaptureFixture) -> None:
    builder = PoolBuilder(base=b"\x00" * (MAX_OFFSET + 3), allow_overflow=True)
    with caplog.at_level(logging.WARNING, logger="ailscript.pool"):
        offset = builder.add("late", code_address=0x40)
    assert offset == 2
    assert "wraps" in caplog.text


def test_last_representable_offset_is_accepted() -> None:
    builder = PoolBuilder(base=b"\x00" * MAX_OFFSET)
    assert builder.add("edge") == MAX_OFFSET


def test_normalise_encoding() -> None:
    assert normalise_encoding("CP932") == "cp932"
    assert normalise_encoding("utf8") == "utf-8"
    with pytest.raises(LookupError):
        normalise_encoding("no-such-codec")
