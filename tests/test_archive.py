from pathlib import Path

import pytest

from ailscript import archive, lzss
from ailscript.exceptions import ArchiveError

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 24
TEXT = b"hello hello hello hello hello"


def test_pack_entry_compresses_plain_payloads() -> None:
    body = archive.pack_entry(TEXT)
    assert body[:2] == b"\x01\x00"
    assert int.from_bytes(body[2:6], "little") == len(TEXT)
    assert lzss.decompress(body[6:]) == TEXT


def test_pack_entry_stores_png_as_is() -> None:
    body = archive.pack_entry(PNG)
    assert body == b"\x00\x00" + len(PNG).to_bytes(4, "little") + PNG


def test_pack_entry_empty_payload() -> None:
    assert archive.pack_entry(b"") == b""


def test_build_and_read_index() -> None:
    data = archive.build([TEXT, b"", PNG])
    entries = archive.read_index(data)

    assert [entry.name for entry in entries] == ["00000", "00001", "00002"]
    assert entries[0].offset == 4 + 3 * 4
    assert entries[0].is_compressed
    assert entries[0].unpacked_length == len(TEXT)
    assert entries[1].length == 0
    assert not entries[2].is_compressed
    assert [payload for _, payload in archive.iter_entries(data)] == [TEXT, b"", PNG]


def test_build_requires_payloads() -> None:
    with pytest.raises(ArchiveError):
        archive.build([])


def test_read_index_rejects_bad_counts() -> None:
    with pytest.raises(ArchiveError):
        archive.read_index(b"\x00\x00\x00\x00")
    with pytest.raises(ArchiveError):
        archive.read_index(b"\x02\x00\x00\x00\x01\x00\x00\x00")


def test_read_index_rejects_entry_past_end() -> None:
    data = archive.build([TEXT])
    with pytest.raises(ArchiveError):
        archive.read_index(data[:-1])


def test_extract_and_create(tmp_path: Path) -> None:
    source = tmp_path / "data.arc"
    source.write_bytes(archive.build([TEXT, PNG]))

    written = archive.extract(source, tmp_path / "out", progress=False)
    assert [path.name for path in written] == ["00000", "00001"]
    assert (tmp_path / "out" / "00001").read_bytes() == PNG

    rebuilt = archive.create(tmp_path / "out", tmp_path / "rebuilt.arc", progress=False)
    assert [payload for _, payload in archive.iter_entries(rebuilt.read_bytes())] == [TEXT, PNG]


def test_collect_inputs_skips_unnumbered_files(tmp_path: Path) -> None:
    (tmp_path / "00000").write_bytes(b"a")
    (tmp_path / "00001").write_bytes(b"b")
    (tmp_path / "notes.txt").write_text("ignored")
    assert [path.name for path in archive.collect_inputs(tmp_path)] == ["00000", "00001"]


def test_collect_inputs_reports_gap(tmp_path: Path) -> None:
    (tmp_path / "00000").write_bytes(b"a")
    (tmp_path / "00002").write_bytes(b"c")
    with pytest.raises(ArchiveError, match='Missing file "00001"'):
        archive.collect_inputs(tmp_path)


def test_collect_inputs_empty_directory(tmp_path: Path) -> None:
    with pytest.raises(ArchiveError):
        archive.collect_inputs(tmp_path)
