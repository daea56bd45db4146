from pathlib import Path

import pytest

from ailscript import Script, ScriptOptions
from ailscript.exceptions import InvalidSignatureError
from ailscript.importer import REBUILD
from tests.fixtures.sample_script import SAMPLE_MNEMONICS, SAMPLE_POOL, SAMPLE_REFS, build_script


def test_load_from_path(sample_path: Path) -> None:
    script = Script.load(sample_path)

    assert script.source == sample_path
    assert [ins.mnemonic for ins in script.instructions] == SAMPLE_MNEMONICS
    assert script.string_refs == SAMPLE_REFS
    assert script.options.version == "v0"


def test_load_from_bytes(sample_data: bytes) -> None:
    script = Script.load(sample_data, ScriptOptions(version="legacy"))
    assert script.source is None
    assert script.to_bytes() == sample_data


def test_entries_and_export(tmp_path: Path, sample_data: bytes) -> None:
    script = Script.load(sample_data)
    assert [text for _, text in script.entries()] == ["Hello", "World", "Hello"]

    target = script.export_text(tmp_path / "sample.txt")
    content = target.read_text(encoding="utf-8")
    assert "◆00000019◆World" in content
    assert "0000002E" not in content


def test_import_text_round_trip(tmp_path: Path, sample_data: bytes) -> None:
    script = Script.load(sample_data)
    translation = script.export_text(tmp_path / "sample.txt")
    translation.write_text(
        translation.read_text(encoding="utf-8").replace("◆World", "◆Monde"),
        encoding="utf-8",
    )

    report = script.import_text(translation)
    saved = script.save(tmp_path / "patched.bin")

    reloaded = Script.load(saved)
    assert report.patched == 1
    assert [ref.text for ref in reloaded.result.references()] == ["Hello", "Monde", "Hello", "   "]
    assert reloaded.image.pool.startswith(SAMPLE_POOL)


def test_apply_translation_rebuild(sample_data: bytes) -> None:
    script = Script.load(sample_data)
    report = script.apply_translation({0x2A: "Again"}, mode=REBUILD)

    assert report.mode == REBUILD
    assert script.image.pool == b"Hello\x00\x00World\x00\x00Again\x00\x00   \x00\x00"


def test_output_encoding_becomes_input_encoding(sample_data: bytes) -> None:
    script = Script.load(sample_data, ScriptOptions(output_encoding="utf-8"))
    script.apply_translation({0x02: "héllo"})

    assert script.options.encoding == "utf-8"
    assert dict(script.entries())[0x02] == "héllo"


def test_disassembly_header(sample_data: bytes) -> None:
    listing = Script.load(sample_data).disassembly()
    assert listing.startswith("; code 0x00000010 size 0x0037\n")
    assert "; version v0" in listing


def test_export_disassembly(tmp_path: Path, sample_data: bytes) -> None:
    target = Script.load(sample_data).export_disassembly(tmp_path / "listing" / "sample.txt")
    assert "00000010 | exec_func" in target.read_text(encoding="utf-8")


def test_load_rejects_non_script() -> None:
    with pytest.raises(InvalidSignatureError):
        Script.load(build_script(b"\x0d", signature=0x1234))


def test_options_normalise_values() -> None:
    options = ScriptOptions(version="2", encoding="SHIFT_JIS", allow_offset_overflow=True)
    assert options.version == "v2"
    assert options.encoding == "shift_jis"
    assert options.effective_output_encoding == "shift_jis"
    assert options.as_dict()["allow_offset_overflow"] is True


def test_options_reject_unknown_values() -> None:
    with pytest.raises(KeyError):
        ScriptOptions(version="v7")
    with pytest.raises(LookupError):
        ScriptOptions(encoding="no-such-codec")
