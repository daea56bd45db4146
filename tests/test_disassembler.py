import json

from ailscript import image
from ailscript.decoder import decode_image
from ailscript.disassembler import render, render_instruction, render_json, render_labels
from tests.fixtures.sample_script import sample_bytes


def _instructions():
    return decode_image(image.load(sample_bytes())).instructions


def test_render_instruction_lines() -> None:
    lines = render_instruction(_instructions()[0])
    assert lines == [
        "00000010 | exec_func",
        "00000011 | push_string",
        '00000011 | ; ref 0x0000 "Hello"',
    ]


def test_render_expression_and_raw_fields() -> None:
    lines = render_instruction(_instructions()[1])
    assert lines == [
        "00000014 | store_v",
        "00000014 | ; register 0x01",
        "00000014 | ; mask 0x0000",
        "00000014 | ; expr load(0x01,0x0000) load(0x02,0x0000) add",
    ]


def test_render_switch_table() -> None:
    lines = render_instruction(_instructions()[3])
    assert "0000002B | ; default L_0010" in lines
    assert "0000002B | ; case 0x02 L_0030" in lines


def test_render_labels() -> None:
    assert render_labels([(1, 2)]) == ["; label 0000 0x0001 0x0002"]


def test_render_without_image_has_no_header() -> None:
    listing = render(_instructions())
    assert listing.splitlines()[0] == "00000010 | exec_func"
    assert listing.endswith("00000044 | ret\n")


def test_render_escapes_newlines_in_strings() -> None:
    data = sample_bytes().replace(b"World", b"Wo\nld")
    listing = render(decode_image(image.load(data)).instructions)
    assert '"Wo\\nld"' in listing


def test_render_json() -> None:
    payload = json.loads(render_json(_instructions()))
    assert payload[0]["mnemonic"] == "exec_func"
    assert payload[0]["operands"][0]["operands"][0] == {
        "kind": "string",
        "code_address": 2,
        "offset": 0,
        "text": "Hello",
    }
    assert payload[3]["operands"][2]["cases"] == [{"id": 1, "addr": 0x20}, {"id": 2, "addr": 0x30}]
