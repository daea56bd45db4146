from ailscript import lzss


def test_decompress_back_reference() -> None:
    assert lzss.decompress(bytes.fromhex("08 41 42 43 EE F3")) == b"ABCABCABC"


def test_decompress_reads_initial_space_fill() -> None:
    assert lzss.decompress(bytes.fromhex("01 00 00")) == b"   "


def test_decompress_stops_at_output_size() -> None:
    assert lzss.decompress(bytes.fromhex("08 41 42 43 EE F3"), output_size=5) == b"ABCAB"


def test_decompress_slice() -> None:
    data = b"\xAA\xBB" + bytes.fromhex("00 58 59") + b"\xCC"
    assert lzss.decompress(data, 2, 3) == b"XY"


def test_compress_emits_back_reference() -> None:
    assert lzss.compress(b"ABCABCABC") == bytes.fromhex("08 41 42 43 EE F3")


def test_compress_literals_only() -> None:
    assert lzss.compress(b"AB") == bytes.fromhex("00 41 42")
    assert lzss.compress(b"") == b""


def test_compressed_text_decodes_to_input() -> None:
    text = ("The quick brown fox jumps over the lazy dog. " * 40).encode("ascii")
    packed = lzss.compress(text)
    assert len(packed) < len(text) // 4
    assert lzss.decompress(packed) == text


def test_long_input_wraps_the_ring_buffer() -> None:
    payload = bytes((i * 7 + (i >> 5)) & 0xFF for i in range(9000)) + b"tail-tail-tail"
    assert lzss.decompress(lzss.compress(payload)) == payload
