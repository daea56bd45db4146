"""LZSS codec used by the archive container.

4 KiB ring buffer pre-filled with spaces, first write position ``0xFEE``.
Control bytes are consumed LSB first: a ``0`` bit is a literal byte, a ``1``
bit a two byte back-reference ``lo, hi`` with ring offset
``lo | (hi & 0xF0) << 4`` and length ``(hi & 0x0F) + 3``.
"""

from __future__ import annotations

from typing import Dict, List, Optional

WINDOW_SIZE = 0x1000
WINDOW_MASK = WINDOW_SIZE - 1
WINDOW_START = 0xFEE
FILL_BYTE = 0x20
MIN_MATCH = 3
MAX_MATCH = 0x0F + MIN_MATCH
# Candidates examined per position; bounds the cost on highly repetitive input.
MAX_CHAIN = 64


def decompress(
    data: bytes,
    start: int = 0,
    length: Optional[int] = None,
    *,
    output_size: Optional[int] = None,
) -> bytes:
    """Expand ``data[start:start + length]``.

    Decoding stops at the end of the input or once ``output_size`` bytes
    have been produced, whichever comes first.
    """

    end = len(data) if length is None else min(len(data), start + length)
    frame = bytearray([FILL_BYTE]) * WINDOW_SIZE
    frame_pos = WINDOW_START
    out = bytearray()
    src = start
    control = 0

    def full() -> bool:
        return output_size is not None and len(out) >= output_size

    while src < end and not full():
        control >>= 1
        if not control & 0x100:
            control = data[src] | 0xFF00
            src += 1
            if src >= end:
                break
        if not control & 1:
            value = data[src]
            src += 1
            out.append(value)
            frame[frame_pos] = value
            frame_pos = (frame_pos + 1) & WINDOW_MASK
            continue
        if src + 1 >= end:
            break
        lo, hi = data[src], data[src + 1]
        src += 2
        offset = lo | ((hi & 0xF0) << 4)
        count = (hi & 0x0F) + MIN_MATCH
        for _ in range(count):
            if full():
                break
            value = frame[offset]
            offset = (offset + 1) & WINDOW_MASK
            frame[frame_pos] = value
            frame_pos = (frame_pos + 1) & WINDOW_MASK
            out.append(value)
    return bytes(out)


def _longest_match(data: bytes, pos: int, candidates: List[int]) -> tuple[int, int]:
    best_len = 0
    best_pos = -1
    limit = min(MAX_MATCH, len(data) - pos)
    for candidate in reversed(candidates[-MAX_CHAIN:]):
        if pos - candidate >= WINDOW_SIZE:
            continue
        run = 0
        while run < limit and data[candidate + run] == data[pos + run]:
            run += 1
        if run > best_len:
            best_len = run
            best_pos = candidate
            if run == limit:
                break
    return best_pos, best_len


def compress(data: bytes, start: int = 0, length: Optional[int] = None) -> bytes:
    """Compress ``data[start:start + length]`` greedily.

    Matches are only taken from previously emitted bytes, never from the
    initial space fill, so the output decodes with any conforming decoder.
    """

    source = bytes(data[start : len(data) if length is None else start + length])
    out = bytearray()
    chains: Dict[bytes, List[int]] = {}
    pos = 0
    control_index = -1
    bit = 8

    def remember(index: int) -> None:
        if index + MIN_MATCH <= len(source):
            chains.setdefault(source[index : index + MIN_MATCH], []).append(index)

    while pos < len(source):
        if bit == 8:
            control_index = len(out)
            out.append(0)
            bit = 0

        match_pos, match_len = -1, 0
        if pos + MIN_MATCH <= len(source):
            candidates = chains.get(source[pos : pos + MIN_MATCH])
            if candidates:
                match_pos, match_len = _longest_match(source, pos, candidates)

        if match_len >= MIN_MATCH:
            ring = (WINDOW_START + match_pos) & WINDOW_MASK
            out[control_index] |= 1 << bit
            out.append(ring & 0xFF)
            out.append(((ring >> 4) & 0xF0) | (match_len - MIN_MATCH))
            for index in range(pos, pos + match_len):
                remember(index)
            pos += match_len
        else:
            out.append(source[pos])
            remember(pos)
            pos += 1
        bit += 1

    return bytes(out)


__all__ = ["compress", "decompress", "WINDOW_SIZE", "WINDOW_START"]
