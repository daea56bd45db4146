"""Helpers for reading and writing packed little-endian fields."""

from __future__ import annotations

from typing import Optional


def read_uint(data: bytes, offset: int, size: int) -> Optional[int]:
    """Return an unsigned little-endian integer, or ``None`` when truncated.

    Unlike a lenient reader, missing bytes are never padded: callers decide
    which error describes a short read in their context.
    """

    if offset < 0 or offset + size > len(data):
        return None
    return int.from_bytes(data[offset : offset + size], "little", signed=False)


def read_u8(data: bytes, offset: int) -> Optional[int]:
    return read_uint(data, offset, 1)


def read_u16(data: bytes, offset: int) -> Optional[int]:
    return read_uint(data, offset, 2)


def read_u32(data: bytes, offset: int) -> Optional[int]:
    return read_uint(data, offset, 4)


def pack_u16(value: int) -> bytes:
    """Encode ``value`` as an unsigned 16-bit little-endian field."""

    if not 0 <= value <= 0xFFFF:
        raise ValueError(f"value {value} does not fit in 16 bits")
    return value.to_bytes(2, "little")


def pack_u32(value: int) -> bytes:
    if not 0 <= value <= 0xFFFFFFFF:
        raise ValueError(f"value {value} does not fit in 32 bits")
    return value.to_bytes(4, "little")


def write_u16(buffer: bytearray, offset: int, value: int) -> None:
    """Patch ``buffer`` in place with a 16-bit value at ``offset``.

    The buffer is never resized; writing past its end is an error.
    """

    if offset < 0 or offset + 2 > len(buffer):
        raise IndexError(f"cannot patch u16 at {offset:08X}; buffer holds {len(buffer)} bytes")
    buffer[offset : offset + 2] = pack_u16(value)


__all__ = ["read_uint", "read_u8", "read_u16", "read_u32", "pack_u16", "pack_u32", "write_u16"]
