"""Section loader and writer for AIL script files.

A script file is laid out as::

    u32 signature (always 0)
    u16 label section length
    u16 code length
    4 reserved bytes
    label pairs (u16, u16) * (label length / 4)
    code bytes
    string pool (everything up to the end of the file)

The pool length is not stored anywhere; it is implied by the file size.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Tuple

from .byteops import pack_u16, read_u16, read_u32
from .exceptions import InvalidSignatureError, TruncatedSectionError

LOGGER = logging.getLogger(__name__)

HEADER_SIZE = 12
LABEL_LENGTH_OFFSET = 4
CODE_LENGTH_OFFSET = 6

Label = Tuple[int, int]


@dataclass
class ScriptImage:
    """In-memory copy of the four sections of a script file."""

    header: bytes
    labels: List[Label] = field(default_factory=list)
    code: bytearray = field(default_factory=bytearray)
    code_base: int = HEADER_SIZE
    pool: bytes = b""

    @property
    def label_length(self) -> int:
        return read_u16(self.header, LABEL_LENGTH_OFFSET) or 0

    @property
    def code_length(self) -> int:
        return read_u16(self.header, CODE_LENGTH_OFFSET) or 0

    def code_offset(self, absolute: int) -> int:
        """Translate an absolute file offset into a code buffer offset."""

        return absolute - self.code_base

    def absolute(self, code_offset: int) -> int:
        return self.code_base + code_offset

    def replace_pool(self, pool: bytes) -> None:
        """Swap in a freshly built string pool."""

        LOGGER.debug("Replacing string pool (%d -> %d bytes)", len(self.pool), len(pool))
        self.pool = bytes(pool)


def load(data: bytes) -> ScriptImage:
    """Split ``data`` into header, label table, code and string pool."""

    if len(data) < HEADER_SIZE:
        raise TruncatedSectionError("header", HEADER_SIZE, len(data))

    header = bytes(data[:HEADER_SIZE])
    signature = read_u32(header, 0)
    if signature != 0:
        raise InvalidSignatureError(signature or 0)

    label_length = read_u16(header, LABEL_LENGTH_OFFSET) or 0
    code_length = read_u16(header, CODE_LENGTH_OFFSET) or 0

    label_count = label_length // 4
    if label_length % 4:
        LOGGER.warning(
            "Label section length %d is not a multiple of 4; trailing %d byte(s) belong to code",
            label_length,
            label_length % 4,
        )

    position = HEADER_SIZE
    label_bytes = label_count * 4
    if position + label_bytes > len(data):
        raise TruncatedSectionError("label", label_bytes, len(data) - position)

    labels: List[Label] = []
    for index in range(label_count):
        base = position + index * 4
        labels.append((read_u16(data, base) or 0, read_u16(data, base + 2) or 0))
    position += label_bytes

    if position + code_length > len(data):
        raise TruncatedSectionError("code", code_length, len(data) - position)

    code = bytearray(data[position : position + code_length])
    code_base = position
    position += code_length

    pool = bytes(data[position:])

    LOGGER.debug(
        "Loaded script: %d label(s), code 0x%X bytes at 0x%X, pool 0x%X bytes",
        len(labels),
        len(code),
        code_base,
        len(pool),
    )
    return ScriptImage(header=header, labels=labels, code=code, code_base=code_base, pool=pool)


def write(image: ScriptImage) -> bytes:
    """Reassemble ``image`` into file bytes.

    The header is written verbatim, so an unmodified image reproduces its
    input exactly.
    """

    if len(image.header) != HEADER_SIZE:
        raise ValueError("image header must be exactly 12 bytes")

    parts = [bytes(image.header)]
    for first, second in image.labels:
        parts.append(pack_u16(first))
        parts.append(pack_u16(second))
    parts.append(bytes(image.code))
    parts.append(bytes(image.pool))
    return b"".join(parts)


def load_file(path: Path | str) -> ScriptImage:
    script_path = Path(path)
    if not script_path.is_file():
        raise FileNotFoundError(f"Script not found: {script_path}")
    return load(script_path.read_bytes())


def save_file(image: ScriptImage, path: Path | str) -> Path:
    """Write ``image`` to ``path``; the file is only created once encoding succeeded."""

    payload = write(image)
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(payload)
    LOGGER.info("Wrote %s (%d bytes)", target, len(payload))
    return target


__all__ = [
    "CODE_LENGTH_OFFSET",
    "HEADER_SIZE",
    "LABEL_LENGTH_OFFSET",
    "Label",
    "ScriptImage",
    "load",
    "load_file",
    "save_file",
    "write",
]
