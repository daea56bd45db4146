"""Reader and writer for the engine's numbered archive container.

Layout::

    u32 count
    u32 entry_length * count
    entries, each either empty (length 0) or
        u16 flags, u32 unpacked_length, payload

``flags & 1`` marks an LZSS-compressed payload. Entries carry no names; on
disk they are stored as ``00000``, ``00001``, ...
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Optional

from tqdm import tqdm

from . import lzss
from .byteops import pack_u32, read_u16, read_u32
from .exceptions import ArchiveError

LOGGER = logging.getLogger(__name__)

ENTRY_HEADER_SIZE = 6
FLAG_COMPRESSED = 0x0001
MAX_ENTRIES = 400000

_ENTRY_NAME = re.compile(r"^\d{5}$")

# Payloads that are already compressed are stored as-is.
_STORED_SIGNATURES = {
    0x474E5089,  # PNG
    0x5367674F,  # OGG
}


@dataclass
class ArchiveEntry:
    index: int
    offset: int
    length: int
    flags: int = 0
    unpacked_length: int = 0

    @property
    def name(self) -> str:
        return f"{self.index:05d}"

    @property
    def is_compressed(self) -> bool:
        return bool(self.flags & FLAG_COMPRESSED)


def read_index(data: bytes) -> List[ArchiveEntry]:
    """Parse the entry table of an archive held in ``data``."""

    count = read_u32(data, 0)
    if count is None or not 0 < count < MAX_ENTRIES:
        raise ArchiveError(f"Implausible entry count {count!r}")

    offset = 4 + count * 4
    if offset > len(data):
        raise ArchiveError("Entry table runs past the end of the archive")

    entries: List[ArchiveEntry] = []
    for index in range(count):
        length = read_u32(data, 4 + index * 4) or 0
        entry = ArchiveEntry(index=index, offset=offset, length=length)
        if offset + length > len(data):
            raise ArchiveError(f"Entry {entry.name} runs past the end of the archive")
        if length:
            if length < ENTRY_HEADER_SIZE:
                raise ArchiveError(f"Entry {entry.name} is shorter than its header")
            entry.flags = read_u16(data, offset) or 0
            entry.unpacked_length = read_u32(data, offset + 2) or 0
        entries.append(entry)
        offset += length
    return entries


def read_entry(data: bytes, entry: ArchiveEntry) -> bytes:
    """Return the unpacked payload of ``entry``."""

    if not entry.length:
        return b""
    start = entry.offset + ENTRY_HEADER_SIZE
    size = entry.length - ENTRY_HEADER_SIZE
    if entry.is_compressed:
        return lzss.decompress(data, start, size, output_size=entry.unpacked_length)
    return bytes(data[start : start + size])


def iter_entries(data: bytes) -> Iterator[tuple[ArchiveEntry, bytes]]:
    for entry in read_index(data):
        yield entry, read_entry(data, entry)


def extract(archive_path: Path | str, output_dir: Path | str, *, progress: bool = True) -> List[Path]:
    """Unpack every entry of ``archive_path`` into ``output_dir``."""

    source = Path(archive_path)
    data = source.read_bytes()
    entries = read_index(data)
    target_dir = Path(output_dir)
    target_dir.mkdir(parents=True, exist_ok=True)

    written: List[Path] = []
    for entry in tqdm(entries, desc=source.name, disable=not progress):
        path = target_dir / entry.name
        path.write_bytes(read_entry(data, entry))
        written.append(path)
    LOGGER.info("Extracted %d entr%s from %s", len(written), "y" if len(written) == 1 else "ies", source)
    return written


def _should_compress(payload: bytes) -> bool:
    signature = read_u32(payload, 0)
    return signature is None or signature not in _STORED_SIGNATURES


def pack_entry(payload: bytes, *, compress: Optional[bool] = None) -> bytes:
    """Encode one entry body; empty payloads produce an empty entry."""

    if not payload:
        return b""
    if compress is None:
        compress = _should_compress(payload)
    flags = 0
    body = payload
    if compress:
        body = lzss.compress(payload)
        flags |= FLAG_COMPRESSED
    return flags.to_bytes(2, "little") + pack_u32(len(payload)) + body


def build(payloads: List[bytes]) -> bytes:
    """Assemble an archive from payloads in index order."""

    if not payloads:
        raise ArchiveError("No files were found to pack")
    bodies = [pack_entry(payload) for payload in payloads]
    parts = [pack_u32(len(bodies))]
    parts.extend(pack_u32(len(body)) for body in bodies)
    parts.extend(bodies)
    return b"".join(parts)


def collect_inputs(root: Path | str) -> List[Path]:
    """Return the numbered files under ``root``, checking the sequence has no gaps."""

    base = Path(root)
    files = sorted(path for path in base.iterdir() if path.is_file() and _ENTRY_NAME.match(path.name))
    if not files:
        raise ArchiveError(f"No files were found to pack in {base}")
    last = int(files[-1].name)
    present = {path.name for path in files}
    for index in range(last + 1):
        if f"{index:05d}" not in present:
            raise ArchiveError(f'Missing file "{index:05d}" in directory "{base}"')
    return files


def create(root: Path | str, archive_path: Path | str, *, progress: bool = True) -> Path:
    """Pack the numbered files in ``root`` into ``archive_path``."""

    files = collect_inputs(root)
    payloads = [path.read_bytes() for path in tqdm(files, desc="pack", disable=not progress)]
    data = build(payloads)
    target = Path(archive_path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(data)
    LOGGER.info("Packed %d file(s) into %s (%d bytes)", len(files), target, len(data))
    return target


__all__ = [
    "ArchiveEntry",
    "build",
    "collect_inputs",
    "create",
    "extract",
    "iter_entries",
    "pack_entry",
    "read_entry",
    "read_index",
]
