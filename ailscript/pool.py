"""String pool addressing and rebuilding."""

from __future__ import annotations

import codecs
import logging
from dataclasses import dataclass, field
from typing import Dict, Optional

from .exceptions import InvalidStringOffsetError, StringPoolOverflowError, TextEncodingError

LOGGER = logging.getLogger(__name__)

DEFAULT_ENCODING = "cp932"

# Each string the engine stores is followed by two zero bytes.
STRING_TERMINATOR = b"\x00\x00"

MAX_OFFSET = 0xFFFF


def normalise_encoding(name: str) -> str:
    """Return the canonical codec name for ``name`` or raise ``LookupError``."""

    return codecs.lookup(name).name


def read_cstring(pool: bytes, offset: int) -> bytes:
    """Return the raw bytes from ``offset`` up to the next zero byte or pool end."""

    end = pool.find(b"\x00", offset)
    if end == -1:
        end = len(pool)
    return bytes(pool[offset:end])


def resolve(
    pool: bytes,
    offset: int,
    encoding: str = DEFAULT_ENCODING,
    *,
    address: Optional[int] = None,
) -> str:
    """Decode the string stored at ``offset``.

    Offsets at or beyond the pool end are fatal. Undecodable bytes are kept
    as replacement characters so a single bad string does not abort export.
    """

    if offset < 0 or offset >= len(pool):
        raise InvalidStringOffsetError(offset, len(pool), address)
    raw = read_cstring(pool, offset)
    if not raw:
        return ""
    return raw.decode(encoding, errors="replace")


@dataclass
class PoolBuilder:
    """Accumulate a new string pool while deduplicating by stored bytes.

    ``base`` seeds the buffer (append mode copies the original pool, rebuild
    mode starts empty). ``cache`` maps encoded string bytes to the offset
    they were first written at during this session.
    """

    encoding: str = DEFAULT_ENCODING
    base: bytes = b""
    allow_overflow: bool = False
    terminator: bytes = STRING_TERMINATOR
    cache: Dict[bytes, int] = field(default_factory=dict)
    _buffer: bytearray = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._buffer = bytearray(self.base)

    def __len__(self) -> int:
        return len(self._buffer)

    def add(self, text: str, *, code_address: int = -1) -> int:
        """Return the pool offset for ``text``, appending it when unseen.

        Text the output encoding cannot represent raises
        :class:`TextEncodingError`.
        """

        try:
            raw = text.encode(self.encoding)
        except UnicodeEncodeError as exc:
            raise TextEncodingError(text, self.encoding, code_address) from exc
        return self.add_raw(raw, code_address=code_address)

    def add_raw(self, raw: bytes, *, code_address: int = -1) -> int:
        """Return the pool offset for already encoded ``raw`` bytes.

        The returned value always fits in 16 bits: offsets beyond ``0xFFFF``
        raise :class:`StringPoolOverflowError` unless ``allow_overflow`` is set,
        in which case they wrap exactly as the engine's 16-bit field would.
        """

        offset = self.cache.get(raw)
        if offset is None:
            offset = len(self._buffer)
            self._buffer.extend(raw)
            self._buffer.extend(self.terminator)
            self.cache[raw] = offset
        if offset > MAX_OFFSET:
            if not self.allow_overflow:
                raise StringPoolOverflowError(offset, code_address)
            LOGGER.warning(
                "String offset 0x%X for reference %08X wraps to 0x%04X",
                offset,
                code_address,
                offset & MAX_OFFSET,
            )
            return offset & MAX_OFFSET
        return offset

    def getvalue(self) -> bytes:
        return bytes(self._buffer)


__all__ = [
    "DEFAULT_ENCODING",
    "MAX_OFFSET",
    "PoolBuilder",
    "STRING_TERMINATOR",
    "normalise_encoding",
    "read_cstring",
    "resolve",
]
