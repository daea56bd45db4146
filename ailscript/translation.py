"""Bilingual translation text files.

Every exported string produces a block of three lines::

    ◇0000002A◇original text
    ◆0000002A◆original text

The ``◇`` line is a read-only reference; translators edit the ``◆`` line.
Only ``◆`` lines are read back, keyed by the 8-digit hexadecimal code address.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Dict, Iterable, List, Tuple

from .exceptions import TranslationFormatError

LOGGER = logging.getLogger(__name__)

ORIGINAL_MARK = "◇"
TRANSLATION_MARK = "◆"

_ENTRY_PATTERN = re.compile(r"^(?P<mark>[◇◆])(?P<addr>[0-9A-Fa-f]{8})(?P=mark)(?P<text>.*)$")

_ESCAPES = {"\\": "\\\\", "\r": "\\r", "\n": "\\n", "\t": "\\t"}
_UNESCAPES = {"\\": "\\", "r": "\r", "n": "\n", "t": "\t"}


def escape(text: str) -> str:
    """Make ``text`` fit on a single line."""

    return "".join(_ESCAPES.get(ch, ch) for ch in text)


def unescape(text: str) -> str:
    """Reverse :func:`escape`; unknown sequences are kept verbatim."""

    result: List[str] = []
    i = 0
    while i < len(text):
        ch = text[i]
        if ch == "\\" and i + 1 < len(text) and text[i + 1] in _UNESCAPES:
            result.append(_UNESCAPES[text[i + 1]])
            i += 2
            continue
        result.append(ch)
        i += 1
    return "".join(result)


def format_entries(entries: Iterable[Tuple[int, str]]) -> str:
    lines: List[str] = []
    for address, text in entries:
        escaped = escape(text)
        lines.append(f"{ORIGINAL_MARK}{address:08X}{ORIGINAL_MARK}{escaped}")
        lines.append(f"{TRANSLATION_MARK}{address:08X}{TRANSLATION_MARK}{escaped}")
        lines.append("")
    return "\n".join(lines) + ("\n" if lines else "")


def write_translation(path: Path | str, entries: Iterable[Tuple[int, str]]) -> Path:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(format_entries(entries), encoding="utf-8")
    LOGGER.info("Wrote translation file %s", target)
    return target


def parse_translation(text: str) -> Dict[int, str]:
    """Return ``{code_address: replacement}`` from translation file contents."""

    mapping: Dict[int, str] = {}
    if text.startswith("\ufeff"):
        text = text[1:]
    for line_number, raw in enumerate(text.split("\n"), start=1):
        line = raw.rstrip("\r")
        if not line.startswith(TRANSLATION_MARK):
            continue
        match = _ENTRY_PATTERN.match(line)
        if match is None:
            raise TranslationFormatError(f"malformed translation line {line!r}", line_number)
        address = int(match.group("addr"), 16)
        if address in mapping:
            LOGGER.debug("Address %08X appears again on line %d; keeping the later text", address, line_number)
        mapping[address] = unescape(match.group("text"))
    return mapping


def load_translation(path: Path | str) -> Dict[int, str]:
    source = Path(path)
    if not source.is_file():
        raise FileNotFoundError(f"Translation file not found: {source}")
    mapping = parse_translation(source.read_text(encoding="utf-8"))
    LOGGER.info("Loaded %d translation entr%s from %s", len(mapping), "y" if len(mapping) == 1 else "ies", source)
    return mapping


__all__ = [
    "ORIGINAL_MARK",
    "TRANSLATION_MARK",
    "escape",
    "format_entries",
    "load_translation",
    "parse_translation",
    "unescape",
    "write_translation",
]
