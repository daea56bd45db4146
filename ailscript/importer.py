"""Export strings for translation and write translated strings back.

Two import strategies are available:

``append``
    The original pool is kept byte-for-byte and only changed strings are
    appended behind it. Safe even when the decoder missed a reference, at the
    cost of a larger file.
``rebuild``
    The pool is rebuilt from scratch with only the referenced strings,
    identical strings sharing one entry. Untouched strings keep their stored
    bytes. Unreferenced bytes of the original pool are dropped.

Both strategies patch the u16 fields listed in ``string_refs`` in place; the
code buffer never changes size.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Sequence, Tuple

from .byteops import read_u16, write_u16
from .image import ScriptImage
from .pool import DEFAULT_ENCODING, PoolBuilder, read_cstring, resolve

LOGGER = logging.getLogger(__name__)

APPEND = "append"
REBUILD = "rebuild"
MODES = (APPEND, REBUILD)


@dataclass
class ImportReport:
    """Summary of one import pass."""

    mode: str
    references: int = 0
    patched: int = 0
    unique_strings: int = 0
    pool_before: int = 0
    pool_after: int = 0
    patches: Dict[int, int] = field(default_factory=dict)

    def as_dict(self) -> Dict[str, object]:
        return {
            "mode": self.mode,
            "references": self.references,
            "patched": self.patched,
            "unique_strings": self.unique_strings,
            "pool_before": self.pool_before,
            "pool_after": self.pool_after,
        }


def _ref_offset(image: ScriptImage, code_address: int) -> int:
    """Read the pool offset stored at ``code_address`` after a bounds check."""

    offset = read_u16(image.code, code_address)
    if offset is None:
        raise IndexError(
            f"string reference {code_address:08X} lies outside the code buffer ({len(image.code)} bytes)"
        )
    return offset


def original_texts(
    image: ScriptImage,
    string_refs: Sequence[int],
    encoding: str = DEFAULT_ENCODING,
) -> List[Tuple[int, int, str]]:
    """Resolve ``(code_address, offset, text)`` for every reference."""

    resolved: List[Tuple[int, int, str]] = []
    for code_address in string_refs:
        offset = _ref_offset(image, code_address)
        text = resolve(image.pool, offset, encoding, address=image.absolute(code_address))
        resolved.append((code_address, offset, text))
    return resolved


def export_entries(
    image: ScriptImage,
    string_refs: Sequence[int],
    encoding: str = DEFAULT_ENCODING,
) -> List[Tuple[int, str]]:
    """Return ``(code_address, text)`` pairs in instruction-stream order.

    Empty and whitespace-only strings are left out.
    """

    entries = [
        (code_address, text)
        for code_address, _, text in original_texts(image, string_refs, encoding)
        if text.strip()
    ]
    LOGGER.debug("Exporting %d of %d string reference(s)", len(entries), len(string_refs))
    return entries


def import_append(
    image: ScriptImage,
    string_refs: Sequence[int],
    translation: Mapping[int, str],
    *,
    input_encoding: str = DEFAULT_ENCODING,
    output_encoding: str = DEFAULT_ENCODING,
    allow_offset_overflow: bool = False,
) -> ImportReport:
    """Append changed strings behind the untouched original pool."""

    report = ImportReport(mode=APPEND, references=len(string_refs), pool_before=len(image.pool))
    builder = PoolBuilder(
        encoding=output_encoding,
        base=image.pool,
        allow_overflow=allow_offset_overflow,
    )

    for code_address, _, original in original_texts(image, string_refs, input_encoding):
        text = translation.get(code_address)
        if text is None or text == original:
            continue
        report.patches[code_address] = builder.add(text, code_address=image.absolute(code_address))

    _apply(image, builder, report)
    return report


def import_rebuild(
    image: ScriptImage,
    string_refs: Sequence[int],
    translation: Mapping[int, str],
    *,
    input_encoding: str = DEFAULT_ENCODING,
    output_encoding: str = DEFAULT_ENCODING,
    allow_offset_overflow: bool = False,
) -> ImportReport:
    """Repack the pool with only the referenced, deduplicated strings."""

    report = ImportReport(mode=REBUILD, references=len(string_refs), pool_before=len(image.pool))
    # Every original string is resolved before the new pool receives a byte.
    resolved = original_texts(image, string_refs, input_encoding)
    builder = PoolBuilder(encoding=output_encoding, allow_overflow=allow_offset_overflow)

    for code_address, offset, original in resolved:
        text = translation.get(code_address)
        absolute = image.absolute(code_address)
        if text is None or text == original:
            # Untouched strings are copied byte for byte.
            raw = read_cstring(image.pool, offset)
            report.patches[code_address] = builder.add_raw(raw, code_address=absolute)
        else:
            report.patches[code_address] = builder.add(text, code_address=absolute)

    _apply(image, builder, report)
    return report


def _apply(image: ScriptImage, builder: PoolBuilder, report: ImportReport) -> None:
    for code_address, offset in report.patches.items():
        write_u16(image.code, code_address, offset)
    image.replace_pool(builder.getvalue())
    report.patched = len(report.patches)
    report.unique_strings = len(builder.cache)
    report.pool_after = len(image.pool)
    LOGGER.info(
        "%s import: patched %d of %d reference(s), pool 0x%X -> 0x%X bytes",
        report.mode,
        report.patched,
        report.references,
        report.pool_before,
        report.pool_after,
    )


def import_text(
    image: ScriptImage,
    string_refs: Sequence[int],
    translation: Mapping[int, str],
    *,
    mode: str = APPEND,
    **options: object,
) -> ImportReport:
    """Dispatch to :func:`import_append` or :func:`import_rebuild`."""

    if mode == APPEND:
        return import_append(image, string_refs, translation, **options)  # type: ignore[arg-type]
    if mode == REBUILD:
        return import_rebuild(image, string_refs, translation, **options)  # type: ignore[arg-type]
    raise ValueError(f"Unknown import mode {mode!r}; expected one of {MODES}")


__all__ = [
    "APPEND",
    "ImportReport",
    "MODES",
    "REBUILD",
    "export_entries",
    "import_append",
    "import_rebuild",
    "import_text",
    "original_texts",
]
