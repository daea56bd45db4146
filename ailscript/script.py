"""Session facade tying the loader, decoder and importers together."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Mapping, Optional, Tuple

from . import disassembler, image as image_io, importer, translation
from .decoder import DecodeResult, decode_image
from .image import ScriptImage
from .importer import ImportReport
from .ir import Instruction
from .options import ScriptOptions

LOGGER = logging.getLogger(__name__)


class Script:
    """A loaded and decoded script file.

    Decoding happens once, in :meth:`load`. Imports patch the code buffer in
    place and swap the pool, so ``string_refs`` stays valid afterwards while
    the text cached on decoded ``StringRef`` operands does not.
    """

    def __init__(
        self,
        image: ScriptImage,
        result: DecodeResult,
        options: ScriptOptions,
        source: Optional[Path] = None,
    ) -> None:
        self.image = image
        self.result = result
        self.options = options
        self.source = source

    @classmethod
    def load(
        cls,
        source: Path | str | bytes,
        options: Optional[ScriptOptions] = None,
        *,
        trace: Optional[logging.Logger] = None,
    ) -> "Script":
        opts = options or ScriptOptions()
        path: Optional[Path] = None
        if isinstance(source, (bytes, bytearray)):
            image = image_io.load(bytes(source))
        else:
            path = Path(source)
            image = image_io.load_file(path)
        result = decode_image(image, version=opts.version, encoding=opts.encoding, trace=trace)
        if path is not None:
            LOGGER.info(
                "Decoded %s: %d instruction(s), %d string reference(s)",
                path.name,
                len(result.instructions),
                len(result.string_refs),
            )
        return cls(image, result, opts, path)

    @property
    def instructions(self) -> List[Instruction]:
        return self.result.instructions

    @property
    def string_refs(self) -> List[int]:
        return self.result.string_refs

    def disassembly(self) -> str:
        return disassembler.render(self.instructions, image=self.image, version=self.result.version)

    def export_disassembly(self, path: Path | str) -> Path:
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.disassembly(), encoding="utf-8")
        return target

    def entries(self) -> List[Tuple[int, str]]:
        return importer.export_entries(self.image, self.string_refs, self.options.encoding)

    def export_text(self, path: Path | str) -> Path:
        return translation.write_translation(path, self.entries())

    def apply_translation(self, mapping: Mapping[int, str], *, mode: str = importer.APPEND) -> ImportReport:
        report = importer.import_text(
            self.image,
            self.string_refs,
            mapping,
            mode=mode,
            input_encoding=self.options.encoding,
            output_encoding=self.options.effective_output_encoding,
            allow_offset_overflow=self.options.allow_offset_overflow,
        )
        # Later imports compare against the strings now in the pool.
        self.options = self.options.with_changes(encoding=self.options.effective_output_encoding)
        return report

    def import_text(self, path: Path | str, *, mode: str = importer.APPEND) -> ImportReport:
        return self.apply_translation(translation.load_translation(path), mode=mode)

    def to_bytes(self) -> bytes:
        return image_io.write(self.image)

    def save(self, path: Path | str) -> Path:
        return image_io.save_file(self.image, path)


__all__ = ["Script"]
