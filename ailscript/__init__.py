"""Decode, disassemble and re-encode AIL engine script files."""

from __future__ import annotations

from .decoder import DecodeResult, Decoder, decode_image
from .exceptions import (
    DecodeError,
    InvalidSignatureError,
    InvalidStringOffsetError,
    ScriptError,
    StringPoolOverflowError,
    StructuralError,
    TruncatedSectionError,
    UnknownOpcodeError,
    UnknownOperatorError,
)
from .image import ScriptImage, load, write
from .importer import export_entries, import_append, import_rebuild
from .options import ScriptOptions
from .script import Script

__version__ = "0.1.0"

__all__ = [
    "DecodeError",
    "DecodeResult",
    "Decoder",
    "InvalidSignatureError",
    "InvalidStringOffsetError",
    "Script",
    "ScriptError",
    "ScriptImage",
    "ScriptOptions",
    "StringPoolOverflowError",
    "StructuralError",
    "TruncatedSectionError",
    "UnknownOpcodeError",
    "UnknownOperatorError",
    "decode_image",
    "export_entries",
    "import_append",
    "import_rebuild",
    "load",
    "write",
]
