"""Custom exception hierarchy for the script tooling."""

from __future__ import annotations

from typing import Optional


class ScriptError(Exception):
    """Base class for all script decoding and rebuilding errors."""


class StructuralError(ScriptError):
    """Raised when the file sections do not match the declared layout."""


class InvalidSignatureError(StructuralError):
    """Raised when the leading 32-bit signature is not zero."""

    def __init__(self, signature: int) -> None:
        super().__init__(
            f"Invalid signature 0x{signature:08X}; this may not be a valid AIL script file"
        )
        self.signature = signature


class TruncatedSectionError(StructuralError):
    """Raised when a section is shorter than its declared length."""

    def __init__(self, section: str, expected: int, actual: int) -> None:
        super().__init__(
            f"Truncated {section} section: expected {expected} bytes, found {actual}"
        )
        self.section = section
        self.expected = expected
        self.actual = actual


class DecodeError(ScriptError):
    """Base class for errors raised while walking the instruction stream."""

    def __init__(self, message: str, address: int) -> None:
        super().__init__(message)
        self.address = address


class UnexpectedEndError(DecodeError):
    """Raised when an operand runs past the end of the code buffer."""

    def __init__(self, address: int, wanted: int) -> None:
        super().__init__(
            f"Unexpected end of code at {address:08X} (needed {wanted} more byte(s))",
            address,
        )
        self.wanted = wanted


class UnknownOpcodeError(DecodeError):
    """Raised for an opcode or function code absent from the active table."""

    def __init__(self, byte: int, address: int, *, table: str = "opcode") -> None:
        label = "function code" if table == "function" else "opcode"
        super().__init__(f"Unexpected {label} {byte:02X} at {address:08X}", address)
        self.byte = byte
        self.table = table


class UnknownOperatorError(DecodeError):
    """Raised when an expression operator byte is not recognised."""

    def __init__(self, byte: int, address: int) -> None:
        super().__init__(f"Unexpected operator {byte:02X} at {address:08X}", address)
        self.byte = byte


class InvalidStringOffsetError(DecodeError):
    """Raised when a string reference points outside the string pool."""

    def __init__(self, offset: int, pool_length: int, address: Optional[int] = None) -> None:
        where = f" at {address:08X}" if address is not None else ""
        super().__init__(
            f"Unexpected string offset 0x{offset:04X}{where} (pool holds {pool_length} bytes)",
            address if address is not None else -1,
        )
        self.offset = offset
        self.pool_length = pool_length


class StringPoolOverflowError(ScriptError):
    """Raised when a rebuilt pool offset no longer fits the 16-bit reference field."""

    def __init__(self, offset: int, code_address: int) -> None:
        super().__init__(
            f"String offset 0x{offset:X} for reference {code_address:08X} exceeds 0xFFFF"
        )
        self.offset = offset
        self.code_address = code_address


class TextEncodingError(ScriptError):
    """Raised when imported text cannot be represented in the output encoding."""

    def __init__(self, text: str, encoding: str, code_address: int) -> None:
        super().__init__(
            f"Text {text!r} for reference {code_address:08X} cannot be encoded as {encoding}"
        )
        self.text = text
        self.encoding = encoding
        self.code_address = code_address


class TranslationFormatError(ScriptError):
    """Raised when a translation text file line cannot be parsed."""

    def __init__(self, message: str, line_number: int) -> None:
        super().__init__(f"line {line_number}: {message}")
        self.line_number = line_number


class ArchiveError(ScriptError):
    """Raised for malformed archive containers or pack inputs."""


__all__ = [
    "ArchiveError",
    "DecodeError",
    "InvalidSignatureError",
    "InvalidStringOffsetError",
    "ScriptError",
    "StringPoolOverflowError",
    "StructuralError",
    "TextEncodingError",
    "TranslationFormatError",
    "TruncatedSectionError",
    "UnexpectedEndError",
    "UnknownOpcodeError",
    "UnknownOperatorError",
]
