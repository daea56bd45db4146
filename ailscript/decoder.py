"""Instruction decoder for AIL code segments.

The code buffer has no per-instruction length field: the decoder walks it
from offset 0, letting each opcode's operand schema decide how many bytes
belong to the instruction. ``0x00`` and ``0x05`` dispatch a second time
through the active version's function table.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .byteops import pack_u16, read_u8, read_u16
from .exceptions import UnexpectedEndError, UnknownOpcodeError
from .expression import decode_expression, encode_expression
from .image import ScriptImage
from .ir import (
    Expression,
    FunctionCall,
    Instruction,
    Operand,
    RawField,
    StringRef,
    SwitchTable,
)
from .opcodes import (
    EXPRESSION,
    FUNCTION,
    RAW_U16,
    RAW_U8,
    STRING,
    SWITCH,
    TOP_LEVEL,
    OpSpec,
)
from .pool import DEFAULT_ENCODING, resolve
from .versions import DEFAULT_VERSION, VersionHandler, get_handler

LOGGER = logging.getLogger(__name__)

# Fewer remaining bytes than this may be alignment padding.
PADDING_WINDOW = 4


class CodeCursor:
    """Bounds-checked reader over the code buffer.

    ``position`` is relative to the code buffer; ``address`` adds the file
    offset the buffer was loaded from so errors point into the file.
    """

    def __init__(self, code: bytes, base: int = 0, position: int = 0) -> None:
        self.code = code
        self.base = base
        self.position = position

    @property
    def address(self) -> int:
        return self.base + self.position

    @property
    def remaining(self) -> int:
        return len(self.code) - self.position

    def at_end(self) -> bool:
        return self.position >= len(self.code)

    def peek(self, count: int) -> bytes:
        return bytes(self.code[self.position : self.position + count])

    def u8(self) -> int:
        value = read_u8(self.code, self.position)
        if value is None:
            raise UnexpectedEndError(self.address, 1)
        self.position += 1
        return value

    def u16(self) -> int:
        value = read_u16(self.code, self.position)
        if value is None:
            raise UnexpectedEndError(self.address, 2 - max(self.remaining, 0))
        self.position += 2
        return value


@dataclass
class DecodeResult:
    """Linear instruction stream plus the string reference table."""

    instructions: List[Instruction] = field(default_factory=list)
    string_refs: List[int] = field(default_factory=list)
    version: str = DEFAULT_VERSION
    consumed: int = 0

    def references(self) -> List[StringRef]:
        refs: List[StringRef] = []
        for instruction in self.instructions:
            refs.extend(instruction.string_refs())
        return refs


class Decoder:
    """Decode one code buffer with a single version's tables."""

    def __init__(
        self,
        image: ScriptImage,
        *,
        version: str | int | VersionHandler = DEFAULT_VERSION,
        encoding: str = DEFAULT_ENCODING,
        trace: Optional[logging.Logger] = None,
    ) -> None:
        self.image = image
        self.handler = version if isinstance(version, VersionHandler) else get_handler(version)
        self.encoding = encoding
        self.trace = trace
        self._string_refs: List[int] = []

    def decode(self) -> DecodeResult:
        cursor = CodeCursor(self.image.code, self.image.code_base)
        self._string_refs = []
        instructions: List[Instruction] = []

        while not cursor.at_end():
            if self._at_padding(cursor):
                LOGGER.debug(
                    "Stopping at %08X: %d trailing zero byte(s)", cursor.address, cursor.remaining
                )
                break
            instruction = self.decode_instruction(cursor)
            instructions.append(instruction)
            if self.trace is not None:
                self.trace.debug("%08X | %s", instruction.address, instruction.mnemonic)

        LOGGER.debug(
            "Decoded %d instruction(s) and %d string reference(s) with %s",
            len(instructions),
            len(self._string_refs),
            self.handler.name,
        )
        return DecodeResult(
            instructions=instructions,
            string_refs=list(self._string_refs),
            version=self.handler.name,
            consumed=cursor.position,
        )

    @staticmethod
    def _at_padding(cursor: CodeCursor) -> bool:
        if cursor.remaining >= PADDING_WINDOW:
            return False
        return not any(cursor.peek(cursor.remaining))

    def decode_instruction(self, cursor: CodeCursor) -> Instruction:
        address = cursor.address
        opcode = cursor.u8()
        spec = TOP_LEVEL.get(opcode)
        if spec is None:
            raise UnknownOpcodeError(opcode, address)
        operands = self._decode_operands(cursor, spec)
        return Instruction(address=address, opcode=opcode, mnemonic=spec.mnemonic, operands=operands)

    def decode_function(self, cursor: CodeCursor) -> FunctionCall:
        address = cursor.address
        code = cursor.u8()
        spec = self.handler.lookup(code)
        if spec is None:
            raise UnknownOpcodeError(code, address, table="function")
        operands = self._decode_operands(cursor, spec)
        return FunctionCall(address=address, code=code, mnemonic=spec.mnemonic, operands=operands)

    def _decode_operands(self, cursor: CodeCursor, spec: OpSpec) -> List[Operand]:
        operands: List[Operand] = []
        for index, kind in enumerate(spec.operands):
            if kind == EXPRESSION:
                operands.append(decode_expression(cursor))
            elif kind == STRING:
                operands.append(self._decode_string_ref(cursor))
            elif kind == RAW_U8:
                operands.append(RawField(spec.operand_name(index), 1, cursor.u8()))
            elif kind == RAW_U16:
                operands.append(RawField(spec.operand_name(index), 2, cursor.u16()))
            elif kind == FUNCTION:
                operands.append(self.decode_function(cursor))
            elif kind == SWITCH:
                operands.append(self._decode_switch(cursor))
            else:  # pragma: no cover - tables are validated on load
                raise ValueError(f"Unknown operand kind {kind!r}")
        return operands

    def _decode_string_ref(self, cursor: CodeCursor) -> StringRef:
        address = cursor.address
        code_address = cursor.position
        offset = cursor.u16()
        text = resolve(self.image.pool, offset, self.encoding, address=address)
        self._string_refs.append(code_address)
        return StringRef(code_address=code_address, offset=offset, text=text)

    @staticmethod
    def _decode_switch(cursor: CodeCursor) -> SwitchTable:
        default_addr = cursor.u16()
        count = cursor.u8()
        cases = []
        for _ in range(count):
            case_id = cursor.u8()
            cases.append((case_id, cursor.u16()))
        return SwitchTable(default_addr=default_addr, cases=cases)


def decode_image(
    image: ScriptImage,
    *,
    version: str | int | VersionHandler = DEFAULT_VERSION,
    encoding: str = DEFAULT_ENCODING,
    trace: Optional[logging.Logger] = None,
) -> DecodeResult:
    """Decode ``image.code`` with the tables of ``version``."""

    return Decoder(image, version=version, encoding=encoding, trace=trace).decode()


def encode_operand(operand: Operand) -> bytes:
    """Serialise a decoded operand back to its byte form."""

    if isinstance(operand, Expression):
        return encode_expression(operand.tokens)
    if isinstance(operand, StringRef):
        return pack_u16(operand.offset)
    if isinstance(operand, RawField):
        return operand.value.to_bytes(operand.width, "little")
    if isinstance(operand, SwitchTable):
        out = bytearray(pack_u16(operand.default_addr))
        out.append(len(operand.cases))
        for case_id, addr in operand.cases:
            out.append(case_id)
            out.extend(pack_u16(addr))
        return bytes(out)
    if isinstance(operand, FunctionCall):
        return bytes([operand.code]) + b"".join(encode_operand(op) for op in operand.operands)
    raise TypeError(f"Unsupported operand type: {type(operand)!r}")


def encode_instruction(instruction: Instruction) -> bytes:
    return bytes([instruction.opcode]) + b"".join(
        encode_operand(operand) for operand in instruction.operands
    )


def encode_instructions(instructions: List[Instruction]) -> bytes:
    """Concatenate the encoded form of ``instructions``."""

    return b"".join(encode_instruction(instruction) for instruction in instructions)


__all__ = [
    "CodeCursor",
    "DecodeResult",
    "Decoder",
    "PADDING_WINDOW",
    "decode_image",
    "encode_instruction",
    "encode_instructions",
    "encode_operand",
]
