"""Operand kinds and the top-level opcode table.

Operand schemas are written as short signature strings, one letter per
operand, so tables stay compact and easy to diff between format versions:

=====  ==============================================================
``B``  raw u8 field
``W``  raw u16 field
``E``  expression
``S``  string reference (u16 pool offset)
``F``  nested function dispatched through the version's function table
``T``  switch table: u16 default, u8 count, count x (u8 id, u16 addr)
=====  ==============================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Tuple

RAW_U8 = "B"
RAW_U16 = "W"
EXPRESSION = "E"
STRING = "S"
FUNCTION = "F"
SWITCH = "T"

OPERAND_KINDS = frozenset({RAW_U8, RAW_U16, EXPRESSION, STRING, FUNCTION, SWITCH})
FUNCTION_OPERAND_KINDS = frozenset({RAW_U16, EXPRESSION, STRING})


@dataclass(frozen=True)
class OpSpec:
    """Mnemonic and operand schema of one opcode or function code."""

    mnemonic: str
    operands: Tuple[str, ...] = ()
    names: Tuple[str, ...] = ()

    def operand_name(self, index: int) -> str:
        if index < len(self.names):
            return self.names[index]
        return f"arg{index}"


def parse_signature(signature: str, *, allowed: frozenset = OPERAND_KINDS) -> Tuple[str, ...]:
    """Split a signature string into operand kinds, validating each letter."""

    kinds = tuple(signature)
    for kind in kinds:
        if kind not in allowed:
            raise ValueError(f"Unknown operand kind {kind!r} in signature {signature!r}")
    return kinds


def build_function_table(
    signatures: Mapping[int, str],
    *,
    names: Optional[Mapping[int, str]] = None,
) -> Dict[int, OpSpec]:
    """Expand ``code -> signature`` data into :class:`OpSpec` entries."""

    table: Dict[int, OpSpec] = {}
    for code, signature in sorted(signatures.items()):
        if not 0 <= code <= 0xFF:
            raise ValueError(f"function code {code!r} out of range")
        mnemonic = (names or {}).get(code, f"func_{code:02X}")
        table[code] = OpSpec(
            mnemonic=mnemonic,
            operands=parse_signature(signature, allowed=FUNCTION_OPERAND_KINDS),
        )
    return table


# Shared by every format version; only the nested function tables differ.
TOP_LEVEL: Dict[int, OpSpec] = {
    0x00: OpSpec("exec_func", (FUNCTION,), ("function",)),
    0x04: OpSpec("store_v", (RAW_U8, RAW_U16, EXPRESSION), ("register", "mask", "value")),
    0x05: OpSpec("store_f", (RAW_U8, RAW_U16, FUNCTION), ("register", "mask", "function")),
    0x08: OpSpec("jump", (RAW_U16,), ("target",)),
    0x09: OpSpec("switch", (RAW_U8, RAW_U16, SWITCH), ("register", "mask", "table")),
    0x0A: OpSpec("load_script", (EXPRESSION,), ("script",)),
    0x0B: OpSpec("call", (EXPRESSION, EXPRESSION), ("label", "arg")),
    0x0C: OpSpec("jump_label", (EXPRESSION,), ("label",)),
    0x0D: OpSpec("ret"),
    0x10: OpSpec("call_script", (EXPRESSION, EXPRESSION, EXPRESSION), ("script", "label", "arg")),
    0x11: OpSpec("opcode_11"),
    0x12: OpSpec("jump_true", (EXPRESSION, RAW_U16), ("flag", "target")),
}


__all__ = [
    "EXPRESSION",
    "FUNCTION",
    "FUNCTION_OPERAND_KINDS",
    "OPERAND_KINDS",
    "OpSpec",
    "RAW_U16",
    "RAW_U8",
    "STRING",
    "SWITCH",
    "TOP_LEVEL",
    "build_function_table",
    "parse_signature",
]
