"""Decoded representation of AIL instruction streams."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union


@dataclass(frozen=True)
class LoadToken:
    """Push ``register``/``mask`` onto the expression stack."""

    register: int
    mask: int
    address: int = 0

    size = 4  # flag byte + register + u16 mask

    def as_dict(self) -> Dict[str, Any]:
        return {"kind": "load", "register": self.register, "mask": self.mask, "address": self.address}


@dataclass(frozen=True)
class Operator:
    """An operator applied to the accumulated loads.

    ``flag`` is the non-zero selector byte that announced the operator and
    ``code`` the operator byte that followed it.
    """

    code: int
    name: str
    flag: int = 1
    address: int = 0

    size = 2

    def as_dict(self) -> Dict[str, Any]:
        return {
            "kind": "operator",
            "name": self.name,
            "code": self.code,
            "flag": self.flag,
            "address": self.address,
        }


Token = Union[LoadToken, Operator]


@dataclass
class Expression:
    """Flat token sequence terminated by ``0xFF``."""

    address: int
    tokens: List[Token] = field(default_factory=list)
    size: int = 1

    @property
    def loads(self) -> List[LoadToken]:
        return [token for token in self.tokens if isinstance(token, LoadToken)]

    @property
    def operators(self) -> List[Operator]:
        return [token for token in self.tokens if isinstance(token, Operator)]

    def as_dict(self) -> Dict[str, Any]:
        return {
            "kind": "expression",
            "address": self.address,
            "size": self.size,
            "tokens": [token.as_dict() for token in self.tokens],
        }


@dataclass
class StringRef:
    """A u16 pool offset stored at ``code_address`` inside the code buffer."""

    code_address: int
    offset: int
    text: str

    size = 2

    def as_dict(self) -> Dict[str, Any]:
        return {
            "kind": "string",
            "code_address": self.code_address,
            "offset": self.offset,
            "text": self.text,
        }


@dataclass(frozen=True)
class RawField:
    """An uninterpreted 8- or 16-bit field."""

    name: str
    width: int
    value: int

    @property
    def size(self) -> int:
        return self.width

    def as_dict(self) -> Dict[str, Any]:
        return {"kind": "raw", "name": self.name, "width": self.width, "value": self.value}


@dataclass
class SwitchTable:
    """Jump table of a multi-way switch."""

    default_addr: int
    cases: List[Tuple[int, int]] = field(default_factory=list)

    @property
    def size(self) -> int:
        return 2 + 1 + 3 * len(self.cases)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "kind": "switch",
            "default": self.default_addr,
            "cases": [{"id": case_id, "addr": addr} for case_id, addr in self.cases],
        }


@dataclass
class FunctionCall:
    """Nested function dispatched through the active version's function table."""

    address: int
    code: int
    mnemonic: str
    operands: List["Operand"] = field(default_factory=list)

    @property
    def size(self) -> int:
        return 1 + sum(operand.size for operand in self.operands)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "kind": "function",
            "address": self.address,
            "code": self.code,
            "mnemonic": self.mnemonic,
            "operands": [operand.as_dict() for operand in self.operands],
        }


Operand = Union[Expression, StringRef, RawField, SwitchTable, FunctionCall]


@dataclass
class Instruction:
    """A top-level instruction; ``address`` is the absolute file offset of its opcode."""

    address: int
    opcode: int
    mnemonic: str
    operands: List[Operand] = field(default_factory=list)

    @property
    def size(self) -> int:
        return 1 + sum(operand.size for operand in self.operands)

    def string_refs(self) -> List[StringRef]:
        """Return string references in operand order, nested calls included."""

        found: List[StringRef] = []
        _collect_refs(self.operands, found)
        return found

    def function(self) -> Optional[FunctionCall]:
        for operand in self.operands:
            if isinstance(operand, FunctionCall):
                return operand
        return None

    def as_dict(self) -> Dict[str, Any]:
        return {
            "address": self.address,
            "opcode": self.opcode,
            "mnemonic": self.mnemonic,
            "size": self.size,
            "operands": [operand.as_dict() for operand in self.operands],
        }


def _collect_refs(operands: List[Operand], found: List[StringRef]) -> None:
    for operand in operands:
        if isinstance(operand, StringRef):
            found.append(operand)
        elif isinstance(operand, FunctionCall):
            _collect_refs(operand.operands, found)


__all__ = [
    "Expression",
    "FunctionCall",
    "Instruction",
    "LoadToken",
    "Operand",
    "Operator",
    "RawField",
    "StringRef",
    "SwitchTable",
    "Token",
]
