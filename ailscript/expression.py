"""Decoder for the stack-style expression mini-language.

Expressions are a flat byte stream::

    00 RR MMMM      load register RR with mask MMMM (repeatable)
    FF              end of expression
    XX OO           any other selector XX announces operator OO

After an operator the loop starts over: more loads may follow, then either
another operator or the terminator. Nothing is evaluated; tokens are kept in
the order they are met.
"""

from __future__ import annotations

import enum
import logging
from typing import Dict, List, Protocol

from .exceptions import UnknownOperatorError
from .ir import Expression, LoadToken, Operator, Token

LOGGER = logging.getLogger(__name__)

LOAD_FLAG = 0x00
END_FLAG = 0xFF

OPERATORS: Dict[int, str] = {
    0x00: "greater",
    0x01: "less_equal",
    0x02: "not_equal",
    0x03: "equal",
    0x04: "greater_equal",
    0x05: "less",
    0x0A: "is_zero",
    0x0B: "logical_and",
    0x0C: "logical_or",
    0x14: "add",
    0x15: "sub",
    0x16: "mul",
    0x17: "div",
    0x18: "mod",
}

OPERATOR_CODES: Dict[str, int] = {name: code for code, name in OPERATORS.items()}


class State(enum.Enum):
    ACCUMULATING_LOADS = "accumulating_loads"
    POST_OPERATOR = "post_operator"
    TERMINATED = "terminated"


class ByteCursor(Protocol):
    """Minimal reader interface shared with the instruction decoder."""

    @property
    def address(self) -> int: ...

    def u8(self) -> int: ...

    def u16(self) -> int: ...


def step(state: State, flag: int) -> State:
    """Return the state reached after reading selector ``flag`` in ``state``."""

    if state is State.TERMINATED:
        raise ValueError("expression already terminated")
    if flag == LOAD_FLAG:
        return State.ACCUMULATING_LOADS
    if flag == END_FLAG:
        return State.TERMINATED
    return State.POST_OPERATOR


def decode_expression(cursor: ByteCursor) -> Expression:
    """Consume one expression from ``cursor``."""

    start = cursor.address
    tokens: List[Token] = []
    state = State.ACCUMULATING_LOADS

    while state is not State.TERMINATED:
        flag = cursor.u8()
        state = step(state, flag)
        if state is State.ACCUMULATING_LOADS:
            address = cursor.address
            register = cursor.u8()
            mask = cursor.u16()
            tokens.append(LoadToken(register=register, mask=mask, address=address))
        elif state is State.POST_OPERATOR:
            address = cursor.address
            code = cursor.u8()
            name = OPERATORS.get(code)
            if name is None:
                raise UnknownOperatorError(code, address)
            tokens.append(Operator(code=code, name=name, flag=flag, address=address))

    return Expression(address=start, tokens=tokens, size=cursor.address - start)


def encode_expression(tokens: List[Token]) -> bytes:
    """Serialise ``tokens`` followed by the terminator."""

    out = bytearray()
    for token in tokens:
        if isinstance(token, LoadToken):
            out.append(LOAD_FLAG)
            out.append(token.register & 0xFF)
            out.extend((token.mask & 0xFFFF).to_bytes(2, "little"))
        else:
            if token.flag in (LOAD_FLAG, END_FLAG):
                raise ValueError(f"operator selector cannot be 0x{token.flag:02X}")
            if token.code not in OPERATORS:
                raise ValueError(f"unknown operator code 0x{token.code:02X}")
            out.append(token.flag)
            out.append(token.code)
    out.append(END_FLAG)
    return bytes(out)


def format_expression(expression: Expression) -> str:
    """Render tokens in stream order, e.g. ``load(0x01,0x0000) load(0x02,0x0000) add``."""

    parts: List[str] = []
    for token in expression.tokens:
        if isinstance(token, LoadToken):
            parts.append(f"load(0x{token.register:02X},0x{token.mask:04X})")
        else:
            parts.append(token.name)
    return " ".join(parts) if parts else "<empty>"


__all__ = [
    "END_FLAG",
    "LOAD_FLAG",
    "OPERATORS",
    "OPERATOR_CODES",
    "State",
    "decode_expression",
    "encode_expression",
    "format_expression",
    "step",
]
