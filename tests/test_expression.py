import pytest

from ailscript.decoder import CodeCursor
from ailscript.exceptions import UnexpectedEndError, UnknownOperatorError
from ailscript.expression import (
    OPERATOR_CODES,
    State,
    decode_expression,
    encode_expression,
    format_expression,
    step,
)
from ailscript.ir import LoadToken, Operator


def _decode(hex_bytes: str, base: int = 0x100):
    cursor = CodeCursor(bytes.fromhex(hex_bytes), base)
    return decode_expression(cursor), cursor


def test_single_load() -> None:
    expr, cursor = _decode("00 01 0000 FF")

    assert expr.tokens == [LoadToken(register=1, mask=0, address=0x101)]
    assert expr.operators == []
    assert expr.size == 5
    assert cursor.position == 5


def test_empty_expression() -> None:
    expr, cursor = _decode("FF")
    assert expr.tokens == []
    assert expr.size == 1
    assert format_expression(expr) == "<empty>"


def test_loads_then_operator_in_stream_order() -> None:
    expr, _ = _decode("00 01 3412 00 02 0000 01 14 FF")

    assert [type(token).__name__ for token in expr.tokens] == ["LoadToken", "LoadToken", "Operator"]
    assert expr.loads[0].mask == 0x1234
    assert expr.operators == [Operator(code=0x14, name="add", flag=0x01, address=0x109)]
    assert format_expression(expr) == "load(0x01,0x1234) load(0x02,0x0000) add"


def test_loads_after_operator_continue_the_expression() -> None:
    expr, _ = _decode("00 01 0000 02 0A 00 02 0000 01 0B FF")
    names = [token.name if isinstance(token, Operator) else "load" for token in expr.tokens]
    assert names == ["load", "is_zero", "load", "logical_and"]
    assert expr.operators[0].flag == 0x02


def test_unknown_operator_reports_operator_address() -> None:
    with pytest.raises(UnknownOperatorError) as excinfo:
        _decode("01 09 FF", base=0x11)
    assert excinfo.value.byte == 0x09
    assert excinfo.value.address == 0x12


def test_missing_terminator() -> None:
    with pytest.raises(UnexpectedEndError):
        _decode("00 01 0000")


def test_truncated_load() -> None:
    with pytest.raises(UnexpectedEndError):
        _decode("00 01 00")


def test_state_transitions() -> None:
    assert step(State.ACCUMULATING_LOADS, 0x00) is State.ACCUMULATING_LOADS
    assert step(State.ACCUMULATING_LOADS, 0x01) is State.POST_OPERATOR
    assert step(State.POST_OPERATOR, 0x00) is State.ACCUMULATING_LOADS
    assert step(State.POST_OPERATOR, 0xFF) is State.TERMINATED
    with pytest.raises(ValueError):
        step(State.TERMINATED, 0x00)


def test_encode_expression_reproduces_bytes() -> None:
    raw = bytes.fromhex("00 01 3412 00 02 0000 01 14 03 18 FF")
    expr, _ = _decode(raw.hex())
    assert encode_expression(expr.tokens) == raw


def test_encode_rejects_reserved_selector() -> None:
    with pytest.raises(ValueError):
        encode_expression([Operator(code=OPERATOR_CODES["add"], name="add", flag=0xFF)])
