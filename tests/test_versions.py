import pytest

from ailscript.opcodes import EXPRESSION, RAW_U16, STRING, TOP_LEVEL, build_function_table, parse_signature
from ailscript.versions import (
    DEFAULT_VERSION,
    VersionHandler,
    canonical_name,
    get_handler,
    iter_handlers,
    version_choices,
)


def test_default_version_is_legacy() -> None:
    assert DEFAULT_VERSION == "v0"
    assert get_handler().name == "v0"


@pytest.mark.parametrize(
    "alias, expected",
    [("v0", "v0"), ("0", "v0"), ("legacy", "v0"), ("V1", "v1"), (1, "v1"), ("2", "v2"), (2, "v2")],
)
def test_canonical_name_accepts_aliases(alias, expected) -> None:
    assert canonical_name(alias) == expected


def test_unknown_version() -> None:
    with pytest.raises(KeyError):
        get_handler("v9")


def test_handlers_are_registered() -> None:
    handlers = list(iter_handlers())
    assert [handler.name for handler in handlers] == ["v0", "v1", "v2"]
    assert all(isinstance(handler, VersionHandler) for handler in handlers)
    assert all(handler.description for handler in handlers)


def test_table_sizes() -> None:
    sizes = {handler.name: len(handler.function_table()) for handler in iter_handlers()}
    assert sizes == {"v0": 249, "v1": 252, "v2": 256}


def test_push_string_is_shared_by_all_versions() -> None:
    for handler in iter_handlers():
        spec = handler.lookup(0x00)
        assert spec is not None
        assert spec.mnemonic == "push_string"
        assert spec.operands == (STRING,)


def test_version_specific_entries() -> None:
    v0, v1, v2 = (get_handler(name) for name in ("v0", "v1", "v2"))

    assert v0.lookup(0x0D) is None
    assert v2.lookup(0x0D).operands == (EXPRESSION,) * 4
    assert v0.lookup(0x0A).operands == ()
    assert v1.lookup(0x0A).operands == (EXPRESSION, EXPRESSION)
    assert v2.lookup(0x9F).operands[-1] == RAW_U16
    assert v0.lookup(0xB1).mnemonic == "setup_window"


def test_version_choices_include_aliases() -> None:
    choices = version_choices()
    for value in ("v0", "v1", "v2", "0", "1", "2", "legacy"):
        assert value in choices


def test_function_tables_only_use_function_operand_kinds() -> None:
    for handler in iter_handlers():
        for spec in handler.function_table().values():
            assert set(spec.operands) <= {RAW_U16, EXPRESSION, STRING}


def test_build_function_table_defaults() -> None:
    table = build_function_table({0x10: "ES"}, names={0x11: "unused"})
    spec = table[0x10]
    assert spec.mnemonic == "func_10"
    assert spec.operands == (EXPRESSION, STRING)
    assert spec.operand_name(1) == "arg1"


def test_parse_signature_rejects_unknown_kind() -> None:
    with pytest.raises(ValueError):
        parse_signature("EX")
    with pytest.raises(ValueError):
        build_function_table({0x00: "F"})


def test_top_level_table() -> None:
    assert sorted(TOP_LEVEL) == [0x00, 0x04, 0x05, 0x08, 0x09, 0x0A, 0x0B, 0x0C, 0x0D, 0x10, 0x11, 0x12]
    assert TOP_LEVEL[0x0D].operands == ()
    assert TOP_LEVEL[0x08].operands == (RAW_U16,)
    assert TOP_LEVEL[0x12].operand_name(1) == "target"
