import pytest

from bytecode_tracer.transport.method import ByteCodeSource, Method
from bytecode_tracer.interpreter.bytecodes import (
    Bytecodes, BYTECODE_TABLE, name_of, java_code, length_for, length_at, is_defined, is_java_code, code_at,
)

def make_method(data, **kwargs):
    return Method(ByteCodeSource(bytes(data)), **kwargs)

# @intent:test_suite オペコードカタログの整合性の検証。
class TestCatalog:
    def test_names(self):
        assert name_of(Bytecodes.NOP) == "nop"
        assert name_of(Bytecodes.RETURN) == "return"
        assert name_of(Bytecodes.IF_ICMPEQ) == "if_icmpeq"
        assert name_of(Bytecodes.FAST_AACCESS_0) == "fast_aaccess_0"

    def test_java_code_of_quickened_forms(self):
        assert java_code(Bytecodes.FAST_AACCESS_0) == Bytecodes.ALOAD_0
        assert java_code(Bytecodes.FAST_SGETFIELD) == Bytecodes.GETFIELD
        assert java_code(Bytecodes.FAST_IPUTFIELD) == Bytecodes.PUTFIELD
        assert java_code(Bytecodes.FAST_BINARYSWITCH) == Bytecodes.LOOKUPSWITCH
        assert java_code(Bytecodes.GETFIELD) == Bytecodes.GETFIELD

    def test_lengths(self):
        assert length_for(Bytecodes.NOP) == 1
        assert length_for(Bytecodes.BIPUSH) == 2
        assert length_for(Bytecodes.INVOKEINTERFACE) == 5
        assert length_for(Bytecodes.FAST_AACCESS_0) == 4
        assert length_for(Bytecodes.TABLESWITCH) == 0
        assert length_for(Bytecodes.WIDE) == 0

    def test_undefined_codes(self):
        assert not is_defined(0xFF)
        assert is_defined(Bytecodes.SHOULDNOTREACHHERE)
        with pytest.raises(ValueError):
            name_of(0xFF)
        with pytest.raises(ValueError):
            java_code(Bytecodes.SHOULDNOTREACHHERE + 1)

    def test_java_code_range(self):
        assert is_java_code(Bytecodes.GETFIELD)
        assert not is_java_code(Bytecodes.BREAKPOINT)
        assert not is_java_code(Bytecodes.FAST_AACCESS_0)

    def test_every_quickened_form_maps_to_java_code(self):
        for code, info in BYTECODE_TABLE.items():
            if code > Bytecodes.BREAKPOINT and code != Bytecodes.SHOULDNOTREACHHERE:
                assert is_java_code(info.java_code)

class TestLengthAt:
    def test_wide_forms(self):
        assert length_at(make_method([Bytecodes.WIDE, Bytecodes.ILOAD, 0x01, 0x00]), 0) == 4
        assert length_at(make_method([Bytecodes.WIDE, Bytecodes.IINC, 0, 1, 0, 1]), 0) == 6

    def test_tableswitch_alignment(self):
        # bci 2 の tableswitch はパディング1バイト (bci 3) の後に default が bci 4 から始まる
        code = [0, 0, Bytecodes.TABLESWITCH, 0] + [0, 0, 0, 9] + [0, 0, 0, 1] + [0, 0, 0, 2] + [0] * 8
        assert length_at(make_method(code), 2) == 22

    def test_malformed_tableswitch(self):
        code = [Bytecodes.TABLESWITCH, 0, 0, 0] + [0, 0, 0, 0] + [0, 0, 0, 5] + [0, 0, 0, 1]
        with pytest.raises(ValueError):
            length_at(make_method(code), 0)

    def test_negative_npairs(self):
        code = [Bytecodes.LOOKUPSWITCH, 0, 0, 0] + [0, 0, 0, 0] + [0xFF, 0xFF, 0xFF, 0xFF]
        with pytest.raises(ValueError):
            length_at(make_method(code), 0)

    def test_truncated_switch_propagates_read_failure(self):
        with pytest.raises(IndexError):
            length_at(make_method([Bytecodes.LOOKUPSWITCH, 0, 0]), 0)

    def test_code_at_resolves_breakpoint(self):
        method = make_method([Bytecodes.BREAKPOINT, 0, 0], breakpoints={0: Bytecodes.GETFIELD})
        assert code_at(method, 0) == Bytecodes.GETFIELD
        assert length_at(method, 0) == 3
