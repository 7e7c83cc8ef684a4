# tests/interpreter/test_variant_maps.py
"""
オペコードとバリアントの対応表、および探索的デコードの単体テスト。
"""
from typing import Optional

import pytest

from bytecode_tracer.transport.method import ByteCodeSource, Method
from bytecode_tracer.interpreter import (
    Bytecodes, BytecodeGeneric, BytecodeFastAAccess0, BytecodeGetField, BytecodeLoad,
)
from bytecode_tracer.interpreter.bytecodes import is_defined
from bytecode_tracer.interpreter.maps import VARIANTS, VARIANT_MAP, variant_for, decode_at

def method_for(code):
    # 可変長命令を含め、どのオペコードでも範囲外読み出しにならない長さのバッファ
    return Method(ByteCodeSource(bytes([code] + [0] * 31)))

# @intent:test_suite バリアントの閉じた集合と形の検証の網羅的な検証。
class TestVariantMap:
    def test_map_is_consistent(self):
        for code, variant in VARIANT_MAP.items():
            assert code in variant.CODES

    def test_variant_for(self):
        assert variant_for(Bytecodes.FAST_AACCESS_0) is BytecodeFastAAccess0
        assert variant_for(Bytecodes.GETFIELD) is BytecodeGetField
        assert variant_for(Bytecodes.NOP) is BytecodeGeneric
        with pytest.raises(ValueError):
            variant_for(0xFF)

    def test_each_variant_accepts_only_its_codes(self):
        for variant in VARIANTS:
            for code in range(0x100):
                view = variant.at_check(method_for(code), 0)
                if code in variant.CODES:
                    assert view is not None, (variant.__name__, code)
                else:
                    assert view is None, (variant.__name__, code)

    def test_generic_accepts_defined_codes(self):
        for code in range(0x100):
            view = BytecodeGeneric.at_check(method_for(code), 0)
            assert (view is not None) == is_defined(code)

class TestDecodeAt:
    def test_decode_fast_aaccess_0(self):
        method = Method(ByteCodeSource(bytes([Bytecodes.FAST_AACCESS_0, 0xCB, 0x00, 0x07])))
        view = decode_at(method, 0)
        assert isinstance(view, BytecodeFastAAccess0)
        assert view.index() == 7

    def test_decode_generic(self):
        method = Method(ByteCodeSource(bytes([Bytecodes.IADD])))
        view = decode_at(method, 0)
        assert isinstance(view, BytecodeGeneric)
        assert view.render() == "iadd"
        assert view.operand() is None

    def test_decode_quickened_generic(self):
        method = Method(ByteCodeSource(bytes([Bytecodes.RETURN_REGISTER_FINALIZER])))
        assert decode_at(method, 0).render() == "return [return_register_finalizer]"

    def test_decode_load(self):
        method = Method(ByteCodeSource(bytes([Bytecodes.ILOAD, 0x04])))
        assert isinstance(decode_at(method, 0), BytecodeLoad)

    def test_decode_undefined(self):
        with pytest.raises(ValueError):
            decode_at(Method(ByteCodeSource(bytes([0xF0]))), 0)

    def test_decode_renders_every_defined_code(self):
        for code in range(0x100):
            if not is_defined(code) or code in (Bytecodes.TABLESWITCH, Bytecodes.LOOKUPSWITCH,
                                                Bytecodes.FAST_LINEARSWITCH, Bytecodes.FAST_BINARYSWITCH):
                continue
            assert decode_at(method_for(code), 0).render()

# @intent:test_suite 走査側が知っている wide の有無を探索的デコードへ渡せることの検証。
class TestDecodeWidePrefix:
    def test_wide_prefix_reaches_local_variable_view(self):
        method = Method(ByteCodeSource(bytes([Bytecodes.BIPUSH, 0xC4, Bytecodes.ILOAD, 5])))
        assert decode_at(method, 2, wide_prefix=False).render() == "iload 5"
        assert decode_at(method, 2, wide_prefix=False).wide() is False

    def test_wide_prefix_is_ignored_by_other_views(self):
        method = Method(ByteCodeSource(bytes([Bytecodes.GETFIELD, 0x00, 0x03])))
        assert decode_at(method, 0, wide_prefix=True).render() == "getfield #3"

    def test_operand_annotation(self):
        assert BytecodeGeneric.operand.__annotations__["return"] == Optional[int]
