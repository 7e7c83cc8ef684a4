"""
オペコードと命令ビュー（バリアント）のマッピング定義。
"""
from typing import Dict, Optional, Type

from bytecode_tracer.transport.method import Method
from bytecode_tracer.interpreter.bytecode import Bytecode, BytecodeGeneric
from bytecode_tracer.interpreter.bytecodes import code_at, is_defined
from . import field_access
from . import local_access
from . import constants
from . import control

# @intent:map 固有のオペランド配置を持つ全バリアント（閉じた集合）。
VARIANTS = (
    # Field access
    field_access.BytecodeGetField,
    field_access.BytecodePutField,
    field_access.BytecodeGetStatic,
    field_access.BytecodePutStatic,
    field_access.BytecodeFastGetField,
    field_access.BytecodeFastPutField,
    field_access.BytecodeFastAAccess0,
    field_access.BytecodeFastIAccess0,
    field_access.BytecodeFastFAccess0,

    # Locals
    local_access.BytecodeLoad,
    local_access.BytecodeStore,
    local_access.BytecodeRet,
    local_access.BytecodeIinc,

    # Constants / allocation
    constants.BytecodeBipush,
    constants.BytecodeSipush,
    constants.BytecodeLoadConstant,
    constants.BytecodeNew,
    constants.BytecodeANewArray,
    constants.BytecodeCheckCast,
    constants.BytecodeInstanceOf,
    constants.BytecodeMultiANewArray,
    constants.BytecodeNewArray,

    # Control
    control.BytecodeIf,
    control.BytecodeGoto,
    control.BytecodeJsr,
    control.BytecodeInvoke,
    control.BytecodeTableswitch,
    control.BytecodeLookupswitch,
)

def _build_variant_map() -> Dict[int, Type[Bytecode]]:
    variant_map: Dict[int, Type[Bytecode]] = {}
    for variant in VARIANTS:
        for code in variant.CODES:
            if code in variant_map:
                raise ValueError(
                    f"Opcode {code:#04x} claimed by both {variant_map[code].__name__} and {variant.__name__}"
                )
            variant_map[int(code)] = variant
    return variant_map

# @intent:map オペコード（整数）から命令ビューのクラスへのマッピングテーブル。
VARIANT_MAP: Dict[int, Type[Bytecode]] = _build_variant_map()

# @intent:responsibility オペコードに対応するバリアントを返します。固有のバリアントがなければ汎用ビューです。
def variant_for(code: int) -> Type[Bytecode]:
    if not is_defined(code):
        raise ValueError(f"Undefined bytecode {code:#04x}")
    return VARIANT_MAP.get(code, BytecodeGeneric)

# @intent:responsibility bciの命令をオペコードに応じたバリアントで探索的にデコードします。
def decode_at(method: Method, bci: int, wide_prefix: Optional[bool] = None) -> Bytecode:
    """
    bciのオペコードを読み、対応するバリアントのビューを返します。
    wide_prefix は走査中の呼び出し元が wide の有無を知っている場合に渡します。
    未定義のオペコードはValueError、読み出し失敗はそのまま伝播します。
    """
    variant = variant_for(code_at(method, bci))
    view = variant.at_check(method, bci, wide_prefix)
    if view is None:
        # オペコードを読んだ直後に内容が変わった（不安定なスナップショット）場合
        raise ValueError(f"Bytecode at bci {bci} changed while decoding")
    return view
