"""
クイック化バイトコード命令ビューのパッケージ。
"""
from .bytecodes import Bytecodes
from .bytecode import Bytecode, BytecodeGeneric, BytecodeShapeError
from .field_access import (
    BytecodeGetPut, BytecodeGetField, BytecodePutField, BytecodeGetStatic, BytecodePutStatic,
    BytecodeFastGetField, BytecodeFastPutField,
    BytecodeFastAccess0, BytecodeFastAAccess0, BytecodeFastIAccess0, BytecodeFastFAccess0,
)
from .local_access import BytecodeWideable, BytecodeLoad, BytecodeStore, BytecodeRet, BytecodeIinc
from .constants import (
    BytecodeBipush, BytecodeSipush, BytecodeLoadConstant, BytecodeWithKlass, BytecodeNew,
    BytecodeANewArray, BytecodeCheckCast, BytecodeInstanceOf, BytecodeMultiANewArray, BytecodeNewArray,
)
from .control import (
    BytecodeJmp, BytecodeIf, BytecodeGoto, BytecodeJsr, BytecodeInvoke,
    BytecodeTableswitch, BytecodeLookupswitch,
)
from .maps import VARIANT_MAP, variant_for, decode_at
from .bytecode_stream import BytecodeStream
from .disassembler import disassemble
