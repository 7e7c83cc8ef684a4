# src/bytecode_tracer/interpreter/field_access.py
"""
フィールドアクセス系の命令ビュー。

getfield/putfield/getstatic/putstatic と、そのクイック化形
（fast_xgetfield, fast_xputfield, fast_xaccess_0）を扱います。
"""
from bytecode_tracer.interpreter.bytecode import Bytecode
from bytecode_tracer.interpreter.bytecodes import Bytecodes

# @intent:responsibility フィールドアクセス命令の共通部分（インデックスと静的判定、表示）を提供します。
class BytecodeGetPut(Bytecode):
    # @intent:responsibility 定数プール（または書き換え後のCP cache）のインデックスを返します。
    def index(self) -> int:
        return self.java_short_at(1)

    def is_static(self) -> bool:
        return False

    def operand(self) -> int:
        return self.index()

    # @intent:responsibility 表示に使うフィールドアクセスのニーモニックを返します。
    def access_name(self) -> str:
        return self.get_java_bytecode_name()

    def __str__(self) -> str:
        text = f"{self.access_name()} #{self.index()}"
        if self.is_rewritten():
            text += f" [{self.get_bytecode_name()}]"
        return text

class BytecodeGetField(BytecodeGetPut):
    SHAPE = "getfield"
    CODES = frozenset({Bytecodes.GETFIELD})

class BytecodePutField(BytecodeGetPut):
    SHAPE = "putfield"
    CODES = frozenset({Bytecodes.PUTFIELD})

class BytecodeGetStatic(BytecodeGetPut):
    SHAPE = "getstatic"
    CODES = frozenset({Bytecodes.GETSTATIC})

    def is_static(self) -> bool:
        return True

class BytecodePutStatic(BytecodeGetPut):
    SHAPE = "putstatic"
    CODES = frozenset({Bytecodes.PUTSTATIC})

    def is_static(self) -> bool:
        return True

# @intent:responsibility 書き換え後のフィールドアクセス。インデックスはネイティブ順のCP cacheインデックスです。
class BytecodeFastGetField(BytecodeGetPut):
    SHAPE = "fast_xgetfield"
    CODES = frozenset(range(Bytecodes.FAST_AGETFIELD, Bytecodes.FAST_SGETFIELD + 1))

    def index(self) -> int:
        return self.native_short_at(1)

    # @intent:responsibility 書き換え時に確定したフィールドの型文字（a, b, c, d, f, i, l, s）を返します。
    def field_kind(self) -> str:
        return self.get_bytecode_name()[len("fast_")]

class BytecodeFastPutField(BytecodeGetPut):
    SHAPE = "fast_xputfield"
    CODES = frozenset(range(Bytecodes.FAST_APUTFIELD, Bytecodes.FAST_SPUTFIELD + 1))

    def index(self) -> int:
        return self.native_short_at(1)

    def field_kind(self) -> str:
        return self.get_bytecode_name()[len("fast_")]

# @intent:responsibility aload_0 と getfield を融合した命令（fast_xaccess_0）の共通部分です。
# @intent:rationale レシーバは常にローカルスロット0なので、静的アクセスになることは構造上ありません。
class BytecodeFastAccess0(BytecodeGetPut):
    """
    命令形: [+0 opcode][+1 予約][+2..+3 16ビットフィールド]
    インデックスは +2 のビッグエンディアン16ビット値の下位8ビットです。
    上位バイトはインデックスとして扱いません。
    """
    def index(self) -> int:
        return 0xFF & self.java_short_at(2)

    def is_static(self) -> bool:
        return False

    def access_name(self) -> str:
        return "getfield"

    def __str__(self) -> str:
        return "aload_0 " + super().__str__()

class BytecodeFastAAccess0(BytecodeFastAccess0):
    SHAPE = "fast_aaccess_0"
    CODES = frozenset({Bytecodes.FAST_AACCESS_0})

class BytecodeFastIAccess0(BytecodeFastAccess0):
    SHAPE = "fast_iaccess_0"
    CODES = frozenset({Bytecodes.FAST_IACCESS_0})

class BytecodeFastFAccess0(BytecodeFastAccess0):
    SHAPE = "fast_faccess_0"
    CODES = frozenset({Bytecodes.FAST_FACCESS_0})
