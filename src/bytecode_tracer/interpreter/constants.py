# src/bytecode_tracer/interpreter/constants.py
"""
定数のプッシュとオブジェクト生成系の命令ビュー。
"""
from bytecode_tracer.interpreter.bytecode import Bytecode
from bytecode_tracer.interpreter.bytecodes import Bytecodes

# @intent:map newarray のオペランド（要素型コード）から型名へのマッピングテーブル。
ARRAY_TYPE_NAMES = {
    4: "boolean",
    5: "char",
    6: "float",
    7: "double",
    8: "byte",
    9: "short",
    10: "int",
    11: "long",
}

class BytecodeBipush(Bytecode):
    SHAPE = "bipush"
    CODES = frozenset({Bytecodes.BIPUSH})

    def get_value(self) -> int:
        return self.java_byte_at(1)

    def operand(self) -> int:
        return self.get_value()

    def __str__(self) -> str:
        return f"bipush {self.get_value()}"

class BytecodeSipush(Bytecode):
    SHAPE = "sipush"
    CODES = frozenset({Bytecodes.SIPUSH})

    def get_value(self) -> int:
        return self.java_signed_short_at(1)

    def operand(self) -> int:
        return self.get_value()

    def __str__(self) -> str:
        return f"sipush {self.get_value()}"

# @intent:responsibility ldc 系命令の定数プールインデックスを提供します。ldc のみ1バイトインデックスです。
class BytecodeLoadConstant(Bytecode):
    SHAPE = "ldc"
    CODES = frozenset({Bytecodes.LDC, Bytecodes.LDC_W, Bytecodes.LDC2_W})

    def is_wide_index(self) -> bool:
        return self.code() != Bytecodes.LDC

    def pool_index(self) -> int:
        if self.is_wide_index():
            return self.java_short_at(1)
        return self.unsigned_byte_at(1)

    def operand(self) -> int:
        return self.pool_index()

    def __str__(self) -> str:
        return f"{self.get_java_bytecode_name()} #{self.pool_index()}"

# @intent:responsibility クラスを参照する命令（new, anewarray, checkcast, instanceof）の共通部分です。
class BytecodeWithKlass(Bytecode):
    def get_klass_index(self) -> int:
        return self.java_short_at(1)

    def operand(self) -> int:
        return self.get_klass_index()

    def __str__(self) -> str:
        return f"{self.get_java_bytecode_name()} #{self.get_klass_index()}"

class BytecodeNew(BytecodeWithKlass):
    SHAPE = "new"
    CODES = frozenset({Bytecodes.NEW})

class BytecodeANewArray(BytecodeWithKlass):
    SHAPE = "anewarray"
    CODES = frozenset({Bytecodes.ANEWARRAY})

class BytecodeCheckCast(BytecodeWithKlass):
    SHAPE = "checkcast"
    CODES = frozenset({Bytecodes.CHECKCAST})

class BytecodeInstanceOf(BytecodeWithKlass):
    SHAPE = "instanceof"
    CODES = frozenset({Bytecodes.INSTANCEOF})

class BytecodeMultiANewArray(BytecodeWithKlass):
    SHAPE = "multianewarray"
    CODES = frozenset({Bytecodes.MULTIANEWARRAY})

    def get_dimensions(self) -> int:
        return self.unsigned_byte_at(3)

    def __str__(self) -> str:
        return f"{super().__str__()} dim {self.get_dimensions()}"

# @intent:responsibility newarray の要素型コードと型名を提供します。
class BytecodeNewArray(Bytecode):
    SHAPE = "newarray"
    CODES = frozenset({Bytecodes.NEWARRAY})

    def get_type(self) -> int:
        return self.unsigned_byte_at(1)

    def operand(self) -> int:
        return self.get_type()

    # @intent:rationale 命令バイトは信頼できないデータなので、未知の型コードも例外にせず表示可能な文字列にします。
    def get_type_name(self) -> str:
        type_code = self.get_type()
        return ARRAY_TYPE_NAMES.get(type_code, f"<illegal type {type_code}>")

    def __str__(self) -> str:
        return f"newarray {self.get_type_name()}"
