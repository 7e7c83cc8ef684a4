# src/bytecode_tracer/interpreter/control.py
"""
制御フロー系の命令ビュー（分岐、サブルーチン、メソッド呼び出し、switch）。
"""
from typing import List, Tuple

from bytecode_tracer.interpreter.bytecode import Bytecode
from bytecode_tracer.interpreter.bytecodes import Bytecodes, JINT_SIZE

# @intent:responsibility 分岐命令の相対オフセットと分岐先bciを提供します。
class BytecodeJmp(Bytecode):
    # @intent:responsibility goto_w/jsr_w は32ビット、それ以外は16ビットの符号付きオフセットです。
    def get_offset(self) -> int:
        if self.code() in (Bytecodes.GOTO_W, Bytecodes.JSR_W):
            return self.java_signed_word_at(1)
        return self.java_signed_short_at(1)

    def get_target(self) -> int:
        return self.bci + self.get_offset()

    def operand(self) -> int:
        return self.get_target()

    def __str__(self) -> str:
        return f"{self.get_java_bytecode_name()} {self.get_target()}"

class BytecodeIf(BytecodeJmp):
    SHAPE = "if"
    CODES = frozenset(
        set(range(Bytecodes.IFEQ, Bytecodes.IF_ACMPNE + 1)) | {Bytecodes.IFNULL, Bytecodes.IFNONNULL}
    )

class BytecodeGoto(BytecodeJmp):
    SHAPE = "goto"
    CODES = frozenset({Bytecodes.GOTO, Bytecodes.GOTO_W})

class BytecodeJsr(BytecodeJmp):
    SHAPE = "jsr"
    CODES = frozenset({Bytecodes.JSR, Bytecodes.JSR_W})

# @intent:responsibility メソッド呼び出し命令のインデックスを提供します。
class BytecodeInvoke(Bytecode):
    """
    invokevirtual/invokespecial/invokestatic/invokeinterface/invokedynamic と、
    書き換え後の fast_invokevfinal（ネイティブ順のCP cacheインデックス）を扱います。
    """
    SHAPE = "invoke"
    CODES = frozenset({
        Bytecodes.INVOKEVIRTUAL, Bytecodes.INVOKESPECIAL, Bytecodes.INVOKESTATIC,
        Bytecodes.INVOKEINTERFACE, Bytecodes.INVOKEDYNAMIC, Bytecodes.FAST_INVOKEVFINAL,
    })

    def index(self) -> int:
        if self.code() == Bytecodes.FAST_INVOKEVFINAL:
            return self.native_short_at(1)
        return self.java_short_at(1)

    def operand(self) -> int:
        return self.index()

    def is_invokeinterface(self) -> bool:
        return self.java_code() == Bytecodes.INVOKEINTERFACE

    def is_invokevirtual(self) -> bool:
        return self.java_code() == Bytecodes.INVOKEVIRTUAL

    def is_invokestatic(self) -> bool:
        return self.java_code() == Bytecodes.INVOKESTATIC

    def is_invokespecial(self) -> bool:
        return self.java_code() == Bytecodes.INVOKESPECIAL

    def is_invokedynamic(self) -> bool:
        return self.java_code() == Bytecodes.INVOKEDYNAMIC

    # @intent:responsibility invokeinterface の引数スロット数を返します。
    def get_count(self) -> int:
        return self.unsigned_byte_at(3)

    def __str__(self) -> str:
        text = f"{self.get_java_bytecode_name()} #{self.index()}"
        if self.is_invokeinterface():
            text += f", {self.get_count()}"
        if self.is_rewritten():
            text += f" [{self.get_bytecode_name()}]"
        return text

# @intent:responsibility tableswitch の既定分岐先、キー範囲、各分岐先を提供します。
class BytecodeTableswitch(Bytecode):
    """
    命令形: [opcode][0-3バイトのパディング][default][low][high][offset * (high-low+1)]
    各値は4バイト境界に整列したビッグエンディアンの符号付き32ビット値です。
    """
    SHAPE = "tableswitch"
    CODES = frozenset({Bytecodes.TABLESWITCH})

    def default_offset(self) -> int:
        return self.java_signed_word_at(self.aligned_offset(1))

    def low_key(self) -> int:
        return self.java_signed_word_at(self.aligned_offset(1) + JINT_SIZE)

    def high_key(self) -> int:
        return self.java_signed_word_at(self.aligned_offset(1) + 2 * JINT_SIZE)

    def number_of_cases(self) -> int:
        return max(0, self.high_key() - self.low_key() + 1)

    def dest_offset_at(self, i: int) -> int:
        return self.java_signed_word_at(self.aligned_offset(1) + (3 + i) * JINT_SIZE)

    def targets(self) -> List[Tuple[int, int]]:
        """(キー, 分岐先bci) のリストを返す。"""
        low = self.low_key()
        return [(low + i, self.bci + self.dest_offset_at(i)) for i in range(self.number_of_cases())]

    def operand(self) -> int:
        return self.bci + self.default_offset()

    def __str__(self) -> str:
        text = f"tableswitch default:{self.bci + self.default_offset()}"
        for key, target in self.targets():
            text += f" {key}:{target}"
        return text

# @intent:responsibility lookupswitch（およびクイック化形）の既定分岐先と (キー, オフセット) の組を提供します。
class BytecodeLookupswitch(Bytecode):
    SHAPE = "lookupswitch"
    CODES = frozenset({Bytecodes.LOOKUPSWITCH, Bytecodes.FAST_LINEARSWITCH, Bytecodes.FAST_BINARYSWITCH})

    def default_offset(self) -> int:
        return self.java_signed_word_at(self.aligned_offset(1))

    def number_of_pairs(self) -> int:
        return self.java_signed_word_at(self.aligned_offset(1) + JINT_SIZE)

    def pair_at(self, i: int) -> Tuple[int, int]:
        """(キー, 相対オフセット) を返す。"""
        base = self.aligned_offset(1) + (2 + 2 * i) * JINT_SIZE
        return self.java_signed_word_at(base), self.java_signed_word_at(base + JINT_SIZE)

    def targets(self) -> List[Tuple[int, int]]:
        result = []
        for i in range(max(0, self.number_of_pairs())):
            key, offset = self.pair_at(i)
            result.append((key, self.bci + offset))
        return result

    def operand(self) -> int:
        return self.bci + self.default_offset()

    def __str__(self) -> str:
        text = f"lookupswitch default:{self.bci + self.default_offset()}"
        for key, target in self.targets():
            text += f" {key}:{target}"
        if self.is_rewritten():
            text += f" [{self.get_bytecode_name()}]"
        return text
