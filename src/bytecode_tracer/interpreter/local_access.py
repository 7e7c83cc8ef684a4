# src/bytecode_tracer/interpreter/local_access.py
"""
ローカル変数アクセス系の命令ビュー（load/store/iinc/ret）。
直前に wide プレフィックスがある場合はインデックスが16ビットになります。
"""
from dataclasses import dataclass, field
from typing import Optional

from bytecode_tracer.transport.method import Method
from bytecode_tracer.interpreter.bytecode import Bytecode
from bytecode_tracer.interpreter.bytecodes import Bytecodes

# @intent:responsibility wide プレフィックスの有無に応じてローカル変数インデックスを読み分けます。
@dataclass(frozen=True)
class BytecodeWideable(Bytecode):
    # 命令列を走査した呼び出し元が知っている wide の有無。None なら直前のバイトから推定する
    wide_prefix: Optional[bool] = field(default=None, compare=False)

    @classmethod
    def _create(cls, method: Method, bci: int, wide_prefix: Optional[bool]) -> "BytecodeWideable":
        return cls(method, bci, wide_prefix)

    # @intent:responsibility wide プレフィックス付きの命令かを返します。
    # @intent:rationale 直前のバイトは前の命令のオペランドであることもあるため、推定は走査情報がない場合に限ります。
    def wide(self) -> bool:
        if self.wide_prefix is not None:
            return self.wide_prefix
        prev_bci = self.bci - 1
        return prev_bci >= 0 and self.method.get_bytecode_or_bp_at(prev_bci) == Bytecodes.WIDE

    def get_local_var_index(self) -> int:
        if self.wide():
            return self.java_short_at(1)
        return self.unsigned_byte_at(1)

    def operand(self) -> int:
        return self.get_local_var_index()

    def __str__(self) -> str:
        text = f"{self.get_java_bytecode_name()} {self.get_local_var_index()}"
        if self.is_rewritten():
            text += f" [{self.get_bytecode_name()}]"
        return text

class BytecodeLoad(BytecodeWideable):
    SHAPE = "xload"
    CODES = frozenset({
        Bytecodes.ILOAD, Bytecodes.LLOAD, Bytecodes.FLOAD, Bytecodes.DLOAD, Bytecodes.ALOAD,
        Bytecodes.FAST_ILOAD, Bytecodes.FAST_ILOAD2, Bytecodes.FAST_ICALOAD,
    })

class BytecodeStore(BytecodeWideable):
    SHAPE = "xstore"
    CODES = frozenset({
        Bytecodes.ISTORE, Bytecodes.LSTORE, Bytecodes.FSTORE, Bytecodes.DSTORE, Bytecodes.ASTORE,
    })

class BytecodeRet(BytecodeWideable):
    SHAPE = "ret"
    CODES = frozenset({Bytecodes.RET})

# @intent:responsibility iinc のインデックスと符号付き増分を提供します。
class BytecodeIinc(BytecodeWideable):
    SHAPE = "iinc"
    CODES = frozenset({Bytecodes.IINC})

    def get_increment(self) -> int:
        if self.wide():
            return self.java_signed_short_at(3)
        return self.java_byte_at(2)

    def __str__(self) -> str:
        return f"iinc {self.get_local_var_index()} by {self.get_increment()}"
