# bytecode_tracer/interpreter/bytecode.py
"""
Instruction Layer (命令ビューの共通契約)

このモジュールは、メソッドの命令バイト列上の1つのbciに対する読み取り専用の「ビュー」の
基底クラスを定義します。各バリアントは期待するオペコード、オペランドの配置、表示文字列を固定し、
ここで定義される検証付き構築（at）と探索的構築（at_check）の2つの入口を共有します。
"""
from abc import ABC
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar, FrozenSet, Optional, TypeVar, Type

from bytecode_tracer.transport.method import Method
from bytecode_tracer.config.settings import resolve_verify
from bytecode_tracer.interpreter.bytecodes import (
    JINT_SIZE, code_at, is_defined, java_code as java_code_of, length_at, name_of
)

if TYPE_CHECKING:
    from bytecode_tracer.interpreter.bytecode_stream import BytecodeStream

T = TypeVar("T", bound="Bytecode")

# @intent:responsibility 命令の形の不一致（誤ったバリアントの選択）を知らせる診断用の例外です。
# @intent:rationale 攻撃的な入力ではなくツール側のバグを検出するためのものなので、AssertionErrorの派生とします。
class BytecodeShapeError(AssertionError):
    pass

# @intent:responsibility 1つのbciに対する命令ビューの基底クラス。
@dataclass(frozen=True)  # 構築後はmethodもbciも変化しない
class Bytecode(ABC):
    """
    (method, bci) の組で表される、1命令分の読み取り専用ビュー。
    命令バイト列はコピーせず、Methodの読み出しを通して参照します。
    オペランド読み出しは is_valid() が真のときにのみ意味を持ちます。
    """
    method: Method
    bci: int

    # @intent:constant 検証失敗時のメッセージに使う、このバリアントの命令形の名前。
    SHAPE: ClassVar[str] = ""
    # @intent:constant このバリアントとして妥当なオペコードの集合。
    CODES: ClassVar[FrozenSet[int]] = frozenset()

    # @intent:responsibility bciのオペコードを読み出します。読み出し失敗はそのまま伝播します。
    def code(self) -> int:
        return code_at(self.method, self.bci)

    def opcode_of(self) -> int:
        return self.code()

    def java_code(self) -> int:
        return java_code_of(self.code())

    def get_bytecode_name(self) -> str:
        return name_of(self.code())

    def get_java_bytecode_name(self) -> str:
        return name_of(self.java_code())

    def get_length(self) -> int:
        return length_at(self.method, self.bci)

    # @intent:responsibility 命令がクイック化（書き換え）された形かを返します。
    def is_rewritten(self) -> bool:
        return self.code() != self.java_code()

    # --- bciからの相対オフセットによるオペランド読み出し ---

    def java_byte_at(self, offset: int) -> int:
        """符号付き8ビット。"""
        return self.method.get_bytecode_byte_arg(self.bci + offset)

    def java_short_at(self, offset: int) -> int:
        """ビッグエンディアンの符号なし16ビット。"""
        return self.method.read_u2(self.bci + offset)

    def java_signed_short_at(self, offset: int) -> int:
        return self.method.get_bytecode_short_arg(self.bci + offset)

    def java_signed_word_at(self, offset: int) -> int:
        return self.method.get_bytecode_int_arg(self.bci + offset)

    def native_short_at(self, offset: int) -> int:
        return self.method.get_native_short_arg(self.bci + offset)

    def unsigned_byte_at(self, offset: int) -> int:
        return self.method.read_u1(self.bci + offset)

    # @intent:responsibility 4バイト境界に整列した、bciからの相対オフセットを返します。
    def aligned_offset(self, offset: int) -> int:
        position = self.bci + offset
        return ((position + JINT_SIZE - 1) & ~(JINT_SIZE - 1)) - self.bci

    # --- 検証 ---

    # @intent:responsibility bciのオペコードがこのバリアントの期待する形かを判定します。
    def is_valid(self) -> bool:
        return self.code() in self.CODES

    # @intent:responsibility 形が一致しない場合に診断用の例外を送出します。
    def verify(self) -> None:
        if not self.is_valid():
            raise BytecodeShapeError(f"check {self.SHAPE}")

    # @intent:responsibility バリアント固有の主オペランドを返します。
    def operand(self) -> Optional[int]:
        return None

    # @intent:responsibility 逆アセンブル表示用の文字列を返します。
    def render(self) -> str:
        return str(self)

    def __str__(self) -> str:
        text = self.get_java_bytecode_name()
        if self.is_rewritten():
            text += f" [{self.get_bytecode_name()}]"
        return text

    # --- 構築 ---

    # @intent:responsibility ビューを構築し、検証モードであれば形を検証します（厳格構築）。
    # @intent:rationale 検証モードは呼び出し元が明示的に渡すか、プロセス起動時に一度だけ確定した設定に従います。
    @classmethod
    def at(cls: Type[T], method: Method, bci: int, verify: Optional[bool] = None,
           wide_prefix: Optional[bool] = None) -> T:
        """
        bciにこのバリアントのビューを構築します。
        検証モードで形が一致しなければBytecodeShapeErrorを送出し、
        非検証モードでは検証を省略して（不正かもしれない）ビューをそのまま返します。
        """
        b = cls._create(method, bci, wide_prefix)
        if resolve_verify(verify):
            b.verify()
        return b

    # @intent:responsibility 形が一致する場合のみビューを返し、一致しなければNoneを返します（探索的構築）。
    @classmethod
    def at_check(cls: Type[T], method: Method, bci: int,
                 wide_prefix: Optional[bool] = None) -> Optional[T]:
        """
        命令列を走査しながら、bciにどの形の命令があるか分からない場合に使います。
        形の不一致では例外を送出しません。
        """
        b = cls._create(method, bci, wide_prefix)
        return b if b.is_valid() else None

    # @intent:responsibility BytecodeStreamの現在位置からビューを厳格構築します。
    @classmethod
    def at_stream(cls: Type[T], stream: "BytecodeStream", verify: Optional[bool] = None) -> T:
        return cls.at(stream.method(), stream.code_bci(), verify, stream.is_wide())

    # @intent:responsibility ビューを生成します。wide プレフィックスの有無はローカル変数系のビューだけが使います。
    @classmethod
    def _create(cls: Type[T], method: Method, bci: int, wide_prefix: Optional[bool]) -> T:
        return cls(method, bci)

# @intent:responsibility 固有のオペランド配置を持たない命令（および未分類の命令）の汎用ビューです。
class BytecodeGeneric(Bytecode):
    SHAPE = "defined bytecode"

    def is_valid(self) -> bool:
        return is_defined(self.code())
