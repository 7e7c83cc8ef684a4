# bytecode_tracer/transport/method.py
"""
Transport Layer (メソッドのバイトコード領域)

このモジュールは、対象プロセス内の1メソッド分の命令バイト列を抽象化し、
型付きの読み出し（符号なしバイト、ビッグエンディアン/ネイティブ順の16ビット値など）を
提供する責務を負います。
範囲外アクセスやリモート読み出しの失敗はここで検出・送出され、上位層はそれを握りつぶしません。
"""
from abc import ABC, abstractmethod
from typing import Optional

from bytecode_tracer.common.types import BreakpointMap, MemoryReader

# @intent:constant デバッガがブレークポイントとして命令先頭に書き込むオペコード。
BREAKPOINT_OPCODE = 0xCA

# @intent:responsibility 命令バイト列の供給元の抽象インターフェースを定義します。
class CodeSource(ABC):
    """
    メソッドの命令バイト列を供給する抽象基底クラス。
    全ての供給元はreadとget_sizeのインターフェースを実装する必要があります。
    """
    # @intent:responsibility 指定されたオフセットから8bitのデータを読み出す責務を負います。
    # @intent:pre-condition オフセットは供給元の有効範囲内である必要があります。
    @abstractmethod
    def read(self, offset: int) -> int:
        """
        指定されたオフセットから8bitのデータを読み出します。
        範囲外の場合はIndexErrorを送出します。
        """
        pass

    # @intent:responsibility 命令バイト列の長さを返します。
    @abstractmethod
    def get_size(self) -> int:
        pass

# @intent:responsibility 取得済みのバイト列（スナップショット）を供給元として提供します。
class ByteCodeSource(CodeSource):
    """
    書き換え（クイック化）完了後の命令バイト列を不変のスナップショットとして保持する供給元。
    """
    # @intent:pre-condition dataは空でないバイト列である必要があります。
    def __init__(self, data: bytes):
        if not isinstance(data, (bytes, bytearray)):
            raise TypeError("Code data must be bytes or bytearray.")
        if len(data) == 0:
            raise ValueError("Code data must not be empty.")
        # 呼び出し元での変更の影響を受けないよう、不変のbytesとしてコピーする
        self._code = bytes(data)
        self._size = len(self._code)

    def read(self, offset: int) -> int:
        if not 0 <= offset < self._size:
            raise IndexError(f"Offset {offset} out of bounds for code of size {self._size}.")
        return self._code[offset]

    def get_size(self) -> int:
        return self._size

# @intent:responsibility 対象プロセスのメモリを読み出し関数経由で参照する供給元です。
# @intent:rationale ライブプロセスやコアファイルの読み出しは失敗し得るため、読み出し関数の例外はそのまま伝播させます。
class RemoteCodeSource(CodeSource):
    """
    MemoryReader（アドレス -> 1バイト）を通して対象プロセスの命令領域を読み出す供給元。
    base_addressは命令バイト列の先頭アドレス、sizeはそのバイト長です。
    """
    def __init__(self, reader: MemoryReader, base_address: int, size: int):
        if not callable(reader):
            raise TypeError("Reader must be callable.")
        if not isinstance(size, int) or size <= 0:
            raise ValueError("Code size must be a positive integer.")
        if base_address < 0:
            raise ValueError("Base address must be non-negative.")
        self._reader = reader
        self._base_address = base_address
        self._size = size

    def read(self, offset: int) -> int:
        if not 0 <= offset < self._size:
            raise IndexError(f"Offset {offset} out of bounds for code of size {self._size}.")
        data = self._reader(self._base_address + offset)
        if not 0 <= data <= 0xFF:
            raise ValueError(f"Reader returned {data!r} for address {self._base_address + offset:#x}, not an 8-bit value.")
        return data

    def get_size(self) -> int:
        return self._size

    @property
    def base_address(self) -> int:
        return self._base_address

# @intent:responsibility 1メソッド分の命令バイト列に対する型付き読み出しを提供します。
class Method:
    """
    対象プロセス内の1メソッドを表す外部コラボレータ。
    命令バイト列への型付き読み出し（u1/s1/s2/s4、ネイティブ順u2）と、
    ブレークポイントで置き換えられたオペコードの復元を提供します。
    """
    # @intent:pre-condition byte_orderは"little"または"big"である必要があります。
    def __init__(self, source: CodeSource, name: str = "", byte_order: str = "little",
                 breakpoints: Optional[BreakpointMap] = None):
        if not isinstance(source, CodeSource):
            raise TypeError("Source must be an instance of a class derived from CodeSource.")
        if byte_order not in ("little", "big"):
            raise ValueError(f"Unsupported byte order: {byte_order!r}")
        self._source = source
        self._name = name
        self._byte_order = byte_order
        self._breakpoints: BreakpointMap = dict(breakpoints or {})

    @property
    def name(self) -> str:
        return self._name

    @property
    def byte_order(self) -> str:
        return self._byte_order

    def code_size(self) -> int:
        return self._source.get_size()

    # @intent:responsibility 指定bciの符号なしバイトを読み出します。
    def read_u1(self, bci: int) -> int:
        return self._source.read(bci)

    # @intent:responsibility 指定bciからビッグエンディアンの符号なし16ビット値を読み出します。
    def read_u2(self, bci: int) -> int:
        return (self._source.read(bci) << 8) | self._source.read(bci + 1)

    # @intent:responsibility 命令先頭のオペコードを返します。ブレークポイントが設置されていれば元のオペコードを返します。
    def get_bytecode_or_bp_at(self, bci: int) -> int:
        code = self._source.read(bci)
        if code == BREAKPOINT_OPCODE and bci in self._breakpoints:
            return self._breakpoints[bci]
        return code

    def get_bytecode_byte_arg(self, bci: int) -> int:
        """Signed 8-bit read."""
        value = self._source.read(bci)
        return value - 0x100 if value & 0x80 else value

    def get_bytecode_short_arg(self, bci: int) -> int:
        """Big-endian signed 16-bit read (Java class file order)."""
        value = self.read_u2(bci)
        return value - 0x10000 if value & 0x8000 else value

    def get_bytecode_int_arg(self, bci: int) -> int:
        """Big-endian signed 32-bit read."""
        value = (self.read_u2(bci) << 16) | self.read_u2(bci + 2)
        return value - 0x100000000 if value & 0x80000000 else value

    # @intent:responsibility 対象プロセスのネイティブバイト順で符号なし16ビット値を読み出します。
    # @intent:rationale 書き換え後の命令はCP cacheインデックスなどをネイティブ順で埋め込むことがあります。
    def get_native_short_arg(self, bci: int) -> int:
        lo = self._source.read(bci)
        hi = self._source.read(bci + 1)
        if self._byte_order == "little":
            return (hi << 8) | lo
        return (lo << 8) | hi

    def __repr__(self) -> str:
        return f"Method(name={self._name!r}, size={self.code_size()})"
