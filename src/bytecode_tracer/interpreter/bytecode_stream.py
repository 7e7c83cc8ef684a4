# src/bytecode_tracer/interpreter/bytecode_stream.py
"""
BytecodeStream

メソッドの命令バイト列を先頭から線形に辿り、各命令の先頭bciを順に提供します。
"""
from typing import Iterator, Optional

from bytecode_tracer.transport.method import Method
from bytecode_tracer.interpreter.bytecodes import Bytecodes, code_at, length_at

# @intent:responsibility 命令列を1命令ずつ進め、現在位置（bci）とオペコードを提供します。
class BytecodeStream:
    """
    next() を呼ぶたびに次の命令へ進み、そのオペコードを返します。終端では -1 を返します。
    wide 命令はプレフィックスのbciで報告され、code() は拡張された命令のオペコードを返します。
    """
    def __init__(self, method: Method, begin_bci: int = 0, end_bci: Optional[int] = None):
        self._method = method
        self.set_interval(begin_bci, method.code_size() if end_bci is None else end_bci)

    # @intent:responsibility 走査範囲を設定し、位置を先頭に戻します。
    # @intent:pre-condition 0 <= begin_bci <= end_bci <= code_size である必要があります。
    def set_interval(self, begin_bci: int, end_bci: int) -> None:
        if not 0 <= begin_bci <= end_bci <= self._method.code_size():
            raise ValueError(f"Invalid interval [{begin_bci}, {end_bci}) for code of size {self._method.code_size()}")
        self._end_bci = end_bci
        self.set_start(begin_bci)

    def set_start(self, bci: int) -> None:
        self._bci = bci
        self._next_bci = bci
        self._code = -1
        self._raw_code = -1
        self._is_wide = False

    # @intent:responsibility 次の命令へ進み、そのオペコードを返します。
    def next(self) -> int:
        self._bci = self._next_bci
        if self._bci >= self._end_bci:
            self._code = -1
            self._raw_code = -1
            self._is_wide = False
            return -1

        self._raw_code = code_at(self._method, self._bci)
        length = length_at(self._method, self._bci)
        if length <= 0 or self._bci + length > self._end_bci:
            raise ValueError(f"Malformed instruction at bci {self._bci}: length {length}")

        self._is_wide = self._raw_code == Bytecodes.WIDE
        if self._is_wide:
            self._code = code_at(self._method, self._bci + 1)
        else:
            self._code = self._raw_code
        self._next_bci = self._bci + length
        return self._code

    def method(self) -> Method:
        return self._method

    def bci(self) -> int:
        return self._bci

    # @intent:responsibility 現在の命令のオペコードが置かれたbciを返します（wideならプレフィックスの次）。
    def code_bci(self) -> int:
        return self._bci + 1 if self._is_wide else self._bci

    def next_bci(self) -> int:
        return self._next_bci

    def end_bci(self) -> int:
        return self._end_bci

    def code(self) -> int:
        return self._code

    def raw_code(self) -> int:
        return self._raw_code

    def is_wide(self) -> bool:
        return self._is_wide

    def is_last(self) -> bool:
        return self._next_bci >= self._end_bci

    def __iter__(self) -> Iterator[int]:
        while self.next() != -1:
            yield self._bci
