# src/bytecode_tracer/interpreter/disassembler.py
"""
バイトコード逆アセンブラ

メソッドの命令バイト列を解析し、(bci, 16進ダンプ, 表示文字列) のリストに変換します。
命令ビューのデコードロジックを再利用し、未定義のオペコードはデータバイトとして1バイトずつ進めます。
命令バイト列の読み出し失敗はそのまま呼び出し元へ伝播します。
"""
from typing import List, Optional

from bytecode_tracer.common.types import ListingLine
from bytecode_tracer.transport.method import Method
from bytecode_tracer.interpreter.bytecodes import Bytecodes, code_at, is_defined, length_at
from bytecode_tracer.interpreter.maps import decode_at

# @intent:map wide プレフィックスで拡張できるオペコード。
WIDENABLE = frozenset({
    Bytecodes.ILOAD, Bytecodes.LLOAD, Bytecodes.FLOAD, Bytecodes.DLOAD, Bytecodes.ALOAD,
    Bytecodes.ISTORE, Bytecodes.LSTORE, Bytecodes.FSTORE, Bytecodes.DSTORE, Bytecodes.ASTORE,
    Bytecodes.RET, Bytecodes.IINC,
})

def _hex_dump(method: Method, bci: int, length: int) -> str:
    return " ".join(f"{method.read_u1(bci + i):02X}" for i in range(length))

def _data_byte(method: Method, bci: int) -> ListingLine:
    value = method.read_u1(bci)
    return ListingLine(bci, f"{value:02X}", f"DB ${value:02X}")

# @intent:responsibility 指定されたbci範囲を逆アセンブルし、表示用データを生成します。
def disassemble(method: Method, start_bci: int = 0, length: Optional[int] = None) -> List[ListingLine]:
    """
    指定された範囲の命令を逆アセンブルします。

    Returns:
        List of (bci, hex_bytes, text) tuples.
    """
    result = []
    current_bci = start_bci
    end_bci = method.code_size() if length is None else min(start_bci + length, method.code_size())

    while current_bci < end_bci:
        code = code_at(method, current_bci)
        if not is_defined(code):
            result.append(_data_byte(method, current_bci))
            current_bci += 1
            continue

        # tableswitch の high < low など、形の壊れた可変長命令はデータとして扱う
        try:
            instr_len = length_at(method, current_bci)
        except ValueError:
            result.append(_data_byte(method, current_bci))
            current_bci += 1
            continue

        if code == Bytecodes.WIDE:
            widened = code_at(method, current_bci + 1)
            if widened not in WIDENABLE:
                result.append(_data_byte(method, current_bci))
                current_bci += 1
                continue
            text = "wide " + decode_at(method, current_bci + 1, wide_prefix=True).render()
        else:
            text = decode_at(method, current_bci, wide_prefix=False).render()

        result.append(ListingLine(current_bci, _hex_dump(method, current_bci, instr_len), text))
        current_bci += instr_len

    return result
