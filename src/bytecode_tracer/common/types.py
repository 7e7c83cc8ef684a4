"""
共通の型定義を提供するモジュール。
プロジェクト全体で使用される汎用的な型エイリアスなどを定義します。
"""
from typing import Callable, Dict, NamedTuple

# @intent:data_structure 対象プロセスのアドレスから1バイトを読み出す関数の型エイリアス。
# リモートプロセスやコアファイルへのアクセス手段を抽象化します。
MemoryReader = Callable[[int], int]

# @intent:data_structure ブレークポイントを設置したbciと、退避された元のオペコードの対応表。
BreakpointMap = Dict[int, int]

# @intent:data_structure 逆アセンブル結果の1行分。(bci, 16進ダンプ, ニーモニック)
class ListingLine(NamedTuple):
    bci: int
    hex_bytes: str
    text: str
