from dataclasses import dataclass, field
from typing import Dict, List

@dataclass(frozen=True)
class MethodConfig:
    name: str
    code: bytes
    breakpoints: Dict[int, int] = field(default_factory=dict)  # bci -> 退避された元のオペコード

@dataclass(frozen=True)
class TracerConfig:
    verify_shapes: bool = True  # 厳格構築時に命令の形を検証するか
    byte_order: str = "little"  # 対象プロセスのネイティブバイト順
    methods: List[MethodConfig] = field(default_factory=list)
