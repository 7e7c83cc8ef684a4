"""
プロセス全体で共有する設定を一度だけ解決するモジュール。
"""
import os
from functools import lru_cache

from .loader import ConfigLoader
from .models import TracerConfig

# @intent:constant 設定ファイルのパスを指定する環境変数名。
CONFIG_ENV_VAR = "BYTECODE_TRACER_CONFIG"

# @intent:responsibility プロセス起動後の最初の呼び出しで設定を解決し、以後は同じ不変オブジェクトを返します。
# @intent:rationale 検証モードを隠れたグローバル変数で切り替えるのではなく、一度だけ確定する不変設定とします。
@lru_cache(maxsize=None)
def get_settings() -> TracerConfig:
    path = os.environ.get(CONFIG_ENV_VAR)
    if path:
        return ConfigLoader().load_from_file(path)
    return TracerConfig()

def resolve_verify(verify=None) -> bool:
    """明示的な指定があればそれを、なければプロセス設定の verify_shapes を返す。"""
    if verify is not None:
        return bool(verify)
    return get_settings().verify_shapes
