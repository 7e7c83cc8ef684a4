from typing import Dict
from bytecode_tracer.transport.method import ByteCodeSource, Method
from .models import TracerConfig, MethodConfig

# @intent:responsibility 設定（Config）に基づいて、命令バイト列の供給元とMethodを生成します。
class MethodBuilder:
    def build_methods(self, config: TracerConfig) -> Dict[str, Method]:
        methods = {}
        for method_config in config.methods:
            if method_config.name in methods:
                raise ValueError(f"Duplicate method name: {method_config.name!r}")
            methods[method_config.name] = self.build_method(method_config, config.byte_order)
        return methods

    def build_method(self, method_config: MethodConfig, byte_order: str = "little") -> Method:
        source = ByteCodeSource(method_config.code)
        return Method(
            source,
            name=method_config.name,
            byte_order=byte_order,
            breakpoints=method_config.breakpoints
        )
