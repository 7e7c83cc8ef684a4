import warnings
import yaml
from typing import Dict, Any
from .models import TracerConfig, MethodConfig

_KNOWN_KEYS = {"verify_shapes", "byte_order", "methods"}

class ConfigLoader:
    def load_from_file(self, path: str) -> TracerConfig:
        with open(path, 'r') as f:
            data = yaml.safe_load(f)
        return self.parse(data or {})

    def parse(self, data: Dict[str, Any]) -> TracerConfig:
        if not isinstance(data, dict):
            raise ValueError(f"Config root must be a mapping, got {type(data).__name__}")

        for key in data:
            if key not in _KNOWN_KEYS:
                warnings.warn(f"Unknown config key '{key}' ignored")

        verify_shapes = data.get("verify_shapes", True)
        if not isinstance(verify_shapes, bool):
            raise ValueError(f"verify_shapes must be a boolean: {verify_shapes!r}")

        byte_order = data.get("byte_order", "little")
        if byte_order not in ("little", "big"):
            raise ValueError(f"Invalid byte_order: {byte_order!r}")

        # Parse Methods
        methods = []
        for method_data in data.get("methods") or []:
            if not isinstance(method_data, dict):
                raise ValueError(f"Method entry must be a mapping, got {type(method_data).__name__}")
            name = method_data.get("name", "")
            code = self._parse_code(method_data.get("code", ""))

            breakpoints = {}
            for bci, original in (method_data.get("breakpoints") or {}).items():
                bci = self._parse_int(bci)
                original = self._parse_int(original)
                if not 0 <= bci < len(code):
                    warnings.warn(f"Breakpoint at bci {bci} outside method '{name}', ignored")
                    continue
                breakpoints[bci] = original

            methods.append(MethodConfig(
                name=name,
                code=code,
                breakpoints=breakpoints
            ))

        return TracerConfig(
            verify_shapes=verify_shapes,
            byte_order=byte_order,
            methods=methods
        )

    def _parse_code(self, value: Any) -> bytes:
        # "2a dd 00 07" のような空白区切りの16進ダンプを受け付ける
        if isinstance(value, list):
            return bytes(self._parse_int(v) for v in value)
        if isinstance(value, str):
            try:
                return bytes.fromhex(value)
            except ValueError:
                raise ValueError(f"Invalid hex code string: {value!r}")
        raise ValueError(f"Invalid code format: {value!r}")

    def _parse_int(self, value: Any) -> int:
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            if value.startswith("0x"):
                return int(value, 16)
            return int(value)
        raise ValueError(f"Invalid integer format: {value}")
