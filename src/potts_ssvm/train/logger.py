from __future__ import annotations
from typing import Any, Dict, List


def _fmt(v: Any) -> str:
    if isinstance(v, float):
        return f"{v:.6g}"
    return str(v)


class SimpleLogger:
    def __init__(self, tag: str = "LOG"):
        self.tag = tag
        self.step = 0
        self.records: List[Dict[str, Any]] = []

    def log(self, **kwargs):
        self.step += 1
        if kwargs:
            self.records.append(dict(kwargs))
            print(f"[{self.tag}]", ", ".join(f"{k}={_fmt(v)}" for k, v in kwargs.items()))
