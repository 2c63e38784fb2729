from __future__ import annotations
from typing import Any, Dict, Iterable, Mapping
import yaml


def load_cfg(path: str) -> Dict[str, Any]:
    """Read a YAML run config; an empty file gives an empty config."""
    with open(path, "r", encoding="utf-8") as f:
        cfg = yaml.safe_load(f)
    if cfg is None:
        return {}
    if not isinstance(cfg, dict):
        raise ValueError(f"{path}: top level of a config must be a mapping, got {type(cfg).__name__}")
    return cfg


def deep_update(base: Dict[str, Any], patch: Mapping[str, Any]) -> Dict[str, Any]:
    """Merge `patch` into `base` in place; nested mappings merge, anything else replaces."""
    for key, value in patch.items():
        target = base.get(key)
        if isinstance(value, Mapping) and isinstance(target, dict):
            deep_update(target, value)
        else:
            base[key] = value
    return base


def apply_overrides(cfg: Dict[str, Any], overrides: Iterable[str]) -> Dict[str, Any]:
    """Apply `a.b.c=value` overrides; values are parsed as YAML scalars."""
    for item in overrides or []:
        if "=" not in item:
            raise ValueError(f"Override must look like key.path=value, got {item!r}")
        key, raw = item.split("=", 1)
        patch: Dict[str, Any] = {}
        node = patch
        parts = key.strip().split(".")
        for p in parts[:-1]:
            node = node.setdefault(p, {})
        node[parts[-1]] = yaml.safe_load(raw)
        deep_update(cfg, patch)
    return cfg
