from __future__ import annotations
from pathlib import Path
from typing import Any, Dict, List, Sequence, Tuple
import torch

from potts_ssvm.graph.schema import GraphSample


def pack_samples(samples: Sequence[GraphSample], labels: Sequence[Sequence[Any]], **meta: Any) -> Dict[str, Any]:
    """Plain-container payload (dicts, lists, tensors) safe for torch.load."""
    return {
        "samples": [s.to_dict() for s in samples],
        "labels": [[int(bool(v)) for v in lab] for lab in labels],
        "meta": dict(meta),
    }


def unpack_samples(payload: Dict[str, Any]) -> Tuple[List[GraphSample], List[List[int]]]:
    assert "samples" in payload and "labels" in payload, "Expected payload with keys 'samples' and 'labels'"
    samples = [GraphSample.from_dict(d) for d in payload["samples"]]
    labels = [list(lab) for lab in payload["labels"]]
    return samples, labels

BUNDLE_FORMAT = "potts_ssvm.bundle/1"


def save_bundle(path: str, payload: Dict[str, Any]) -> None:
    """Write a packed payload, creating parent directories and stamping the format."""
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    torch.save({**payload, "format": BUNDLE_FORMAT}, str(out))


def load_bundle(path: str) -> Dict[str, Any]:
    payload = torch.load(path, map_location="cpu")
    if not isinstance(payload, dict):
        raise ValueError(f"{path}: expected a dict payload, got {type(payload).__name__}")
    fmt = payload.get("format", BUNDLE_FORMAT)
    if fmt != BUNDLE_FORMAT:
        raise ValueError(f"{path}: unsupported bundle format {fmt!r}")
    return payload
