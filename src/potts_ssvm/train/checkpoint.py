from __future__ import annotations
from typing import Any, Dict
import torch


def save_ckpt(path: str, weights: torch.Tensor, edge_dims: int, node_dims: int, **meta: Any) -> None:
    """Save learned weights [edge | node] with the dimensions needed to split them."""
    w = weights.detach().reshape(-1).cpu().to(torch.float64)
    if int(w.numel()) != int(edge_dims) + int(node_dims):
        raise ValueError(f"weights has {int(w.numel())} entries, expected edge_dims+node_dims={edge_dims + node_dims}")
    payload: Dict[str, Any] = {
        "weights": w,
        "edge_dims": int(edge_dims),
        "node_dims": int(node_dims),
        **meta,
    }
    torch.save(payload, path)


def load_ckpt(path: str, map_location: str | torch.device = "cpu") -> Dict[str, Any]:
    """Load checkpoint. Returns the payload dict."""
    payload = torch.load(path, map_location=map_location)
    if not isinstance(payload, dict):
        raise KeyError(f"checkpoint payload is a {type(payload).__name__}, expected a dict")
    for k in ("weights", "edge_dims"):
        if k not in payload:
            raise KeyError(f"checkpoint is missing '{k}'")
    return payload
