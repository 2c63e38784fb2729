from __future__ import annotations
from typing import Dict, List, Sequence
import random


def split_samples(n: int, ratios: Sequence[float] = (0.8, 0.1, 0.1), seed: int = 7) -> Dict[str, List[int]]:
    """Shuffle sample indices 0..n-1 into train/val/test index lists."""
    if len(ratios) != 3 or abs(sum(ratios) - 1.0) > 1e-6:
        raise ValueError(f"ratios must be three fractions summing to 1, got {tuple(ratios)}")
    idx = list(range(n))
    random.Random(seed).shuffle(idx)
    n_tr = int(ratios[0] * n)
    n_va = int(ratios[1] * n)
    return {"train": idx[:n_tr], "val": idx[n_tr:n_tr + n_va], "test": idx[n_tr + n_va:]}
