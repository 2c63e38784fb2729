from __future__ import annotations
from typing import Any, Iterator, Mapping, Tuple
import math
import numbers
import torch

# A feature vector is either dense (1-D torch.Tensor) or sparse
# (Mapping[int, float] or a sequence of (index, value) pairs).
FeatureVector = Any


def is_dense(v: FeatureVector) -> bool:
    return torch.is_tensor(v)


def sparse_items(v: FeatureVector) -> Iterator[Tuple[int, float]]:
    """Yield (index, value) pairs of a sparse vector in stored order."""
    items = v.items() if isinstance(v, Mapping) else v
    for idx, val in items:
        yield int(idx), float(val)


def vector_size(v: FeatureVector) -> int:
    if is_dense(v):
        return int(v.numel())
    return len(v)


def max_index_plus_one(v: FeatureVector) -> int:
    """Dense: the vector length. Sparse: largest stored index + 1 (0 when empty)."""
    if is_dense(v):
        return int(v.numel())
    m = 0
    for idx, _ in sparse_items(v):
        m = max(m, idx + 1)
    return m


def min_value(v: FeatureVector) -> float:
    if is_dense(v):
        if v.numel() == 0:
            return math.inf
        return float(v.min().item())
    return min((val for _, val in sparse_items(v)), default=math.inf)


def all_finite(v: FeatureVector) -> bool:
    if is_dense(v):
        return bool(torch.isfinite(v).all().item())
    return all(math.isfinite(val) for _, val in sparse_items(v))


def is_well_formed_sparse(v: FeatureVector) -> bool:
    """A mapping or list/tuple whose entries are (integer index, real value) pairs."""
    if isinstance(v, Mapping):
        pairs = v.items()
    elif isinstance(v, (list, tuple)):
        pairs = v
    else:
        return False
    for p in pairs:
        if not isinstance(p, (list, tuple)) or len(p) != 2:
            return False
        idx, val = p
        if isinstance(idx, bool) or not isinstance(idx, numbers.Integral):
            return False
        if not isinstance(val, numbers.Real):
            return False
    return True


def dot(w: torch.Tensor, v: FeatureVector) -> float:
    """Dot product of a dense weight block with a dense or sparse vector.

    Sparse entries whose index falls outside the block contribute nothing; the
    sparse path gathers only the stored indices.
    """
    if is_dense(v):
        return float(torch.dot(w, v.reshape(-1).to(w.dtype)).item())
    n = int(w.numel())
    idx, vals = [], []
    for i, val in sparse_items(v):
        if 0 <= i < n:
            idx.append(i)
            vals.append(val)
    if not idx:
        return 0.0
    gathered = w[torch.tensor(idx, dtype=torch.long, device=w.device)]
    return float(torch.dot(gathered, torch.tensor(vals, dtype=w.dtype, device=w.device)).item())
