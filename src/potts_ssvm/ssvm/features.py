from __future__ import annotations
import abc
from typing import Any, List, Sequence, Tuple, Union
import torch

from potts_ssvm.graph.schema import GraphSample
from potts_ssvm.graph.vectors import FeatureVector, sparse_items
from .dims import FeatureDims

SparsePsi = List[Tuple[int, float]]
Psi = Union[torch.Tensor, SparsePsi]


class Accumulator(metaclass=abc.ABCMeta):
    """Output side of the joint feature vector traversal.

    add(offset, v, sign) adds sign * v into psi, with v's entries shifted by offset.
    """

    @abc.abstractmethod
    def add(self, offset: int, v: FeatureVector, sign: float = 1.0) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    def result(self) -> Psi:
        raise NotImplementedError


class DenseAccumulator(Accumulator):
    def __init__(self, num_dims: int, dtype: torch.dtype = torch.float64):
        self.psi = torch.zeros((num_dims,), dtype=dtype)

    def add(self, offset: int, v: FeatureVector, sign: float = 1.0) -> None:
        v = v.reshape(-1).to(self.psi.dtype)
        self.psi[offset:offset + v.numel()] += sign * v

    def result(self) -> torch.Tensor:
        return self.psi


class SparseAccumulator(Accumulator):
    """Appends (index, value) entries; duplicates are left for the consumer to sum."""

    def __init__(self):
        self.psi: SparsePsi = []

    def add(self, offset: int, v: FeatureVector, sign: float = 1.0) -> None:
        for idx, val in sparse_items(v):
            self.psi.append((idx + offset, sign * val))

    def result(self) -> SparsePsi:
        return self.psi


def make_accumulator(dims: FeatureDims, sparse: bool) -> Accumulator:
    if sparse:
        return SparseAccumulator()
    return DenseAccumulator(dims.num_dimensions)


def joint_feature_vector(
    sample: GraphSample,
    labeling: Sequence[Any],
    dims: FeatureDims,
    sparse: bool = False,
) -> Psi:
    """psi(sample, labeling) laid out as [edge block | node block].

    Node vectors of "on" nodes are added to the node block; the vector of every
    edge whose endpoints disagree is subtracted from the edge block.
    """
    acc = make_accumulator(dims, sparse)
    for i in range(sample.num_nodes):
        label_i = bool(labeling[i])
        if label_i:
            acc.add(dims.edge_dims, sample.node(i))
        for j, z in sample.neighbors(i):
            # count each undirected edge once, only when labels disagree
            if i < j and label_i != bool(labeling[j]):
                acc.add(0, z, sign=-1.0)
    return acc.result()


def flatten_sparse(psi: SparsePsi, num_dims: int, dtype: torch.dtype = torch.float64) -> torch.Tensor:
    """Dense form of a sparse psi, summing duplicate indices."""
    out = torch.zeros((num_dims,), dtype=dtype)
    if psi:
        idx = torch.tensor([k for k, _ in psi], dtype=torch.long)
        val = torch.tensor([v for _, v in psi], dtype=dtype)
        out.index_add_(0, idx, val)
    return out


def as_dense(psi: Psi, num_dims: int) -> torch.Tensor:
    if torch.is_tensor(psi):
        return psi
    return flatten_sparse(psi, num_dims)
