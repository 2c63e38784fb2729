from __future__ import annotations
from typing import Optional, Sequence

from potts_ssvm.graph.schema import GraphSample
from potts_ssvm.graph.vectors import (
    FeatureVector,
    all_finite,
    is_dense,
    is_well_formed_sparse,
    min_value,
    sparse_items,
    vector_size,
)


def is_learning_problem(samples: Sequence, labels: Sequence) -> bool:
    return len(samples) == len(labels) and len(samples) > 0


def graph_contains_length_one_cycle(sample: GraphSample) -> bool:
    return any(i == j for i, j in sample.edges)


class _KindTracker:
    """Remembers whether the training set is dense or sparse, and dense sizes."""

    def __init__(self):
        self.dense: Optional[bool] = None
        self.node_dims = -1
        self.edge_dims = -1

    def same_kind(self, v: FeatureVector) -> bool:
        d = is_dense(v)
        if self.dense is None:
            self.dense = d
        return d == self.dense


def _bad_sparse(v: FeatureVector) -> bool:
    if not is_well_formed_sparse(v):
        return True
    return any(idx < 0 for idx, _ in sparse_items(v))


def is_graph_labeling_problem(samples: Sequence[GraphSample], labels: Sequence[Sequence]) -> bool:
    """True iff (samples, labels) is a valid binary graph labeling problem.

    Requires, in order:
      - is_learning_problem(samples, labels)
      - per sample: no self-loops and one label per node
      - per node: non-empty vector (dense); all node vectors of equal size (dense)
      - per edge: non-empty vector (dense); every entry >= 0; equal size (dense)
    Vectors must all be dense or all sparse; sparse vectors must hold (int, real)
    pairs with non-negative indices, and edge entries must be finite.
    """
    if not is_learning_problem(samples, labels):
        return False

    kind = _KindTracker()
    for sample, label in zip(samples, labels):
        if sample.num_nodes != len(label):
            return False
        if graph_contains_length_one_cycle(sample):
            return False

        for i in range(sample.num_nodes):
            x = sample.node(i)
            if not kind.same_kind(x):
                return False
            if kind.dense:
                if vector_size(x) == 0:
                    return False
                if kind.node_dims == -1:
                    kind.node_dims = vector_size(x)
                # all nodes must have vectors of the same size
                if vector_size(x) != kind.node_dims:
                    return False
            elif _bad_sparse(x):
                return False

            for _, z in sample.neighbors(i):
                if not kind.same_kind(z):
                    return False
                if kind.dense:
                    if vector_size(z) == 0:
                        return False
                    if kind.edge_dims == -1:
                        kind.edge_dims = vector_size(z)
                    if vector_size(z) != kind.edge_dims:
                        return False
                elif _bad_sparse(z):
                    return False
                if not all_finite(z) or min_value(z) < 0:
                    return False

    return True
