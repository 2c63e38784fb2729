from __future__ import annotations
from dataclasses import dataclass
from typing import Sequence

from potts_ssvm.graph.schema import GraphSample
from potts_ssvm.graph.vectors import max_index_plus_one


@dataclass(frozen=True)
class FeatureDims:
    node_dims: int
    edge_dims: int

    @property
    def num_dimensions(self) -> int:
        # psi/w layout: [edge block | node block]
        return self.edge_dims + self.node_dims


def resolve_dims(samples: Sequence[GraphSample]) -> FeatureDims:
    """Number of node and edge dimensions needed to hold every observed feature.

    For dense vectors this is the vector length; for sparse vectors it is the
    largest populated index + 1 over the whole training set.
    """
    node_dims = 0
    edge_dims = 0
    for sample in samples:
        for i in range(sample.num_nodes):
            node_dims = max(node_dims, max_index_plus_one(sample.node(i)))
        for z in sample.edge_z:
            edge_dims = max(edge_dims, max_index_plus_one(z))
    return FeatureDims(node_dims=node_dims, edge_dims=edge_dims)
