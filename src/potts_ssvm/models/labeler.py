from __future__ import annotations
from typing import List
import torch

from potts_ssvm.graph.potts import find_max_factor_graph_potts
from potts_ssvm.graph.schema import GraphSample
from potts_ssvm.ssvm.dims import FeatureDims
from potts_ssvm.ssvm.oracle import build_potts_graph, split_weights
from potts_ssvm.train.checkpoint import load_ckpt


class GraphLabeler:
    """Predicts binary node labels of a graph from learned weights [edge | node].

    Edge weights must be non-negative so prediction reduces exactly to a min-cut.
    """

    def __init__(self, weights: torch.Tensor, edge_dims: int):
        weights = weights.detach().reshape(-1).to(torch.float64).clone()
        edge_dims = int(edge_dims)
        if not (0 <= edge_dims <= weights.numel()):
            raise ValueError(f"edge_dims={edge_dims} outside [0,{weights.numel()}]")
        self.dims = FeatureDims(node_dims=int(weights.numel()) - edge_dims, edge_dims=edge_dims)
        self.weights = weights
        self.edge_weights, self.node_weights = split_weights(weights, self.dims)
        if self.edge_weights.numel() > 0 and float(self.edge_weights.min().item()) < 0:
            raise ValueError("edge weights must be non-negative")

    def __call__(self, sample: GraphSample) -> List[int]:
        g = build_potts_graph(sample, self.edge_weights, self.node_weights)
        return find_max_factor_graph_potts(g)

    def predict(self, samples) -> List[List[int]]:
        return [self(s) for s in samples]

    @classmethod
    def from_checkpoint(cls, path: str) -> "GraphLabeler":
        payload = load_ckpt(path)
        return cls(payload["weights"], payload["edge_dims"])
