from __future__ import annotations
from typing import Any, List, Sequence, Tuple
import torch

from potts_ssvm.graph.potts import PottsGraph, copy_graph_structure, find_max_factor_graph_potts
from potts_ssvm.graph.schema import GraphSample
from potts_ssvm.graph.vectors import dot
from .dims import FeatureDims
from .features import Psi, joint_feature_vector


def split_weights(w: torch.Tensor, dims: FeatureDims) -> Tuple[torch.Tensor, torch.Tensor]:
    """(w_edge, w_node) views of a weight vector laid out as [edge | node]."""
    return w[:dims.edge_dims], w[dims.edge_dims:dims.edge_dims + dims.node_dims]


def build_potts_graph(sample: GraphSample, w_edge: torch.Tensor, w_node: torch.Tensor) -> PottsGraph:
    g = copy_graph_structure(sample)
    for i in range(g.num_nodes):
        g.node_scores[i] = dot(w_node, sample.node(i))
    for e, z in enumerate(sample.edge_z):
        g.edge_weights[e] = dot(w_edge, z)
    return g


def loss_augment(g: PottsGraph, truth: Sequence[Any]) -> PottsGraph:
    """Shift node scores by -1 for true "on" nodes and +1 for "off" nodes.

    Maximising the shifted Potts score then maximises model score + Hamming loss.
    """
    for i in range(g.num_nodes):
        if bool(truth[i]):
            g.node_scores[i] -= 1.0
        else:
            g.node_scores[i] += 1.0
    return g


def hamming_loss(pred: Sequence[Any], truth: Sequence[Any]) -> float:
    return float(sum(1 for p, t in zip(pred, truth) if bool(p) != bool(t)))


def separation_oracle(
    sample: GraphSample,
    truth: Sequence[Any],
    w: torch.Tensor,
    dims: FeatureDims,
    sparse: bool = False,
) -> Tuple[float, Psi, List[int]]:
    """Loss-augmented inference for one sample.

    Returns (loss, psi of the predicted labeling, predicted labeling).
    """
    w_edge, w_node = split_weights(w, dims)
    g = loss_augment(build_potts_graph(sample, w_edge, w_node), truth)
    labeling = find_max_factor_graph_potts(g)
    loss = hamming_loss(labeling, truth)
    psi = joint_feature_vector(sample, labeling, dims, sparse=sparse)
    return loss, psi, labeling
