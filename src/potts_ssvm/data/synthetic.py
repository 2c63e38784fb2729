from __future__ import annotations
from typing import Dict, List, Tuple
import torch

from potts_ssvm.graph.schema import GraphSample
from potts_ssvm.models.labeler import GraphLabeler


def _to_sparse(x: torch.Tensor) -> Dict[int, float]:
    return {k: float(v) for k, v in enumerate(x.tolist()) if v != 0.0}


def make_synthetic_problem(
    num_samples: int = 20,
    min_nodes: int = 6,
    max_nodes: int = 12,
    node_dim: int = 4,
    edge_dim: int = 2,
    edge_prob: float = 0.3,
    density: float = 1.0,
    sparse: bool = False,
    label_noise: float = 0.0,
    seed: int = 7,
) -> Tuple[List[GraphSample], List[List[int]], torch.Tensor]:
    """Random graphs labelled by a hidden GraphLabeler.

    Node features are Gaussian, edge features uniform in [0,1) (so non-negative);
    each feature entry is kept with probability `density`. Returns
    (samples, labels, hidden weights [edge | node]).
    """
    if not (1 <= min_nodes <= max_nodes):
        raise ValueError(f"need 1 <= min_nodes <= max_nodes, got {min_nodes}, {max_nodes}")
    g = torch.Generator().manual_seed(int(seed))

    w_edge = torch.rand((edge_dim,), generator=g, dtype=torch.float64) * 2.0
    w_node = torch.randn((node_dim,), generator=g, dtype=torch.float64)
    true_w = torch.cat([w_edge, w_node])
    labeler = GraphLabeler(true_w, edge_dims=edge_dim)

    samples: List[GraphSample] = []
    labels: List[List[int]] = []
    for _ in range(int(num_samples)):
        N = int(torch.randint(min_nodes, max_nodes + 1, (1,), generator=g).item())
        node_x = torch.randn((N, node_dim), generator=g, dtype=torch.float64)
        node_x = node_x * (torch.rand((N, node_dim), generator=g) < density)

        ii, jj = torch.triu_indices(N, N, offset=1)
        keep = torch.rand((ii.numel(),), generator=g) < edge_prob
        edge_index = torch.stack([ii[keep], jj[keep]], dim=0)
        E = int(edge_index.size(1))
        edge_z = torch.rand((E, edge_dim), generator=g, dtype=torch.float64)
        edge_z = edge_z * (torch.rand((E, edge_dim), generator=g) < density)

        if sparse:
            sample = GraphSample(
                node_x=[_to_sparse(x) for x in node_x],
                edge_index=edge_index,
                edge_z=[_to_sparse(z) for z in edge_z],
            )
        else:
            sample = GraphSample(node_x=node_x, edge_index=edge_index, edge_z=edge_z)

        y = labeler(sample)
        if label_noise > 0:
            flip = (torch.rand((N,), generator=g) < label_noise).tolist()
            y = [1 - v if f else v for v, f in zip(y, flip)]
        samples.append(sample)
        labels.append(y)
    return samples, labels, true_w
