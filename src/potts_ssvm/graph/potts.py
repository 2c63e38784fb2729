from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Sequence, Tuple
import math

import networkx as nx
from networkx.algorithms.flow import boykov_kolmogorov

from .schema import GraphSample

_SOURCE = "__source__"
_SINK = "__sink__"


class PottsSolverError(RuntimeError):
    """The Potts energy graph cannot be minimised exactly by a min-cut."""


@dataclass
class PottsGraph:
    num_nodes: int
    node_scores: List[float] = field(default_factory=list)        # [N]
    edges: List[Tuple[int, int]] = field(default_factory=list)    # undirected, i < j
    edge_weights: List[float] = field(default_factory=list)       # [E] must be >= 0


def copy_graph_structure(sample: GraphSample) -> PottsGraph:
    """Potts graph with the sample's topology, each undirected edge once, zero scores."""
    edges = [(min(i, j), max(i, j)) for i, j in sample.edges]
    return PottsGraph(
        num_nodes=sample.num_nodes,
        node_scores=[0.0] * sample.num_nodes,
        edges=edges,
        edge_weights=[0.0] * len(edges),
    )


def potts_energy(g: PottsGraph, labeling: Sequence[int]) -> float:
    """E(x) = -sum_i score_i * x_i + sum_(i,j) w_ij * [x_i != x_j]."""
    e = 0.0
    for i in range(g.num_nodes):
        if labeling[i]:
            e -= g.node_scores[i]
    for (i, j), w in zip(g.edges, g.edge_weights):
        if bool(labeling[i]) != bool(labeling[j]):
            e += w
    return e


def _check(g: PottsGraph) -> None:
    if len(g.node_scores) != g.num_nodes:
        raise PottsSolverError(f"expected {g.num_nodes} node scores, got {len(g.node_scores)}")
    if len(g.edge_weights) != len(g.edges):
        raise PottsSolverError(f"expected {len(g.edges)} edge weights, got {len(g.edge_weights)}")
    for i, s in enumerate(g.node_scores):
        if not math.isfinite(s):
            raise PottsSolverError(f"node {i} has non-finite score {s}")
    for (i, j), w in zip(g.edges, g.edge_weights):
        if not math.isfinite(w) or w < 0:
            raise PottsSolverError(
                f"edge ({i},{j}) has weight {w}; the min-cut reduction needs non-negative edge weights"
            )


def find_max_factor_graph_potts(g: PottsGraph) -> List[int]:
    """Exact binary labeling maximising sum_i score_i*x_i - sum w_ij*[x_i != x_j].

    Reduction: source side is label 1. Positive scores become source->i capacities,
    negative scores i->sink capacities, and each edge a capacity in both directions.
    Nodes reachable from the source in the residual graph get label 1, so zero-score
    ties resolve to 0.
    """
    _check(g)
    if g.num_nodes == 0:
        return []

    D = _build_flow_graph(g)
    R = boykov_kolmogorov(D, _SOURCE, _SINK)
    reachable = _source_side(R)
    return [1 if i in reachable else 0 for i in range(g.num_nodes)]


def _source_side(R: nx.DiGraph) -> set:
    # unsaturated residual arcs only; the tolerance absorbs float drift on saturated arcs
    max_cap = max((d["capacity"] for _, _, d in R.edges(data=True)), default=0.0)
    tol = 1e-12 * max(1.0, max_cap)
    seen = {_SOURCE}
    stack = [_SOURCE]
    while stack:
        u = stack.pop()
        for v, d in R[u].items():
            if v not in seen and d["capacity"] - d["flow"] > tol:
                seen.add(v)
                stack.append(v)
    return seen


def _build_flow_graph(g: PottsGraph) -> nx.DiGraph:
    D = nx.DiGraph()
    D.add_node(_SOURCE)
    D.add_node(_SINK)
    D.add_nodes_from(range(g.num_nodes))
    for i, s in enumerate(g.node_scores):
        if s > 0:
            D.add_edge(_SOURCE, i, capacity=s)
        elif s < 0:
            D.add_edge(i, _SINK, capacity=-s)
    for (i, j), w in zip(g.edges, g.edge_weights):
        if i == j or w == 0:
            continue
        for u, v in ((i, j), (j, i)):
            if D.has_edge(u, v):
                D[u][v]["capacity"] += w
            else:
                D.add_edge(u, v, capacity=w)
    return D
