from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Sequence, Tuple
import torch

from .vectors import FeatureVector


def _as_edge_pairs(edge_index: Any) -> List[Tuple[int, int]]:
    if torch.is_tensor(edge_index):
        if edge_index.numel() == 0:
            return []
        if edge_index.ndim != 2 or edge_index.size(0) != 2:
            raise ValueError("edge_index tensor must be [2,E]")
        return [(int(i), int(j)) for i, j in zip(edge_index[0].tolist(), edge_index[1].tolist())]
    return [(int(i), int(j)) for i, j in edge_index]


@dataclass
class GraphSample:
    node_x: Sequence[FeatureVector]     # N node vectors ([N, F_node] tensor or list)
    edge_index: Any                     # [2, E] long tensor or list of (i, j); undirected
    edge_z: Sequence[FeatureVector]     # E edge vectors, aligned with edge_index
    meta: Dict[str, Any] = field(default_factory=dict)

    edges: List[Tuple[int, int]] = field(init=False, repr=False)
    _adj: List[List[Tuple[int, int]]] = field(init=False, repr=False)

    def __post_init__(self):
        self.edges = _as_edge_pairs(self.edge_index)
        N = len(self.node_x)
        if len(self.edge_z) != len(self.edges):
            raise ValueError(f"edge_z has {len(self.edge_z)} vectors but edge_index has {len(self.edges)} edges")
        adj: List[List[Tuple[int, int]]] = [[] for _ in range(N)]
        for e, (i, j) in enumerate(self.edges):
            if not (0 <= i < N and 0 <= j < N):
                raise ValueError(f"edge {e}=({i},{j}) references a node outside [0,{N})")
            adj[i].append((j, e))
            if j != i:
                adj[j].append((i, e))
        self._adj = adj

    @property
    def num_nodes(self) -> int:
        return len(self.node_x)

    @property
    def num_edges(self) -> int:
        return len(self.edges)

    def node(self, i: int) -> FeatureVector:
        return self.node_x[i]

    def number_of_neighbors(self, i: int) -> int:
        return len(self._adj[i])

    def neighbors(self, i: int) -> Iterator[Tuple[int, FeatureVector]]:
        """Yield (j, edge_vector) for every edge incident to node i."""
        for j, e in self._adj[i]:
            yield j, self.edge_z[e]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "node_x": self.node_x,
            "edge_index": self.edges,
            "edge_z": self.edge_z,
            "meta": self.meta,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "GraphSample":
        return cls(node_x=d["node_x"], edge_index=d["edge_index"], edge_z=d["edge_z"], meta=dict(d.get("meta", {})))


def from_networkx(G, node_attr: str = "x", edge_attr: str = "z") -> GraphSample:
    """Convert an undirected networkx graph whose nodes/edges carry feature vectors.

    Nodes are relabelled 0..N-1 in G.nodes iteration order; the original node keys
    are kept in meta["node_keys"].
    """
    keys = list(G.nodes)
    pos = {k: n for n, k in enumerate(keys)}
    node_x = [G.nodes[k][node_attr] for k in keys]
    edge_index = []
    edge_z = []
    for u, v, data in G.edges(data=True):
        edge_index.append((pos[u], pos[v]))
        edge_z.append(data[edge_attr])
    return GraphSample(node_x=node_x, edge_index=edge_index, edge_z=edge_z, meta={"node_keys": keys})
