from .schema import GraphSample, from_networkx
from .potts import PottsGraph, PottsSolverError, find_max_factor_graph_potts, potts_energy

__all__ = [
    "GraphSample",
    "from_networkx",
    "PottsGraph",
    "PottsSolverError",
    "find_max_factor_graph_potts",
    "potts_energy",
]
