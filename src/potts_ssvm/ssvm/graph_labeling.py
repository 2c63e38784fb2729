from __future__ import annotations
from typing import Any, Sequence, Tuple
import torch

from potts_ssvm.graph.schema import GraphSample
from potts_ssvm.graph.vectors import is_dense
from .dims import FeatureDims, resolve_dims
from .features import Psi, joint_feature_vector
from .oracle import separation_oracle
from .problem import ThreadedStructuralSVMProblem
from .validate import is_graph_labeling_problem


class InvalidGraphLabelingProblem(ValueError):
    """The samples/labels given to GraphLabelingProblem are not a graph labeling problem."""


def _first_vector_is_sparse(samples: Sequence[GraphSample]) -> bool:
    for s in samples:
        if s.num_nodes > 0:
            return not is_dense(s.node(0))
    return False


class GraphLabelingProblem(ThreadedStructuralSVMProblem):
    """Binary graph labeling as a structural SVM problem.

    Learns w = [edge weights | node weights]. A solver driving this problem must keep
    the first get_num_edge_weights() entries of w non-negative, otherwise the Potts
    graphs built by the separation oracle are not solvable by min-cut.

    samples and labels are referenced, not copied; they must not change while the
    problem is in use.
    """

    def __init__(self, samples: Sequence[GraphSample], labels: Sequence[Sequence[Any]], num_threads: int = 2):
        super().__init__(num_threads)
        if not is_graph_labeling_problem(samples, labels):
            raise InvalidGraphLabelingProblem(
                "GraphLabelingProblem: invalid inputs (need matching non-empty samples/labels, "
                "one label per node, no self-loops, non-negative edge vectors and, for dense "
                "vectors, consistent non-zero dimensions)"
            )
        self.samples = samples
        self.labels = labels
        self.dims: FeatureDims = resolve_dims(samples)
        self.is_sparse = _first_vector_is_sparse(samples)

    @property
    def node_dims(self) -> int:
        return self.dims.node_dims

    @property
    def edge_dims(self) -> int:
        return self.dims.edge_dims

    def get_num_edge_weights(self) -> int:
        return self.dims.edge_dims

    def get_num_dimensions(self) -> int:
        return self.dims.num_dimensions

    def get_num_samples(self) -> int:
        return len(self.samples)

    def get_joint_feature_vector(self, sample: GraphSample, labeling: Sequence[Any]) -> Psi:
        return joint_feature_vector(sample, labeling, self.dims, sparse=self.is_sparse)

    def get_truth_joint_feature_vector(self, idx: int) -> Psi:
        return self.get_joint_feature_vector(self.samples[idx], self.labels[idx])

    def separation_oracle(self, idx: int, current_solution: torch.Tensor) -> Tuple[float, Psi]:
        if int(current_solution.numel()) != self.get_num_dimensions():
            raise ValueError(
                f"weight vector has {int(current_solution.numel())} entries, expected {self.get_num_dimensions()}"
            )
        w = current_solution.reshape(-1).to(torch.float64)
        loss, psi, _ = separation_oracle(self.samples[idx], self.labels[idx], w, self.dims, sparse=self.is_sparse)
        return loss, psi
