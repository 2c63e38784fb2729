from .dims import FeatureDims, resolve_dims
from .features import flatten_sparse, joint_feature_vector
from .graph_labeling import GraphLabelingProblem, InvalidGraphLabelingProblem
from .problem import StructuralSVMProblem, ThreadedStructuralSVMProblem
from .validate import is_graph_labeling_problem

__all__ = [
    "FeatureDims",
    "resolve_dims",
    "flatten_sparse",
    "joint_feature_vector",
    "GraphLabelingProblem",
    "InvalidGraphLabelingProblem",
    "StructuralSVMProblem",
    "ThreadedStructuralSVMProblem",
    "is_graph_labeling_problem",
]
