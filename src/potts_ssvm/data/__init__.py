from .io import load_bundle, pack_samples, save_bundle, unpack_samples
from .dataset import GraphLabelingDataset
from .splits import split_samples
from .synthetic import make_synthetic_problem

__all__ = [
    "load_bundle",
    "pack_samples",
    "save_bundle",
    "unpack_samples",
    "GraphLabelingDataset",
    "split_samples",
    "make_synthetic_problem",
]
