"""Training driver, metrics and checkpoints for graph labeling."""

from .trainer import Trainer
from .metrics import hamming_accuracy, test_graph_labeling_function
from .checkpoint import save_ckpt, load_ckpt

__all__ = [
    'Trainer',
    'hamming_accuracy',
    'test_graph_labeling_function',
    'save_ckpt',
    'load_ckpt',
]
