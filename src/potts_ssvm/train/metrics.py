from __future__ import annotations
from typing import Any, Callable, List, Sequence, Tuple


def hamming_accuracy(pred: Sequence[Any], truth: Sequence[Any]) -> float:
    if len(truth) == 0:
        return 1.0
    agree = sum(1 for p, t in zip(pred, truth) if bool(p) == bool(t))
    return agree / len(truth)


def test_graph_labeling_function(
    labeler: Callable[[Any], List[int]],
    samples: Sequence[Any],
    labels: Sequence[Sequence[Any]],
) -> Tuple[float, float]:
    """Return (accuracy on "on" nodes, accuracy on "off" nodes) over all samples.

    A class with no nodes counts as fully accurate.
    """
    num_pos = num_neg = 0
    pos_ok = neg_ok = 0
    for sample, truth in zip(samples, labels):
        pred = labeler(sample)
        for p, t in zip(pred, truth):
            if bool(t):
                num_pos += 1
                pos_ok += int(bool(p))
            else:
                num_neg += 1
                neg_ok += int(not bool(p))
    pos_acc = pos_ok / num_pos if num_pos else 1.0
    neg_acc = neg_ok / num_neg if num_neg else 1.0
    return pos_acc, neg_acc


# not a pytest test
test_graph_labeling_function.__test__ = False
