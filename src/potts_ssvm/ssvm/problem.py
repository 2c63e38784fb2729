from __future__ import annotations
import abc
from concurrent.futures import ThreadPoolExecutor
from typing import List, Tuple
import torch

from .features import Psi, as_dense


class StructuralSVMProblem(metaclass=abc.ABCMeta):
    """Contract a structural SVM solver uses to query a training problem."""

    @abc.abstractmethod
    def get_num_dimensions(self) -> int:
        raise NotImplementedError

    @abc.abstractmethod
    def get_num_samples(self) -> int:
        raise NotImplementedError

    @abc.abstractmethod
    def get_truth_joint_feature_vector(self, idx: int) -> Psi:
        raise NotImplementedError

    @abc.abstractmethod
    def separation_oracle(self, idx: int, current_solution: torch.Tensor) -> Tuple[float, Psi]:
        raise NotImplementedError


class ThreadedStructuralSVMProblem(StructuralSVMProblem):
    """Runs the separation oracle over all samples on a thread pool.

    Oracle implementations must only read shared state; each call owns its outputs.
    """

    def __init__(self, num_threads: int = 2):
        if int(num_threads) < 1:
            raise ValueError(f"num_threads must be >= 1, got {num_threads}")
        self.num_threads = int(num_threads)

    def separation_oracle_all(self, w: torch.Tensor) -> List[Tuple[float, Psi]]:
        snapshot = w.detach().clone()
        n = self.get_num_samples()
        if self.num_threads == 1:
            return [self.separation_oracle(i, snapshot) for i in range(n)]
        with ThreadPoolExecutor(max_workers=self.num_threads) as pool:
            # map() re-raises the first worker exception here
            return list(pool.map(lambda i: self.separation_oracle(i, snapshot), range(n)))

    def risk_and_subgradient(self, w: torch.Tensor) -> Tuple[float, torch.Tensor]:
        """Mean structured hinge risk at w and a subgradient of it.

        risk = mean_i(loss_i + <w, psi_pred_i> - <w, psi_true_i>)
        subgradient = mean_i(psi_pred_i - psi_true_i)
        """
        D = self.get_num_dimensions()
        snapshot = w.detach().clone().to(torch.float64)
        results = self.separation_oracle_all(snapshot)
        n = len(results)
        risk = 0.0
        subgrad = torch.zeros((D,), dtype=torch.float64)
        for idx, (loss, psi) in enumerate(results):
            diff = as_dense(psi, D) - as_dense(self.get_truth_joint_feature_vector(idx), D)
            risk += loss + float(torch.dot(snapshot, diff).item())
            subgrad += diff
        if n > 0:
            risk /= n
            subgrad /= n
        return risk, subgrad
