from __future__ import annotations
from typing import Any, Dict, List, Optional
import math
import torch

from potts_ssvm.ssvm.graph_labeling import GraphLabelingProblem
from .logger import SimpleLogger


def _build_step_sizes(epochs: int, cfg: Optional[Dict[str, Any]] = None) -> torch.Tensor:
    """
    Build positive step-size multipliers s[0..epochs-1] for the subgradient steps.
    Supported schemes:
      - constant: all ones
      - inv_sqrt: s_t = 1/sqrt(t+1)
      - inv:      s_t = 1/(t+1)
      - exp:      s_t = gamma^t
    """
    cfg = cfg or {}
    scheme = str(cfg.get("scheme", "inv_sqrt")).lower()

    if epochs <= 0:
        return torch.zeros((0,), dtype=torch.float64)

    t = torch.arange(epochs, dtype=torch.float64)

    if scheme == "constant":
        s = torch.ones((epochs,), dtype=torch.float64)
    elif scheme == "inv_sqrt":
        s = 1.0 / torch.sqrt(t + 1.0)
    elif scheme == "inv":
        s = 1.0 / (t + 1.0)
    elif scheme == "exp":
        gamma = float(cfg.get("gamma", 0.95))
        if not (0.0 < gamma <= 1.0):
            raise ValueError(f"schedule.gamma must be in (0,1], got {gamma}")
        s = gamma ** t
    else:
        raise ValueError(f"Unknown schedule.scheme={scheme}")
    return s


def _build_optimizer(name: str, params, lr: float) -> torch.optim.Optimizer:
    name = name.lower()
    if name == "sgd":
        return torch.optim.SGD(params, lr=lr)
    if name == "adamw":
        # regularisation is already in the gradient
        return torch.optim.AdamW(params, lr=lr, weight_decay=0.0)
    raise ValueError(f"Unknown optimizer={name}")


class Trainer:
    """Projected subgradient training of a graph labeling structural SVM.

    Minimises 0.5*||w||^2 + C * risk(w), where risk is the mean loss-augmented hinge
    computed by the problem's separation oracle. After every step the edge block of
    w is clamped to >= 0 so the oracle's Potts graphs stay submodular.
    """

    def __init__(
        self,
        problem: GraphLabelingProblem,
        C: float = 1.0,
        lr: float = 0.1,
        optimizer: str = "sgd",
        clip_grad_norm: float = 0.0,
        log_every: int = 1,
        schedule: Optional[Dict[str, Any]] = None,
    ):
        if C <= 0:
            raise ValueError(f"C must be > 0, got {C}")
        self.problem = problem
        self.C = float(C)
        self.lr = float(lr)
        self.clip = float(clip_grad_norm)
        self.log_every = max(1, int(log_every))
        self.schedule = schedule
        self.num_edge_weights = problem.get_num_edge_weights()

        self.w = torch.zeros((problem.get_num_dimensions(),), dtype=torch.float64, requires_grad=True)
        self.opt = _build_optimizer(optimizer, [self.w], self.lr)
        self.logger = SimpleLogger()
        self.history: List[Dict[str, float]] = []
        self.best_w = self.w.detach().clone()
        self.best_objective = math.inf

    def objective(self, risk: float) -> float:
        w = self.w.detach()
        return 0.5 * float(torch.dot(w, w).item()) + self.C * risk

    def _project(self) -> None:
        if self.num_edge_weights > 0:
            with torch.no_grad():
                self.w[:self.num_edge_weights].clamp_(min=0.0)

    def train_step(self, lr_scale: float = 1.0) -> Dict[str, float]:
        risk, subgrad = self.problem.risk_and_subgradient(self.w.detach())
        obj = self.objective(risk)
        if obj < self.best_objective:
            self.best_objective = obj
            self.best_w = self.w.detach().clone()

        for group in self.opt.param_groups:
            group["lr"] = self.lr * lr_scale
        self.opt.zero_grad(set_to_none=True)
        self.w.grad = self.w.detach() + self.C * subgrad
        if self.clip > 0:
            torch.nn.utils.clip_grad_norm_([self.w], max_norm=self.clip)
        self.opt.step()
        self._project()
        return {"risk": risk, "objective": obj}

    def fit(self, epochs: int) -> torch.Tensor:
        """Run `epochs` passes over the training set; returns the best weights seen."""
        steps = _build_step_sizes(int(epochs), self.schedule)
        for ep in range(1, int(epochs) + 1):
            out = self.train_step(float(steps[ep - 1].item()))
            rec = {"epoch": ep, "risk": out["risk"], "objective": out["objective"]}
            self.history.append(rec)
            if ep % self.log_every == 0 or ep == int(epochs):
                self.logger.log(**rec)

        # the last step has not been scored yet
        risk, _ = self.problem.risk_and_subgradient(self.w.detach())
        obj = self.objective(risk)
        if obj < self.best_objective:
            self.best_objective = obj
            self.best_w = self.w.detach().clone()
        print(f"[FIT] epochs={int(epochs)} best_objective={self.best_objective:.6f}")
        return self.best_w
