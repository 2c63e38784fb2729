from __future__ import annotations

import argparse
import json
import os
from pathlib import Path
from typing import Any, Dict

from _cfg import load_cfg, apply_overrides
from potts_ssvm.utils.seed import set_seed
from potts_ssvm.utils.timer import timer
from potts_ssvm.data.dataset import GraphLabelingDataset
from potts_ssvm.models import GraphLabeler
from potts_ssvm.ssvm import GraphLabelingProblem
from potts_ssvm.train import Trainer, save_ckpt, test_graph_labeling_function


def _resolve_run_name(cfg: Dict[str, Any], split: str) -> str:
    tr = cfg.setdefault("train", {})
    rn = str(tr.get("run_name", "potts_run"))
    rn = rn.replace("$split$", split).replace("{split}", split)
    tr["run_name"] = rn
    return rn


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--cfg", type=str, required=True, help="Path to YAML config")
    ap.add_argument("--data", type=str, default=None, help="Override data path (pt)")
    ap.add_argument("--epochs", type=int, default=None, help="Override train.epochs")
    ap.add_argument("--threads", type=int, default=None, help="Override problem.num_threads")
    ap.add_argument("--set", dest="overrides", action="append", default=[], help="key.path=value")
    args = ap.parse_args()

    cfg: Dict[str, Any] = apply_overrides(load_cfg(args.cfg), args.overrides)

    # data path priority = --data > env DATA_PATH > cfg.data.path
    data_path = args.data or os.environ.get("DATA_PATH") or cfg.get("data", {}).get("path")
    if not data_path:
        raise ValueError("No data path provided. Set cfg.data.path or pass --data or export DATA_PATH=...")
    cfg.setdefault("data", {})["path"] = data_path
    if args.epochs is not None:
        cfg.setdefault("train", {})["epochs"] = args.epochs
    if args.threads is not None:
        cfg.setdefault("problem", {})["num_threads"] = args.threads

    seed = int(cfg.get("seed", 7))
    set_seed(seed)

    split = str(cfg["data"].get("split", "train"))
    ratios = tuple(cfg["data"].get("ratios", (0.8, 0.1, 0.1)))
    ds = GraphLabelingDataset(data_path, split=split, ratios=ratios, seed=seed)

    num_threads = int(cfg.get("problem", {}).get("num_threads", 2))
    problem = GraphLabelingProblem(ds.samples, ds.labels, num_threads=num_threads)

    tr_cfg = cfg.get("train", {})
    save_dir = Path(tr_cfg.get("save_dir", "runs"))
    run_dir = save_dir / _resolve_run_name(cfg, split)
    run_dir.mkdir(parents=True, exist_ok=True)

    print(f"[DATA] path={data_path} split={split} samples={problem.get_num_samples()} sparse={problem.is_sparse}")
    print(f"[DIMS] edge_dims={problem.edge_dims} node_dims={problem.node_dims} threads={num_threads}")
    print(f"[OUT]  dir={run_dir}")

    trainer = Trainer(
        problem,
        C=float(tr_cfg.get("C", 1.0)),
        lr=float(tr_cfg.get("lr", 0.1)),
        optimizer=str(tr_cfg.get("optimizer", "sgd")),
        clip_grad_norm=float(tr_cfg.get("clip_grad_norm", 0.0)),
        log_every=int(tr_cfg.get("log_every", 1)),
        schedule=tr_cfg.get("schedule"),
    )

    epochs = int(tr_cfg.get("epochs", 50))
    with timer("fit"):
        w = trainer.fit(epochs)

    pos_acc, neg_acc = test_graph_labeling_function(GraphLabeler(w, problem.edge_dims), ds.samples, ds.labels)
    print(f"[TRAIN] acc_on={pos_acc:.4f} acc_off={neg_acc:.4f}")

    save_ckpt(
        str(run_dir / "last.pt"),
        weights=w,
        edge_dims=problem.edge_dims,
        node_dims=problem.node_dims,
        epoch=epochs,
        objective=trainer.best_objective,
        cfg=cfg,
    )
    with open(run_dir / "history.json", "w", encoding="utf-8") as f:
        json.dump(trainer.history, f, indent=2)
    print(f"[CKPT] saved: {run_dir / 'last.pt'}")


if __name__ == "__main__":
    main()
