from __future__ import annotations

import argparse
from pathlib import Path

from _cfg import load_cfg, apply_overrides
from potts_ssvm.data.dataset import GraphLabelingDataset
from potts_ssvm.models import GraphLabeler
from potts_ssvm.train.metrics import hamming_accuracy, test_graph_labeling_function


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--cfg", type=str, required=True)
    ap.add_argument("--split", type=str, default="test", help="train|val|test")
    ap.add_argument("--data", type=str, default=None)
    ap.add_argument("--ckpt", type=str, default=None)
    ap.add_argument("--set", dest="overrides", action="append", default=[], help="key.path=value")
    args = ap.parse_args()

    cfg = apply_overrides(load_cfg(args.cfg), args.overrides)
    data_cfg = cfg.get("data", {})
    data_path = args.data or data_cfg.get("path")
    seed = int(cfg.get("seed", 7))

    train_split = str(data_cfg.get("split", "train"))
    run_name = str(cfg.get("train", {}).get("run_name", "potts_run")).replace("{split}", train_split).replace("$split$", train_split)
    save_dir = str(cfg.get("train", {}).get("save_dir", "runs"))
    ckpt_path = Path(args.ckpt) if args.ckpt else (Path(save_dir) / run_name / "last.pt")
    if not ckpt_path.exists():
        raise FileNotFoundError(f"Checkpoint not found: {ckpt_path}")

    labeler = GraphLabeler.from_checkpoint(str(ckpt_path))
    ds = GraphLabelingDataset(data_path, split=args.split, ratios=tuple(data_cfg.get("ratios", (0.8, 0.1, 0.1))), seed=seed)

    pos_acc, neg_acc = test_graph_labeling_function(labeler, ds.samples, ds.labels)
    preds = labeler.predict(ds.samples)
    per_graph = [hamming_accuracy(p, t) for p, t in zip(preds, ds.labels)]
    mean_acc = sum(per_graph) / max(1, len(per_graph))

    print(f"[EVAL] ckpt={ckpt_path} split={args.split} graphs={len(ds)}")
    print(f"[EVAL] acc_on={pos_acc:.4f} acc_off={neg_acc:.4f} mean_node_acc={mean_acc:.4f}")


if __name__ == "__main__":
    main()
