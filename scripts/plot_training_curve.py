from __future__ import annotations

import argparse
import json
from pathlib import Path

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--history", type=str, required=True, help="history.json written by train.py")
    ap.add_argument("--out", type=str, default=None, help="Output image (default: next to history)")
    args = ap.parse_args()

    hist_path = Path(args.history)
    with open(hist_path, "r", encoding="utf-8") as f:
        history = json.load(f)
    if not history:
        raise ValueError(f"{hist_path} has no records")

    ep = [h["epoch"] for h in history]
    fig, ax1 = plt.subplots(figsize=(7, 4))
    ax1.plot(ep, [h["objective"] for h in history], label="objective", color="tab:blue")
    ax1.set_xlabel("epoch")
    ax1.set_ylabel("0.5|w|^2 + C*risk")
    ax2 = ax1.twinx()
    ax2.plot(ep, [h["risk"] for h in history], label="risk", color="tab:orange")
    ax2.set_ylabel("risk")
    fig.legend(loc="upper right")
    fig.tight_layout()

    out = Path(args.out) if args.out else hist_path.with_suffix(".png")
    fig.savefig(out, dpi=150)
    print(f"[OK] wrote {out}")


if __name__ == "__main__":
    main()
