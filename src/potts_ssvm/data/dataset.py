from __future__ import annotations
from typing import List, Optional, Sequence, Tuple
from torch.utils.data import Dataset

from potts_ssvm.graph.schema import GraphSample
from potts_ssvm.data.io import load_bundle, unpack_samples
from potts_ssvm.data.splits import split_samples


class GraphLabelingDataset(Dataset):
    def __init__(self, path: str, split: Optional[str] = None, ratios: Sequence[float] = (0.8, 0.1, 0.1), seed: int = 7):
        payload = load_bundle(path)
        samples, labels = unpack_samples(payload)
        self.meta = payload.get("meta", {})
        if split is not None:
            assert split in ["train", "val", "test"], "split must be train|val|test"
            idx = split_samples(len(samples), ratios=ratios, seed=seed)[split]
            samples = [samples[i] for i in idx]
            labels = [labels[i] for i in idx]
        self.samples: List[GraphSample] = samples
        self.labels: List[List[int]] = labels

    def __len__(self) -> int:
        return len(self.samples)

    def __getitem__(self, idx: int) -> Tuple[GraphSample, List[int]]:
        return self.samples[idx], self.labels[idx]
