from __future__ import annotations
import random

import numpy as np
import torch


def set_seed(seed: int = 7) -> None:
    random.seed(seed)
    np.random.seed(seed)
    torch.manual_seed(seed)
