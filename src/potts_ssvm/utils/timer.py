from __future__ import annotations
import time
from contextlib import contextmanager
from typing import Dict, Iterator, Optional


@contextmanager
def timer(name: str = "block", record: Optional[Dict[str, float]] = None) -> Iterator[None]:
    """Print the wall time of the block; also store it in record[name] if given."""
    t0 = time.perf_counter()
    try:
        yield
    finally:
        dt = time.perf_counter() - t0
        if record is not None:
            record[name] = dt
        print(f"[TIMER] {name}: {dt:.3f}s")
