from .seed import set_seed
from .timer import timer

__all__ = ["set_seed", "timer"]
