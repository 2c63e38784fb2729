from .labeler import GraphLabeler

__all__ = ["GraphLabeler"]
