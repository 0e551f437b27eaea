from .validation import unique_iter

__all__ = ["unique_iter"]
