class LinkGraphError(Exception):
    """Base class for every error raised by linkgraph."""


class BorrowError(LinkGraphError, RuntimeError):
    """Raised when a scoped borrow conflicts with one that is still outstanding.

    This always indicates a logic defect in the caller (two writers, or a writer
    while readers are alive) and is never retried.
    """


class IdExhaustedError(LinkGraphError, OverflowError):
    """Raised when a context would issue an identifier beyond its ``id_limit``."""
