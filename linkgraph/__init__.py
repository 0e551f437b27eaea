# linkgraph/__init__.py
"""linkgraph: single import, full API."""
from __future__ import annotations

import logging
from importlib import import_module
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _pkg_version
from typing import Any

from .core import (
    BorrowError,
    Context,
    Edge,
    EdgePos,
    EdgeType,
    IdExhaustedError,
    LinkGraphError,
    Node,
    WeightedEdge,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

# Lazily exposed submodules (imported on first attribute access)
_lazy_submodules = {
    "adapters": "linkgraph.adapters",
    "utils": "linkgraph.utils",
    "networkx": "linkgraph.adapters.networkx",
    "dataframe": "linkgraph.adapters.dataframe_adapter",
    "matrix": "linkgraph.core.matrix",
}

# Curated top-level symbols (lazy). name -> (module, attribute)
_lazy_symbols: dict[str, tuple[str, str]] = {
    # NetworkX adapter (optional dependency)
    "to_nx": ("linkgraph.adapters.networkx", "to_nx"),
    # Polars tables
    "to_dataframes": ("linkgraph.adapters.dataframe_adapter", "to_dataframes"),
    # SciPy sparse views
    "MatrixCache": ("linkgraph.core.matrix", "MatrixCache"),
}

__all__ = sorted(
    set(list(_lazy_submodules) + list(_lazy_symbols))
    | {
        "BorrowError",
        "Context",
        "Edge",
        "EdgePos",
        "EdgeType",
        "IdExhaustedError",
        "LinkGraphError",
        "Node",
        "WeightedEdge",
    }
)


def __getattr__(name: str) -> Any:  # PEP 562: lazy attribute resolution
    if name in _lazy_submodules:
        return import_module(_lazy_submodules[name])
    if name in _lazy_symbols:
        mod, attr = _lazy_symbols[name]
        return getattr(import_module(mod), attr)
    raise AttributeError(name)


def __dir__() -> list[str]:
    return sorted(list(globals().keys()) + list(__all__))


try:
    __version__ = _pkg_version("linkgraph")
except PackageNotFoundError:
    __version__ = "0.0.0"
