from __future__ import annotations

import importlib
import logging
from importlib import util
from typing import TYPE_CHECKING

from ._base import GraphAdapter
from ._proxy import BackendProxy

if TYPE_CHECKING:
    from ..core.context import Context

__all__ = [
    "available_backends",
    "ensure_materialized",
    "get_adapter",
    "get_proxy",
    "load_adapter",
]

logger = logging.getLogger(__name__)

# name -> (import name, submodule, adapter class, converter function)
_BACKENDS = {
    "networkx": ("networkx", ".networkx", "NetworkXAdapter", "to_backend"),
}


def _is_installed(modname: str) -> bool:
    return util.find_spec(modname) is not None


def available_backends() -> dict:
    return {name: _is_installed(mod) for name, (mod, _, _, _) in _BACKENDS.items()}


def _backend_module(name: str):
    if name not in _BACKENDS:
        raise ValueError(f"No adapter registered for '{name}'")
    modname, submod, _, _ = _BACKENDS[name]
    if not _is_installed(modname):
        raise ModuleNotFoundError(
            f"Optional backend '{name}' is not installed. "
            f"Install with `pip install linkgraph[{name}]`."
        )
    return importlib.import_module(__package__ + submod)


def load_adapter(name: str, *args, **kwargs) -> GraphAdapter:
    """Instantiate the adapter class registered under ``name``."""
    _, _, cls, _ = _BACKENDS.get(name.lower(), (None, None, None, None))
    if cls is None:
        raise ValueError(f"No adapter registered for '{name}'")
    return getattr(_backend_module(name.lower()), cls)(*args, **kwargs)


def get_adapter(name: str) -> GraphAdapter:
    """Return a *new* adapter instance of the requested backend."""
    return load_adapter(name)


def get_proxy(backend_name: str, context: "Context") -> BackendProxy:
    """Return a lazy proxy so users can write `ctx.nx.<algo>()`."""
    if backend_name not in _BACKENDS:
        raise ValueError(f"No backend '{backend_name}' registered")
    return BackendProxy(context, backend_name)


def ensure_materialized(backend_name: str, context: "Context") -> dict:
    """
    Convert (or re-convert) the cached graph of *context* into the requested
    backend object and cache the result on the context's private state object.
    Returns the cache entry: {"module": nx, "graph": nx.MultiDiGraph, "version": int}
    """
    cache = context._state._backend_cache
    entry = cache.get(backend_name)

    if entry is None or context._state.dirty_since(entry["version"]):
        modname, _, _, converter = _BACKENDS[backend_name]
        adapter_module = _backend_module(backend_name)
        backend_module = importlib.import_module(modname)

        converted = getattr(adapter_module, converter)(context)

        entry = cache[backend_name] = {
            "module": backend_module,
            "graph": converted,
            "version": context._state.version,
        }
        logger.debug("materialized %s backend at version %d", backend_name, entry["version"])

    return entry
