from .manager import available_backends, get_adapter, get_proxy, load_adapter

__all__ = ["available_backends", "get_adapter", "get_proxy", "load_adapter"]

# N.B. backend modules (networkx, dataframe_adapter) import their library on
# first use; import them directly or go through ctx.nx / ctx.export().
