class BackendProxy:
    """Forward ``proxy.<name>(...)`` to ``backend_module.<name>(backend_graph, ...)``."""

    def __init__(self, context, backend_name):
        from .manager import ensure_materialized

        self._backend = ensure_materialized(backend_name, context)

    @property
    def backend(self):
        """The materialized backend graph."""
        return self._backend["graph"]

    def __getattr__(self, name):
        # Try backend-level function (e.g., networkx.shortest_path)
        fn = getattr(self._backend["module"], name, None)
        if callable(fn):

            def wrapped(*args, **kwargs):
                return fn(self._backend["graph"], *args, **kwargs)

            return wrapped

        # Otherwise forward attribute to the backend graph itself
        return getattr(self._backend["graph"], name)
