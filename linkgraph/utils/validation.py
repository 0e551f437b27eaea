from __future__ import annotations

from collections.abc import Callable, Iterable
from itertools import filterfalse
from typing import Any, TypeVar

T = TypeVar("T")


def unique_iter(iterable: Iterable[T], key: Callable[[T], Any] | None = None) -> Iterable[T]:
    # Based on https://iteration-utilities.readthedocs.io/en/latest/generated/unique_everseen.html
    seen: set[Any] = set()
    seen_add = seen.add
    if key is None:
        for element in filterfalse(seen.__contains__, iterable):
            seen_add(element)
            yield element
    else:
        for element in iterable:
            k = key(element)
            if k not in seen:
                seen_add(k)
                yield element


def unique_nodes(context) -> list:
    """Cached nodes of ``context`` in roster order, first occurrence of each id."""
    return list(unique_iter(context.get_node_cache(), key=lambda node: node.get_id()))


def unique_edges(context) -> list:
    """Cached edges of ``context`` in roster order, first occurrence of each id."""
    return list(unique_iter(context.get_edge_cache(), key=lambda edge: edge.get_id()))
