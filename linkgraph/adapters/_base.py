from abc import ABC, abstractmethod
from typing import Any


class GraphAdapter(ABC):
    @abstractmethod
    def export(self, context, **kwargs) -> Any:
        """Convert the cached graph of ``context`` into a backend object."""
