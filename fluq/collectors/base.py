"""Abstract base class for all entropy collectors."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable

import numpy as np

from fluq.stats import as_array, shannon_entropy


class Collector(ABC):
    """A source of raw randomness for one round.

    ``collect`` may return raw bytes, a hex string or an object carrying a
    ``hex`` field.  Anything else (or an exception) is treated as "no data"
    by the round, which substitutes fresh random bytes.
    """

    name: str = "unnamed"
    description: str = ""

    def is_available(self) -> bool:
        """Return True if the collector can operate on this machine."""
        return True

    @abstractmethod
    def collect(self) -> Any:
        ...

    # ── helpers available to subclasses ──

    @staticmethod
    def _quick_quality(data: bytes, label: str = "") -> dict:
        """Lightweight quality metrics for a collected buffer."""
        arr = as_array(data)
        return {
            "label": label,
            "samples": len(arr),
            "unique_values": int(len(np.unique(arr))),
            "shannon_entropy": round(shannon_entropy(arr), 4),
        }

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"


class CallableCollector(Collector):
    """Adapt a plain function into a collector."""

    def __init__(self, name: str, fn: Callable[[], Any], description: str = "") -> None:
        self.name = name
        self.description = description or f"callable {getattr(fn, '__name__', 'collector')}"
        self._fn = fn

    def collect(self) -> Any:
        return self._fn()
