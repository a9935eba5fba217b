"""Pointer-motion collector.

An owned instance with an explicit lifecycle: ``start()`` opens capture,
the host UI feeds coordinates through ``record()``, ``stop()`` closes it.
Samples live on the instance, never in module state.
"""

from __future__ import annotations

import hashlib
import platform
import time
from collections import deque
from dataclasses import dataclass

from fluq.collectors.base import Collector


@dataclass(frozen=True)
class PointerSample:
    x: int
    y: int
    t: int  # ms


class NotEnoughSamples(RuntimeError):
    pass


class PointerCollector(Collector):
    name = "mouse"
    description = "Pointer coordinates and timing fed by a host UI"

    def __init__(
        self,
        sample_limit: int = 5000,
        min_delta_ms: int = 0,
        min_samples: int = 16,
        include_fingerprint: bool = True,
    ) -> None:
        self.sample_limit = sample_limit
        self.min_delta_ms = min_delta_ms
        self.min_samples = min_samples
        self.include_fingerprint = include_fingerprint
        self._samples: deque[PointerSample] = deque(maxlen=sample_limit)
        self._running = False

    # ── lifecycle ──

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        if self._running:
            return
        self._samples.clear()
        self._running = True

    def stop(self) -> None:
        self._running = False

    def record(self, x: float, y: float, t: float | None = None) -> bool:
        """Add one pointer event.  Returns False if it was dropped."""
        if not self._running:
            return False
        t_ms = round(time.monotonic() * 1000 if t is None else t)
        if self.min_delta_ms > 0 and self._samples:
            if t_ms - self._samples[-1].t < self.min_delta_ms:
                return False
        self._samples.append(PointerSample(round(x), round(y), t_ms))
        return True

    @property
    def sample_count(self) -> int:
        return len(self._samples)

    def clear(self) -> None:
        self._samples.clear()

    # ── output ──

    def is_available(self) -> bool:
        return self.sample_count >= self.min_samples

    def get_entropy_chunk(self, round_id: str = "", secret: str | None = None) -> str:
        """SHA-256 hex over the captured samples (and optional secret)."""
        if self.sample_count < self.min_samples:
            raise NotEnoughSamples(
                f"need {self.min_samples} pointer samples, have {self.sample_count}"
            )
        h = hashlib.sha256()
        h.update(f"round:{round_id}|".encode())
        if self.include_fingerprint:
            h.update(f"{platform.system()}|{platform.machine()}|".encode())
        for s in self._samples:
            h.update(f"{s.x},{s.y},{s.t};".encode())
        if secret:
            h.update(secret.encode())
        return h.hexdigest()

    def collect(self) -> str:
        return self.get_entropy_chunk()
