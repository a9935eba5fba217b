"""CPU timing-jitter collector."""

from __future__ import annotations

import hashlib
import time

import numpy as np

from fluq.collectors.base import Collector


class CpuNoiseCollector(Collector):
    """Entropy from instruction-timing jitter.

    Runs a tiny data-dependent busy loop between ``perf_counter_ns`` reads.
    Pipeline state, cache misses, interrupts and frequency scaling perturb
    each delta; the deltas are packed as little-endian u64 and condensed to
    a 512-bit SHA-512 digest.
    """

    name = "cpu"
    description = "Instruction-timing jitter around a busy loop"

    def __init__(self, duration: float = 2.0, sample_target: int = 4096, busy_work: int = 20) -> None:
        self.duration = duration
        self.sample_target = sample_target
        self.busy_work = busy_work

    def _sample(self) -> np.ndarray:
        deltas = np.empty(self.sample_target, dtype=np.int64)
        deadline = time.perf_counter_ns() + int(self.duration * 1e9)
        last = time.perf_counter_ns()
        n = 0
        while n < self.sample_target:
            dummy = 0
            for k in range(self.busy_work):
                dummy = (dummy + k * (k ^ (last & 0xFF))) & 0xFFFFFFFF
            now = time.perf_counter_ns()
            deltas[n] = now - last
            last = now
            n += 1
            if now >= deadline:
                break
        return deltas[:n]

    def collect(self) -> bytes:
        deltas = self._sample()
        return hashlib.sha512(deltas.astype("<u8").tobytes()).digest()

    def collect_detailed(self) -> dict:
        t0 = time.monotonic()
        deltas = self._sample()
        elapsed = time.monotonic() - t0
        digest = hashlib.sha512(deltas.astype("<u8").tobytes()).hexdigest()
        return {
            "E_i": "0x" + digest,
            "rawSampleCount": int(len(deltas)),
            "durationMs": round(elapsed * 1000),
            "rawSamplesPreview": deltas[:200].tolist(),
            "stats": timing_stats(deltas),
            "hashAlgo": "sha512",
        }


def timing_stats(deltas: np.ndarray) -> dict:
    if len(deltas) == 0:
        return {"min": 0, "max": 0, "mean": 0.0, "median": 0.0, "variance": 0.0}
    return {
        "min": int(np.min(deltas)),
        "max": int(np.max(deltas)),
        "mean": float(np.mean(deltas)),
        "median": float(np.median(deltas)),
        "variance": float(np.var(deltas)),
    }
