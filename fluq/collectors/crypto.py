"""OS CSPRNG collector."""

from __future__ import annotations

import os
import time

from fluq.collectors.base import Collector


class CryptoCollector(Collector):
    """256 bits straight from the operating system's CSPRNG."""

    name = "crypto"
    description = "OS CSPRNG via os.urandom"

    def __init__(self, n_bytes: int = 32) -> None:
        self.n_bytes = n_bytes

    def collect(self) -> bytes:
        return os.urandom(self.n_bytes)

    def collect_detailed(self, round_id: str | None = None) -> dict:
        buf = self.collect()
        return {
            "source": self.name,
            "roundId": round_id,
            "timestamp": int(time.time() * 1000),
            "entropyHex": buf.hex(),
            "bits": len(buf) * 8,
            "notes": "OS CSPRNG via os.urandom",
            "quality": self._quick_quality(buf, self.name),
        }
