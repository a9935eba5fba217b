"""Round configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass

from fluq.scoring import DEFAULT_MAX_BITS

ZERO_HASH = "0" * 64


@dataclass
class RoundConfig:
    prev_round_hash: str = ZERO_HASH
    node_id: str = "local-node-0"
    collect_timeout: float = 20.0
    max_bits: int = DEFAULT_MAX_BITS

    def __post_init__(self) -> None:
        h = self.prev_round_hash.lower()
        if h.startswith("0x"):
            h = h[2:]
        if len(h) != 64 or any(c not in "0123456789abcdef" for c in h):
            raise ValueError("prev_round_hash must be 64 hex characters")
        self.prev_round_hash = h
        if self.collect_timeout <= 0:
            raise ValueError("collect_timeout must be positive")

    @classmethod
    def from_env(cls, **overrides) -> RoundConfig:
        """Defaults, then ``PREV_ROUND_HASH``, then *overrides*."""
        values: dict = {}
        if os.environ.get("PREV_ROUND_HASH"):
            values["prev_round_hash"] = os.environ["PREV_ROUND_HASH"]
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
