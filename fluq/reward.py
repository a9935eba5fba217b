"""Token rewards from a uniqueness score.

Brackets (after clamping to 0..100)::

    score > 80        -> 5 tokens  "High Entropy"
    50 <= score <= 80 -> 3 tokens  "Medium Entropy"
    score < 50        -> 1 token   "Low Entropy"

These names are independent of the scorer's categories.

Balances are never mutated.  :func:`award_tokens` hands back a fresh
read-only mapping and the caller decides which snapshot to keep.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from numbers import Real
from types import MappingProxyType
from typing import Mapping

from fluq.errors import InvalidMinerId, InvalidScore


@dataclass(frozen=True)
class Reward:
    score: int
    tokens: int
    category: str
    reason: str

    def as_dict(self) -> dict:
        return {
            "score": self.score,
            "tokens": self.tokens,
            "category": self.category,
            "reason": self.reason,
        }


@dataclass(frozen=True)
class Award:
    balances: Mapping[str, int]
    awarded: int
    reward: Reward


def clamp_score(score) -> int:
    """Round half up and clamp into 0..100.  Rejects non-numbers."""
    if isinstance(score, bool) or not isinstance(score, Real):
        raise InvalidScore("score must be a valid number")
    if math.isnan(score):
        raise InvalidScore("score must be a valid number")
    if math.isinf(score):
        return 100 if score > 0 else 0
    return max(0, min(100, math.floor(score + 0.5)))


def compute_reward(score) -> Reward:
    s = clamp_score(score)
    if s > 80:
        return Reward(s, 5, "High Entropy", "Score above 80: highest reward bracket")
    if s >= 50:
        return Reward(s, 3, "Medium Entropy", "Score between 50 and 80: medium reward bracket")
    return Reward(s, 1, "Low Entropy", "Score below 50: baseline reward")


def award_tokens(
    miner_id: str,
    balances: Mapping[str, int] | None,
    score,
) -> Award:
    """Credit *miner_id* with the reward for *score* in a new ledger snapshot."""
    if not isinstance(miner_id, str) or not miner_id:
        raise InvalidMinerId("miner_id must be a non-empty string")
    if balances is None:
        balances = {}
    if not isinstance(balances, Mapping):
        raise TypeError("balances must be a mapping (or None)")

    reward = compute_reward(score)
    updated = dict(balances)
    updated[miner_id] = int(updated.get(miner_id, 0)) + reward.tokens
    return Award(balances=MappingProxyType(updated), awarded=reward.tokens, reward=reward)
