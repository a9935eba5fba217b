"""Uniqueness score — a 0–100 quality rating for a round's contributions.

Four sub-scores, each normalised to [0, 1]:

entropy
    Shannon entropy of the concatenated buffer over the 8 bits/byte maximum.
amount
    Total bits contributed over a cap (default 2048).  Past the cap more
    data earns nothing.
variation
    Coefficient of variation of per-32-byte-block entropy, scaled so a CoV
    of 0.5 saturates.  A constant pattern repeated at full entropy scores 0.
non_repeat
    One minus the highest bitwise similarity to any previous round's buffer;
    1.0 when there is no history.

The weighted sum is clamped to [0, 1], scaled by 100 and rounded.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable, Mapping

import numpy as np

from fluq.stats import as_array, bit_similarity, block_entropies, shannon_entropy

DEFAULT_WEIGHTS: dict[str, float] = {
    "entropy": 0.40,
    "non_repeat": 0.25,
    "amount": 0.20,
    "variation": 0.15,
}
DEFAULT_MAX_BITS = 2048
BLOCK_SIZE = 32
COV_SATURATION = 0.5
MIN_BLOCK_MEAN = 1e-4


@dataclass(frozen=True)
class ScoreBreakdown:
    score: int
    category: str
    entropy_norm: float = 0.0
    non_repeat_norm: float = 0.0
    amount_norm: float = 0.0
    variation_norm: float = 0.0
    entropy_per_byte: float = 0.0
    entropy_bits_total: int = 0
    amount_bits: int = 0
    variation_cov: float = 0.0
    weights: Mapping[str, float] = field(default_factory=dict)

    def as_dict(self) -> dict:
        return {
            "score": self.score,
            "category": self.category,
            "breakdown": {
                "entropyPerByte": round(self.entropy_per_byte, 4),
                "entropyBitsTotal": self.entropy_bits_total,
                "entropyNorm": round(self.entropy_norm, 4),
                "amountBits": self.amount_bits,
                "amountNorm": round(self.amount_norm, 4),
                "variationCov": round(self.variation_cov, 4),
                "variationNorm": round(self.variation_norm, 4),
                "nonRepeatNorm": round(self.non_repeat_norm, 4),
                "weights": dict(self.weights),
            },
        }


def categorize(score: int) -> str:
    if score >= 85:
        return "High Entropy"
    if score >= 65:
        return "Moderate-High"
    if score >= 40:
        return "Moderate"
    return "Low"


def _to_bytes(item) -> bytes:
    # EntropyContribution and friends
    raw = getattr(item, "raw", item)
    if isinstance(raw, (bytes, bytearray, memoryview)):
        return bytes(raw)
    if isinstance(raw, str):
        return raw.encode("utf-8")
    if isinstance(raw, np.ndarray):
        return raw.astype(np.uint8).tobytes()
    if isinstance(raw, (list, tuple)):
        return bytes(raw)
    raise TypeError(f"cannot score value of type {type(raw).__name__}")


def _merge_weights(weights: Mapping[str, float] | None) -> dict[str, float]:
    merged = dict(DEFAULT_WEIGHTS)
    if weights:
        unknown = set(weights) - set(DEFAULT_WEIGHTS)
        if unknown:
            raise ValueError(f"unknown weight(s): {', '.join(sorted(unknown))}")
        merged.update({k: float(v) for k, v in weights.items()})
    return merged


def entropy_norm(buf) -> float:
    return min(shannon_entropy(buf) / 8.0, 1.0)


def amount_norm(buf, max_bits: int = DEFAULT_MAX_BITS) -> float:
    return min(len(as_array(buf)) * 8 / max_bits, 1.0)


def variation_cov(buf, block_size: int = BLOCK_SIZE) -> float:
    """Population CoV of block entropies; 0 when the mean is ~0."""
    ents = block_entropies(buf, block_size)
    if len(ents) == 0:
        return 0.0
    mean = float(np.mean(ents))
    if mean <= MIN_BLOCK_MEAN:
        return 0.0
    return float(np.std(ents)) / mean


def non_repeat_norm(buf, previous_rounds: Iterable = ()) -> float:
    sims = [bit_similarity(buf, _to_bytes(prev)) for prev in previous_rounds]
    if not sims:
        return 1.0
    return max(0.0, 1.0 - max(sims))


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def compute_uniqueness_score(
    contributions,
    *,
    previous_rounds: Iterable = (),
    weights: Mapping[str, float] | None = None,
    max_bits: int = DEFAULT_MAX_BITS,
) -> ScoreBreakdown:
    """Score a round's contributions.

    Parameters
    ----------
    contributions:
        One buffer or a sequence of buffers (bytes, text, int lists or
        objects with a ``raw`` attribute).  ``None`` entries are ignored.
    previous_rounds:
        Earlier rounds' buffers for the non-repeatability metric, or a
        single buffer.
    weights:
        Partial overrides of :data:`DEFAULT_WEIGHTS`.  They need not sum to 1.
    max_bits:
        Bit count at which the amount metric saturates.
    """
    merged = _merge_weights(weights)
    if max_bits <= 0:
        raise ValueError("max_bits must be positive")

    if contributions is None:
        items = []
    elif isinstance(contributions, (list, tuple)):
        items = [c for c in contributions if c is not None]
    else:
        items = [contributions]

    if not items:
        return ScoreBreakdown(score=0, category="Low", weights=merged)

    buf = as_array(b"".join(_to_bytes(c) for c in items))

    per_byte = shannon_entropy(buf)
    e_norm = min(per_byte / 8.0, 1.0)
    a_norm = amount_norm(buf, max_bits)
    cov = variation_cov(buf)
    v_norm = min(cov / COV_SATURATION, 1.0)
    if previous_rounds is None:
        history = []
    elif isinstance(previous_rounds, (bytes, bytearray, memoryview, str, np.ndarray)):
        history = [previous_rounds]
    else:
        history = [p for p in previous_rounds if p is not None]
    nr_norm = non_repeat_norm(buf, history)

    combined = (
        e_norm * merged["entropy"]
        + nr_norm * merged["non_repeat"]
        + a_norm * merged["amount"]
        + v_norm * merged["variation"]
    )
    score = _round_half_up(max(0.0, min(1.0, combined)) * 100)

    return ScoreBreakdown(
        score=score,
        category=categorize(score),
        entropy_norm=e_norm,
        non_repeat_norm=nr_norm,
        amount_norm=a_norm,
        variation_norm=v_norm,
        entropy_per_byte=per_byte,
        entropy_bits_total=_round_half_up(per_byte * len(buf)),
        amount_bits=len(buf) * 8,
        variation_cov=cov,
        weights=merged,
    )

