"""Heuristic cheat detection over a single contribution.

Three checks, first match wins:

1. repetition — one byte value fills more than half the buffer
2. similarity — too many positions equal to the previous round's buffer
3. entropy floor — Shannon entropy under 4 bits/byte

The checks look at a contribution's raw bytes before mixing, never at the
round seed.  Results are advisory: the round logs them and carries on.
"""

from __future__ import annotations

from dataclasses import dataclass

from fluq.stats import as_array, byte_similarity, max_byte_frequency, shannon_entropy

REPETITION_RATIO = 0.5
SIMILARITY_PERCENT = 85.0
ENTROPY_FLOOR = 4.0


@dataclass(frozen=True)
class CheatResult:
    cheated: bool
    reason: str | None = None

    def __bool__(self) -> bool:
        return self.cheated


NOT_CHEATED = CheatResult(False, None)


def detect_cheating(
    current,
    previous=None,
    *,
    repetition_ratio: float = REPETITION_RATIO,
    similarity_percent: float = SIMILARITY_PERCENT,
    entropy_floor: float = ENTROPY_FLOOR,
) -> CheatResult:
    """Screen *current* (optionally against *previous*) for manipulation."""
    data = as_array(current)

    if max_byte_frequency(data) > len(data) * repetition_ratio:
        return CheatResult(True, "Too many repeated values (low randomness)")

    if previous is not None:
        similarity = byte_similarity(data, previous)
        if similarity > similarity_percent:
            return CheatResult(
                True,
                f"Randomness is suspiciously similar to previous round ({similarity:.2f}%)",
            )

    entropy = shannon_entropy(data)
    if entropy < entropy_floor:
        return CheatResult(True, f"Entropy too low ({entropy:.2f})")

    return NOT_CHEATED

