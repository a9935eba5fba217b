"""Secure mixing of a round's contributions into one seed.

Architecture:
1. Normalize every contribution to bytes
2. Fisher–Yates shuffle driven by a CSPRNG (no contributor picks its slot)
3. Prefix the fixed metadata: salt, round id, previous round hash
4. SHA-256 over the whole pre-image — the round seed

Only the contributions are permuted.  The metadata stays in front, in a
fixed order, so the seed remains bound to the round it was produced for.
"""

from __future__ import annotations

import secrets
from dataclasses import dataclass
from typing import Protocol, Sequence

from fluq.hashing import sha256
from fluq.normalize import is_hex


class UniformSource(Protocol):
    def randrange(self, stop: int) -> int: ...


_SYSTEM_RANDOM = secrets.SystemRandom()


@dataclass(frozen=True)
class RoundSeed:
    """Mixer output, kept for the round record's audit trail."""

    final_hash: str
    shuffled_hex: tuple[str, ...]
    pre_image: bytes

    @property
    def pre_image_hex(self) -> str:
        return self.pre_image.hex()

    def as_dict(self) -> dict:
        return {
            "finalHash": self.final_hash,
            "shuffledHex": list(self.shuffled_hex),
            "preImageHex": self.pre_image_hex,
        }


def to_buffer(value) -> bytes:
    """Bytes pass through, even-length hex parses, any other string is UTF-8."""
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    if isinstance(value, str):
        if is_hex(value):
            return bytes.fromhex(value)
        return value.encode("utf-8")
    raise TypeError(f"cannot mix value of type {type(value).__name__}")


def secure_shuffle(items: Sequence, rng: UniformSource | None = None) -> list:
    """Return a uniformly permuted copy of *items*.

    *rng* must provide an unbiased ``randrange``; the default is the OS
    CSPRNG.  Pass a seeded :class:`random.Random` only in tests.
    """
    rng = rng or _SYSTEM_RANDOM
    out = list(items)
    for i in range(len(out) - 1, 0, -1):
        j = rng.randrange(i + 1)
        out[i], out[j] = out[j], out[i]
    return out


def mix_randomness(
    inputs: list | tuple,
    *,
    salt: bytes | str | None = None,
    round_id: str | int | None = None,
    prev_hash: bytes | str | None = None,
    rng: UniformSource | None = None,
) -> RoundSeed:
    """Shuffle *inputs*, prepend the metadata and hash the result."""
    if not isinstance(inputs, (list, tuple)):
        raise TypeError("inputs must be a list of bytes or strings")

    buffers = [to_buffer(x) for x in inputs]
    salt_buf = to_buffer(salt) if salt else b""
    round_buf = to_buffer(str(round_id)) if round_id is not None else b""
    prev_buf = to_buffer(prev_hash) if prev_hash else b""

    shuffled = secure_shuffle(buffers, rng)
    pre_image = b"".join([salt_buf, round_buf, prev_buf, *shuffled])

    return RoundSeed(
        final_hash=sha256(pre_image),
        shuffled_hex=tuple(b.hex() for b in shuffled),
        pre_image=pre_image,
    )
