"""Commit/reveal binding of a node's entropy to a round.

A node builds ``E`` (a 512-bit digest of everything it collected), draws a
256-bit secret and publishes ``C = SHA-256(E || s || round_id)`` before
disclosing either.  On reveal anyone can recompute ``C``; a mismatch means
``E`` was changed after the fact and the round is aborted.

States::

    BUILT -> COMMITTED -> VERIFIED
                       -> FAILED
"""

from __future__ import annotations

import enum
import hmac
import secrets
from dataclasses import dataclass
from typing import Iterable

from fluq.errors import CommitmentMismatch, CommitStateError
from fluq.hashing import sha256, sha512
from fluq.normalize import fixed_width_hex

SECRET_BYTES = 32
E_DIGEST_BYTES = 64


def entropy_digest(pieces: Iterable[bytes]) -> bytes:
    """``E`` for one node: SHA-512 over the ordered fixed-width hex pieces."""
    joined = "".join(fixed_width_hex(p) for p in pieces)
    return bytes.fromhex(sha512(joined))


def make_commitment(e_digest: bytes, secret: bytes, round_id: str) -> bytes:
    """``SHA-256(E_hex || secret_hex || round_id)`` as raw bytes."""
    return bytes.fromhex(sha256(e_digest.hex() + secret.hex() + round_id))


def verify_commitment(commitment: bytes, e_digest: bytes, secret: bytes, round_id: str) -> bool:
    return hmac.compare_digest(commitment, make_commitment(e_digest, secret, round_id))


@dataclass(frozen=True)
class Reveal:
    """Everything a node discloses once commitments are closed."""

    node_id: str
    round_id: str
    e_digest: bytes
    secret: bytes
    commitment: bytes

    def __post_init__(self) -> None:
        if len(self.e_digest) != E_DIGEST_BYTES:
            raise ValueError(f"E must be {E_DIGEST_BYTES} bytes, got {len(self.e_digest)}")
        if len(self.secret) != SECRET_BYTES:
            raise ValueError(f"secret must be {SECRET_BYTES} bytes, got {len(self.secret)}")
        if not self.is_valid():
            raise CommitmentMismatch(self.node_id, self.round_id)

    def is_valid(self) -> bool:
        return verify_commitment(self.commitment, self.e_digest, self.secret, self.round_id)

    @property
    def commit_hex(self) -> str:
        return self.commitment.hex()

    def as_dict(self) -> dict:
        return {
            "node_id": self.node_id,
            "round_id": self.round_id,
            "E_i": self.e_digest.hex(),
            "s_i": self.secret.hex(),
            "commit": self.commit_hex,
        }


class CommitState(enum.Enum):
    BUILT = "built"
    COMMITTED = "committed"
    VERIFIED = "verified"
    FAILED = "failed"


class CommitReveal:
    """One node's pass through commit and reveal for a single round."""

    def __init__(
        self,
        node_id: str,
        round_id: str,
        e_digest: bytes,
        secret: bytes | None = None,
    ) -> None:
        self.node_id = node_id
        self.round_id = round_id
        self.e_digest = bytes(e_digest)
        self.secret = secret if secret is not None else secrets.token_bytes(SECRET_BYTES)
        self.commitment = make_commitment(self.e_digest, self.secret, round_id)
        self.state = CommitState.BUILT
        self._published: bytes | None = None

    @property
    def published(self) -> bytes | None:
        """The commitment as recorded by :meth:`commit`."""
        return self._published

    def commit(self) -> bytes:
        if self.state is not CommitState.BUILT:
            raise CommitStateError(f"cannot commit from state {self.state.value}")
        self._published = self.commitment
        self.state = CommitState.COMMITTED
        return self._published

    def reveal(self) -> Reveal:
        if self.state is CommitState.BUILT:
            raise CommitStateError("reveal before commit")
        return Reveal(
            node_id=self.node_id,
            round_id=self.round_id,
            e_digest=self.e_digest,
            secret=self.secret,
            commitment=self._published,
        )

    def verify(self, reveal: Reveal) -> Reveal:
        """Recompute the published commitment from *reveal*.

        Moves to ``VERIFIED`` on success.  Any difference moves to ``FAILED``
        and raises :class:`CommitmentMismatch`.
        """
        if self.state is not CommitState.COMMITTED:
            raise CommitStateError(f"cannot verify from state {self.state.value}")
        recomputed = make_commitment(reveal.e_digest, reveal.secret, reveal.round_id)
        if (
            reveal.round_id != self.round_id
            or not hmac.compare_digest(recomputed, self._published)
        ):
            self.state = CommitState.FAILED
            raise CommitmentMismatch(reveal.node_id, reveal.round_id)
        self.state = CommitState.VERIFIED
        return reveal
