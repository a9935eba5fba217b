"""Exception hierarchy for fluq."""

from __future__ import annotations


class FluqError(Exception):
    """Base class for all fluq errors."""


class InvalidScore(FluqError, TypeError):
    """A reward was requested for something that is not a number."""


class InvalidMinerId(FluqError, TypeError):
    """Ledger updates need a non-empty string contributor id."""


class CommitmentMismatch(FluqError):
    """A reveal does not reproduce its commitment. Fatal to the round."""

    def __init__(self, node_id: str, round_id: str) -> None:
        super().__init__(
            f"commitment verification failed for node {node_id!r} in round {round_id!r}"
        )
        self.node_id = node_id
        self.round_id = round_id


class CommitStateError(FluqError):
    """Commit/reveal steps were called out of order."""


class AlgorithmUnavailable(FluqError):
    """The requested hash algorithm has no backend on this machine."""

    def __init__(self, algorithm: str, hint: str = "") -> None:
        msg = f"hash algorithm {algorithm!r} unavailable"
        if hint:
            msg += f": {hint}"
        super().__init__(msg)
        self.algorithm = algorithm
