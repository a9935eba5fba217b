"""One randomness round, end to end.

Pipeline:
1. Collect from every collector in parallel (failures → random bytes)
2. Fixed-width hex per source, ordered concat → ``E`` (SHA-512)
3. Commit, reveal, verify; the only step that can abort the round
4. Mix the revealed ``E`` values into the round seed ``R_round``
5. Screen each contribution for cheating (advisory)
6. Score the contributions and turn the score into tokens
7. Emit a :class:`RoundRecord`

The orchestrator keeps nothing between rounds.  Balances and the previous
round's buffers come in as arguments and the updated ledger goes back out
on the :class:`RoundOutcome`.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Mapping, Sequence

from fluq.collectors.base import Collector
from fluq.commit import CommitReveal, Reveal, entropy_digest
from fluq.config import RoundConfig
from fluq.detector import CheatResult, detect_cheating
from fluq.errors import CommitmentMismatch
from fluq.log import RoundLogger
from fluq.mixer import RoundSeed, UniformSource, mix_randomness
from fluq.normalize import Fallback, classify
from fluq.reward import Reward, award_tokens
from fluq.scoring import ScoreBreakdown, compute_uniqueness_score


@dataclass(frozen=True)
class EntropyContribution:
    """One collector's normalized output for one round."""

    source_id: str
    raw: bytes
    fallback: bool = False

    @property
    def hex(self) -> str:
        return self.raw.hex()


@dataclass(frozen=True)
class RoundRecord:
    round_id: str
    prev_root_hash: str
    timestamp: str
    reveals: tuple[dict, ...]
    r_round: str
    awarded: int

    def as_dict(self) -> dict:
        return {
            "round_id": self.round_id,
            "prev_root_hash": self.prev_root_hash,
            "timestamp": self.timestamp,
            "reveals": [dict(r) for r in self.reveals],
            "R_round": self.r_round,
            "awarded": self.awarded,
        }


@dataclass(frozen=True)
class RoundOutcome:
    """The record plus every intermediate the record leaves out."""

    record: RoundRecord
    contributions: tuple[EntropyContribution, ...]
    reveal: Reveal
    seed: RoundSeed
    cheats: Mapping[str, CheatResult]
    score: ScoreBreakdown
    reward: Reward
    balances: Mapping[str, int] = field(default_factory=dict)


def new_round_id() -> str:
    return f"round-{int(time.time() * 1000)}"


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _aligned_history(
    contributions: Sequence[EntropyContribution],
    previous: Mapping[str, bytes],
) -> tuple[list[bytes], list[bytes]]:
    """Current buffers and last round's history, lined up source by source.

    Sources with a previous buffer come first, in collector order, so the
    joined history sits under the same sources in the joined current buffer.
    Sources without history follow and are compared with nothing.
    """
    seen = [c for c in contributions if previous.get(c.source_id)]
    unseen = [c for c in contributions if not previous.get(c.source_id)]
    buffers = [c.raw for c in seen + unseen]
    history = [b"".join(bytes(previous[c.source_id]) for c in seen)] if seen else []
    return buffers, history


class RoundOrchestrator:
    """Sequences collection, commit/reveal, mixing, screening, scoring and reward.

    Usage::

        orch = RoundOrchestrator([PointerCollector(), CryptoCollector()])
        record = orch.run_round()
    """

    def __init__(
        self,
        collectors: Sequence[Collector],
        *,
        config: RoundConfig | None = None,
        logger: RoundLogger | None = None,
        mix_rng: UniformSource | None = None,
    ) -> None:
        self.collectors = list(collectors)
        self.config = config or RoundConfig()
        self.log = logger or RoundLogger()
        self._mix_rng = mix_rng

    # ── collection ──

    def _collect_one(self, collector: Collector) -> EntropyContribution:
        """Collect from a single source.  Never raises."""
        name = getattr(collector, "name", type(collector).__name__)
        collect = getattr(collector, "collect", None)
        if not callable(collect):
            self.log.warn(f"{name}: collect() not found, using fallback random bytes.")
            return EntropyContribution(name, Fallback().to_bytes(), fallback=True)
        try:
            available = collector.is_available() if hasattr(collector, "is_available") else True
            if not available:
                self.log.warn(f"{name}: not available, using fallback random bytes.")
                return EntropyContribution(name, Fallback().to_bytes(), fallback=True)
            variant = classify(collect())
        except Exception as exc:
            self.log.error(f"{name}: collect() raised, using fallback.", repr(exc))
            return EntropyContribution(name, Fallback().to_bytes(), fallback=True)
        if isinstance(variant, Fallback):
            self.log.warn(f"{name}: {variant.reason}, using fallback random bytes.")
            return EntropyContribution(name, variant.to_bytes(), fallback=True)
        return EntropyContribution(name, variant.to_bytes())

    def collect_all(self) -> list[EntropyContribution]:
        """Fan out to every collector on its own thread.

        Each thread is joined against one shared deadline; a collector still
        running when it passes is abandoned and replaced by random bytes.
        The result keeps collector order.
        """
        results: dict[int, EntropyContribution] = {}
        lock = threading.Lock()

        def _worker(i: int, collector: Collector) -> None:
            c = self._collect_one(collector)
            with lock:
                results[i] = c

        threads = []
        for i, collector in enumerate(self.collectors):
            t = threading.Thread(target=_worker, args=(i, collector), daemon=True)
            t.start()
            threads.append(t)

        deadline = time.monotonic() + self.config.collect_timeout
        for t in threads:
            t.join(timeout=max(0.0, deadline - time.monotonic()))

        out = []
        with lock:
            for i, collector in enumerate(self.collectors):
                if i in results:
                    out.append(results[i])
                    continue
                name = getattr(collector, "name", type(collector).__name__)
                self.log.warn(f"{name}: timed out after {self.config.collect_timeout:.1f}s, using fallback.")
                out.append(EntropyContribution(name, Fallback("timeout").to_bytes(), fallback=True))
        return out

    # ── round ──

    def _commit_and_verify(self, round_id: str, e_digest: bytes) -> Reveal:
        cr = CommitReveal(self.config.node_id, round_id, e_digest)
        commitment = cr.commit()
        self.log.info(f"Commit (sha256): {commitment.hex()}")
        try:
            reveal = cr.verify(cr.reveal())
        except CommitmentMismatch:
            self.log.error("Local commit verification failed; aborting.")
            raise
        self.log.info("Commit verified locally.")
        return reveal

    def play_round(
        self,
        round_id: str | None = None,
        *,
        balances: Mapping[str, int] | None = None,
        previous: Mapping[str, bytes] | None = None,
    ) -> RoundOutcome:
        """Run one round and return the record with its intermediates.

        Parameters
        ----------
        round_id:
            Defaults to ``round-<epoch ms>``.
        balances:
            Ledger snapshot to credit; it is not modified.
        previous:
            Last round's raw buffers keyed by source id, for the similarity
            check and the non-repeatability score.

        Raises
        ------
        CommitmentMismatch
            If the reveal does not reproduce the commitment.  No record is
            produced in that case.
        """
        round_id = round_id or new_round_id()
        prev_hash = self.config.prev_round_hash
        previous = previous or {}

        self.log.info("--- Starting round ---")
        self.log.info(f"Round ID: {round_id}")
        self.log.info(f"Prev round hash: {prev_hash}")
        self.log.info(
            "Collecting entropy from collectors ("
            + ", ".join(getattr(c, "name", "?") for c in self.collectors) + ")..."
        )

        contributions = self.collect_all()
        self.log.info(
            "Collected pieces:",
            " | ".join(f"{c.source_id}:{c.hex[:10]}..." for c in contributions),
        )

        e_digest = entropy_digest(c.raw for c in contributions)
        self.log.info(f"E_i (512-bit hex prefix): {e_digest.hex()[:24]}...")

        reveal = self._commit_and_verify(round_id, e_digest)

        seed = mix_randomness(
            [reveal.e_digest],
            round_id=round_id,
            prev_hash=prev_hash,
            rng=self._mix_rng,
        )
        self.log.info(f"R_round (final seed) prefix: {seed.final_hash[:16]}...")

        cheats: dict[str, CheatResult] = {}
        for c in contributions:
            result = detect_cheating(c.raw, previous.get(c.source_id))
            cheats[c.source_id] = result
            if result.cheated:
                self.log.warn(f"Cheating detected in {c.source_id}:", result.reason)
        if not any(cheats.values()):
            self.log.info("No cheating detected.")

        buffers, history = _aligned_history(contributions, previous)
        score = compute_uniqueness_score(
            buffers,
            previous_rounds=history,
            max_bits=self.config.max_bits,
        )
        self.log.info(f"Uniqueness score: {score.score} ({score.category})")

        award = award_tokens(self.config.node_id, balances, score.score)
        self.log.info(f"Tokens awarded this round: {award.awarded}")

        record = RoundRecord(
            round_id=round_id,
            prev_root_hash=prev_hash,
            timestamp=_utc_timestamp(),
            reveals=({"node_id": reveal.node_id, "commit": reveal.commit_hex},),
            r_round=seed.final_hash,
            awarded=award.awarded,
        )
        self.log.info("Round record:", record.as_dict())
        self.log.info("--- Round complete ---")

        return RoundOutcome(
            record=record,
            contributions=tuple(contributions),
            reveal=reveal,
            seed=seed,
            cheats=cheats,
            score=score,
            reward=award.reward,
            balances=award.balances,
        )

    def run_round(self, round_id: str | None = None, **kwargs) -> RoundRecord:
        return self.play_round(round_id, **kwargs).record
