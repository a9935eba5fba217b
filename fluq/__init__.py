"""
fluq: commit, mix, screen and score randomness from independent sources.

Each round collects entropy from several collectors, binds it to the round
with a commitment, shuffles and hashes it into one seed, screens the raw
contributions for manipulation and pays out tokens for their quality.
"""

__version__ = "0.1.0"

from fluq.collectors.base import Collector
from fluq.commit import CommitReveal, Reveal
from fluq.config import RoundConfig
from fluq.detector import CheatResult, detect_cheating
from fluq.errors import CommitmentMismatch, FluqError
from fluq.mixer import RoundSeed, mix_randomness
from fluq.reward import award_tokens, compute_reward
from fluq.round import EntropyContribution, RoundOrchestrator, RoundRecord
from fluq.scoring import ScoreBreakdown, compute_uniqueness_score

__all__ = [
    "CheatResult",
    "Collector",
    "CommitReveal",
    "CommitmentMismatch",
    "EntropyContribution",
    "FluqError",
    "Reveal",
    "RoundConfig",
    "RoundOrchestrator",
    "RoundRecord",
    "RoundSeed",
    "ScoreBreakdown",
    "__version__",
    "award_tokens",
    "compute_reward",
    "compute_uniqueness_score",
    "detect_cheating",
    "mix_randomness",
]
