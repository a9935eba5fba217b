"""Keyboard timing collector.

Reads lines from a text stream and records the arrival time of each one.
The inter-arrival deltas (and the typed content) are folded into a SHA-512
digest together with the round id and process metadata.
"""

from __future__ import annotations

import hashlib
import os
import sys
import time
from dataclasses import dataclass
from typing import TextIO

from fluq.collectors.base import Collector


@dataclass(frozen=True)
class KeystrokeDigest:
    round_id: str
    digest: bytes
    samples_count: int

    @property
    def hex(self) -> str:
        return self.digest.hex()


class KeyboardCollector(Collector):
    name = "keyboard"
    description = "Line arrival timing on an interactive terminal"

    def __init__(
        self,
        round_id: str = "round-0",
        sample_count: int = 64,
        max_duration: float = 15.0,
        stream: TextIO | None = None,
        prompt: bool = False,
    ) -> None:
        self.round_id = round_id
        self.sample_count = sample_count
        self.max_duration = max_duration
        self._stream = stream
        self.prompt = prompt

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdin

    def is_available(self) -> bool:
        if self._stream is not None:
            return True
        try:
            return sys.stdin is not None and bool(sys.stdin.isatty())
        except (AttributeError, ValueError, OSError):
            return False

    def collect(self) -> KeystrokeDigest | None:
        """Digest of the typed lines, or None when nothing was typed."""
        if self.prompt:
            print(
                f"Type and press Enter ({self.sample_count} lines or {self.max_duration:.0f}s).",
                file=sys.stderr,
            )
        samples: list[tuple[int, int, str]] = []
        deadline = time.monotonic() + self.max_duration
        last = time.perf_counter_ns()
        while len(samples) < self.sample_count and time.monotonic() < deadline:
            line = self.stream.readline()
            if not line:
                break
            now = time.perf_counter_ns()
            samples.append((now, now - last, line))
            last = now
        if not samples:
            return None

        h = hashlib.sha512()
        h.update(str(self.round_id).encode())
        h.update(f"\nPID:{os.getpid()}".encode())
        h.update(f"\nUP:{time.monotonic()}".encode())
        for ts, delta, key in samples:
            h.update(f"TS:{ts}".encode())
            h.update(f"DELTA:{delta}".encode())
            h.update(key.encode("utf-8", "replace"))
            h.update(b"|")
        return KeystrokeDigest(self.round_id, h.digest(), len(samples))
