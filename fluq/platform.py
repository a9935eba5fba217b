"""Which collectors can run here, and on what."""

from __future__ import annotations

import os
import platform as _platform

from fluq.collectors import ALL_COLLECTORS
from fluq.collectors.base import Collector


def default_collectors() -> list[Collector]:
    """One instance of every collector, in round order."""
    return [cls() for cls in ALL_COLLECTORS]


def _probe(collector: Collector) -> bool:
    try:
        return bool(collector.is_available())
    except Exception:
        return False


def detect_available_collectors() -> list[Collector]:
    """Collectors whose availability probe succeeds on this machine."""
    return [c for c in default_collectors() if _probe(c)]


def collector_status() -> list[dict]:
    """Name, description and availability of every collector."""
    return [
        {"name": c.name, "description": c.description, "available": _probe(c)}
        for c in default_collectors()
    ]


def platform_info() -> dict:
    return {
        "system": _platform.system(),
        "machine": _platform.machine(),
        "python": _platform.python_version(),
        "cpus": os.cpu_count() or 1,
    }
