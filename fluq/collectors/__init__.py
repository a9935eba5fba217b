"""Entropy collector implementations."""

from fluq.collectors.base import CallableCollector, Collector
from fluq.collectors.crypto import CryptoCollector
from fluq.collectors.keyboard import KeyboardCollector
from fluq.collectors.pointer import PointerCollector
from fluq.collectors.timing import CpuNoiseCollector

# Round order: mouse, keyboard, cpu, crypto
ALL_COLLECTORS: list[type[Collector]] = [
    PointerCollector,
    KeyboardCollector,
    CpuNoiseCollector,
    CryptoCollector,
]

__all__ = [
    "ALL_COLLECTORS",
    "CallableCollector",
    "Collector",
    "CpuNoiseCollector",
    "CryptoCollector",
    "KeyboardCollector",
    "PointerCollector",
]
