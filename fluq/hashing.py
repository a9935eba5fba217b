"""Hash helpers.  All digests are returned as lowercase hex.

Every algorithm is a :class:`HashAlgorithm` strategy that can report whether
it has a backend.  Asking for one that does not raises
:class:`~fluq.errors.AlgorithmUnavailable` instead of quietly substituting a
different hash.
"""

from __future__ import annotations

import hashlib
import importlib.util
from abc import ABC, abstractmethod
from typing import Iterable

from fluq.errors import AlgorithmUnavailable


def to_bytes(data: bytes | bytearray | memoryview | str | Iterable[int]) -> bytes:
    """Text is hashed as UTF-8, byte-likes as-is, int sequences as bytes."""
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    if isinstance(data, str):
        return data.encode("utf-8")
    if isinstance(data, int):
        raise TypeError("unsupported input type for hashing: int")
    try:
        return bytes(data)
    except (TypeError, ValueError) as exc:
        raise TypeError(f"unsupported input type for hashing: {type(data).__name__}") from exc


class HashAlgorithm(ABC):
    name: str = "unnamed"
    digest_bits: int = 0

    def is_available(self) -> bool:
        return True

    @abstractmethod
    def _digest(self, data: bytes) -> bytes:
        ...

    def digest(self, data) -> bytes:
        if not self.is_available():
            raise AlgorithmUnavailable(self.name, self.install_hint())
        return self._digest(to_bytes(data))

    def hexdigest(self, data) -> str:
        return self.digest(data).hex()

    def install_hint(self) -> str:
        return ""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"


class _Hashlib(HashAlgorithm):
    """Algorithms that ship with every CPython build."""

    def __init__(self, name: str, constructor, digest_bits: int) -> None:
        self.name = name
        self._constructor = constructor
        self.digest_bits = digest_bits

    def _digest(self, data: bytes) -> bytes:
        return self._constructor(data).digest()


class Keccak256(HashAlgorithm):
    """Ethereum-flavoured Keccak-256 (not NIST SHA3-256).

    Backed by ``eth-utils``; install with ``pip install fluq[keccak]``.
    """

    name = "keccak256"
    digest_bits = 256

    def is_available(self) -> bool:
        return importlib.util.find_spec("eth_utils") is not None

    def install_hint(self) -> str:
        return "install eth-utils (pip install 'fluq[keccak]')"

    def _digest(self, data: bytes) -> bytes:
        from eth_utils import keccak

        return keccak(data)


ALGORITHMS: dict[str, HashAlgorithm] = {
    "sha256": _Hashlib("sha256", hashlib.sha256, 256),
    "sha512": _Hashlib("sha512", hashlib.sha512, 512),
    "blake2b": _Hashlib("blake2b", hashlib.blake2b, 512),
    "keccak256": Keccak256(),
}


def get_algorithm(name: str) -> HashAlgorithm:
    try:
        return ALGORITHMS[name.lower()]
    except KeyError:
        raise ValueError(f"unsupported algorithm: {name}") from None


def available_algorithms() -> list[str]:
    return [name for name, algo in ALGORITHMS.items() if algo.is_available()]


def sha256(data) -> str:
    return ALGORITHMS["sha256"].hexdigest(data)


def sha512(data) -> str:
    return ALGORITHMS["sha512"].hexdigest(data)


def blake2b(data) -> str:
    return ALGORITHMS["blake2b"].hexdigest(data)


def keccak256(data) -> str:
    return ALGORITHMS["keccak256"].hexdigest(data)


def hash_all(parts: list | tuple, algorithm: str = "sha256") -> str:
    """Hash the concatenation of *parts* with *algorithm*."""
    if not isinstance(parts, (list, tuple)):
        raise TypeError("hash_all expects a list of inputs")
    joined = b"".join(to_bytes(p) for p in parts)
    return get_algorithm(algorithm).hexdigest(joined)
