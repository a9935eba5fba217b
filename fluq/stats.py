"""Byte statistics shared by the detector and the scorer."""

from __future__ import annotations

import numpy as np

# popcount for every byte value
POPCOUNT = np.unpackbits(np.arange(256, dtype=np.uint8)[:, None], axis=1).sum(axis=1)


def as_array(data: bytes | bytearray | memoryview | np.ndarray) -> np.ndarray:
    """View *data* as a flat uint8 array."""
    if isinstance(data, np.ndarray):
        return data.astype(np.uint8).flatten()
    return np.frombuffer(bytes(data), dtype=np.uint8)


def byte_counts(data) -> np.ndarray:
    """Frequency of each of the 256 byte values."""
    return np.bincount(as_array(data), minlength=256)


def shannon_entropy(data) -> float:
    """Shannon entropy in bits/byte (0..8). Empty input has entropy 0."""
    arr = as_array(data)
    if len(arr) == 0:
        return 0.0
    counts = byte_counts(arr)
    probs = counts[counts > 0] / len(arr)
    return float(-np.sum(probs * np.log2(probs)))


def max_byte_frequency(data) -> int:
    """Count of the most common byte value."""
    arr = as_array(data)
    if len(arr) == 0:
        return 0
    return int(byte_counts(arr).max())


def byte_similarity(a, b) -> float:
    """Percentage of positions holding the same byte, over the shorter buffer."""
    x, y = as_array(a), as_array(b)
    n = min(len(x), len(y))
    if n == 0:
        return 0.0
    return float(np.count_nonzero(x[:n] == y[:n]) * 100 / n)


def bit_similarity(a, b) -> float:
    """``1 - hamming / total_bits`` over the shorter buffer (0..1).

    1.0 means identical, 0.0 means every compared bit differs.
    Returns 0.0 when either buffer is empty.
    """
    x, y = as_array(a), as_array(b)
    n = min(len(x), len(y))
    if n == 0:
        return 0.0
    diff_bits = int(POPCOUNT[np.bitwise_xor(x[:n], y[:n])].sum())
    return 1.0 - diff_bits / (n * 8)


def block_entropies(data, block_size: int = 32) -> np.ndarray:
    """Shannon entropy of each consecutive *block_size* slice.

    The final block may be shorter than *block_size*.
    """
    arr = as_array(data)
    return np.array(
        [shannon_entropy(arr[i: i + block_size]) for i in range(0, len(arr), block_size)],
        dtype=float,
    )
