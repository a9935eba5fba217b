"""Tests for the cheat detector."""

import os

from fluq.detector import NOT_CHEATED, detect_cheating


def _mixed_1000():
    # 600 x 'A' and 400 bytes cycling through everything else
    others = bytes(b for b in range(256) if b != 0x41)
    return b"A" * 600 + (others * 2)[:400]


class TestRepetition:
    def test_majority_byte_flagged(self):
        r = detect_cheating(_mixed_1000())
        assert r.cheated
        assert "repeated" in r.reason

    def test_exactly_half_not_flagged_as_repetition(self):
        data = b"A" * 128 + bytes(b for b in range(129) if b != 0x41)
        r = detect_cheating(data)
        assert not (r.cheated and "repeated" in r.reason)

    def test_repetition_wins_over_similarity(self):
        data = _mixed_1000()
        r = detect_cheating(data, data)
        assert "repeated" in r.reason


class TestSimilarity:
    def test_identical_to_previous(self):
        data = os.urandom(512)
        r = detect_cheating(data, data)
        assert r.cheated
        assert "similar" in r.reason
        assert "100.00%" in r.reason

    def test_different_previous_passes(self):
        data = bytes(range(256)) * 2
        prev = bytes(reversed(data))
        assert detect_cheating(data, prev) == NOT_CHEATED

    def test_threshold_is_strict(self):
        data = bytes(range(256)) * 4
        prev = bytearray(data)
        # just under 85% of positions equal
        for i in range(0, len(prev), 20):
            prev[i] = (prev[i] + 1) % 256
            prev[i + 1] = (prev[i + 1] + 1) % 256
            prev[i + 2] = (prev[i + 2] + 1) % 256
        assert detect_cheating(data, bytes(prev)) == NOT_CHEATED

    def test_exactly_85_percent_passes(self):
        data = bytes(range(100))
        prev = bytearray(data)
        for i in range(15):
            prev[i] ^= 0xFF
        assert detect_cheating(data, bytes(prev)) == NOT_CHEATED

    def test_just_above_85_percent_flagged(self):
        data = bytes(range(100))
        prev = bytearray(data)
        for i in range(14):
            prev[i] ^= 0xFF
        r = detect_cheating(data, bytes(prev))
        assert r.cheated
        assert "(86.00%)" in r.reason


class TestEntropyFloor:
    def test_low_entropy_flagged(self):
        r = detect_cheating(bytes(range(8)) * 32)
        assert r.cheated
        assert r.reason == "Entropy too low (3.00)"

    def test_random_passes(self):
        r = detect_cheating(bytes(range(256)) * 4)
        assert not r.cheated
        assert r.reason is None
        assert not r

    def test_empty_buffer(self):
        r = detect_cheating(b"")
        assert r.cheated
        assert "Entropy too low" in r.reason

    def test_custom_floor(self):
        assert not detect_cheating(bytes(range(8)) * 32, entropy_floor=2.5).cheated
