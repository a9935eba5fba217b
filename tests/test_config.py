"""Tests for round configuration."""

import pytest

from fluq.config import ZERO_HASH, RoundConfig


class TestRoundConfig:
    def test_defaults(self):
        cfg = RoundConfig()
        assert cfg.prev_round_hash == ZERO_HASH
        assert cfg.node_id == "local-node-0"
        assert cfg.max_bits == 2048

    def test_normalises_prev_hash(self):
        assert RoundConfig(prev_round_hash="0x" + "AB" * 32).prev_round_hash == "ab" * 32

    @pytest.mark.parametrize("bad", ["", "abc", "zz" * 32])
    def test_rejects_bad_prev_hash(self, bad):
        with pytest.raises(ValueError):
            RoundConfig(prev_round_hash=bad)

    def test_rejects_bad_timeout(self):
        with pytest.raises(ValueError):
            RoundConfig(collect_timeout=0)

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("PREV_ROUND_HASH", "cd" * 32)
        cfg = RoundConfig.from_env(node_id="n1", collect_timeout=None)
        assert cfg.prev_round_hash == "cd" * 32
        assert cfg.node_id == "n1"
        assert cfg.collect_timeout == 20.0

    def test_overrides_beat_env(self, monkeypatch):
        monkeypatch.setenv("PREV_ROUND_HASH", "cd" * 32)
        assert RoundConfig.from_env(prev_round_hash="ef" * 32).prev_round_hash == "ef" * 32
