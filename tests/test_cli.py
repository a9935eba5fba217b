"""Tests for the CLI."""

import json

from click.testing import CliRunner

from fluq.cli import main
from fluq.commit import CommitReveal, Reveal, make_commitment


class TestCLI:
    def test_version(self):
        r = CliRunner().invoke(main, ["--version"])
        assert r.exit_code == 0
        assert "0.1.0" in r.output

    def test_scan(self):
        r = CliRunner().invoke(main, ["scan"])
        assert r.exit_code == 0
        assert "Platform" in r.output
        assert "crypto" in r.output
        assert "sha256" in r.output

    def test_reward(self):
        r = CliRunner().invoke(main, ["reward", "87", "miner1"])
        assert r.exit_code == 0
        assert "Awarded 5 token(s) to miner 'miner1'" in r.output

    def test_reward_clamps(self):
        r = CliRunner().invoke(main, ["reward", "--", "-10"])
        assert r.exit_code == 0
        assert "Awarded 1 token(s)" in r.output

    def test_reward_rejects_text(self):
        r = CliRunner().invoke(main, ["reward", "lots"])
        assert r.exit_code != 0

    def test_mix(self):
        r = CliRunner().invoke(main, ["mix", "00ff", "hello", "--round-id", "round-1"])
        assert r.exit_code == 0
        out = json.loads(r.output)
        assert len(out["finalHash"]) == 64
        assert sorted(out["shuffledHex"]) == sorted(["00ff", b"hello".hex()])

    def test_score(self):
        r = CliRunner().invoke(main, ["score", bytes(range(256)).hex()])
        assert r.exit_code == 0
        out = json.loads(r.output)
        assert out["score"] == 85
        assert out["category"] == "High Entropy"

    def test_check_repeated(self):
        r = CliRunner().invoke(main, ["check", "41" * 100])
        assert r.exit_code == 0
        out = json.loads(r.output)
        assert out["cheated"] is True
        assert "repeated" in out["reason"]

    def test_round_json(self):
        r = CliRunner().invoke(
            main, ["--log-level", "error", "round", "--round-id", "round-cli", "--timeout", "10", "--json"]
        )
        assert r.exit_code == 0, r.output
        record = json.loads(r.output)
        assert record["round_id"] == "round-cli"
        assert record["awarded"] in (1, 3, 5)
        assert len(record["R_round"]) == 64

    def test_round_pretty(self):
        r = CliRunner().invoke(main, ["--log-level", "error", "round", "--timeout", "10"])
        assert r.exit_code == 0, r.output
        assert "Round record" in r.output

    def test_round_bad_prev_hash(self):
        r = CliRunner().invoke(main, ["round", "--prev-hash", "nothex"])
        assert r.exit_code != 0

    def test_sample_crypto(self):
        r = CliRunner().invoke(main, ["sample", "crypto", "--round-id", "round-7"])
        assert r.exit_code == 0
        out = json.loads(r.output)
        assert out["roundId"] == "round-7"
        assert out["bits"] == 256

    def test_sample_cpu(self):
        r = CliRunner().invoke(main, ["sample", "cpu", "--samples", "64"])
        assert r.exit_code == 0
        out = json.loads(r.output)
        assert out["hashAlgo"] == "sha512"
        assert out["rawSampleCount"] <= 64

    def test_sample_unknown_source(self):
        r = CliRunner().invoke(main, ["sample", "camera"])
        assert r.exit_code != 0

    def test_reward_rejects_nan(self):
        r = CliRunner().invoke(main, ["reward", "nan"])
        assert r.exit_code == 2
        assert "Invalid score" in r.output

    def test_reward_rejects_empty_miner(self):
        r = CliRunner().invoke(main, ["reward", "50", ""])
        assert r.exit_code == 2
        assert "miner_id" in r.output

    def test_round_commit_failure_logs_one_fatal_line(self, monkeypatch):
        def tampered(self):
            e = bytes(64)
            return Reveal(self.node_id, self.round_id, e, self.secret,
                          make_commitment(e, self.secret, self.round_id))

        monkeypatch.setattr(CommitReveal, "reveal", tampered)
        r = CliRunner().invoke(main, ["--log-level", "error", "round", "--timeout", "10"])
        assert r.exit_code == 1
        assert r.output.count("[ERROR]") == 1
        assert "Local commit verification failed; aborting." in r.output
        assert "Fatal" not in r.output
