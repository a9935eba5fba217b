"""Tests for hash helpers."""

import importlib.util

import pytest

from fluq import hashing
from fluq.errors import AlgorithmUnavailable


class TestDigests:
    def test_sha256_known_vector(self):
        assert hashing.sha256("abc") == (
            "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"
        )

    def test_sha512_length(self):
        assert len(hashing.sha512(b"x")) == 128

    def test_blake2b_length(self):
        assert len(hashing.blake2b(b"x")) == 128

    def test_lowercase(self):
        h = hashing.sha256(b"\x00")
        assert h == h.lower()

    def test_int_list(self):
        assert hashing.sha256([1, 2, 3]) == hashing.sha256(b"\x01\x02\x03")

    def test_rejects_int(self):
        with pytest.raises(TypeError):
            hashing.sha256(5)


class TestHashAll:
    def test_concatenates(self):
        assert hashing.hash_all([b"ab", "cd"]) == hashing.sha256(b"abcd")

    def test_algorithm_choice(self):
        assert hashing.hash_all([b"ab"], "sha512") == hashing.sha512(b"ab")

    def test_requires_list(self):
        with pytest.raises(TypeError):
            hashing.hash_all(b"ab")

    def test_unknown_algorithm(self):
        with pytest.raises(ValueError):
            hashing.hash_all([b"ab"], "md4")


class TestKeccak:
    def test_unavailable_raises(self, monkeypatch):
        monkeypatch.setattr(importlib.util, "find_spec", lambda name: None)
        with pytest.raises(AlgorithmUnavailable, match="keccak256"):
            hashing.keccak256(b"")
        assert "keccak256" not in hashing.available_algorithms()

    def test_known_vector(self):
        pytest.importorskip("eth_utils")
        pytest.importorskip("Crypto.Hash.keccak")
        assert hashing.keccak256(b"") == (
            "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"
        )
