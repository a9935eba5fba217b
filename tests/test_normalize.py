"""Tests for buffer normalization."""

from fluq.normalize import (
    BytesValue,
    Fallback,
    HexText,
    classify,
    fixed_width_hex,
    is_hex,
    normalize,
)


class _WithHex:
    def __init__(self, hex):
        self.hex = hex


class TestClassify:
    def test_bytes(self):
        assert classify(b"\x01\x02") == BytesValue(b"\x01\x02")

    def test_bytearray(self):
        assert normalize(bytearray(b"xy")) == b"xy"

    def test_hex_text(self):
        assert isinstance(classify("deadbeef"), HexText)
        assert normalize("deadbeef") == b"\xde\xad\xbe\xef"

    def test_hex_prefix_and_case(self):
        assert normalize("0xDEADBEEF") == b"\xde\xad\xbe\xef"

    def test_odd_length_hex_is_text(self):
        assert normalize("abc") == b"abc"

    def test_plain_text(self):
        assert normalize("hello world") == b"hello world"

    def test_trailing_newline_is_text(self):
        assert normalize("abc\n") == b"abc\n"

    def test_object_with_hex_field(self):
        assert normalize(_WithHex("00ff")) == b"\x00\xff"

    def test_dict_with_hex_key(self):
        assert normalize({"hex": "0x0a0b"}) == b"\x0a\x0b"

    def test_invalid_hex_field(self):
        assert isinstance(classify({"hex": "zz"}), Fallback)

    def test_none_falls_back(self):
        v = classify(None)
        assert isinstance(v, Fallback)
        assert len(v.to_bytes()) == 32

    def test_empty_falls_back(self):
        assert isinstance(classify(b""), Fallback)
        assert isinstance(classify(""), Fallback)

    def test_unsupported_type_falls_back(self):
        assert len(normalize(42)) == 32
        assert len(normalize(3.5)) == 32

    def test_fallback_is_random(self):
        assert normalize(None) != normalize(None)


class TestHelpers:
    def test_is_hex(self):
        assert is_hex("00ff")
        assert not is_hex("0ff")
        assert not is_hex("")
        assert not is_hex("gg")

    def test_fixed_width_pads(self):
        assert fixed_width_hex(b"\x01") == "01" + "0" * 62

    def test_fixed_width_truncates(self):
        out = fixed_width_hex(bytes(range(64)))
        assert len(out) == 64
        assert out == bytes(range(32)).hex()
