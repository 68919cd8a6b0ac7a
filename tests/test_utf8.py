import base64

import pytest

from stterm.utf8 import UTF_INVALID, base64_decode, utf8_decode, utf8_encode, utf8_validate

REPLACEMENT = "\ufffd".encode("utf-8")


@pytest.mark.parametrize("rune", [0x41, 0x7F, 0x80, 0x3B1, 0x7FF, 0x800, 0x20AC, 0xFFFF, 0x10000, 0x1F600, 0x10FFFF])
def test_encode_matches_standard_utf8(rune):
    assert utf8_encode(rune) == chr(rune).encode("utf-8")


@pytest.mark.parametrize("rune", [0x24, 0xA2, 0x939, 0x20AC, 0xD55C, 0x10348])
def test_round_trip(rune):
    encoded = utf8_encode(rune)
    assert utf8_decode(encoded) == (rune, len(encoded))


def test_decode_only_consumes_first_character():
    data = "€abc".encode("utf-8")
    assert utf8_decode(data) == (ord("€"), 3)


@pytest.mark.parametrize("rune", [0xD800, 0xDFFF, 0x110000, -1])
def test_encode_invalid_gives_replacement(rune):
    assert utf8_encode(rune) == REPLACEMENT


def test_decode_empty_is_incomplete():
    assert utf8_decode(b"") == (UTF_INVALID, 0)


def test_decode_incomplete_sequence():
    assert utf8_decode("€".encode("utf-8")[:2]) == (UTF_INVALID, 0)


def test_decode_stray_continuation_byte():
    assert utf8_decode(b"\x80abc") == (UTF_INVALID, 1)


def test_decode_invalid_lead_byte():
    assert utf8_decode(b"\xffabc") == (UTF_INVALID, 1)


def test_decode_broken_sequence_skips_lead():
    assert utf8_decode(b"\xe2A") == (UTF_INVALID, 1)


def test_decode_overlong_is_replaced():
    assert utf8_decode(b"\xc0\x80") == (UTF_INVALID, 2)


def test_decode_encoded_surrogate_is_replaced():
    assert utf8_decode(b"\xed\xa0\x80") == (UTF_INVALID, 3)


def test_validate_in_range_keeps_rune():
    assert utf8_validate(ord("A"), 1) == (ord("A"), 1)


def test_validate_out_of_range_replaces():
    assert utf8_validate(ord("A"), 2) == (UTF_INVALID, len(REPLACEMENT))


@pytest.mark.parametrize("rune", [0x41, 0x3B1, 0x20AC, 0x1F600])
def test_validate_length_matches_encoding(rune):
    assert utf8_validate(rune, 0) == (rune, len(utf8_encode(rune)))


@pytest.mark.parametrize("payload", [b"", b"h", b"he", b"hel", b"hello", b"hello world!", bytes(range(1, 60))])
def test_base64_round_trip(payload):
    assert base64_decode(base64.b64encode(payload).decode("ascii")) == payload


def test_base64_accepts_bytes():
    assert base64_decode(base64.b64encode(b"clipboard")) == b"clipboard"


def test_base64_skips_non_printable():
    encoded = base64.b64encode(b"hello").decode("ascii")
    assert base64_decode(encoded[:4] + "\n\t" + encoded[4:]) == b"hello"


def test_base64_missing_padding():
    encoded = base64.b64encode(b"hello").decode("ascii").rstrip("=")
    assert base64_decode(encoded) == b"hello"


def test_base64_only_newline_is_empty():
    assert base64_decode("\n") == b""


def test_base64_leading_padding_is_empty():
    assert base64_decode("====") == b""