"""Tests for base64 and UTF-8 transcoding."""

import base64

import pytest

from icon_bridge.utils.codec import (
    REPLACEMENT_CHAR,
    b64decode_bytes,
    decode_base64_text,
    encode_basic_auth,
    utf8_decode,
    utf8_encode,
)


class TestBase64:
    """Test the byte-level base64 routines."""

    def test_decode_without_padding(self):
        assert b64decode_bytes("PHN2Zy8") == b"<svg/"

    def test_decode_skips_whitespace(self):
        assert b64decode_bytes("PHN2\nZy8+") == b"<svg/>"

    def test_decode_url_safe_alphabet(self):
        assert b64decode_bytes("-_8") == base64.urlsafe_b64decode("-_8=")


class TestUtf8:
    """Test the lenient UTF-8 routines."""

    def test_encode_matches_stdlib_for_valid_text(self):
        text = "café ✓ \U0001f600"
        assert utf8_encode(text) == text.encode("utf-8")

    def test_encode_replaces_lone_surrogate(self):
        assert utf8_encode("a\ud800b") == b"a\xef\xbf\xbdb"

    def test_decode_valid(self):
        assert utf8_decode("é\U0001f600".encode()) == "é\U0001f600"

    def test_decode_invalid_lead_byte(self):
        assert utf8_decode(b"a\xffb") == f"a{REPLACEMENT_CHAR}b"

    def test_decode_truncated_sequence(self):
        assert utf8_decode(b"a\xe2\x82") == f"a{REPLACEMENT_CHAR}"

    def test_decode_overlong_sequence(self):
        assert utf8_decode(b"\xe0\x80\xaf") == REPLACEMENT_CHAR


class TestDecodeBase64Text:
    """Test the payload decoding used for GitHub bodies."""

    def test_wrapped_payload(self):
        encoded = base64.encodebytes(b"<svg>" * 30).decode()
        assert "\n" in encoded
        assert decode_base64_text(encoded) == "<svg>" * 30

    def test_unpadded_payload_falls_back(self):
        assert decode_base64_text("PHN2Zy8") == "<svg/"

    def test_invalid_utf8_is_replaced(self):
        encoded = base64.b64encode(b"<svg>\xff</svg>").decode()
        assert decode_base64_text(encoded) == f"<svg>{REPLACEMENT_CHAR}</svg>"

    def test_none_decodes_to_empty(self):
        assert decode_base64_text(None) == ""


def test_encode_basic_auth_with_empty_username():
    expected = base64.b64encode(b":secret").decode()
    assert encode_basic_auth("", "secret") == f"Basic {expected}"
