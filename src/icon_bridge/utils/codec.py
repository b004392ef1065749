"""Base64 and UTF-8 transcoding for provider payloads.

Provider APIs hand back file bodies as base64 (GitHub) and credentials must
be sent base64-encoded (Azure Basic auth). The stdlib codecs are used first;
the byte-level routines below take over for input they reject, such as
base64 without padding or bodies that are not valid UTF-8.
"""

import base64
import binascii
import re

_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"
_DECODE_TABLE = {char: index for index, char in enumerate(_ALPHABET)}
# URL-safe alphabet shares the table
_DECODE_TABLE.update({"-": 62, "_": 63})

_WHITESPACE_RE = re.compile(r"\s+")

REPLACEMENT_CHAR = "\ufffd"
_REPLACEMENT_BYTES = b"\xef\xbf\xbd"


def b64decode_bytes(value: str) -> bytes:
    """Decode base64 leniently.

    Characters outside the alphabet (whitespace, padding) are skipped and a
    trailing partial group is decoded as far as it carries whole bytes.
    """
    sextets = [_DECODE_TABLE[char] for char in value if char in _DECODE_TABLE]
    out = bytearray()
    for offset in range(0, len(sextets), 4):
        group = sextets[offset : offset + 4]
        if len(group) < 2:
            break
        bits = 0
        for sextet in group:
            bits = (bits << 6) | sextet
        bits <<= 6 * (4 - len(group))
        byte_count = len(group) - 1
        out.extend(bits.to_bytes(3, "big")[:byte_count])
    return bytes(out)


def utf8_encode(text: str) -> bytes:
    """Encode text as UTF-8, replacing lone surrogates with U+FFFD."""
    out = bytearray()
    for char in text:
        code = ord(char)
        if code < 0x80:
            out.append(code)
        elif code < 0x800:
            out.extend((0xC0 | (code >> 6), 0x80 | (code & 0x3F)))
        elif 0xD800 <= code <= 0xDFFF:
            out.extend(_REPLACEMENT_BYTES)
        elif code < 0x10000:
            out.extend(
                (
                    0xE0 | (code >> 12),
                    0x80 | ((code >> 6) & 0x3F),
                    0x80 | (code & 0x3F),
                )
            )
        else:
            out.extend(
                (
                    0xF0 | (code >> 18),
                    0x80 | ((code >> 12) & 0x3F),
                    0x80 | ((code >> 6) & 0x3F),
                    0x80 | (code & 0x3F),
                )
            )
    return bytes(out)


def _sequence_length(lead: int) -> tuple[int, int]:
    """Return (continuation byte count, payload bits) for a lead byte."""
    if 0xC2 <= lead <= 0xDF:
        return 1, lead & 0x1F
    if 0xE0 <= lead <= 0xEF:
        return 2, lead & 0x0F
    if 0xF0 <= lead <= 0xF4:
        return 3, lead & 0x07
    return 0, -1


def utf8_decode(data: bytes) -> str:
    """Decode UTF-8, substituting U+FFFD for each malformed sequence."""
    chars: list[str] = []
    index = 0
    length = len(data)
    while index < length:
        lead = data[index]
        if lead < 0x80:
            chars.append(chr(lead))
            index += 1
            continue

        needed, code = _sequence_length(lead)
        if code < 0:
            chars.append(REPLACEMENT_CHAR)
            index += 1
            continue

        consumed = 1
        while consumed <= needed and index + consumed < length:
            byte = data[index + consumed]
            if byte & 0xC0 != 0x80:
                break
            code = (code << 6) | (byte & 0x3F)
            consumed += 1

        overlong = (needed == 2 and code < 0x800) or (
            needed == 3 and code < 0x10000
        )
        if (
            consumed != needed + 1
            or overlong
            or 0xD800 <= code <= 0xDFFF
            or code > 0x10FFFF
        ):
            chars.append(REPLACEMENT_CHAR)
            index += max(consumed, 1)
            continue

        chars.append(chr(code))
        index += consumed
    return "".join(chars)


def decode_base64_text(value: str) -> str:
    """Decode a (possibly line-wrapped) base64 payload to text.

    Args:
        value: Base64 string as returned by the GitHub contents/blob APIs

    Returns:
        Decoded UTF-8 text

    """
    compact = _WHITESPACE_RE.sub("", value or "")
    try:
        data = base64.b64decode(compact, validate=True)
    except binascii.Error:
        data = b64decode_bytes(compact)

    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        return utf8_decode(data)


def encode_basic_auth(username: str, password: str) -> str:
    """Return the value of an HTTP Basic ``Authorization`` header."""
    raw = f"{username}:{password}"
    try:
        payload = raw.encode("utf-8")
    except UnicodeEncodeError:
        payload = utf8_encode(raw)
    return f"Basic {base64.b64encode(payload).decode('ascii')}"
