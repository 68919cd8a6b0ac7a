"""UTF-8 decoding and encoding with terminal semantics, and lenient base64."""

from itertools import islice

__all__ = ["UTF_INVALID", "UTF_SIZ", "utf8_decode", "utf8_encode", "utf8_validate", "base64_decode"]

UTF_INVALID = 0xFFFD
UTF_SIZ = 4

_UTF_BYTE = (0x80, 0x00, 0xC0, 0xE0, 0xF0)
_UTF_MASK = (0xC0, 0x80, 0xE0, 0xF0, 0xF8)
_UTF_MIN = (0, 0, 0x80, 0x800, 0x10000)
_UTF_MAX = (0x10FFFF, 0x7F, 0x7FF, 0xFFFF, 0x10FFFF)


def _decode_byte(byte: int) -> tuple[int, int]:
    """Return the payload bits of a byte and its type (sequence length, 0 = continuation)."""
    for kind, (mask, lead) in enumerate(zip(_UTF_MASK, _UTF_BYTE)):
        if byte & mask == lead:
            return byte & ~mask & 0xFF, kind
    return 0, len(_UTF_MASK)


def utf8_validate(rune: int, i: int) -> tuple[int, int]:
    """Check a rune against the range for an i-byte sequence.

    Returns the rune (replaced by U+FFFD if out of range or a surrogate)
    and the number of bytes needed to encode it.
    """
    if not _UTF_MIN[i] <= rune <= _UTF_MAX[i] or 0xD800 <= rune <= 0xDFFF:
        rune = UTF_INVALID
    length = next(n for n in range(1, UTF_SIZ + 1) if rune <= _UTF_MAX[n])
    return rune, length


def utf8_decode(data: bytes) -> tuple[int, int]:
    """Decode one character from the start of data.

    Returns (rune, consumed). A consumed count of 0 means the sequence is
    incomplete; invalid input yields U+FFFD with the bytes to skip.
    """
    if not data:
        return UTF_INVALID, 0
    decoded, length = _decode_byte(data[0])
    if not 1 <= length <= UTF_SIZ:
        return UTF_INVALID, 1
    consumed = 1
    for byte in islice(data, 1, length):
        bits, kind = _decode_byte(byte)
        decoded = (decoded << 6) | bits
        if kind != 0:
            return UTF_INVALID, consumed
        consumed += 1
    if consumed < length:
        return UTF_INVALID, 0
    rune, _ = utf8_validate(decoded, length)
    return rune, length


def utf8_encode(rune: int) -> bytes:
    """Encode a rune as UTF-8; invalid runes become U+FFFD."""
    rune, length = utf8_validate(rune, 0)
    out = bytearray(length)
    for pos in range(length - 1, 0, -1):
        out[pos] = _UTF_BYTE[0] | (rune & ~_UTF_MASK[0] & 0xFF)
        rune >>= 6
    out[0] = (_UTF_BYTE[length] | (rune & ~_UTF_MASK[length])) & 0xFF
    return bytes(out)


_PAD = -1


def _base64_value(byte: int) -> int:
    if ord("A") <= byte <= ord("Z"):
        return byte - ord("A")
    if ord("a") <= byte <= ord("z"):
        return byte - ord("a") + 26
    if ord("0") <= byte <= ord("9"):
        return byte - ord("0") + 52
    if byte == ord("+"):
        return 62
    if byte == ord("/"):
        return 63
    if byte == ord("="):
        return _PAD
    return 0


def base64_decode(src: str | bytes) -> bytes:
    """Decode base64 leniently: non-printable bytes are skipped, missing
    padding is assumed and unknown characters count as zero."""
    data = src.encode("utf-8") if isinstance(src, str) else bytes(src)
    printable = iter([b for b in data if 0x20 <= b <= 0x7E])
    out = bytearray()
    while True:
        group = list(islice(printable, 4))
        if not group:
            break
        group += [ord("=")] * (4 - len(group))
        a, b, c, d = (_base64_value(ch) for ch in group)
        if a == _PAD or b == _PAD:
            break
        out.append(((a << 2) | ((b & 0x30) >> 4)) & 0xFF)
        if c == _PAD:
            break
        out.append((((b & 0x0F) << 4) | ((c & 0x3C) >> 2)) & 0xFF)
        if d == _PAD:
            break
        out.append((((c & 0x03) << 6) | d) & 0xFF)
    return bytes(out)