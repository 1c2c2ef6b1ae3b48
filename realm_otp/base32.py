# realm_otp/base32.py
# RFC 4648 base32 without padding, as stored for TOTP secrets.
import base64

ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"
_LOOKUP = {char: value for value, char in enumerate(ALPHABET)}
# ASCII lowercase only; str.upper() would map e.g. "ß" to "SS"
_LOOKUP.update({char.lower(): value for char, value in list(_LOOKUP.items()) if char.isalpha()})


class InvalidEncoding(ValueError):
    """Raised when a base32 string contains a character outside A-Z / 2-7."""

    def __init__(self, char: str, index: int):
        super().__init__(f"Invalid base32 character {char!r} at position {index}")
        self.char = char
        self.index = index


def encode(data: bytes) -> str:
    """Encode bytes to base32, padding stripped."""
    return base64.b32encode(bytes(data)).decode("ascii").rstrip("=")


def decode(text: str) -> bytes:
    """Decode a base32 string of any length.

    Trailing ``=`` are ignored and lowercase is accepted. Bits left over
    after the last whole byte are dropped.
    """
    cleaned = text.rstrip("=")
    out = bytearray()
    buffer = 0
    bits = 0
    for index, char in enumerate(cleaned):
        value = _LOOKUP.get(char)
        if value is None:
            raise InvalidEncoding(char, index)
        buffer = (buffer << 5) | value
        bits += 5
        if bits >= 8:
            bits -= 8
            out.append((buffer >> bits) & 0xFF)
            buffer &= (1 << bits) - 1
    return bytes(out)
