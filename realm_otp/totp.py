# realm_otp/totp.py
# HOTP / TOTP utilities (RFC 4226 / RFC 6238, HMAC-SHA1)
import hashlib
import hmac
import logging
import re
import secrets
import struct
import time
from urllib.parse import quote

from realm_otp.base32 import decode, encode

logger = logging.getLogger(__name__)

# characters encodeURIComponent leaves alone, besides letters/digits/_.-
_URI_SAFE = "!~*'()"
_WHITESPACE = re.compile(r"\s+")


def generate_secret(byte_length: int = 20) -> str:
    """Generate a base32-encoded random secret, padding stripped."""
    if byte_length < 1:
        raise ValueError("byte_length must be at least 1")
    return encode(secrets.token_bytes(byte_length))


def generate_token(secret: str, counter: int, digits: int = 6) -> str:
    """HOTP code for the given base32 secret and counter.

    Only the low 32 bits of the counter are written; the upper half of the
    8-byte message stays zero.
    """
    key = decode(secret)
    msg = struct.pack(">II", 0, counter & 0xFFFFFFFF)
    digest = hmac.new(key, msg, hashlib.sha1).digest()
    offset = digest[-1] & 0x0F
    code_int = struct.unpack(">I", digest[offset:offset + 4])[0] & 0x7FFFFFFF
    return str(code_int % (10 ** digits)).zfill(digits)


def current_counter(step_seconds: int = 30, for_time: float | None = None) -> int:
    if for_time is None:
        for_time = time.time()
    return int(for_time // step_seconds)


def seconds_remaining(step_seconds: int = 30, for_time: float | None = None) -> int:
    """Seconds until the code for the current step rolls over."""
    if for_time is None:
        for_time = time.time()
    return step_seconds - int(for_time) % step_seconds


def verify_token(
    secret: str,
    token: str,
    window: int = 2,
    step_seconds: int = 30,
    digits: int = 6,
    for_time: float | None = None,
) -> bool:
    """Verify a TOTP code allowing +/- window steps for clock skew.

    Never raises: malformed codes, undecodable secrets and any other failure
    all come back as False.
    """
    try:
        clean = _WHITESPACE.sub("", token)
        if len(clean) != digits or not clean.isascii() or not clean.isdigit():
            return False

        counter = current_counter(step_seconds, for_time)
        for offset in range(-window, window + 1):
            expected = generate_token(secret, counter + offset, digits)
            if hmac.compare_digest(expected, clean):
                return True
        return False
    except Exception as exc:
        logger.debug("TOTP verification failed closed: %s", type(exc).__name__)
        return False


def generate_otpauth_url(secret: str, account_label: str, issuer: str) -> str:
    """Provisioning URI for authenticator apps."""
    label = quote(f"{issuer}:{account_label}", safe=_URI_SAFE)
    enc_issuer = quote(issuer, safe=_URI_SAFE)
    return f"otpauth://totp/{label}?secret={secret}&issuer={enc_issuer}"
