# realm_otp/secret_box.py
# Encrypts TOTP secrets before the caller stores them.
import base64
import binascii
import os
from functools import lru_cache
from typing import Optional

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

_PASSPHRASE_ENV = "TOTP_ENCRYPTION_SECRET"
_SALT = b"totp-salt"
_ITERATIONS = 100_000
_NONCE_SIZE = 12


class SecretBoxError(ValueError):
    """Raised when an encrypted secret cannot be decoded or authenticated."""


def _passphrase(passphrase: Optional[str]) -> str:
    if passphrase:
        return passphrase
    value = os.getenv(_PASSPHRASE_ENV)
    if not value:
        raise RuntimeError(
            f"{_PASSPHRASE_ENV} is not set; configure the 2FA encryption passphrase in the environment."
        )
    return value


@lru_cache(maxsize=8)
def _derive_key(passphrase: str) -> bytes:
    """PBKDF2-SHA256 -> 32-byte AES-256-GCM key."""
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=32,
        salt=_SALT,
        iterations=_ITERATIONS,
    )
    return kdf.derive(passphrase.encode("utf-8"))


def encrypt_secret(plaintext: str, passphrase: Optional[str] = None) -> str:
    """Encrypt text using AES-256-GCM.

    Returns base64 encoded nonce + ciphertext (tag appended).
    """
    key = _derive_key(_passphrase(passphrase))
    nonce = os.urandom(_NONCE_SIZE)
    ct = AESGCM(key).encrypt(nonce, plaintext.encode("utf-8"), None)
    return base64.b64encode(nonce + ct).decode("ascii")


def decrypt_secret(token: str, passphrase: Optional[str] = None) -> str:
    """Decrypt base64 encoded nonce + ciphertext."""
    key = _derive_key(_passphrase(passphrase))
    try:
        raw = base64.b64decode(token.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError) as exc:
        raise SecretBoxError("Encrypted secret is not valid base64") from exc

    # nonce plus at least a 16-byte tag
    if len(raw) < _NONCE_SIZE + 16:
        raise SecretBoxError("Encrypted secret is too short")

    nonce, ct = raw[:_NONCE_SIZE], raw[_NONCE_SIZE:]
    try:
        plaintext = AESGCM(key).decrypt(nonce, ct, None)
    except InvalidTag as exc:
        raise SecretBoxError("Encrypted secret failed authentication") from exc
    try:
        return plaintext.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise SecretBoxError("Encrypted secret is not valid UTF-8 text") from exc
