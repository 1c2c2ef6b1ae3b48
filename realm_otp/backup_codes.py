# realm_otp/backup_codes.py
import secrets
import string

BACKUP_CODE_ALPHABET = string.digits + string.ascii_uppercase


def generate_backup_codes(count: int = 8, length: int = 8) -> list[str]:
    """Generate recovery codes for 2FA, e.g. ``['K3P9QZ1A', ...]``."""
    if count < 0:
        raise ValueError("count cannot be negative")
    if length < 1:
        raise ValueError("length must be at least 1")
    return [
        "".join(secrets.choice(BACKUP_CODE_ALPHABET) for _ in range(length))
        for _ in range(count)
    ]
