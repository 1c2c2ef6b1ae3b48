import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# RFC 4226 appendix D / RFC 6238 appendix B shared secret "12345678901234567890"
RFC_SECRET = "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"


@pytest.fixture
def rfc_secret():
    return RFC_SECRET


@pytest.fixture
def encryption_env(monkeypatch):
    monkeypatch.setenv("TOTP_ENCRYPTION_SECRET", "test-encryption-secret")
    return "test-encryption-secret"
