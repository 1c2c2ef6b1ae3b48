import base64

from realm_otp.qr import qr_code_data_uri
from realm_otp.totp import generate_otpauth_url


def test_qr_code_data_uri_is_png():
    uri = generate_otpauth_url("JBSWY3DPEHPK3PXP", "user@example.com", "God's Realm")
    data_uri = qr_code_data_uri(uri)
    prefix = "data:image/png;base64,"
    assert data_uri.startswith(prefix)
    png = base64.b64decode(data_uri[len(prefix):])
    assert png.startswith(b"\x89PNG\r\n\x1a\n")
