# realm_otp/qr.py
import base64
import io

import qrcode


def qr_code_data_uri(uri: str) -> str:
    """Render a provisioning URI as a PNG QR code data URI."""
    img = qrcode.make(uri)
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    b64 = base64.b64encode(buf.getvalue()).decode("ascii")
    return f"data:image/png;base64,{b64}"
