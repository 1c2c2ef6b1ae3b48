# realm_otp/routes/two_factor.py

import logging

from flask import Blueprint, current_app, jsonify, request

from realm_otp import limiter
from realm_otp.backup_codes import generate_backup_codes
from realm_otp.qr import qr_code_data_uri
from realm_otp.secret_box import SecretBoxError, decrypt_secret, encrypt_secret
from realm_otp.totp import generate_otpauth_url, generate_secret, verify_token

logger = logging.getLogger(__name__)

two_factor_bp = Blueprint("two_factor", __name__, url_prefix="/2fa")


def _rate_limit():
    return current_app.config["TOTP_RATE_LIMIT"]


def _json_body() -> dict:
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


def _text(payload: dict, key: str) -> str:
    value = payload.get(key)
    return value.strip() if isinstance(value, str) else ""


def _verify(secret: str, code: str) -> bool:
    cfg = current_app.config
    return verify_token(
        secret,
        code,
        window=cfg["TOTP_WINDOW"],
        step_seconds=cfg["TOTP_STEP_SECONDS"],
        digits=cfg["TOTP_DIGITS"],
    )


# -------------------------------
# 2FA: START SETUP
# -------------------------------
@two_factor_bp.route("/setup", methods=["POST"])
@limiter.limit(_rate_limit)
def setup():
    account = _text(_json_body(), "account")
    if not account:
        return jsonify(error="Account label is required."), 400

    cfg = current_app.config
    secret = generate_secret(cfg["TOTP_SECRET_BYTES"])
    otp_uri = generate_otpauth_url(secret, account, cfg["TOTP_ISSUER"])

    qr_code = None
    qr_supported = True
    try:
        qr_code = qr_code_data_uri(otp_uri)
    except Exception as exc:
        qr_supported = False
        logger.warning("QR rendering unavailable: %s", exc)

    logger.info("2FA setup started for %s", account)
    return jsonify(
        secret=secret,
        otpauth_url=otp_uri,
        qr_code=qr_code,
        qr_supported=qr_supported,
        backup_codes=generate_backup_codes(cfg["TOTP_BACKUP_CODE_COUNT"]),
    )


# -------------------------------
# 2FA: CONFIRM SETUP
# -------------------------------
@two_factor_bp.route("/confirm", methods=["POST"])
@limiter.limit(_rate_limit)
def confirm():
    payload = _json_body()
    secret = _text(payload, "secret")
    code = _text(payload, "code")

    if not secret:
        return jsonify(error="No 2FA setup in progress. Start again."), 400

    if not _verify(secret, code):
        logger.warning("2FA confirmation rejected")
        return jsonify(error="Invalid or expired 2FA code."), 400

    logger.info("2FA confirmed")
    return jsonify(enabled=True, encrypted_secret=encrypt_secret(secret))


# -------------------------------
# 2FA: VERIFY STORED SECRET
# -------------------------------
@two_factor_bp.route("/verify", methods=["POST"])
@limiter.limit(_rate_limit)
def verify():
    payload = _json_body()
    encrypted = _text(payload, "encrypted_secret")
    code = _text(payload, "code")

    if not code:
        return jsonify(error="MFA required"), 401

    try:
        secret = decrypt_secret(encrypted)
    except SecretBoxError:
        logger.warning("2FA verification rejected: stored secret unreadable")
        return jsonify(error="Invalid MFA token"), 401

    if not _verify(secret, code):
        logger.warning("2FA verification rejected: code mismatch")
        return jsonify(error="Invalid MFA token"), 401

    return jsonify(valid=True)
