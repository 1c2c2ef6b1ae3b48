# realm_otp/__init__.py

from flask import Flask, jsonify
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from dotenv import load_dotenv
import os

# ======================================================
# Load environment first
# ======================================================
load_dotenv()

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["200 per hour"],
    storage_uri="memory://"
)


def create_app():
    app = Flask(__name__)

    # ==================================================
    # Security / Keys
    # ==================================================
    app.secret_key = os.getenv("SECRET_KEY", "REPLACE_WITH_A_SECURE_RANDOM_KEY")

    # ==================================================
    # Two-factor defaults
    # ==================================================
    app.config["TOTP_ISSUER"] = os.getenv("TOTP_ISSUER", "God's Realm")
    app.config["TOTP_WINDOW"] = int(os.getenv("TOTP_WINDOW", "2"))
    app.config["TOTP_STEP_SECONDS"] = int(os.getenv("TOTP_STEP_SECONDS", "30"))
    app.config["TOTP_DIGITS"] = int(os.getenv("TOTP_DIGITS", "6"))
    app.config["TOTP_SECRET_BYTES"] = int(os.getenv("TOTP_SECRET_BYTES", "20"))
    app.config["TOTP_BACKUP_CODE_COUNT"] = int(os.getenv("TOTP_BACKUP_CODE_COUNT", "8"))

    # ==================================================
    # Rate Limiting
    # ==================================================
    app.config["TOTP_RATE_LIMIT"] = os.getenv("TOTP_RATE_LIMIT", "30 per minute")

    limiter.init_app(app)

    # ==================================================
    # Blueprints
    # ==================================================
    from realm_otp.routes.two_factor import two_factor_bp

    app.register_blueprint(two_factor_bp)

    @app.errorhandler(429)
    def too_many_requests(_exc):
        return jsonify(error="Too many requests"), 429

    # ==================================================
    # Security Headers
    # ==================================================
    @app.after_request
    def apply_security_headers(response):
        response.headers["Content-Security-Policy"] = "default-src 'none'"
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        # responses carry secrets and recovery codes
        response.headers["Cache-Control"] = "no-store"
        return response

    # ==================================================
    # Basic Routes
    # ==================================================
    @app.route("/status")
    def status():
        return jsonify(status="ok")

    return app
