"""
TOTP engine (RFC 6238) for two-factor authentication.

Compatible with Google Authenticator, Authy and other TOTP apps:
- random base32 secrets and ``otpauth://`` provisioning URIs
- QR code rendering as a PNG data URI
- code verification with clock-drift tolerance
"""

import base64
from datetime import datetime
from io import BytesIO
from typing import Optional

import pyotp
import qrcode

TOTP_DIGITS = 6
TOTP_INTERVAL = 30  # seconds per step
DEFAULT_VALID_WINDOW = 2  # steps accepted either side of the current one


class TOTPEngine:
    """Generates secrets and verifies time-based one-time codes."""

    def __init__(self, issuer: str = "TaskFlow", valid_window: int = DEFAULT_VALID_WINDOW):
        self.issuer = issuer
        self.valid_window = valid_window

    def generate_secret(self, account_label: str) -> tuple[str, str]:
        """Create a fresh secret and its provisioning URI.

        Args:
            account_label: Shown in the authenticator app (the user's email)

        Returns:
            Tuple of (base32 secret, otpauth:// provisioning URI)
        """
        secret = pyotp.random_base32()
        uri = pyotp.TOTP(secret, digits=TOTP_DIGITS, interval=TOTP_INTERVAL).provisioning_uri(
            name=account_label,
            issuer_name=self.issuer,
        )
        return secret, uri

    @staticmethod
    def render_scannable_code(provisioning_uri: str) -> str:
        """Render a provisioning URI as a ``data:image/png;base64,...`` QR code."""
        qr = qrcode.QRCode(version=1, box_size=10, border=4)
        qr.add_data(provisioning_uri)
        qr.make(fit=True)
        img = qr.make_image(fill_color="black", back_color="white")

        buffer = BytesIO()
        img.save(buffer, format="PNG")
        encoded = base64.b64encode(buffer.getvalue()).decode()
        return f"data:image/png;base64,{encoded}"

    def verify_code(self, code: str, secret: str, at: Optional[datetime] = None) -> bool:
        """Check a submitted code against the secret.

        Codes from up to ``valid_window`` steps before or after ``at``
        (default: now) are accepted.
        """
        if not code or not secret:
            return False
        code = "".join(str(code).split())
        if len(code) != TOTP_DIGITS or not code.isdigit():
            return False
        try:
            totp = pyotp.TOTP(secret, digits=TOTP_DIGITS, interval=TOTP_INTERVAL)
            return totp.verify(code, for_time=at, valid_window=self.valid_window)
        except (ValueError, TypeError):
            # Secret is not valid base32
            return False

    @staticmethod
    def current_code(secret: str, at: Optional[datetime] = None) -> str:
        """The code an authenticator app would show at ``at`` (default: now)."""
        totp = pyotp.TOTP(secret, digits=TOTP_DIGITS, interval=TOTP_INTERVAL)
        return totp.at(at) if at is not None else totp.now()
