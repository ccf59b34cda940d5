"""Tests for the TOTP engine."""

import base64
from datetime import datetime, timedelta, timezone
from urllib.parse import parse_qs, unquote, urlparse

import pyotp
import pytest

from modules.auth.totp import TOTP_INTERVAL, TOTPEngine


NOW = datetime(2026, 1, 15, 12, 0, 15, tzinfo=timezone.utc)


@pytest.fixture
def engine() -> TOTPEngine:
    return TOTPEngine(issuer="TaskFlow", valid_window=2)


@pytest.fixture
def secret() -> str:
    return pyotp.random_base32()


def code_at(secret: str, steps: int) -> str:
    return TOTPEngine.current_code(secret, NOW + timedelta(seconds=steps * TOTP_INTERVAL))


class TestGenerateSecret:
    def test_secret_is_base32(self, engine):
        secret, _ = engine.generate_secret("test@example.com")
        assert len(secret) >= 16
        base64.b32decode(secret)

    def test_secrets_are_random(self, engine):
        first, _ = engine.generate_secret("test@example.com")
        second, _ = engine.generate_secret("test@example.com")
        assert first != second

    def test_provisioning_uri(self, engine):
        secret, uri = engine.generate_secret("test@example.com")
        parsed = urlparse(uri)
        query = parse_qs(parsed.query)

        assert parsed.scheme == "otpauth"
        assert parsed.netloc == "totp"
        assert "test@example.com" in unquote(parsed.path)
        assert query["secret"] == [secret]
        assert query["issuer"] == ["TaskFlow"]


class TestRenderScannableCode:
    def test_returns_png_data_uri(self, engine):
        _, uri = engine.generate_secret("test@example.com")
        data_uri = engine.render_scannable_code(uri)

        assert data_uri.startswith("data:image/png;base64,")
        png = base64.b64decode(data_uri.split(",", 1)[1])
        assert png.startswith(b"\x89PNG")


class TestVerifyCode:
    def test_current_code(self, engine, secret):
        assert engine.verify_code(code_at(secret, 0), secret, at=NOW) is True

    @pytest.mark.parametrize("steps", [-2, -1, 1, 2])
    def test_accepts_two_steps_of_drift(self, engine, secret, steps):
        assert engine.verify_code(code_at(secret, steps), secret, at=NOW) is True

    @pytest.mark.parametrize("steps", [-3, 3])
    def test_rejects_three_steps_away(self, engine, secret, steps):
        code = code_at(secret, steps)
        # Guard against a coincidental collision with a code inside the window
        inside = {code_at(secret, s) for s in range(-2, 3)}
        if code in inside:
            pytest.skip("code collides with one inside the window")
        assert engine.verify_code(code, secret, at=NOW) is False

    def test_ignores_whitespace(self, engine, secret):
        code = code_at(secret, 0)
        assert engine.verify_code(f" {code[:3]} {code[3:]} ", secret, at=NOW) is True

    @pytest.mark.parametrize("code", ["", "12345", "1234567", "abcdef", "12 34 5"])
    def test_rejects_malformed_codes(self, engine, secret, code):
        assert engine.verify_code(code, secret, at=NOW) is False

    def test_rejects_code_for_other_secret(self, engine, secret):
        other = pyotp.random_base32()
        code = code_at(other, 0)
        if code in {code_at(secret, s) for s in range(-2, 3)}:
            pytest.skip("codes collide")
        assert engine.verify_code(code, secret, at=NOW) is False

    def test_invalid_secret_does_not_raise(self, engine):
        assert engine.verify_code("123456", "not base32 !!", at=NOW) is False

    def test_empty_secret(self, engine):
        assert engine.verify_code("123456", "", at=NOW) is False

    def test_window_is_configurable(self, secret):
        strict = TOTPEngine(valid_window=0)
        code = code_at(secret, 1)
        if code == code_at(secret, 0):
            pytest.skip("codes collide")
        assert strict.verify_code(code, secret, at=NOW) is False

    def test_defaults_to_now(self, engine, secret):
        assert engine.verify_code(TOTPEngine.current_code(secret), secret) is True
