"""
Tests for auth module models.
"""

import pytest
from pydantic import ValidationError

from modules.auth.models import (
    LoginRequest,
    PublicUser,
    SessionIssued,
    SessionResponse,
    SignupRequest,
    TwoFactorChallengeData,
    TwoFactorChallengeResponse,
    TwoFactorDisabled,
    TwoFactorEnabled,
    TwoFactorLoginRequest,
    TwoFactorPending,
    TwoFactorRequired,
    UserRecord,
    normalize_email,
)


def make_user(**overrides) -> UserRecord:
    data = {"email": "test@example.com", "name": "Test User", "password_hash": "$argon2id$hash"}
    data.update(overrides)
    return UserRecord(**data)


class TestNormalizeEmail:
    def test_trims_and_lowercases(self):
        assert normalize_email("  Test@Example.COM ") == "test@example.com"


class TestTwoFactorState:
    def test_default_is_disabled(self):
        user = make_user()
        assert isinstance(user.two_factor, TwoFactorDisabled)
        assert user.two_factor_enabled is False

    def test_pending_is_not_enabled(self):
        user = make_user(two_factor=TwoFactorPending(secret="JBSWY3DPEHPK3PXP"))
        assert user.two_factor_enabled is False

    def test_enabled(self):
        user = make_user(two_factor=TwoFactorEnabled(secret="JBSWY3DPEHPK3PXP"))
        assert user.two_factor_enabled is True

    def test_enabled_requires_secret(self):
        """Enabled without a secret cannot be constructed."""
        with pytest.raises(ValidationError):
            TwoFactorEnabled(secret="")
        with pytest.raises(ValidationError):
            TwoFactorEnabled()  # type: ignore[call-arg]

    def test_discriminated_by_status(self):
        user = make_user(two_factor={"status": "pending", "secret": "JBSWY3DPEHPK3PXP"})
        assert isinstance(user.two_factor, TwoFactorPending)

    def test_secret_not_in_repr(self):
        assert "JBSWY3DPEHPK3PXP" not in repr(TwoFactorEnabled(secret="JBSWY3DPEHPK3PXP"))


class TestUserRecord:
    def test_generates_id(self):
        assert make_user().id != make_user().id

    def test_frozen(self):
        user = make_user()
        with pytest.raises(ValidationError):
            user.name = "Other"

    def test_password_hash_not_in_repr(self):
        assert "$argon2id$hash" not in repr(make_user())

    def test_to_public_drops_secrets(self):
        user = make_user(two_factor=TwoFactorEnabled(secret="JBSWY3DPEHPK3PXP"))
        public = user.to_public().model_dump(by_alias=True)

        assert public == {
            "id": user.id,
            "email": "test@example.com",
            "name": "Test User",
            "avatar": "",
            "twoFactorEnabled": True,
        }


class TestSignupRequest:
    def test_normalizes_email_and_name(self):
        request = SignupRequest(email=" Test@Example.com ", password="password123", name="  Ann  ")
        assert request.email == "test@example.com"
        assert request.name == "Ann"

    @pytest.mark.parametrize("field,value", [
        ("email", "not-an-email"),
        ("password", "short"),
        ("name", ""),
        ("name", "   "),
        ("name", "x" * 101),
    ])
    def test_rejects_invalid_input(self, field, value):
        data = {"email": "test@example.com", "password": "password123", "name": "Ann"}
        data[field] = value
        with pytest.raises(ValidationError):
            SignupRequest(**data)

    def test_name_of_100_chars_is_accepted(self):
        request = SignupRequest(email="test@example.com", password="password123", name="x" * 100)
        assert len(request.name) == 100


class TestRequests:
    def test_login_normalizes_email(self):
        assert LoginRequest(email="A@B.COM", password="x").email == "a@b.com"

    def test_two_factor_login_accepts_camel_case(self):
        request = TwoFactorLoginRequest.model_validate({"userId": "u-1", "token": "123456"})
        assert request.user_id == "u-1"


class TestResponseEnvelopes:
    def test_session_response_wire_shape(self):
        session = SessionIssued(
            user=PublicUser(id="u-1", email="a@b.com", name="A"),
            access_token="access",
            refresh_token="refresh",
        )
        body = SessionResponse.from_session(session, message="Login successful").model_dump(
            by_alias=True
        )

        assert body["success"] is True
        assert body["message"] == "Login successful"
        assert body["data"]["accessToken"] == "access"
        assert body["data"]["refreshToken"] == "refresh"
        assert body["data"]["user"]["twoFactorEnabled"] is False

    def test_two_factor_challenge_wire_shape(self):
        body = TwoFactorChallengeResponse(
            data=TwoFactorChallengeData(user_id="u-1")
        ).model_dump(by_alias=True)

        assert body == {"success": True, "requiresTwoFactor": True, "data": {"userId": "u-1"}}

    def test_login_results_are_distinguished_by_kind(self):
        assert TwoFactorRequired(user_id="u-1").kind == "two_factor_required"
        assert SessionIssued(
            user=PublicUser(id="u-1", email="a@b.com", name="A"),
            access_token="a",
            refresh_token="r",
        ).kind == "session"
