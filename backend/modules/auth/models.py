"""
Authentication module data models.

These models define the data structures used by the auth module:
- the stored user record and its two-factor state
- token claims
- request payloads and per-operation results
- the JSON response envelopes returned by the routes

Wire models use camelCase aliases (``accessToken``, ``twoFactorEnabled``) and
accept either spelling on input.
"""

from datetime import datetime, timezone
from typing import Annotated, Literal, Optional, Union
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def normalize_email(value: str) -> str:
    """Trim and lower-case an email so lookups are case-insensitive."""
    return value.strip().lower()


class CamelModel(BaseModel):
    """Base for models that travel over the wire with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# -----------------------------------------------------------------------------
# Two-factor state
# -----------------------------------------------------------------------------


class TwoFactorDisabled(BaseModel):
    """No secret on file. Login never asks for a code."""

    model_config = ConfigDict(frozen=True)

    status: Literal["disabled"] = "disabled"


class TwoFactorPending(BaseModel):
    """Secret generated by setup but not yet confirmed with a code."""

    model_config = ConfigDict(frozen=True)

    status: Literal["pending"] = "pending"
    secret: str = Field(..., min_length=1, repr=False)


class TwoFactorEnabled(BaseModel):
    """Secret confirmed. Login requires a code."""

    model_config = ConfigDict(frozen=True)

    status: Literal["enabled"] = "enabled"
    secret: str = Field(..., min_length=1, repr=False)


TwoFactorState = Annotated[
    Union[TwoFactorDisabled, TwoFactorPending, TwoFactorEnabled],
    Field(discriminator="status"),
]


# -----------------------------------------------------------------------------
# Users
# -----------------------------------------------------------------------------


class PublicUser(CamelModel):
    """The projection of a user that may leave the service."""

    id: str = Field(..., description="User ID")
    email: str = Field(..., description="Email address")
    name: str = Field(..., description="Display name")
    avatar: str = Field(default="", description="Avatar URL")
    two_factor_enabled: bool = Field(default=False, description="Whether 2FA is enabled")


class UserRecord(BaseModel):
    """
    A user identity as held by the credential store.

    Never returned to clients directly; use ``to_public()``.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid4()))
    email: str
    name: str
    avatar: str = ""
    password_hash: str = Field(..., repr=False)
    two_factor: TwoFactorState = Field(default_factory=TwoFactorDisabled)
    created_at: datetime = Field(default_factory=_utc_now)
    updated_at: datetime = Field(default_factory=_utc_now)

    @property
    def two_factor_enabled(self) -> bool:
        return isinstance(self.two_factor, TwoFactorEnabled)

    def to_public(self) -> PublicUser:
        return PublicUser(
            id=self.id,
            email=self.email,
            name=self.name,
            avatar=self.avatar,
            two_factor_enabled=self.two_factor_enabled,
        )


# -----------------------------------------------------------------------------
# Tokens
# -----------------------------------------------------------------------------


TokenType = Literal["access", "refresh"]


class TokenClaims(BaseModel):
    """Decoded claims of an access or refresh token."""

    sub: str = Field(..., description="Subject (user ID)")
    email: str = Field(..., description="User's email")
    type: TokenType = Field(..., description="Which secret signed the token")
    iat: int = Field(..., description="Issued at timestamp")
    exp: int = Field(..., description="Expiration timestamp")


class TokenPair(BaseModel):
    access_token: str
    refresh_token: str


# -----------------------------------------------------------------------------
# Requests
# -----------------------------------------------------------------------------


class SignupRequest(CamelModel):
    """Create an account and sign in."""

    email: EmailStr = Field(..., description="Email address")
    password: str = Field(..., min_length=8, max_length=256)
    name: str = Field(..., min_length=1, max_length=100)

    @field_validator("email", mode="before")
    @classmethod
    def _normalize_email(cls, value):
        return normalize_email(value) if isinstance(value, str) else value

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, value):
        return value.strip() if isinstance(value, str) else value


class LoginRequest(CamelModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

    @field_validator("email", mode="before")
    @classmethod
    def _normalize_email(cls, value):
        return normalize_email(value) if isinstance(value, str) else value


class TwoFactorLoginRequest(CamelModel):
    """Second step of a login for a user with 2FA enabled."""

    user_id: str = Field(..., min_length=1)
    token: str = Field(..., min_length=1, description="TOTP code")


class TwoFactorCodeRequest(CamelModel):
    token: str = Field(..., min_length=1, description="TOTP code")


class RefreshRequest(CamelModel):
    refresh_token: str = Field(..., min_length=1)


# -----------------------------------------------------------------------------
# Operation results
# -----------------------------------------------------------------------------


class SessionIssued(CamelModel):
    """Credentials (and code, if required) accepted; tokens minted."""

    kind: Literal["session"] = "session"
    user: PublicUser
    access_token: str
    refresh_token: str


class TwoFactorRequired(CamelModel):
    """Password accepted but the user must still submit a TOTP code."""

    kind: Literal["two_factor_required"] = "two_factor_required"
    user_id: str


LoginResult = Annotated[
    Union[SessionIssued, TwoFactorRequired],
    Field(discriminator="kind"),
]


class AccessTokenRefreshed(CamelModel):
    access_token: str


class TwoFactorSetup(CamelModel):
    qr_code: str = Field(..., description="PNG data URI of the provisioning QR code")
    secret: str = Field(..., description="Base32 secret for manual entry")


class TwoFactorStatus(CamelModel):
    two_factor_enabled: bool


# -----------------------------------------------------------------------------
# Response envelopes
# -----------------------------------------------------------------------------


class SessionData(CamelModel):
    user: PublicUser
    access_token: str
    refresh_token: str


class SessionResponse(CamelModel):
    success: Literal[True] = True
    message: Optional[str] = None
    data: SessionData

    @classmethod
    def from_session(cls, session: SessionIssued, message: Optional[str] = None) -> "SessionResponse":
        return cls(
            message=message,
            data=SessionData(
                user=session.user,
                access_token=session.access_token,
                refresh_token=session.refresh_token,
            ),
        )


class TwoFactorChallengeData(CamelModel):
    user_id: str


class TwoFactorChallengeResponse(CamelModel):
    success: Literal[True] = True
    requires_two_factor: Literal[True] = True
    data: TwoFactorChallengeData


class RefreshResponse(CamelModel):
    success: Literal[True] = True
    data: AccessTokenRefreshed


class UserData(CamelModel):
    user: PublicUser


class CurrentUserResponse(CamelModel):
    success: Literal[True] = True
    data: UserData


class TwoFactorSetupResponse(CamelModel):
    success: Literal[True] = True
    message: Optional[str] = None
    data: TwoFactorSetup


class TwoFactorStatusResponse(CamelModel):
    success: Literal[True] = True
    message: Optional[str] = None
    data: TwoFactorStatus


class MessageResponse(CamelModel):
    success: Literal[True] = True
    message: Optional[str] = None
