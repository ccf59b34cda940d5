"""
Auth API endpoints.

Thin HTTP layer over IAuthService. Errors are raised as module exceptions and
rendered by the application's exception handlers.
"""

from typing import Union

from fastapi import APIRouter, Depends

from api.dependencies import get_auth_service
from api.middleware.auth import get_current_user
from shared.models import AuthenticatedUser

from .interfaces import IAuthService
from .models import (
    CurrentUserResponse,
    LoginRequest,
    MessageResponse,
    RefreshRequest,
    RefreshResponse,
    SessionIssued,
    SessionResponse,
    SignupRequest,
    TwoFactorChallengeData,
    TwoFactorChallengeResponse,
    TwoFactorCodeRequest,
    TwoFactorLoginRequest,
    TwoFactorSetupResponse,
    TwoFactorStatusResponse,
    UserData,
)

router = APIRouter()


@router.post(
    "/signup",
    response_model=SessionResponse,
    response_model_exclude_none=True,
    status_code=201,
)
async def signup(
    request: SignupRequest,
    service: IAuthService = Depends(get_auth_service),
) -> SessionResponse:
    """Register a new user and return a session for them."""
    session = await service.signup(request)
    return SessionResponse.from_session(session, message="User created successfully")


@router.post(
    "/login",
    response_model=Union[SessionResponse, TwoFactorChallengeResponse],
    response_model_exclude_none=True,
)
async def login(
    request: LoginRequest,
    service: IAuthService = Depends(get_auth_service),
) -> Union[SessionResponse, TwoFactorChallengeResponse]:
    """
    Log in with email and password.

    Users with 2FA enabled get ``requiresTwoFactor: true`` and their user ID
    instead of tokens; they finish at ``/login/2fa``.
    """
    result = await service.login(request)
    if isinstance(result, SessionIssued):
        return SessionResponse.from_session(result, message="Login successful")
    return TwoFactorChallengeResponse(data=TwoFactorChallengeData(user_id=result.user_id))


@router.post("/login/2fa", response_model=SessionResponse, response_model_exclude_none=True)
async def login_with_two_factor(
    request: TwoFactorLoginRequest,
    service: IAuthService = Depends(get_auth_service),
) -> SessionResponse:
    """Complete a login with a TOTP code."""
    session = await service.complete_two_factor_login(request)
    return SessionResponse.from_session(session, message="Login successful")


@router.post("/refresh", response_model=RefreshResponse)
async def refresh_token(
    request: RefreshRequest,
    service: IAuthService = Depends(get_auth_service),
) -> RefreshResponse:
    """Exchange a refresh token (sent in the body) for a new access token."""
    return RefreshResponse(data=await service.refresh_session(request))


@router.get("/me", response_model=CurrentUserResponse)
async def get_me(
    user: AuthenticatedUser = Depends(get_current_user),
    service: IAuthService = Depends(get_auth_service),
) -> CurrentUserResponse:
    """Get the current user's profile."""
    return CurrentUserResponse(data=UserData(user=await service.get_current_user(user)))


@router.post("/2fa/setup", response_model=TwoFactorSetupResponse)
async def setup_two_factor(
    user: AuthenticatedUser = Depends(get_current_user),
    service: IAuthService = Depends(get_auth_service),
) -> TwoFactorSetupResponse:
    """Start 2FA enrollment: returns a QR code and the secret for manual entry."""
    setup = await service.setup_two_factor(user)
    return TwoFactorSetupResponse(message="2FA setup initiated", data=setup)


@router.post("/2fa/verify", response_model=TwoFactorStatusResponse)
async def verify_two_factor(
    request: TwoFactorCodeRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IAuthService = Depends(get_auth_service),
) -> TwoFactorStatusResponse:
    """Confirm enrollment with a code from the authenticator app."""
    status = await service.verify_two_factor(user, request.token)
    return TwoFactorStatusResponse(message="2FA enabled successfully", data=status)


@router.post("/2fa/disable", response_model=MessageResponse)
async def disable_two_factor(
    user: AuthenticatedUser = Depends(get_current_user),
    service: IAuthService = Depends(get_auth_service),
) -> MessageResponse:
    """Turn 2FA off and discard the secret."""
    await service.disable_two_factor(user)
    return MessageResponse(message="2FA disabled successfully")
