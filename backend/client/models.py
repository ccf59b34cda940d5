"""
Client-side views of the API's response payloads.

The server sends camelCase keys; these models accept them and expose
snake_case attributes.
"""

from typing import Union

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class User(_ApiModel):
    id: str
    email: str
    name: str
    avatar: str = ""
    two_factor_enabled: bool = False


class Session(_ApiModel):
    """Tokens issued by signup or a completed login."""

    user: User
    access_token: str
    refresh_token: str


class TwoFactorChallenge(_ApiModel):
    """Password accepted; finish with ``login_with_two_factor(user_id, code)``."""

    user_id: str


LoginOutcome = Union[Session, TwoFactorChallenge]


class TwoFactorSetup(_ApiModel):
    qr_code: str
    secret: str
