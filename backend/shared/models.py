"""
Models shared between the API layer and feature modules.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class AuthenticatedUser(BaseModel):
    """
    The caller of a protected route, as proven by a verified access token.

    Built from token claims by the request authentication dependency. It is
    not a database row: the user may have been deleted since the token was
    issued, so services look the record up again when they need it.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str = Field(..., description="User ID (token subject)")
    email: str = Field(..., description="Email the token was issued for")
    issued_at: Optional[datetime] = Field(None, description="When the access token was issued")
