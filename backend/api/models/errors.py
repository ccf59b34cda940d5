"""
Error response models.

Every failed request returns the same envelope.
"""

from typing import Literal, Optional

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response format."""

    success: Literal[False] = False
    message: str
    debug: Optional[str] = None  # exception text, debug builds only
