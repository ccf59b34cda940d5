"""
Shared infrastructure for the TaskFlow backend.

This package contains cross-cutting concerns that are used by multiple modules:
- config: Centralized settings management
- database: Supabase client factory
- exceptions: Base exception classes and the HTTP error taxonomy
- log_config: Logging setup

Note: Business logic should NOT go here. This is for infrastructure only.
"""

from .config import Settings, get_settings
from .database import check_connection, get_supabase_client, reset_client_cache
from .exceptions import (
    TaskFlowError,
    ValidationError,
    ConflictError,
    AuthenticationError,
    UnauthorizedError,
    NotFoundError,
    InternalError,
)
from .log_config import configure_logging
from .models import AuthenticatedUser

__all__ = [
    "Settings",
    "get_settings",
    "get_supabase_client",
    "check_connection",
    "reset_client_cache",
    "TaskFlowError",
    "ValidationError",
    "ConflictError",
    "AuthenticationError",
    "UnauthorizedError",
    "NotFoundError",
    "InternalError",
    "configure_logging",
    "AuthenticatedUser",
]
