"""
Supabase client factory.

Only the backend touches the ``users`` table, so a single service-role client
(which bypasses row level security) is shared by every repository.
"""

import logging
from typing import Optional

import httpx
from supabase import Client, PostgrestAPIError, create_client

from .config import get_settings

logger = logging.getLogger(__name__)

# Module-level client cache
_service_client: Optional[Client] = None


def get_supabase_client() -> Client:
    """
    Get the shared service-role Supabase client, creating it on first use.

    Raises:
        RuntimeError: If SUPABASE_URL or SUPABASE_SERVICE_ROLE_KEY is not set
    """
    global _service_client

    if _service_client is None:
        settings = get_settings()
        if not settings.supabase_url or not settings.supabase_service_role_key:
            raise RuntimeError(
                "Supabase configuration missing. "
                "Set SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY environment variables."
            )
        _service_client = create_client(
            settings.supabase_url,
            settings.supabase_service_role_key,
        )

    return _service_client


def check_connection(client: Client, table: str = "users") -> bool:
    """Run a one-row select against ``table``. False if the database can't be reached."""
    try:
        client.table(table).select("id").limit(1).execute()
    except (PostgrestAPIError, httpx.HTTPError) as e:
        logger.warning("Database check failed: %s", e)
        return False
    return True


def reset_client_cache() -> None:
    """Forget the cached client (tests, or after a configuration change)."""
    global _service_client
    _service_client = None
