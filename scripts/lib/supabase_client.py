"""
Supabase Client Helper for Intent Signal Hub.
Lazily creates one client per process from Settings.

Usage:
    from scripts.lib.supabase_client import get_client

    client = get_client()
    client.table("intent_data").select("*").eq("week_label", week).execute()
"""
from typing import Optional

from scripts.lib.config import Settings, get_settings
from scripts.lib.errors import ConfigError
from scripts.lib.logger import setup_logger

logger = setup_logger(__name__)

_client = None


def get_client(settings: Optional[Settings] = None):
    """Create and return a Supabase client (singleton)."""
    global _client
    if _client is not None:
        return _client

    settings = settings or get_settings()
    if not settings.supabase_configured:
        raise ConfigError(
            "SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be set in .env",
            setting="SUPABASE_URL",
        )

    from supabase import create_client
    try:
        _client = create_client(settings.supabase_url, settings.supabase_key)
    except Exception as e:
        # create_client validates the URL and key format before any request
        raise ConfigError(f"Could not create Supabase client: {e}", setting="SUPABASE_URL") from e
    logger.info("Supabase client connected to %s", settings.supabase_url)
    return _client


def reset_client() -> None:
    """Drop the cached client so the next get_client() reconnects."""
    global _client
    _client = None


def is_available(settings: Optional[Settings] = None) -> bool:
    """True when a client can be created with the current settings."""
    try:
        get_client(settings)
        return True
    except Exception as e:
        logger.warning("Supabase not available: %s", e)
        return False
