"""Supabase client factories.

Table access shares one client built with the service key (falls back to the anon key).
Sign-in and token refresh get a fresh anon client each time because supabase-py keeps
the signed-in session on the client object.
"""

import logging

from supabase import Client, create_client

from aiplayground.config import get_settings
from aiplayground.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

_service_client: Client | None = None


def _require_url() -> str:
    url = get_settings().supabase_url
    if not url:
        raise ConfigurationError("Supabase not configured. Set SUPABASE_URL and SUPABASE_ANON_KEY in .env")
    return url


def get_service_client() -> Client:
    global _service_client
    if _service_client is None:
        settings = get_settings()
        key = settings.supabase_service_key or settings.supabase_anon_key
        if not key:
            raise ConfigurationError("Supabase key not configured. Set SUPABASE_SERVICE_KEY in .env")
        _service_client = create_client(_require_url(), key)
        logger.info("Supabase client initialized")
    return _service_client


def get_auth_client() -> Client:
    settings = get_settings()
    if not settings.supabase_anon_key:
        raise ConfigurationError("Supabase anon key not configured. Set SUPABASE_ANON_KEY in .env")
    return create_client(_require_url(), settings.supabase_anon_key)
