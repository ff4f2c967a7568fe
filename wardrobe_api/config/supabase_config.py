#!/usr/bin/env python3
"""
Supabase client factory
"""

from loguru import logger
from supabase import Client, create_client

from wardrobe_api.config.settings import Settings


def get_supabase_client(settings: Settings) -> Client | None:
    """Create a service role Supabase client, it bypasses RLS"""
    key = settings.SUPABASE_SERVICE_ROLE_KEY
    if not settings.SUPABASE_URL or not key:
        logger.error("Supabase URL or key is not configured")
        return None

    try:
        return create_client(settings.SUPABASE_URL, key)
    except Exception as e:
        logger.error(f"Failed to create Supabase client: {e}")
        return None
