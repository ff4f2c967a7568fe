#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Application settings - Supabase store, Adapty subscriptions, fal.ai generation
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load the project .env file
backend_root = Path(__file__).parent.parent.parent
env_path = backend_root / ".env"
load_dotenv(env_path)


def _split_env_list(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


# Basic
DEBUG = os.getenv("DEBUG", "False").lower() == "true"

# Supabase (quota record store)
SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_SERVICE_ROLE_KEY = os.getenv("SUPABASE_SERVICE_ROLE_KEY")
QUOTA_TABLE = os.getenv("QUOTA_TABLE", "users")

# Adapty (subscription provider)
ADAPTY_API_URL = os.getenv("ADAPTY_API_URL", "https://api.adapty.io/api/v2/server-side-api")
ADAPTY_SECRET_KEY = os.getenv("ADAPTY_SECRET_KEY")
ADAPTY_TIMEOUT_SECONDS = float(os.getenv("ADAPTY_TIMEOUT_SECONDS", "15"))
ADAPTY_WEBHOOK_AUTH = os.getenv("ADAPTY_WEBHOOK_AUTH")

# Subscription lifecycle events that trigger a reconciliation
DEFAULT_WEBHOOK_EVENTS = (
    "subscription_started,"
    "subscription_renewed,"
    "subscription_expired,"
    "subscription_refunded,"
    "subscription_renewal_cancelled,"
    "subscription_renewal_reactivated,"
    "trial_started,"
    "trial_converted,"
    "trial_expired,"
    "access_level_updated"
)
ADAPTY_WEBHOOK_EVENTS = _split_env_list(os.getenv("ADAPTY_WEBHOOK_EVENTS", DEFAULT_WEBHOOK_EVENTS))

# fal.ai (content generation)
FAL_KEY = os.getenv("FAL_KEY")
FAL_API_URL = os.getenv("FAL_API_URL", "https://fal.run")
FAL_VISION_MODEL = os.getenv("FAL_VISION_MODEL", "fal-ai/llava-next")
FAL_TRYON_MODEL = os.getenv("FAL_TRYON_MODEL", "fal-ai/fashn/tryon")
GENERATION_TIMEOUT_SECONDS = float(os.getenv("GENERATION_TIMEOUT_SECONDS", "300"))

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# CORS
CORS_ORIGINS = _split_env_list(os.getenv("CORS_ORIGINS", "*"))

# Trusted hosts, the reverse proxy in front of the service does the filtering
TRUSTED_HOSTS = ["*"]

# App info
APP_NAME = "Wardrobe AI API"
APP_VERSION = "1.0.0"
APP_DESCRIPTION = "Clothing analysis, virtual try-on and outfit suggestions with subscription quotas"


def validate_config():
    """Validate required configuration"""
    errors = []

    if not SUPABASE_URL:
        errors.append("SUPABASE_URL is required")
    if not SUPABASE_SERVICE_ROLE_KEY:
        errors.append("SUPABASE_SERVICE_ROLE_KEY is required")
    if not ADAPTY_SECRET_KEY:
        errors.append("ADAPTY_SECRET_KEY is required for subscription lookups")
    if not FAL_KEY:
        errors.append("FAL_KEY is required for AI services")

    if errors:
        raise ValueError(f"Configuration errors: {', '.join(errors)}")


# Validate on import, a broken config still lets /health answer
try:
    validate_config()
except ValueError as e:
    print(f"⚠️  Configuration warning: {e}")


class Settings:
    """Settings object passed into the application context"""

    def __init__(self):
        # Basic
        self.DEBUG = DEBUG
        self.APP_NAME = APP_NAME
        self.APP_VERSION = APP_VERSION
        self.APP_DESCRIPTION = APP_DESCRIPTION
        self.LOG_LEVEL = LOG_LEVEL

        # Supabase
        self.SUPABASE_URL = SUPABASE_URL
        self.SUPABASE_SERVICE_ROLE_KEY = SUPABASE_SERVICE_ROLE_KEY
        self.QUOTA_TABLE = QUOTA_TABLE

        # Adapty
        self.ADAPTY_API_URL = ADAPTY_API_URL
        self.ADAPTY_SECRET_KEY = ADAPTY_SECRET_KEY
        self.ADAPTY_TIMEOUT_SECONDS = ADAPTY_TIMEOUT_SECONDS
        self.ADAPTY_WEBHOOK_AUTH = ADAPTY_WEBHOOK_AUTH
        self.ADAPTY_WEBHOOK_EVENTS = list(ADAPTY_WEBHOOK_EVENTS)

        # fal.ai
        self.FAL_KEY = FAL_KEY
        self.FAL_API_URL = FAL_API_URL
        self.FAL_VISION_MODEL = FAL_VISION_MODEL
        self.FAL_TRYON_MODEL = FAL_TRYON_MODEL
        self.GENERATION_TIMEOUT_SECONDS = GENERATION_TIMEOUT_SECONDS

        # HTTP
        self.CORS_ORIGINS = CORS_ORIGINS
        self.TRUSTED_HOSTS = TRUSTED_HOSTS

    def get_config_summary(self):
        """Configuration summary without secrets"""
        return {
            "app_name": self.APP_NAME,
            "app_version": self.APP_VERSION,
            "debug": self.DEBUG,
            "database": "Supabase" if self.SUPABASE_URL else "None",
            "quota_table": self.QUOTA_TABLE,
            "subscriptions": "Adapty" if self.ADAPTY_SECRET_KEY else "None",
            "ai_service": "fal.ai" if self.FAL_KEY else "None",
            "webhook_events": self.ADAPTY_WEBHOOK_EVENTS,
            "webhook_auth": bool(self.ADAPTY_WEBHOOK_AUTH),
        }


# Default settings instance
settings = Settings()
