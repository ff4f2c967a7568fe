"""
Tests for the settings object.
"""
from wardrobe_api.config.settings import Settings
from wardrobe_api.config.supabase_config import get_supabase_client


def test_config_summary_hides_secrets():
    """Should report which services are configured without exposing keys"""
    app_settings = Settings()
    app_settings.SUPABASE_SERVICE_ROLE_KEY = "service-role-secret"
    app_settings.ADAPTY_SECRET_KEY = "secret_live_123"
    app_settings.FAL_KEY = "fal-secret"
    app_settings.ADAPTY_WEBHOOK_AUTH = "shared-secret"

    summary = app_settings.get_config_summary()

    assert summary["subscriptions"] == "Adapty"
    assert summary["ai_service"] == "fal.ai"
    assert summary["webhook_auth"] is True
    rendered = str(summary)
    for secret in ("service-role-secret", "secret_live_123", "fal-secret", "shared-secret"):
        assert secret not in rendered


def test_config_summary_reflects_instance_overrides():
    app_settings = Settings()
    app_settings.ADAPTY_SECRET_KEY = None
    app_settings.ADAPTY_WEBHOOK_EVENTS = ["subscription_started"]

    summary = app_settings.get_config_summary()

    assert summary["subscriptions"] == "None"
    assert summary["webhook_events"] == ["subscription_started"]


def test_supabase_client_requires_service_role_key():
    app_settings = Settings()
    app_settings.SUPABASE_URL = "https://example.supabase.co"
    app_settings.SUPABASE_SERVICE_ROLE_KEY = None

    assert get_supabase_client(app_settings) is None
