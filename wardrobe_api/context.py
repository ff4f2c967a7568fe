#!/usr/bin/env python3
"""
Application context

Built once in the FastAPI lifespan and stored on app.state. Route handlers get
it through the get_app_context dependency.
"""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from wardrobe_api.config.settings import Settings
from wardrobe_api.config.supabase_config import get_supabase_client
from wardrobe_api.services.adapty_service import AdaptyClient
from wardrobe_api.services.entitlement_service import EntitlementService, SubscriptionProvider
from wardrobe_api.services.generation_service import ContentGenerator
from wardrobe_api.services.quota_service import UserQuotaService
from wardrobe_api.services.subscription_service import SubscriptionService
from wardrobe_api.services.supabase_service import QuotaStore, SupabaseService


@dataclass
class AppContext:
    settings: Settings
    store: QuotaStore
    provider: SubscriptionProvider
    generator: ContentGenerator
    entitlements: EntitlementService
    quotas: UserQuotaService
    subscriptions: SubscriptionService

    @classmethod
    def build(
        cls,
        settings: Settings,
        store: QuotaStore,
        provider: SubscriptionProvider,
        generator: ContentGenerator,
    ) -> AppContext:
        """Wire the quota services around the given collaborators"""
        entitlements = EntitlementService(store, provider)
        return cls(
            settings=settings,
            store=store,
            provider=provider,
            generator=generator,
            entitlements=entitlements,
            quotas=UserQuotaService(store, entitlements),
            subscriptions=SubscriptionService(store, provider, settings.ADAPTY_WEBHOOK_EVENTS),
        )

    @classmethod
    def create(cls, settings: Settings) -> AppContext:
        """Production context: Supabase, Adapty and fal.ai"""
        store = SupabaseService(get_supabase_client(settings), settings.QUOTA_TABLE)
        provider = AdaptyClient(
            settings.ADAPTY_API_URL,
            settings.ADAPTY_SECRET_KEY,
            timeout=settings.ADAPTY_TIMEOUT_SECONDS,
        )
        generator = ContentGenerator(
            settings.FAL_API_URL,
            settings.FAL_KEY,
            vision_model=settings.FAL_VISION_MODEL,
            tryon_model=settings.FAL_TRYON_MODEL,
            timeout_seconds=settings.GENERATION_TIMEOUT_SECONDS,
        )
        return cls.build(settings, store, provider, generator)

    async def close(self) -> None:
        close = getattr(self.provider, "close", None)
        if close is not None:
            try:
                await close()
            except Exception as e:
                logger.warning(f"Failed to close subscription provider client: {e}")
