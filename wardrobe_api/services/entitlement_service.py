#!/usr/bin/env python3
"""
Entitlement resolver

Finds a user's quota record, provisioning it from Adapty on first sight.
A record is only ever created for an id Adapty knows about.
"""

from datetime import UTC, datetime
from typing import Protocol

from loguru import logger

from wardrobe_api.models.quota import QuotaRecord
from wardrobe_api.models.subscription import SubscriptionProfile
from wardrobe_api.services.quota_policy import derive_quotas
from wardrobe_api.services.supabase_service import QuotaStore
from wardrobe_api.utils.errors import PermissionDeniedError, ProfileNotFoundError, QuotaStoreError


class SubscriptionProvider(Protocol):
    async def fetch_profile(self, profile_id: str) -> SubscriptionProfile: ...


class EntitlementService:
    """Resolve and provision quota records"""

    def __init__(self, store: QuotaStore, provider: SubscriptionProvider):
        self.store = store
        self.provider = provider

    async def provision(self, user_id: str) -> QuotaRecord:
        """Create the quota record for a verified Adapty profile"""
        try:
            profile = await self.provider.fetch_profile(user_id)
        except ProfileNotFoundError as e:
            logger.warning(f"Refusing to create quota record for unknown profile {user_id}")
            raise PermissionDeniedError("User could not be verified with the subscription provider",
                                        user_id=user_id) from e

        now = datetime.now(UTC)
        assignment = derive_quotas(profile, now)
        record = QuotaRecord.from_assignment(user_id, assignment, now)

        try:
            created = await self.store.create_record(record)
        except QuotaStoreError:
            # A concurrent request may have created the row first
            existing = await self.store.get_record(user_id)
            if existing is None:
                raise
            logger.info(f"Quota record for {user_id} was created concurrently")
            return existing

        logger.info(f"Provisioned quota record for {user_id}: tier={created.tier.value}")
        return created

    async def resolve(self, user_id: str) -> QuotaRecord:
        """Stored record for the user, provisioned if absent"""
        record = await self.store.get_record(user_id)
        if record is not None:
            return record
        logger.info(f"No quota record for {user_id}, provisioning")
        return await self.provision(user_id)
