#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Subscription reconciliation

Recomputes a user's quota record from Adapty's current state and overwrites
the stored tier and counters. Two entry points:
- reconcile: explicit sync requested by the app, errors reach the caller
- reconcile_from_event: Adapty webhook, never fails so Adapty does not redeliver
"""
from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, datetime

from loguru import logger

from wardrobe_api.models.quota import QuotaRecord
from wardrobe_api.models.webhook import AdaptyWebhookEvent
from wardrobe_api.services.entitlement_service import SubscriptionProvider
from wardrobe_api.services.quota_policy import derive_quotas
from wardrobe_api.services.supabase_service import QuotaStore
from wardrobe_api.utils.errors import NotFoundError, ProfileNotFoundError, ServiceError


class SubscriptionService:
    def __init__(self, store: QuotaStore, provider: SubscriptionProvider, webhook_events: Iterable[str]):
        self.store = store
        self.provider = provider
        self.webhook_events = frozenset(webhook_events)

    async def reconcile(self, user_id: str) -> QuotaRecord:
        """Overwrite the user's tier and counters from Adapty, creating the record if needed"""
        try:
            profile = await self.provider.fetch_profile(user_id)
        except ProfileNotFoundError as e:
            raise NotFoundError("No subscription profile for this user", user_id=user_id) from e

        now = datetime.now(UTC)
        assignment = derive_quotas(profile, now)
        record = await self.store.overwrite_quotas(user_id, assignment.tier, assignment.counters, now)
        logger.info(
            f"Reconciled {user_id}: tier={assignment.tier.value}, "
            f"tryOns={assignment.counters.try_ons}, suggestions={assignment.counters.suggestions}, "
            f"clothAnalysis={assignment.counters.cloth_analysis}"
        )
        return record

    def is_tracked_event(self, event_type: str) -> bool:
        return event_type in self.webhook_events

    async def reconcile_from_event(self, event: AdaptyWebhookEvent) -> bool:
        """Handle a webhook event, returns whether a reconciliation ran

        Failures are logged and absorbed.
        """
        if not self.is_tracked_event(event.event_type):
            logger.debug(f"Ignoring Adapty event {event.event_type or '<empty>'}")
            return False

        if not event.profile_id:
            logger.warning(f"Adapty event {event.event_type} has no profile_id, ignoring")
            return False

        try:
            await self.reconcile(event.profile_id)
            return True
        except NotFoundError:
            logger.warning(f"Adapty event {event.event_type} for unknown profile {event.profile_id}, ignoring")
        except ServiceError as e:
            logger.error(f"Webhook reconciliation failed for {event.profile_id}: {e.message}")
        except Exception as e:
            logger.exception(f"Unexpected webhook reconciliation failure for {event.profile_id}: {e}")
        return False
