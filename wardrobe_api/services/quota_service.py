#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Quota gate

Every metered action takes exactly one use from its counter before the
content generation call runs.
"""

from loguru import logger

from wardrobe_api.models.quota import QuotaCounter
from wardrobe_api.services.entitlement_service import EntitlementService
from wardrobe_api.services.supabase_service import QuotaStore
from wardrobe_api.utils.errors import InvalidArgumentError, QuotaExhaustedError


class UserQuotaService:
    """Check-and-decrement of per-user quota counters"""

    def __init__(self, store: QuotaStore, entitlements: EntitlementService):
        self.store = store
        self.entitlements = entitlements

    @staticmethod
    def _counter(counter_name: QuotaCounter | str) -> QuotaCounter:
        try:
            return QuotaCounter(counter_name)
        except ValueError as e:
            raise InvalidArgumentError(f"Unknown quota counter: {counter_name}", counter=str(counter_name)) from e

    async def consume_quota(self, user_id: str, counter_name: QuotaCounter | str) -> int:
        """Take one use from a counter, returns the remaining value

        Raises QuotaExhaustedError when the counter is missing or not positive.
        """
        counter = self._counter(counter_name)

        record = await self.entitlements.resolve(user_id)
        remaining = record.remaining(counter)
        if remaining is None or remaining <= 0:
            logger.info(f"User {user_id} has no remaining {counter.value}")
            raise QuotaExhaustedError(counter.value)

        # Conditional update, returns None if the counter hit zero since the read
        new_value = await self.store.decrement_if_positive(user_id, counter)
        if new_value is None:
            logger.info(f"User {user_id} ran out of {counter.value} concurrently")
            raise QuotaExhaustedError(counter.value)

        logger.info(f"User {user_id} consumed {counter.value}, remaining: {new_value}")
        return new_value
