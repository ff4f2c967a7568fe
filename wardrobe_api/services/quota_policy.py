#!/usr/bin/env python3
"""
Quota policy

Maps a subscription profile to a tier and the counter values that tier grants.
Pure: the result depends only on the profile and the reference time.
"""

from datetime import UTC, datetime

from wardrobe_api.models.quota import QuotaAssignment, QuotaCounters, Tier
from wardrobe_api.models.subscription import AccessLevel, SubscriptionEntry, SubscriptionProfile

TIER_QUOTAS = {
    Tier.freemium: QuotaCounters(try_ons=10, suggestions=0, cloth_analysis=10),
    Tier.premium: QuotaCounters(try_ons=100, suggestions=100, cloth_analysis=100),
    Tier.ultra_premium: QuotaCounters(try_ons=500, suggestions=500, cloth_analysis=500),
}

# Product id fragments that mark an ultra subscription, matched case-insensitively
ULTRA_PRODUCT_MARKERS = ("ultra", "unlimited", "pro")


def _aware(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=UTC)


def _is_unexpired(expires_at: datetime | None, now: datetime) -> bool:
    return expires_at is None or _aware(expires_at) > now


def is_subscription_active(entry: SubscriptionEntry, now: datetime) -> bool:
    return (
        entry.is_active is not False
        and not entry.is_in_grace_period
        and not entry.is_refund
        and _is_unexpired(entry.expires_at, now)
    )


def is_access_level_active(level: AccessLevel, now: datetime) -> bool:
    if level.is_active or level.is_lifetime:
        return True
    return level.expires_at is not None and _aware(level.expires_at) > now


def is_ultra_product(product_id: str) -> bool:
    product = (product_id or "").lower()
    return any(marker in product for marker in ULTRA_PRODUCT_MARKERS)


def derive_quotas(profile: SubscriptionProfile | None, now: datetime | None = None) -> QuotaAssignment:
    """Derive tier and counters for a subscription profile

    A missing profile is treated like one without subscriptions.
    """
    now = _aware(now or datetime.now(UTC))
    subscriptions = profile.subscriptions if profile else []
    access_levels = profile.access_levels if profile else []

    active_subscriptions = [entry for entry in subscriptions if is_subscription_active(entry, now)]
    has_active_access = any(is_access_level_active(level, now) for level in access_levels)

    if not active_subscriptions and not has_active_access:
        return QuotaAssignment(tier=Tier.freemium, counters=TIER_QUOTAS[Tier.freemium])

    tier = Tier.premium
    for entry in active_subscriptions:
        if is_ultra_product(entry.product_id):
            tier = Tier.ultra_premium
            break

    return QuotaAssignment(tier=tier, counters=TIER_QUOTAS[tier])
