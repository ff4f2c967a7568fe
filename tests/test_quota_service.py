"""
Tests for the quota gate.
"""
import asyncio

import pytest

from conftest import free_profile
from wardrobe_api.models.quota import QuotaCounter, Tier
from wardrobe_api.services.entitlement_service import EntitlementService
from wardrobe_api.services.quota_service import UserQuotaService
from wardrobe_api.utils.errors import (
    ErrorKind,
    InvalidArgumentError,
    PermissionDeniedError,
    QuotaExhaustedError,
)


@pytest.fixture
def quota_service(store, provider):
    return UserQuotaService(store, EntitlementService(store, provider))


@pytest.mark.asyncio
async def test_last_use_succeeds_then_exhausts(quota_service, store):
    """A counter at 1 can be used once, the next call is refused."""
    store.put("user", try_ons=1)

    remaining = await quota_service.consume_quota("user", QuotaCounter.TRY_ONS)
    assert remaining == 0
    assert store.records["user"].remaining_try_ons == 0

    with pytest.raises(QuotaExhaustedError) as exc_info:
        await quota_service.consume_quota("user", QuotaCounter.TRY_ONS)
    assert exc_info.value.kind is ErrorKind.RESOURCE_EXHAUSTED
    assert exc_info.value.counter == "remainingTryOns"
    assert store.records["user"].remaining_try_ons == 0


@pytest.mark.asyncio
async def test_only_named_counter_is_decremented(quota_service, store):
    store.put("user", try_ons=5, suggestions=5, cloth_analysis=5)

    await quota_service.consume_quota("user", "remainingSuggestions")

    record = store.records["user"]
    assert (record.remaining_try_ons, record.remaining_suggestions, record.remaining_cloth_analysis) == (5, 4, 5)


@pytest.mark.asyncio
async def test_missing_counter_is_exhausted(quota_service, store):
    """Records written before cloth analysis existed have no such counter."""
    store.put("legacy", cloth_analysis=None)

    with pytest.raises(QuotaExhaustedError):
        await quota_service.consume_quota("legacy", QuotaCounter.CLOTH_ANALYSIS)


@pytest.mark.asyncio
async def test_freemium_user_has_no_suggestions(quota_service, store, provider):
    provider.profiles["new-user"] = free_profile("new-user")

    with pytest.raises(QuotaExhaustedError):
        await quota_service.consume_quota("new-user", QuotaCounter.SUGGESTIONS)

    # The record was still provisioned by the gate
    assert store.records["new-user"].tier == Tier.freemium


@pytest.mark.asyncio
async def test_unknown_user_is_denied(quota_service, store):
    with pytest.raises(PermissionDeniedError):
        await quota_service.consume_quota("ghost", QuotaCounter.TRY_ONS)
    assert store.records == {}


@pytest.mark.asyncio
async def test_unknown_counter_name_is_invalid(quota_service, store):
    store.put("user")
    with pytest.raises(InvalidArgumentError):
        await quota_service.consume_quota("user", "remainingHugs")


@pytest.mark.asyncio
async def test_concurrent_consumers_never_overdraw(quota_service, store):
    store.put("user", try_ons=3)

    results = await asyncio.gather(
        *(quota_service.consume_quota("user", QuotaCounter.TRY_ONS) for _ in range(6)),
        return_exceptions=True,
    )

    successes = [r for r in results if isinstance(r, int)]
    refusals = [r for r in results if isinstance(r, QuotaExhaustedError)]
    assert len(successes) == 3
    assert len(refusals) == 3
    assert store.records["user"].remaining_try_ons == 0


@pytest.mark.asyncio
async def test_conditional_decrement_refusal_is_exhaustion(quota_service, store):
    """If the counter drops to zero between read and update, the call is refused."""
    store.put("user", try_ons=1)

    async def drained(user_id, counter):
        return None

    store.decrement_if_positive = drained

    with pytest.raises(QuotaExhaustedError):
        await quota_service.consume_quota("user", QuotaCounter.TRY_ONS)
