"""
Shared fixtures: in-memory quota store, canned Adapty profiles, fake generator.
"""
from datetime import UTC, datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from main_fastapi import create_fastapi_app
from wardrobe_api.config.settings import Settings
from wardrobe_api.context import AppContext
from wardrobe_api.models.quota import QuotaCounter, QuotaRecord, Tier
from wardrobe_api.models.subscription import AccessLevel, SubscriptionEntry, SubscriptionProfile
from wardrobe_api.models.wardrobe import ClothingAnalysis
from wardrobe_api.utils.errors import GenerationError, ProfileNotFoundError, QuotaStoreError


class FakeQuotaStore:
    """In-memory QuotaStore with the same conditional decrement semantics as consume_quota"""

    def __init__(self):
        self.records: dict[str, QuotaRecord] = {}
        self.writes = 0
        self.fail_reads = False

    async def get_record(self, user_id):
        if self.fail_reads:
            raise QuotaStoreError("store unavailable")
        record = self.records.get(user_id)
        return record.model_copy() if record else None

    async def create_record(self, record):
        if record.id in self.records:
            raise QuotaStoreError("duplicate key")
        self.records[record.id] = record.model_copy()
        self.writes += 1
        return record.model_copy()

    async def overwrite_quotas(self, user_id, tier, counters, synced_at):
        existing = self.records.get(user_id)
        fields = counters.as_fields()
        record = QuotaRecord(
            id=user_id,
            tier=tier,
            created_at=existing.created_at if existing else synced_at,
            last_synced_with_adapty=synced_at,
            **fields,
        )
        self.records[user_id] = record
        self.writes += 1
        return record.model_copy()

    async def decrement_if_positive(self, user_id, counter):
        record = self.records.get(user_id)
        if record is None:
            return None
        value = record.remaining(counter)
        if value is None or value <= 0:
            return None
        updated = record.model_copy(update={
            {
                QuotaCounter.TRY_ONS: "remaining_try_ons",
                QuotaCounter.SUGGESTIONS: "remaining_suggestions",
                QuotaCounter.CLOTH_ANALYSIS: "remaining_cloth_analysis",
            }[counter]: value - 1
        })
        self.records[user_id] = updated
        self.writes += 1
        return value - 1

    async def health_check(self):
        return True

    def put(self, user_id, tier=Tier.premium, try_ons=100, suggestions=100, cloth_analysis=100, created_at=None):
        record = QuotaRecord(
            id=user_id,
            tier=tier,
            remaining_try_ons=try_ons,
            remaining_suggestions=suggestions,
            remaining_cloth_analysis=cloth_analysis,
            created_at=created_at or datetime(2024, 1, 1, tzinfo=UTC),
        )
        self.records[user_id] = record
        return record


class FakeSubscriptionProvider:
    """Serves canned profiles; unknown ids raise ProfileNotFoundError"""

    def __init__(self):
        self.profiles: dict[str, SubscriptionProfile] = {}
        self.errors: dict[str, Exception] = {}
        self.calls: list[str] = []

    async def fetch_profile(self, profile_id):
        self.calls.append(profile_id)
        if profile_id in self.errors:
            raise self.errors[profile_id]
        if profile_id not in self.profiles:
            raise ProfileNotFoundError(profile_id)
        return self.profiles[profile_id]


class FakeGenerator:
    def __init__(self):
        self.calls: list[str] = []
        self.fail = False

    async def analyze_clothing(self, image_base64):
        self.calls.append("analyze")
        if self.fail:
            raise GenerationError("model down")
        return ClothingAnalysis(category="Shirt", description="A white cotton shirt.")

    async def suggest_outfit(self, user_prompt, clothing_items):
        self.calls.append("suggest")
        if self.fail:
            raise GenerationError("model down")
        return [item.id for item in clothing_items[:2]]

    async def virtual_try_on(self, pose_image_base64, clothing_image_base64):
        self.calls.append("try_on")
        if self.fail:
            raise GenerationError("model down")
        return "https://fal.media/files/result.png"


def free_profile(profile_id="free-user"):
    return SubscriptionProfile(profile_id=profile_id)


def premium_profile(profile_id="premium-user", product_id="com.wardrobe.monthly"):
    return SubscriptionProfile(
        profile_id=profile_id,
        access_levels=[AccessLevel(access_level_id="premium", is_active=True)],
        subscriptions=[SubscriptionEntry(
            product_id=product_id,
            is_active=True,
            expires_at=datetime.now(UTC) + timedelta(days=30),
        )],
    )


def assert_counters(record, tier, try_ons, suggestions, cloth_analysis):
    assert record.tier == tier
    assert record.remaining_try_ons == try_ons
    assert record.remaining_suggestions == suggestions
    assert record.remaining_cloth_analysis == cloth_analysis


@pytest.fixture
def store():
    return FakeQuotaStore()


@pytest.fixture
def provider():
    return FakeSubscriptionProvider()


@pytest.fixture
def generator():
    return FakeGenerator()


@pytest.fixture
def test_settings():
    test_settings = Settings()
    test_settings.LOG_LEVEL = "WARNING"
    test_settings.ADAPTY_WEBHOOK_AUTH = None
    test_settings.ADAPTY_WEBHOOK_EVENTS = ["subscription_started", "subscription_renewed", "subscription_expired"]
    test_settings.CORS_ORIGINS = ["*"]
    return test_settings


@pytest.fixture
def context(test_settings, store, provider, generator):
    return AppContext.build(test_settings, store, provider, generator)


@pytest.fixture
def client(test_settings, context):
    app = create_fastapi_app(test_settings, context=context)
    with TestClient(app) as test_client:
        yield test_client
