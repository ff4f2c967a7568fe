"""
Pydantic models
"""

from .common import APIResponse
from .quota import (
    QuotaAssignment,
    QuotaCounter,
    QuotaCounters,
    QuotaRecord,
    SyncResponse,
    Tier,
    TierResponse,
    UserIdRequest,
)
from .subscription import AccessLevel, SubscriptionEntry, SubscriptionProfile
from .wardrobe import (
    AnalyzeClothingRequest,
    ClothingAnalysis,
    ClothingItem,
    OutfitSuggestionRequest,
    OutfitSuggestionResponse,
    VirtualTryOnRequest,
    VirtualTryOnResponse,
)
from .webhook import AdaptyWebhookEvent

__all__ = [
    'APIResponse',
    'Tier',
    'QuotaCounter',
    'QuotaCounters',
    'QuotaAssignment',
    'QuotaRecord',
    'UserIdRequest',
    'TierResponse',
    'SyncResponse',
    'AccessLevel',
    'SubscriptionEntry',
    'SubscriptionProfile',
    'AnalyzeClothingRequest',
    'ClothingAnalysis',
    'ClothingItem',
    'VirtualTryOnRequest',
    'VirtualTryOnResponse',
    'OutfitSuggestionRequest',
    'OutfitSuggestionResponse',
    'AdaptyWebhookEvent',
]
