"""
Service layer
"""

from .adapty_service import AdaptyClient, parse_profile
from .entitlement_service import EntitlementService, SubscriptionProvider
from .generation_service import ContentGenerator
from .quota_policy import derive_quotas
from .quota_service import UserQuotaService
from .subscription_service import SubscriptionService
from .supabase_service import QuotaStore, SupabaseService

__all__ = [
    'AdaptyClient', 'parse_profile',
    'EntitlementService', 'SubscriptionProvider',
    'ContentGenerator',
    'derive_quotas',
    'UserQuotaService',
    'SubscriptionService',
    'QuotaStore', 'SupabaseService',
]
