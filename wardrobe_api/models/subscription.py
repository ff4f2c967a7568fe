"""
Subscription profile models, as read from Adapty
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class AccessLevel(BaseModel):
    """An access level grant (e.g. "premium")"""

    access_level_id: str = ""
    is_active: bool = False
    is_lifetime: bool = False
    expires_at: datetime | None = None


class SubscriptionEntry(BaseModel):
    """One store subscription on the profile"""

    product_id: str = ""
    # None means the provider did not say, which counts as active
    is_active: bool | None = None
    is_in_grace_period: bool = False
    is_refund: bool = False
    expires_at: datetime | None = None


class SubscriptionProfile(BaseModel):
    """Billing/access state of one user at the subscription provider"""

    profile_id: str = ""
    customer_user_id: str | None = None
    access_levels: list[AccessLevel] = Field(default_factory=list)
    subscriptions: list[SubscriptionEntry] = Field(default_factory=list)
