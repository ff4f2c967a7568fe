#!/usr/bin/env python3
"""
Adapty server-side API adapter

fetch_profile is the only place that knows Adapty's response shapes. Everything
downstream works with SubscriptionProfile.
"""

from datetime import datetime
from typing import Any

import httpx
from loguru import logger
from pydantic import ValidationError

from wardrobe_api.models.subscription import AccessLevel, SubscriptionEntry, SubscriptionProfile
from wardrobe_api.utils.errors import ProfileNotFoundError, SubscriptionProviderError

NOT_FOUND_ERROR_CODES = {"profile_does_not_exist", "not_found", "profile_not_found"}


def _as_items(value: Any) -> list[dict[str, Any]]:
    """Adapty has returned these collections both as lists and as dicts keyed by id"""
    if isinstance(value, dict):
        items = []
        for key, item in value.items():
            if isinstance(item, dict):
                items.append({"_key": key, **item})
        return items
    if isinstance(value, list):
        return [item for item in value if isinstance(item, dict)]
    return []


def _parse_datetime(value: Any) -> datetime | None:
    """None only when the field is absent, a value that does not parse is a provider error"""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError as e:
        logger.error(f"Unparseable timestamp from Adapty: {value!r}")
        raise SubscriptionProviderError("Malformed timestamp in Adapty profile", value=str(value)) from e


def _parse_access_level(item: dict[str, Any]) -> AccessLevel:
    return AccessLevel(
        access_level_id=str(item.get("access_level_id") or item.get("id") or item.get("_key") or ""),
        is_active=bool(item.get("is_active", False)),
        is_lifetime=bool(item.get("is_lifetime", False)),
        expires_at=_parse_datetime(item.get("expires_at")),
    )


def _parse_subscription(item: dict[str, Any]) -> SubscriptionEntry:
    product_id = (
        item.get("vendor_product_id")
        or item.get("store_product_id")
        or item.get("product_id")
        or item.get("_key")
        or ""
    )
    is_active = item.get("is_active")
    return SubscriptionEntry(
        product_id=str(product_id),
        is_active=None if is_active is None else bool(is_active),
        is_in_grace_period=bool(item.get("is_in_grace_period", False)),
        is_refund=bool(item.get("is_refund", False)),
        expires_at=_parse_datetime(item.get("expires_at")),
    )


def parse_profile(payload: Any, profile_id: str = "") -> SubscriptionProfile:
    """Translate an Adapty profile response into a SubscriptionProfile

    Missing collections give an empty profile, which the quota policy treats as
    having no subscription.
    """
    if not isinstance(payload, dict):
        raise SubscriptionProviderError("Unexpected Adapty profile response", profile_id=profile_id)

    data = payload.get("data", payload)
    if not isinstance(data, dict):
        raise SubscriptionProviderError("Unexpected Adapty profile response", profile_id=profile_id)

    access_levels = data.get("access_levels")
    if access_levels is None:
        access_levels = data.get("paid_access_levels")

    try:
        return SubscriptionProfile(
            profile_id=str(data.get("profile_id") or profile_id),
            customer_user_id=data.get("customer_user_id"),
            access_levels=[_parse_access_level(item) for item in _as_items(access_levels)],
            subscriptions=[_parse_subscription(item) for item in _as_items(data.get("subscriptions"))],
        )
    except ValidationError as e:
        raise SubscriptionProviderError("Malformed Adapty profile", profile_id=profile_id) from e


def _is_not_found(response: httpx.Response) -> bool:
    if response.status_code == 404:
        return True
    try:
        body = response.json()
    except ValueError:
        return False
    code = str(body.get("error_code", "")).lower() if isinstance(body, dict) else ""
    return code in NOT_FOUND_ERROR_CODES


class AdaptyClient:
    """Read-only subscription profile lookups"""

    def __init__(
        self,
        api_url: str,
        secret_key: str | None,
        timeout: float = 15.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.api_url = api_url.rstrip("/")
        self.secret_key = secret_key
        self._client = http_client or httpx.AsyncClient(timeout=timeout)

    async def fetch_profile(self, profile_id: str) -> SubscriptionProfile:
        """Look up a profile by Adapty profile id

        Raises ProfileNotFoundError when Adapty does not know the id and
        SubscriptionProviderError for every other failure.
        """
        if not self.secret_key:
            raise SubscriptionProviderError("ADAPTY_SECRET_KEY is not configured")

        headers = {
            "Authorization": f"Api-Key {self.secret_key}",
            "adapty-profile-id": profile_id,
            "Accept": "application/json",
        }
        try:
            response = await self._client.get(f"{self.api_url}/profile/", headers=headers)
        except httpx.HTTPError as e:
            logger.error(f"Adapty request failed for {profile_id}: {e}")
            raise SubscriptionProviderError("Adapty request failed", profile_id=profile_id) from e

        if response.status_code >= 400 and _is_not_found(response):
            logger.info(f"Adapty profile not found: {profile_id}")
            raise ProfileNotFoundError(profile_id)

        if response.status_code != 200:
            logger.error(f"Adapty returned {response.status_code} for {profile_id}")
            raise SubscriptionProviderError(
                f"Adapty returned {response.status_code}", profile_id=profile_id, status_code=response.status_code
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise SubscriptionProviderError("Adapty returned invalid JSON", profile_id=profile_id) from e

        return parse_profile(payload, profile_id)

    async def close(self) -> None:
        await self._client.aclose()
