"""
Quota record and tier Pydantic models
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Tier(str, Enum):
    freemium = "freemium"
    premium = "premium"
    ultra_premium = "ultra_premium"


class QuotaCounter(str, Enum):
    """Consumable counters, values are the stored field names"""

    TRY_ONS = "remainingTryOns"
    SUGGESTIONS = "remainingSuggestions"
    CLOTH_ANALYSIS = "remainingClothAnalysis"


class QuotaCounters(BaseModel):
    """Counter values assigned by the quota policy"""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    try_ons: int = Field(..., ge=0, alias="remainingTryOns")
    suggestions: int = Field(..., ge=0, alias="remainingSuggestions")
    cloth_analysis: int = Field(..., ge=0, alias="remainingClothAnalysis")

    def as_fields(self) -> dict[str, int]:
        return self.model_dump(by_alias=True)


class QuotaAssignment(BaseModel):
    """Output of the quota policy: tier label plus counters"""

    model_config = ConfigDict(frozen=True)

    tier: Tier
    counters: QuotaCounters


class QuotaRecord(BaseModel):
    """Per-user entitlement state persisted in the quota table"""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="Adapty profile id")
    tier: Tier = Field(..., description="Tier label")
    remaining_try_ons: int | None = Field(None, alias="remainingTryOns")
    remaining_suggestions: int | None = Field(None, alias="remainingSuggestions")
    remaining_cloth_analysis: int | None = Field(None, alias="remainingClothAnalysis")
    created_at: datetime = Field(..., alias="createdAt")
    last_synced_with_adapty: datetime | None = Field(None, alias="lastSyncedWithAdapty")

    @classmethod
    def from_assignment(cls, user_id: str, assignment: QuotaAssignment, now: datetime) -> QuotaRecord:
        return cls(
            id=user_id,
            tier=assignment.tier,
            created_at=now,
            last_synced_with_adapty=now,
            **assignment.counters.as_fields(),
        )

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> QuotaRecord:
        return cls.model_validate(document)

    def to_document(self) -> dict[str, Any]:
        """Row shape stored in Supabase (camelCase columns, ISO timestamps)"""
        return self.model_dump(mode="json", by_alias=True)

    def remaining(self, counter: QuotaCounter) -> int | None:
        return {
            QuotaCounter.TRY_ONS: self.remaining_try_ons,
            QuotaCounter.SUGGESTIONS: self.remaining_suggestions,
            QuotaCounter.CLOTH_ANALYSIS: self.remaining_cloth_analysis,
        }[counter]


class UserIdRequest(BaseModel):
    """Body for tier and sync calls"""

    adapty_user_id: str = Field(..., min_length=1, description="Adapty profile id")

    model_config = ConfigDict(
        json_schema_extra={"example": {"adapty_user_id": "3f1c7a52-8a3e-4f8e-9b5d-2f7f4c1d9e10"}}
    )


class TierResponse(BaseModel):
    """Public view of a quota record"""

    model_config = ConfigDict(populate_by_name=True)

    tier: Tier
    remaining_try_ons: int | None = Field(None, serialization_alias="remainingTryOns")
    remaining_suggestions: int | None = Field(None, serialization_alias="remainingSuggestions")
    remaining_cloth_analysis: int | None = Field(None, serialization_alias="remainingClothAnalysis")
    created_at: datetime = Field(..., serialization_alias="createdAt")

    @classmethod
    def from_record(cls, record: QuotaRecord) -> TierResponse:
        return cls(
            tier=record.tier,
            remaining_try_ons=record.remaining_try_ons,
            remaining_suggestions=record.remaining_suggestions,
            remaining_cloth_analysis=record.remaining_cloth_analysis,
            created_at=record.created_at,
        )


class SyncResponse(TierResponse):
    """Quota record after a reconciliation"""

    last_synced_with_adapty: datetime | None = Field(None, serialization_alias="lastSyncedWithAdapty")

    @classmethod
    def from_record(cls, record: QuotaRecord) -> SyncResponse:
        return cls(
            tier=record.tier,
            remaining_try_ons=record.remaining_try_ons,
            remaining_suggestions=record.remaining_suggestions,
            remaining_cloth_analysis=record.remaining_cloth_analysis,
            created_at=record.created_at,
            last_synced_with_adapty=record.last_synced_with_adapty,
        )
