#!/usr/bin/env python3
"""
Supabase quota record store

One row per Adapty profile id in the quota table. Counter decrements go through
the consume_quota Postgres function so the check and the update happen in one
statement (see supabase/migrations).
"""

from datetime import datetime
from typing import Any, Protocol

from loguru import logger
from supabase import Client

from wardrobe_api.models.quota import QuotaCounter, QuotaCounters, QuotaRecord, Tier
from wardrobe_api.utils.errors import QuotaStoreError

CONSUME_QUOTA_RPC = "consume_quota"


class QuotaStore(Protocol):
    """Key-value store of quota records keyed by user id"""

    async def get_record(self, user_id: str) -> QuotaRecord | None: ...

    async def create_record(self, record: QuotaRecord) -> QuotaRecord: ...

    async def overwrite_quotas(
        self, user_id: str, tier: Tier, counters: QuotaCounters, synced_at: datetime
    ) -> QuotaRecord: ...

    async def decrement_if_positive(self, user_id: str, counter: QuotaCounter) -> int | None: ...

    async def health_check(self) -> bool: ...


class SupabaseService:
    """Quota record store backed by a Supabase table"""

    def __init__(self, client: Client | None, table_name: str = "users"):
        self.client = client
        self.table_name = table_name
        if self.client:
            logger.info(f"SupabaseService initialized (table: {table_name})")
        else:
            logger.error("SupabaseService initialization failed: no Supabase client")

    def _table(self):
        if self.client is None:
            raise QuotaStoreError("Supabase client is not configured")
        return self.client.table(self.table_name)

    # ==================== Generic helpers ====================

    async def _get_record_by_field(self, field_name: str, field_value: Any) -> dict[str, Any] | None:
        try:
            result = self._table().select("*").eq(field_name, field_value).limit(1).execute()
        except QuotaStoreError:
            raise
        except Exception as e:
            logger.error(f"Failed to read from {self.table_name}: {e}")
            raise QuotaStoreError(f"Failed to read from {self.table_name}") from e
        return result.data[0] if result.data else None

    async def _create_record(self, data: dict[str, Any]) -> dict[str, Any]:
        try:
            result = self._table().insert(data).execute()
        except QuotaStoreError:
            raise
        except Exception as e:
            logger.error(f"Failed to insert into {self.table_name}: {e}")
            raise QuotaStoreError(f"Failed to insert into {self.table_name}") from e
        if not result.data:
            raise QuotaStoreError(f"Insert into {self.table_name} returned no row")
        logger.info(f"Created record in {self.table_name}")
        return result.data[0]

    async def _update_record(self, record_id: str, data: dict[str, Any], pk_field: str = "id") -> dict[str, Any] | None:
        try:
            result = self._table().update(data).eq(pk_field, record_id).execute()
        except QuotaStoreError:
            raise
        except Exception as e:
            logger.error(f"Failed to update {self.table_name}: {e}")
            raise QuotaStoreError(f"Failed to update {self.table_name}") from e
        return result.data[0] if result.data else None

    # ==================== Quota records ====================

    async def get_record(self, user_id: str) -> QuotaRecord | None:
        row = await self._get_record_by_field("id", user_id)
        return QuotaRecord.from_document(row) if row else None

    async def create_record(self, record: QuotaRecord) -> QuotaRecord:
        row = await self._create_record(record.to_document())
        return QuotaRecord.from_document(row)

    async def overwrite_quotas(
        self, user_id: str, tier: Tier, counters: QuotaCounters, synced_at: datetime
    ) -> QuotaRecord:
        """Replace tier, counters and sync time; insert the row if it does not exist"""
        update_data = {
            "tier": tier.value,
            **counters.as_fields(),
            "lastSyncedWithAdapty": synced_at.isoformat(),
        }
        row = await self._update_record(user_id, update_data)
        if row:
            return QuotaRecord.from_document(row)

        record = QuotaRecord(
            id=user_id,
            tier=tier,
            created_at=synced_at,
            last_synced_with_adapty=synced_at,
            **counters.as_fields(),
        )
        try:
            return await self.create_record(record)
        except QuotaStoreError:
            # Row provisioned concurrently between the update and the insert
            row = await self._update_record(user_id, update_data)
            if not row:
                raise
            logger.info(f"Quota record for {user_id} was created concurrently, overwrote it")
            return QuotaRecord.from_document(row)

    async def decrement_if_positive(self, user_id: str, counter: QuotaCounter) -> int | None:
        """Atomically take one use from a counter

        Returns the new value, or None when the counter is missing or not positive.
        """
        if self.client is None:
            raise QuotaStoreError("Supabase client is not configured")
        try:
            result = self.client.rpc(
                CONSUME_QUOTA_RPC, {"p_user_id": user_id, "p_counter": counter.value}
            ).execute()
        except Exception as e:
            logger.error(f"consume_quota failed for {user_id}/{counter.value}: {e}")
            raise QuotaStoreError("Failed to update quota counter") from e

        value = result.data
        if isinstance(value, list):
            value = value[0] if value else None
        if isinstance(value, dict):
            value = next(iter(value.values()), None)
        return int(value) if value is not None else None

    # ==================== Health ====================

    async def health_check(self) -> bool:
        try:
            self._table().select("id", count="exact").limit(1).execute()
            return True
        except Exception as e:
            logger.error(f"Health check failed: {e}")
            return False
