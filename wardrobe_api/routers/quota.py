"""
Quota routes: tier lookup and explicit subscription sync
"""

from fastapi import APIRouter, Depends, HTTPException

from wardrobe_api.context import AppContext
from wardrobe_api.dependencies.context import get_app_context
from wardrobe_api.models.quota import SyncResponse, TierResponse, UserIdRequest
from wardrobe_api.utils.errors import http_error_for

router = APIRouter()


@router.post("/tier", response_model=TierResponse)
async def get_user_tier(request: UserIdRequest, ctx: AppContext = Depends(get_app_context)):
    """Current tier and remaining counters, provisioning the record on first use"""
    try:
        record = await ctx.entitlements.resolve(request.adapty_user_id)
        return TierResponse.from_record(record)
    except HTTPException:
        raise
    except Exception as e:
        raise http_error_for(e, f"Tier query for {request.adapty_user_id}") from e


@router.post("/sync", response_model=SyncResponse)
async def sync_user_tier(request: UserIdRequest, ctx: AppContext = Depends(get_app_context)):
    """Recompute tier and counters from Adapty and overwrite the stored record"""
    try:
        record = await ctx.subscriptions.reconcile(request.adapty_user_id)
        return SyncResponse.from_record(record)
    except HTTPException:
        raise
    except Exception as e:
        raise http_error_for(e, f"Subscription sync for {request.adapty_user_id}") from e
