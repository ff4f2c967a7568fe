"""
Quota-gated wardrobe actions

Each route takes one use from its counter, then calls the generation model.
A failed generation does not give the use back.
"""

from fastapi import APIRouter, Depends, HTTPException
from loguru import logger

from wardrobe_api.context import AppContext
from wardrobe_api.dependencies.context import get_app_context
from wardrobe_api.models.quota import QuotaCounter
from wardrobe_api.models.wardrobe import (
    AnalyzeClothingRequest,
    ClothingAnalysis,
    OutfitSuggestionRequest,
    OutfitSuggestionResponse,
    VirtualTryOnRequest,
    VirtualTryOnResponse,
)
from wardrobe_api.utils.errors import http_error_for

router = APIRouter()


@router.post("/analyze", response_model=ClothingAnalysis)
async def analyze_clothing_image(request: AnalyzeClothingRequest, ctx: AppContext = Depends(get_app_context)):
    """Categorize and describe a clothing item"""
    try:
        await ctx.quotas.consume_quota(request.adapty_user_id, QuotaCounter.CLOTH_ANALYSIS)
        analysis = await ctx.generator.analyze_clothing(request.image_base_64)
        logger.info(f"Clothing analysis for {request.adapty_user_id}: {analysis.category}")
        return analysis
    except HTTPException:
        raise
    except Exception as e:
        raise http_error_for(e, f"Clothing analysis for {request.adapty_user_id}") from e


@router.post("/try-on", response_model=VirtualTryOnResponse)
async def virtual_try_on(request: VirtualTryOnRequest, ctx: AppContext = Depends(get_app_context)):
    """Render the garment on the pose image"""
    try:
        await ctx.quotas.consume_quota(request.adapty_user_id, QuotaCounter.TRY_ONS)
        image_url = await ctx.generator.virtual_try_on(request.pose_image_base_64, request.clothing_image_base_64)
        return VirtualTryOnResponse(result_image_url=image_url)
    except HTTPException:
        raise
    except Exception as e:
        raise http_error_for(e, f"Virtual try-on for {request.adapty_user_id}") from e


@router.post("/suggestion", response_model=OutfitSuggestionResponse)
async def get_outfit_suggestion(request: OutfitSuggestionRequest, ctx: AppContext = Depends(get_app_context)):
    """Pick an outfit from the user's wardrobe for the prompt"""
    try:
        await ctx.quotas.consume_quota(request.adapty_user_id, QuotaCounter.SUGGESTIONS)
        suggested_ids = await ctx.generator.suggest_outfit(request.user_prompt, request.clothing_items)
        logger.info(f"Outfit suggestion for {request.adapty_user_id}: {len(suggested_ids)} items")
        return OutfitSuggestionResponse(suggested_clothing_ids=suggested_ids)
    except HTTPException:
        raise
    except Exception as e:
        raise http_error_for(e, f"Outfit suggestion for {request.adapty_user_id}") from e
