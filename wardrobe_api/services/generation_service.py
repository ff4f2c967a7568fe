#!/usr/bin/env python3
"""
Content generation on fal.ai

Clothing analysis and outfit suggestions use a vision-language model and parse
JSON out of its free-text answer. Virtual try-on returns the URL of the
generated image.
"""

import asyncio
import json
import re
from typing import Any

import aiohttp
from loguru import logger
from pydantic import ValidationError

from wardrobe_api.models.wardrobe import ClothingAnalysis, ClothingItem
from wardrobe_api.utils.errors import GenerationError

CLOTHING_CATEGORIES = [
    "T-Shirt", "Shirt", "Sweater", "Sweatshirt / Hoodie", "Blouse",
    "Pants", "Jeans", "Shorts", "Skirt",
    "Jacket", "Coat", "Blazer", "Vest",
    "Dress", "Jumpsuit",
    "Shoes", "Boots", "Sneakers", "Heels",
    "Hat", "Bag", "Belt", "Jewelry", "Scarf", "Sunglasses",
]

JSON_OBJECT_PATTERN = re.compile(r"\{[\s\S]*\}")
JSON_ARRAY_PATTERN = re.compile(r"\[.*?\]", re.DOTALL)


def build_analysis_prompt() -> str:
    category_list = ", ".join(CLOTHING_CATEGORIES)
    return f"""
Analyze the main clothing item in this image. Your response MUST be a valid JSON object.
The JSON object should have two keys: "category" and "description".

Instructions for the model:
1.  For the "category" value, you MUST choose the most appropriate category ONLY from this list: [{category_list}].
2.  For the "description" value, provide a single, comprehensive paragraph in English. This paragraph must describe the item's physical details (material, fit, color, patterns) AND its context (formality level, suitable occasions, and appropriate weather conditions).
3.  CRITICAL RULE: Your description must ONLY be about the garment. DO NOT mention the background, the surface it is on, or how it is positioned (e.g., "laid flat", "on a hanger"). Focus strictly on the item's own features.

Example JSON response:
{{
  "category": "Shirt",
  "description": "A white, long-sleeved shirt made of a smooth, possibly cotton material. It features a classic collar, a button-down front, and a regular fit. This piece is suitable for casual or smart casual occasions in mild weather."
}}
"""


def build_suggestion_prompt(user_prompt: str, clothing_items: list[ClothingItem]) -> str:
    descriptions = "\n".join(f"- ID: {item.id}, Description: {item.description}" for item in clothing_items)
    return f"""
Act as a professional fashion stylist. The user owns the following clothing items:
{descriptions}

The user's request: "{user_prompt}"

Pick the items from the list above that together make the best outfit for this request.
Respond ONLY with a JSON array containing the IDs of the chosen items, for example: ["id1", "id2", "id3"].
Do not invent IDs that are not in the list.
"""


def parse_analysis(output: str) -> ClothingAnalysis:
    """First JSON object in the model output as a ClothingAnalysis"""
    match = JSON_OBJECT_PATTERN.search(output or "")
    if not match:
        raise GenerationError("No JSON object in model output")
    try:
        return ClothingAnalysis.model_validate(json.loads(match.group(0)))
    except (json.JSONDecodeError, ValidationError) as e:
        raise GenerationError("Model output is not a valid clothing analysis") from e


def parse_suggestion(output: str, clothing_items: list[ClothingItem] | None = None) -> list[str]:
    """First JSON array in the model output, limited to known clothing ids"""
    match = JSON_ARRAY_PATTERN.search(output or "")
    if not match:
        raise GenerationError("No JSON array in model output")
    try:
        ids = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise GenerationError("Model output is not a valid JSON array") from e
    if not isinstance(ids, list):
        raise GenerationError("Model output is not a JSON array")

    suggested = [str(item_id) for item_id in ids if isinstance(item_id, (str, int))]
    if clothing_items is not None:
        known = {item.id for item in clothing_items}
        suggested = [item_id for item_id in suggested if item_id in known]
    return suggested


def _image_data_uri(image_base64: str) -> str:
    if image_base64.startswith("data:"):
        return image_base64
    return f"data:image/jpeg;base64,{image_base64}"


def _extract_image_url(result: dict[str, Any]) -> str | None:
    images = result.get("images")
    if isinstance(images, list) and images and isinstance(images[0], dict):
        return images[0].get("url")
    image = result.get("image")
    if isinstance(image, dict):
        return image.get("url")
    return None


class ContentGenerator:
    """fal.ai model calls"""

    def __init__(
        self,
        api_url: str,
        api_key: str | None,
        vision_model: str,
        tryon_model: str,
        timeout_seconds: float = 300,
    ):
        self.api_url = api_url.rstrip("/")
        self.api_key = api_key
        self.vision_model = vision_model
        self.tryon_model = tryon_model
        self.timeout_seconds = timeout_seconds

    async def _run_model(self, model: str, payload: dict[str, Any]) -> dict[str, Any]:
        if not self.api_key:
            raise GenerationError("FAL_KEY is not configured")

        headers = {
            "Authorization": f"Key {self.api_key}",
            "Content-Type": "application/json",
        }
        try:
            async with aiohttp.ClientSession() as session:
                async with session.post(
                    f"{self.api_url}/{model}",
                    headers=headers,
                    json=payload,
                    timeout=aiohttp.ClientTimeout(total=self.timeout_seconds),
                ) as response:
                    if response.status != 200:
                        error_content = await response.text()
                        logger.error(f"fal.ai {model} returned {response.status}: {error_content[:500]}")
                        raise GenerationError(f"fal.ai returned {response.status}", model=model)
                    result = await response.json(content_type=None)
        except asyncio.TimeoutError as e:
            logger.error(f"fal.ai {model} timed out after {self.timeout_seconds}s")
            raise GenerationError("fal.ai request timed out", model=model) from e
        except aiohttp.ClientError as e:
            logger.error(f"fal.ai {model} connection error: {e}")
            raise GenerationError("fal.ai request failed", model=model) from e

        if not isinstance(result, dict):
            raise GenerationError("Unexpected fal.ai response", model=model)
        return result

    async def analyze_clothing(self, image_base64: str) -> ClothingAnalysis:
        result = await self._run_model(self.vision_model, {
            "prompt": build_analysis_prompt(),
            "image_url": _image_data_uri(image_base64),
            "max_tokens": 256,
            "temperature": 0.2,
        })
        output = result.get("output") or "{}"
        try:
            return parse_analysis(output)
        except GenerationError:
            logger.error(f"Could not parse clothing analysis: {output[:500]}")
            raise

    async def suggest_outfit(self, user_prompt: str, clothing_items: list[ClothingItem]) -> list[str]:
        result = await self._run_model(self.vision_model, {
            "prompt": build_suggestion_prompt(user_prompt, clothing_items),
            "max_tokens": 512,
        })
        output = result.get("output") or "[]"
        try:
            return parse_suggestion(output, clothing_items)
        except GenerationError:
            logger.error(f"Could not parse outfit suggestion: {output[:500]}")
            raise

    async def virtual_try_on(self, pose_image_base64: str, clothing_image_base64: str) -> str:
        result = await self._run_model(self.tryon_model, {
            "model_image": _image_data_uri(pose_image_base64),
            "garment_image": _image_data_uri(clothing_image_base64),
            "category": "auto",
        })
        image_url = _extract_image_url(result)
        if not image_url:
            logger.error(f"Try-on response has no image: keys={list(result.keys())}")
            raise GenerationError("Try-on response has no image", model=self.tryon_model)
        return image_url
