"""
Request and response models for the quota-gated wardrobe actions
"""

from pydantic import BaseModel, ConfigDict, Field


class AnalyzeClothingRequest(BaseModel):
    """Clothing analysis request"""
    adapty_user_id: str = Field(..., min_length=1, description="Adapty profile id")
    image_base_64: str = Field(..., min_length=1, description="JPEG image, base64 encoded")


class ClothingAnalysis(BaseModel):
    """Category and description of a clothing item"""
    category: str = Field(..., description="One of the supported categories")
    description: str = Field(..., description="Physical details and suitable occasions")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "category": "Shirt",
                "description": "A white, long-sleeved cotton shirt with a classic collar and regular fit. "
                               "Suitable for casual or smart casual occasions in mild weather.",
            }
        }
    )


class VirtualTryOnRequest(BaseModel):
    """Virtual try-on request"""
    adapty_user_id: str = Field(..., min_length=1, description="Adapty profile id")
    pose_image_base_64: str = Field(..., min_length=1, description="Photo of the person, base64 encoded")
    clothing_image_base_64: str = Field(..., min_length=1, description="Photo of the garment, base64 encoded")


class VirtualTryOnResponse(BaseModel):
    result_image_url: str = Field(..., description="URL of the generated image")


class ClothingItem(BaseModel):
    id: str = Field(..., min_length=1, description="Client-side clothing id")
    description: str = Field("", description="Description produced by clothing analysis")


class OutfitSuggestionRequest(BaseModel):
    """Outfit suggestion request"""
    adapty_user_id: str = Field(..., min_length=1, description="Adapty profile id")
    user_prompt: str = Field(..., min_length=1, description="What the user wants to wear it for")
    clothing_items: list[ClothingItem] = Field(..., description="The user's wardrobe")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "adapty_user_id": "3f1c7a52-8a3e-4f8e-9b5d-2f7f4c1d9e10",
                "user_prompt": "Dinner with friends on a rainy autumn evening",
                "clothing_items": [
                    {"id": "c1", "description": "Dark blue slim fit jeans"},
                    {"id": "c2", "description": "Grey wool sweater"},
                ],
            }
        }
    )


class OutfitSuggestionResponse(BaseModel):
    suggested_clothing_ids: list[str] = Field(default_factory=list)
