"""
Common response models
"""

from typing import Any

from pydantic import BaseModel, Field


class APIResponse(BaseModel):
    """Generic API envelope"""
    success: bool = Field(True, description="Whether the call succeeded")
    message: str = Field("", description="Human readable message")
    data: dict[str, Any] | None = Field(None, description="Payload")
