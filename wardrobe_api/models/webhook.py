"""
Adapty webhook payload
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class AdaptyWebhookEvent(BaseModel):
    """Inbound subscription lifecycle event, unknown fields are kept"""

    model_config = ConfigDict(extra="allow")

    event_type: str = ""
    profile_id: str = ""
    customer_user_id: str | None = None
    event_properties: dict[str, Any] = Field(default_factory=dict)
