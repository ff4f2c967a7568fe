"""
Adapty webhook receiver

Always answers 200 so Adapty does not redeliver; whether anything happened is
only visible in the logs and the response message.
"""

import hmac
import json

from fastapi import APIRouter, Depends, Request
from loguru import logger
from pydantic import ValidationError

from wardrobe_api.context import AppContext
from wardrobe_api.dependencies.context import get_app_context
from wardrobe_api.models.common import APIResponse
from wardrobe_api.models.webhook import AdaptyWebhookEvent

router = APIRouter()


def _is_authorized(request: Request, expected: str | None) -> bool:
    if not expected:
        return True
    received = request.headers.get("authorization", "")
    return hmac.compare_digest(received.encode(), expected.encode())


@router.post("/adapty", response_model=APIResponse)
async def adapty_webhook(request: Request, ctx: AppContext = Depends(get_app_context)):
    if not _is_authorized(request, ctx.settings.ADAPTY_WEBHOOK_AUTH):
        logger.warning("Adapty webhook with invalid Authorization header, ignoring")
        return APIResponse(success=True, message="ignored")

    body = await request.body()
    if not body.strip():
        # Adapty sends an empty request when the webhook URL is saved
        return APIResponse(success=True, message="ok")

    try:
        event = AdaptyWebhookEvent.model_validate(json.loads(body))
    except (json.JSONDecodeError, UnicodeDecodeError, ValidationError) as e:
        logger.warning(f"Unreadable Adapty webhook payload: {e}")
        return APIResponse(success=True, message="ignored")

    logger.info(f"Adapty webhook: {event.event_type or '<empty>'} for {event.profile_id or '<none>'}")
    try:
        reconciled = await ctx.subscriptions.reconcile_from_event(event)
    except Exception as e:
        logger.exception(f"Adapty webhook handling failed: {e}")
        reconciled = False

    return APIResponse(
        success=True,
        message="reconciled" if reconciled else "ignored",
        data={"event_type": event.event_type},
    )
