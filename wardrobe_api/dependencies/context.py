"""
Application context dependency
"""

from fastapi import Request

from wardrobe_api.context import AppContext


def get_app_context(request: Request) -> AppContext:
    return request.app.state.context
