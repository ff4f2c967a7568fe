#!/usr/bin/env python3
"""
FastAPI application entry point
"""

import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from wardrobe_api.config import Settings, settings
from wardrobe_api.config.logging_config import setup_logging
from wardrobe_api.context import AppContext
from wardrobe_api.utils.errors import ErrorCode, StandardErrorResponse


def create_fastapi_app(app_settings: Settings = settings, context: AppContext | None = None) -> FastAPI:
    """Create the FastAPI application

    When a context is given it is used as-is and not closed on shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(level=app_settings.LOG_LEVEL)
        logger.info("🚀 Wardrobe API starting...")

        owns_context = context is None
        try:
            app.state.context = AppContext.create(app_settings) if owns_context else context
            health_ok = await app.state.context.store.health_check()
            if health_ok:
                logger.info("✅ Supabase connection OK")
            else:
                logger.warning("⚠️ Supabase connection check failed")
            logger.info(f"⚙️ Configuration: {app_settings.get_config_summary()}")
            logger.info("✅ Wardrobe API started")
        except Exception as e:
            logger.error(f"❌ Startup failed: {e}")
            raise

        yield

        try:
            if owns_context:
                await app.state.context.close()
            logger.info("👋 Wardrobe API stopped")
        except Exception as e:
            logger.error(f"❌ Shutdown cleanup failed: {e}")

    app = FastAPI(
        title=app_settings.APP_NAME,
        description=app_settings.APP_DESCRIPTION,
        version=app_settings.APP_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
        debug=app_settings.DEBUG,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(TrustedHostMiddleware, allowed_hosts=app_settings.TRUSTED_HOSTS)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        fields = {
            ".".join(str(part) for part in error["loc"] if part != "body"): error["msg"]
            for error in exc.errors()
        }
        return JSONResponse(
            status_code=400,
            content={
                "detail": StandardErrorResponse(
                    error_code=ErrorCode.INVALID_ARGUMENT.value,
                    message="Missing or invalid request fields",
                    details={"fields": fields},
                ).model_dump()
            },
        )

    from wardrobe_api.routers import quota, wardrobe, webhooks

    app.include_router(quota.router, prefix="/api/quota", tags=["Quota"])
    app.include_router(wardrobe.router, prefix="/api/wardrobe", tags=["Wardrobe"])
    app.include_router(webhooks.router, prefix="/api/webhooks", tags=["Webhooks"])

    @app.get("/")
    async def root():
        return {
            "message": f"{app_settings.APP_NAME} - {'debug' if app_settings.DEBUG else 'production'} mode",
            "version": app_settings.APP_VERSION,
            "docs": "/docs",
        }

    @app.get("/health")
    async def health_check(request: Request):
        store_ok = await request.app.state.context.store.health_check()
        return {"status": "healthy" if store_ok else "degraded", "store": store_ok}

    return app


app = create_fastapi_app()


if __name__ == "__main__":
    import uvicorn

    host = os.environ.get("SERVER_HOST", "0.0.0.0")
    port = int(os.environ.get("SERVER_PORT", 8080))

    logger.info(f"🚀 Starting server on http://{host}:{port}")

    uvicorn.run(
        "main_fastapi:app",
        host=host,
        port=port,
        reload=settings.DEBUG,
        log_level="debug" if settings.DEBUG else "info",
        reload_dirs=["./wardrobe_api"] if settings.DEBUG else None,
    )
