from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from villatours.app import App
from villatours.config import Config
from villatours.web.cookies import CookieSettings
from villatours.web.error_handlers import register_error_handlers
from villatours.web.middleware import RateLimitMiddleware
from villatours.web.openapi import set_custom_openapi
from villatours.web.routers import (
    admin_router,
    after_payments_router,
    gallery_router,
    inclusions_router,
    packages_router,
    payments_router,
    trending_router,
)


def create_fastapi_app(app_instance: App, config: Config) -> FastAPI:
    """Create and configure FastAPI application."""

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncGenerator[None]:
        async with app_instance.lifespan():
            yield

    app = FastAPI(
        title="Villa Tours API",
        lifespan=lifespan,
        openapi_tags=[],
    )
    app.state.app = app_instance
    app.state.config = config
    app.state.cookie_settings = CookieSettings.from_config(config)

    if config.rate_limit > 0:
        app.add_middleware(RateLimitMiddleware, limit=config.rate_limit)

    # Added last so CORS headers are present on every response, including 429s
    if config.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.cors_origins,
            allow_credentials=True,
            allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            allow_headers=["Content-Type", "Authorization", "X-CSRF-Token"],
        )

    @app.get("/", response_class=PlainTextResponse, include_in_schema=False)
    async def root() -> str:
        return "API working"

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        return {"status": "healthy"}

    app.include_router(packages_router, prefix="/api/package")
    app.include_router(inclusions_router, prefix="/api/include")
    app.include_router(trending_router, prefix="/api/trending")
    app.include_router(admin_router, prefix="/api/admin")
    app.include_router(gallery_router, prefix="/api/gallery")
    app.include_router(payments_router, prefix="/api/payments")
    app.include_router(after_payments_router, prefix="/api/after-payments")
    # The payment routes are served under both prefixes
    app.include_router(payments_router, prefix="/api/after-payments", include_in_schema=False)

    register_error_handlers(app)
    set_custom_openapi(app)

    return app
