"""
Wayfarer Service - FastAPI Application
- POST /search            -> travel search proxied to the text-generation provider
- GET/POST /comments      -> list / add comments
- DELETE /comments/{id}   -> remove a comment
- GET /comments/init      -> create the comment store if missing
- GET /health             -> liveness

Every route is also served under /api for the bundled front end.
"""

import sys
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from loguru import logger

from .api import comments_router, health_router, search_router
from .comments.service import CommentService
from .config import Settings, settings as default_settings
from .errors import UpstreamError, WayfarerError
from .llm.search_client import TravelSearchClient
from .store.base import CommentStore
from .store.factory import create_comment_store


# ============================================
# Logging
# ============================================

def setup_logging(level: str = "INFO"):
    """Single stderr sink for loguru"""
    logger.remove()
    logger.add(
        sys.stderr,
        level=level.upper(),
        format="{time:YYYY-MM-DD HH:mm:ss} - {name} - {level} - {message}",
        backtrace=False,
        diagnose=False,
    )


# ============================================
# Error handlers
# ============================================

def register_error_handlers(app: FastAPI, config: Settings):

    @app.exception_handler(WayfarerError)
    async def wayfarer_error_handler(request: Request, exc: WayfarerError):
        # Upstream detail is only echoed outside production
        include_detail = isinstance(exc, UpstreamError) and not config.is_production
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} -> {exc.status_code} {exc.message}: {exc.detail}")
        else:
            logger.info(f"{request.method} {request.url.path} -> {exc.status_code} {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict(include_detail))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        fields = []
        for error in exc.errors():
            location = [str(part) for part in error.get("loc", ()) if part != "body"]
            fields.append({"field": ".".join(location) or "body", "message": error.get("msg", "invalid")})
        logger.info(f"{request.method} {request.url.path} -> 400 invalid request: {fields}")
        return JSONResponse(status_code=400, content={"error": "invalid request", "fields": fields})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.opt(exception=exc).error(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(status_code=500, content={"error": "internal error"})


# ============================================
# Application Factory
# ============================================

def create_app(
    config: Optional[Settings] = None,
    store: Optional[CommentStore] = None,
    search_client: Optional[TravelSearchClient] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        config: Settings (defaults to the environment-loaded settings)
        store: Comment store override (defaults to the configured backend)
        search_client: Search client override

    Returns:
        FastAPI: Ready-to-serve application
    """
    config = config or default_settings
    store = store or create_comment_store(config)
    search_client = search_client or TravelSearchClient(config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("=" * 50)
        logger.info("Starting Wayfarer Service")
        logger.info("=" * 50)
        logger.info(f"Environment: {config.API_ENV}")
        logger.info(f"Comment store: {store.name}")
        if config.search_configured:
            logger.info(f"Search provider: {config.GEMINI_API_URL} (auth={config.GEMINI_AUTH_MODE})")
        else:
            logger.warning("GEMINI_API_URL and GEMINI_API_KEY are not set; /search will return 502")

        yield

        await search_client.close()
        await store.close()
        logger.info("Wayfarer Service shutdown complete")

    app = FastAPI(
        title="Wayfarer Service",
        description="Travel search proxy and comment store.",
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.state.settings = config
    app.state.store = store
    app.state.comment_service = CommentService(store)
    app.state.search_client = search_client

    # CORS
    origins = config.cors_origins_list or ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app, config)

    for router in (health_router, search_router, comments_router):
        app.include_router(router)
        app.include_router(router, prefix="/api", include_in_schema=False)

    # Front end, if configured; mounted last so API routes win
    if config.STATIC_DIR:
        app.mount("/", StaticFiles(directory=config.STATIC_DIR, html=True), name="static")

    return app


setup_logging(default_settings.LOG_LEVEL)
app = create_app()


def run():
    import uvicorn
    uvicorn.run(
        "wayfarer.main:app",
        host=default_settings.API_HOST,
        port=default_settings.API_PORT,
        reload=default_settings.API_ENV == "development",
    )


if __name__ == "__main__":
    run()
