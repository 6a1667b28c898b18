"""Inkwell posts API.

Read-only access to synced posts plus the like counter:

    GET  {prefix}/posts              all posts, newest first
    GET  {prefix}/posts/{slug}       one post, 404 if unknown
    POST {prefix}/posts/{slug}/like  add one like, 404 if unknown
    GET  /health

Run with ``inkwell-api`` or ``python -m server.blog_api``.
"""

import datetime
import logging
from contextlib import asynccontextmanager
from typing import List, Optional

import uvicorn
from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import ConfigurationError, Settings, StoreAdapter, database_config_from_settings, open_store
from observability.logging import setup_logging
from store import Post

logger = logging.getLogger(__name__)

NOT_FOUND = {"msg": "Post not found"}

router = APIRouter()


def get_store(request: Request) -> StoreAdapter:
    """Dependency to get the store adapter."""
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise HTTPException(status_code=500, detail="Database not initialized")
    return store


@router.get("/posts", response_model=List[Post])
async def list_posts(store: StoreAdapter = Depends(get_store)):
    """Get all blog posts, newest first."""
    try:
        return await store.find_all()
    except Exception as e:
        logger.error(f"Failed to list posts: {e}")
        raise HTTPException(status_code=500, detail="Server Error")


@router.get("/posts/{slug}", response_model=Post)
async def get_post(slug: str, store: StoreAdapter = Depends(get_store)):
    """Get a single post by slug."""
    try:
        post = await store.find_one_by_slug(slug)
    except Exception as e:
        logger.error(f"Failed to load post {slug}: {e}")
        raise HTTPException(status_code=500, detail="Server Error")
    if post is None:
        return JSONResponse(NOT_FOUND, status_code=404)
    return post


@router.post("/posts/{slug}/like", response_model=Post)
async def like_post(slug: str, store: StoreAdapter = Depends(get_store)):
    """Increment the like count of a post."""
    try:
        post = await store.increment_likes(slug)
    except Exception as e:
        logger.error(f"Failed to like post {slug}: {e}")
        raise HTTPException(status_code=500, detail="Server Error")
    if post is None:
        return JSONResponse(NOT_FOUND, status_code=404)
    return post


def create_app(settings: Settings, store: Optional[StoreAdapter] = None) -> FastAPI:
    """Build the API application.

    When ``store`` is given it is used as is and its lifecycle belongs to the
    caller; otherwise the app opens the store from DATABASE_URL on startup
    and closes it on shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if store is not None:
            yield
            return
        async with open_store(database_config_from_settings(settings)) as opened:
            app.state.store = opened
            logger.info(f"Database initialized: {type(opened).__name__}")
            try:
                yield
            finally:
                app.state.store = None

    app = FastAPI(title="Inkwell API", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health():
        """Liveness plus a store check; ``ok`` is false when the store cannot be read."""
        status = {
            "ok": True,
            "time": datetime.datetime.now(datetime.timezone.utc).isoformat(),
            "database": {"status": "unavailable"},
        }
        current = app.state.store
        if current is None:
            status["ok"] = False
            return status
        try:
            status["database"] = {"status": "healthy", "posts": await current.count_posts()}
        except Exception as e:
            logger.error(f"Health check failed to read the store: {e}")
            status["ok"] = False
            status["database"] = {"status": "unhealthy"}
        return status

    app.include_router(router, prefix=settings.api_prefix.rstrip('/'))
    return app


def run() -> None:
    """Serve the API with uvicorn."""
    try:
        settings = Settings.from_env()
    except ConfigurationError as e:
        setup_logging(Settings(), "inkwell-api")
        logger.error(f"Error: {e}")
        raise SystemExit(1)
    setup_logging(settings, "inkwell-api")
    try:
        settings.require_database_url()
    except ConfigurationError as e:
        logger.error(f"Error: {e}")
        raise SystemExit(1)
    uvicorn.run(
        create_app(settings),
        host=settings.api_host,
        port=settings.api_port,
        log_config=None
    )


if __name__ == "__main__":
    run()
