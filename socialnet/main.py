"""socialnet API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map SocialError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database and key registry initialized on startup via lifespan context manager

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - The key registry is built during startup so a misconfigured entity type stops the
      process before it serves a request
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from socialnet.api.dependencies import get_key_registry
from socialnet.api.error_handlers import register_error_handlers
from socialnet.api.routes import auth, feed, health, posts, users
from socialnet.config import get_settings
from socialnet.infrastructure.database import init_db
from socialnet.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    get_key_registry()
    db = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    logger.info(f"{settings.page_title} API started")
    yield
    await db.dispose()
    logger.info(f"{settings.page_title} API shutting down")


app = FastAPI(title="socialnet API", version="1.0.0", lifespan=lifespan)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(auth.router)
app.include_router(auth.link_router)
app.include_router(posts.router)
app.include_router(feed.router)
app.include_router(users.router)

register_error_handlers(app)
