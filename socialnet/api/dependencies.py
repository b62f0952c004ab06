"""API Dependencies — FastAPI providers for services, collaborators and the current user.

Invariants:
    - Services are built per request over the process-wide unit-of-work factory
    - The key registry, mailer and media probe are built once per process (lru_cache)
    - get_current_user raises NotAuthenticatedError; get_optional_user answers None

Design Decisions:
    - Every provider is a plain function so tests swap any of them via dependency_overrides
"""

from functools import lru_cache

from fastapi import Depends, Request, Response

from socialnet.api.token_store import CookieTokenStore
from socialnet.config import get_settings
from socialnet.core.boundary_protocols import LoginMailer, MediaProbe, TokenStore
from socialnet.core.errors import NotAuthenticatedError
from socialnet.db.key_registry import KeyRegistry
from socialnet.infrastructure.database import DatabaseSessionManager, get_db_manager
from socialnet.infrastructure.mail_transport import build_mailer
from socialnet.infrastructure.media_probe import HttpMediaProbe
from socialnet.models import LoginSession, User, build_key_registry
from socialnet.services.aggregator_service import AggregatorService
from socialnet.services.auth_service import AuthService
from socialnet.services.entity_service import EntityService
from socialnet.services.posts_service import PostsService
from socialnet.services.users_service import UsersService


@lru_cache
def get_key_registry() -> KeyRegistry:
    return build_key_registry()


@lru_cache
def get_mailer() -> LoginMailer:
    return build_mailer(get_settings())


@lru_cache
def get_media_probe() -> MediaProbe:
    return HttpMediaProbe(get_settings().media_probe_timeout_seconds)


def get_token_store(request: Request, response: Response) -> TokenStore:
    return CookieTokenStore(request, response, get_settings().token_cookie_name)


def get_auth_service(
    db: DatabaseSessionManager = Depends(get_db_manager),
    registry: KeyRegistry = Depends(get_key_registry),
    mailer: LoginMailer = Depends(get_mailer),
) -> AuthService:
    return AuthService(
        users=EntityService(User, db, registry),
        sessions=EntityService(LoginSession, db, registry),
        mailer=mailer,
        public_base_url=get_settings().public_base_url,
    )


def get_posts_service(
    db: DatabaseSessionManager = Depends(get_db_manager),
    registry: KeyRegistry = Depends(get_key_registry),
    media_probe: MediaProbe = Depends(get_media_probe),
) -> PostsService:
    return PostsService(
        db, registry, media_probe, get_settings().allowed_media_types,
    )


def get_users_service(
    db: DatabaseSessionManager = Depends(get_db_manager),
    registry: KeyRegistry = Depends(get_key_registry),
) -> UsersService:
    return UsersService(db, registry, get_settings().default_user_image)


def get_aggregator_service(
    db: DatabaseSessionManager = Depends(get_db_manager),
    registry: KeyRegistry = Depends(get_key_registry),
) -> AggregatorService:
    return AggregatorService(db, registry)


async def get_optional_user(
    auth: AuthService = Depends(get_auth_service),
    token_store: TokenStore = Depends(get_token_store),
) -> User | None:
    return await auth.authenticate(token_store)


async def get_current_user(
    user: User | None = Depends(get_optional_user),
) -> User:
    if user is None:
        raise NotAuthenticatedError()
    return user
