"""Auth Routes — start/complete a magic-link login, inspect and drop the current session.

Invariants:
    - /login always answers 200 with a fresh request id
    - /login/complete answers {"success": false} on any failure, with no reason
    - The bearer token travels in the token cookie; it is never in a response body
    - GET /auth/complete/{request_id}/{secret} is the target of the mailed magic link
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends

from socialnet.api.dependencies import (
    get_auth_service,
    get_current_user,
    get_token_store,
)
from socialnet.core.boundary_protocols import TokenStore
from socialnet.models.user import User
from socialnet.schemas.auth import (
    LoginCompleteRequest,
    LoginCompleteResponse,
    LoginStartRequest,
    LoginStartResponse,
)
from socialnet.schemas.user import MeResponse
from socialnet.services.auth_service import AuthService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


@router.post("/login", response_model=LoginStartResponse)
async def start_login(
    body: LoginStartRequest, auth: AuthService = Depends(get_auth_service),
):
    request_id = await auth.start_login(body.identifier)
    return LoginStartResponse(request_id=request_id)


@router.post("/login/complete", response_model=LoginCompleteResponse)
async def complete_login(
    body: LoginCompleteRequest,
    auth: AuthService = Depends(get_auth_service),
    token_store: TokenStore = Depends(get_token_store),
):
    success = await auth.complete_login(body.request_id, body.secret, token_store)
    return LoginCompleteResponse(success=success)


@router.get("/me", response_model=MeResponse)
async def me(user: User = Depends(get_current_user)):
    return MeResponse.from_user(user)


@router.post("/logout")
async def logout(
    auth: AuthService = Depends(get_auth_service),
    token_store: TokenStore = Depends(get_token_store),
):
    await auth.logout(token_store)
    return {"status": "logged_out"}


# The magic link in the login mail points here (outside the /api/v1 prefix)
link_router = APIRouter(tags=["auth"])


@link_router.get("/auth/complete/{request_id}/{secret}", response_model=LoginCompleteResponse)
async def complete_login_from_link(
    request_id: UUID,
    secret: str,
    auth: AuthService = Depends(get_auth_service),
    token_store: TokenStore = Depends(get_token_store),
):
    success = await auth.complete_login(request_id, secret, token_store)
    return LoginCompleteResponse(success=success)
