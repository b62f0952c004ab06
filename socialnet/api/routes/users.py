"""User Routes — profiles, profile edits, the follow graph and per-user post indexes.

Invariants:
    - Profiles never expose contact details (only /auth/me and PATCH /users/me do)
    - Follow/unfollow are idempotent; following oneself is a no-op
"""

import logging

from fastapi import APIRouter, Depends, Query

from socialnet.api.dependencies import get_current_user, get_users_service
from socialnet.core.errors import ResourceNotFoundError
from socialnet.models.user import User
from socialnet.schemas.post import PostResponse
from socialnet.schemas.user import FollowResponse, MeResponse, UserResponse, UserUpdate
from socialnet.services.users_service import UsersService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/users", tags=["users"])


async def get_user_or_404(
    users: UsersService, user_id: int, relations: tuple[str, ...] = (),
) -> User:
    user = await users.fetch(user_id, relations)
    if user is None:
        raise ResourceNotFoundError("User", str(user_id))
    return user


@router.patch("/me", response_model=MeResponse)
async def update_me(
    body: UserUpdate,
    user: User = Depends(get_current_user),
    users: UsersService = Depends(get_users_service),
):
    await users.apply_update(user, body.to_update())
    return MeResponse.from_user(user)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: int, users: UsersService = Depends(get_users_service),
):
    user = await get_user_or_404(users, user_id, User.DEFAULT_RELATIONS)
    return UserResponse.from_user(user)


@router.get("/{user_id}/posts", response_model=list[PostResponse])
async def user_posts(
    user_id: int,
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    users: UsersService = Depends(get_users_service),
):
    await get_user_or_404(users, user_id)
    posts = await users.root_index(user_id, limit=limit, offset=offset)
    return [PostResponse.from_post(p) for p in posts]


@router.get("/{user_id}/replies", response_model=list[PostResponse])
async def user_replies(
    user_id: int,
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    users: UsersService = Depends(get_users_service),
):
    await get_user_or_404(users, user_id)
    posts = await users.reply_index(user_id, limit=limit, offset=offset)
    return [PostResponse.from_post(p) for p in posts]


@router.put("/{user_id}/follow", response_model=FollowResponse)
async def follow_user(
    user_id: int,
    user: User = Depends(get_current_user),
    users: UsersService = Depends(get_users_service),
):
    target = await get_user_or_404(users, user_id, ("followers",))
    changed = await users.follow(user, target)
    return FollowResponse(
        changed=changed,
        following=users.registry.contains_key(user.following, target),
    )


@router.delete("/{user_id}/follow", response_model=FollowResponse)
async def unfollow_user(
    user_id: int,
    user: User = Depends(get_current_user),
    users: UsersService = Depends(get_users_service),
):
    target = await get_user_or_404(users, user_id, ("followers",))
    changed = await users.unfollow(user, target)
    return FollowResponse(
        changed=changed,
        following=users.registry.contains_key(user.following, target),
    )
