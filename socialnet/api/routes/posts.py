"""Post Routes — read, create, like and delete posts.

Invariants:
    - Creation rejects posts without media or text with 400 before any store access
    - Only the author may delete a post (403 otherwise)
    - Like/unlike are idempotent: `changed` reports whether anything was written
"""

import logging

from fastapi import APIRouter, Depends, status

from socialnet.api.dependencies import get_current_user, get_posts_service
from socialnet.core.errors import (
    ContentValidationError,
    ErrorContext,
    ForbiddenError,
    ResourceNotFoundError,
)
from socialnet.models.post import Post
from socialnet.models.user import User
from socialnet.schemas.post import LikeResponse, PostCreate, PostResponse
from socialnet.services.posts_service import PostsService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/posts", tags=["posts"])


async def get_post_or_404(
    posts: PostsService, post_id: int, relations: tuple[str, ...] = (),
) -> Post:
    post = await posts.fetch(post_id, relations)
    if post is None:
        raise ResourceNotFoundError("Post", str(post_id))
    return post


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(
    post_id: int, posts: PostsService = Depends(get_posts_service),
):
    post = await get_post_or_404(posts, post_id, Post.DEFAULT_RELATIONS)
    return PostResponse.from_post(post)


@router.post(
    "", response_model=PostResponse, status_code=status.HTTP_201_CREATED,
)
async def create_post(
    body: PostCreate,
    user: User = Depends(get_current_user),
    posts: PostsService = Depends(get_posts_service),
):
    parent = None
    if body.parent_id is not None:
        parent = await get_post_or_404(posts, body.parent_id)

    created = await posts.create_post(
        user,
        text=body.text,
        content_location=body.content_location,
        parent=parent,
    )
    if not created.ok:
        raise ContentValidationError(
            created.validation.reason,
            created.validation.field,
            ErrorContext(entity_type="Post", user_id=user.user_id),
        )
    return PostResponse.from_post(created.post)


@router.put("/{post_id}/like", response_model=LikeResponse)
async def like_post(
    post_id: int,
    user: User = Depends(get_current_user),
    posts: PostsService = Depends(get_posts_service),
):
    post = await get_post_or_404(posts, post_id, ("likes",))
    changed = await posts.put_like(post, user)
    return LikeResponse(changed=changed, liked=True)


@router.delete("/{post_id}/like", response_model=LikeResponse)
async def unlike_post(
    post_id: int,
    user: User = Depends(get_current_user),
    posts: PostsService = Depends(get_posts_service),
):
    post = await get_post_or_404(posts, post_id, ("likes",))
    changed = await posts.delete_like(post, user)
    return LikeResponse(changed=changed, liked=False)


@router.delete("/{post_id}")
async def delete_post(
    post_id: int,
    user: User = Depends(get_current_user),
    posts: PostsService = Depends(get_posts_service),
):
    post = await get_post_or_404(posts, post_id)
    if post.author_id != user.user_id:
        raise ForbiddenError(
            "Only the author may delete a post",
            ErrorContext(entity_type="Post", entity_key=str(post_id), user_id=user.user_id),
        )
    deleted = await posts.delete_post(post_id)
    return {"deleted": deleted}
