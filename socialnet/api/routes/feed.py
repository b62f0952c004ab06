"""Feed Route — the authenticated user's home feed."""

from fastapi import APIRouter, Depends, Query

from socialnet.api.dependencies import get_aggregator_service, get_current_user
from socialnet.models.user import User
from socialnet.schemas.post import PostResponse
from socialnet.services.aggregator_service import AggregatorService

router = APIRouter(prefix="/api/v1/feed", tags=["feed"])


@router.get("", response_model=list[PostResponse])
async def home_feed(
    roots_only: bool = False,
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    user: User = Depends(get_current_user),
    aggregator: AggregatorService = Depends(get_aggregator_service),
):
    posts = await aggregator.aggregate(
        user, roots_only=roots_only, limit=limit, offset=offset,
    )
    return [PostResponse.from_post(p) for p in posts]
