# backend/puzzle_tracker/api/routes/activity.py
# Routes du feed d'activité (le mien, celui d'un autre utilisateur)

from fastapi import APIRouter, Path, Query

from puzzle_tracker.api.deps import AppSettings, Feed
from puzzle_tracker.api.dto.feed import ActivityListResponse, FeedItemOut
from puzzle_tracker.core.security import CurrentUserId

router = APIRouter(tags=["activity"])


async def _activity(feed, user_id: str, page: int, page_size: int | None, settings) -> ActivityListResponse:
    size = min(page_size or settings.default_page_size, settings.max_page_size)
    result = await feed.list_activity(user_id, page, size)
    result["items"] = [FeedItemOut.from_item(item) for item in result["items"]]
    return ActivityListResponse(**result)


@router.get(
    "/my/activity",
    response_model=ActivityListResponse,
    summary="Mon activité",
    description="Items de feed de l'utilisateur courant, plus récents d'abord.",
)
async def get_my_activity(
    user_id: CurrentUserId,
    feed: Feed,
    settings: AppSettings,
    page: int = Query(1, ge=1),
    page_size: int | None = Query(None, ge=1),
) -> ActivityListResponse:
    return await _activity(feed, user_id, page, page_size, settings)


@router.get(
    "/users/{target_user_id}/activity",
    response_model=ActivityListResponse,
    summary="Activité d'un utilisateur",
)
async def get_user_activity(
    _viewer_id: CurrentUserId,
    feed: Feed,
    settings: AppSettings,
    target_user_id: str = Path(..., min_length=1),
    page: int = Query(1, ge=1),
    page_size: int | None = Query(None, ge=1),
) -> ActivityListResponse:
    return await _activity(feed, target_user_id, page, page_size, settings)
