# backend/puzzle_tracker/api/routes/puzzle_status.py
# Route de changement de statut d'un puzzle (création implicite du log à la première attribution).

from fastapi import APIRouter, Response, status

from puzzle_tracker.api.deps import PuzzleLogs
from puzzle_tracker.api.dto.feed import FeedItemOut
from puzzle_tracker.api.dto.puzzle_log import PuzzleLogOut, StatusChangeIn, StatusChangeOut
from puzzle_tracker.core.security import CurrentUserId

router = APIRouter(prefix="/puzzle-status", tags=["puzzle-status"])


@router.patch(
    "",
    response_model=StatusChangeOut,
    summary="Changer le statut d'un puzzle",
    description=(
        "Attribue un statut (`wishlist`, `library`, `in-progress`, `completed`, `abandoned`) "
        "au puzzle pour l'utilisateur courant.\n\n"
        "- Crée le log à la première attribution (201), sinon le met à jour (200)\n"
        "- `completed` force 100 %, `wishlist` force 0 %\n"
        "- `completion_time` accepte « 2h 30m », « 90m », « 1.5h » ou un nombre de minutes\n"
        "- Produit au plus un item de feed"
    ),
)
async def change_puzzle_status(
    payload: StatusChangeIn,
    user_id: CurrentUserId,
    service: PuzzleLogs,
    response: Response,
) -> StatusChangeOut:
    """Changer le statut d'un puzzle.

    Raises:
        HTTPException 422: Statut hors vocabulaire ou progression hors [0,100].
    """
    log, feed_item, created = await service.change_status(
        user_id,
        payload.puzzle_id,
        payload.new_status,
        progress=payload.progress_percentage,
        completion_time=payload.completion_time,
        time_spent_seconds=payload.time_spent_seconds,
        media_urls=payload.media_urls,
    )
    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    return StatusChangeOut(
        created=created,
        log=PuzzleLogOut.from_log(log),
        feed_item=FeedItemOut.from_item(feed_item) if feed_item else None,
    )
