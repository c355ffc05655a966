# backend/puzzle_tracker/api/routes/my_puzzles.py
# Routes « mes puzzles » : listing, création, vérification, statistiques, détail et édition d'un log.

from typing import Annotated

from fastapi import APIRouter, Path, Query, status

from puzzle_tracker.api.deps import AppSettings, PuzzleLogs, Store
from puzzle_tracker.api.dto.feed import FeedItemOut
from puzzle_tracker.api.dto.puzzle_log import (
    PuzzleLogCheckOut,
    PuzzleLogCreateIn,
    PuzzleLogListResponse,
    PuzzleLogMutationOut,
    PuzzleLogOut,
    PuzzleLogPatchIn,
)
from puzzle_tracker.core.security import CurrentUserId
from puzzle_tracker.models.puzzle_stats import AggregateStats
from puzzle_tracker.models.status import PuzzleStatus
from puzzle_tracker.services.puzzle_stats import get_puzzle_stats

router = APIRouter(prefix="/my/puzzles", tags=["my-puzzles"])

LogId = Annotated[str, Path(..., description="Identifiant du puzzle log.")]


@router.get(
    "",
    response_model=PuzzleLogListResponse,
    summary="Lister mes puzzles",
    description=(
        "Retourne la liste paginée des puzzle logs de l'utilisateur (plus récents d'abord).\n\n"
        "- Filtre optionnel `status`\n"
        "- Pagination via `page` et `page_size`"
    ),
)
async def list_my_puzzles(
    user_id: CurrentUserId,
    service: PuzzleLogs,
    settings: AppSettings,
    status_filter: PuzzleStatus | None = Query(
        default=None, alias="status", description="Filtrer par statut."
    ),
    page: int = Query(1, ge=1, description="Numéro de page (≥1)."),
    page_size: int | None = Query(None, ge=1, description="Taille de page."),
) -> PuzzleLogListResponse:
    size = min(page_size or settings.default_page_size, settings.max_page_size)
    result = await service.list_logs(user_id, status_filter, page, size)
    result["items"] = [PuzzleLogOut.from_log(log) for log in result["items"]]
    return PuzzleLogListResponse(**result)


@router.post(
    "",
    response_model=PuzzleLogMutationOut,
    status_code=status.HTTP_201_CREATED,
    summary="Créer un puzzle log",
    description="Crée un log complet pour un puzzle. 409 si un log existe déjà (utiliser PATCH).",
)
async def create_my_puzzle_log(
    payload: PuzzleLogCreateIn,
    user_id: CurrentUserId,
    service: PuzzleLogs,
) -> PuzzleLogMutationOut:
    log, feed_item = await service.create_log(user_id, payload.model_dump())
    return PuzzleLogMutationOut(
        log=PuzzleLogOut.from_log(log),
        feed_item=FeedItemOut.from_item(feed_item) if feed_item else None,
    )


@router.get(
    "/check",
    response_model=PuzzleLogCheckOut,
    summary="Vérifier si j'ai un log pour un puzzle",
)
async def check_my_puzzle_log(
    user_id: CurrentUserId,
    service: PuzzleLogs,
    puzzle_id: str = Query(..., min_length=1, description="Identifiant du puzzle."),
) -> PuzzleLogCheckOut:
    log = await service.check_log(user_id, puzzle_id)
    return PuzzleLogCheckOut(exists=log is not None, log=PuzzleLogOut.from_log(log) if log else None)


@router.get(
    "/stats",
    response_model=AggregateStats,
    summary="Statistiques de mes puzzles",
    description=(
        "Total terminés, temps total et moyen, terminés ce mois-ci, marque favorite, "
        "série hebdomadaire et meilleurs temps par tranche de pièces."
    ),
)
async def get_my_puzzle_stats(
    user_id: CurrentUserId,
    store: Store,
    settings: AppSettings,
) -> AggregateStats:
    return await get_puzzle_stats(store, user_id, settings.stats_timezone)


@router.get(
    "/{log_id}",
    response_model=PuzzleLogOut,
    summary="Détail d'un puzzle log",
)
async def get_my_puzzle_log(log_id: LogId, user_id: CurrentUserId, service: PuzzleLogs) -> PuzzleLogOut:
    return PuzzleLogOut.from_log(await service.get_log(user_id, log_id))


@router.patch(
    "/{log_id}",
    response_model=PuzzleLogMutationOut,
    summary="Modifier un puzzle log",
    description=(
        "Modifie notes, notes de difficulté/qualité, photos, confidentialité, progression, "
        "temps passé ou statut. Les nouvelles photos et les paliers de progression peuvent "
        "produire un item de feed."
    ),
)
async def patch_my_puzzle_log(
    log_id: LogId,
    payload: PuzzleLogPatchIn,
    user_id: CurrentUserId,
    service: PuzzleLogs,
) -> PuzzleLogMutationOut:
    log, feed_item = await service.update_log(user_id, log_id, payload.model_dump(exclude_unset=True))
    return PuzzleLogMutationOut(
        log=PuzzleLogOut.from_log(log),
        feed_item=FeedItemOut.from_item(feed_item) if feed_item else None,
    )
