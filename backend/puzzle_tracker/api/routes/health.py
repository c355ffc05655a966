from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from puzzle_tracker.core.health_checks import check_mongodb
from puzzle_tracker.core.settings import get_settings
from puzzle_tracker.models.health import HealthCheck

router = APIRouter(tags=["Health"])


@router.get(
    "/ping",
    summary="Vérification de santé de l'API",
    description="Retourne un message 'pong' permettant de tester que l'API répond.",
)
async def ping():
    return {"status": "ok", "message": "pong"}


@router.get(
    "/health",
    response_model=HealthCheck,
    summary="Health check de l'API",
    description="Retourne le statut de l'API et de MongoDB.",
)
async def health() -> JSONResponse:
    """
    Health check endpoint standard

    Returns:
        200 si tout OK, 503 si MongoDB est injoignable
    """
    checks = {"database": await check_mongodb()}

    has_errors = any(check != "ok" for check in checks.values())
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE if has_errors else status.HTTP_200_OK

    response = HealthCheck(
        status="degraded" if has_errors else "ok",
        version=get_settings().api_version,
        checks=checks,
    )
    return JSONResponse(status_code=status_code, content=response.model_dump(mode="json"))
