# backend/puzzle_tracker/core/security.py
# Dépendance FastAPI `get_current_user_id` : identifiant opaque transmis par le fournisseur d'identité.

from typing import Annotated

from fastapi import Depends, Header, HTTPException, status

USER_ID_HEADER = "X-User-Id"


async def get_current_user_id(
    x_user_id: Annotated[str | None, Header(alias=USER_ID_HEADER)] = None,
) -> str:
    """Dépendance FastAPI: identifiant de l'utilisateur authentifié.

    Description:
        L'authentification est faite en amont (fournisseur d'identité / passerelle) qui
        transmet l'identifiant opaque dans l'en-tête `X-User-Id`. Ce service ne fait que
        le lire et s'en servir comme clé étrangère.

    Args:
        x_user_id (str | None): Valeur de l'en-tête.

    Returns:
        str: Identifiant utilisateur.

    Raises:
        HTTPException: 401 si l'en-tête est absent ou vide.
    """
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
        )
    return x_user_id.strip()


CurrentUserId = Annotated[str, Depends(get_current_user_id)]
