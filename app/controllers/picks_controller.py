"""
Controlador de picks - Endpoints para gestionar picks de usuarios
"""

from fastapi import APIRouter, HTTPException, Response, status

from app.core.dependencies import Database, CurrentUser, Notifier
from app.services.pick_service import (
    PickService,
    GameNotFoundError,
    InvalidTeamError,
    DuplicateActivePickError,
)
from app.models.pick import (
    PickCreate,
    PickResponse,
    SubmitOutcome,
    SubmitResponse,
    UserPicksResponse,
)


router = APIRouter(prefix="/picks", tags=["picks"])


@router.post("", response_model=SubmitResponse, status_code=status.HTTP_201_CREATED)
async def submit_pick(
    pick_data: PickCreate,
    user: CurrentUser,
    db: Database,
    notifier: Notifier,
    response: Response
):
    """
    Crear, cambiar o quitar un pick.

    Elegir el mismo equipo otra vez (o mandar team_id null) quita el pick.
    Una vez que empieza el partido los picks quedan bloqueados (403).
    """
    pick_service = PickService(db, notifier=notifier)

    try:
        result = await pick_service.submit_pick(user.id, pick_data.game_id, pick_data.team_id)
    except GameNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
    except InvalidTeamError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except DuplicateActivePickError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e)
        )

    if result.rejected:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Picks are locked for this game"
        )

    if result.outcome in (SubmitOutcome.DELETED, SubmitOutcome.UNCHANGED):
        response.status_code = status.HTTP_200_OK

    return SubmitResponse(
        outcome=result.outcome,
        pick=PickResponse.from_pick(result.pick) if result.pick else None
    )


@router.get("/me", response_model=UserPicksResponse)
async def get_my_picks(user: CurrentUser, db: Database):
    """
    Obtener los picks del usuario actual.

    active = partidos sin empezar; settled = partidos ya bloqueados.
    """
    pick_service = PickService(db)
    picks = await pick_service.get_user_picks(user.id)

    return UserPicksResponse(
        active=[PickResponse.from_pick(p) for p in picks.active],
        settled=[PickResponse.from_pick(p) for p in picks.settled]
    )
