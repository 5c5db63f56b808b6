"""
Controlador de partidos - cartelera del día, resultados y liquidación
"""

from fastapi import APIRouter, HTTPException, status

from app.core.dependencies import CurrentAdmin, CurrentUser, Database, Notifier
from app.models.game import Game, GameResult, Slate
from app.services.game_service import GameService
from app.services.pick_service import GameNotFoundError
from app.services.scoring_service import (
    IncompleteSettlementError,
    ResultConflictError,
    ScoringService,
    SettlementSummary,
)


router = APIRouter(prefix="/games", tags=["games"])


@router.get("/slate", response_model=Slate)
async def get_slate(user: CurrentUser, db: Database):
    """
    Partidos de hoy y de ayer con el pick del usuario en cada uno.
    """
    game_service = GameService(db)
    return await game_service.get_slate(user.id)


@router.post("/{game_id}/settle", response_model=SettlementSummary)
async def settle_game(
    game_id: int,
    admin: CurrentAdmin,
    db: Database,
    notifier: Notifier
):
    """
    Liquidar los picks de un partido terminado.

    Lo llama el feed de resultados cuando el partido es final. Se puede
    llamar más de una vez: los picks ya liquidados no cambian.
    """
    scoring_service = ScoringService(db, notifier=notifier)

    try:
        return await scoring_service.settle(game_id)
    except GameNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
    except IncompleteSettlementError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e)
        )


@router.post("/{game_id}/result", response_model=Game)
async def record_result(
    game_id: int,
    result: GameResult,
    admin: CurrentAdmin,
    db: Database,
    notifier: Notifier
):
    """
    Registrar el resultado final de un partido.

    Lo manda el feed de resultados. Guarda ambos scores, marca el partido
    como terminado y publica ContestSettled, que dispara la liquidación.
    Reenviar el mismo resultado no cambia nada; otro resultado es 409.
    """
    scoring_service = ScoringService(db, notifier=notifier)

    try:
        return await scoring_service.record_result(game_id, result.home_score, result.away_score)
    except GameNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
    except ResultConflictError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e)
        )
