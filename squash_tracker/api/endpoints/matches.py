from fastapi import APIRouter, Depends, HTTPException, status

from squash_tracker.api.dependencies import get_current_user, get_match_service
from squash_tracker.models.match_model import MatchModel
from squash_tracker.models.user_model import UserModel
from squash_tracker.schemas import match_schemas
from squash_tracker.services.match_service import MatchService

router = APIRouter()


@router.get("/{match_id}", response_model=MatchModel)
async def get_match(match_id: str, service: MatchService = Depends(get_match_service)):
    match = service.get_match(match_id)
    if not match:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Match not found")
    return match


@router.put("/{match_id}/score", response_model=match_schemas.MatchUpdateRead)
async def update_match_score(
    match_id: str,
    score_in: match_schemas.ScoreUpdate,
    current_user: UserModel = Depends(get_current_user),
    service: MatchService = Depends(get_match_service),
):
    """
    Replaces the game scores of a match. The match is marked COMPLETED as soon
    as one player has won enough games; the pool standings are rebuilt.
    """
    result = service.update_score(match_id, [g.to_game() for g in score_in.scores], acting_user=current_user)
    return match_schemas.MatchUpdateRead(match=result.match, standings=result.standings)


@router.post("/{match_id}/preview", response_model=match_schemas.MatchEvaluationRead)
async def preview_match_score(
    match_id: str,
    score_in: match_schemas.ScoreUpdate,
    current_user: UserModel = Depends(get_current_user),
    service: MatchService = Depends(get_match_service),
):
    """Win progress for unsaved scores. Nothing is stored."""
    evaluation = service.preview_score(match_id, [g.to_game() for g in score_in.scores])
    return match_schemas.MatchEvaluationRead(**evaluation._asdict())
