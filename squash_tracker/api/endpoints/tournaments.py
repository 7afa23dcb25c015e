from typing import List

from fastapi import APIRouter, Depends, HTTPException, Path, status

from squash_tracker.api.dependencies import (
    get_audit_service,
    get_current_user,
    get_schedule_service,
    get_tournament_service,
)
from squash_tracker.models.audit_model import AuditLog
from squash_tracker.models.match_model import MatchModel
from squash_tracker.models.tournament_model import TournamentConfig
from squash_tracker.models.user_model import UserModel
from squash_tracker.schemas import tournament_schemas
from squash_tracker.services.audit_service import AuditService
from squash_tracker.services.schedule_service import ScheduleService
from squash_tracker.services.tournament_service import TournamentService

router = APIRouter()


@router.post("", response_model=TournamentConfig, status_code=status.HTTP_201_CREATED, summary="Create New Tournament")
async def create_tournament(
    tournament_in: tournament_schemas.TournamentCreate,
    current_user: UserModel = Depends(get_current_user),
    service: TournamentService = Depends(get_tournament_service),
):
    """
    Creates a Draft tournament with the authenticated user as its admin.

    - **rules**: points per game (>= 1), best of 3 or 5, win by two.
    - **pool_size**: players per pool for round robin (at least 3).
    """
    data = tournament_in.model_dump(exclude_none=True)
    data["admin_login"] = current_user.login
    tournament = TournamentConfig(**data)
    return service.create_tournament(tournament, acting_user=current_user)


@router.get("", response_model=List[TournamentConfig], summary="List Tournaments")
async def list_tournaments(service: TournamentService = Depends(get_tournament_service)):
    return service.list_tournaments()


@router.get("/{tournament_id}", response_model=TournamentConfig)
async def get_tournament(
    tournament_id: str = Path(..., description="The ID of the tournament"),
    service: TournamentService = Depends(get_tournament_service),
):
    tournament = service.get_tournament_by_id(tournament_id)
    if not tournament:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tournament not found")
    return tournament


@router.post("/{tournament_id}/join", response_model=TournamentConfig, summary="Join a Draft Tournament")
async def join_tournament(
    tournament_id: str = Path(..., description="The ID of the tournament"),
    current_user: UserModel = Depends(get_current_user),
    service: TournamentService = Depends(get_tournament_service),
):
    return service.join_tournament(tournament_id, acting_user=current_user)


@router.post("/{tournament_id}/schedule", response_model=List[MatchModel], summary="Generate Schedule (Admin Only)")
async def generate_schedule(
    tournament_id: str = Path(..., description="The ID of the tournament"),
    current_user: UserModel = Depends(get_current_user),
    service: ScheduleService = Depends(get_schedule_service),
):
    """
    Builds pools (round robin) or first-round pairings (single elimination)
    and moves the tournament to Active. Only allowed while it is Draft.
    Completed matches are kept.
    """
    return service.generate_schedule(tournament_id, acting_user=current_user)


@router.patch("/{tournament_id}/status", response_model=TournamentConfig, summary="Update Tournament Status (Admin Only)")
async def update_tournament_status(
    status_in: tournament_schemas.StatusUpdate,
    tournament_id: str = Path(..., description="The ID of the tournament"),
    current_user: UserModel = Depends(get_current_user),
    service: TournamentService = Depends(get_tournament_service),
):
    return service.update_tournament_status(tournament_id, status_in.status, acting_user=current_user)


@router.get("/{tournament_id}/matches", response_model=List[MatchModel])
async def list_tournament_matches(
    tournament_id: str = Path(..., description="The ID of the tournament"),
    service: TournamentService = Depends(get_tournament_service),
):
    return service.list_matches(tournament_id)


@router.get("/{tournament_id}/standings", response_model=tournament_schemas.StandingsRead)
async def get_standings(
    tournament_id: str = Path(..., description="The ID of the tournament"),
    service: TournamentService = Depends(get_tournament_service),
):
    return tournament_schemas.StandingsRead(tournament_id=tournament_id, pools=service.get_standings(tournament_id))


@router.get("/{tournament_id}/audit", response_model=List[AuditLog])
async def get_audit_trail(
    tournament_id: str = Path(..., description="The ID of the tournament"),
    current_user: UserModel = Depends(get_current_user),
    audit_service: AuditService = Depends(get_audit_service),
):
    return audit_service.list_entries(target_id=tournament_id)
