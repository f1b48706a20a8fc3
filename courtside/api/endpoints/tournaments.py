from typing import List, Dict, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from courtside.services import tournament_service, match_service, auth_service
from courtside.models import user as user_model
from courtside.schemas import tournament_schemas, participant_schemas, match_schemas
from courtside.api.dependencies import get_db

router = APIRouter()

@router.post("/", response_model=tournament_schemas.TournamentRead, status_code=status.HTTP_201_CREATED)
async def create_tournament_endpoint(
    tournament_in: tournament_schemas.TournamentCreate,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(auth_service.get_current_user),
):
    return tournament_service.create_tournament(db=db, tournament=tournament_in, creator_id=current_user.id)

@router.get("/", response_model=List[tournament_schemas.TournamentRead])
async def list_tournaments_endpoint(
    status_filter: Optional[str] = Query(None, alias="status"),
    db: Session = Depends(get_db),
):
    return tournament_service.list_tournaments(db=db, status=status_filter)

@router.get("/{tournament_id}", response_model=tournament_schemas.TournamentRead)
async def get_tournament_endpoint(
    tournament_id: int,
    db: Session = Depends(get_db),
):
    return tournament_service.get_tournament(db=db, tournament_id=tournament_id)

@router.delete("/{tournament_id}", response_model=Dict[str, str])
async def delete_tournament_endpoint(
    tournament_id: int,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(auth_service.get_current_user),
):
    tournament_service.delete_tournament(db=db, tournament_id=tournament_id, actor=current_user)
    return {"message": "Tournament deleted successfully"}

@router.post("/{tournament_id}/join", response_model=participant_schemas.ParticipantRead)
async def join_tournament_endpoint(
    tournament_id: int,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(auth_service.get_current_user),
):
    return tournament_service.join_tournament(db=db, tournament_id=tournament_id, user_id=current_user.id)

@router.post("/{tournament_id}/withdraw", response_model=Dict[str, str])
async def withdraw_from_tournament_endpoint(
    tournament_id: int,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(auth_service.get_current_user),
):
    tournament_service.withdraw_from_tournament(db=db, tournament_id=tournament_id, user_id=current_user.id)
    return {"message": "Withdrawn from tournament"}

@router.post("/{tournament_id}/start", response_model=List[match_schemas.MatchRead])
async def start_tournament_endpoint(
    tournament_id: int,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(auth_service.get_current_user),
):
    return tournament_service.start_tournament(db=db, tournament_id=tournament_id, actor=current_user)

@router.get("/{tournament_id}/participants", response_model=List[participant_schemas.ParticipantRead])
async def list_participants_endpoint(
    tournament_id: int,
    db: Session = Depends(get_db),
):
    return tournament_service.list_participants(db=db, tournament_id=tournament_id)

@router.get("/{tournament_id}/matches", response_model=List[match_schemas.MatchRead])
async def list_matches_endpoint(
    tournament_id: int,
    db: Session = Depends(get_db),
):
    tournament_service.get_tournament(db=db, tournament_id=tournament_id)
    return match_service.list_tournament_matches(db=db, tournament_id=tournament_id)

@router.get("/{tournament_id}/standings", response_model=List[tournament_schemas.GroupStandings])
async def standings_endpoint(
    tournament_id: int,
    db: Session = Depends(get_db),
):
    return tournament_service.get_group_standings(db=db, tournament_id=tournament_id)
