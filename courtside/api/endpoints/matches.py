from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from courtside.services import match_service, auth_service
from courtside.models import user as user_model
from courtside.schemas import match_schemas
from courtside.api.dependencies import get_db

router = APIRouter()

@router.get("/{match_id}", response_model=match_schemas.MatchRead)
async def get_match_details_endpoint(
    match_id: int,
    db: Session = Depends(get_db),
):
    return match_service.get_match(db=db, match_id=match_id)

@router.post("/{match_id}/result", response_model=match_schemas.MatchRead)
async def submit_match_result_endpoint(
    match_id: int,
    result_in: match_schemas.MatchResultSubmit,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(auth_service.get_current_user),
):
    return match_service.submit_match_result(
        db=db, match_id=match_id, actor_id=current_user.id, score=result_in.score, winner_id=result_in.winner_id
    )

@router.post("/{match_id}/witnesses", response_model=List[match_schemas.WitnessRequestRead])
async def request_witnesses_endpoint(
    match_id: int,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(auth_service.get_current_user),
):
    return match_service.request_witnesses(db=db, match_id=match_id, actor_id=current_user.id)

@router.post("/{match_id}/confirm", response_model=match_schemas.MatchRead)
async def confirm_match_result_endpoint(
    match_id: int,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(auth_service.get_current_user),
):
    return match_service.confirm_match_result(db=db, match_id=match_id, actor_id=current_user.id)
