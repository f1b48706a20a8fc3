from typing import List, Dict

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from courtside.services import auth_service, user_service, stamina_service, match_service, completion_service
from courtside.models import user as user_model
from courtside.schemas import user_schemas, stamina_schemas, match_schemas
from courtside.api.dependencies import get_db

router = APIRouter()

def _profile(db: Session, user: user_model.User) -> user_schemas.UserProfile:
    stats = user_service.get_user_stats(db, user.id)
    return user_schemas.UserProfile(
        id=user.id,
        name=user.name,
        email=user.email,
        role=user.role,
        stamina=user.stamina,
        total_points=user.total_points,
        rank=completion_service.get_user_rank(db, user.id),
        **stats,
    )

@router.get("/me", response_model=user_schemas.UserProfile)
async def read_users_me(
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(auth_service.get_current_user),
):
    return _profile(db, current_user)

@router.get("/me/stamina-logs", response_model=List[stamina_schemas.StaminaLogRead])
async def read_my_stamina_logs(
    limit: int = Query(50, ge=1, le=500),
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(auth_service.get_current_user),
):
    return stamina_service.list_stamina_logs(db, current_user.id, limit=limit)

@router.get("/me/witness-requests", response_model=List[match_schemas.WitnessRequestRead])
async def read_my_witness_requests(
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(auth_service.get_current_user),
):
    return match_service.list_pending_witness_requests(db, current_user.id)

@router.delete("/me", response_model=Dict[str, str])
async def delete_my_account(
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(auth_service.get_current_user),
):
    user_service.delete_account(db, current_user.id)
    return {"message": "Account deleted successfully"}

@router.get("/{user_id}", response_model=user_schemas.UserProfile)
async def read_user(
    user_id: int,
    db: Session = Depends(get_db),
):
    return _profile(db, user_service.get_user(db, user_id))
