from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from courtside.services import completion_service
from courtside.schemas import user_schemas
from courtside.api.dependencies import get_db

router = APIRouter()

@router.get("/", response_model=List[user_schemas.LeaderboardEntry])
async def leaderboard_endpoint(
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
):
    users = completion_service.get_leaderboard(db, limit=limit)
    return [
        user_schemas.LeaderboardEntry(
            rank=completion_service.get_user_rank(db, user.id),
            id=user.id,
            name=user.name,
            total_points=user.total_points,
        )
        for user in users
    ]
