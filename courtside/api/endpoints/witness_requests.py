from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from courtside.services import match_service, auth_service
from courtside.models import user as user_model
from courtside.schemas import match_schemas
from courtside.api.dependencies import get_db

router = APIRouter()

@router.post("/{request_id}/respond", response_model=match_schemas.WitnessRequestRead)
async def respond_to_witness_request_endpoint(
    request_id: int,
    response_in: match_schemas.WitnessResponse,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(auth_service.get_current_user),
):
    return match_service.respond_to_witness_request(
        db=db, request_id=request_id, actor_id=current_user.id, decision=response_in.decision
    )
