from pydantic import BaseModel
from typing import Optional, Literal
from datetime import datetime

class MatchRead(BaseModel):
    id: int
    tournament_id: int
    player1_id: Optional[int] = None
    player2_id: Optional[int] = None
    referee_id: Optional[int] = None
    witness_id: Optional[int] = None
    winner_id: Optional[int] = None
    round: int
    status: str
    verification_status: Optional[str] = None
    score: Optional[str] = None

    class Config:
        from_attributes = True

class MatchResultSubmit(BaseModel):
    score: str
    winner_id: int

class WitnessRequestRead(BaseModel):
    id: int
    match_id: int
    user_id: int
    status: str
    expires_at: datetime
    created_at: datetime

    class Config:
        from_attributes = True

class WitnessResponse(BaseModel):
    decision: Literal["ACCEPTED", "REJECTED"]
