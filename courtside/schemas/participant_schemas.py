from pydantic import BaseModel
from typing import Optional
from datetime import datetime

class ParticipantRead(BaseModel):
    id: int
    user_id: int
    tournament_id: int
    group: Optional[str] = None
    joined_at: datetime

    class Config:
        from_attributes = True
