from pydantic import BaseModel
from datetime import datetime

class StaminaLogRead(BaseModel):
    id: int
    user_id: int
    amount: float
    reason: str
    kind: str
    created_at: datetime

    class Config:
        from_attributes = True

class StaminaResetResult(BaseModel):
    message: str
    count: int
