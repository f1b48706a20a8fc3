from pydantic import BaseModel
from typing import Optional
from datetime import datetime

class SystemConfigRead(BaseModel):
    key: str
    value: str

    class Config:
        from_attributes = True

class SystemConfigUpdate(BaseModel):
    value: str

class SystemFlags(BaseModel):
    require_stamina_to_join: bool
    require_match_verification: bool
    last_rerank_at: Optional[datetime] = None

class BackfillResult(BaseModel):
    success: bool
    count: int

class RerankResult(BaseModel):
    success: bool
    last_rerank_at: datetime
