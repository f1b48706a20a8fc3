from pydantic import BaseModel, Field, model_validator
from typing import Optional, List
from datetime import datetime

class TournamentBase(BaseModel):
    title: str = Field(min_length=3)
    description: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    min_players: int = Field(default=8, ge=4, le=32)
    max_players: int = Field(default=32, ge=4, le=32)
    location: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None

class TournamentCreate(TournamentBase):

    @model_validator(mode="after")
    def check_bounds(self):
        if self.min_players > self.max_players:
            raise ValueError("min_players cannot exceed max_players")
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("End date must be after start date")
        return self

class TournamentRead(TournamentBase):
    id: int
    status: str
    creator_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

class StandingRow(BaseModel):
    user_id: int
    name: str
    group: str
    points: float
    matches_played: int
    wins: int
    losses: int

class GroupStandings(BaseModel):
    group: str
    standings: List[StandingRow]
