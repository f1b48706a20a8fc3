from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime

class UserBase(BaseModel):
    name: str = Field(min_length=2)
    email: EmailStr

class UserCreate(UserBase):
    password: str = Field(min_length=6)

class UserRead(UserBase):
    id: int
    role: str
    stamina: float
    total_points: int

    class Config:
        from_attributes = True

class UserProfile(UserRead):
    rank: int
    tournaments_played: int
    matches_won: int

class LeaderboardEntry(BaseModel):
    rank: int
    id: int
    name: str
    total_points: int
