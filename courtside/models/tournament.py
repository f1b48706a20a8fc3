import datetime
import enum

from sqlalchemy import Column, Integer, String, Float, ForeignKey, DateTime, Text
from sqlalchemy.orm import relationship
from courtside.core.database import Base


class TournamentStatus(str, enum.Enum):
    OPEN = "OPEN"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


class Tournament(Base):
    __tablename__ = "tournaments"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    location = Column(String, nullable=True)
    lat = Column(Float, nullable=True)
    lng = Column(Float, nullable=True)
    start_date = Column(DateTime, nullable=True)
    end_date = Column(DateTime, nullable=True)
    min_players = Column(Integer, default=8, nullable=False)
    max_players = Column(Integer, default=32, nullable=False)
    status = Column(String, default=TournamentStatus.OPEN.value, nullable=False) # OPEN -> IN_PROGRESS -> COMPLETED
    creator_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime, default=datetime.datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.datetime.utcnow, onupdate=datetime.datetime.utcnow)

    creator = relationship("User", foreign_keys=[creator_id])
    participants = relationship(
        "TournamentParticipant", back_populates="tournament", order_by="TournamentParticipant.id"
    )
    matches = relationship("Match", back_populates="tournament", order_by="Match.id")
