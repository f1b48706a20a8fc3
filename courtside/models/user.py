import datetime
import enum

from sqlalchemy import Column, Integer, String, Float, DateTime
from sqlalchemy.orm import relationship
from courtside.core.database import Base
from courtside.core.config import INITIAL_STAMINA


class UserRole(str, enum.Enum):
    ATHLETE = "ATHLETE"
    ADMIN = "ADMIN"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String)
    email = Column(String, unique=True, index=True)
    password_hash = Column(String, nullable=True)
    role = Column(String, default=UserRole.ATHLETE.value)
    stamina = Column(Float, default=INITIAL_STAMINA, nullable=False) # 0 <= stamina <= MAX_STAMINA
    total_points = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, default=datetime.datetime.utcnow)

    participations = relationship("TournamentParticipant", back_populates="user")
    stamina_logs = relationship("StaminaLog", back_populates="user", order_by="StaminaLog.id")
    # Matches reference users through several foreign keys (players, referee,
    # witness, winner); they are queried explicitly from the Match side.

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value
