import datetime
import enum

from sqlalchemy import Column, Integer, String, ForeignKey, DateTime
from sqlalchemy.orm import relationship
from courtside.core.database import Base


class WitnessRequestStatus(str, enum.Enum):
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


class WitnessRequest(Base):
    __tablename__ = "witness_requests"

    id = Column(Integer, primary_key=True, index=True)
    match_id = Column(Integer, ForeignKey("matches.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    status = Column(String, default=WitnessRequestStatus.PENDING.value, nullable=False)
    expires_at = Column(DateTime, nullable=False) # advisory only, nothing expires requests
    created_at = Column(DateTime, default=datetime.datetime.utcnow)

    match = relationship("Match", back_populates="witness_requests")
    user = relationship("User", foreign_keys=[user_id])
