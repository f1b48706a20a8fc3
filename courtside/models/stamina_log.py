import datetime
import enum

from sqlalchemy import Column, Integer, String, Float, ForeignKey, DateTime
from sqlalchemy.orm import relationship
from courtside.core.database import Base


class StaminaLogKind(str, enum.Enum):
    ADJUSTMENT = "ADJUSTMENT"
    RESET = "RESET" # ledger epoch reset by an administrator


class StaminaLog(Base):
    __tablename__ = "stamina_logs"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    amount = Column(Float, nullable=False) # signed: negative for deductions
    reason = Column(String)
    kind = Column(String, default=StaminaLogKind.ADJUSTMENT.value, nullable=False)
    created_at = Column(DateTime, default=datetime.datetime.utcnow)

    user = relationship("User", back_populates="stamina_logs")
