import enum

from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship
from courtside.core.database import Base


class MatchStatus(str, enum.Enum):
    PENDING = "PENDING"
    WAITING_FOR_WITNESS = "WAITING_FOR_WITNESS"
    COMPLETED = "COMPLETED"


class VerificationStatus(str, enum.Enum):
    WAITING_FOR_WITNESS = "WAITING_FOR_WITNESS"
    CONFIRMED = "CONFIRMED"


class Match(Base):
    __tablename__ = "matches"

    id = Column(Integer, primary_key=True, index=True)
    tournament_id = Column(Integer, ForeignKey("tournaments.id"), nullable=False, index=True)
    player1_id = Column(Integer, ForeignKey("users.id"))
    player2_id = Column(Integer, ForeignKey("users.id"))
    referee_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    witness_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    winner_id = Column(Integer, ForeignKey("users.id"), nullable=True) # always player1 or player2 when set
    round = Column(Integer, default=1, nullable=False) # 1 = first round
    status = Column(String, default=MatchStatus.PENDING.value, nullable=False)
    verification_status = Column(String, nullable=True) # COMPLETED <=> CONFIRMED
    score = Column(String, nullable=True) # e.g., "6-4, 6-3"

    tournament = relationship("Tournament", back_populates="matches")
    player1 = relationship("User", foreign_keys=[player1_id])
    player2 = relationship("User", foreign_keys=[player2_id])
    referee = relationship("User", foreign_keys=[referee_id])
    witness = relationship("User", foreign_keys=[witness_id])
    winner = relationship("User", foreign_keys=[winner_id])
    witness_requests = relationship("WitnessRequest", back_populates="match", order_by="WitnessRequest.id")

    def has_player(self, user_id: int) -> bool:
        return user_id in (self.player1_id, self.player2_id)

    def opponent_of(self, user_id: int):
        if user_id == self.player1_id:
            return self.player2_id
        if user_id == self.player2_id:
            return self.player1_id
        return None
