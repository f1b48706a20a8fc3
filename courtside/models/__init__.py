from courtside.core.database import Base

# Import all models here to ensure they are registered with Base
from .user import User, UserRole
from .stamina_log import StaminaLog, StaminaLogKind
from .tournament import Tournament, TournamentStatus
from .participant import TournamentParticipant
from .match import Match, MatchStatus, VerificationStatus
from .witness_request import WitnessRequest, WitnessRequestStatus
from .system_config import SystemConfig

# Tables are created by courtside.main on startup, or by Alembic-style
# tooling in deployments; tests create them on their own engine.
