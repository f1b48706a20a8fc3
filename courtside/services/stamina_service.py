"""
Stamina ledger.

Every balance change on ``User.stamina`` goes through this module and leaves
exactly one ``StaminaLog`` row behind, so that for each user the sum of the
log equals ``stamina - INITIAL_STAMINA``. Administrative resets keep that
property by logging a ``RESET`` entry carrying the difference.
"""
import logging
from typing import List

from sqlalchemy.orm import Session

from courtside.core.config import INITIAL_STAMINA, MAX_STAMINA
from courtside.core.exceptions import InsufficientStaminaError, NotFoundError
from courtside.models import user as user_model
from courtside.models import stamina_log as stamina_log_model

logger = logging.getLogger(__name__)

def _get_user(db: Session, user_id: int) -> user_model.User:
    user = db.get(user_model.User, user_id)
    if not user:
        raise NotFoundError("User not found")
    return user

def get_stamina(db: Session, user_id: int) -> float:
    user = db.get(user_model.User, user_id)
    return user.stamina if user else 0.0

def deduct_stamina(db: Session, user_id: int, amount: float, reason: str, commit: bool = True) -> float:
    """
    Removes ``amount`` from the user's balance and logs it.

    Raises InsufficientStaminaError when the balance is below ``amount``; in that
    case nothing is written. Returns the new balance.
    """
    user = _get_user(db, user_id)
    if user.stamina < amount:
        raise InsufficientStaminaError()

    user.stamina = user.stamina - amount
    db.add(stamina_log_model.StaminaLog(user_id=user_id, amount=-amount, reason=reason))
    if commit:
        db.commit()
    logger.info("Deducted %.2f stamina from user %s (%s)", amount, user_id, reason)
    return user.stamina

def credit_with_cap(db: Session, user_id: int, amount: float, reason: str, commit: bool = True) -> float:
    """
    Credits up to ``amount`` without letting the balance exceed MAX_STAMINA.

    Returns the amount actually applied, which is also what gets logged.
    A user already at the cap gets nothing and no log entry.
    """
    user = _get_user(db, user_id)
    headroom = MAX_STAMINA - user.stamina
    if headroom <= 0:
        logger.debug("User %s already at max stamina, skipping credit (%s)", user_id, reason)
        return 0.0

    applied = min(amount, headroom)
    user.stamina = user.stamina + applied
    db.add(stamina_log_model.StaminaLog(user_id=user_id, amount=applied, reason=reason))
    if commit:
        db.commit()
    logger.info("Credited %.2f stamina to user %s (%s)", applied, user_id, reason)
    return applied

def reset_all_stamina(db: Session, target: float = INITIAL_STAMINA, reason: str = None) -> int:
    """Sets every user's stamina to ``target`` as one ledger epoch reset. Returns the user count."""
    reason = reason or f"Admin Reset - All stamina reset to {target}"
    users = db.query(user_model.User).all()
    for user in users:
        db.add(stamina_log_model.StaminaLog(
            user_id=user.id,
            amount=target - user.stamina,
            reason=reason,
            kind=stamina_log_model.StaminaLogKind.RESET.value,
        ))
    db.query(user_model.User).update({user_model.User.stamina: target}, synchronize_session="evaluate")
    db.commit()
    logger.info("Reset stamina of %d users to %.2f", len(users), target)
    return len(users)

def list_stamina_logs(db: Session, user_id: int, limit: int = 50) -> List[stamina_log_model.StaminaLog]:
    return db.query(stamina_log_model.StaminaLog)\
        .filter(stamina_log_model.StaminaLog.user_id == user_id)\
        .order_by(stamina_log_model.StaminaLog.id.desc())\
        .limit(limit)\
        .all()
