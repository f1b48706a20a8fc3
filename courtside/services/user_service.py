import logging
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from courtside.core import security
from courtside.core.config import INITIAL_STAMINA
from courtside.core.exceptions import AlreadyExistsError, NotFoundError
from courtside.models import user as user_model
from courtside.models import match as match_model
from courtside.models import participant as participant_model
from courtside.models import tournament as tournament_model
from courtside.models import stamina_log as stamina_log_model
from courtside.models import witness_request as witness_request_model
from courtside.schemas import user_schemas

logger = logging.getLogger(__name__)

def get_user(db: Session, user_id: int) -> user_model.User:
    user = db.get(user_model.User, user_id)
    if not user:
        raise NotFoundError("User not found")
    return user

def get_user_by_email(db: Session, email: str) -> Optional[user_model.User]:
    return db.query(user_model.User).filter(user_model.User.email == email).first()

def create_user(db: Session, user_in: user_schemas.UserCreate, role: str = user_model.UserRole.ATHLETE.value) -> user_model.User:
    if get_user_by_email(db, user_in.email):
        raise AlreadyExistsError("User already exists")

    db_user = user_model.User(
        name=user_in.name,
        email=user_in.email,
        password_hash=security.get_password_hash(user_in.password),
        role=role,
        stamina=INITIAL_STAMINA,
        total_points=0,
    )
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    logger.info("Registered user %s as %s", db_user.id, role)
    return db_user

def authenticate_user(db: Session, email: str, password: str) -> Optional[user_model.User]:
    user = get_user_by_email(db, email)
    if not user or not user.password_hash:
        return None
    if not security.verify_password(password, user.password_hash):
        return None
    return user

def get_user_stats(db: Session, user_id: int) -> dict:
    tournaments_played = db.query(participant_model.TournamentParticipant)\
        .filter(participant_model.TournamentParticipant.user_id == user_id)\
        .count()
    matches_won = db.query(match_model.Match).filter(
        match_model.Match.winner_id == user_id,
        match_model.Match.status == match_model.MatchStatus.COMPLETED.value,
    ).count()
    return {"tournaments_played": tournaments_played, "matches_won": matches_won}

def delete_account(db: Session, user_id: int) -> None:
    """
    Deletes the user together with their logs, participations, witness requests
    and matches. Tournaments the user created are kept without a creator.
    """
    user = get_user(db, user_id)
    involved_matches = db.query(match_model.Match.id).filter(
        or_(
            match_model.Match.player1_id == user_id,
            match_model.Match.player2_id == user_id,
            match_model.Match.witness_id == user_id,
            match_model.Match.referee_id == user_id,
            match_model.Match.winner_id == user_id,
        )
    ).all()
    match_ids = [m.id for m in involved_matches]

    try:
        db.query(stamina_log_model.StaminaLog)\
            .filter(stamina_log_model.StaminaLog.user_id == user_id)\
            .delete(synchronize_session=False)
        db.query(witness_request_model.WitnessRequest).filter(
            or_(
                witness_request_model.WitnessRequest.user_id == user_id,
                witness_request_model.WitnessRequest.match_id.in_(match_ids),
            )
        ).delete(synchronize_session=False)
        db.query(participant_model.TournamentParticipant)\
            .filter(participant_model.TournamentParticipant.user_id == user_id)\
            .delete(synchronize_session=False)
        db.query(match_model.Match)\
            .filter(match_model.Match.id.in_(match_ids))\
            .delete(synchronize_session=False)
        db.query(tournament_model.Tournament)\
            .filter(tournament_model.Tournament.creator_id == user_id)\
            .update({tournament_model.Tournament.creator_id: None}, synchronize_session=False)
        db.delete(user)
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info("Deleted account %s", user_id)
