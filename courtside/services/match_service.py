"""
Match result submission and witness verification.

A match moves PENDING -> WAITING_FOR_WITNESS -> COMPLETED. When match
verification is switched off in the system config, a submitted result goes
straight to COMPLETED. Every transition into COMPLETED is followed by a
tournament completion check.
"""
import logging
import random
from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy.orm import Session

from courtside.core.config import (
    BASE_REWARD,
    TOURNAMENT_FEE,
    WITNESS_POOL_SIZE,
    WITNESS_REQUEST_EXPIRY_MINUTES,
)
from courtside.core.exceptions import (
    AlreadyRespondedError,
    InvalidDecisionError,
    InvalidResultError,
    InvalidStateError,
    NotAssignedWitnessError,
    NotFoundError,
    UnauthorizedError,
)
from courtside.models import match as match_model
from courtside.models import participant as participant_model
from courtside.models import witness_request as witness_request_model
from courtside.services import completion_service, stamina_service, system_config_service

logger = logging.getLogger(__name__)

MatchStatus = match_model.MatchStatus
VerificationStatus = match_model.VerificationStatus
WitnessRequestStatus = witness_request_model.WitnessRequestStatus

def get_match(db: Session, match_id: int) -> match_model.Match:
    match = db.get(match_model.Match, match_id)
    if not match:
        raise NotFoundError("Match not found")
    return match

def list_tournament_matches(db: Session, tournament_id: int) -> List[match_model.Match]:
    return db.query(match_model.Match)\
        .filter(match_model.Match.tournament_id == tournament_id)\
        .order_by(match_model.Match.round, match_model.Match.id)\
        .all()

def compute_witness_reward(participant_count: int, match_count: int) -> tuple:
    """
    Returns ``(reward, pool_bonus)`` for one referee or witness slot.

    The tournament's fee pool (participants * fee) is shared across two slots
    per match, on top of the base reward.
    """
    pool = participant_count * TOURNAMENT_FEE
    total_slots = match_count * 2
    pool_bonus = pool / total_slots if total_slots > 0 else 0.0
    return BASE_REWARD + pool_bonus, pool_bonus

def submit_match_result(db: Session, match_id: int, actor_id: int, score: str, winner_id: int) -> match_model.Match:
    db_match = get_match(db, match_id)

    is_referee = db_match.referee_id is not None and db_match.referee_id == actor_id
    is_player = db_match.has_player(actor_id)
    if not is_referee and not is_player:
        raise UnauthorizedError("Not authorized to submit result for this match")

    if db_match.status == MatchStatus.COMPLETED.value:
        raise InvalidStateError("Match result already confirmed")

    if not db_match.has_player(winner_id):
        raise InvalidResultError()

    db_match.score = score
    db_match.winner_id = winner_id
    if is_referee:
        db_match.referee_id = actor_id

    if system_config_service.is_verification_required(db):
        db_match.status = MatchStatus.WAITING_FOR_WITNESS.value
        db_match.verification_status = VerificationStatus.WAITING_FOR_WITNESS.value
        db.commit()
        db.refresh(db_match)
        logger.info("Result for match %s submitted by user %s, waiting for witness", match_id, actor_id)
        return db_match

    db_match.status = MatchStatus.COMPLETED.value
    db_match.verification_status = VerificationStatus.CONFIRMED.value
    db.commit()
    logger.info("Result for match %s submitted by user %s, auto-confirmed", match_id, actor_id)

    completion_service.check_tournament_completion(db, db_match.tournament_id)
    db.refresh(db_match)
    return db_match

def request_witnesses(
    db: Session,
    match_id: int,
    actor_id: int,
    rng: Optional[random.Random] = None,
) -> List[witness_request_model.WitnessRequest]:
    """
    Asks up to WITNESS_POOL_SIZE random participants of the tournament to
    witness the submitted result. Players of the match and the caller are
    never asked. Returns the created requests (possibly none).
    """
    rng = rng or random.Random()
    db_match = get_match(db, match_id)

    if not db_match.has_player(actor_id) and db_match.referee_id != actor_id:
        raise UnauthorizedError("Not authorized to request witnesses for this match")
    if db_match.status != MatchStatus.WAITING_FOR_WITNESS.value:
        raise InvalidStateError("Match is not waiting for a witness")

    excluded = {db_match.player1_id, db_match.player2_id, actor_id}
    candidates = [
        p.user_id
        for p in db.query(participant_model.TournamentParticipant)
        .filter(participant_model.TournamentParticipant.tournament_id == db_match.tournament_id)
        .order_by(participant_model.TournamentParticipant.id)
        .all()
        if p.user_id not in excluded
    ]
    selected = rng.sample(candidates, min(WITNESS_POOL_SIZE, len(candidates)))

    expires_at = datetime.utcnow() + timedelta(minutes=WITNESS_REQUEST_EXPIRY_MINUTES)
    requests = [
        witness_request_model.WitnessRequest(match_id=match_id, user_id=user_id, expires_at=expires_at)
        for user_id in selected
    ]
    db.add_all(requests)
    db.commit()
    for request in requests:
        db.refresh(request)

    if not requests:
        logger.warning("No witness candidates available for match %s", match_id)
    else:
        logger.info("Requested %d witnesses for match %s", len(requests), match_id)
    return requests

def list_pending_witness_requests(db: Session, user_id: int) -> List[witness_request_model.WitnessRequest]:
    return db.query(witness_request_model.WitnessRequest).filter(
        witness_request_model.WitnessRequest.user_id == user_id,
        witness_request_model.WitnessRequest.status == WitnessRequestStatus.PENDING.value,
    ).order_by(witness_request_model.WitnessRequest.created_at.desc()).all()

def respond_to_witness_request(
    db: Session,
    request_id: int,
    actor_id: int,
    decision: str,
) -> witness_request_model.WitnessRequest:
    """
    Records the candidate's answer.

    On acceptance the actor becomes the match witness only if the slot is
    still empty: the first acceptance wins and later ones are recorded
    without replacing it. Requests for a match that is no longer waiting for
    a witness cannot be answered.
    """
    if decision not in (WitnessRequestStatus.ACCEPTED.value, WitnessRequestStatus.REJECTED.value):
        raise InvalidDecisionError()
    decision = WitnessRequestStatus(decision)

    request = db.get(witness_request_model.WitnessRequest, request_id)
    if not request:
        raise NotFoundError("Request not found")
    if request.user_id != actor_id:
        raise UnauthorizedError()
    if request.status != WitnessRequestStatus.PENDING.value:
        raise AlreadyRespondedError()
    if request.match.status != MatchStatus.WAITING_FOR_WITNESS.value:
        raise InvalidStateError("Match is not waiting for a witness")

    request.status = decision.value
    if decision == WitnessRequestStatus.ACCEPTED:
        assigned = db.query(match_model.Match).filter(
            match_model.Match.id == request.match_id,
            match_model.Match.status == MatchStatus.WAITING_FOR_WITNESS.value,
            match_model.Match.witness_id.is_(None),
        ).update({match_model.Match.witness_id: actor_id}, synchronize_session=False)
        if assigned:
            logger.info("User %s accepted request %s and is witness of match %s", actor_id, request_id, request.match_id)
        else:
            logger.info("User %s accepted request %s but match %s already has a witness", actor_id, request_id, request.match_id)
    db.commit()
    db.refresh(request)
    return request

def confirm_match_result(db: Session, match_id: int, actor_id: int) -> match_model.Match:
    """
    The assigned witness confirms the submitted result.

    The referee (if any) and the witness are each paid the witness reward,
    capped individually at maximum stamina. The match then becomes
    COMPLETED/CONFIRMED and the tournament is checked for completion.
    """
    db_match = get_match(db, match_id)
    if db_match.witness_id is None or db_match.witness_id != actor_id:
        raise NotAssignedWitnessError()
    if db_match.status != MatchStatus.WAITING_FOR_WITNESS.value:
        raise InvalidStateError("Match is not waiting for a witness")

    tournament = db_match.tournament
    reward, pool_bonus = compute_witness_reward(len(tournament.participants), len(tournament.matches))
    reason = f"Match {db_match.id} reward (Base: {BASE_REWARD}, Bonus: {pool_bonus:.2f})"

    try:
        if db_match.referee_id is not None:
            stamina_service.credit_with_cap(db, db_match.referee_id, reward, reason, commit=False)
        stamina_service.credit_with_cap(db, actor_id, reward, reason, commit=False)

        db_match.status = MatchStatus.COMPLETED.value
        db_match.verification_status = VerificationStatus.CONFIRMED.value
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info("Match %s confirmed by witness %s, reward %.3f", match_id, actor_id, reward)

    completion_service.check_tournament_completion(db, db_match.tournament_id)
    db.refresh(db_match)
    return db_match
