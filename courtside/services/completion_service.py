"""
Tournament completion, ranking points and season reranking.

``check_tournament_completion`` is called speculatively after every match
that reaches COMPLETED. It does nothing until the whole tournament is done,
and awards ranking points only from the call that actually moves the
tournament to COMPLETED.

Points follow the bracket position of the final (the match at the highest
round): winner 10, runner-up 7, and 5 for every loser of the round before.
Tournaments started by ``tournament_service.start_tournament`` only contain
round 1 group matches, so the "final" there is the first round-1 match and
no semifinal round exists.
"""
import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from courtside.core.config import WINNER_POINTS, RUNNER_UP_POINTS, SEMIFINALIST_POINTS
from courtside.core.exceptions import NotFoundError
from courtside.models import tournament as tournament_model
from courtside.models import match as match_model
from courtside.models import user as user_model
from courtside.services import system_config_service

logger = logging.getLogger(__name__)

COMPLETED = match_model.MatchStatus.COMPLETED.value

def _all_matches_completed(matches: List[match_model.Match]) -> bool:
    return len(matches) > 0 and all(m.status == COMPLETED for m in matches)

def _award_points(db: Session, user_id: Optional[int], points: int):
    if user_id is None:
        return
    db.query(user_model.User).filter(user_model.User.id == user_id).update(
        {user_model.User.total_points: user_model.User.total_points + points},
        synchronize_session=False,
    )

def _award_ranking_points(db: Session, matches: List[match_model.Match]) -> None:
    max_round = max(m.round for m in matches)
    final_match = min((m for m in matches if m.round == max_round), key=lambda m: m.id)
    if final_match.winner_id is None:
        logger.warning("Final match %s has no winner, no ranking points awarded", final_match.id)
        return

    _award_points(db, final_match.winner_id, WINNER_POINTS)
    _award_points(db, final_match.opponent_of(final_match.winner_id), RUNNER_UP_POINTS)

    for match in matches:
        if match.round == max_round - 1 and match.winner_id is not None:
            _award_points(db, match.opponent_of(match.winner_id), SEMIFINALIST_POINTS)

def check_tournament_completion(db: Session, tournament_id: int) -> bool:
    """
    Completes the tournament when every match is COMPLETED.

    Returns True only for the call that performed the transition; that call
    also awards the ranking points. Any other call returns False and writes
    nothing.
    """
    tournament = db.get(tournament_model.Tournament, tournament_id)
    if not tournament:
        raise NotFoundError("Tournament not found")

    matches = db.query(match_model.Match).filter(match_model.Match.tournament_id == tournament_id).all()
    if not _all_matches_completed(matches):
        logger.debug("Tournament %s not complete yet", tournament_id)
        return False

    # Compare-and-set on status: only one caller wins the transition.
    transitioned = db.query(tournament_model.Tournament).filter(
        tournament_model.Tournament.id == tournament_id,
        tournament_model.Tournament.status != tournament_model.TournamentStatus.COMPLETED.value,
    ).update(
        {
            tournament_model.Tournament.status: tournament_model.TournamentStatus.COMPLETED.value,
            tournament_model.Tournament.updated_at: datetime.utcnow(),
        },
        synchronize_session=False,
    )
    if not transitioned:
        logger.debug("Tournament %s already completed, skipping ranking", tournament_id)
        return False

    _award_ranking_points(db, matches)
    db.commit()
    db.refresh(tournament)
    logger.info("Tournament %s completed", tournament_id)
    return True

def rerank_system(db: Session) -> datetime:
    """Zeroes every user's points and stamps the rerank cutoff. Returns the cutoff."""
    now = datetime.utcnow()
    db.query(user_model.User).update({user_model.User.total_points: 0}, synchronize_session=False)
    system_config_service.set_system_config(
        db, system_config_service.LAST_RERANK_AT, now.isoformat(), commit=False
    )
    db.commit()
    logger.info("Rerank performed, cutoff %s", now.isoformat())
    return now

def backfill_tournament_points(db: Session) -> int:
    """
    Replays completion for tournaments touched since the last rerank whose
    matches are all COMPLETED but that never reached COMPLETED themselves.
    Returns how many tournaments were completed.
    """
    last_rerank_at = system_config_service.get_last_rerank_at(db) or datetime(1970, 1, 1)
    tournaments = db.query(tournament_model.Tournament).filter(
        tournament_model.Tournament.status != tournament_model.TournamentStatus.COMPLETED.value,
        tournament_model.Tournament.updated_at > last_rerank_at,
    ).all()

    updated_count = 0
    for tournament in tournaments:
        if _all_matches_completed(tournament.matches):
            logger.info("Backfilling points for tournament %s", tournament.id)
            if check_tournament_completion(db, tournament.id):
                updated_count += 1
    return updated_count

def get_leaderboard(db: Session, limit: int = 10) -> List[user_model.User]:
    return db.query(user_model.User)\
        .order_by(user_model.User.total_points.desc(), user_model.User.name.asc(), user_model.User.id.asc())\
        .limit(limit)\
        .all()

def get_user_rank(db: Session, user_id: int) -> int:
    user = db.get(user_model.User, user_id)
    if not user:
        raise NotFoundError("User not found")
    ahead = db.query(func.count(user_model.User.id)).filter(
        user_model.User.total_points > user.total_points
    ).scalar()
    return ahead + 1
