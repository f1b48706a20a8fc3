import logging
import math
import random
import string
from collections import OrderedDict
from typing import Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from courtside.core.config import TOURNAMENT_FEE, GROUP_TARGET_SIZE
from courtside.core.exceptions import (
    AlreadyRegisteredError,
    NotFoundError,
    NotOpenError,
    NotRegisteredError,
    TooFewPlayersError,
    TournamentFullError,
    UnauthorizedError,
)
from courtside.models import tournament as tournament_model
from courtside.models import participant as participant_model
from courtside.models import match as match_model
from courtside.models import user as user_model
from courtside.models import witness_request as witness_request_model
from courtside.schemas import tournament_schemas
from courtside.services import stamina_service, system_config_service

logger = logging.getLogger(__name__)

OPEN = tournament_model.TournamentStatus.OPEN.value

def get_tournament(db: Session, tournament_id: int) -> tournament_model.Tournament:
    tournament = db.get(tournament_model.Tournament, tournament_id)
    if not tournament:
        raise NotFoundError("Tournament not found")
    return tournament

def list_tournaments(db: Session, status: Optional[str] = None) -> List[tournament_model.Tournament]:
    query = db.query(tournament_model.Tournament)
    if status:
        query = query.filter(tournament_model.Tournament.status == status)
    return query.order_by(tournament_model.Tournament.created_at.desc(), tournament_model.Tournament.id.desc()).all()

def list_participants(db: Session, tournament_id: int) -> List[participant_model.TournamentParticipant]:
    get_tournament(db, tournament_id)
    return db.query(participant_model.TournamentParticipant)\
        .filter(participant_model.TournamentParticipant.tournament_id == tournament_id)\
        .order_by(participant_model.TournamentParticipant.id)\
        .all()

def _get_participant(db: Session, tournament_id: int, user_id: int) -> Optional[participant_model.TournamentParticipant]:
    return db.query(participant_model.TournamentParticipant).filter(
        participant_model.TournamentParticipant.tournament_id == tournament_id,
        participant_model.TournamentParticipant.user_id == user_id,
    ).first()

def create_tournament(db: Session, tournament: tournament_schemas.TournamentCreate, creator_id: int) -> tournament_model.Tournament:
    """
    Creates an OPEN tournament. The creator pays the tournament fee and is
    enrolled as its first participant, all in one transaction.
    """
    try:
        stamina_service.deduct_stamina(db, creator_id, TOURNAMENT_FEE, "Create Tournament Fee", commit=False)
        db_tournament = tournament_model.Tournament(
            **tournament.model_dump(),
            creator_id=creator_id,
            status=OPEN,
        )
        db.add(db_tournament)
        db.flush()
        db.add(participant_model.TournamentParticipant(user_id=creator_id, tournament_id=db_tournament.id))
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(db_tournament)
    logger.info("User %s created tournament %s (%s)", creator_id, db_tournament.id, db_tournament.title)
    return db_tournament

def join_tournament(db: Session, tournament_id: int, user_id: int) -> participant_model.TournamentParticipant:
    tournament = get_tournament(db, tournament_id)
    if tournament.status != OPEN:
        raise NotOpenError()

    if _get_participant(db, tournament_id, user_id):
        raise AlreadyRegisteredError()

    participant_count = db.query(participant_model.TournamentParticipant)\
        .filter(participant_model.TournamentParticipant.tournament_id == tournament_id)\
        .count()
    if participant_count >= tournament.max_players:
        raise TournamentFullError()

    try:
        if system_config_service.is_stamina_required(db):
            stamina_service.deduct_stamina(
                db, user_id, TOURNAMENT_FEE, f"Join Tournament {tournament.title}", commit=False
            )
        db_participant = participant_model.TournamentParticipant(user_id=user_id, tournament_id=tournament_id)
        db.add(db_participant)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(db_participant)
    logger.info("User %s joined tournament %s", user_id, tournament_id)
    return db_participant

def withdraw_from_tournament(db: Session, tournament_id: int, user_id: int) -> None:
    """
    Removes the user from an OPEN tournament and refunds the fee.

    The refund is paid whether or not the join was charged; it goes through
    the capped credit so the balance never exceeds the maximum.
    """
    tournament = get_tournament(db, tournament_id)
    if tournament.status != OPEN:
        raise NotOpenError("Cannot withdraw from a closed or started tournament")

    participant = _get_participant(db, tournament_id, user_id)
    if not participant:
        raise NotRegisteredError()

    try:
        db.delete(participant)
        stamina_service.credit_with_cap(
            db, user_id, TOURNAMENT_FEE, f"Withdraw from {tournament.title}", commit=False
        )
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info("User %s withdrew from tournament %s", user_id, tournament_id)

def assign_groups(user_ids: List[int], rng: random.Random, target_size: int = GROUP_TARGET_SIZE) -> Dict[str, List[int]]:
    """
    Shuffles ``user_ids`` and deals them into ``max(1, round(n / target_size))``
    groups named A, B, C... by index modulo the group count.
    """
    shuffled = list(user_ids)
    rng.shuffle(shuffled)
    # half rounds up: 10 players make 3 groups
    num_groups = max(1, int(math.floor(len(shuffled) / target_size + 0.5)))
    groups: Dict[str, List[int]] = OrderedDict()
    for index, user_id in enumerate(shuffled):
        group_name = string.ascii_uppercase[index % num_groups]
        groups.setdefault(group_name, []).append(user_id)
    return groups

def start_tournament(
    db: Session,
    tournament_id: int,
    actor: user_model.User,
    rng: Optional[random.Random] = None,
) -> List[match_model.Match]:
    """
    Starts an OPEN tournament: assigns groups and creates one PENDING round-1
    match for every pair of players inside each group.

    ``rng`` defaults to an unseeded generator; pass a seeded
    ``random.Random`` for reproducible groups.
    """
    rng = rng or random.Random()
    tournament = get_tournament(db, tournament_id)
    if tournament.creator_id != actor.id and not actor.is_admin:
        raise UnauthorizedError("Not authorized to start this tournament")

    participants = list_participants(db, tournament_id)
    if len(participants) < tournament.min_players:
        raise TooFewPlayersError(f"Need at least {tournament.min_players} players to start")
    if tournament.status != OPEN:
        raise NotOpenError()

    groups = assign_groups([p.user_id for p in participants], rng)
    by_user = {p.user_id: p for p in participants}

    new_matches: List[match_model.Match] = []
    try:
        tournament.status = tournament_model.TournamentStatus.IN_PROGRESS.value
        for group_name, user_ids in groups.items():
            for user_id in user_ids:
                by_user[user_id].group = group_name
            for i in range(len(user_ids)):
                for j in range(i + 1, len(user_ids)):
                    new_matches.append(match_model.Match(
                        tournament_id=tournament.id,
                        player1_id=user_ids[i],
                        player2_id=user_ids[j],
                        round=1,
                        status=match_model.MatchStatus.PENDING.value,
                    ))
        db.add_all(new_matches)
        db.commit()
    except Exception:
        db.rollback()
        raise

    for match in new_matches:
        db.refresh(match)
    logger.info(
        "Tournament %s started with %d players in %d groups, %d matches",
        tournament_id, len(participants), len(groups), len(new_matches),
    )
    return new_matches

def delete_tournament(db: Session, tournament_id: int, actor: user_model.User) -> None:
    if not actor.is_admin:
        raise UnauthorizedError("Only admins can delete tournaments")
    tournament = get_tournament(db, tournament_id)

    try:
        match_ids = select(match_model.Match.id).where(match_model.Match.tournament_id == tournament_id)
        db.query(witness_request_model.WitnessRequest)\
            .filter(witness_request_model.WitnessRequest.match_id.in_(match_ids))\
            .delete(synchronize_session=False)
        db.query(match_model.Match)\
            .filter(match_model.Match.tournament_id == tournament_id)\
            .delete(synchronize_session=False)
        db.query(participant_model.TournamentParticipant)\
            .filter(participant_model.TournamentParticipant.tournament_id == tournament_id)\
            .delete(synchronize_session=False)
        db.delete(tournament)
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info("Admin %s deleted tournament %s", actor.id, tournament_id)

def get_group_standings(db: Session, tournament_id: int) -> List[tournament_schemas.GroupStandings]:
    """
    Group table from completed matches: 1 point per win, 0.5 per loss.
    Groups are returned in name order, rows by points then wins.
    """
    participants = list_participants(db, tournament_id)
    rows: Dict[int, tournament_schemas.StandingRow] = {}
    for p in participants:
        rows[p.user_id] = tournament_schemas.StandingRow(
            user_id=p.user_id,
            name=p.user.name or "Unknown",
            group=p.group or "Unassigned",
            points=0.0,
            matches_played=0,
            wins=0,
            losses=0,
        )

    completed = db.query(match_model.Match).filter(
        match_model.Match.tournament_id == tournament_id,
        match_model.Match.status == match_model.MatchStatus.COMPLETED.value,
        match_model.Match.winner_id.isnot(None),
    ).all()
    for match in completed:
        winner = rows.get(match.winner_id)
        if winner:
            winner.points += 1.0
            winner.wins += 1
            winner.matches_played += 1
        loser = rows.get(match.opponent_of(match.winner_id))
        if loser:
            loser.points += 0.5
            loser.losses += 1
            loser.matches_played += 1

    grouped: Dict[str, List[tournament_schemas.StandingRow]] = {}
    for row in rows.values():
        grouped.setdefault(row.group, []).append(row)

    return [
        tournament_schemas.GroupStandings(
            group=name,
            standings=sorted(grouped[name], key=lambda r: (-r.points, -r.wins, r.name)),
        )
        for name in sorted(grouped)
    ]
