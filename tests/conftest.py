import random

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from courtside.models import Base, User, Tournament, TournamentParticipant, Match, UserRole
from courtside.services import system_config_service

TEST_DATABASE_URL = "sqlite://"


@pytest.fixture
def engine():
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make_user(name=None, stamina=10.0, role=UserRole.ATHLETE.value, total_points=0):
        counter["n"] += 1
        user = User(
            name=name or f"Player {counter['n']}",
            email=f"player{counter['n']}@club.com",
            role=role,
            stamina=stamina,
            total_points=total_points,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def admin(make_user):
    return make_user(name="Admin", role=UserRole.ADMIN.value)


@pytest.fixture
def make_tournament(db):
    def _make_tournament(players=(), creator=None, min_players=4, max_players=32, status="OPEN", title="Spring Open"):
        tournament = Tournament(
            title=title,
            min_players=min_players,
            max_players=max_players,
            status=status,
            creator_id=creator.id if creator else None,
        )
        db.add(tournament)
        db.flush()
        for player in players:
            db.add(TournamentParticipant(user_id=player.id, tournament_id=tournament.id))
        db.commit()
        db.refresh(tournament)
        return tournament

    return _make_tournament


@pytest.fixture
def make_match(db):
    def _make_match(tournament, player1, player2, round=1, status="PENDING", winner=None, referee=None):
        match = Match(
            tournament_id=tournament.id,
            player1_id=player1.id,
            player2_id=player2.id,
            round=round,
            status=status,
            verification_status="CONFIRMED" if status == "COMPLETED" else None,
            winner_id=winner.id if winner else None,
            referee_id=referee.id if referee else None,
        )
        db.add(match)
        db.commit()
        db.refresh(match)
        return match

    return _make_match


@pytest.fixture
def verification_off(db):
    system_config_service.set_system_config(db, system_config_service.REQUIRE_MATCH_VERIFICATION, "false")


@pytest.fixture
def stamina_off(db):
    system_config_service.set_system_config(db, system_config_service.REQUIRE_STAMINA_TO_JOIN, "false")
