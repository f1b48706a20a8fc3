import random

import pytest

from courtside.core.config import MAX_STAMINA
from courtside.core.exceptions import (
    AlreadyRespondedError,
    InvalidDecisionError,
    InvalidResultError,
    InvalidStateError,
    NotAssignedWitnessError,
    NotFoundError,
    UnauthorizedError,
)
from courtside.models import StaminaLog, WitnessRequest
from courtside.services import match_service, system_config_service


@pytest.fixture
def field(make_user, make_tournament, make_match):
    """An in-progress tournament with eight players and one pending match."""
    players = [make_user() for _ in range(8)]
    tournament = make_tournament(players=players, status="IN_PROGRESS")
    match = make_match(tournament, players[0], players[1])
    return tournament, players, match


class TestComputeWitnessReward:

    def test_reward_for_eight_players_six_matches(self):
        reward, bonus = match_service.compute_witness_reward(8, 6)
        assert bonus == pytest.approx(16.0 / 12)
        assert reward == pytest.approx(0.3 + 16.0 / 12)

    def test_no_matches_means_no_bonus(self):
        reward, bonus = match_service.compute_witness_reward(4, 0)
        assert bonus == 0.0
        assert reward == pytest.approx(0.3)


class TestSubmitResult:

    def test_player_submission_waits_for_witness(self, db, field):
        _, players, match = field
        updated = match_service.submit_match_result(db, match.id, players[0].id, "6-4, 6-3", players[0].id)

        assert updated.status == "WAITING_FOR_WITNESS"
        assert updated.verification_status == "WAITING_FOR_WITNESS"
        assert updated.score == "6-4, 6-3"
        assert updated.winner_id == players[0].id
        assert updated.referee_id is None

    def test_player_submission_keeps_existing_referee(self, db, make_user, make_tournament, make_match):
        p1, p2, ref = make_user(), make_user(), make_user()
        tournament = make_tournament(players=[p1, p2, ref], status="IN_PROGRESS")
        match = make_match(tournament, p1, p2, referee=ref)

        updated = match_service.submit_match_result(db, match.id, p2.id, "7-5", p2.id)
        assert updated.referee_id == ref.id

    def test_referee_can_submit(self, db, make_user, make_tournament, make_match):
        p1, p2, ref = make_user(), make_user(), make_user()
        tournament = make_tournament(players=[p1, p2, ref], status="IN_PROGRESS")
        match = make_match(tournament, p1, p2, referee=ref)

        updated = match_service.submit_match_result(db, match.id, ref.id, "6-0", p1.id)
        assert updated.referee_id == ref.id
        assert updated.status == "WAITING_FOR_WITNESS"

    def test_outsider_cannot_submit(self, db, field):
        _, players, match = field
        with pytest.raises(UnauthorizedError):
            match_service.submit_match_result(db, match.id, players[5].id, "6-0", players[0].id)

    def test_winner_must_be_a_player(self, db, field):
        _, players, match = field
        with pytest.raises(InvalidResultError):
            match_service.submit_match_result(db, match.id, players[0].id, "6-0", players[4].id)

    def test_unknown_match(self, db, field):
        _, players, _ = field
        with pytest.raises(NotFoundError):
            match_service.submit_match_result(db, 4242, players[0].id, "6-0", players[0].id)

    @pytest.mark.usefixtures("verification_off")
    def test_without_verification_match_completes_immediately(self, db, field):
        tournament, players, match = field
        updated = match_service.submit_match_result(db, match.id, players[1].id, "6-2", players[1].id)

        assert updated.status == "COMPLETED"
        assert updated.verification_status == "CONFIRMED"
        # the only match is done, so the tournament completes and points are awarded
        db.refresh(tournament)
        assert tournament.status == "COMPLETED"
        db.refresh(players[1])
        assert players[1].total_points == 10

    @pytest.mark.usefixtures("verification_off")
    def test_completed_match_cannot_be_resubmitted(self, db, field):
        _, players, match = field
        match_service.submit_match_result(db, match.id, players[0].id, "6-2", players[0].id)
        with pytest.raises(InvalidStateError):
            match_service.submit_match_result(db, match.id, players[1].id, "2-6", players[1].id)


class TestRequestWitnesses:

    def test_selects_five_candidates_excluding_players(self, db, field):
        _, players, match = field
        match_service.submit_match_result(db, match.id, players[0].id, "6-1", players[0].id)

        requests = match_service.request_witnesses(db, match.id, players[0].id, rng=random.Random(3))

        assert len(requests) == 5
        chosen = {r.user_id for r in requests}
        assert len(chosen) == 5
        assert chosen.isdisjoint({players[0].id, players[1].id})
        for request in requests:
            assert request.status == "PENDING"
            delta = request.expires_at - request.created_at
            assert 14 * 60 <= delta.total_seconds() <= 15 * 60 + 1

    def test_small_pool_requests_everyone_eligible(self, db, make_user, make_tournament, make_match):
        p1, p2, ref, other = make_user(), make_user(), make_user(), make_user()
        tournament = make_tournament(players=[p1, p2, ref, other], status="IN_PROGRESS")
        match = make_match(tournament, p1, p2, referee=ref)
        match_service.submit_match_result(db, match.id, ref.id, "6-1", p1.id)

        requests = match_service.request_witnesses(db, match.id, ref.id, rng=random.Random(0))

        assert [r.user_id for r in requests] == [other.id]

    def test_same_seed_same_selection(self, db, field):
        _, players, match = field
        match_service.submit_match_result(db, match.id, players[0].id, "6-1", players[0].id)

        first = match_service.request_witnesses(db, match.id, players[0].id, rng=random.Random(11))
        second = match_service.request_witnesses(db, match.id, players[0].id, rng=random.Random(11))
        assert [r.user_id for r in first] == [r.user_id for r in second]

    def test_requires_submitted_result(self, db, field):
        _, players, match = field
        with pytest.raises(InvalidStateError):
            match_service.request_witnesses(db, match.id, players[0].id)

    def test_outsider_cannot_request(self, db, field):
        _, players, match = field
        match_service.submit_match_result(db, match.id, players[0].id, "6-1", players[0].id)
        with pytest.raises(UnauthorizedError):
            match_service.request_witnesses(db, match.id, players[6].id)


def _submit_and_request(db, players, match, seed=5):
    match_service.submit_match_result(db, match.id, players[0].id, "6-3, 6-4", players[0].id)
    return match_service.request_witnesses(db, match.id, players[0].id, rng=random.Random(seed))


class TestRespondToWitnessRequest:

    def test_accept_assigns_witness(self, db, field):
        _, players, match = field
        request = _submit_and_request(db, players, match)[0]

        answered = match_service.respond_to_witness_request(db, request.id, request.user_id, "ACCEPTED")

        assert answered.status == "ACCEPTED"
        db.refresh(match)
        assert match.witness_id == request.user_id

    def test_reject_leaves_match_untouched(self, db, field):
        _, players, match = field
        request = _submit_and_request(db, players, match)[0]

        match_service.respond_to_witness_request(db, request.id, request.user_id, "REJECTED")

        db.refresh(match)
        assert match.witness_id is None

    def test_first_acceptance_wins(self, db, field):
        _, players, match = field
        first, second = _submit_and_request(db, players, match)[:2]

        match_service.respond_to_witness_request(db, first.id, first.user_id, "ACCEPTED")
        late = match_service.respond_to_witness_request(db, second.id, second.user_id, "ACCEPTED")

        assert late.status == "ACCEPTED"
        db.refresh(match)
        assert match.witness_id == first.user_id

    def test_only_the_candidate_can_answer(self, db, field):
        _, players, match = field
        request = _submit_and_request(db, players, match)[0]
        with pytest.raises(UnauthorizedError):
            match_service.respond_to_witness_request(db, request.id, players[1].id, "ACCEPTED")

    def test_cannot_answer_twice(self, db, field):
        _, players, match = field
        request = _submit_and_request(db, players, match)[0]
        match_service.respond_to_witness_request(db, request.id, request.user_id, "REJECTED")
        with pytest.raises(AlreadyRespondedError):
            match_service.respond_to_witness_request(db, request.id, request.user_id, "ACCEPTED")

    def test_unknown_request(self, db, field):
        _, players, _ = field
        with pytest.raises(NotFoundError):
            match_service.respond_to_witness_request(db, 999, players[0].id, "ACCEPTED")

    def test_unknown_decision(self, db, field):
        _, players, match = field
        request = _submit_and_request(db, players, match)[0]
        for decision in ("MAYBE", "PENDING"):
            with pytest.raises(InvalidDecisionError):
                match_service.respond_to_witness_request(db, request.id, request.user_id, decision)
        db.refresh(request)
        assert request.status == "PENDING"

    def test_cannot_accept_after_match_completed(self, db, field):
        _, players, match = field
        request = _submit_and_request(db, players, match)[0]
        system_config_service.set_system_config(db, system_config_service.REQUIRE_MATCH_VERIFICATION, "false")
        match_service.submit_match_result(db, match.id, players[1].id, "6-4, 6-4", players[1].id)

        with pytest.raises(InvalidStateError):
            match_service.respond_to_witness_request(db, request.id, request.user_id, "ACCEPTED")

        db.refresh(match)
        db.refresh(request)
        assert match.status == "COMPLETED"
        assert match.witness_id is None
        assert request.status == "PENDING"

    def test_pending_requests_listed_for_candidate(self, db, field):
        _, players, match = field
        request = _submit_and_request(db, players, match)[0]

        pending = match_service.list_pending_witness_requests(db, request.user_id)
        assert [r.id for r in pending] == [request.id]

        match_service.respond_to_witness_request(db, request.id, request.user_id, "REJECTED")
        assert match_service.list_pending_witness_requests(db, request.user_id) == []


class TestConfirmMatchResult:

    def _with_witness(self, db, players, match):
        request = _submit_and_request(db, players, match)[0]
        match_service.respond_to_witness_request(db, request.id, request.user_id, "ACCEPTED")
        return db.get(type(players[0]), request.user_id)

    def test_confirm_pays_witness_and_completes_match(self, db, make_user, make_tournament, make_match):
        players = [make_user() for _ in range(8)]
        tournament = make_tournament(players=players, status="IN_PROGRESS")
        matches = [make_match(tournament, players[2 * i], players[2 * i + 1]) for i in range(4)]
        matches += [make_match(tournament, players[0], players[2]), make_match(tournament, players[4], players[6])]
        match = matches[0]
        witness = self._with_witness(db, players, match)

        confirmed = match_service.confirm_match_result(db, match.id, witness.id)

        assert confirmed.status == "COMPLETED"
        assert confirmed.verification_status == "CONFIRMED"
        db.refresh(witness)
        expected = 0.3 + (8 * 2.0) / (6 * 2)
        assert witness.stamina == pytest.approx(10.0 + expected)
        log = db.query(StaminaLog).filter_by(user_id=witness.id).one()
        assert log.reason == f"Match {match.id} reward (Base: 0.3, Bonus: 1.33)"
        db.refresh(tournament)
        assert tournament.status == "IN_PROGRESS"

    def test_confirm_pays_referee_too_each_capped(self, db, make_user, make_tournament, make_match):
        p1, p2 = make_user(), make_user()
        referee = make_user(stamina=19.5)
        witness = make_user(stamina=MAX_STAMINA)
        tournament = make_tournament(players=[p1, p2, referee, witness], status="IN_PROGRESS")
        match = make_match(tournament, p1, p2, referee=referee)
        make_match(tournament, referee, witness)
        match_service.submit_match_result(db, match.id, referee.id, "6-4", p2.id)
        match_service.request_witnesses(db, match.id, referee.id, rng=random.Random(1))
        request = db.query(WitnessRequest).filter_by(match_id=match.id).one()
        assert request.user_id == witness.id
        match_service.respond_to_witness_request(db, request.id, witness.id, "ACCEPTED")

        match_service.confirm_match_result(db, match.id, witness.id)

        db.refresh(referee)
        db.refresh(witness)
        assert referee.stamina == pytest.approx(MAX_STAMINA)
        assert witness.stamina == pytest.approx(MAX_STAMINA)
        assert db.query(StaminaLog).filter_by(user_id=referee.id).one().amount == pytest.approx(0.5)
        assert db.query(StaminaLog).filter_by(user_id=witness.id).count() == 0

    def test_only_assigned_witness_can_confirm(self, db, field):
        _, players, match = field
        self._with_witness(db, players, match)
        with pytest.raises(NotAssignedWitnessError):
            match_service.confirm_match_result(db, match.id, players[0].id)

    def test_without_witness_nobody_can_confirm(self, db, field):
        _, players, match = field
        _submit_and_request(db, players, match)
        with pytest.raises(NotAssignedWitnessError):
            match_service.confirm_match_result(db, match.id, players[0].id)

    def test_confirm_twice_is_rejected(self, db, make_user, make_tournament, make_match):
        players = [make_user() for _ in range(8)]
        tournament = make_tournament(players=players, status="IN_PROGRESS")
        match = make_match(tournament, players[0], players[1])
        make_match(tournament, players[2], players[3])
        witness = self._with_witness(db, players, match)
        match_service.confirm_match_result(db, match.id, witness.id)

        with pytest.raises(InvalidStateError):
            match_service.confirm_match_result(db, match.id, witness.id)
        assert db.query(StaminaLog).filter_by(user_id=witness.id).count() == 1

    def test_last_confirmation_completes_tournament(self, db, field):
        tournament, players, match = field
        witness = self._with_witness(db, players, match)

        match_service.confirm_match_result(db, match.id, witness.id)

        db.refresh(tournament)
        assert tournament.status == "COMPLETED"
        db.refresh(players[0])
        db.refresh(players[1])
        assert players[0].total_points == 10
        assert players[1].total_points == 7
