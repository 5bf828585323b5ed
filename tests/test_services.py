"""Tests for service layer."""

import pytest
from townsquare.exceptions import (
    InvalidSeat,
    NoActiveVote,
    NomineeNotSeated,
    NotSeatedError,
    PlayerCountNotSet,
)
from townsquare.models import BallotStatus, DeadStatus, GameState, MessageRef
from townsquare.services import SeatingService, VoteService

MESSAGE = MessageRef(message_id="m1", channel_id="town")


class TestSeatingService:
    """Test SeatingService."""

    def test_set_player_count(self, table_state):
        SeatingService(table_state).set_player_count(7)
        assert table_state.number_of_players == 7

    def test_shrinking_keeps_assignments(self, table_state):
        SeatingService(table_state).set_player_count(3)

        assert table_state.number_of_players == 3
        assert table_state.players.occupant(5) == "P5"

    def test_negative_count_rejected(self, table_state):
        with pytest.raises(ValueError):
            SeatingService(table_state).set_player_count(-1)

    def test_assign_seat(self):
        state = GameState()
        SeatingService(state).assign_seat(1, "P1", "C1")
        assert state.players.lookup(1) == ("P1", "C1")

    def test_assign_invalid_seat(self):
        state = GameState()
        with pytest.raises(InvalidSeat):
            SeatingService(state).assign_seat(0, "P1", "C1")
        assert len(state.players) == 0


class TestVoteService:
    """Test VoteService."""

    def test_start_vote(self, table_state):
        session = VoteService(table_state).start_vote("P1", "P3", "d", MESSAGE)

        assert table_state.current_vote is session
        assert session.clock_hand == 4
        assert session.vote_state == {}
        assert session.dead_state == {}
        assert session.message == MESSAGE

    @pytest.mark.parametrize("nominee,expected", [("P1", 2), ("P4", 5), ("P5", 1)])
    def test_clock_hand_starts_after_nominee(self, table_state, nominee, expected):
        session = VoteService(table_state).start_vote("P2", nominee, "d", MESSAGE)
        assert session.clock_hand == expected

    def test_unseated_nominee_refused(self, table_state):
        with pytest.raises(NomineeNotSeated):
            VoteService(table_state).start_vote("P1", "Stranger", "d", MESSAGE)
        assert table_state.current_vote is None

    def test_zero_players_refused(self, seating):
        state = GameState(players=seating, number_of_players=0)
        with pytest.raises(PlayerCountNotSet):
            VoteService(state).start_vote("P1", "P3", "d", MESSAGE)
        assert state.current_vote is None

    def test_new_vote_replaces_old(self, table_state):
        service = VoteService(table_state)
        service.start_vote("P1", "P3", "first", MESSAGE)
        service.set_hand("P2", raised=True)

        second = service.start_vote("P2", "P5", "second", MESSAGE)

        assert table_state.current_vote is second
        assert second.vote_state == {}
        assert second.clock_hand == 1

    def test_requires_active_vote(self, table_state):
        service = VoteService(table_state)

        with pytest.raises(NoActiveVote):
            service.set_accusation("x")
        with pytest.raises(NoActiveVote):
            service.set_defense("x")
        with pytest.raises(NoActiveVote):
            service.set_hand("P1", raised=True)
        with pytest.raises(NoActiveVote):
            service.cast_ballot(yes=True)

    def test_accusation_and_defense(self, table_state):
        service = VoteService(table_state)
        service.start_vote("P1", "P3", "d", MESSAGE)
        service.set_accusation("They lied about their role")
        service.set_defense("I did not")

        assert table_state.current_vote.accusation == "They lied about their role"
        assert table_state.current_vote.defense == "I did not"

    def test_clock_hand_scenario(self, table_state):
        service = VoteService(table_state)
        service.start_vote("P1", "P3", "d", MESSAGE)
        assert table_state.current_vote.clock_hand == 4

        outcome = service.cast_ballot(yes=True)
        assert outcome.player == "P4"
        assert outcome.status is BallotStatus.YES
        assert outcome.recorded is True
        assert table_state.current_vote.clock_hand == 5

        outcome = service.cast_ballot(yes=False)
        assert outcome.player == "P5"
        assert outcome.status is BallotStatus.NO
        assert table_state.current_vote.clock_hand == 1
        assert outcome.clock_hand == 1

    def test_ballot_ignores_hand(self, table_state):
        service = VoteService(table_state)
        service.start_vote("P1", "P3", "d", MESSAGE)
        service.set_hand("P4", raised=False)

        outcome = service.cast_ballot(yes=True)

        assert outcome.status is BallotStatus.YES
        assert table_state.current_vote.ballot_of("P4") is BallotStatus.YES

    def test_hand_locked_after_ballot(self, table_state):
        service = VoteService(table_state)
        service.start_vote("P1", "P3", "d", MESSAGE)
        service.cast_ballot(yes=True)

        assert service.set_hand("P4", raised=False) is False
        assert table_state.current_vote.ballot_of("P4") is BallotStatus.YES

    def test_second_lap_keeps_first_ballot(self, table_state):
        service = VoteService(table_state)
        service.start_vote("P1", "P3", "d", MESSAGE)
        for _ in range(5):
            service.cast_ballot(yes=True)
        assert table_state.current_vote.clock_hand == 4

        outcome = service.cast_ballot(yes=False)

        assert outcome.recorded is False
        assert outcome.status is BallotStatus.YES
        assert table_state.current_vote.ballot_of("P4") is BallotStatus.YES
        assert table_state.current_vote.clock_hand == 5

    def test_empty_clock_hand_seat(self, seating):
        state = GameState(players=seating, number_of_players=6)
        service = VoteService(state)
        service.start_vote("P1", "P5", "d", MESSAGE)
        assert state.current_vote.clock_hand == 6

        with pytest.raises(NotSeatedError):
            service.cast_ballot(yes=True)
        assert state.current_vote.clock_hand == 6
        assert state.current_vote.vote_state == {}

    def test_set_dead_state(self, table_state):
        service = VoteService(table_state)
        service.start_vote("P1", "P3", "d", MESSAGE)

        service.set_dead_state("P2", DeadStatus.DEAD_VOTE_AVAILABLE)
        assert table_state.current_vote.dead_status_of("P2") is DeadStatus.DEAD_VOTE_AVAILABLE

        service.set_dead_state("P2", DeadStatus.ALIVE)
        assert "P2" not in table_state.current_vote.dead_state

    def test_dead_vote_does_not_gate_ballot(self, table_state):
        service = VoteService(table_state)
        service.start_vote("P1", "P3", "d", MESSAGE)
        service.set_dead_state("P4", DeadStatus.DEAD_VOTE_USED)

        outcome = service.cast_ballot(yes=True)

        assert outcome.recorded is True
        assert outcome.status is BallotStatus.YES
