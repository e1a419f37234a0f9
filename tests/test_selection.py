"""Tests for choosing which influence to lose."""

import pytest

from coup_engine.errors import IllegalTransition, InvalidSelection, UnknownPlayer
from coup_engine.state.queries import get_player
from coup_engine.state.schema import (
    ActionType,
    Character,
    GamePhase,
    PendingLoss,
    SelectionReason,
)
from coup_engine.systems import challenge_action, declare_action, select_card_to_lose
from coup_engine.systems.influence import CONTINUATIONS, continue_after_loss, inflict_loss

from conftest import make_state, rig_hands, set_coins

D, A, C, AM, CO = (
    Character.DUKE,
    Character.ASSASSIN,
    Character.CAPTAIN,
    Character.AMBASSADOR,
    Character.CONTESSA,
)


@pytest.fixture
def owed():
    """p0 bluffed Tax, p1 challenged, and p0 now owes one of two cards."""
    state = rig_hands(make_state(3), {"p0": [C, AM], "p1": [D, CO], "p2": [A, CO]})
    state = declare_action(state, "p0", ActionType.TAX)
    return challenge_action(state, "p1")


class TestSelectCard:
    """Test select_card_to_lose validation and outcome."""

    def test_pending_loss_recorded(self, owed):
        assert owed.phase == GamePhase.AWAITING_CARD_SELECTION
        assert owed.pending_loss == PendingLoss(
            player_id="p0",
            reason=SelectionReason.CHALLENGE_PENALTY,
            origin=GamePhase.AWAITING_CHALLENGE_ON_ACTION,
        )

    def test_selected_card_is_revealed(self, owed):
        state = select_card_to_lose(owed, "p0", 1)
        influence = get_player(state, "p0").influence
        assert not influence[0].revealed
        assert influence[1].revealed and influence[1].character == AM
        assert state.pending_loss is None

    def test_log_names_revealed_card(self, owed):
        state = select_card_to_lose(owed, "p0", 0)
        assert any("reveals Captain" in entry.message for entry in state.log)

    def test_only_the_owing_player(self, owed):
        with pytest.raises(IllegalTransition):
            select_card_to_lose(owed, "p1", 0)

    def test_unknown_player(self, owed):
        with pytest.raises(UnknownPlayer):
            select_card_to_lose(owed, "nobody", 0)

    def test_index_out_of_range(self, owed):
        with pytest.raises(InvalidSelection):
            select_card_to_lose(owed, "p0", 2)
        with pytest.raises(InvalidSelection):
            select_card_to_lose(owed, "p0", -1)

    def test_already_revealed_card(self):
        state = rig_hands(
            make_state(2, influence_per_player=3),
            {"p0": [C, AM, A], "p1": [D, CO, D]},
            revealed={"p0": (2,)},
        )
        state = challenge_action(declare_action(state, "p0", ActionType.TAX), "p1")
        assert state.phase == GamePhase.AWAITING_CARD_SELECTION
        with pytest.raises(InvalidSelection):
            select_card_to_lose(state, "p0", 2)

    def test_nothing_pending(self, two_players):
        with pytest.raises(IllegalTransition):
            select_card_to_lose(two_players, "p0", 0)

    def test_rejected_selection_leaves_state(self, owed):
        before = owed.model_dump()
        with pytest.raises(InvalidSelection):
            select_card_to_lose(owed, "p0", 5)
        assert owed.model_dump() == before


class TestInflictLoss:
    """Test forced loss of influence."""

    def test_single_card_is_taken_at_once(self):
        state = rig_hands(make_state(3), {"p0": [D, A], "p1": [C, CO], "p2": [AM, D]}, revealed={"p1": (0,)})
        state = set_coins(state, "p0", 7)
        state = declare_action(state, "p0", ActionType.COUP, "p1")
        assert get_player(state, "p1").eliminated
        assert state.phase == GamePhase.AWAITING_ACTION

    def test_unknown_continuation_raises(self, two_players):
        loss = PendingLoss(
            player_id="p1",
            reason=SelectionReason.ACTION_EFFECT,
            origin=GamePhase.AWAITING_ACTION,
        )
        with pytest.raises(IllegalTransition):
            continue_after_loss(two_players, loss)

    def test_player_with_nothing_left_loses_nothing(self):
        state = rig_hands(
            make_state(3),
            {"p0": [D, A], "p1": [C, CO], "p2": [AM, D]},
            revealed={"p2": (0, 1)},
        )
        state = state.model_copy(update={"phase": GamePhase.RESOLVING_ACTION})
        logged = len(state.log)

        state = inflict_loss(state, "p2", SelectionReason.ACTION_EFFECT, GamePhase.RESOLVING_ACTION)
        assert len(state.log) == logged
        assert state.phase == GamePhase.AWAITING_ACTION
        assert state.current_player.id == "p1"


class TestContinuations:
    """Test the post-loss dispatch table."""

    @pytest.mark.parametrize("origin", [
        GamePhase.AWAITING_CHALLENGE_ON_ACTION,
        GamePhase.AWAITING_CHALLENGE_ON_BLOCK,
        GamePhase.AWAITING_COUP_REDIRECT_CHALLENGE,
    ])
    def test_challenge_windows_covered(self, origin):
        for is_source in (True, False):
            assert (origin, SelectionReason.CHALLENGE_PENALTY, is_source) in CONTINUATIONS

    @pytest.mark.parametrize("origin", [
        GamePhase.RESOLVING_ACTION,
        GamePhase.AWAITING_COUP_REDIRECT,
    ])
    def test_action_effects_covered(self, origin):
        for is_source in (True, False):
            assert (origin, SelectionReason.ACTION_EFFECT, is_source) in CONTINUATIONS
