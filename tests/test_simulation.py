"""Tests for legal move enumeration, simulated matches and the CLI."""

import pytest

from coup_engine.interface.cli import main
from coup_engine.rules.characters import action_cost
from coup_engine.simulation import RandomPlayer, legal_moves, run_match
from coup_engine.state.queries import alive_players, card_census, total_coins
from coup_engine.state.schema import (
    ALL_CHARACTERS,
    BASE_CHARACTERS,
    ActionType,
    Character,
    GameConfig,
    GamePhase,
)
from coup_engine.state.schemas import Operation
from coup_engine.systems import apply_move, declare_action, pass_challenge

from conftest import make_state, rig_hands, set_coins


# Net treasury change a single step may cause: a declaration cost, or one
# resolution's income (Income, Foreign Aid, Tax and the promo taxes)
DECLARATION_COSTS = {action_cost(ActionType.ASSASSINATE), action_cost(ActionType.COUP)}
RESOLUTION_GAINS = {1, 2, 3}


def assert_invariants(states, config):
    """Properties every reachable state sequence must keep."""
    eliminated = set()
    for before, after in zip(states, states[1:]):
        assert after.version == before.version + 1
        flow = total_coins(after) - total_coins(before)
        if flow < 0:
            assert before.phase == GamePhase.AWAITING_ACTION
            assert -flow in DECLARATION_COSTS
        elif flow > 0:
            assert flow in RESOLUTION_GAINS
    for state in states:
        census = card_census(state)
        for character in config.enabled_characters:
            assert sum(census[k][character] for k in census) == config.cards_per_character
        assert all(p.coins >= 0 for p in state.players)
        out = {p.id for p in state.players if p.eliminated}
        assert eliminated <= out
        eliminated = out
        alive = alive_players(state)
        assert (state.phase == GamePhase.GAME_OVER) == (len(alive) == 1)
        if state.phase == GamePhase.GAME_OVER:
            assert state.winner_id == alive[0].id


class TestLegalMoves:
    """Test move enumeration."""

    def test_opening_moves(self, three_players):
        moves = legal_moves(three_players)
        assert {m.player_id for m in moves} == {"p0"}
        assert {m.op for m in moves} == {Operation.DECLARE_ACTION}
        steals = [m for m in moves if m.payload["action_type"] == "Steal"]
        assert [m.payload["target_id"] for m in steals] == ["p1", "p2"]

    def test_forced_coup(self, three_players):
        moves = legal_moves(set_coins(three_players, "p0", 10))
        assert {m.payload["action_type"] for m in moves} == {"Coup"}
        assert len(moves) == 2

    def test_filter_by_player(self, three_players):
        assert legal_moves(three_players, "p1") == []

    def test_every_opening_move_applies(self, full_deck_game):
        state = set_coins(full_deck_game, "p0", 7)
        for move in legal_moves(state):
            assert apply_move(state, move).version == 1

    def test_challenge_window(self, three_players):
        state = declare_action(three_players, "p0", "Tax")
        ops = {(m.player_id, m.op) for m in legal_moves(state)}
        assert ops == {
            ("p1", Operation.PASS_CHALLENGE),
            ("p1", Operation.CHALLENGE_ACTION),
            ("p2", Operation.PASS_CHALLENGE),
            ("p2", Operation.CHALLENGE_ACTION),
        }

    def test_exchange_options_are_distinct(self):
        state = rig_hands(make_state(2), {"p0": [Character.AMBASSADOR, Character.DUKE], "p1": [Character.CAPTAIN, Character.CONTESSA]})
        state = pass_challenge(declare_action(state, "p0", "Exchange"), "p1")
        assert state.phase == GamePhase.AWAITING_EXCHANGE_SELECTION

        moves = legal_moves(state)
        kept = [tuple(m.payload["kept"]) for m in moves]
        assert len(kept) == len(set(kept))
        assert all(len(k) == 2 for k in kept)
        assert [sorted(k) for k in kept] == [sorted(c.value for c in state.drawn_cards)]
        for move in moves:
            assert apply_move(state, move).phase == GamePhase.AWAITING_ACTION


class TestRandomPlayer:
    """Test the random seat."""

    def test_nothing_to_do(self, two_players):
        assert RandomPlayer("p1", seed=1).choose(two_players) is None

    def test_choice_is_legal_and_counted(self, two_players):
        player = RandomPlayer("p0", seed=1)
        move = player.choose(two_players)
        assert str(move) in [str(m) for m in legal_moves(two_players, "p0")]
        assert player.get_stats()["total_decisions"] == 1


class TestRunMatch:
    """Property checks over whole simulated matches."""

    @pytest.mark.parametrize("seed", range(6))
    def test_base_game_invariants(self, seed):
        config = GameConfig(player_count=4)
        transcript = run_match(config, seed=seed, keep_states=True)

        assert transcript.completed
        assert_invariants(transcript.states, config)
        final = transcript.final_state
        assert final.phase == GamePhase.GAME_OVER
        assert [p.id for p in final.players if not p.eliminated] == [transcript.winner_id]

    @pytest.mark.parametrize("seed", range(6))
    def test_every_character_invariants(self, seed):
        config = GameConfig(player_count=5, enabled_characters=ALL_CHARACTERS)
        transcript = run_match(config, seed=seed, keep_states=True, pass_bias=0.3)

        assert transcript.completed
        assert_invariants(transcript.states, config)

    def test_two_players_with_jester(self):
        config = GameConfig(player_count=2, enabled_characters=BASE_CHARACTERS + (Character.JESTER,))
        for seed in range(4):
            transcript = run_match(config, seed=seed, keep_states=True)
            assert transcript.completed
            assert_invariants(transcript.states, config)

    def test_seed_fixes_the_match(self):
        first = run_match(GameConfig(player_count=3), seed=99)
        second = run_match(GameConfig(player_count=3), seed=99)
        assert [str(m) for m in first.moves] == [str(m) for m in second.moves]
        assert first.final_state == second.final_state

    def test_move_cap(self):
        transcript = run_match(GameConfig(player_count=4), seed=3, max_moves=5)
        assert len(transcript.moves) == 5
        assert not transcript.completed

    def test_transcript_markdown(self, tmp_path):
        transcript = run_match(GameConfig(player_count=2), seed=5)
        text = transcript.to_markdown()
        winner = next(p.name for p in transcript.final_state.players if p.id == transcript.winner_id)
        assert text.startswith("# Match Transcript")
        assert f"**Winner:** {winner}" in text
        assert "## Turn 1" in text

        path = transcript.save(tmp_path / "runs")
        assert path.exists()
        assert path.read_text(encoding="utf-8") == text


class TestCli:
    """Smoke tests for the command-line entry point."""

    def test_simulate(self):
        assert main(["simulate", "--players", "3", "--seed", "4"]) == 0

    def test_simulate_quiet_with_characters(self, tmp_path):
        code = main([
            "simulate", "--seed", "8", "--quiet",
            "--characters", "promo", "Inquisitor",
            "--save", str(tmp_path),
        ])
        assert code == 0
        assert list(tmp_path.glob("match_*.md"))

    def test_simulate_from_config(self, tmp_path):
        path = tmp_path / "match.yaml"
        assert main(["init-config", str(path)]) == 0
        assert path.exists()
        assert main(["simulate", "--config", str(path), "--seed", "2", "--quiet"]) == 0

    def test_rules(self):
        assert main(["rules"]) == 0
        assert main(["rules", "--characters", "all"]) == 0

    def test_bad_input_returns_error(self):
        assert main(["simulate", "--characters", "Pope", "--quiet"]) == 1
        assert main(["simulate", "--players", "9", "--quiet"]) == 1
