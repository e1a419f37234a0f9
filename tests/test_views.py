"""Tests for per-viewer state redaction."""

import json

import pytest

from coup_engine.errors import UnknownPlayer
from coup_engine.interface.views import HIDDEN, view_for, visible_characters
from coup_engine.state.schema import ActionType, BASE_CHARACTERS, Character
from coup_engine.systems import (
    declare_action,
    pass_challenge,
    resolve_inquisitor_choice,
)

from conftest import make_state, rig_hands

D, A, C, AM, CO = (
    Character.DUKE,
    Character.ASSASSIN,
    Character.CAPTAIN,
    Character.AMBASSADOR,
    Character.CONTESSA,
)


@pytest.fixture
def table():
    return rig_hands(
        make_state(3),
        {"p0": [AM, D], "p1": [C, CO], "p2": [A, CO]},
        revealed={"p2": (0,)},
    )


def cards_of(view, player_id):
    player = next(p for p in view["players"] if p["id"] == player_id)
    return [card["character"] for card in player["influence"]]


class TestViewFor:
    """Test what each viewer is shown."""

    def test_secrets_are_dropped(self, table):
        view = view_for(table, "p0")
        for key in ("seed", "entropy", "court_deck", "config"):
            assert key not in view
        assert view["court_deck_size"] == len(table.court_deck)
        assert view["current_player_id"] == "p0"
        assert view["enabled_characters"] == [c.value for c in BASE_CHARACTERS]

    def test_own_cards_visible(self, table):
        view = view_for(table, "p0")
        assert cards_of(view, "p0") == ["Ambassador", "Duke"]
        assert cards_of(view, "p1") == [HIDDEN, HIDDEN]

    def test_revealed_cards_visible_to_all(self, table):
        for viewer in ("p0", "p1", None):
            assert cards_of(view_for(table, viewer), "p2") == ["Assassin", HIDDEN]

    def test_spectator_sees_no_hidden_card(self, table):
        assert visible_characters(table, None) == ["Assassin"]

    def test_eliminated_flag(self):
        state = rig_hands(make_state(2), {"p0": [D, C], "p1": [A, CO]}, revealed={"p1": (0, 1)})
        players = {p["id"]: p for p in view_for(state)["players"]}
        assert players["p1"]["eliminated"]
        assert not players["p0"]["eliminated"]

    def test_unknown_viewer(self, table):
        with pytest.raises(UnknownPlayer):
            view_for(table, "p9")

    def test_json_ready(self, table):
        json.dumps(view_for(table, "p1"))

    def test_drawn_cards_only_for_actor(self, table):
        state = declare_action(table, "p0", ActionType.EXCHANGE)
        state = pass_challenge(pass_challenge(state, "p1"), "p2")
        drawn = [c.value for c in state.drawn_cards]

        actor_view = view_for(state, "p0")
        other_view = view_for(state, "p1")
        assert actor_view["drawn_cards"] == drawn
        assert actor_view["drawn_card_count"] == 2
        assert other_view["drawn_cards"] == []
        assert other_view["drawn_card_count"] == 2

    def test_examined_card_only_for_inquisitor(self):
        inquisitor = Character.INQUISITOR
        state = rig_hands(
            make_state(2, characters=BASE_CHARACTERS + (inquisitor,)),
            {"p0": [inquisitor, D], "p1": [C, CO]},
            revealed={"p1": (1,)},
        )
        state = pass_challenge(declare_action(state, "p0", ActionType.EXAMINE), "p1")
        state = resolve_inquisitor_choice(state, "p0", "examine", "p1")

        assert view_for(state, "p0")["examined_character"] == "Captain"
        assert view_for(state, "p1")["examined_character"] is None
        assert view_for(state)["examined_character"] is None
