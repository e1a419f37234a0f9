"""
Pytest fixtures for coup-engine tests.

Most tests need a match with known hands. rig_hands sets players's cards
by trading with the court deck, so deck conservation still holds for
every rigged state.
"""

import pytest
from pathlib import Path

# Add the repo root to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from coup_engine.state.schema import (
    ALL_CHARACTERS,
    BASE_CHARACTERS,
    Character,
    GameConfig,
    GameState,
    InfluenceCard,
)
from coup_engine.state.queries import get_player
from coup_engine.systems.deal import create_game


def make_state(
    player_count: int = 2,
    characters: tuple = BASE_CHARACTERS,
    seed: int = 1,
    **config,
) -> GameState:
    """A fresh match with player ids p0, p1, ..."""
    config.setdefault("player_ids", tuple(f"p{i}" for i in range(player_count)))
    config.setdefault("player_names", tuple(f"P{i}" for i in range(player_count)))
    return create_game(
        GameConfig(player_count=player_count, enabled_characters=characters, **config),
        seed=seed,
    )


def rig_hands(
    state: GameState,
    hands: dict[str, list[Character]],
    revealed: dict[str, tuple[int, ...]] | None = None,
) -> GameState:
    """
    Give each listed player exactly the given cards, trading with the court deck.

    All listed players' current cards go back into the deck first, then
    each wanted card is taken out of it, so conservation holds. Indices in
    revealed[player_id] are dealt face up.
    """
    revealed = revealed or {}
    deck = list(state.court_deck)
    for player_id in hands:
        deck.extend(card.character for card in get_player(state, player_id).influence)

    players = []
    for player in state.players:
        if player.id not in hands:
            players.append(player)
            continue
        face_up = revealed.get(player.id, ())
        for character in hands[player.id]:
            assert character in deck, f"no {character.value} left in the deck to rig"
            deck.remove(character)
        influence = tuple(
            InfluenceCard(character=c, revealed=idx in face_up)
            for idx, c in enumerate(hands[player.id])
        )
        players.append(player.model_copy(update={"influence": influence}))
    return state.model_copy(update={"players": tuple(players), "court_deck": tuple(deck)})


def set_coins(state: GameState, player_id: str, coins: int) -> GameState:
    players = tuple(
        p.model_copy(update={"coins": coins}) if p.id == player_id else p
        for p in state.players
    )
    return state.model_copy(update={"players": players})


@pytest.fixture
def two_players():
    """Two-player base game with seed 1."""
    return make_state(2)


@pytest.fixture
def three_players():
    """Three-player base game with seed 1."""
    return make_state(3)


@pytest.fixture
def four_players():
    return make_state(4)


@pytest.fixture
def full_deck_game():
    """Four players with every character enabled."""
    return make_state(4, characters=ALL_CHARACTERS)
