"""Match creation: build the court deck, deal influence, seed coins."""

from __future__ import annotations

import logging
import random

from ..state.schema import (
    Faction,
    GameConfig,
    GamePhase,
    GameState,
    InfluenceCard,
    LogKind,
    Player,
)
from .influence import append_log, draw_cards, shuffle_into_deck

logger = logging.getLogger(__name__)


def build_court_deck(config: GameConfig) -> tuple:
    """cards_per_character copies of every enabled character, unshuffled."""
    return tuple(
        character
        for character in config.enabled_characters
        for _ in range(config.cards_per_character)
    )


def create_game(config: GameConfig, seed: int | None = None) -> GameState:
    """
    Create the initial state of a match.

    Args:
        config: Validated match configuration
        seed: Seed for every shuffle in the match; random when omitted

    Returns:
        GameState in AWAITING_ACTION with the first seat to play
    """
    if seed is None:
        seed = random.SystemRandom().randrange(2**31)

    placeholders = tuple(
        Player(
            id=config.player_ids[i] if i < len(config.player_ids) else f"player-{i}",
            name=config.player_names[i] if i < len(config.player_names) else f"Player {i + 1}",
            coins=config.starting_coins,
            faction=(
                (Faction.LOYALIST if i % 2 == 0 else Faction.REFORMIST)
                if config.enable_factions else None
            ),
        )
        for i in range(config.player_count)
    )

    state = GameState(
        config=config,
        players=placeholders,
        phase=GamePhase.AWAITING_ACTION,
        seed=seed,
    )
    state = shuffle_into_deck(state, build_court_deck(config))

    players = []
    for player in state.players:
        state, hand = draw_cards(state, config.influence_per_player)
        players.append(
            player.model_copy(update={"influence": tuple(InfluenceCard(character=c) for c in hand)})
        )
    state = state.model_copy(update={"players": tuple(players)})

    logger.debug("Created %d-player match with seed %d", config.player_count, seed)
    return append_log(state, LogKind.SYSTEM, "Match started!")
