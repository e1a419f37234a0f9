"""
Read-only queries over GameState.

These functions operate on state without being methods on the models,
which keeps the models as pure data and the lookups easy to test.
"""

from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .schema import GameState, InfluenceCard, Player

from ..errors import UnknownPlayer


def alive_influence(player: "Player") -> list["InfluenceCard"]:
    """Unrevealed cards still held by player."""
    return [card for card in player.influence if not card.revealed]


def alive_players(state: "GameState") -> list["Player"]:
    """Players with at least one unrevealed card, in seating order."""
    return [p for p in state.players if not p.eliminated]


def get_player(state: "GameState", player_id: str) -> "Player":
    """
    Look up a player by id.

    Raises:
        UnknownPlayer: If no player in the roster has that id
    """
    for player in state.players:
        if player.id == player_id:
            return player
    raise UnknownPlayer(player_id)


def player_index(state: "GameState", player_id: str) -> int:
    for idx, player in enumerate(state.players):
        if player.id == player_id:
            return idx
    raise UnknownPlayer(player_id)


def first_unrevealed_index(player: "Player") -> int | None:
    for idx, card in enumerate(player.influence):
        if not card.revealed:
            return idx
    return None


def next_alive_index(state: "GameState", start: int | None = None) -> int:
    """Seat index of the next non-eliminated player after start."""
    count = len(state.players)
    origin = state.current_player_index if start is None else start
    idx = (origin + 1) % count
    for _ in range(count):
        if not state.players[idx].eliminated:
            return idx
        idx = (idx + 1) % count
    return origin


def seats_after(state: "GameState", player_id: str) -> list["Player"]:
    """Every other player in turn order, starting with the one after player_id."""
    start = player_index(state, player_id)
    count = len(state.players)
    return [state.players[(start + offset) % count] for offset in range(1, count)]


def total_coins(state: "GameState") -> int:
    return sum(p.coins for p in state.players)


def exchanging_player_id(state: "GameState") -> str | None:
    """
    The actor whose hand is back in the court deck for an Ambassador exchange.

    Between resolving an Exchange and completing it, the actor's unrevealed
    slots still name their old characters but those cards sit in the deck.
    """
    from .schema import ActionType, GamePhase

    action = state.pending_action
    if (
        state.phase == GamePhase.AWAITING_EXCHANGE_SELECTION
        and action is not None
        and action.type == ActionType.EXCHANGE
    ):
        return action.source_id
    return None


def card_census(state: "GameState") -> dict[str, Counter]:
    """
    Where every copy of every character currently sits.

    Returns counters keyed by "deck", "drawn", "unrevealed" and "revealed".
    For each enabled character the four counts always sum to
    config.cards_per_character. An exchanging actor's unrevealed slots are
    not counted; those cards are in the deck.
    """
    returned_by = exchanging_player_id(state)
    unrevealed: Counter = Counter()
    revealed: Counter = Counter()
    for player in state.players:
        for card in player.influence:
            if card.revealed:
                revealed[card.character] += 1
            elif player.id != returned_by:
                unrevealed[card.character] += 1
    return {
        "deck": Counter(state.court_deck),
        "drawn": Counter(state.drawn_cards),
        "unrevealed": unrevealed,
        "revealed": revealed,
    }
