"""
Per-viewer redaction of match state.

The engine keeps every card face in GameState so hosts can replay and
audit a match. What a given player may see is narrower:

- their own cards, face up or not
- every revealed card
- the size of the court deck, never its order
- the drawn exchange cards, only while they are the acting player
- the examined card, only while they are the Inquisitor deciding on it

The seed and entropy are never shown; with them a viewer could replay
every future shuffle.
"""

from __future__ import annotations

from ..state.queries import get_player
from ..state.schema import GamePhase, GameState

HIDDEN = None  # Character placeholder for a face-down card


def view_for(state: GameState, viewer_id: str | None = None) -> dict:
    """
    JSON-ready snapshot of state as viewer_id is allowed to see it.

    viewer_id None is a spectator: no face-down card is shown.

    Raises:
        UnknownPlayer: If viewer_id is not in the roster
    """
    if viewer_id is not None:
        get_player(state, viewer_id)

    data = state.model_dump(
        mode="json",
        exclude={"seed", "entropy", "court_deck", "drawn_cards", "config"},
    )
    data["court_deck_size"] = len(state.court_deck)
    data["current_player_id"] = state.current_player.id
    data["viewer_id"] = viewer_id
    data["enabled_characters"] = [c.value for c in state.config.enabled_characters]

    for player in data["players"]:
        player["eliminated"] = all(card["revealed"] for card in player["influence"])
        if player["id"] == viewer_id:
            continue
        for card in player["influence"]:
            if not card["revealed"]:
                card["character"] = HIDDEN

    action = state.pending_action
    is_actor = action is not None and action.source_id == viewer_id

    data["drawn_card_count"] = len(state.drawn_cards)
    data["drawn_cards"] = [c.value for c in state.drawn_cards] if is_actor else []

    data["examined_character"] = None
    if (
        is_actor
        and state.phase == GamePhase.AWAITING_EXAMINE_DECISION
        and action.target_id is not None
        and action.examined_card_index is not None
    ):
        target = get_player(state, action.target_id)
        data["examined_character"] = target.influence[action.examined_card_index].character.value

    return data


def visible_characters(state: GameState, viewer_id: str | None) -> list[str]:
    """Every card face viewer_id can currently see, for quick audits in tests and UIs."""
    view = view_for(state, viewer_id)
    faces = [
        card["character"]
        for player in view["players"]
        for card in player["influence"]
        if card["character"] is not HIDDEN
    ]
    return faces + view["drawn_cards"]
