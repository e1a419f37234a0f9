"""
Turn engine for coup-engine.

Every transition takes a GameState and returns its successor; none of
them mutate. MatchSession wraps them for hosts that need a single
authoritative state.
"""

from .deal import create_game, build_court_deck
from .influence import select_card_to_lose, advance_turn
from .turns import (
    available_actions,
    eligible_blockers,
    awaiting_player_ids,
    declare_action,
    challenge_action,
    pass_challenge,
    declare_block,
    pass_block,
    challenge_block,
)
from .resolution import (
    resolve_action,
    complete_exchange,
    resolve_examine,
    resolve_inquisitor_choice,
)
from .redirect import (
    declare_coup_redirect,
    challenge_coup_redirect,
    pass_coup_redirect,
    pass_coup_redirect_challenge,
)
from .moves import apply_move
from .session import MatchSession, SessionError, StaleStateError

__all__ = [
    "create_game",
    "build_court_deck",
    # Queries
    "available_actions",
    "eligible_blockers",
    "awaiting_player_ids",
    # Transitions
    "declare_action",
    "challenge_action",
    "pass_challenge",
    "declare_block",
    "pass_block",
    "challenge_block",
    "resolve_action",
    "select_card_to_lose",
    "complete_exchange",
    "resolve_examine",
    "resolve_inquisitor_choice",
    "declare_coup_redirect",
    "challenge_coup_redirect",
    "pass_coup_redirect",
    "pass_coup_redirect_challenge",
    "advance_turn",
    # Moves and sessions
    "apply_move",
    "MatchSession",
    "SessionError",
    "StaleStateError",
]
