"""
coup-engine: a rules engine for Coup-style bluffing card games.

The engine is a pure reducer over immutable pydantic state:

    state = create_game(GameConfig(player_count=3), seed=1)
    state = declare_action(state, "player-0", ActionType.TAX)
    state = pass_challenge(state, "player-1")
"""

from .errors import EngineError, IllegalTransition, InvalidSelection, UnknownPlayer
from .state import (
    ActionType,
    Character,
    GameConfig,
    GamePhase,
    GameState,
    Move,
    Operation,
)
from .systems import (
    MatchSession,
    apply_move,
    create_game,
    declare_action,
    challenge_action,
    pass_challenge,
    declare_block,
    pass_block,
    challenge_block,
    select_card_to_lose,
    complete_exchange,
    resolve_inquisitor_choice,
    resolve_examine,
    declare_coup_redirect,
    challenge_coup_redirect,
    pass_coup_redirect,
    pass_coup_redirect_challenge,
)

__version__ = "0.1.0"

__all__ = [
    "EngineError",
    "IllegalTransition",
    "InvalidSelection",
    "UnknownPlayer",
    "ActionType",
    "Character",
    "GameConfig",
    "GamePhase",
    "GameState",
    "Move",
    "Operation",
    "MatchSession",
    "apply_move",
    "create_game",
    "declare_action",
    "challenge_action",
    "pass_challenge",
    "declare_block",
    "pass_block",
    "challenge_block",
    "select_card_to_lose",
    "complete_exchange",
    "resolve_inquisitor_choice",
    "resolve_examine",
    "declare_coup_redirect",
    "challenge_coup_redirect",
    "pass_coup_redirect",
    "pass_coup_redirect_challenge",
]
