"""
Dispatch a Move to the transition it names.

apply_move is the single entry point for hosts and bots that speak in
Moves rather than calling transitions directly.
"""

from __future__ import annotations

from typing import Callable

from ..errors import IllegalTransition
from ..state.schema import GameState
from ..state.schemas.move import Move, Operation
from .influence import select_card_to_lose
from .redirect import (
    challenge_coup_redirect,
    declare_coup_redirect,
    pass_coup_redirect,
    pass_coup_redirect_challenge,
)
from .resolution import complete_exchange, resolve_examine, resolve_inquisitor_choice
from .turns import (
    challenge_action,
    challenge_block,
    declare_action,
    declare_block,
    pass_block,
    pass_challenge,
)

MoveHandler = Callable[[GameState, str, dict], GameState]


def _required(payload: dict, key: str, op: Operation):
    if key not in payload:
        raise IllegalTransition(op.value, f"payload is missing {key!r}")
    return payload[key]


HANDLERS: dict[Operation, MoveHandler] = {
    Operation.DECLARE_ACTION: lambda s, pid, p: declare_action(
        s, pid, _required(p, "action_type", Operation.DECLARE_ACTION), p.get("target_id"),
    ),
    Operation.CHALLENGE_ACTION: lambda s, pid, p: challenge_action(s, pid),
    Operation.PASS_CHALLENGE: lambda s, pid, p: pass_challenge(s, pid),
    Operation.DECLARE_BLOCK: lambda s, pid, p: declare_block(
        s, pid, _required(p, "character", Operation.DECLARE_BLOCK),
    ),
    Operation.PASS_BLOCK: lambda s, pid, p: pass_block(s, pid),
    Operation.CHALLENGE_BLOCK: lambda s, pid, p: challenge_block(s, pid),
    Operation.SELECT_CARD: lambda s, pid, p: select_card_to_lose(
        s, pid, _required(p, "index", Operation.SELECT_CARD),
    ),
    Operation.COMPLETE_EXCHANGE: lambda s, pid, p: complete_exchange(
        s, pid, _required(p, "kept", Operation.COMPLETE_EXCHANGE), p.get("returned"),
    ),
    Operation.INQUISITOR_CHOICE: lambda s, pid, p: resolve_inquisitor_choice(
        s, pid, _required(p, "choice", Operation.INQUISITOR_CHOICE), p.get("target_id"),
    ),
    Operation.RESOLVE_EXAMINE: lambda s, pid, p: resolve_examine(
        s, pid, bool(_required(p, "force_exchange", Operation.RESOLVE_EXAMINE)), p.get("card_index"),
    ),
    Operation.DECLARE_REDIRECT: lambda s, pid, p: declare_coup_redirect(
        s, pid, _required(p, "target_id", Operation.DECLARE_REDIRECT),
    ),
    Operation.CHALLENGE_REDIRECT: lambda s, pid, p: challenge_coup_redirect(s, pid),
    Operation.PASS_REDIRECT: lambda s, pid, p: pass_coup_redirect(s, pid),
    Operation.PASS_REDIRECT_CHALLENGE: lambda s, pid, p: pass_coup_redirect_challenge(s, pid),
}


def apply_move(state: GameState, move: Move) -> GameState:
    """
    Apply move to state and return the successor.

    Raises whatever the underlying transition raises; state is untouched
    on failure.
    """
    return HANDLERS[move.op](state, move.player_id, move.payload)
