"""
Move schema: one player input addressed to the turn engine.

A Move names a transition operation and carries its arguments in a
payload. Hosts receive Moves over the wire, validate them with pydantic
and pass them to apply_move or to a MatchSession.

Payload by op:
    declare_action:          {"action_type": "Steal", "target_id": "player-1"}
    declare_block:           {"character": "Captain"}
    select_card:             {"index": 0}
    complete_exchange:       {"kept": ["Duke", "Contessa"], "returned": [...]}
    inquisitor_choice:       {"choice": "examine", "target_id": "player-2"}
    resolve_examine:         {"force_exchange": true, "card_index": 1}
    declare_redirect:        {"target_id": "player-0"}
    every other op:          {}
"""

from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


class Operation(str, Enum):
    """Transition operations a player can request."""
    DECLARE_ACTION = "declare_action"
    CHALLENGE_ACTION = "challenge_action"
    PASS_CHALLENGE = "pass_challenge"
    DECLARE_BLOCK = "declare_block"
    PASS_BLOCK = "pass_block"
    CHALLENGE_BLOCK = "challenge_block"
    SELECT_CARD = "select_card"
    COMPLETE_EXCHANGE = "complete_exchange"
    INQUISITOR_CHOICE = "inquisitor_choice"
    RESOLVE_EXAMINE = "resolve_examine"
    DECLARE_REDIRECT = "declare_redirect"
    CHALLENGE_REDIRECT = "challenge_redirect"
    PASS_REDIRECT = "pass_redirect"
    PASS_REDIRECT_CHALLENGE = "pass_redirect_challenge"


class Move(BaseModel):
    """
    A player's request to apply one transition.

    expected_version is optional; when set, a MatchSession rejects the
    move unless it matches the authoritative state's version.
    """
    model_config = ConfigDict(frozen=True)

    move_id: str = Field(default_factory=lambda: str(uuid4())[:8])
    op: Operation
    player_id: str
    payload: dict = Field(default_factory=dict)
    expected_version: int | None = None

    def __str__(self) -> str:
        args = ", ".join(f"{k}={v}" for k, v in self.payload.items())
        return f"{self.player_id}: {self.op.value}({args})"
