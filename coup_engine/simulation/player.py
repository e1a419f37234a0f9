"""Random players for simulated matches."""

from __future__ import annotations

import random
from itertools import combinations

from ..rules.characters import blockers_for, requires_target
from ..state.queries import alive_influence, alive_players, get_player
from ..state.schema import ActionType, GamePhase, GameState, InquisitorChoice
from ..state.schemas.move import Move, Operation
from ..systems.turns import available_actions, challenge_responders, eligible_blockers


def _move(op: Operation, player_id: str, **payload) -> Move:
    return Move(op=op, player_id=player_id, payload=payload)


def legal_moves(state: GameState, player_id: str | None = None) -> list[Move]:
    """
    Every move the engine would accept in state.

    Args:
        state: Current match state
        player_id: Only this player's moves, or everyone's when None

    Returns:
        Moves in a stable order (seat order, then operation)
    """
    moves = _enumerate(state)
    if player_id is not None:
        moves = [m for m in moves if m.player_id == player_id]
    return moves


def _enumerate(state: GameState) -> list[Move]:
    phase = state.phase
    action = state.pending_action
    responded = set(state.responded_player_ids)
    alive = alive_players(state)
    enabled = state.config.enabled_characters

    if phase == GamePhase.AWAITING_ACTION:
        actor = state.current_player
        moves = []
        for action_type in available_actions(state):
            if requires_target(action_type):
                for target in alive:
                    if target.id != actor.id:
                        moves.append(_move(
                            Operation.DECLARE_ACTION, actor.id,
                            action_type=action_type.value, target_id=target.id,
                        ))
            else:
                moves.append(_move(Operation.DECLARE_ACTION, actor.id, action_type=action_type.value))
        return moves

    if phase == GamePhase.AWAITING_CHALLENGE_ON_ACTION:
        moves = []
        for player in challenge_responders(state):
            if player.id not in responded:
                moves.append(_move(Operation.PASS_CHALLENGE, player.id))
                moves.append(_move(Operation.CHALLENGE_ACTION, player.id))
        return moves

    if phase == GamePhase.AWAITING_BLOCK:
        moves = []
        for player in eligible_blockers(state):
            if player.id in responded:
                continue
            moves.append(_move(Operation.PASS_BLOCK, player.id))
            for character in blockers_for(action.type, enabled):
                moves.append(_move(Operation.DECLARE_BLOCK, player.id, character=character.value))
        return moves

    if phase == GamePhase.AWAITING_CHALLENGE_ON_BLOCK:
        moves = []
        for player in challenge_responders(state):
            if player.id in responded:
                continue
            moves.append(_move(Operation.PASS_CHALLENGE, player.id))
            if player.id == action.source_id:
                moves.append(_move(Operation.CHALLENGE_BLOCK, player.id))
        return moves

    if phase == GamePhase.AWAITING_CARD_SELECTION:
        loser = get_player(state, state.pending_loss.player_id)
        return [
            _move(Operation.SELECT_CARD, loser.id, index=idx)
            for idx, card in enumerate(loser.influence)
            if not card.revealed
        ]

    if phase == GamePhase.AWAITING_EXCHANGE_SELECTION:
        actor = get_player(state, action.source_id)
        keep = actor.alive_count
        pool = [c.value for c in state.drawn_cards]
        if action.type != ActionType.EXCHANGE:
            pool += [card.character.value for card in alive_influence(actor)]
        pool.sort()
        options = sorted(set(combinations(pool, keep)))
        return [_move(Operation.COMPLETE_EXCHANGE, actor.id, kept=list(kept)) for kept in options]

    if phase == GamePhase.AWAITING_INQUISITOR_CHOICE:
        moves = [_move(Operation.INQUISITOR_CHOICE, action.source_id, choice=InquisitorChoice.SELF_EXCHANGE.value)]
        for target in alive:
            if target.id != action.source_id:
                moves.append(_move(
                    Operation.INQUISITOR_CHOICE, action.source_id,
                    choice=InquisitorChoice.EXAMINE.value, target_id=target.id,
                ))
        return moves

    if phase == GamePhase.AWAITING_EXAMINE_DECISION:
        return [
            _move(Operation.RESOLVE_EXAMINE, action.source_id, force_exchange=False),
            _move(Operation.RESOLVE_EXAMINE, action.source_id, force_exchange=True),
        ]

    if phase == GamePhase.AWAITING_COUP_REDIRECT:
        tail = state.redirect_chain.tail
        moves = [_move(Operation.PASS_REDIRECT, tail)]
        for target in alive:
            if target.id != tail:
                moves.append(_move(Operation.DECLARE_REDIRECT, tail, target_id=target.id))
        return moves

    if phase == GamePhase.AWAITING_COUP_REDIRECT_CHALLENGE:
        redirector = state.redirect_chain.redirector
        moves = []
        for player in alive:
            if player.id == redirector or player.id in responded:
                continue
            moves.append(_move(Operation.PASS_REDIRECT_CHALLENGE, player.id))
            moves.append(_move(Operation.CHALLENGE_REDIRECT, player.id))
        return moves

    return []


class RandomPlayer:
    """
    Plays one seat by picking uniformly among its legal moves.

    pass_bias tilts response windows toward passing, which keeps
    simulated matches from turning into a challenge on every claim.
    """

    def __init__(self, player_id: str, seed: int | str | None = None, pass_bias: float = 0.0):
        self.player_id = player_id
        self.pass_bias = pass_bias
        self._rng = random.Random(seed)
        self.decisions: list[Operation] = []

    def choose(self, state: GameState) -> Move | None:
        """Pick a move for this seat, or None if it has nothing to do."""
        moves = legal_moves(state, self.player_id)
        if not moves:
            return None
        passes = [m for m in moves if m.op in PASS_OPS]
        if passes and self._rng.random() < self.pass_bias:
            move = self._rng.choice(passes)
        else:
            move = self._rng.choice(moves)
        self.decisions.append(move.op)
        return move

    def get_stats(self) -> dict:
        """Summary counts of what this seat did."""
        return {
            "total_decisions": len(self.decisions),
            "challenges": sum(1 for op in self.decisions if op in CHALLENGE_OPS),
            "blocks": self.decisions.count(Operation.DECLARE_BLOCK),
            "redirects": self.decisions.count(Operation.DECLARE_REDIRECT),
        }


PASS_OPS = frozenset({
    Operation.PASS_CHALLENGE,
    Operation.PASS_BLOCK,
    Operation.PASS_REDIRECT_CHALLENGE,
})

CHALLENGE_OPS = frozenset({
    Operation.CHALLENGE_ACTION,
    Operation.CHALLENGE_BLOCK,
    Operation.CHALLENGE_REDIRECT,
})
