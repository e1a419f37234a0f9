"""
Coup redirection with the Jester.

While the Jester is enabled, a Coup does not land at once. Its target may
claim the Jester and point the Coup at someone else, that claim may be
challenged, and the new target may redirect again. The chain of hops
lives in GameState.redirect_chain until the Coup lands or fizzles.

Claims are cumulative: the k-th time one player redirects the same Coup
they must hold k Jesters to survive a challenge. Failing that, they lose
every remaining influence at once.
"""

from __future__ import annotations

import logging

from ..errors import IllegalTransition
from ..rules.characters import REDIRECT_CHARACTER
from ..state.queries import alive_players, get_player
from ..state.schema import GamePhase, GameState, LogKind, SelectionReason
from .influence import (
    advance_turn,
    append_log,
    inflict_loss,
    record_response,
    require_phase,
    reveal_all,
    swap_card,
    transition,
)

logger = logging.getLogger(__name__)


def continue_redirect(state: GameState) -> GameState:
    """Hand the Coup to the chain's tail, who may redirect again or take it."""
    chain = state.redirect_chain
    tail = get_player(state, chain.tail)
    if tail.eliminated:
        state = append_log(state, LogKind.ACTION, f"The Coup finds {tail.name} already out of the game.")
        return advance_turn(state)
    return state.model_copy(
        update={"phase": GamePhase.AWAITING_COUP_REDIRECT, "responded_player_ids": ()}
    )


def _redirect_responders(state: GameState) -> list[str]:
    redirector = state.redirect_chain.redirector
    return [p.id for p in alive_players(state) if p.id != redirector]


@transition
def declare_coup_redirect(state: GameState, redirector_id: str, new_target_id: str) -> GameState:
    """
    The Coup's current target claims the Jester and points it elsewhere.

    The new target may be anyone alive except the redirector, the Coup's
    source included.
    """
    require_phase(state, "redirect the Coup", GamePhase.AWAITING_COUP_REDIRECT)
    redirector = get_player(state, redirector_id)
    chain = state.redirect_chain
    if redirector.id != chain.tail:
        raise IllegalTransition("redirect the Coup", f"{redirector.name} is not the Coup's target", state.phase)
    new_target = get_player(state, new_target_id)
    if new_target.id == redirector.id or new_target.eliminated:
        raise IllegalTransition("redirect the Coup", f"{new_target.name} cannot be targeted", state.phase)

    state = append_log(
        state, LogKind.ACTION,
        f"{redirector.name} redirects the Coup to {new_target.name} (claims {REDIRECT_CHARACTER.value}).",
    )
    action = state.pending_action.model_copy(
        update={"target_id": new_target.id, "claimed_character": REDIRECT_CHARACTER}
    )
    return state.model_copy(
        update={
            "phase": GamePhase.AWAITING_COUP_REDIRECT_CHALLENGE,
            "redirect_chain": chain.extend(new_target.id),
            "pending_action": action,
            "responded_player_ids": (),
        }
    )


@transition
def challenge_coup_redirect(state: GameState, challenger_id: str) -> GameState:
    """
    Challenge the latest redirect claim.

    With k = the redirector's claim count for this Coup: holding at least
    k Jesters re-randomizes k of them and costs the challenger one
    influence, after which the new tail decides. Holding fewer reveals
    every card the redirector has left and the Coup fizzles.
    """
    require_phase(state, "challenge the redirect", GamePhase.AWAITING_COUP_REDIRECT_CHALLENGE)
    challenger = get_player(state, challenger_id)
    if challenger.id not in _redirect_responders(state):
        raise IllegalTransition("challenge the redirect", f"{challenger.name} is not eligible to respond", state.phase)
    if challenger.id in state.responded_player_ids:
        raise IllegalTransition("challenge the redirect", f"{challenger.name} has already responded", state.phase)

    chain = state.redirect_chain
    redirector = get_player(state, chain.redirector)
    claims = chain.claim_count(redirector.id)
    jesters = [
        idx for idx, card in enumerate(redirector.influence)
        if not card.revealed and card.character == REDIRECT_CHARACTER
    ]

    if len(jesters) >= claims:
        state = append_log(
            state, LogKind.CHALLENGE,
            f"{challenger.name} challenges the redirect; {redirector.name} reveals "
            f"{claims} {REDIRECT_CHARACTER.value}. Challenge fails.",
        )
        for idx in jesters[:claims]:
            state = swap_card(state, redirector.id, idx)
        return inflict_loss(
            state, challenger.id, SelectionReason.CHALLENGE_PENALTY,
            GamePhase.AWAITING_COUP_REDIRECT_CHALLENGE,
        )

    logger.debug("%s bluffed redirect claim %d with %d Jester(s)", redirector.id, claims, len(jesters))
    state = append_log(
        state, LogKind.CHALLENGE,
        f"{challenger.name} challenges the redirect; {redirector.name} was bluffing "
        f"and loses all remaining influence.",
    )
    state = reveal_all(state, redirector.id)
    if state.phase == GamePhase.GAME_OVER:
        return state
    return advance_turn(state)


@transition
def pass_coup_redirect(state: GameState, player_id: str) -> GameState:
    """The Coup's current target accepts it and loses one influence."""
    require_phase(state, "accept the Coup", GamePhase.AWAITING_COUP_REDIRECT)
    player = get_player(state, player_id)
    if player.id != state.redirect_chain.tail:
        raise IllegalTransition("accept the Coup", f"{player.name} is not the Coup's target", state.phase)

    action = state.pending_action.model_copy(
        update={"target_id": player.id, "redirect_declined": True}
    )
    state = append_log(state, LogKind.ACTION, f"{player.name} takes the Coup.")
    state = state.model_copy(update={"pending_action": action, "redirect_chain": None})
    return inflict_loss(
        state, player.id, SelectionReason.ACTION_EFFECT, GamePhase.AWAITING_COUP_REDIRECT
    )


@transition
def pass_coup_redirect_challenge(state: GameState, player_id: str) -> GameState:
    """Let the redirect stand; once everyone but the redirector passes, the new tail decides."""
    require_phase(state, "pass on the redirect", GamePhase.AWAITING_COUP_REDIRECT_CHALLENGE)
    player = get_player(state, player_id)
    responders = _redirect_responders(state)
    if player.id not in responders:
        raise IllegalTransition("pass on the redirect", f"{player.name} is not eligible to respond", state.phase)
    if player.id in state.responded_player_ids:
        raise IllegalTransition("pass on the redirect", f"{player.name} has already responded", state.phase)

    state = record_response(state, player.id)
    if len(state.responded_player_ids) < len(responders):
        return state
    return continue_redirect(state)
