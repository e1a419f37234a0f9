"""
Declaring actions, challenges and blocks.

The response windows work by unanimity: a window stays open until every
eligible player has either passed or been overtaken by a challenge or a
block. responded_player_ids records who has passed so far.
"""

from __future__ import annotations

import logging

from ..errors import IllegalTransition
from ..rules.characters import (
    action_cost,
    blockers_for,
    character_for_action,
    get_definition,
    is_blockable,
    is_challengeable,
    is_target_only_block,
    requires_target,
)
from ..state.queries import alive_players, get_player
from ..state.schema import (
    FORCED_COUP_THRESHOLD,
    ActionType,
    Character,
    GamePhase,
    GameState,
    LogKind,
    PendingAction,
    PendingBlock,
    Player,
    SelectionReason,
)
from .influence import (
    add_coins,
    advance_turn,
    append_log,
    inflict_loss,
    record_response,
    replace_proven_card,
    require_phase,
    transition,
)
from .resolution import begin_resolution

logger = logging.getLogger(__name__)


# ─── Queries ─────────────────────────────────────────────────────

def available_actions(state: GameState) -> list[ActionType]:
    """
    Action types the current player may declare right now.

    At FORCED_COUP_THRESHOLD coins or more the only legal action is Coup.
    Character actions are listed whether or not the player holds the
    character; claiming one you lack is a bluff, not an error.
    """
    if state.phase != GamePhase.AWAITING_ACTION:
        return []
    player = state.current_player
    if player.coins >= FORCED_COUP_THRESHOLD:
        return [ActionType.COUP]

    actions = [ActionType.INCOME, ActionType.FOREIGN_AID]
    for character in state.config.enabled_characters:
        action_type = get_definition(character).action
        if action_type is not None and player.coins >= action_cost(action_type):
            actions.append(action_type)
    if player.coins >= action_cost(ActionType.COUP):
        actions.append(ActionType.COUP)
    return actions


def eligible_blockers(state: GameState) -> list[Player]:
    """
    Players allowed to block the pending action.

    Target-only blocks (Steal, Assassinate, Examine) may be claimed by the
    designated target alone; any other blockable action by every alive
    player except the actor.
    """
    action = state.pending_action
    if action is None or not is_blockable(action.type, state.config.enabled_characters):
        return []
    if is_target_only_block(action.type):
        if action.target_id is None:
            return []
        target = get_player(state, action.target_id)
        return [] if target.eliminated else [target]
    return [p for p in alive_players(state) if p.id != action.source_id]


def challenge_responders(state: GameState) -> list[Player]:
    """Players who must pass before the open challenge window closes."""
    if state.phase == GamePhase.AWAITING_CHALLENGE_ON_BLOCK and state.pending_block is not None:
        excluded = state.pending_block.blocker_id
    elif state.pending_action is not None:
        excluded = state.pending_action.source_id
    else:
        return []
    return [p for p in alive_players(state) if p.id != excluded]


def awaiting_player_ids(state: GameState) -> list[str]:
    """Ids of the players whose input the current phase is waiting for."""
    phase = state.phase
    responded = set(state.responded_player_ids)
    action = state.pending_action

    if phase == GamePhase.AWAITING_ACTION:
        return [state.current_player.id]
    if phase in (GamePhase.AWAITING_CHALLENGE_ON_ACTION, GamePhase.AWAITING_CHALLENGE_ON_BLOCK):
        return [p.id for p in challenge_responders(state) if p.id not in responded]
    if phase == GamePhase.AWAITING_BLOCK:
        return [p.id for p in eligible_blockers(state) if p.id not in responded]
    if phase == GamePhase.AWAITING_CARD_SELECTION and state.pending_loss is not None:
        return [state.pending_loss.player_id]
    if phase in (
        GamePhase.AWAITING_EXCHANGE_SELECTION,
        GamePhase.AWAITING_EXAMINE_DECISION,
        GamePhase.AWAITING_INQUISITOR_CHOICE,
    ) and action is not None:
        return [action.source_id]
    if phase == GamePhase.AWAITING_COUP_REDIRECT and state.redirect_chain is not None:
        return [state.redirect_chain.tail]
    if phase == GamePhase.AWAITING_COUP_REDIRECT_CHALLENGE and state.redirect_chain is not None:
        redirector = state.redirect_chain.redirector
        return [p.id for p in alive_players(state) if p.id != redirector and p.id not in responded]
    return []


# ─── Declaring ───────────────────────────────────────────────────

@transition
def declare_action(
    state: GameState,
    player_id: str,
    action_type: ActionType | str,
    target_id: str | None = None,
) -> GameState:
    """
    The current player declares an action.

    The action's cost is paid here and is never refunded, whatever
    happens to the action afterwards.

    Raises:
        UnknownPlayer: If player_id or target_id is not in the roster
        IllegalTransition: Wrong phase, not this player's turn, an action
            that is unavailable (or not the forced Coup), or a bad target
    """
    require_phase(state, "declare an action", GamePhase.AWAITING_ACTION)
    player = get_player(state, player_id)
    if player.id != state.current_player.id:
        raise IllegalTransition("declare an action", f"it is not {player.name}'s turn", state.phase)

    try:
        action_type = ActionType(action_type)
    except ValueError:
        raise IllegalTransition("declare an action", f"unknown action {action_type!r}", state.phase)

    available = available_actions(state)
    if action_type not in available:
        if available == [ActionType.COUP]:
            reason = f"{player.name} holds {player.coins} coins and must Coup"
        else:
            reason = f"{action_type.value} is not available to {player.name}"
        raise IllegalTransition("declare an action", reason, state.phase)

    target = None
    if requires_target(action_type):
        if target_id is None:
            raise IllegalTransition("declare an action", f"{action_type.value} needs a target", state.phase)
        target = get_player(state, target_id)
        if target.id == player.id or target.eliminated:
            raise IllegalTransition("declare an action", f"{target.name} cannot be targeted", state.phase)
    elif target_id is not None:
        raise IllegalTransition("declare an action", f"{action_type.value} takes no target", state.phase)

    claimed = character_for_action(action_type, state.config.enabled_characters)
    action = PendingAction(
        type=action_type,
        source_id=player.id,
        target_id=target.id if target else None,
        claimed_character=claimed,
    )

    state = add_coins(state, player.id, -action_cost(action_type))
    message = f"{player.name} declares {action_type.value}"
    if target is not None:
        message += f" on {target.name}"
    if claimed is not None:
        message += f" (claims {claimed.value})"
    state = append_log(state, LogKind.ACTION, message + ".")
    logger.debug("Turn %d: %s declared %s", state.turn_number, player.id, action_type.value)
    state = state.model_copy(update={"pending_action": action, "responded_player_ids": ()})

    if is_challengeable(action_type):
        return state.model_copy(update={"phase": GamePhase.AWAITING_CHALLENGE_ON_ACTION})
    if eligible_blockers(state):
        return state.model_copy(update={"phase": GamePhase.AWAITING_BLOCK})
    return begin_resolution(state)


def open_block_window(state: GameState) -> GameState:
    """Open the block window when someone may block, otherwise resolve."""
    state = state.model_copy(update={"responded_player_ids": ()})
    if eligible_blockers(state):
        return state.model_copy(update={"phase": GamePhase.AWAITING_BLOCK})
    return begin_resolution(state)


def proceed_after_action_challenge(state: GameState) -> GameState:
    """
    Move on after a challenge against the action failed.

    A failed challenge on an Assassinate forfeits the block window and
    the action resolves at once; other actions go on to open_block_window.
    """
    if state.pending_action.type == ActionType.ASSASSINATE:
        return begin_resolution(state)
    return open_block_window(state)


# ─── Challenges ──────────────────────────────────────────────────

def _require_responder(state: GameState, player: Player, eligible: list[Player], attempted: str) -> None:
    if player.id not in {p.id for p in eligible}:
        raise IllegalTransition(attempted, f"{player.name} is not eligible to respond", state.phase)
    if player.id in state.responded_player_ids:
        raise IllegalTransition(attempted, f"{player.name} has already responded", state.phase)


def _holds(player: Player, character: Character) -> bool:
    return any(not c.revealed and c.character == character for c in player.influence)


@transition
def challenge_action(state: GameState, challenger_id: str) -> GameState:
    """
    Challenge the actor's character claim.

    A proven claim re-randomizes the proven card and costs the challenger
    one influence; a bluff costs the actor one influence and voids the
    action.
    """
    require_phase(state, "challenge the action", GamePhase.AWAITING_CHALLENGE_ON_ACTION)
    challenger = get_player(state, challenger_id)
    _require_responder(state, challenger, challenge_responders(state), "challenge the action")

    action = state.pending_action
    actor = get_player(state, action.source_id)
    origin = GamePhase.AWAITING_CHALLENGE_ON_ACTION

    if _holds(actor, action.claimed_character):
        state = append_log(
            state, LogKind.CHALLENGE,
            f"{challenger.name} challenges {actor.name}, who reveals {action.claimed_character.value}. Challenge fails.",
        )
        state = replace_proven_card(state, actor.id, action.claimed_character)
        return inflict_loss(state, challenger.id, SelectionReason.CHALLENGE_PENALTY, origin)

    state = append_log(
        state, LogKind.CHALLENGE,
        f"{challenger.name} challenges {actor.name}, who was bluffing. Challenge succeeds.",
    )
    return inflict_loss(state, actor.id, SelectionReason.CHALLENGE_PENALTY, origin)


@transition
def pass_challenge(state: GameState, player_id: str) -> GameState:
    """
    Decline to challenge the open claim.

    Once every eligible player has passed: an action claim proceeds to the
    block window (or resolves); a block claim stands and the action is
    voided.
    """
    require_phase(
        state, "pass on a challenge",
        GamePhase.AWAITING_CHALLENGE_ON_ACTION, GamePhase.AWAITING_CHALLENGE_ON_BLOCK,
    )
    player = get_player(state, player_id)
    responders = challenge_responders(state)
    _require_responder(state, player, responders, "pass on a challenge")

    state = record_response(state, player.id)
    if len(state.responded_player_ids) < len(responders):
        return state

    if state.phase == GamePhase.AWAITING_CHALLENGE_ON_ACTION:
        return open_block_window(state)

    blocker = get_player(state, state.pending_block.blocker_id)
    state = append_log(state, LogKind.BLOCK, f"The block by {blocker.name} stands.")
    return advance_turn(state)


# ─── Blocks ──────────────────────────────────────────────────────

@transition
def declare_block(state: GameState, blocker_id: str, claimed_character: Character | str) -> GameState:
    """
    Block the pending action by claiming a blocking character.

    Raises:
        IllegalTransition: Outside AWAITING_BLOCK, an ineligible blocker,
            or a character that cannot block this action
    """
    require_phase(state, "block", GamePhase.AWAITING_BLOCK)
    blocker = get_player(state, blocker_id)
    _require_responder(state, blocker, eligible_blockers(state), "block")

    action = state.pending_action
    try:
        claimed_character = Character(claimed_character)
    except ValueError:
        raise IllegalTransition("block", f"unknown character {claimed_character!r}", state.phase)
    if claimed_character not in blockers_for(action.type, state.config.enabled_characters):
        raise IllegalTransition(
            "block", f"{claimed_character.value} cannot block {action.type.value}", state.phase
        )

    state = append_log(
        state, LogKind.BLOCK,
        f"{blocker.name} blocks {action.type.value} (claims {claimed_character.value}).",
    )
    return state.model_copy(
        update={
            "phase": GamePhase.AWAITING_CHALLENGE_ON_BLOCK,
            "pending_block": PendingBlock(
                blocker_id=blocker.id,
                claimed_character=claimed_character,
                blocked_action=action,
            ),
            "responded_player_ids": (),
        }
    )


@transition
def pass_block(state: GameState, player_id: str) -> GameState:
    """Decline to block; the action resolves once every eligible blocker has passed."""
    require_phase(state, "pass on a block", GamePhase.AWAITING_BLOCK)
    player = get_player(state, player_id)
    blockers = eligible_blockers(state)
    _require_responder(state, player, blockers, "pass on a block")

    state = record_response(state, player.id)
    if len(state.responded_player_ids) < len(blockers):
        return state
    return begin_resolution(state)


@transition
def challenge_block(state: GameState, challenger_id: str) -> GameState:
    """
    The actor challenges the blocker's claim.

    Block upheld: the blocker's card is re-randomized, the actor loses one
    influence and the action stays voided. Block overturned: the blocker
    loses one influence and the original action resolves.
    """
    require_phase(state, "challenge the block", GamePhase.AWAITING_CHALLENGE_ON_BLOCK)
    challenger = get_player(state, challenger_id)
    action = state.pending_action
    if challenger.id != action.source_id:
        raise IllegalTransition("challenge the block", "only the acting player may challenge a block", state.phase)
    if challenger.id in state.responded_player_ids:
        raise IllegalTransition("challenge the block", f"{challenger.name} has already passed", state.phase)

    block = state.pending_block
    blocker = get_player(state, block.blocker_id)
    origin = GamePhase.AWAITING_CHALLENGE_ON_BLOCK

    if _holds(blocker, block.claimed_character):
        state = append_log(
            state, LogKind.CHALLENGE,
            f"{challenger.name} challenges the block; {blocker.name} reveals {block.claimed_character.value}. Block upheld.",
        )
        state = replace_proven_card(state, blocker.id, block.claimed_character)
        return inflict_loss(state, challenger.id, SelectionReason.CHALLENGE_PENALTY, origin)

    state = append_log(
        state, LogKind.CHALLENGE,
        f"{challenger.name} challenges the block; {blocker.name} was bluffing. Block overturned.",
    )
    return inflict_loss(state, blocker.id, SelectionReason.CHALLENGE_PENALTY, origin)
