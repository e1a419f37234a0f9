"""
Action resolution and the follow-up decisions some actions open.

resolve_action dispatches on the pending action's type through
RESOLVERS. A resolver either finishes the action and advances the turn,
or parks the match in the Awaiting* phase for the input it still needs:

    Exchange / Inquisitor self-exchange  -> AWAITING_EXCHANGE_SELECTION
    Examine                              -> AWAITING_INQUISITOR_CHOICE
    Coup with the Jester in play         -> AWAITING_COUP_REDIRECT
    Assassinate / Coup on a 2+ card hand -> AWAITING_CARD_SELECTION

Costs were paid at declaration; nothing here refunds them.
"""

from __future__ import annotations

from collections import Counter
from typing import Callable

from ..errors import IllegalTransition, InvalidSelection
from ..rules.characters import REDIRECT_CHARACTER
from ..state.queries import alive_influence, get_player, seats_after
from ..state.schema import (
    ActionType,
    Character,
    CoupRedirectChain,
    GamePhase,
    GameState,
    InfluenceCard,
    InquisitorChoice,
    LogKind,
    PendingAction,
    SelectionReason,
)
from .influence import (
    add_coins,
    advance_turn,
    append_log,
    draw_cards,
    inflict_loss,
    require_phase,
    rng_for,
    shuffle_into_deck,
    swap_card,
    transition,
    unrevealed_indices,
    update_player,
)

Resolver = Callable[[GameState, PendingAction], GameState]


def begin_resolution(state: GameState) -> GameState:
    """Enter the transient resolving phase and resolve the pending action."""
    state = state.model_copy(
        update={"phase": GamePhase.RESOLVING_ACTION, "responded_player_ids": ()}
    )
    return resolve_action(state)


@transition
def resolve_action(state: GameState) -> GameState:
    """
    Apply the pending action's effect.

    Raises:
        IllegalTransition: If not resolving, or nothing is pending
    """
    require_phase(state, "resolve an action", GamePhase.RESOLVING_ACTION)
    action = state.pending_action
    if action is None:
        raise IllegalTransition("resolve an action", "no action is pending", state.phase)
    resolver = RESOLVERS.get(action.type)
    if resolver is None:
        raise IllegalTransition("resolve an action", f"no resolver for {action.type.value}", state.phase)
    return resolver(state, action)


# ─── Coin actions ────────────────────────────────────────────────

def _gain(amount: int, verb: str) -> Resolver:
    def resolve(state: GameState, action: PendingAction) -> GameState:
        actor = get_player(state, action.source_id)
        state = add_coins(state, actor.id, amount)
        noun = "coin" if amount == 1 else "coins"
        state = append_log(state, LogKind.ACTION, f"{actor.name} {verb} {amount} {noun}.")
        return advance_turn(state)
    return resolve


def _resolve_bureaucrat_tax(state: GameState, action: PendingAction) -> GameState:
    actor = get_player(state, action.source_id)
    recipient = get_player(state, action.target_id)
    state = add_coins(state, actor.id, 2)
    state = add_coins(state, recipient.id, 1)
    state = append_log(
        state, LogKind.ACTION,
        f"{actor.name} collects 3 coins and hands 1 to {recipient.name}.",
    )
    return advance_turn(state)


def _resolve_steal(state: GameState, action: PendingAction) -> GameState:
    actor = get_player(state, action.source_id)
    target = get_player(state, action.target_id)
    stolen = min(2, target.coins)
    state = add_coins(state, target.id, -stolen)
    state = add_coins(state, actor.id, stolen)
    state = append_log(state, LogKind.ACTION, f"{actor.name} steals {stolen} from {target.name}.")
    return advance_turn(state)


def _resolve_socialist(state: GameState, action: PendingAction) -> GameState:
    """
    Collect up to 1 coin from every other alive player, keep up to 1.

    The remainder goes back out one coin at a time to the other alive
    players holding the fewest coins; ties go to the seat nearest after
    the actor. Total coins in play are unchanged.
    """
    actor = get_player(state, action.source_id)
    others = [p for p in seats_after(state, actor.id) if not p.eliminated]

    collected = 0
    for player in others:
        take = min(1, player.coins)
        if take:
            state = add_coins(state, player.id, -take)
            collected += take

    kept = min(1, collected)
    state = add_coins(state, actor.id, kept)
    remainder = collected - kept

    seat_order = {p.id: pos for pos, p in enumerate(others)}
    while remainder > 0 and others:
        current = [get_player(state, p.id) for p in others]
        poorest = min(current, key=lambda p: (p.coins, seat_order[p.id]))
        state = add_coins(state, poorest.id, 1)
        remainder -= 1

    return advance_turn(append_log(
        state, LogKind.ACTION,
        f"{actor.name} redistributes: collected {collected}, kept {kept}.",
    ))


# ─── Influence actions ───────────────────────────────────────────

def _resolve_assassinate(state: GameState, action: PendingAction) -> GameState:
    actor = get_player(state, action.source_id)
    target = get_player(state, action.target_id)
    state = append_log(state, LogKind.ACTION, f"{actor.name} assassinates {target.name}!")
    if target.eliminated:
        return advance_turn(state)
    return inflict_loss(state, target.id, SelectionReason.ACTION_EFFECT, GamePhase.RESOLVING_ACTION)


def _resolve_coup(state: GameState, action: PendingAction) -> GameState:
    actor = get_player(state, action.source_id)
    target = get_player(state, action.target_id)
    state = append_log(state, LogKind.ACTION, f"{actor.name} launches a Coup against {target.name}!")
    if target.eliminated:
        return advance_turn(state)

    if state.config.is_enabled(REDIRECT_CHARACTER) and not action.redirect_declined:
        return state.model_copy(
            update={
                "phase": GamePhase.AWAITING_COUP_REDIRECT,
                "redirect_chain": CoupRedirectChain(source_id=actor.id, links=(target.id,)),
                "responded_player_ids": (),
            }
        )
    return inflict_loss(state, target.id, SelectionReason.ACTION_EFFECT, GamePhase.RESOLVING_ACTION)


# ─── Card actions ────────────────────────────────────────────────

def _open_exchange(state: GameState, returned: list[Character], count: int) -> GameState:
    state = shuffle_into_deck(state, returned)
    state, drawn = draw_cards(state, count)
    return state.model_copy(
        update={"phase": GamePhase.AWAITING_EXCHANGE_SELECTION, "drawn_cards": drawn}
    )


def _resolve_exchange(state: GameState, action: PendingAction) -> GameState:
    actor = get_player(state, action.source_id)
    state = append_log(state, LogKind.EXCHANGE, f"{actor.name} exchanges with the court deck.")
    # The hand goes back before the draw; its slots are refilled on completion
    hand = [card.character for card in alive_influence(actor)]
    return _open_exchange(state, hand, len(hand))


def _resolve_self_exchange(state: GameState, action: PendingAction) -> GameState:
    actor = get_player(state, action.source_id)
    state = append_log(state, LogKind.EXCHANGE, f"{actor.name} exchanges one card (Inquisitor).")
    return _open_exchange(state, [], 1)


def _resolve_examine(state: GameState, action: PendingAction) -> GameState:
    actor = get_player(state, action.source_id)
    state = append_log(state, LogKind.ACTION, f"{actor.name} calls on the Inquisitor.")
    return state.model_copy(update={"phase": GamePhase.AWAITING_INQUISITOR_CHOICE})


RESOLVERS: dict[ActionType, Resolver] = {
    ActionType.INCOME: _gain(1, "takes"),
    ActionType.FOREIGN_AID: _gain(2, "receives foreign aid of"),
    ActionType.TAX: _gain(3, "taxes"),
    ActionType.SPECULATOR_TAX: _gain(3, "speculates for"),
    ActionType.BUREAUCRAT_TAX: _resolve_bureaucrat_tax,
    ActionType.STEAL: _resolve_steal,
    ActionType.SOCIALIST_REDISTRIBUTE: _resolve_socialist,
    ActionType.ASSASSINATE: _resolve_assassinate,
    ActionType.COUP: _resolve_coup,
    ActionType.EXCHANGE: _resolve_exchange,
    ActionType.INQUISITOR_SELF_EXCHANGE: _resolve_self_exchange,
    ActionType.EXAMINE: _resolve_examine,
}


# ─── Follow-up decisions ─────────────────────────────────────────

def _require_actor(state: GameState, player_id: str, attempted: str) -> PendingAction:
    get_player(state, player_id)
    action = state.pending_action
    if action is None or action.source_id != player_id:
        raise IllegalTransition(attempted, "only the acting player may decide", state.phase)
    return action


def _as_characters(cards) -> list[Character]:
    try:
        return [Character(c) for c in cards]
    except ValueError as e:
        raise InvalidSelection(str(e)) from e


@transition
def complete_exchange(
    state: GameState,
    player_id: str,
    kept: list[Character] | tuple[Character, ...],
    returned: list[Character] | tuple[Character, ...] | None = None,
) -> GameState:
    """
    Finish an exchange by partitioning the pool into kept and returned cards.

    For an Ambassador exchange the hand is already back in the deck, so
    the pool is the drawn cards alone. For the Inquisitor self-exchange the
    pool is the actor's unrevealed cards plus the drawn card. The kept
    cards fill the actor's unrevealed slots in order; revealed cards
    stay where they are. Returned cards are shuffled into the deck.

    Args:
        player_id: The acting player
        kept: Exactly as many cards as the actor has unrevealed
        returned: Optional; when given it must equal the rest of the pool

    Raises:
        IllegalTransition: Wrong phase or not the actor
        InvalidSelection: Wrong kept count, or cards not in the pool
    """
    require_phase(state, "complete an exchange", GamePhase.AWAITING_EXCHANGE_SELECTION)
    action = _require_actor(state, player_id, "complete an exchange")

    player = get_player(state, player_id)
    alive = alive_influence(player)
    kept = _as_characters(kept)
    if len(kept) != len(alive):
        raise InvalidSelection(f"Must keep exactly {len(alive)} card(s), got {len(kept)}")

    pool = Counter(state.drawn_cards)
    if action.type != ActionType.EXCHANGE:
        pool += Counter(card.character for card in alive)
    if Counter(kept) - pool:
        raise InvalidSelection("Kept cards are not all in the exchange pool")
    remaining = pool - Counter(kept)
    if returned is not None and Counter(_as_characters(returned)) != remaining:
        raise InvalidSelection("Returned cards must be exactly the cards not kept")

    influence = list(player.influence)
    for slot, character in zip(unrevealed_indices(player), kept):
        influence[slot] = InfluenceCard(character=character)
    state = update_player(state, player.model_copy(update={"influence": tuple(influence)}))

    state = state.model_copy(update={"drawn_cards": ()})
    state = shuffle_into_deck(state, list(remaining.elements()))
    state = append_log(state, LogKind.EXCHANGE, f"{player.name} completes the exchange.")
    return advance_turn(state)


@transition
def resolve_inquisitor_choice(
    state: GameState,
    player_id: str,
    choice: InquisitorChoice | str,
    target_id: str | None = None,
) -> GameState:
    """
    Pick the Inquisitor's sub-mode: exchange one own card, or examine a target.

    Examining picks one of the target's unrevealed cards at random and
    shows it to the actor (AWAITING_EXAMINE_DECISION).
    """
    require_phase(state, "make the Inquisitor choice", GamePhase.AWAITING_INQUISITOR_CHOICE)
    action = _require_actor(state, player_id, "make the Inquisitor choice")
    try:
        choice = InquisitorChoice(choice)
    except ValueError as e:
        raise InvalidSelection(str(e)) from e

    if choice == InquisitorChoice.SELF_EXCHANGE:
        state = state.model_copy(
            update={
                "phase": GamePhase.RESOLVING_ACTION,
                "pending_action": action.model_copy(update={"type": ActionType.INQUISITOR_SELF_EXCHANGE}),
            }
        )
        return resolve_action(state)

    if target_id is None:
        raise IllegalTransition("examine", "a target is required", state.phase)
    target = get_player(state, target_id)
    if target.id == player_id or target.eliminated:
        raise IllegalTransition("examine", f"{target.name} cannot be examined", state.phase)

    state, rng = rng_for(state)
    index = rng.choice(unrevealed_indices(target))
    actor = get_player(state, player_id)
    state = append_log(state, LogKind.ACTION, f"{actor.name} examines a card of {target.name}.")
    return state.model_copy(
        update={
            "phase": GamePhase.AWAITING_EXAMINE_DECISION,
            "pending_action": action.model_copy(
                update={"target_id": target.id, "examined_card_index": index}
            ),
        }
    )


@transition
def resolve_examine(
    state: GameState,
    player_id: str,
    force_exchange: bool,
    card_index: int | None = None,
) -> GameState:
    """
    Let the examined card stay, or force its holder to swap it.

    card_index defaults to the card the Inquisitor was shown.

    Raises:
        InvalidSelection: If the index is out of range or already revealed
    """
    require_phase(state, "decide on the examined card", GamePhase.AWAITING_EXAMINE_DECISION)
    action = _require_actor(state, player_id, "decide on the examined card")
    target = get_player(state, action.target_id)
    index = action.examined_card_index if card_index is None else card_index
    if index is None or not 0 <= index < len(target.influence):
        raise InvalidSelection(f"{target.name} has no card at index {index}")
    if target.influence[index].revealed:
        raise InvalidSelection(f"Card {index} of {target.name} is already revealed")

    if force_exchange:
        state = swap_card(state, target.id, index)
        state = append_log(state, LogKind.ACTION, f"The Inquisitor forces {target.name} to exchange a card.")
    else:
        state = append_log(state, LogKind.ACTION, f"The Inquisitor lets {target.name} keep the card.")
    return advance_turn(state)
