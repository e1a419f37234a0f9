"""
Shared primitives for the turn engine.

Owns everything that more than one transition needs:
- the transition decorator (version stamping, debug logging)
- log entries with per-state sequence ids
- deterministic court deck shuffling and drawing
- revealing influence, elimination and game over
- forced influence loss and the post-selection dispatch table
- advancing the turn

Nothing here mutates a state; every helper returns a successor.
"""

from __future__ import annotations

import functools
import logging
import random
from typing import Callable

from ..errors import IllegalTransition, InvalidSelection
from ..state.queries import (
    alive_players,
    get_player,
    next_alive_index,
)
from ..state.schema import (
    Character,
    GamePhase,
    GameState,
    InfluenceCard,
    LogEntry,
    LogKind,
    PendingLoss,
    Player,
    SelectionReason,
)

logger = logging.getLogger(__name__)


# ─── Transition plumbing ─────────────────────────────────────────

def transition(fn: Callable[..., GameState]) -> Callable[..., GameState]:
    """
    Mark fn as a public transition.

    The successor is stamped with version = input version + 1. Nested
    transitions stamp the same value, so a transition that internally
    resolves another still advances the version exactly once. A
    transition that returns its input unchanged is not stamped.
    """
    @functools.wraps(fn)
    def wrapper(state: GameState, *args, **kwargs) -> GameState:
        result = fn(state, *args, **kwargs)
        if result is state:
            return state
        logger.debug(
            "%s: %s -> %s (v%d)",
            fn.__name__, state.phase.value, result.phase.value, state.version + 1,
        )
        return result.model_copy(update={"version": state.version + 1})
    return wrapper


def require_phase(state: GameState, attempted: str, *phases: GamePhase) -> None:
    if state.phase not in phases:
        expected = ", ".join(p.value for p in phases)
        raise IllegalTransition(attempted, f"expected {expected}", state.phase)


def append_log(state: GameState, kind: LogKind, message: str) -> GameState:
    seq = state.log_seq + 1
    entry = LogEntry(
        id=f"log-{seq}",
        seq=seq,
        turn=state.turn_number,
        kind=kind,
        message=message,
    )
    return state.model_copy(update={"log": state.log + (entry,), "log_seq": seq})


def update_player(state: GameState, player: Player) -> GameState:
    players = tuple(player if p.id == player.id else p for p in state.players)
    return state.model_copy(update={"players": players})


def add_coins(state: GameState, player_id: str, delta: int) -> GameState:
    player = get_player(state, player_id)
    return update_player(state, player.model_copy(update={"coins": player.coins + delta}))


def record_response(state: GameState, player_id: str) -> GameState:
    return state.model_copy(
        update={"responded_player_ids": state.responded_player_ids + (player_id,)}
    )


# ─── Court deck ──────────────────────────────────────────────────

def rng_for(state: GameState) -> tuple[GameState, random.Random]:
    """
    A generator seeded from (seed, entropy), plus the state that consumed it.

    Replaying the same moves from the same seed reproduces every shuffle.
    """
    rng = random.Random(f"{state.seed}:{state.entropy}")
    return state.model_copy(update={"entropy": state.entropy + 1}), rng


def shuffle_into_deck(state: GameState, cards: tuple[Character, ...] | list[Character]) -> GameState:
    state, rng = rng_for(state)
    deck = list(state.court_deck) + list(cards)
    rng.shuffle(deck)
    return state.model_copy(update={"court_deck": tuple(deck)})


def draw_cards(state: GameState, count: int) -> tuple[GameState, tuple[Character, ...]]:
    """Take up to count cards from the top (end) of the court deck."""
    count = min(count, len(state.court_deck))
    if count == 0:
        return state, ()
    deck = state.court_deck
    drawn = tuple(reversed(deck[len(deck) - count:]))
    return state.model_copy(update={"court_deck": deck[:len(deck) - count]}), drawn


def swap_card(state: GameState, player_id: str, index: int) -> GameState:
    """Shuffle one unrevealed card back into the deck and deal its holder a fresh one."""
    player = get_player(state, player_id)
    card = player.influence[index]
    state = shuffle_into_deck(state, [card.character])
    state, (fresh,) = draw_cards(state, 1)
    influence = list(get_player(state, player_id).influence)
    influence[index] = InfluenceCard(character=fresh)
    player = get_player(state, player_id)
    return update_player(state, player.model_copy(update={"influence": tuple(influence)}))


def replace_proven_card(state: GameState, player_id: str, character: Character) -> GameState:
    """
    Re-randomize a card its holder just proved under challenge.

    The proven card goes back into the deck before the redraw, so a
    successful defence tells the table nothing about the new hand.
    """
    player = get_player(state, player_id)
    for idx, card in enumerate(player.influence):
        if not card.revealed and card.character == character:
            return swap_card(state, player_id, idx)
    return state


# ─── Influence loss ──────────────────────────────────────────────

def unrevealed_indices(player: Player) -> list[int]:
    return [idx for idx, card in enumerate(player.influence) if not card.revealed]


def check_game_over(state: GameState) -> GameState:
    alive = alive_players(state)
    if len(alive) != 1 or state.phase == GamePhase.GAME_OVER:
        return state
    winner = alive[0]
    state = append_log(state, LogKind.SYSTEM, f"{winner.name} wins the match!")
    logger.info("Match over after turn %d, winner %s", state.turn_number, winner.id)
    return state.model_copy(
        update={
            "phase": GamePhase.GAME_OVER,
            "winner_id": winner.id,
            "pending_loss": None,
            "responded_player_ids": (),
        }
    )


def reveal_card(state: GameState, player_id: str, index: int) -> GameState:
    """
    Reveal one unrevealed card; eliminate its holder if it was the last.

    Raises:
        InvalidSelection: If index is out of range or already revealed
    """
    player = get_player(state, player_id)
    if not 0 <= index < len(player.influence):
        raise InvalidSelection(f"{player.name} has no card at index {index}")
    card = player.influence[index]
    if card.revealed:
        raise InvalidSelection(f"Card {index} of {player.name} is already revealed")

    influence = list(player.influence)
    influence[index] = card.model_copy(update={"revealed": True})
    player = player.model_copy(update={"influence": tuple(influence)})
    state = update_player(state, player)
    state = append_log(state, LogKind.ELIMINATION, f"{player.name} reveals {card.character.value}.")

    if player.eliminated:
        state = append_log(state, LogKind.ELIMINATION, f"{player.name} is eliminated!")
        state = check_game_over(state)
    return state


def reveal_all(state: GameState, player_id: str) -> GameState:
    """Reveal every remaining card of player_id in one step."""
    player = get_player(state, player_id)
    for idx, card in enumerate(player.influence):
        if not card.revealed:
            state = reveal_card(state, player_id, idx)
    return state


def inflict_loss(
    state: GameState,
    player_id: str,
    reason: SelectionReason,
    origin: GamePhase,
) -> GameState:
    """
    Make player_id lose one influence, then continue play.

    A player with a single card loses it at once; a player with several
    is asked to choose (AWAITING_CARD_SELECTION). A player with none left
    loses nothing and play continues directly.
    """
    loss = PendingLoss(player_id=player_id, reason=reason, origin=origin)
    player = get_player(state, player_id)
    alive = unrevealed_indices(player)

    if len(alive) > 1:
        return state.model_copy(
            update={
                "phase": GamePhase.AWAITING_CARD_SELECTION,
                "pending_loss": loss,
                "responded_player_ids": (),
            }
        )
    if alive:
        state = reveal_card(state, player_id, alive[0])
        if state.phase == GamePhase.GAME_OVER:
            return state
    return continue_after_loss(state, loss)


@transition
def select_card_to_lose(state: GameState, player_id: str, index: int) -> GameState:
    """
    The player owing an influence picks which card to reveal.

    Raises:
        UnknownPlayer: If player_id is not in the roster
        IllegalTransition: If no selection is pending or it belongs to someone else
        InvalidSelection: If index is out of range or already revealed
    """
    get_player(state, player_id)
    require_phase(state, "select a card to lose", GamePhase.AWAITING_CARD_SELECTION)
    loss = state.pending_loss
    if loss is None or loss.player_id != player_id:
        raise IllegalTransition("select a card to lose", f"{player_id} owes no influence", state.phase)

    state = reveal_card(state, player_id, index)
    if state.phase == GamePhase.GAME_OVER:
        return state
    return continue_after_loss(state, loss)


# ─── Post-loss dispatch ──────────────────────────────────────────

def _proceed_after_failed_challenge(state: GameState) -> GameState:
    from .turns import proceed_after_action_challenge
    return proceed_after_action_challenge(state)


def _resolve_pending(state: GameState) -> GameState:
    from .resolution import begin_resolution
    return begin_resolution(state)


def _continue_redirect(state: GameState) -> GameState:
    from .redirect import continue_redirect
    return continue_redirect(state)


def _void_action(state: GameState) -> GameState:
    state = append_log(state, LogKind.ACTION, "The action is cancelled.")
    return advance_turn(state)


def _end_turn(state: GameState) -> GameState:
    return advance_turn(state)


LossKey = tuple[GamePhase, SelectionReason, bool]

# (origin phase, reason, loser is the action's source) -> continuation
CONTINUATIONS: dict[LossKey, Callable[[GameState], GameState]] = {
    # Challenger was wrong about the actor: the action goes ahead
    (GamePhase.AWAITING_CHALLENGE_ON_ACTION, SelectionReason.CHALLENGE_PENALTY, False): _proceed_after_failed_challenge,
    # Actor was caught bluffing: action voided, cost kept
    (GamePhase.AWAITING_CHALLENGE_ON_ACTION, SelectionReason.CHALLENGE_PENALTY, True): _void_action,
    # Blocker proved the claim: block stands
    (GamePhase.AWAITING_CHALLENGE_ON_BLOCK, SelectionReason.CHALLENGE_PENALTY, True): _void_action,
    # Blocker was caught bluffing: the original action resolves
    (GamePhase.AWAITING_CHALLENGE_ON_BLOCK, SelectionReason.CHALLENGE_PENALTY, False): _resolve_pending,
    # Redirect proved: the chain's tail decides next
    (GamePhase.AWAITING_COUP_REDIRECT_CHALLENGE, SelectionReason.CHALLENGE_PENALTY, True): _continue_redirect,
    (GamePhase.AWAITING_COUP_REDIRECT_CHALLENGE, SelectionReason.CHALLENGE_PENALTY, False): _continue_redirect,
    # Damage from the action itself is final
    (GamePhase.RESOLVING_ACTION, SelectionReason.ACTION_EFFECT, True): _end_turn,
    (GamePhase.RESOLVING_ACTION, SelectionReason.ACTION_EFFECT, False): _end_turn,
    (GamePhase.AWAITING_COUP_REDIRECT, SelectionReason.ACTION_EFFECT, True): _end_turn,
    (GamePhase.AWAITING_COUP_REDIRECT, SelectionReason.ACTION_EFFECT, False): _end_turn,
}


def continue_after_loss(state: GameState, loss: PendingLoss) -> GameState:
    action = state.pending_action
    is_source = action is not None and action.source_id == loss.player_id
    key = (loss.origin, loss.reason, is_source)
    handler = CONTINUATIONS.get(key)
    if handler is None:
        raise IllegalTransition(
            "continue after influence loss",
            f"no continuation for {loss.origin.value}/{loss.reason.value}",
            state.phase,
        )
    state = state.model_copy(update={"pending_loss": None})
    return handler(state)


# ─── Turn advance ────────────────────────────────────────────────

@transition
def advance_turn(state: GameState) -> GameState:
    """Clear the turn's transient fields and pass play to the next alive player."""
    if state.phase == GamePhase.GAME_OVER:
        return state
    return state.model_copy(
        update={
            "current_player_index": next_alive_index(state),
            "phase": GamePhase.AWAITING_ACTION,
            "pending_action": None,
            "pending_block": None,
            "pending_loss": None,
            "responded_player_ids": (),
            "drawn_cards": (),
            "redirect_chain": None,
            "turn_number": state.turn_number + 1,
        }
    )
