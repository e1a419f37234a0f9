"""
Pydantic models for coup-engine game state.

Every model is frozen: a transition never edits a state, it builds a
successor with model_copy(update=...). Collections are tuples so a
successor can share untouched players and cards with its predecessor.
Designed to serialize to JSON so a host can broadcast, diff and replay.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


# -----------------------------------------------------------------------------
# Enums
# -----------------------------------------------------------------------------

class Character(str, Enum):
    # Base game
    DUKE = "Duke"
    ASSASSIN = "Assassin"
    CAPTAIN = "Captain"
    AMBASSADOR = "Ambassador"
    CONTESSA = "Contessa"
    # Extension
    INQUISITOR = "Inquisitor"
    # Promo
    JESTER = "Jester"
    BUREAUCRAT = "Bureaucrat"
    SPECULATOR = "Speculator"
    SOCIALIST = "Socialist"


BASE_CHARACTERS: tuple[Character, ...] = (
    Character.DUKE,
    Character.ASSASSIN,
    Character.CAPTAIN,
    Character.AMBASSADOR,
    Character.CONTESSA,
)

EXTENSION_CHARACTERS: tuple[Character, ...] = (Character.INQUISITOR,)

PROMO_CHARACTERS: tuple[Character, ...] = (
    Character.JESTER,
    Character.BUREAUCRAT,
    Character.SPECULATOR,
    Character.SOCIALIST,
)

ALL_CHARACTERS = BASE_CHARACTERS + EXTENSION_CHARACTERS + PROMO_CHARACTERS


class ActionType(str, Enum):
    # General actions
    INCOME = "Income"
    FOREIGN_AID = "ForeignAid"
    COUP = "Coup"
    # Character actions
    TAX = "Tax"
    ASSASSINATE = "Assassinate"
    STEAL = "Steal"
    EXCHANGE = "Exchange"
    EXAMINE = "Examine"
    INQUISITOR_SELF_EXCHANGE = "InquisitorSelfExchange"  # Sub-mode of Examine
    BUREAUCRAT_TAX = "BureaucratTax"
    SPECULATOR_TAX = "SpeculatorTax"
    SOCIALIST_REDISTRIBUTE = "SocialistRedistribute"


class GamePhase(str, Enum):
    """Phase state machine for a match."""
    AWAITING_ACTION = "AwaitingAction"
    AWAITING_CHALLENGE_ON_ACTION = "AwaitingChallengeOnAction"
    AWAITING_BLOCK = "AwaitingBlock"
    AWAITING_CHALLENGE_ON_BLOCK = "AwaitingChallengeOnBlock"
    RESOLVING_ACTION = "ResolvingAction"  # Transient, only used as a loss origin
    AWAITING_CARD_SELECTION = "AwaitingCardSelection"
    AWAITING_EXCHANGE_SELECTION = "AwaitingExchangeSelection"
    AWAITING_EXAMINE_DECISION = "AwaitingExamineDecision"
    AWAITING_INQUISITOR_CHOICE = "AwaitingInquisitorChoice"
    AWAITING_COUP_REDIRECT = "AwaitingCoupRedirect"
    AWAITING_COUP_REDIRECT_CHALLENGE = "AwaitingCoupRedirectChallenge"
    GAME_OVER = "GameOver"


class Faction(str, Enum):
    LOYALIST = "Loyalist"
    REFORMIST = "Reformist"


class SelectionReason(str, Enum):
    """Why a player has to reveal an influence card."""
    CHALLENGE_PENALTY = "challenge-penalty"
    ACTION_EFFECT = "action-effect"


class InquisitorChoice(str, Enum):
    SELF_EXCHANGE = "self-exchange"
    EXAMINE = "examine"


class LogKind(str, Enum):
    ACTION = "action"
    CHALLENGE = "challenge"
    BLOCK = "block"
    ELIMINATION = "elimination"
    SYSTEM = "system"
    EXCHANGE = "exchange"


# -----------------------------------------------------------------------------
# Rule constants
# -----------------------------------------------------------------------------

MIN_PLAYERS = 2
MAX_PLAYERS = 6
STARTING_COINS = 2
INFLUENCE_PER_PLAYER = 2
CARDS_PER_CHARACTER = 3
COUP_COST = 7
ASSASSINATE_COST = 3
FORCED_COUP_THRESHOLD = 10


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


# -----------------------------------------------------------------------------
# Configuration
# -----------------------------------------------------------------------------

class GameConfig(_Frozen):
    """
    Match construction parameters.

    Validated on creation: an impossible table (too few cards to deal,
    a missing base character, clashing id overrides) never reaches the
    engine.
    """
    player_count: int = Field(default=4, ge=MIN_PLAYERS, le=MAX_PLAYERS)
    enabled_characters: tuple[Character, ...] = BASE_CHARACTERS
    cards_per_character: int = Field(default=CARDS_PER_CHARACTER, ge=1)
    influence_per_player: int = Field(default=INFLUENCE_PER_PLAYER, ge=1)
    starting_coins: int = Field(default=STARTING_COINS, ge=0)
    enable_factions: bool = False
    player_ids: tuple[str, ...] = ()
    player_names: tuple[str, ...] = ()

    @model_validator(mode="after")
    def check_table(self) -> "GameConfig":
        missing = [c.value for c in BASE_CHARACTERS if c not in self.enabled_characters]
        if missing:
            raise ValueError(f"enabled_characters must include the base game: missing {missing}")
        if len(set(self.enabled_characters)) != len(self.enabled_characters):
            raise ValueError("enabled_characters contains duplicates")
        if len(self.player_ids) > self.player_count or len(self.player_names) > self.player_count:
            raise ValueError("more id/name overrides than players")
        if len(set(self.player_ids)) != len(self.player_ids):
            raise ValueError("player_ids must be unique")
        deck_size = len(self.enabled_characters) * self.cards_per_character
        if deck_size < self.player_count * self.influence_per_player:
            raise ValueError(
                f"deck of {deck_size} cards cannot deal "
                f"{self.influence_per_player} to {self.player_count} players"
            )
        return self

    def is_enabled(self, character: Character) -> bool:
        return character in self.enabled_characters


# -----------------------------------------------------------------------------
# Entities
# -----------------------------------------------------------------------------

class InfluenceCard(_Frozen):
    character: Character
    revealed: bool = False


class Player(_Frozen):
    id: str
    name: str
    coins: int = Field(default=STARTING_COINS, ge=0)
    influence: tuple[InfluenceCard, ...] = ()
    faction: Faction | None = None

    @property
    def eliminated(self) -> bool:
        """True once every influence card has been revealed."""
        return all(card.revealed for card in self.influence)

    @property
    def alive_count(self) -> int:
        return sum(1 for card in self.influence if not card.revealed)


class PendingAction(_Frozen):
    """The action currently under resolution."""
    type: ActionType
    source_id: str
    target_id: str | None = None
    claimed_character: Character | None = None
    examined_card_index: int | None = None  # Set once the Inquisitor picks a card
    redirect_declined: bool = False


class PendingBlock(_Frozen):
    blocker_id: str
    claimed_character: Character
    blocked_action: PendingAction


class PendingLoss(_Frozen):
    """
    A player owes one influence and must pick which card to reveal.

    origin is the phase whose resolution caused the loss; together with
    reason and whether the loser is the action's source it selects how
    play continues after the card is chosen.
    """
    player_id: str
    reason: SelectionReason
    origin: GamePhase


class CoupRedirectChain(_Frozen):
    """
    Ordered record of one Coup's redirections.

    links[0] is the Coup's original target; each later entry is the
    player a redirect pointed the Coup at. source_id is remembered here
    because the pending action's target moves as the chain grows.
    """
    source_id: str
    links: tuple[str, ...] = ()

    @property
    def tail(self) -> str:
        """The player the Coup currently points at."""
        return self.links[-1]

    @property
    def redirector(self) -> str | None:
        """The player who made the latest redirect claim, if any."""
        if len(self.links) < 2:
            return None
        return self.links[-2]

    def extend(self, player_id: str) -> "CoupRedirectChain":
        return self.model_copy(update={"links": self.links + (player_id,)})

    def claim_count(self, player_id: str) -> int:
        """How many redirect claims player_id has made during this Coup."""
        return self.links[:-1].count(player_id)


class LogEntry(_Frozen):
    id: str
    seq: int
    turn: int
    kind: LogKind
    message: str


class GameState(_Frozen):
    """
    Aggregate root for one match.

    Created by create_game, replaced wholesale by every transition, and
    terminal once phase is GAME_OVER.
    """
    config: GameConfig
    players: tuple[Player, ...]
    court_deck: tuple[Character, ...] = ()
    current_player_index: int = 0
    phase: GamePhase = GamePhase.AWAITING_ACTION
    pending_action: PendingAction | None = None
    pending_block: PendingBlock | None = None
    pending_loss: PendingLoss | None = None
    responded_player_ids: tuple[str, ...] = ()
    drawn_cards: tuple[Character, ...] = ()  # Visible only to the acting player
    turn_number: int = 1
    winner_id: str | None = None
    redirect_chain: CoupRedirectChain | None = None
    log: tuple[LogEntry, ...] = ()
    log_seq: int = 0
    version: int = 0
    seed: int = 0
    entropy: int = 0

    @property
    def current_player(self) -> Player:
        return self.players[self.current_player_index]

    @property
    def is_over(self) -> bool:
        return self.phase == GamePhase.GAME_OVER
