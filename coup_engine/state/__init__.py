"""Match state for coup-engine: pydantic models, queries and events."""

from .schema import (
    Character,
    ActionType,
    GamePhase,
    Faction,
    SelectionReason,
    InquisitorChoice,
    LogKind,
    BASE_CHARACTERS,
    EXTENSION_CHARACTERS,
    PROMO_CHARACTERS,
    ALL_CHARACTERS,
    GameConfig,
    InfluenceCard,
    Player,
    PendingAction,
    PendingBlock,
    PendingLoss,
    CoupRedirectChain,
    LogEntry,
    GameState,
)
from .queries import (
    alive_influence,
    alive_players,
    get_player,
    card_census,
    total_coins,
)
from .event_bus import EventBus, EventType, GameEvent
from .schemas import Move, MoveResult, Operation

__all__ = [
    # Schema
    "Character",
    "ActionType",
    "GamePhase",
    "Faction",
    "SelectionReason",
    "InquisitorChoice",
    "LogKind",
    "BASE_CHARACTERS",
    "EXTENSION_CHARACTERS",
    "PROMO_CHARACTERS",
    "ALL_CHARACTERS",
    "GameConfig",
    "InfluenceCard",
    "Player",
    "PendingAction",
    "PendingBlock",
    "PendingLoss",
    "CoupRedirectChain",
    "LogEntry",
    "GameState",
    # Queries
    "alive_influence",
    "alive_players",
    "get_player",
    "card_census",
    "total_coins",
    # Events
    "EventBus",
    "EventType",
    "GameEvent",
    # Wire schemas
    "Move",
    "MoveResult",
    "Operation",
]
