"""
Event bus for match observers.

Lets a host, a renderer or a logger react to what a MatchSession does
without the session knowing who is listening. Each session owns its
own bus; there is no process-wide instance.

Usage:
    bus = session.bus
    bus.on(EventType.PLAYER_ELIMINATED, on_elimination)

    def on_elimination(event: GameEvent):
        print(f"{event.data['player_id']} is out")
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable

logger = logging.getLogger(__name__)


class EventType(Enum):
    """Match events that can be published."""

    MATCH_STARTED = "match.started"
    MOVE_APPLIED = "move.applied"
    MOVE_REJECTED = "move.rejected"
    PHASE_CHANGED = "phase.changed"
    PLAYER_ELIMINATED = "player.eliminated"
    GAME_OVER = "match.over"


@dataclass
class GameEvent:
    """
    Event payload for the event bus.

    Attributes:
        type: The event type (from EventType enum)
        data: Event-specific payload as dict
        match_id: ID of the match this event belongs to
        version: State version the event describes
        timestamp: When the event was emitted
    """

    type: EventType
    data: dict = field(default_factory=dict)
    match_id: str = ""
    version: int = 0
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        return f"[{self.type.value}] {self.data}"


EventHandler = Callable[[GameEvent], None]


class EventBus:
    """
    Synchronous event bus.

    Listeners are called immediately on emit(), in subscription order.
    A listener that raises is logged and skipped; the others still run.
    """

    def __init__(self, history_limit: int = 200):
        self._listeners: dict[EventType, list[EventHandler]] = {}
        self._history: list[GameEvent] = []
        self._history_limit = history_limit

    def on(self, event_type: EventType, handler: EventHandler) -> None:
        """Subscribe handler to event_type. Subscribing twice is a no-op."""
        if event_type not in self._listeners:
            self._listeners[event_type] = []
        if handler not in self._listeners[event_type]:
            self._listeners[event_type].append(handler)

    def off(self, event_type: EventType, handler: EventHandler) -> None:
        if event_type in self._listeners and handler in self._listeners[event_type]:
            self._listeners[event_type].remove(handler)

    def emit(
        self,
        event_type: EventType,
        match_id: str = "",
        version: int = 0,
        **data,
    ) -> GameEvent:
        """
        Emit an event to all subscribers.

        Returns:
            The emitted GameEvent (for chaining/testing)
        """
        event = GameEvent(type=event_type, data=data, match_id=match_id, version=version)

        self._history.append(event)
        if len(self._history) > self._history_limit:
            self._history = self._history[-self._history_limit:]

        for handler in list(self._listeners.get(event_type, [])):
            try:
                handler(event)
            except Exception:
                logger.warning("Listener for %s failed", event_type.value, exc_info=True)

        return event

    def clear(self) -> None:
        """Clear all listeners. Useful for testing."""
        self._listeners.clear()

    def get_history(self, event_type: EventType | None = None) -> list[GameEvent]:
        """Recent events, optionally filtered by type."""
        if event_type is None:
            return list(self._history)
        return [e for e in self._history if e.type == event_type]

    def listener_count(self, event_type: EventType) -> int:
        return len(self._listeners.get(event_type, []))
