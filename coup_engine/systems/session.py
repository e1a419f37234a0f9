"""
Match session: the host-side owner of one match's authoritative state.

The turn engine is a pure reducer and does not arbitrate concurrent
callers. A MatchSession does: it applies one Move at a time under a
lock, rejects moves built against a stale version, keeps the move
history for replay, and publishes what happened on its EventBus.

Usage:
    session = MatchSession(GameConfig(player_count=3), seed=7)
    session.bus.on(EventType.GAME_OVER, announce_winner)

    result = session.apply(Move(
        op=Operation.DECLARE_ACTION,
        player_id="player-0",
        payload={"action_type": "Income"},
        expected_version=session.version,
    ))
"""

from __future__ import annotations

import logging
import threading
from uuid import uuid4

from ..errors import EngineError
from ..state.event_bus import EventBus, EventType
from ..state.schema import GameConfig, GameState
from ..state.schemas.move import Move
from ..state.schemas.move_result import MoveResult
from .deal import create_game
from .moves import apply_move

logger = logging.getLogger(__name__)


class SessionError(EngineError):
    """Error raised by a MatchSession rather than by a transition."""
    pass


class StaleStateError(SessionError):
    """Move's expected_version doesn't match the session's state."""
    def __init__(self, expected: int, got: int):
        self.expected = expected
        self.got = got
        super().__init__(
            f"Stale state: expected version {expected}, got {got}. "
            "Refresh the state and resubmit."
        )


class MatchSession:
    """
    Serializes moves against one match.

    Responsibilities:
    - Hold the authoritative GameState
    - Apply moves one at a time (RLock, so listeners may query the session)
    - Version check for moves that carry expected_version
    - Event emission in the order successors are produced

    NOT responsible for:
    - Game rules (the transitions in coup_engine.systems)
    - Redaction (coup_engine.interface.views)
    - Transport, timers or persistence
    """

    def __init__(
        self,
        config: GameConfig | None = None,
        seed: int | None = None,
        match_id: str | None = None,
        state: GameState | None = None,
    ):
        if state is None:
            state = create_game(config or GameConfig(), seed)
        self.match_id = match_id or str(uuid4())[:8]
        self.bus = EventBus()
        self._state = state
        self._moves: list[Move] = []
        self._lock = threading.RLock()

        logger.info("Match %s started: %d players, seed %d", self.match_id, len(state.players), state.seed)
        self.bus.emit(
            EventType.MATCH_STARTED,
            match_id=self.match_id,
            version=state.version,
            players=[p.id for p in state.players],
        )

    @property
    def state(self) -> GameState:
        """The authoritative state. Never edit it; submit a Move instead."""
        return self._state

    @property
    def version(self) -> int:
        return self._state.version

    @property
    def moves(self) -> list[Move]:
        """Every move applied so far, in order."""
        return list(self._moves)

    def apply(self, move: Move) -> MoveResult:
        """
        Apply one move and publish the outcome.

        Args:
            move: The move to apply

        Returns:
            MoveResult describing the successor state

        Raises:
            StaleStateError: If move.expected_version is set and stale
            EngineError: Whatever the transition rejected the move with
        """
        with self._lock:
            before = self._state
            if move.expected_version is not None and move.expected_version != before.version:
                self._reject(move, "stale version")
                raise StaleStateError(expected=before.version, got=move.expected_version)

            try:
                after = apply_move(before, move)
            except EngineError as e:
                self._reject(move, str(e))
                raise

            self._state = after
            self._moves.append(move)
            result = self._build_result(move, before, after)
            logger.debug("Match %s: %s (v%d)", self.match_id, move, after.version)
            self._publish(move, result)
            return result

    def _reject(self, move: Move, reason: str) -> None:
        logger.info("Match %s: rejected %s: %s", self.match_id, move, reason)
        self.bus.emit(
            EventType.MOVE_REJECTED,
            match_id=self.match_id,
            version=self._state.version,
            move_id=move.move_id,
            player_id=move.player_id,
            reason=reason,
        )

    def _build_result(self, move: Move, before: GameState, after: GameState) -> MoveResult:
        was_out = {p.id for p in before.players if p.eliminated}
        return MoveResult(
            move_id=move.move_id,
            player_id=move.player_id,
            version=after.version,
            phase_before=before.phase,
            phase_after=after.phase,
            log_entries=list(after.log[len(before.log):]),
            eliminated=[p.id for p in after.players if p.eliminated and p.id not in was_out],
            winner_id=after.winner_id,
        )

    def _publish(self, move: Move, result: MoveResult) -> None:
        version = result.version
        self.bus.emit(
            EventType.MOVE_APPLIED,
            match_id=self.match_id,
            version=version,
            move_id=move.move_id,
            player_id=move.player_id,
            op=move.op.value,
        )
        if result.phase_before != result.phase_after:
            self.bus.emit(
                EventType.PHASE_CHANGED,
                match_id=self.match_id,
                version=version,
                before=result.phase_before.value,
                after=result.phase_after.value,
            )
        for player_id in result.eliminated:
            self.bus.emit(
                EventType.PLAYER_ELIMINATED,
                match_id=self.match_id,
                version=version,
                player_id=player_id,
            )
        if result.game_over:
            logger.info("Match %s over: %s wins", self.match_id, result.winner_id)
            self.bus.emit(
                EventType.GAME_OVER,
                match_id=self.match_id,
                version=version,
                winner_id=result.winner_id,
            )

    @classmethod
    def replay(cls, config: GameConfig, seed: int, moves: list[Move]) -> "MatchSession":
        """Rebuild a session by re-applying moves from the same seed."""
        session = cls(config, seed=seed)
        for move in moves:
            session.apply(move.model_copy(update={"expected_version": None}))
        return session
