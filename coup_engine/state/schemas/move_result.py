"""
MoveResult schema: what a MatchSession reports after applying a Move.

The successor state itself stays with the session; the result carries
what observers need to follow along without diffing whole states.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from ..schema import GamePhase, LogEntry


class MoveResult(BaseModel):
    move_id: str
    player_id: str
    version: int  # Version of the successor state
    phase_before: GamePhase
    phase_after: GamePhase
    log_entries: list[LogEntry] = Field(default_factory=list)  # Entries the move appended
    eliminated: list[str] = Field(default_factory=list)  # Players knocked out by the move
    winner_id: str | None = None
    applied_at: datetime = Field(default_factory=datetime.now)

    @property
    def game_over(self) -> bool:
        return self.phase_after == GamePhase.GAME_OVER
