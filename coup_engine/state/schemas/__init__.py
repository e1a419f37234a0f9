"""
Wire schemas for talking to the turn engine.

    Move -> apply_move / MatchSession.apply -> MoveResult

Both are pydantic models so hosts can validate and serialize them.
"""

from .move import Move, Operation
from .move_result import MoveResult

__all__ = [
    "Move",
    "Operation",
    "MoveResult",
]
