"""
Errors raised by the turn engine.

All three are caller errors. They are raised before a successor state
is built, so the state passed in is never affected by a rejected call.
"""


class EngineError(Exception):
    """Error while applying a transition."""
    pass


class IllegalTransition(EngineError):
    """Operation not valid in the current phase, or not for this player."""
    def __init__(self, attempted: str, reason: str, phase: object = None):
        self.attempted = attempted
        self.reason = reason
        self.phase = phase
        where = f" during {getattr(phase, 'value', phase)}" if phase is not None else ""
        super().__init__(f"Cannot {attempted}{where}: {reason}")


class InvalidSelection(EngineError):
    """A card index or card set that the player cannot choose."""
    pass


class UnknownPlayer(EngineError):
    """Player id absent from the roster."""
    def __init__(self, player_id: str):
        self.player_id = player_id
        super().__init__(f"Player not found: {player_id}")
