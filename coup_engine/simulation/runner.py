"""Simulation runner and transcript management."""

import logging
import random
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from ..state.schema import GameConfig, GameState
from ..state.schemas.move import Move
from ..systems.session import MatchSession
from ..systems.turns import awaiting_player_ids
from .player import RandomPlayer

logger = logging.getLogger(__name__)

DEFAULT_MAX_MOVES = 5000


@dataclass
class MatchTranscript:
    """Complete record of a simulated match."""

    config: GameConfig
    seed: int
    final_state: GameState
    started_at: datetime = field(default_factory=datetime.now)
    moves: list[Move] = field(default_factory=list)
    states: list[GameState] = field(default_factory=list)  # Only when keep_states
    player_stats: dict[str, dict] = field(default_factory=dict)

    @property
    def completed(self) -> bool:
        return self.final_state.is_over

    @property
    def winner_id(self) -> str | None:
        return self.final_state.winner_id

    def to_markdown(self) -> str:
        """Convert transcript to markdown format."""
        state = self.final_state
        winner = next((p.name for p in state.players if p.id == self.winner_id), "none")
        lines = [
            "# Match Transcript",
            "",
            f"- **Date:** {self.started_at.strftime('%Y-%m-%d %H:%M:%S')}",
            f"- **Seed:** {self.seed}",
            f"- **Players:** {', '.join(p.name for p in state.players)}",
            f"- **Characters:** {', '.join(c.value for c in self.config.enabled_characters)}",
            f"- **Moves:** {len(self.moves)}",
            f"- **Turns:** {state.turn_number}",
            f"- **Winner:** {winner}",
            "",
            "---",
            "",
        ]

        current_turn = 0
        for entry in state.log:
            if entry.turn != current_turn:
                current_turn = entry.turn
                lines.append("")
                lines.append(f"## Turn {current_turn}")
                lines.append("")
            lines.append(f"- {entry.message}")

        lines.append("")
        lines.append("## Summary")
        lines.append("")
        for player in state.players:
            stats = self.player_stats.get(player.id, {})
            lines.append(
                f"- **{player.name}:** {player.coins} coins, "
                f"{stats.get('challenges', 0)} challenges, {stats.get('blocks', 0)} blocks"
            )
        lines.append("")

        return "\n".join(lines)

    def save(self, simulations_dir: Path) -> Path:
        """Save transcript to file. Returns the file path."""
        simulations_dir.mkdir(parents=True, exist_ok=True)

        timestamp = self.started_at.strftime("%Y-%m-%d_%H%M%S")
        filepath = simulations_dir / f"match_{timestamp}_seed{self.seed}.md"
        filepath.write_text(self.to_markdown(), encoding="utf-8")
        return filepath


def run_match(
    config: GameConfig | None = None,
    seed: int | None = None,
    max_moves: int = DEFAULT_MAX_MOVES,
    pass_bias: float = 0.5,
    keep_states: bool = False,
) -> MatchTranscript:
    """
    Play a match to the end with a RandomPlayer in every seat.

    When several players may respond at once, which of them moves first
    is also drawn from the seeded generator, so a seed fixes the whole
    match.

    Args:
        config: Table to play; defaults to GameConfig()
        seed: Seed for the deck and every player's choices
        max_moves: Stop after this many moves even if nobody has won
        pass_bias: See RandomPlayer
        keep_states: Record every intermediate state (for property tests)

    Returns:
        MatchTranscript; check .completed for whether the cap was hit
    """
    config = config or GameConfig()
    if seed is None:
        seed = random.SystemRandom().randrange(2**31)

    session = MatchSession(config, seed=seed)
    seats = {
        p.id: RandomPlayer(p.id, seed=f"{seed}:{p.id}", pass_bias=pass_bias)
        for p in session.state.players
    }
    scheduler = random.Random(f"{seed}:scheduler")
    transcript = MatchTranscript(config=config, seed=seed, final_state=session.state)
    if keep_states:
        transcript.states.append(session.state)

    for _ in range(max_moves):
        state = session.state
        if state.is_over:
            break
        waiting = awaiting_player_ids(state)
        if not waiting:
            break
        player = seats[scheduler.choice(waiting)]
        move = player.choose(state)
        if move is None:
            break
        session.apply(move)
        transcript.moves.append(move)
        if keep_states:
            transcript.states.append(session.state)
    else:
        if not session.state.is_over:
            logger.warning("Match with seed %d stopped after %d moves", seed, max_moves)

    transcript.final_state = session.state
    transcript.player_stats = {pid: seat.get_stats() for pid, seat in seats.items()}
    return transcript
