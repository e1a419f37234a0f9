"""Simulation module for random-play matches and property testing."""

from .player import RandomPlayer, legal_moves
from .runner import run_match, MatchTranscript

__all__ = [
    "RandomPlayer",
    "legal_moves",
    "run_match",
    "MatchTranscript",
]
