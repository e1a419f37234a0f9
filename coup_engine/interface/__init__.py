"""Host-facing helpers: config files, per-viewer views and the CLI."""

from .config import MatchConfig, DEFAULT_CONFIG, load_config, save_config, build_game_config
from .views import view_for

__all__ = [
    "MatchConfig",
    "DEFAULT_CONFIG",
    "load_config",
    "save_config",
    "build_game_config",
    "view_for",
]
