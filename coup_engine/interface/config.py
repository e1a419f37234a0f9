"""
Match configuration files.

A match config is a small YAML or JSON mapping whose keys mirror
GameConfig, plus an optional seed. Missing keys fall back to
DEFAULT_CONFIG. Character lists accept character names in any case and
the set names "base", "extension", "promo" and "all".

Example (YAML):
    player_count: 4
    enabled_characters: [base, Jester, Socialist]
    enable_factions: false
    seed: 42
"""

import json
import logging
from pathlib import Path
from typing import TypedDict

import yaml

from ..state.schema import (
    ALL_CHARACTERS,
    BASE_CHARACTERS,
    EXTENSION_CHARACTERS,
    PROMO_CHARACTERS,
    Character,
    GameConfig,
)

logger = logging.getLogger(__name__)


class MatchConfig(TypedDict, total=False):
    """Match configuration as stored on disk."""
    player_count: int
    enabled_characters: list[str]  # Character names or set names
    cards_per_character: int
    influence_per_player: int
    starting_coins: int
    enable_factions: bool
    player_ids: list[str]
    player_names: list[str]
    seed: int | None  # None picks a fresh seed per match


DEFAULT_CONFIG: MatchConfig = {
    "player_count": 4,
    "enabled_characters": ["base"],
    "cards_per_character": 3,
    "influence_per_player": 2,
    "starting_coins": 2,
    "enable_factions": False,
    "player_ids": [],
    "player_names": [],
    "seed": None,
}

CHARACTER_SETS: dict[str, tuple[Character, ...]] = {
    "base": BASE_CHARACTERS,
    "extension": EXTENSION_CHARACTERS,
    "promo": PROMO_CHARACTERS,
    "all": ALL_CHARACTERS,
}

YAML_SUFFIXES = {".yaml", ".yml"}


def resolve_characters(names: list[str]) -> tuple[Character, ...]:
    """
    Turn character and set names into an ordered, de-duplicated tuple.

    The base five are always included, whether listed or not.

    Raises:
        ValueError: If a name matches no character or set
    """
    by_name = {c.value.lower(): c for c in Character}
    resolved: list[Character] = list(BASE_CHARACTERS)
    for name in names:
        key = name.strip().lower()
        if key in CHARACTER_SETS:
            found = CHARACTER_SETS[key]
        elif key in by_name:
            found = (by_name[key],)
        else:
            raise ValueError(f"Unknown character or set: {name}")
        resolved.extend(c for c in found if c not in resolved)
    return tuple(resolved)


def load_config(path: Path | str | None = None) -> MatchConfig:
    """Load config from file, or return defaults if not found or unreadable."""
    if path is None:
        return DEFAULT_CONFIG.copy()
    path = Path(path)
    if not path.exists():
        logger.info("No match config at %s, using defaults", path)
        return DEFAULT_CONFIG.copy()

    try:
        with open(path, "r", encoding="utf-8") as f:
            if path.suffix.lower() in YAML_SUFFIXES:
                saved = yaml.safe_load(f) or {}
            else:
                saved = json.load(f)
    except (yaml.YAMLError, json.JSONDecodeError, IOError) as e:
        logger.warning("Could not read match config %s: %s", path, e)
        return DEFAULT_CONFIG.copy()

    if not isinstance(saved, dict):
        logger.warning("Match config %s is not a mapping, using defaults", path)
        return DEFAULT_CONFIG.copy()

    # Merge with defaults to handle missing keys
    config = DEFAULT_CONFIG.copy()
    config.update({k: v for k, v in saved.items() if k in DEFAULT_CONFIG})
    unknown = sorted(set(saved) - set(DEFAULT_CONFIG))
    if unknown:
        logger.warning("Ignoring unknown match config keys: %s", ", ".join(unknown))
    return config


def save_config(config: MatchConfig, path: Path | str) -> bool:
    """Save config as YAML or JSON, chosen by file suffix. Returns True on success."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    try:
        with open(path, "w", encoding="utf-8") as f:
            if path.suffix.lower() in YAML_SUFFIXES:
                yaml.safe_dump(dict(config), f, sort_keys=False)
            else:
                json.dump(config, f, indent=2)
        return True
    except IOError:
        logger.warning("Could not write match config %s", path, exc_info=True)
        return False


def build_game_config(config: MatchConfig) -> GameConfig:
    """
    Validate a MatchConfig into a GameConfig.

    Raises:
        ValueError: Unknown character names
        pydantic.ValidationError: An impossible table
    """
    merged = DEFAULT_CONFIG.copy()
    merged.update(config)
    return GameConfig(
        player_count=merged["player_count"],
        enabled_characters=resolve_characters(merged["enabled_characters"]),
        cards_per_character=merged["cards_per_character"],
        influence_per_player=merged["influence_per_player"],
        starting_coins=merged["starting_coins"],
        enable_factions=merged["enable_factions"],
        player_ids=tuple(merged["player_ids"]),
        player_names=tuple(merged["player_names"]),
    )
