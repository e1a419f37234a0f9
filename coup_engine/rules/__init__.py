"""Pure rule data: the character catalog and the general actions."""

from .characters import (
    CHARACTER_DEFINITIONS,
    GENERAL_ACTIONS,
    CharacterDefinition,
    GeneralAction,
    blockers_for,
    character_for_action,
    get_definition,
    is_blockable,
    is_challengeable,
)

__all__ = [
    "CHARACTER_DEFINITIONS",
    "GENERAL_ACTIONS",
    "CharacterDefinition",
    "GeneralAction",
    "blockers_for",
    "character_for_action",
    "get_definition",
    "is_blockable",
    "is_challengeable",
]
