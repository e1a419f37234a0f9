"""
Character catalog as pure data plus lookup functions.

Each character maps to at most one principal action and to the action
types it can block. The three general actions (Income, Foreign Aid,
Coup) are tied to no character and can never be challenged.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from ..state.schema import (
    ASSASSINATE_COST,
    COUP_COST,
    ActionType,
    Character,
)


class CharacterDefinition(BaseModel):
    """Declarative description of one character."""
    model_config = ConfigDict(frozen=True)

    character: Character
    action: ActionType | None = None
    action_description: str = ""
    action_cost: int = 0
    requires_target: bool = False
    blocks: tuple[ActionType, ...] = ()


class GeneralAction(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: ActionType
    description: str
    cost: int = 0
    requires_target: bool = False
    blockable: bool = False


CHARACTER_DEFINITIONS: dict[Character, CharacterDefinition] = {
    # Base game
    Character.DUKE: CharacterDefinition(
        character=Character.DUKE,
        action=ActionType.TAX,
        action_description="Take 3 coins from the treasury.",
        blocks=(ActionType.FOREIGN_AID,),
    ),
    Character.ASSASSIN: CharacterDefinition(
        character=Character.ASSASSIN,
        action=ActionType.ASSASSINATE,
        action_description="Pay 3 coins to make a player lose one influence.",
        action_cost=ASSASSINATE_COST,
        requires_target=True,
    ),
    Character.CAPTAIN: CharacterDefinition(
        character=Character.CAPTAIN,
        action=ActionType.STEAL,
        action_description="Take up to 2 coins from another player.",
        requires_target=True,
        blocks=(ActionType.STEAL,),
    ),
    Character.AMBASSADOR: CharacterDefinition(
        character=Character.AMBASSADOR,
        action=ActionType.EXCHANGE,
        action_description="Draw as many cards as you hold and keep the best of them.",
        blocks=(ActionType.STEAL,),
    ),
    Character.CONTESSA: CharacterDefinition(
        character=Character.CONTESSA,
        blocks=(ActionType.ASSASSINATE,),
    ),
    # Extension
    Character.INQUISITOR: CharacterDefinition(
        character=Character.INQUISITOR,
        action=ActionType.EXAMINE,
        action_description="Exchange one of your own cards, or examine an opponent's.",
    ),
    # Promo
    Character.JESTER: CharacterDefinition(
        character=Character.JESTER,
        action_description="Passive: redirect a Coup aimed at you to another player.",
    ),
    Character.BUREAUCRAT: CharacterDefinition(
        character=Character.BUREAUCRAT,
        action=ActionType.BUREAUCRAT_TAX,
        action_description="Take 3 coins from the treasury and hand 1 of them to another player.",
        requires_target=True,
        blocks=(ActionType.FOREIGN_AID,),
    ),
    Character.SPECULATOR: CharacterDefinition(
        character=Character.SPECULATOR,
        action=ActionType.SPECULATOR_TAX,
        action_description="Take 3 coins from the treasury.",
        blocks=(ActionType.FOREIGN_AID,),
    ),
    Character.SOCIALIST: CharacterDefinition(
        character=Character.SOCIALIST,
        action=ActionType.SOCIALIST_REDISTRIBUTE,
        action_description="Collect 1 coin from everyone, keep 1, hand the rest to the poorest.",
        blocks=(ActionType.STEAL,),
    ),
}


GENERAL_ACTIONS: dict[ActionType, GeneralAction] = {
    ActionType.INCOME: GeneralAction(
        type=ActionType.INCOME,
        description="Take 1 coin from the treasury.",
    ),
    ActionType.FOREIGN_AID: GeneralAction(
        type=ActionType.FOREIGN_AID,
        description="Take 2 coins from the treasury. Blockable by the Duke.",
        blockable=True,
    ),
    ActionType.COUP: GeneralAction(
        type=ActionType.COUP,
        description="Pay 7 coins to make a player lose one influence.",
        cost=COUP_COST,
        requires_target=True,
    ),
}

# Only the designated target may block these
TARGET_ONLY_BLOCKS: frozenset[ActionType] = frozenset({
    ActionType.STEAL,
    ActionType.ASSASSINATE,
    ActionType.EXAMINE,
})

REDIRECT_CHARACTER = Character.JESTER


def get_definition(character: Character) -> CharacterDefinition:
    return CHARACTER_DEFINITIONS[character]


def is_general_action(action_type: ActionType) -> bool:
    return action_type in GENERAL_ACTIONS


def character_for_action(
    action_type: ActionType,
    enabled: tuple[Character, ...] | list[Character],
) -> Character | None:
    """The enabled character whose principal action is action_type, if any."""
    for character in enabled:
        if CHARACTER_DEFINITIONS[character].action == action_type:
            return character
    return None


def blockers_for(
    action_type: ActionType,
    enabled: tuple[Character, ...] | list[Character],
) -> list[Character]:
    """Enabled characters that may be claimed to block action_type."""
    return [c for c in enabled if action_type in CHARACTER_DEFINITIONS[c].blocks]


def is_challengeable(action_type: ActionType) -> bool:
    """Character actions are always challengeable; general actions never are."""
    return not is_general_action(action_type)


def is_blockable(
    action_type: ActionType,
    enabled: tuple[Character, ...] | list[Character],
) -> bool:
    general = GENERAL_ACTIONS.get(action_type)
    if general is not None:
        return general.blockable and bool(blockers_for(action_type, enabled))
    return bool(blockers_for(action_type, enabled))


def is_target_only_block(action_type: ActionType) -> bool:
    return action_type in TARGET_ONLY_BLOCKS


def action_cost(action_type: ActionType) -> int:
    general = GENERAL_ACTIONS.get(action_type)
    if general is not None:
        return general.cost
    for definition in CHARACTER_DEFINITIONS.values():
        if definition.action == action_type:
            return definition.action_cost
    return 0


def requires_target(action_type: ActionType) -> bool:
    general = GENERAL_ACTIONS.get(action_type)
    if general is not None:
        return general.requires_target
    for definition in CHARACTER_DEFINITIONS.values():
        if definition.action == action_type:
            return definition.requires_target
    return False
