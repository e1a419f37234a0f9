"""Tests for the character catalog."""

import pytest
from pydantic import ValidationError

from coup_engine.rules.characters import (
    CHARACTER_DEFINITIONS,
    GENERAL_ACTIONS,
    action_cost,
    blockers_for,
    character_for_action,
    get_definition,
    is_blockable,
    is_challengeable,
    is_target_only_block,
    requires_target,
)
from coup_engine.state.schema import (
    ALL_CHARACTERS,
    BASE_CHARACTERS,
    ActionType,
    Character,
)


class TestCatalog:
    """Test the static character table."""

    def test_every_character_defined(self):
        """Each character has exactly one definition."""
        assert set(CHARACTER_DEFINITIONS) == set(Character)

    def test_definitions_are_frozen(self):
        """Catalog entries cannot be edited at runtime."""
        with pytest.raises(ValidationError):
            get_definition(Character.DUKE).action_cost = 5

    def test_principal_actions_are_unique(self):
        """No two characters share a principal action."""
        actions = [d.action for d in CHARACTER_DEFINITIONS.values() if d.action]
        assert len(actions) == len(set(actions))

    def test_contessa_and_jester_have_no_action(self):
        """Contessa only blocks; the Jester is passive."""
        assert get_definition(Character.CONTESSA).action is None
        assert get_definition(Character.JESTER).action is None

    def test_general_actions(self):
        """Income, Foreign Aid and Coup belong to no character."""
        assert set(GENERAL_ACTIONS) == {ActionType.INCOME, ActionType.FOREIGN_AID, ActionType.COUP}
        for action_type in GENERAL_ACTIONS:
            assert character_for_action(action_type, ALL_CHARACTERS) is None


class TestLookups:
    """Test catalog lookup functions."""

    def test_costs(self):
        """Coup costs 7, Assassinate 3, everything else nothing."""
        assert action_cost(ActionType.COUP) == 7
        assert action_cost(ActionType.ASSASSINATE) == 3
        assert action_cost(ActionType.TAX) == 0
        assert action_cost(ActionType.INCOME) == 0

    def test_targets(self):
        """Targeted actions are flagged in the catalog."""
        assert requires_target(ActionType.COUP)
        assert requires_target(ActionType.STEAL)
        assert requires_target(ActionType.ASSASSINATE)
        assert requires_target(ActionType.BUREAUCRAT_TAX)
        assert not requires_target(ActionType.TAX)
        assert not requires_target(ActionType.EXAMINE)  # Target picked later

    def test_character_for_action_respects_enabled_set(self):
        """A disabled character cannot be claimed."""
        assert character_for_action(ActionType.TAX, BASE_CHARACTERS) == Character.DUKE
        assert character_for_action(ActionType.SPECULATOR_TAX, BASE_CHARACTERS) is None
        assert character_for_action(ActionType.SPECULATOR_TAX, ALL_CHARACTERS) == Character.SPECULATOR

    def test_foreign_aid_blockers(self):
        """Duke blocks Foreign Aid; Bureaucrat and Speculator join when enabled."""
        assert blockers_for(ActionType.FOREIGN_AID, BASE_CHARACTERS) == [Character.DUKE]
        assert set(blockers_for(ActionType.FOREIGN_AID, ALL_CHARACTERS)) == {
            Character.DUKE, Character.BUREAUCRAT, Character.SPECULATOR,
        }

    def test_steal_blockers(self):
        """Captain and Ambassador block Steal in the base game."""
        assert set(blockers_for(ActionType.STEAL, BASE_CHARACTERS)) == {
            Character.CAPTAIN, Character.AMBASSADOR,
        }
        assert Character.SOCIALIST in blockers_for(ActionType.STEAL, ALL_CHARACTERS)

    def test_contessa_blocks_assassinate(self):
        assert blockers_for(ActionType.ASSASSINATE, BASE_CHARACTERS) == [Character.CONTESSA]

    def test_challengeable(self):
        """Character actions can be challenged, general actions never."""
        assert is_challengeable(ActionType.TAX)
        assert is_challengeable(ActionType.EXAMINE)
        assert not is_challengeable(ActionType.INCOME)
        assert not is_challengeable(ActionType.FOREIGN_AID)
        assert not is_challengeable(ActionType.COUP)

    def test_blockable(self):
        assert is_blockable(ActionType.FOREIGN_AID, BASE_CHARACTERS)
        assert is_blockable(ActionType.STEAL, BASE_CHARACTERS)
        assert not is_blockable(ActionType.INCOME, BASE_CHARACTERS)
        assert not is_blockable(ActionType.COUP, BASE_CHARACTERS)
        assert not is_blockable(ActionType.TAX, BASE_CHARACTERS)

    def test_target_only_blocks(self):
        assert is_target_only_block(ActionType.STEAL)
        assert is_target_only_block(ActionType.ASSASSINATE)
        assert is_target_only_block(ActionType.EXAMINE)
        assert not is_target_only_block(ActionType.FOREIGN_AID)
