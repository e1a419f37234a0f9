"""Tests for match config files."""

import json
import logging

import pytest
from pydantic import ValidationError

from coup_engine.interface.config import (
    DEFAULT_CONFIG,
    build_game_config,
    load_config,
    resolve_characters,
    save_config,
)
from coup_engine.state.schema import ALL_CHARACTERS, BASE_CHARACTERS, Character


class TestResolveCharacters:
    """Test character and set name resolution."""

    def test_base_always_included(self):
        assert resolve_characters([]) == BASE_CHARACTERS

    def test_names_are_case_insensitive(self):
        resolved = resolve_characters(["jester", " SOCIALIST "])
        assert resolved == BASE_CHARACTERS + (Character.JESTER, Character.SOCIALIST)

    def test_sets_and_duplicates(self):
        assert resolve_characters(["all", "Duke", "promo"]) == ALL_CHARACTERS

    def test_unknown_name(self):
        with pytest.raises(ValueError, match="Pope"):
            resolve_characters(["Pope"])


class TestLoadConfig:
    """Test loading YAML and JSON configs."""

    def test_defaults(self):
        assert load_config() == DEFAULT_CONFIG
        assert load_config() is not DEFAULT_CONFIG

    def test_missing_file(self, tmp_path):
        assert load_config(tmp_path / "absent.yaml") == DEFAULT_CONFIG

    def test_yaml(self, tmp_path):
        path = tmp_path / "match.yaml"
        path.write_text("player_count: 3\nenabled_characters: [base, Jester]\nseed: 42\n")
        config = load_config(path)
        assert config["player_count"] == 3
        assert config["enabled_characters"] == ["base", "Jester"]
        assert config["seed"] == 42
        assert config["starting_coins"] == DEFAULT_CONFIG["starting_coins"]

    def test_json(self, tmp_path):
        path = tmp_path / "match.json"
        path.write_text(json.dumps({"player_count": 5, "enable_factions": True}))
        config = load_config(path)
        assert config["player_count"] == 5
        assert config["enable_factions"] is True

    def test_unknown_keys_ignored(self, tmp_path, caplog):
        path = tmp_path / "match.yml"
        path.write_text("player_count: 2\ntimer: 30\n")
        with caplog.at_level(logging.WARNING):
            config = load_config(path)
        assert "timer" not in config
        assert "timer" in caplog.text

    def test_malformed_file(self, tmp_path):
        path = tmp_path / "match.yaml"
        path.write_text("player_count: [3\n")
        assert load_config(path) == DEFAULT_CONFIG

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "match.json"
        path.write_text("[1, 2, 3]")
        assert load_config(path) == DEFAULT_CONFIG

    @pytest.mark.parametrize("name", ["saved.yaml", "saved.json"])
    def test_save_then_load(self, tmp_path, name):
        config = DEFAULT_CONFIG.copy()
        config["player_count"] = 6
        config["enabled_characters"] = ["base", "Inquisitor"]
        path = tmp_path / "nested" / name

        assert save_config(config, path)
        assert load_config(path) == config


class TestBuildGameConfig:
    """Test validation into a GameConfig."""

    def test_defaults(self):
        game = build_game_config(DEFAULT_CONFIG)
        assert game.player_count == 4
        assert game.enabled_characters == BASE_CHARACTERS

    def test_partial_config(self):
        game = build_game_config({"player_count": 3, "enabled_characters": ["promo"], "player_ids": ["a", "b"]})
        assert game.player_count == 3
        assert Character.BUREAUCRAT in game.enabled_characters
        assert game.player_ids == ("a", "b")

    def test_impossible_table(self):
        with pytest.raises(ValidationError):
            build_game_config({"player_count": 6, "cards_per_character": 1, "influence_per_player": 3})
