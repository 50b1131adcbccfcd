"""Pytest configuration and shared fixtures.

This module provides common fixtures and configuration for all tests
in the DM Companion test suite.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest


if TYPE_CHECKING:
    from collections.abc import Generator
    from pathlib import Path


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset the settings cache before and after each test."""
    from dm_companion.core.config import clear_settings_cache

    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def mock_env_vars(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> dict[str, str]:
    """Set up mock environment variables for testing.

    Returns:
        Dictionary of environment variables that were set.
    """
    env_vars = {
        "DM_COMPANION_DEBUG": "true",
        "DM_COMPANION_LOG_LEVEL": "DEBUG",
        "DM_COMPANION_DATABASE_PATH": str(tmp_path / "env" / "accounts.db"),
        "DM_COMPANION_SRD_BASE_URL": "https://srd.example.test/api/",
        "DM_COMPANION_SESSION_AUTOSAVE_INTERVAL_SECONDS": "5",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars


# =============================================================================
# Character Fixtures
# =============================================================================


@pytest.fixture
def sample_ability_scores() -> dict[str, int]:
    """Provide sample character ability scores.

    Returns:
        Dictionary of ability scores.
    """
    return {
        "strength": 16,
        "dexterity": 14,
        "constitution": 15,
        "intelligence": 10,
        "wisdom": 12,
        "charisma": 8,
    }


@pytest.fixture
def sample_abilities(sample_ability_scores: dict[str, int]) -> Any:
    """Create an AbilityScoreSet from the sample scores."""
    from dm_companion.models.character import AbilityScoreSet

    return AbilityScoreSet(**sample_ability_scores)


@pytest.fixture
def sample_fighter(sample_abilities: Any) -> Any:
    """Create a level 5 Fighter snapshot with class saves.

    Returns:
        CharacterSnapshot instance.
    """
    from dm_companion.engine.stats import create_character_snapshot
    from dm_companion.models.character import Trait
    from dm_companion.models.enums import Skill, TraitSource

    return create_character_snapshot(
        "Fighter",
        level=5,
        abilities=sample_abilities,
        skill_proficiencies=[Skill.ATHLETICS, Skill.PERCEPTION],
        traits=[
            Trait(name="Second Wind", notes="Regain 1d10 + level HP", source=TraitSource.CLASS),
            Trait(name="Action Surge", notes="Take one additional action", source=TraitSource.CLASS),
        ],
    )


# =============================================================================
# Monster Fixtures
# =============================================================================


@pytest.fixture
def sample_monsters() -> list[Any]:
    """Provide a small catalog spanning CR 0 to 30.

    Returns:
        List of MonsterRecord instances (unsorted).
    """
    from dm_companion.models.monster import MonsterRecord

    rows = [
        ("Troll", "5", "giant", "Large"),
        ("Goblin", "1/4", "humanoid", "Small"),
        ("Rat", "0", "beast", "Tiny"),
        ("Orc", "1/2", "humanoid", "Medium"),
        ("Bugbear", "1", "humanoid", "Medium"),
        ("Ogre", "2", "giant", "Large"),
        ("Owlbear", "3", "monstrosity", "Large"),
        ("Hill Giant", "5", "giant", "Huge"),
        ("Young Green Dragon", "8", "dragon", "Large"),
        ("Adult Red Dragon", "17", "dragon", "Huge"),
        ("Kraken", "23", "monstrosity", "Gargantuan"),
        ("Tarrasque", "30", "monstrosity", "Gargantuan"),
    ]
    return [
        MonsterRecord(name=name, cr=cr, type=monster_type, size=size)
        for name, cr, monster_type, size in rows
    ]


@pytest.fixture
def sample_catalog(sample_monsters: list[Any]) -> Any:
    """Create a MonsterCatalog from the sample monsters."""
    from dm_companion.storage.catalog import MonsterCatalog

    return MonsterCatalog(sample_monsters)


@pytest.fixture
def monster(sample_catalog: Any) -> Any:
    """Look up a sample monster by name."""

    def _get(name: str) -> Any:
        found = sample_catalog.get(name)
        assert found is not None, name
        return found

    return _get


@pytest.fixture
def encounter_builder(sample_catalog: Any) -> Any:
    """Create an EncounterBuilder over the sample catalog."""
    from dm_companion.engine.encounter import EncounterBuilder

    return EncounterBuilder(sample_catalog)


# =============================================================================
# Engine Fixtures
# =============================================================================


@pytest.fixture
def dice_roller() -> Any:
    """Create a DiceRoller with a fixed seed for reproducible tests.

    Returns:
        DiceRoller instance with fixed seed.
    """
    from dm_companion.engine.dice import DiceRoller

    return DiceRoller(seed=42)


# =============================================================================
# Storage Fixtures
# =============================================================================


@pytest.fixture
def account_store(tmp_path: Path) -> Any:
    """Create an AccountStore backed by a temporary database.

    Returns:
        AccountStore instance.
    """
    from dm_companion.storage.database import AccountStore

    return AccountStore(tmp_path / "data" / "accounts.db")


@pytest.fixture
def monster_cache_payload() -> dict[str, Any]:
    """Provide a monster cache document as written by the catalog download."""
    return {
        "monsters": {
            "goblin": {
                "index": "goblin",
                "name": "Goblin",
                "challenge_rating": 0.25,
                "type": "humanoid",
                "size": "Small",
                "xp": 50,
            },
            "ogre": {
                "index": "ogre",
                "name": "Ogre",
                "challenge_rating": 2,
                "type": "giant",
                "size": "Large",
                "xp": 450,
            },
            "adult-red-dragon": {
                "name": "Adult Red Dragon",
                "challenge_rating": 17,
                "type": "dragon",
                "size": "Huge",
            },
        }
    }
