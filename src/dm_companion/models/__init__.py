"""Pydantic models for characters, monsters, encounters and accounts."""

from __future__ import annotations

from dm_companion.models.enums import (
    SPELLCASTING_ABILITIES,
    Ability,
    CharacterClass,
    Difficulty,
    EncounterKind,
    Skill,
    TraitSource,
)
from dm_companion.models.character import (
    AbilityScore,
    AbilityScoreSet,
    CharacterLevel,
    CharacterSnapshot,
    DerivedStats,
    ResourceCounter,
    Trait,
)
from dm_companion.models.monster import (
    MonsterRecord,
    format_challenge_rating,
    parse_challenge_rating,
)
from dm_companion.models.encounter import (
    EncounterEntry,
    EncounterOutcome,
    EncounterRequest,
    EncounterResult,
    NoEligibleMonsters,
    SavedEncounter,
    SavedEncounterEntry,
    default_encounter_name,
)
from dm_companion.models.account import (
    Account,
    AccountData,
    DiceConfiguration,
)


__all__ = [
    # Enums
    "Ability",
    "SPELLCASTING_ABILITIES",
    "Skill",
    "CharacterClass",
    "Difficulty",
    "TraitSource",
    "EncounterKind",
    # Character
    "AbilityScore",
    "CharacterLevel",
    "AbilityScoreSet",
    "Trait",
    "CharacterSnapshot",
    "DerivedStats",
    "ResourceCounter",
    # Monsters
    "MonsterRecord",
    "parse_challenge_rating",
    "format_challenge_rating",
    # Encounters
    "EncounterRequest",
    "EncounterEntry",
    "EncounterResult",
    "NoEligibleMonsters",
    "EncounterOutcome",
    "SavedEncounterEntry",
    "SavedEncounter",
    "default_encounter_name",
    # Accounts
    "DiceConfiguration",
    "AccountData",
    "Account",
]
