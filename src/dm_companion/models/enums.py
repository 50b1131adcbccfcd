"""Enumeration types for the DM Companion.

This module defines the enumeration types used throughout the application:
abilities, skills, character classes, encounter difficulties and trait
sources. These enums are the type-safe keys of every rules table.
"""

from __future__ import annotations

from enum import StrEnum


class Ability(StrEnum):
    """D&D 5E ability scores."""

    STR = "strength"
    DEX = "dexterity"
    CON = "constitution"
    INT = "intelligence"
    WIS = "wisdom"
    CHA = "charisma"

    @property
    def full_name(self) -> str:
        """Get the full name of the ability.

        Returns:
            Full ability name (e.g., 'Strength' for STR).
        """
        return self.value.capitalize()

    @property
    def abbreviation(self) -> str:
        """Get the three-letter abbreviation.

        Returns:
            Three-letter abbreviation (e.g., 'STR').
        """
        return self.name

    @classmethod
    def from_abbreviation(cls, value: str) -> Ability:
        """Resolve 'str', 'DEX', 'wisdom' etc. to an Ability.

        Raises:
            ValueError: If the value names no ability.
        """
        key = value.strip().lower()
        for ability in cls:
            if key in (ability.value, ability.name.lower()):
                return ability
        msg = f"Unknown ability: {value!r}"
        raise ValueError(msg)


SPELLCASTING_ABILITIES: frozenset[Ability] = frozenset({Ability.INT, Ability.WIS, Ability.CHA})
"""Abilities a character may select as spellcasting ability."""


class Skill(StrEnum):
    """D&D 5E skills and their associated abilities."""

    # Strength skills
    ATHLETICS = "athletics"

    # Dexterity skills
    ACROBATICS = "acrobatics"
    SLEIGHT_OF_HAND = "sleight_of_hand"
    STEALTH = "stealth"

    # Intelligence skills
    ARCANA = "arcana"
    HISTORY = "history"
    INVESTIGATION = "investigation"
    NATURE = "nature"
    RELIGION = "religion"

    # Wisdom skills
    ANIMAL_HANDLING = "animal_handling"
    INSIGHT = "insight"
    MEDICINE = "medicine"
    PERCEPTION = "perception"
    SURVIVAL = "survival"

    # Charisma skills
    DECEPTION = "deception"
    INTIMIDATION = "intimidation"
    PERFORMANCE = "performance"
    PERSUASION = "persuasion"

    @property
    def ability(self) -> Ability:
        """Get the governing ability for this skill.

        Returns:
            The Ability enum value associated with this skill.
        """
        return _SKILL_ABILITIES[self]


_SKILL_ABILITIES: dict[Skill, Ability] = {
    Skill.ATHLETICS: Ability.STR,
    Skill.ACROBATICS: Ability.DEX,
    Skill.SLEIGHT_OF_HAND: Ability.DEX,
    Skill.STEALTH: Ability.DEX,
    Skill.ARCANA: Ability.INT,
    Skill.HISTORY: Ability.INT,
    Skill.INVESTIGATION: Ability.INT,
    Skill.NATURE: Ability.INT,
    Skill.RELIGION: Ability.INT,
    Skill.ANIMAL_HANDLING: Ability.WIS,
    Skill.INSIGHT: Ability.WIS,
    Skill.MEDICINE: Ability.WIS,
    Skill.PERCEPTION: Ability.WIS,
    Skill.SURVIVAL: Ability.WIS,
    Skill.DECEPTION: Ability.CHA,
    Skill.INTIMIDATION: Ability.CHA,
    Skill.PERFORMANCE: Ability.CHA,
    Skill.PERSUASION: Ability.CHA,
}


class CharacterClass(StrEnum):
    """The twelve player classes."""

    BARBARIAN = "Barbarian"
    BARD = "Bard"
    CLERIC = "Cleric"
    DRUID = "Druid"
    FIGHTER = "Fighter"
    MONK = "Monk"
    PALADIN = "Paladin"
    RANGER = "Ranger"
    ROGUE = "Rogue"
    SORCERER = "Sorcerer"
    WARLOCK = "Warlock"
    WIZARD = "Wizard"


class Difficulty(StrEnum):
    """Encounter difficulty, ordered from easiest to deadliest."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
    VERY_HARD = "veryhard"
    DEADLY = "deadly"

    @property
    def display_name(self) -> str:
        """Get the label shown to users (e.g., 'Very Hard')."""
        return _DIFFICULTY_LABELS[self]

    @property
    def rank(self) -> int:
        """Position in the easy-to-deadly ordering, starting at 0."""
        return list(Difficulty).index(self)

    @classmethod
    def parse(cls, value: str | int | Difficulty) -> Difficulty:
        """Resolve a slider index, key or label to a Difficulty.

        Accepts 0-4, 'veryhard', 'Very Hard' or 'very_hard'.

        Raises:
            ValueError: If the value names no difficulty.
        """
        if isinstance(value, Difficulty):
            return value
        if isinstance(value, int):
            members = list(cls)
            if 0 <= value < len(members):
                return members[value]
            msg = f"Difficulty index out of range: {value}"
            raise ValueError(msg)
        key = value.strip().lower().replace(" ", "").replace("_", "")
        for difficulty in cls:
            if key == difficulty.value:
                return difficulty
        msg = f"Unknown difficulty: {value!r}"
        raise ValueError(msg)


_DIFFICULTY_LABELS: dict[Difficulty, str] = {
    Difficulty.EASY: "Easy",
    Difficulty.MEDIUM: "Medium",
    Difficulty.HARD: "Hard",
    Difficulty.VERY_HARD: "Very Hard",
    Difficulty.DEADLY: "Deadly",
}


class TraitSource(StrEnum):
    """Where a character trait comes from."""

    CLASS = "class"
    SPECIES = "species"
    FEAT = "feat"
    CUSTOM = "custom"


class EncounterKind(StrEnum):
    """Whether a saved encounter was generated or built by hand."""

    GENERATED = "generated"
    CUSTOM = "custom"


__all__ = [
    "Ability",
    "SPELLCASTING_ABILITIES",
    "Skill",
    "CharacterClass",
    "Difficulty",
    "TraitSource",
    "EncounterKind",
]
