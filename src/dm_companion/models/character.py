"""Character models for the DM Companion.

This module defines the read-only inputs of the stat engine and the value
it produces:

    AbilityScoreSet: The six ability scores, each validated to 1-30.
    Trait: A named class/species/feat feature with free-text notes.
    CharacterSnapshot: Everything the stat engine needs about a character.
    DerivedStats: Every value computed from a snapshot.
    ResourceCounter: A limited-use resource tracked on the sheet.

Snapshots are created by the persistence/UI layer and never mutated by the
engine; use ``model_copy(update=...)`` to produce an edited snapshot.
"""

from __future__ import annotations

from typing import Annotated
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from dm_companion.models.enums import (
    SPELLCASTING_ABILITIES,
    Ability,
    CharacterClass,
    Skill,
    TraitSource,
)


# Type alias for validated ability scores
AbilityScore = Annotated[int, Field(ge=1, le=30, description="Ability score (1-30)")]

# Validated level (1-20)
CharacterLevel = Annotated[int, Field(ge=1, le=20, description="Character level (1-20)")]


# =============================================================================
# Ability Scores
# =============================================================================


class AbilityScoreSet(BaseModel):
    """The six ability scores of a character.

    Example:
        >>> scores = AbilityScoreSet(strength=16, dexterity=14)
        >>> scores.get_score(Ability.STR)
        16
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    strength: AbilityScore = 10
    dexterity: AbilityScore = 10
    constitution: AbilityScore = 10
    intelligence: AbilityScore = 10
    wisdom: AbilityScore = 10
    charisma: AbilityScore = 10

    def get_score(self, ability: Ability) -> int:
        """Get the score for a specific ability.

        Args:
            ability: The ability to look up.

        Returns:
            The ability score value.
        """
        return getattr(self, ability.value)

    def get_modifier(self, ability: Ability) -> int:
        """Get the modifier for a specific ability.

        Uses the standard formula: floor((score - 10) / 2)
        """
        return (self.get_score(ability) - 10) // 2

    @classmethod
    def from_abbreviations(cls, scores: dict[str, int]) -> AbilityScoreSet:
        """Build from a sheet-style mapping such as ``{"str": 16, "dex": 14}``.

        Missing abilities default to 10.
        """
        return cls(**{Ability.from_abbreviation(key).value: value for key, value in scores.items()})


# =============================================================================
# Traits
# =============================================================================


class Trait(BaseModel):
    """A class, species or feat feature on the character sheet.

    The notes are free text; trait effects key off phrases in them
    (e.g. "AC = 10 + DEX + CON").
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(min_length=1, max_length=100)
    notes: str = Field(default="", max_length=2000)
    source: TraitSource = TraitSource.CUSTOM


# =============================================================================
# Character Snapshot
# =============================================================================


class CharacterSnapshot(BaseModel):
    """Read-only character input for the stat engine.

    Attributes:
        class_name: One of the twelve classes.
        level: Character level (1-20).
        abilities: Ability scores.
        saving_throw_proficiencies: Abilities with save proficiency
            (two per class by rule, not enforced here).
        skill_proficiencies: Proficient skills.
        spellcasting_ability: INT, WIS or CHA, or None for non-casters.
        traits: Class/species/feat traits.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    class_name: CharacterClass
    level: CharacterLevel = 1
    abilities: AbilityScoreSet = Field(default_factory=AbilityScoreSet)
    saving_throw_proficiencies: frozenset[Ability] = frozenset()
    skill_proficiencies: frozenset[Skill] = frozenset()
    spellcasting_ability: Ability | None = None
    traits: tuple[Trait, ...] = ()

    @field_validator("spellcasting_ability", mode="after")
    @classmethod
    def validate_spellcasting_ability(cls, value: Ability | None) -> Ability | None:
        """Only INT, WIS and CHA can be spellcasting abilities."""
        if value is not None and value not in SPELLCASTING_ABILITIES:
            msg = f"Spellcasting ability must be intelligence, wisdom or charisma, got {value.value}"
            raise ValueError(msg)
        return value

    def is_proficient_save(self, ability: Ability) -> bool:
        """Check saving throw proficiency for an ability."""
        return ability in self.saving_throw_proficiencies

    def is_proficient_skill(self, skill: Skill) -> bool:
        """Check proficiency in a skill."""
        return skill in self.skill_proficiencies


# =============================================================================
# Derived Stats
# =============================================================================


class DerivedStats(BaseModel):
    """Every value computed from a CharacterSnapshot.

    Spell values are None when the snapshot has no spellcasting ability;
    armor_class is None unless an unarmored-defense trait applies;
    hit_points is None when not requested.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    modifiers: dict[Ability, int]
    proficiency_bonus: int
    initiative: int
    hit_points: int | None = None
    armor_class: int | None = None
    speed: int
    melee_attack_bonus: int
    ranged_attack_bonus: int
    finesse_attack_bonus: int
    spell_save_dc: int | None = None
    spell_attack_bonus: int | None = None
    saving_throws: dict[Ability, int]
    skills: dict[Skill, int]


# =============================================================================
# Resource Counters
# =============================================================================


class ResourceCounter(BaseModel):
    """A limited-use resource such as Rage or Ki Points.

    ``current`` is always kept within [0, maximum].
    """

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    id: str = Field(default_factory=lambda: str(uuid4()))
    name: str = Field(min_length=1, max_length=100)
    maximum: int = Field(ge=0)
    current: int = Field(ge=0)
    auto_generated: bool = False

    @model_validator(mode="before")
    @classmethod
    def default_current_to_maximum(cls, data: object) -> object:
        """A new counter starts full unless told otherwise."""
        if isinstance(data, dict) and "current" not in data and "maximum" in data:
            return {**data, "current": data["maximum"]}
        return data

    @model_validator(mode="after")
    def validate_current(self) -> ResourceCounter:
        """Current uses cannot exceed the maximum."""
        if self.current > self.maximum:
            msg = f"current ({self.current}) exceeds maximum ({self.maximum})"
            raise ValueError(msg)
        return self

    def spend(self, amount: int = 1) -> None:
        """Use the resource, stopping at zero."""
        self.set_value(self.current - amount)

    def restore(self, amount: int = 1) -> None:
        """Regain uses, stopping at the maximum."""
        self.set_value(self.current + amount)

    def reset(self) -> None:
        """Refill to the maximum (long rest)."""
        self.current = self.maximum

    def set_value(self, value: int) -> None:
        """Set current uses, clamped to [0, maximum]."""
        self.current = max(0, min(value, self.maximum))


__all__ = [
    "AbilityScore",
    "CharacterLevel",
    "AbilityScoreSet",
    "Trait",
    "CharacterSnapshot",
    "DerivedStats",
    "ResourceCounter",
]
