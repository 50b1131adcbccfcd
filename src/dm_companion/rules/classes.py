"""Class reference data: hit dice, saves, spellcasting and proficiency.

Lookups take the class name as a plain string so that values read from
stored character sheets can be passed through unchanged; unknown names
return the documented fallback instead of raising.
"""

from __future__ import annotations

import math
from typing import Final

from dm_companion.models.enums import Ability, CharacterClass


# =============================================================================
# Hit Dice by Class
# =============================================================================

CLASS_HIT_DIE: Final[dict[CharacterClass, int]] = {
    CharacterClass.BARBARIAN: 12,
    CharacterClass.FIGHTER: 10,
    CharacterClass.PALADIN: 10,
    CharacterClass.RANGER: 10,
    CharacterClass.BARD: 8,
    CharacterClass.CLERIC: 8,
    CharacterClass.DRUID: 8,
    CharacterClass.MONK: 8,
    CharacterClass.ROGUE: 8,
    CharacterClass.WARLOCK: 8,
    CharacterClass.SORCERER: 6,
    CharacterClass.WIZARD: 6,
}


def get_hit_die(class_name: str) -> int | None:
    """Get hit die size for a class, or None for an unknown class."""
    return CLASS_HIT_DIE.get(class_name)  # type: ignore[call-overload]


# =============================================================================
# Saving Throw Proficiencies by Class
# =============================================================================

CLASS_SAVING_THROWS: Final[dict[CharacterClass, frozenset[Ability]]] = {
    CharacterClass.BARBARIAN: frozenset({Ability.STR, Ability.CON}),
    CharacterClass.BARD: frozenset({Ability.DEX, Ability.CHA}),
    CharacterClass.CLERIC: frozenset({Ability.WIS, Ability.CHA}),
    CharacterClass.DRUID: frozenset({Ability.INT, Ability.WIS}),
    CharacterClass.FIGHTER: frozenset({Ability.STR, Ability.CON}),
    CharacterClass.MONK: frozenset({Ability.STR, Ability.DEX}),
    CharacterClass.PALADIN: frozenset({Ability.WIS, Ability.CHA}),
    CharacterClass.RANGER: frozenset({Ability.STR, Ability.DEX}),
    CharacterClass.ROGUE: frozenset({Ability.DEX, Ability.INT}),
    CharacterClass.SORCERER: frozenset({Ability.CON, Ability.CHA}),
    CharacterClass.WARLOCK: frozenset({Ability.WIS, Ability.CHA}),
    CharacterClass.WIZARD: frozenset({Ability.INT, Ability.WIS}),
}


def get_saving_throws(class_name: str) -> frozenset[Ability]:
    """Get the two proficient saving throws for a class (empty if unknown)."""
    return CLASS_SAVING_THROWS.get(class_name, frozenset())  # type: ignore[call-overload]


# =============================================================================
# Spellcasting Ability by Class
# =============================================================================

SPELLCASTING_ABILITY: Final[dict[CharacterClass, Ability]] = {
    CharacterClass.BARD: Ability.CHA,
    CharacterClass.CLERIC: Ability.WIS,
    CharacterClass.DRUID: Ability.WIS,
    CharacterClass.PALADIN: Ability.CHA,
    CharacterClass.RANGER: Ability.WIS,
    CharacterClass.SORCERER: Ability.CHA,
    CharacterClass.WARLOCK: Ability.CHA,
    CharacterClass.WIZARD: Ability.INT,
}


def get_spellcasting_ability(class_name: str) -> Ability | None:
    """Get the spellcasting ability for a class."""
    return SPELLCASTING_ABILITY.get(class_name)  # type: ignore[call-overload]


def is_spellcaster(class_name: str) -> bool:
    """Check if a class is a spellcaster."""
    return class_name in SPELLCASTING_ABILITY


# =============================================================================
# Proficiency by Level
# =============================================================================


def get_proficiency_bonus(level: int) -> int:
    """Get the proficiency bonus for a character level.

    +2 at levels 1-4, rising by one every four levels to +6 at 17-20. The
    level is not range-checked here.
    """
    return math.ceil(level / 4) + 1


__all__ = [
    "CLASS_HIT_DIE",
    "CLASS_SAVING_THROWS",
    "SPELLCASTING_ABILITY",
    "get_hit_die",
    "get_saving_throws",
    "get_spellcasting_ability",
    "get_proficiency_bonus",
    "is_spellcaster",
]
