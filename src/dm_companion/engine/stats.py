"""Derived character statistics.

Every function here is pure: it takes plain integers or a read-only
CharacterSnapshot and returns a new value. Nothing reads from or writes
to the character sheet.

Example:
    >>> from dm_companion.engine.stats import hit_points, proficiency_bonus
    >>> proficiency_bonus(5)
    3
    >>> hit_points("Fighter", 5, 2)
    44
"""

from __future__ import annotations

from collections.abc import Iterable

from dm_companion.core.constants import (
    MAX_CHARACTER_LEVEL,
    MIN_CHARACTER_LEVEL,
    MIN_CONCENTRATION_DC,
)
from dm_companion.core.exceptions import InvalidRangeError
from dm_companion.core.logging import get_logger
from dm_companion.engine.traits import speed_for_traits, unarmored_defense_ability
from dm_companion.models.character import (
    AbilityScoreSet,
    CharacterSnapshot,
    DerivedStats,
    Trait,
)
from dm_companion.models.enums import Ability, CharacterClass, Skill
from dm_companion.rules.classes import (
    get_hit_die,
    get_proficiency_bonus,
    get_saving_throws,
    get_spellcasting_ability,
)


logger = get_logger(__name__)


# =============================================================================
# Core Formulas
# =============================================================================


def ability_modifier(score: int) -> int:
    """Calculate ability modifier from score.

    Uses the standard formula: floor((score - 10) / 2). Scores are not
    range-checked.

    Args:
        score: Ability score (normally 1-30).

    Returns:
        The modifier (-5 for 1, +10 for 30).
    """
    return (score - 10) // 2


def _check_level(level: int) -> None:
    if not MIN_CHARACTER_LEVEL <= level <= MAX_CHARACTER_LEVEL:
        raise InvalidRangeError(
            f"Character level must be between {MIN_CHARACTER_LEVEL} and {MAX_CHARACTER_LEVEL}",
            value=level,
            minimum=MIN_CHARACTER_LEVEL,
            maximum=MAX_CHARACTER_LEVEL,
        )


def proficiency_bonus(level: int) -> int:
    """Get proficiency bonus for a given level.

    +2 at levels 1-4 rising by one every four levels to +6 at 17-20.

    Raises:
        InvalidRangeError: If level is outside 1-20.
    """
    _check_level(level)
    return get_proficiency_bonus(level)


def hit_points(class_name: str, level: int, con_modifier: int) -> int:
    """Calculate maximum hit points using fixed per-level averages.

    Level 1 grants the full hit die plus the CON modifier; each further
    level grants ``die // 2 + 1`` plus the CON modifier. The total is not
    floored, so very low Constitution can yield zero or negative HP.

    Args:
        class_name: Class name (e.g. "Fighter").
        level: Character level (1-20).
        con_modifier: Constitution modifier.

    Returns:
        Maximum hit points, or 0 for an unknown class.

    Raises:
        InvalidRangeError: If level is outside 1-20.
    """
    _check_level(level)
    hit_die = get_hit_die(class_name)
    if hit_die is None:
        return 0
    first_level = hit_die + con_modifier
    per_level = hit_die // 2 + 1 + con_modifier
    return first_level + per_level * (level - 1)


def initiative(dex_modifier: int) -> int:
    """Initiative bonus equals the DEX modifier."""
    return dex_modifier


def skill_bonus(modifier: int, proficient: bool, prof_bonus: int) -> int:
    """Ability modifier plus proficiency bonus when proficient."""
    return modifier + (prof_bonus if proficient else 0)


def saving_throw_bonus(modifier: int, proficient: bool, prof_bonus: int) -> int:
    """Same formula as skill checks."""
    return skill_bonus(modifier, proficient, prof_bonus)


def spell_save_dc(prof_bonus: int, spellcasting_modifier: int) -> int:
    """8 + proficiency bonus + spellcasting modifier."""
    return 8 + prof_bonus + spellcasting_modifier


def spell_attack_bonus(prof_bonus: int, spellcasting_modifier: int) -> int:
    return prof_bonus + spellcasting_modifier


def concentration_dc(damage: int) -> int:
    """DC of the CON save to keep concentrating after taking damage.

    The DC is 10 or half the damage taken (rounded down), whichever is
    higher.
    """
    return max(MIN_CONCENTRATION_DC, damage // 2)


def melee_attack_bonus(prof_bonus: int, str_modifier: int) -> int:
    return prof_bonus + str_modifier


def ranged_attack_bonus(prof_bonus: int, dex_modifier: int) -> int:
    return prof_bonus + dex_modifier


def finesse_attack_bonus(prof_bonus: int, str_modifier: int, dex_modifier: int) -> int:
    """Finesse weapons use the better of STR and DEX."""
    return prof_bonus + max(str_modifier, dex_modifier)


def unarmored_defense_ac(dex_modifier: int, secondary_modifier: int) -> int:
    """10 + DEX + CON (Barbarian) or WIS (Monk)."""
    return 10 + dex_modifier + secondary_modifier


# =============================================================================
# Snapshot Construction
# =============================================================================


def create_character_snapshot(
    class_name: CharacterClass | str,
    level: int = 1,
    abilities: AbilityScoreSet | None = None,
    *,
    skill_proficiencies: Iterable[Skill] = (),
    saving_throw_proficiencies: Iterable[Ability] | None = None,
    spellcasting_ability: Ability | None = None,
    traits: Iterable[Trait] = (),
) -> CharacterSnapshot:
    """Create a character snapshot with class defaults filled in.

    When saving throws or spellcasting ability are not given, the class's
    two proficient saves and its default spellcasting ability are used.

    Args:
        class_name: One of the twelve classes.
        level: Character level (1-20).
        abilities: Ability scores (all 10 when omitted).
        skill_proficiencies: Proficient skills.
        saving_throw_proficiencies: Overrides the class saves when given.
        spellcasting_ability: Overrides the class default when given.
        traits: Class/species/feat traits.

    Returns:
        A validated CharacterSnapshot.
    """
    character_class = CharacterClass(class_name)
    if saving_throw_proficiencies is None:
        saving_throw_proficiencies = get_saving_throws(character_class)
    if spellcasting_ability is None:
        spellcasting_ability = get_spellcasting_ability(character_class)

    return CharacterSnapshot(
        class_name=character_class,
        level=level,
        abilities=abilities or AbilityScoreSet(),
        saving_throw_proficiencies=frozenset(saving_throw_proficiencies),
        skill_proficiencies=frozenset(skill_proficiencies),
        spellcasting_ability=spellcasting_ability,
        traits=tuple(traits),
    )


# =============================================================================
# Aggregate
# =============================================================================


def compute_derived_stats(
    snapshot: CharacterSnapshot,
    *,
    include_hit_points: bool = True,
) -> DerivedStats:
    """Compute every derived value for a character.

    Args:
        snapshot: The character's current attributes.
        include_hit_points: Set False when HP is entered by hand.

    Returns:
        A new DerivedStats value.
    """
    modifiers = {ability: ability_modifier(snapshot.abilities.get_score(ability)) for ability in Ability}
    prof = proficiency_bonus(snapshot.level)

    str_mod = modifiers[Ability.STR]
    dex_mod = modifiers[Ability.DEX]

    armor_class = None
    secondary = unarmored_defense_ability(snapshot.traits)
    if secondary is not None:
        armor_class = unarmored_defense_ac(dex_mod, modifiers[secondary])

    spell_dc = None
    spell_attack = None
    if snapshot.spellcasting_ability is not None:
        casting_mod = modifiers[snapshot.spellcasting_ability]
        spell_dc = spell_save_dc(prof, casting_mod)
        spell_attack = spell_attack_bonus(prof, casting_mod)

    stats = DerivedStats(
        modifiers=modifiers,
        proficiency_bonus=prof,
        initiative=initiative(dex_mod),
        hit_points=(
            hit_points(snapshot.class_name, snapshot.level, modifiers[Ability.CON])
            if include_hit_points
            else None
        ),
        armor_class=armor_class,
        speed=speed_for_traits(snapshot.traits, snapshot.level),
        melee_attack_bonus=melee_attack_bonus(prof, str_mod),
        ranged_attack_bonus=ranged_attack_bonus(prof, dex_mod),
        finesse_attack_bonus=finesse_attack_bonus(prof, str_mod, dex_mod),
        spell_save_dc=spell_dc,
        spell_attack_bonus=spell_attack,
        saving_throws={
            ability: saving_throw_bonus(modifiers[ability], snapshot.is_proficient_save(ability), prof)
            for ability in Ability
        },
        skills={
            skill: skill_bonus(modifiers[skill.ability], snapshot.is_proficient_skill(skill), prof)
            for skill in Skill
        },
    )

    logger.debug(
        "Derived stats computed",
        class_name=str(snapshot.class_name),
        level=snapshot.level,
        hit_points=stats.hit_points,
        armor_class=stats.armor_class,
    )
    return stats


__all__ = [
    "ability_modifier",
    "proficiency_bonus",
    "hit_points",
    "initiative",
    "skill_bonus",
    "saving_throw_bonus",
    "spell_save_dc",
    "spell_attack_bonus",
    "concentration_dc",
    "melee_attack_bonus",
    "ranged_attack_bonus",
    "finesse_attack_bonus",
    "unarmored_defense_ac",
    "create_character_snapshot",
    "compute_derived_stats",
]
