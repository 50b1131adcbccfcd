"""Effects of character traits on derived stats and resources.

Traits are free-text features copied from class and species tables. This
module recognises the ones with a mechanical effect by name and notes
(matched case-insensitively) and turns them into:

    * the secondary ability of an Unarmored Defense AC formula,
    * walking speed bonuses,
    * limited-use resource counters.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass

from dm_companion.core.constants import DEFAULT_SPEED
from dm_companion.core.logging import get_logger
from dm_companion.models.character import AbilityScoreSet, ResourceCounter, Trait
from dm_companion.models.enums import Ability, TraitSource
from dm_companion.rules.classes import get_proficiency_bonus


logger = get_logger(__name__)


# =============================================================================
# Armor Class & Speed
# =============================================================================

_UNARMORED_DEFENSE_FORMULAS: dict[str, Ability] = {
    "ac = 10 + dex + con": Ability.CON,
    "ac = 10 + dex + wis": Ability.WIS,
}

# (minimum level, bonus), highest first
_UNARMORED_MOVEMENT: tuple[tuple[int, int], ...] = (
    (18, 30),
    (14, 25),
    (10, 20),
    (6, 15),
    (2, 10),
)


def _lowered(trait: Trait) -> tuple[str, str]:
    return trait.name.lower(), trait.notes.lower()


def unarmored_defense_ability(traits: Iterable[Trait]) -> Ability | None:
    """Find the secondary ability of an Unarmored Defense trait.

    Returns:
        CON for the Barbarian formula, WIS for the Monk formula, or None
        when no Unarmored Defense trait names a formula. The last matching
        trait wins.
    """
    secondary: Ability | None = None
    for trait in traits:
        name, notes = _lowered(trait)
        if "unarmored defense" not in name:
            continue
        for formula, ability in _UNARMORED_DEFENSE_FORMULAS.items():
            if formula in notes:
                secondary = ability
    return secondary


def _unarmored_movement_bonus(level: int) -> int:
    for minimum_level, bonus in _UNARMORED_MOVEMENT:
        if level >= minimum_level:
            return bonus
    return 0


def speed_bonus(traits: Iterable[Trait], level: int) -> int:
    """Total walking speed bonus in feet granted by traits.

    Args:
        traits: Character traits.
        level: Character level (Unarmored Movement scales with it).

    Returns:
        Bonus to add to the base speed.
    """
    bonus = 0
    for trait in traits:
        name, notes = _lowered(trait)
        if "fast movement" in name and "speed increases by 10" in notes:
            bonus += 10
        if "unarmored movement" in name:
            bonus += _unarmored_movement_bonus(level)
        if "deft explorer" in name and "speed increases by 5" in notes:
            bonus += 5
        if "roving" in name and "speed increases by 5" in notes:
            bonus += 5
    return bonus


def speed_for_traits(traits: Iterable[Trait], level: int, base_speed: int = DEFAULT_SPEED) -> int:
    """Walking speed after trait bonuses."""
    return base_speed + speed_bonus(traits, level)


# =============================================================================
# Resource Counters
# =============================================================================


@dataclass(frozen=True)
class _CounterContext:
    level: int
    proficiency_bonus: int
    cha_modifier: int


@dataclass(frozen=True)
class CounterRule:
    """How a trait becomes a resource counter.

    Attributes:
        counter_name: Name of the generated counter.
        name_pattern: Regex searched in the lowercased trait name.
        maximum: Computes the counter maximum, or None to skip.
        source: Required trait source, or None for any.
        notes_phrase: Phrase that must appear in the lowercased notes.
    """

    counter_name: str
    name_pattern: str
    maximum: Callable[[Trait, _CounterContext], int | None]
    source: TraitSource | None = None
    notes_phrase: str | None = None

    def applies_to(self, trait: Trait) -> bool:
        name, notes = _lowered(trait)
        if not re.search(self.name_pattern, name):
            return False
        if self.source is not None and trait.source != self.source:
            return False
        return self.notes_phrase is None or self.notes_phrase in notes


def _rages_per_day(trait: Trait, _: _CounterContext) -> int | None:
    match = re.search(r"(\d+)\s+rages?\s+per\s+day", trait.notes, re.IGNORECASE)
    return int(match.group(1)) if match else None


def _by_level(*thresholds: tuple[int, int], default: int) -> Callable[[Trait, _CounterContext], int]:
    """Uses that step up at the given levels, checked highest first."""

    def compute(_: Trait, context: _CounterContext) -> int:
        for minimum_level, uses in thresholds:
            if context.level >= minimum_level:
                return uses
        return default

    return compute


def _proficiency(_: Trait, context: _CounterContext) -> int:
    return context.proficiency_bonus


def _fixed(uses: int) -> Callable[[Trait, _CounterContext], int]:
    return lambda _trait, _context: uses


def _large_form(_: Trait, context: _CounterContext) -> int | None:
    return context.proficiency_bonus if context.level >= 5 else None


COUNTER_RULES: tuple[CounterRule, ...] = (
    CounterRule("Rage", r"rage", _rages_per_day, notes_phrase="rages per day"),
    CounterRule(
        "Bardic Inspiration",
        r"bardic inspiration",
        lambda _trait, context: max(1, context.cha_modifier),
    ),
    CounterRule(
        "Channel Divinity",
        r"channel divinity",
        _by_level((18, 3), (6, 2), default=1),
        source=TraitSource.CLASS,
    ),
    CounterRule("Wild Shape", r"wild shape", _fixed(2), notes_phrase="2 uses"),
    CounterRule(
        "Ki Points",
        r"\bki\b",
        lambda _trait, context: context.level,
        source=TraitSource.CLASS,
    ),
    CounterRule("Lay on Hands HP Pool", r"lay on hands", lambda _trait, context: 5 * context.level),
    CounterRule("Action Surge", r"action surge", _by_level((17, 2), default=1)),
    CounterRule("Second Wind", r"second wind", _fixed(1)),
    CounterRule("Indomitable", r"indomitable", _by_level((17, 3), (13, 2), default=1)),
    CounterRule("Breath Weapon", r"breath weapon", _proficiency, source=TraitSource.SPECIES),
    CounterRule("Sorcery Points", r"font of magic", lambda _trait, context: context.level),
    CounterRule("Innate Sorcery", r"innate sorcery", _proficiency),
    CounterRule("Little Giant", r"little giant", _proficiency, source=TraitSource.SPECIES),
    CounterRule("Relentless Endurance", r"relentless endurance", _fixed(1), source=TraitSource.SPECIES),
    CounterRule("Adrenaline Rush", r"adrenaline rush", _proficiency, source=TraitSource.SPECIES),
    CounterRule("Healing Hands", r"healing hands", _proficiency, source=TraitSource.SPECIES),
    CounterRule("Cloud's Jaunt", r"cloud's jaunt", _proficiency, source=TraitSource.SPECIES),
    CounterRule("Fire's Burn", r"fire's burn", _proficiency, source=TraitSource.SPECIES),
    CounterRule("Frost's Chill", r"frost's chill", _proficiency, source=TraitSource.SPECIES),
    CounterRule("Hill's Tumble", r"hill's tumble", _proficiency, source=TraitSource.SPECIES),
    CounterRule("Stone's Endurance", r"stone's endurance", _proficiency, source=TraitSource.SPECIES),
    CounterRule("Storm's Thunder", r"storm's thunder", _proficiency, source=TraitSource.SPECIES),
    CounterRule("Large Form", r"large form", _large_form, source=TraitSource.SPECIES),
)
"""Trait-to-counter rules, applied to every trait in order."""


def counters_from_traits(
    traits: Iterable[Trait],
    level: int,
    abilities: AbilityScoreSet,
) -> list[ResourceCounter]:
    """Build the auto-generated counters for a set of traits.

    Args:
        traits: Character traits.
        level: Character level (1-20).
        abilities: Ability scores (CHA drives Bardic Inspiration).

    Returns:
        New full counters, flagged ``auto_generated``, in trait order.
    """
    context = _CounterContext(
        level=level,
        proficiency_bonus=get_proficiency_bonus(level),
        cha_modifier=abilities.get_modifier(Ability.CHA),
    )
    counters: list[ResourceCounter] = []
    for trait in traits:
        for rule in COUNTER_RULES:
            if not rule.applies_to(trait):
                continue
            maximum = rule.maximum(trait, context)
            if maximum is None:
                continue
            counters.append(
                ResourceCounter(name=rule.counter_name, maximum=maximum, auto_generated=True)
            )
    return counters


def refresh_counters(
    existing: Sequence[ResourceCounter],
    traits: Iterable[Trait],
    level: int,
    abilities: AbilityScoreSet,
) -> list[ResourceCounter]:
    """Replace auto-generated counters, keeping the manual ones.

    Manual counters keep their position and state; freshly generated
    counters follow them.
    """
    manual = [counter for counter in existing if not counter.auto_generated]
    generated = counters_from_traits(traits, level, abilities)
    logger.debug(
        "Counters refreshed",
        manual=len(manual),
        generated=len(generated),
        replaced=len(existing) - len(manual),
    )
    return manual + generated


__all__ = [
    "unarmored_defense_ability",
    "speed_bonus",
    "speed_for_traits",
    "CounterRule",
    "COUNTER_RULES",
    "counters_from_traits",
    "refresh_counters",
]
