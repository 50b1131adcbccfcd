"""Rules engine: derived stats, trait effects, encounters and dice.

Exports:
    Stats:
        compute_derived_stats: Every derived value for a character.
        create_character_snapshot: Snapshot with class defaults.
    Encounters:
        EncounterBuilder: XP-budget encounter generation.
        CustomEncounter: Hand-built encounter roster.
    Dice:
        DiceRoller: d20-backed dice rolling.
"""

from __future__ import annotations

from dm_companion.engine.custom_encounter import CustomEncounter, folders, in_folder
from dm_companion.engine.dice import (
    ConcentrationCheck,
    DiceExpression,
    DicePoolResult,
    DiceRoller,
    DieGroup,
    RollType,
    roll,
)
from dm_companion.engine.encounter import (
    EncounterBuilder,
    challenge_rating_range,
    xp_budget,
)
from dm_companion.engine.stats import (
    ability_modifier,
    compute_derived_stats,
    concentration_dc,
    create_character_snapshot,
    finesse_attack_bonus,
    hit_points,
    initiative,
    melee_attack_bonus,
    proficiency_bonus,
    ranged_attack_bonus,
    saving_throw_bonus,
    skill_bonus,
    spell_attack_bonus,
    spell_save_dc,
    unarmored_defense_ac,
)
from dm_companion.engine.traits import (
    counters_from_traits,
    refresh_counters,
    speed_bonus,
    speed_for_traits,
    unarmored_defense_ability,
)


__all__ = [
    # Stats
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
    # Traits
    "unarmored_defense_ability",
    "speed_bonus",
    "speed_for_traits",
    "counters_from_traits",
    "refresh_counters",
    # Encounters
    "EncounterBuilder",
    "xp_budget",
    "challenge_rating_range",
    "CustomEncounter",
    "folders",
    "in_folder",
    # Dice
    "RollType",
    "DiceExpression",
    "DieGroup",
    "DicePoolResult",
    "ConcentrationCheck",
    "DiceRoller",
    "roll",
]
