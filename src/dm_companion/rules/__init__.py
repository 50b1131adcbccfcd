"""Embedded rule tables: CR/XP, encounter budgets and class reference data."""

from __future__ import annotations

from dm_companion.rules.tables import (
    CR_TO_XP,
    LEGACY_DMG_XP_THRESHOLDS,
    WIN_CHANCE,
    XP_BUDGET,
    legacy_xp_threshold,
    win_chance,
    xp_budget_per_character,
    xp_for_cr,
)
from dm_companion.rules.classes import (
    CLASS_HIT_DIE,
    CLASS_SAVING_THROWS,
    SPELLCASTING_ABILITY,
    get_hit_die,
    get_proficiency_bonus,
    get_saving_throws,
    get_spellcasting_ability,
    is_spellcaster,
)


__all__ = [
    # XP tables
    "CR_TO_XP",
    "XP_BUDGET",
    "LEGACY_DMG_XP_THRESHOLDS",
    "WIN_CHANCE",
    "xp_for_cr",
    "xp_budget_per_character",
    "legacy_xp_threshold",
    "win_chance",
    # Class data
    "CLASS_HIT_DIE",
    "CLASS_SAVING_THROWS",
    "SPELLCASTING_ABILITY",
    "get_hit_die",
    "get_proficiency_bonus",
    "get_saving_throws",
    "get_spellcasting_ability",
    "is_spellcaster",
]
