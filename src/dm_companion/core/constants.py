"""Application-wide constants for the DM Companion.

This module defines rule bounds and the encounter-selection policy
multipliers. Saved encounters were generated with these exact values;
changing them changes which monsters a given party is offered.
"""

from __future__ import annotations

# =============================================================================
# Ability Scores & Levels
# =============================================================================

MIN_ABILITY_SCORE = 1
"""Minimum ability score."""

MAX_ABILITY_SCORE = 30
"""Maximum ability score (monsters and epic boons)."""

MIN_CHARACTER_LEVEL = 1
"""Minimum character level."""

MAX_CHARACTER_LEVEL = 20
"""Maximum character level."""

DEFAULT_SPEED = 30
"""Default walking speed in feet."""

MIN_CONCENTRATION_DC = 10
"""Concentration save DC floor."""

# =============================================================================
# Encounter Selection Policy
# =============================================================================

EXPLICIT_COUNT_TOLERANCE = 1.5
"""Accept a monster when its XP is at most this multiple of the per-slot budget."""

GREEDY_FILL_TOLERANCE = 1.3
"""Accept a monster when its XP is at most this multiple of the remaining budget."""

SINGLE_MONSTER_TOLERANCE = 0.5
"""A lone boss is used when it is within this fraction of the full budget."""

DIMINISHING_RETURNS_CUTOFF = 0.15
"""Stop filling once the remaining budget drops below this fraction."""

SMALL_PARTY_SIZE = 2
"""Parties at or below this size prefer a single monster in auto mode."""

AUTO_MAX_MONSTERS = 5
"""Upper bound on distinct roster entries in auto mode."""

MAX_SELECTION_ATTEMPTS = 100
"""Iteration bound for the greedy fill."""

CUSTOM_ENCOUNTER_WIN_CHANCE = 50
"""Win chance reported for hand-built encounters."""

# =============================================================================
# Dice Tray
# =============================================================================

DICE_TRAY_SIDES = (4, 6, 8, 10, 12, 20, 100)
"""Die sizes available in the dice tray."""


__all__ = [
    "MIN_ABILITY_SCORE",
    "MAX_ABILITY_SCORE",
    "MIN_CHARACTER_LEVEL",
    "MAX_CHARACTER_LEVEL",
    "DEFAULT_SPEED",
    "MIN_CONCENTRATION_DC",
    "EXPLICIT_COUNT_TOLERANCE",
    "GREEDY_FILL_TOLERANCE",
    "SINGLE_MONSTER_TOLERANCE",
    "DIMINISHING_RETURNS_CUTOFF",
    "SMALL_PARTY_SIZE",
    "AUTO_MAX_MONSTERS",
    "MAX_SELECTION_ATTEMPTS",
    "CUSTOM_ENCOUNTER_WIN_CHANCE",
    "DICE_TRAY_SIDES",
]
