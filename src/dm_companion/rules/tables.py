"""Embedded D&D 5E rule tables.

This module holds the challenge-rating and XP tables used by encounter
generation. The values are public game-rule constants and must match the
published tables exactly.

Tables:
    CR_TO_XP: Monster XP award per challenge rating (0-24 and 30).
    XP_BUDGET: Per-character XP budget by level and 5-tier difficulty.
    LEGACY_DMG_XP_THRESHOLDS: The 4-tier DMG thresholds (reference only).
    WIN_CHANCE: Coarse win-chance percentage per difficulty.
"""

from __future__ import annotations

from typing import Final

from dm_companion.core.constants import MAX_CHARACTER_LEVEL, MIN_CHARACTER_LEVEL
from dm_companion.core.exceptions import InvalidRangeError


# =============================================================================
# Challenge Rating -> XP
# =============================================================================

CR_TO_XP: Final[dict[float, int]] = {
    0: 10,
    0.125: 25,
    0.25: 50,
    0.5: 100,
    1: 200,
    2: 450,
    3: 700,
    4: 1100,
    5: 1800,
    6: 2300,
    7: 2900,
    8: 3900,
    9: 5000,
    10: 5900,
    11: 7200,
    12: 8400,
    13: 10000,
    14: 11500,
    15: 13000,
    16: 15000,
    17: 18000,
    18: 20000,
    19: 22000,
    20: 25000,
    21: 33000,
    22: 41000,
    23: 50000,
    24: 62000,
    30: 155000,
}


def xp_for_cr(challenge_rating: float) -> int | None:
    """Look up the XP award for a challenge rating.

    Args:
        challenge_rating: Numeric CR (e.g. 0.25 for "1/4").

    Returns:
        The XP value, or None when the CR has no table entry (25-29).
    """
    return CR_TO_XP.get(challenge_rating)


# =============================================================================
# XP Budget (5-tier, drives generation)
# =============================================================================

# Keys are Difficulty values; Difficulty members index these tables directly
_TIERS = ("easy", "medium", "hard", "veryhard", "deadly")

_BUDGET_ROWS: Final[dict[int, tuple[int, int, int, int, int]]] = {
    1: (50, 75, 100, 125, 150),
    2: (100, 150, 200, 250, 300),
    3: (150, 225, 400, 500, 600),
    4: (250, 375, 500, 625, 750),
    5: (500, 750, 1100, 1375, 1650),
    6: (600, 1000, 1400, 1750, 2100),
    7: (750, 1300, 1700, 2125, 2550),
    8: (1000, 1700, 2100, 2625, 3150),
    9: (1300, 2000, 2600, 3250, 3900),
    10: (1600, 2300, 3100, 3875, 4650),
    11: (1900, 2900, 4100, 5125, 6150),
    12: (2200, 3700, 4700, 5875, 7050),
    13: (2600, 4200, 5400, 6750, 8100),
    14: (2900, 4900, 6200, 7750, 9300),
    15: (3300, 5400, 7800, 9750, 11700),
    16: (3800, 6100, 9800, 12250, 14700),
    17: (4500, 7200, 11700, 14625, 17550),
    18: (5000, 8700, 14200, 17750, 21300),
    19: (5500, 10700, 17200, 21500, 25800),
    20: (6400, 13200, 22000, 27500, 33000),
}

XP_BUDGET: Final[dict[int, dict[str, int]]] = {
    level: dict(zip(_TIERS, row, strict=True)) for level, row in _BUDGET_ROWS.items()
}


def _check_level(level: int) -> None:
    if not MIN_CHARACTER_LEVEL <= level <= MAX_CHARACTER_LEVEL:
        raise InvalidRangeError(
            f"Party level must be between {MIN_CHARACTER_LEVEL} and {MAX_CHARACTER_LEVEL}",
            value=level,
            minimum=MIN_CHARACTER_LEVEL,
            maximum=MAX_CHARACTER_LEVEL,
        )


def xp_budget_per_character(level: int, difficulty: str) -> int:
    """Get the per-character XP budget.

    Args:
        level: Party level (1-20).
        difficulty: Encounter difficulty.

    Returns:
        XP budget for one character.

    Raises:
        InvalidRangeError: If the level is outside 1-20.
    """
    _check_level(level)
    return XP_BUDGET[level][difficulty]


# =============================================================================
# Legacy DMG thresholds (4-tier, reference only)
# =============================================================================

_LEGACY_TIERS = ("easy", "medium", "hard", "deadly")

_LEGACY_ROWS: Final[dict[int, tuple[int, int, int, int]]] = {
    1: (25, 50, 75, 100),
    2: (50, 100, 150, 200),
    3: (75, 150, 225, 400),
    4: (125, 250, 375, 500),
    5: (250, 500, 750, 1100),
    6: (300, 600, 900, 1400),
    7: (350, 750, 1100, 1700),
    8: (450, 900, 1400, 2100),
    9: (550, 1100, 1600, 2400),
    10: (600, 1200, 1900, 2800),
    11: (800, 1600, 2400, 3600),
    12: (1000, 2000, 3000, 4500),
    13: (1100, 2200, 3400, 5100),
    14: (1250, 2500, 3800, 5700),
    15: (1400, 2800, 4300, 6400),
    16: (1600, 3200, 4800, 7200),
    17: (2000, 3900, 5900, 8800),
    18: (2100, 4200, 6300, 9500),
    19: (2400, 4900, 7300, 10900),
    20: (2800, 5700, 8500, 12700),
}

LEGACY_DMG_XP_THRESHOLDS: Final[dict[int, dict[str, int]]] = {
    level: dict(zip(_LEGACY_TIERS, row, strict=True)) for level, row in _LEGACY_ROWS.items()
}


def legacy_xp_threshold(level: int, difficulty: str) -> int:
    """Get the per-character threshold from the 4-tier DMG table.

    This table has no Very Hard tier and is not used by encounter generation.

    Raises:
        InvalidRangeError: If the level is outside 1-20 or the difficulty
            is Very Hard.
    """
    _check_level(level)
    row = LEGACY_DMG_XP_THRESHOLDS[level]
    if difficulty not in row:
        raise InvalidRangeError(
            f"The DMG threshold table has no {difficulty!s} tier",
            value=str(difficulty),
        )
    return row[difficulty]


# =============================================================================
# Win Chance
# =============================================================================

WIN_CHANCE: Final[dict[str, int]] = {
    "easy": 95,
    "medium": 75,
    "hard": 50,
    "veryhard": 25,
    "deadly": 5,
}


def win_chance(difficulty: str) -> int:
    """Static win-chance percentage for a difficulty (not a simulation)."""
    return WIN_CHANCE[difficulty]


__all__ = [
    "CR_TO_XP",
    "XP_BUDGET",
    "LEGACY_DMG_XP_THRESHOLDS",
    "WIN_CHANCE",
    "xp_for_cr",
    "xp_budget_per_character",
    "legacy_xp_threshold",
    "win_chance",
]
