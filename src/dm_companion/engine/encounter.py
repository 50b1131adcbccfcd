"""XP-budget encounter generation.

The builder turns party parameters into a monster roster in five steps:

    1. Per-character XP budget from the 5-tier table, times party size.
    2. Challenge rating window from the party level and difficulty.
    3. Catalog monsters inside the window (in catalog order).
    4. Greedy selection toward the budget.
    5. Result with totals and a static win chance.

Selection is deterministic: sorting is stable and there is no randomness,
so identical requests against an unchanged catalog give identical results.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from dm_companion.core.constants import (
    AUTO_MAX_MONSTERS,
    DIMINISHING_RETURNS_CUTOFF,
    EXPLICIT_COUNT_TOLERANCE,
    GREEDY_FILL_TOLERANCE,
    MAX_SELECTION_ATTEMPTS,
    SINGLE_MONSTER_TOLERANCE,
    SMALL_PARTY_SIZE,
)
from dm_companion.core.logging import get_logger
from dm_companion.models.encounter import (
    EncounterEntry,
    EncounterOutcome,
    EncounterRequest,
    EncounterResult,
    NoEligibleMonsters,
)
from dm_companion.models.enums import Difficulty
from dm_companion.models.monster import MonsterRecord
from dm_companion.rules.tables import win_chance, xp_budget_per_character


logger = get_logger(__name__)


# =============================================================================
# Budget & CR Window
# =============================================================================


def xp_budget(level: int, difficulty: Difficulty, party_size: int) -> int:
    """Total XP budget for a party.

    Args:
        level: Party level (1-20).
        difficulty: Target difficulty.
        party_size: Number of characters.

    Returns:
        Per-character budget multiplied by party size.

    Raises:
        InvalidRangeError: If the level is outside 1-20.
    """
    return xp_budget_per_character(level, difficulty) * party_size


def challenge_rating_range(level: int, difficulty: Difficulty) -> tuple[int, int]:
    """Inclusive CR window for a party level and difficulty.

    Example:
        >>> challenge_rating_range(5, Difficulty.HARD)
        (4, 6)
    """
    match difficulty:
        case Difficulty.EASY:
            return max(0, level - 3), max(1, level - 1)
        case Difficulty.MEDIUM:
            return max(0, level - 2), level
        case Difficulty.HARD:
            return max(0, level - 1), level + 1
        case Difficulty.VERY_HARD:
            return level, level + 2
        case _:
            return level, level + 3


# =============================================================================
# Roster Accumulation
# =============================================================================


class _Roster:
    """Ordered name-keyed accumulator; repeats increment the count."""

    def __init__(self) -> None:
        self._monsters: dict[str, MonsterRecord] = {}
        self._counts: dict[str, int] = {}

    def add(self, monster: MonsterRecord) -> None:
        if monster.name in self._counts:
            self._counts[monster.name] += 1
        else:
            self._monsters[monster.name] = monster
            self._counts[monster.name] = 1

    def __len__(self) -> int:
        return len(self._counts)

    def entries(self) -> tuple[EncounterEntry, ...]:
        return tuple(
            EncounterEntry(monster=self._monsters[name], count=count)
            for name, count in self._counts.items()
        )


def _xp(monster: MonsterRecord) -> int:
    # Only monsters with a table entry reach selection
    return monster.xp or 0


# =============================================================================
# Selection Policies
# =============================================================================


def select_for_count(
    pool: Sequence[MonsterRecord],
    budget: int,
    count: int,
) -> tuple[EncounterEntry, ...]:
    """Pick ``count`` monsters whose XP is close to an even budget split.

    Candidates are visited once, closest to ``budget / count`` first; a
    candidate is accepted when its XP is within 1.5x the average budget
    still available per remaining slot.
    """
    target = budget / count
    ordered = sorted(pool, key=lambda monster: abs(_xp(monster) - target))

    roster = _Roster()
    remaining_count = count
    remaining_budget = budget
    for monster in ordered:
        if remaining_count == 0:
            break
        if _xp(monster) <= remaining_budget / remaining_count * EXPLICIT_COUNT_TOLERANCE:
            roster.add(monster)
            remaining_budget -= _xp(monster)
            remaining_count -= 1
    return roster.entries()


def select_single(pool: Sequence[MonsterRecord], budget: int) -> MonsterRecord | None:
    """The monster closest to the whole budget, if within 50% of it."""
    if not pool:
        return None
    best = min(pool, key=lambda monster: abs(_xp(monster) - budget))
    if abs(_xp(best) - budget) <= budget * SINGLE_MONSTER_TOLERANCE:
        return best
    return None


def select_greedy(
    pool: Sequence[MonsterRecord],
    budget: int,
    max_monsters: int,
) -> tuple[EncounterEntry, ...]:
    """Fill the budget starting from the strongest monster that fits.

    Each step takes the highest-XP monster within 1.3x the remaining
    budget. Stops when nothing fits, when fewer than 15% of the budget
    remains, when ``max_monsters`` distinct entries exist, or after 100
    steps.
    """
    ordered = sorted(pool, key=_xp, reverse=True)

    roster = _Roster()
    remaining = budget
    attempts = 0
    while remaining > 0 and len(roster) < max_monsters and attempts < MAX_SELECTION_ATTEMPTS:
        attempts += 1
        choice = next(
            (monster for monster in ordered if _xp(monster) <= remaining * GREEDY_FILL_TOLERANCE),
            None,
        )
        if choice is None:
            break
        roster.add(choice)
        remaining -= _xp(choice)
        if remaining < budget * DIMINISHING_RETURNS_CUTOFF:
            break
    return roster.entries()


# =============================================================================
# Builder
# =============================================================================


class EncounterBuilder:
    """Generates encounters from a monster catalog.

    The catalog is any iterable of MonsterRecord; its iteration order
    breaks ties between equally good candidates.

    Example:
        >>> builder = EncounterBuilder(catalog)
        >>> outcome = builder.generate(EncounterRequest(party_level=5, party_size=4))
    """

    def __init__(self, catalog: Iterable[MonsterRecord]) -> None:
        self._catalog = tuple(catalog)

    def eligible_monsters(self, min_cr: float, max_cr: float) -> list[MonsterRecord]:
        """Catalog monsters inside the CR window that have an XP value."""
        eligible = []
        for monster in self._catalog:
            if not min_cr <= monster.challenge_rating <= max_cr:
                continue
            if monster.xp is None:
                logger.warning(
                    "Skipping monster without XP value",
                    monster=monster.name,
                    challenge_rating=monster.challenge_rating,
                )
                continue
            eligible.append(monster)
        return eligible

    def generate(self, request: EncounterRequest) -> EncounterOutcome:
        """Generate an encounter for a party.

        Args:
            request: Party level, size, difficulty and monster count.

        Returns:
            An EncounterResult (empty when nothing fit the budget), or
            NoEligibleMonsters when the CR window matched nothing.
        """
        budget = xp_budget(request.party_level, request.difficulty, request.party_size)
        min_cr, max_cr = challenge_rating_range(request.party_level, request.difficulty)

        pool = self.eligible_monsters(min_cr, max_cr)
        if not pool:
            logger.info(
                "No eligible monsters",
                party_level=request.party_level,
                difficulty=str(request.difficulty),
                min_cr=min_cr,
                max_cr=max_cr,
            )
            return NoEligibleMonsters(request=request, min_cr=min_cr, max_cr=max_cr)

        entries = self._select(pool, budget, request)

        result = EncounterResult(
            request=request,
            entries=entries,
            xp_budget=budget,
            min_cr=min_cr,
            max_cr=max_cr,
            win_chance=win_chance(request.difficulty),
        )
        logger.info(
            "Encounter generated",
            party_level=request.party_level,
            party_size=request.party_size,
            difficulty=str(request.difficulty),
            xp_budget=budget,
            total_xp=result.total_xp,
            total_monsters=result.total_monsters,
        )
        return result

    def _select(
        self,
        pool: Sequence[MonsterRecord],
        budget: int,
        request: EncounterRequest,
    ) -> tuple[EncounterEntry, ...]:
        if request.is_auto:
            max_monsters = min(request.party_size + 1, AUTO_MAX_MONSTERS)
        else:
            count = int(request.monster_count)
            entries = select_for_count(pool, budget, count)
            if entries:
                return entries
            logger.debug("Requested monster count did not fit, using auto selection", count=count)
            max_monsters = count

        if request.is_auto and request.party_size <= SMALL_PARTY_SIZE:
            single = select_single(pool, budget)
            if single is not None:
                return (EncounterEntry(monster=single, count=1),)

        return select_greedy(pool, budget, max_monsters)


__all__ = [
    "xp_budget",
    "challenge_rating_range",
    "select_for_count",
    "select_single",
    "select_greedy",
    "EncounterBuilder",
]
