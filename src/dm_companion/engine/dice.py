"""Dice rolling for the dice tray and concentration checks.

This module wraps the d20 library with advantage/disadvantage handling,
mixed dice pools for the dice tray (d4 through d%), and concentration
saving throws.
"""

from __future__ import annotations

import random
import re
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

import d20

from dm_companion.core.constants import DICE_TRAY_SIDES
from dm_companion.core.exceptions import DiceRollError
from dm_companion.core.logging import get_logger
from dm_companion.engine.stats import concentration_dc
from dm_companion.models.account import DiceConfiguration


logger = get_logger(__name__)

_SINGLE_D20 = re.compile(r"(?<![\dd])1?d20(?![\dkKpPeErRmMiI])")


class RollType(StrEnum):
    """Types of dice rolls."""

    NORMAL = "normal"
    ADVANTAGE = "advantage"
    DISADVANTAGE = "disadvantage"


@dataclass(frozen=True)
class DiceExpression:
    """A rolled dice expression.

    Attributes:
        expression: The dice expression as given.
        total: The total result of the roll.
        dice: Kept dice results.
        dropped: Dice discarded by advantage/disadvantage or keep rules.
        modifier: Static modifier applied.
        natural: Kept face of the first d20, if any.
        roll_type: The type of roll performed.
    """

    expression: str
    total: int
    dice: list[int]
    modifier: int
    roll_type: RollType
    dropped: list[int] = field(default_factory=list)
    natural: int | None = None

    @property
    def is_critical(self) -> bool:
        """Natural 20 on the d20."""
        return self.natural == 20

    @property
    def is_fumble(self) -> bool:
        """Natural 1 on the d20."""
        return self.natural == 1


@dataclass(frozen=True)
class DieGroup:
    """Rolls of one die size within a pool."""

    sides: int
    rolls: list[int]

    @property
    def label(self) -> str:
        """Notation such as '3d6' or '1d%'."""
        return f"{len(self.rolls)}d{'%' if self.sides == 100 else self.sides}"

    @property
    def total(self) -> int:
        return sum(self.rolls)


@dataclass(frozen=True)
class DicePoolResult:
    """A dice tray roll: one group per die size, smallest first."""

    groups: list[DieGroup]

    @property
    def grand_total(self) -> int:
        return sum(group.total for group in self.groups)


@dataclass(frozen=True)
class ConcentrationCheck:
    """Outcome of a concentration saving throw.

    Attributes:
        damage: Damage that triggered the check.
        dc: Save DC (10 or half the damage).
        rolls: Every d20 rolled (two with advantage or disadvantage).
        roll: The d20 result used.
        save_bonus: CON saving throw bonus added to the roll.
        total: roll + save_bonus.
        roll_type: Normal, advantage or disadvantage.
    """

    damage: int
    dc: int
    rolls: list[int]
    roll: int
    save_bonus: int
    total: int
    roll_type: RollType

    @property
    def maintained(self) -> bool:
        """Concentration holds when the total meets the DC."""
        return self.total >= self.dc


class DiceRoller:
    """Dice rolling with D&D 5E mechanics.

    Example:
        >>> roller = DiceRoller()
        >>> result = roller.roll("1d20+5")
        >>> print(f"Total: {result.total}")
    """

    def __init__(self, *, seed: int | None = None) -> None:
        """Initialize the dice roller.

        Args:
            seed: Optional random seed for reproducible rolls.
        """
        self._seed = seed
        if seed is not None:
            random.seed(seed)
        logger.debug("DiceRoller initialized", seed=seed)

    def roll(
        self,
        expression: str,
        *,
        roll_type: RollType = RollType.NORMAL,
    ) -> DiceExpression:
        """Roll dice according to the given expression.

        With advantage or disadvantage, a single d20 in the expression is
        rolled twice keeping the higher or lower face.

        Args:
            expression: Dice expression (e.g., '1d20+5', '2d6+3').
            roll_type: Type of roll (normal, advantage, disadvantage).

        Returns:
            DiceExpression containing roll results.

        Raises:
            DiceRollError: If the expression is invalid.
        """
        if not expression or not expression.strip():
            raise DiceRollError("Empty dice expression", expression=expression)

        modified_expression = expression
        if roll_type == RollType.ADVANTAGE:
            modified_expression = _SINGLE_D20.sub("2d20kh1", expression, count=1)
        elif roll_type == RollType.DISADVANTAGE:
            modified_expression = _SINGLE_D20.sub("2d20kl1", expression, count=1)

        logger.debug("Rolling dice", expression=modified_expression, roll_type=str(roll_type))

        try:
            result = d20.roll(modified_expression)
        except d20.RollError as exc:
            raise DiceRollError(f"Invalid dice expression: {exc}", expression=expression) from exc

        kept, dropped, natural = self._extract_dice_values(result.expr)
        return DiceExpression(
            expression=expression,
            total=result.total,
            dice=kept,
            modifier=result.total - sum(kept),
            roll_type=roll_type,
            dropped=dropped,
            natural=natural,
        )

    def _extract_dice_values(self, expr: Any) -> tuple[list[int], list[int], int | None]:
        """Collect kept and dropped faces and the first kept d20 face.

        Args:
            expr: The d20 expression tree.

        Returns:
            (kept values, dropped values, natural d20 or None)
        """
        kept: list[int] = []
        dropped: list[int] = []
        natural: int | None = None

        def traverse(node: Any) -> None:
            nonlocal natural
            if isinstance(node, d20.Dice):
                for die in node.values:
                    if die.kept:
                        kept.append(die.number)
                        if node.size == 20 and natural is None:
                            natural = die.number
                    else:
                        dropped.append(die.number)
            elif hasattr(node, "children"):
                for child in node.children:
                    traverse(child)

        traverse(expr)
        return kept, dropped, natural

    def roll_ability_check(
        self,
        modifier: int,
        *,
        roll_type: RollType = RollType.NORMAL,
    ) -> DiceExpression:
        """Roll a d20 ability check with a modifier."""
        sign = "+" if modifier >= 0 else ""
        return self.roll(f"1d20{sign}{modifier}", roll_type=roll_type)

    def roll_saving_throw(
        self,
        modifier: int,
        *,
        roll_type: RollType = RollType.NORMAL,
    ) -> DiceExpression:
        """Roll a saving throw (same mechanics as an ability check)."""
        return self.roll_ability_check(modifier, roll_type=roll_type)

    def roll_pool(self, dice: dict[int, int]) -> DicePoolResult:
        """Roll a dice tray pool.

        Args:
            dice: Mapping of die size to count, e.g. ``{6: 2, 20: 1}``.
                Sizes must be 4, 6, 8, 10, 12, 20 or 100.

        Returns:
            Rolls grouped by die size, smallest first.

        Raises:
            DiceRollError: If a size is not on the tray, a count is
                negative, or no dice are set.
        """
        for sides, count in dice.items():
            if sides not in DICE_TRAY_SIDES:
                raise DiceRollError(f"Unsupported die size: d{sides}", details={"sides": sides})
            if count < 0:
                raise DiceRollError(f"Negative die count for d{sides}", details={"count": count})

        groups: list[DieGroup] = []
        for sides in DICE_TRAY_SIDES:
            count = dice.get(sides, 0)
            if count == 0:
                continue
            result = self.roll(f"{count}d{sides}")
            groups.append(DieGroup(sides=sides, rolls=result.dice))

        if not groups:
            raise DiceRollError("Set at least one die before rolling")

        pool = DicePoolResult(groups=groups)
        logger.info(
            "Dice pool rolled",
            dice=" + ".join(group.label for group in groups),
            grand_total=pool.grand_total,
        )
        return pool

    def roll_configuration(self, config: DiceConfiguration) -> DicePoolResult:
        """Roll a saved dice tray configuration."""
        return self.roll_pool(config.dice)

    def roll_concentration_save(
        self,
        damage: int,
        save_bonus: int,
        *,
        roll_type: RollType = RollType.NORMAL,
    ) -> ConcentrationCheck:
        """Roll a CON save to maintain concentration after taking damage.

        Args:
            damage: Damage taken (DC is 10 or half of it).
            save_bonus: Constitution saving throw bonus.
            roll_type: Advantage (e.g. War Caster) or disadvantage.

        Returns:
            ConcentrationCheck with the DC, dice and outcome.
        """
        dc = concentration_dc(damage)
        result = self.roll("1d20", roll_type=roll_type)
        natural = result.natural if result.natural is not None else result.total
        check = ConcentrationCheck(
            damage=damage,
            dc=dc,
            rolls=result.dice + result.dropped,
            roll=natural,
            save_bonus=save_bonus,
            total=natural + save_bonus,
            roll_type=roll_type,
        )
        logger.info(
            "Concentration save rolled",
            dc=dc,
            roll=natural,
            total=check.total,
            maintained=check.maintained,
        )
        return check


# Module-level convenience roller
_default_roller: DiceRoller | None = None


def roll(
    expression: str,
    *,
    roll_type: RollType = RollType.NORMAL,
) -> DiceExpression:
    """Convenience function to roll dice.

    Example:
        >>> result = roll("1d20+5")
        >>> print(result.total)
    """
    global _default_roller  # noqa: PLW0603
    if _default_roller is None:
        _default_roller = DiceRoller()
    return _default_roller.roll(expression, roll_type=roll_type)


__all__ = [
    "RollType",
    "DiceExpression",
    "DieGroup",
    "DicePoolResult",
    "ConcentrationCheck",
    "DiceRoller",
    "roll",
]
