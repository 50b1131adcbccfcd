"""Tests for dice rolling mechanics."""

from __future__ import annotations

import pytest

from dm_companion.core.exceptions import DiceRollError
from dm_companion.engine.dice import (
    ConcentrationCheck,
    DiceExpression,
    DicePoolResult,
    DiceRoller,
    DieGroup,
    RollType,
    roll,
)
from dm_companion.models.account import DiceConfiguration


class TestDiceRoller:
    """Tests for the DiceRoller class."""

    def test_simple_d20_roll(self, dice_roller: DiceRoller) -> None:
        """Test simple d20 roll."""
        result = dice_roller.roll("1d20")

        assert isinstance(result, DiceExpression)
        assert 1 <= result.total <= 20
        assert result.dice == [result.total]
        assert result.natural == result.total
        assert result.roll_type == RollType.NORMAL

    def test_roll_with_modifier(self, dice_roller: DiceRoller) -> None:
        """Test roll with positive modifier."""
        result = dice_roller.roll("1d20+5")

        assert result.modifier == 5
        assert 6 <= result.total <= 25

    def test_roll_with_negative_modifier(self, dice_roller: DiceRoller) -> None:
        """Test roll with negative modifier."""
        result = dice_roller.roll("1d20-3")

        assert result.modifier == -3

    def test_multiple_dice(self, dice_roller: DiceRoller) -> None:
        """Test rolling multiple dice."""
        result = dice_roller.roll("3d6")

        assert 3 <= result.total <= 18
        assert len(result.dice) == 3
        assert result.natural is None

    def test_complex_expression(self, dice_roller: DiceRoller) -> None:
        """Test complex dice expression."""
        result = dice_roller.roll("2d6+1d4+3")

        assert 6 <= result.total <= 19
        assert len(result.dice) == 3
        assert result.modifier == 3

    def test_advantage_keeps_higher(self, dice_roller: DiceRoller) -> None:
        """Test advantage rolls two d20s and keeps the higher."""
        for _ in range(20):
            result = dice_roller.roll("1d20+5", roll_type=RollType.ADVANTAGE)

            assert result.roll_type == RollType.ADVANTAGE
            assert result.expression == "1d20+5"
            assert len(result.dice) == 1
            assert len(result.dropped) == 1
            assert result.dice[0] >= result.dropped[0]
            assert result.total == result.dice[0] + 5
            assert result.natural == result.dice[0]

    def test_disadvantage_keeps_lower(self, dice_roller: DiceRoller) -> None:
        """Test disadvantage rolls two d20s and keeps the lower."""
        for _ in range(20):
            result = dice_roller.roll("d20", roll_type=RollType.DISADVANTAGE)

            assert len(result.dropped) == 1
            assert result.dice[0] <= result.dropped[0]
            assert result.total == result.dice[0]

    def test_advantage_only_rewrites_single_d20(self, dice_roller: DiceRoller) -> None:
        """Test multi-d20 expressions are rolled as written."""
        result = dice_roller.roll("2d20+1", roll_type=RollType.ADVANTAGE)

        assert len(result.dice) == 2
        assert result.dropped == []

    def test_advantage_without_d20(self, dice_roller: DiceRoller) -> None:
        """Test advantage has no effect on other dice."""
        result = dice_roller.roll("1d8+2", roll_type=RollType.ADVANTAGE)

        assert len(result.dice) == 1
        assert result.dropped == []
        assert 3 <= result.total <= 10

    def test_critical_and_fumble_follow_natural(self, dice_roller: DiceRoller) -> None:
        """Test critical and fumble flags track the natural d20."""
        for _ in range(200):
            result = dice_roller.roll("1d20+2")

            assert result.is_critical == (result.natural == 20)
            assert result.is_fumble == (result.natural == 1)

    def test_seed_is_reproducible(self) -> None:
        """Test the same seed gives the same rolls."""
        first = [DiceRoller(seed=7).roll("4d6").dice for _ in range(3)]
        second = [DiceRoller(seed=7).roll("4d6").dice for _ in range(3)]

        assert first == second

    @pytest.mark.parametrize("expression", ["invalid", "1d", "2d6+"])
    def test_invalid_expression_raises_error(self, dice_roller: DiceRoller, expression: str) -> None:
        """Test that invalid expressions raise DiceRollError."""
        with pytest.raises(DiceRollError) as exc_info:
            dice_roller.roll(expression)

        assert exc_info.value.details["expression"] == expression

    @pytest.mark.parametrize("expression", ["", "   "])
    def test_empty_expression_raises_error(self, dice_roller: DiceRoller, expression: str) -> None:
        """Test that empty expressions raise DiceRollError."""
        with pytest.raises(DiceRollError, match="Empty dice expression"):
            dice_roller.roll(expression)


class TestDiceRollerSpecializedMethods:
    """Tests for specialized dice rolling methods."""

    def test_roll_ability_check(self, dice_roller: DiceRoller) -> None:
        """Test ability check rolling."""
        result = dice_roller.roll_ability_check(modifier=5)

        assert 6 <= result.total <= 25
        assert result.expression == "1d20+5"

    def test_roll_ability_check_negative_modifier(self, dice_roller: DiceRoller) -> None:
        """Test ability check with negative modifier."""
        result = dice_roller.roll_ability_check(modifier=-2)

        assert result.expression == "1d20-2"
        assert -1 <= result.total <= 18

    def test_roll_saving_throw_with_advantage(self, dice_roller: DiceRoller) -> None:
        """Test saving throws accept advantage."""
        result = dice_roller.roll_saving_throw(modifier=3, roll_type=RollType.ADVANTAGE)

        assert len(result.dropped) == 1
        assert result.total == result.dice[0] + 3


class TestDicePool:
    """Tests for dice tray pools."""

    def test_groups_in_tray_order(self, dice_roller: DiceRoller) -> None:
        """Test one group per die size, smallest first."""
        pool = dice_roller.roll_pool({20: 1, 6: 2})

        assert isinstance(pool, DicePoolResult)
        assert [group.label for group in pool.groups] == ["2d6", "1d20"]
        assert all(1 <= face <= 6 for face in pool.groups[0].rolls)
        assert pool.grand_total == sum(group.total for group in pool.groups)

    def test_percentile_label(self, dice_roller: DiceRoller) -> None:
        """Test d100 is labelled d%."""
        pool = dice_roller.roll_pool({100: 1})

        assert pool.groups[0].label == "1d%"
        assert 1 <= pool.grand_total <= 100

    def test_zero_counts_skipped(self, dice_roller: DiceRoller) -> None:
        """Test sizes with zero dice produce no group."""
        pool = dice_roller.roll_pool({4: 0, 8: 3})

        assert [group.sides for group in pool.groups] == [8]
        assert len(pool.groups[0].rolls) == 3

    @pytest.mark.parametrize("dice", [{}, {6: 0}, {7: 1}, {6: -1}])
    def test_invalid_pools(self, dice_roller: DiceRoller, dice: dict[int, int]) -> None:
        """Test empty pools, unknown sizes and negative counts raise."""
        with pytest.raises(DiceRollError):
            dice_roller.roll_pool(dice)

    def test_roll_configuration(self, dice_roller: DiceRoller) -> None:
        """Test a saved configuration rolls its pool."""
        config = DiceConfiguration(name="Sneak Attack", dice={6: 3})

        pool = dice_roller.roll_configuration(config)

        assert [group.label for group in pool.groups] == ["3d6"]
        assert 3 <= pool.grand_total <= 18

    def test_die_group_total(self) -> None:
        """Test group totals and labels."""
        group = DieGroup(sides=8, rolls=[3, 5])

        assert group.total == 8
        assert group.label == "2d8"


class TestConcentrationSave:
    """Tests for concentration saving throws."""

    def test_low_damage_uses_dc_ten(self, dice_roller: DiceRoller) -> None:
        """Test the DC floor of 10."""
        check = dice_roller.roll_concentration_save(damage=8, save_bonus=2)

        assert isinstance(check, ConcentrationCheck)
        assert check.dc == 10
        assert len(check.rolls) == 1
        assert check.total == check.roll + 2
        assert check.maintained == (check.total >= 10)

    def test_high_damage_uses_half(self, dice_roller: DiceRoller) -> None:
        """Test the DC is half of large damage."""
        check = dice_roller.roll_concentration_save(damage=40, save_bonus=5)

        assert check.dc == 20

    def test_advantage_uses_higher_roll(self, dice_roller: DiceRoller) -> None:
        """Test advantage rolls twice and uses the higher die."""
        for _ in range(10):
            check = dice_roller.roll_concentration_save(
                damage=12,
                save_bonus=0,
                roll_type=RollType.ADVANTAGE,
            )

            assert len(check.rolls) == 2
            assert check.roll == max(check.rolls)

    def test_disadvantage_uses_lower_roll(self, dice_roller: DiceRoller) -> None:
        """Test disadvantage rolls twice and uses the lower die."""
        for _ in range(10):
            check = dice_roller.roll_concentration_save(
                damage=12,
                save_bonus=0,
                roll_type=RollType.DISADVANTAGE,
            )

            assert check.roll == min(check.rolls)

    def test_maintained_at_exact_dc(self) -> None:
        """Test meeting the DC exactly keeps concentration."""
        check = ConcentrationCheck(
            damage=10,
            dc=10,
            rolls=[7],
            roll=7,
            save_bonus=3,
            total=10,
            roll_type=RollType.NORMAL,
        )

        assert check.maintained


class TestConvenienceFunction:
    """Tests for the module-level roll function."""

    def test_roll(self) -> None:
        """Test module-level roll."""
        result = roll("2d8+1")

        assert 3 <= result.total <= 17
