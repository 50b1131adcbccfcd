"""Tests for character models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from dm_companion.models.character import (
    AbilityScoreSet,
    CharacterSnapshot,
    ResourceCounter,
    Trait,
)
from dm_companion.models.enums import Ability, CharacterClass, Difficulty, Skill, TraitSource


class TestAbilityScoreSet:
    """Tests for AbilityScoreSet."""

    def test_defaults_to_ten(self) -> None:
        """Test all scores default to 10."""
        scores = AbilityScoreSet()

        assert all(scores.get_score(ability) == 10 for ability in Ability)

    def test_get_modifier(self, sample_abilities: AbilityScoreSet) -> None:
        """Test modifiers use floor((score - 10) / 2)."""
        assert sample_abilities.get_modifier(Ability.STR) == 3
        assert sample_abilities.get_modifier(Ability.CON) == 2
        assert sample_abilities.get_modifier(Ability.CHA) == -1

    @pytest.mark.parametrize("score", [0, 31])
    def test_score_bounds(self, score: int) -> None:
        """Test scores outside 1-30 are rejected."""
        with pytest.raises(ValidationError):
            AbilityScoreSet(strength=score)

    def test_from_abbreviations(self) -> None:
        """Test building from sheet-style keys."""
        scores = AbilityScoreSet.from_abbreviations({"str": 18, "DEX": 12, "wisdom": 14})

        assert scores.strength == 18
        assert scores.dexterity == 12
        assert scores.wisdom == 14
        assert scores.charisma == 10

    def test_from_abbreviations_unknown_key(self) -> None:
        """Test unknown ability keys raise ValueError."""
        with pytest.raises(ValueError, match="Unknown ability"):
            AbilityScoreSet.from_abbreviations({"luck": 12})

    def test_frozen(self) -> None:
        """Test scores cannot be mutated in place."""
        scores = AbilityScoreSet()

        with pytest.raises(ValidationError):
            scores.strength = 12  # type: ignore[misc]


class TestCharacterSnapshot:
    """Tests for CharacterSnapshot."""

    def test_minimal_snapshot(self) -> None:
        """Test a snapshot needs only a class."""
        snapshot = CharacterSnapshot(class_name="Rogue")

        assert snapshot.class_name is CharacterClass.ROGUE
        assert snapshot.level == 1
        assert snapshot.spellcasting_ability is None
        assert snapshot.traits == ()

    def test_unknown_class_rejected(self) -> None:
        """Test class names must be one of the twelve classes."""
        with pytest.raises(ValidationError):
            CharacterSnapshot(class_name="Artificer")

    @pytest.mark.parametrize("level", [0, 21])
    def test_level_bounds(self, level: int) -> None:
        """Test levels outside 1-20 are rejected."""
        with pytest.raises(ValidationError):
            CharacterSnapshot(class_name="Fighter", level=level)

    def test_spellcasting_ability_restricted(self) -> None:
        """Test only INT, WIS and CHA can drive spellcasting."""
        with pytest.raises(ValidationError, match="Spellcasting ability"):
            CharacterSnapshot(class_name="Fighter", spellcasting_ability=Ability.STR)

    def test_proficiency_checks(self) -> None:
        """Test proficiency lookups."""
        snapshot = CharacterSnapshot(
            class_name="Rogue",
            saving_throw_proficiencies=frozenset({Ability.DEX, Ability.INT}),
            skill_proficiencies=frozenset({Skill.STEALTH}),
        )

        assert snapshot.is_proficient_save(Ability.DEX)
        assert not snapshot.is_proficient_save(Ability.STR)
        assert snapshot.is_proficient_skill(Skill.STEALTH)
        assert not snapshot.is_proficient_skill(Skill.ARCANA)

    def test_model_copy_produces_new_snapshot(self) -> None:
        """Test edits produce a new value and leave the original intact."""
        snapshot = CharacterSnapshot(class_name="Wizard", level=3)
        leveled = snapshot.model_copy(update={"level": 4})

        assert snapshot.level == 3
        assert leveled.level == 4


class TestTrait:
    """Tests for Trait."""

    def test_defaults(self) -> None:
        """Test traits default to custom source and empty notes."""
        trait = Trait(name="Lucky")

        assert trait.source is TraitSource.CUSTOM
        assert trait.notes == ""

    def test_name_required(self) -> None:
        """Test an empty name is rejected."""
        with pytest.raises(ValidationError):
            Trait(name="")


class TestResourceCounter:
    """Tests for ResourceCounter."""

    def test_starts_full(self) -> None:
        """Test current defaults to maximum."""
        counter = ResourceCounter(name="Rage", maximum=3)

        assert counter.current == 3
        assert counter.auto_generated is False
        assert counter.id

    def test_current_above_maximum_rejected(self) -> None:
        """Test current may not exceed maximum."""
        with pytest.raises(ValidationError, match="exceeds maximum"):
            ResourceCounter(name="Rage", maximum=2, current=3)

    def test_assignment_is_validated(self) -> None:
        """Test direct assignment beyond maximum is rejected."""
        counter = ResourceCounter(name="Ki Points", maximum=5)

        with pytest.raises(ValidationError):
            counter.current = 6

    def test_spend_and_restore_clamp(self) -> None:
        """Test spending and restoring stay within bounds."""
        counter = ResourceCounter(name="Second Wind", maximum=2)

        counter.spend()
        assert counter.current == 1
        counter.spend(5)
        assert counter.current == 0
        counter.restore(10)
        assert counter.current == 2

    def test_reset_and_set_value(self) -> None:
        """Test reset refills and set_value clamps."""
        counter = ResourceCounter(name="Lay on Hands HP Pool", maximum=25, current=4)

        counter.set_value(-3)
        assert counter.current == 0
        counter.set_value(40)
        assert counter.current == 25
        counter.spend(10)
        counter.reset()
        assert counter.current == 25

    def test_unique_ids(self) -> None:
        """Test each counter gets its own id."""
        first = ResourceCounter(name="Rage", maximum=2)
        second = ResourceCounter(name="Rage", maximum=2)

        assert first.id != second.id


class TestEnums:
    """Tests for enum helpers used by the models."""

    def test_skill_ability(self) -> None:
        """Test skills map to their governing ability."""
        assert Skill.ATHLETICS.ability is Ability.STR
        assert Skill.STEALTH.ability is Ability.DEX
        assert Skill.PERSUASION.ability is Ability.CHA

    def test_every_skill_has_ability(self) -> None:
        """Test the skill table is complete."""
        assert all(isinstance(skill.ability, Ability) for skill in Skill)

    def test_ability_names(self) -> None:
        """Test ability display helpers."""
        assert Ability.STR.full_name == "Strength"
        assert Ability.WIS.abbreviation == "WIS"

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (0, Difficulty.EASY),
            (4, Difficulty.DEADLY),
            ("medium", Difficulty.MEDIUM),
            ("Very Hard", Difficulty.VERY_HARD),
            ("very_hard", Difficulty.VERY_HARD),
            (Difficulty.HARD, Difficulty.HARD),
        ],
    )
    def test_difficulty_parse(self, value: str | int | Difficulty, expected: Difficulty) -> None:
        """Test difficulty parsing from indexes, keys and labels."""
        assert Difficulty.parse(value) is expected

    @pytest.mark.parametrize("value", [5, -1, "impossible"])
    def test_difficulty_parse_invalid(self, value: str | int) -> None:
        """Test unknown difficulties raise ValueError."""
        with pytest.raises(ValueError):
            Difficulty.parse(value)

    def test_difficulty_order(self) -> None:
        """Test difficulties rank from easy to deadly."""
        assert [d.rank for d in Difficulty] == [0, 1, 2, 3, 4]
        assert Difficulty.VERY_HARD.display_name == "Very Hard"
