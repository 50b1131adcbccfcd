"""Integration tests for the character sheet lifecycle.

Tests the complete character flow: build a snapshot, derive stats and
counters, save to an account, reload, level up and refresh.
"""

from __future__ import annotations

from dm_companion.engine.stats import compute_derived_stats, create_character_snapshot
from dm_companion.engine.traits import counters_from_traits, refresh_counters
from dm_companion.models.account import AccountData
from dm_companion.models.character import AbilityScoreSet, CharacterSnapshot, ResourceCounter, Trait
from dm_companion.models.enums import Ability, Skill, TraitSource
from dm_companion.storage.database import AccountStore
from dm_companion.storage.session import UserSession


def build_monk(level: int) -> CharacterSnapshot:
    return create_character_snapshot(
        "Monk",
        level=level,
        abilities=AbilityScoreSet.from_abbreviations(
            {"str": 10, "dex": 16, "con": 14, "int": 8, "wis": 15, "cha": 10}
        ),
        skill_proficiencies=[Skill.ACROBATICS, Skill.INSIGHT],
        traits=[
            Trait(name="Unarmored Defense", notes="AC = 10 + DEX + WIS", source=TraitSource.CLASS),
            Trait(name="Unarmored Movement", source=TraitSource.CLASS),
            Trait(name="Ki", notes="Spend ki points to fuel features", source=TraitSource.CLASS),
            Trait(name="Relentless Endurance", source=TraitSource.SPECIES),
        ],
    )


class TestCharacterFlow:
    """Test character creation, derivation, saving and loading."""

    def test_derive_new_character(self) -> None:
        """Derive every sheet value for a level 2 Monk."""
        monk = build_monk(2)

        stats = compute_derived_stats(monk)

        assert stats.proficiency_bonus == 2
        assert stats.armor_class == 15
        assert stats.speed == 40
        assert stats.hit_points == 17
        assert stats.initiative == 3
        assert stats.saving_throws[Ability.DEX] == 5
        assert stats.skills[Skill.INSIGHT] == 4
        assert stats.spell_save_dc is None

    def test_counters_for_new_character(self) -> None:
        """Generate resource counters from the Monk's traits."""
        monk = build_monk(2)

        counters = counters_from_traits(monk.traits, monk.level, monk.abilities)

        assert {c.name: c.maximum for c in counters} == {"Ki Points": 2, "Relentless Endurance": 1}

    def test_save_and_reload_character(self, account_store: AccountStore) -> None:
        """Store the sheet in an account and rebuild the snapshot from it."""
        account_store.create_account("player")
        monk = build_monk(3)
        counters = counters_from_traits(monk.traits, monk.level, monk.abilities)

        with UserSession.login(account_store, "player", autosave_interval=60) as session:
            session.data = AccountData(
                character=monk.model_dump(mode="json"),
                counters=counters,
                feats=["Mobile"],
            )

        stored = account_store.get_account("player").data
        reloaded = CharacterSnapshot.model_validate(stored.character)

        assert reloaded == monk
        assert compute_derived_stats(reloaded) == compute_derived_stats(monk)
        assert [c.name for c in stored.counters] == ["Ki Points", "Relentless Endurance"]

    def test_level_up_refreshes_counters(self, account_store: AccountStore) -> None:
        """Level up, spend resources and refresh auto counters."""
        account_store.create_account("player")
        monk = build_monk(4)
        manual = ResourceCounter(name="Heroic Inspiration", maximum=1, current=0)
        counters = [manual, *counters_from_traits(monk.traits, monk.level, monk.abilities)]
        account_store.update_data("player", AccountData(character=monk.model_dump(mode="json"), counters=counters))

        with UserSession.login(account_store, "player", autosave_interval=60) as session:
            data = session.data
            snapshot = CharacterSnapshot.model_validate(data.character)
            leveled = snapshot.model_copy(update={"level": 5})

            data.counters[1].spend(3)
            data.counters = refresh_counters(data.counters, leveled.traits, leveled.level, leveled.abilities)
            data.character = leveled.model_dump(mode="json")
            session.mark_dirty()

        stored = account_store.get_account("player").data
        by_name = {c.name: c for c in stored.counters}

        assert stored.character["level"] == 5
        assert stored.counters[0].name == "Heroic Inspiration"
        assert by_name["Heroic Inspiration"].current == 0
        assert by_name["Ki Points"].maximum == 5
        assert by_name["Ki Points"].current == 5
        assert compute_derived_stats(CharacterSnapshot.model_validate(stored.character)).proficiency_bonus == 3
