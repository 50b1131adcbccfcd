"""Integration tests for encounter generation and saving.

Tests the flow from a monster cache file through generation to saved
encounters filed in folders on an account.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from dm_companion.engine.custom_encounter import CustomEncounter, folders, in_folder
from dm_companion.engine.encounter import EncounterBuilder
from dm_companion.models.encounter import (
    EncounterRequest,
    EncounterResult,
    NoEligibleMonsters,
    SavedEncounter,
)
from dm_companion.models.enums import Difficulty, EncounterKind
from dm_companion.storage.catalog import MonsterCatalog
from dm_companion.storage.database import AccountStore


@pytest.fixture
def cache_file(tmp_path: Path, sample_monsters: list[Any]) -> Path:
    """Write the sample monsters as a cache file."""
    payload = {
        "monsters": {
            monster.index: {
                "index": monster.index,
                "name": monster.name,
                "challenge_rating": monster.challenge_rating,
                "type": monster.type,
                "size": monster.size,
            }
            for monster in sample_monsters
        }
    }
    path = tmp_path / "monsters-full.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


class TestEncounterFlow:
    """Test generating, saving and organizing encounters."""

    def test_generate_from_cache_file(self, cache_file: Path) -> None:
        """Load the catalog from disk and generate an encounter."""
        builder = EncounterBuilder(MonsterCatalog.from_cache_file(cache_file))

        result = builder.generate(EncounterRequest(party_level=5, party_size=4, difficulty="medium"))

        assert isinstance(result, EncounterResult)
        assert [(e.monster.name, e.count) for e in result.entries] == [("Hill Giant", 1), ("Owlbear", 1)]

    def test_no_eligible_converted_to_error(self, cache_file: Path) -> None:
        """Callers can turn an empty CR window into an exception."""
        builder = EncounterBuilder(MonsterCatalog.from_cache_file(cache_file))

        outcome = builder.generate(EncounterRequest(party_level=12, difficulty=Difficulty.EASY))

        assert isinstance(outcome, NoEligibleMonsters)
        assert str(outcome.to_error()).startswith("No monsters found in CR range 9-11")

    def test_save_generated_and_custom(
        self,
        encounter_builder: EncounterBuilder,
        sample_catalog: MonsterCatalog,
        account_store: AccountStore,
    ) -> None:
        """Save a generated and a custom encounter and read them back by folder."""
        account_store.create_account("dm")
        result = encounter_builder.generate(
            EncounterRequest(party_level=2, party_size=4, difficulty=Difficulty.EASY)
        )
        assert isinstance(result, EncounterResult)
        generated = SavedEncounter.from_result(result, "Bugbear patrol", folder="Act 1")

        custom = CustomEncounter()
        for name in ("Goblin", "Goblin", "Goblin", "Bugbear"):
            monster = sample_catalog.get(name)
            assert monster is not None
            custom.add(monster)
        ambush = custom.to_saved(folder="Act 2")

        account_store.save_encounters("dm", [generated, ambush])
        saved = account_store.get_encounters("dm")

        assert folders(saved) == ["Act 1", "Act 2"]
        act_one = in_folder(saved, "Act 1")
        assert act_one[0].kind is EncounterKind.GENERATED
        assert act_one[0].party_level == 2
        assert act_one[0].difficulty is Difficulty.EASY
        assert act_one[0].total_xp == 400
        assert act_one[0].win_chance == 95

        act_two = in_folder(saved, "Act 2")
        assert act_two[0].name == "Goblin, Bugbear"
        assert act_two[0].kind is EncounterKind.CUSTOM
        assert act_two[0].total_monsters == 4
        assert act_two[0].xp_budget == act_two[0].total_xp == 350

    def test_delete_saved_encounter(
        self,
        encounter_builder: EncounterBuilder,
        account_store: AccountStore,
    ) -> None:
        """Remove one saved encounter and keep the rest."""
        account_store.create_account("dm")
        saved = []
        for level in (1, 3, 5):
            result = encounter_builder.generate(EncounterRequest(party_level=level))
            assert isinstance(result, EncounterResult)
            encounter = SavedEncounter.from_result(result, f"Level {level}")
            saved.append(encounter.model_copy(update={"id": str(level)}))
        account_store.save_encounters("dm", saved)

        remaining = [e for e in account_store.get_encounters("dm") if e.id != "3"]
        account_store.save_encounters("dm", remaining)

        assert [e.name for e in account_store.get_encounters("dm")] == ["Level 1", "Level 5"]
