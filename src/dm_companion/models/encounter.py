"""Encounter request and result models.

The encounter builder takes an EncounterRequest and returns an
EncounterOutcome: either an EncounterResult (possibly empty when nothing
fit the budget) or a NoEligibleMonsters value when the challenge rating
window matched no catalog entries. Neither case raises.
"""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PositiveInt,
    computed_field,
    field_validator,
    model_validator,
)

from dm_companion.core.exceptions import NoEligibleMonstersError
from dm_companion.models.character import CharacterLevel
from dm_companion.models.enums import Difficulty, EncounterKind
from dm_companion.models.monster import MonsterRecord


# =============================================================================
# Request
# =============================================================================


class EncounterRequest(BaseModel):
    """Party parameters for encounter generation.

    Attributes:
        party_level: Average party level (1-20).
        party_size: Number of characters (at least 1).
        difficulty: Target difficulty tier.
        monster_count: "auto" or the number of monsters wanted.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    party_level: CharacterLevel
    party_size: int = Field(default=4, ge=1)
    difficulty: Difficulty = Difficulty.MEDIUM
    monster_count: Literal["auto"] | PositiveInt = "auto"

    @field_validator("difficulty", mode="before")
    @classmethod
    def parse_difficulty(cls, value: Any) -> Any:
        """Accept slider indexes and display labels as well as keys."""
        if isinstance(value, str | int) and not isinstance(value, bool):
            return Difficulty.parse(value)
        return value

    @property
    def is_auto(self) -> bool:
        """True when the builder chooses how many monsters to use."""
        return self.monster_count == "auto"


# =============================================================================
# Result
# =============================================================================


class _ComputedRecord(BaseModel):
    """Frozen strict record that drops its computed fields on input.

    Dumps include computed values; validating a dump discards them again.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    @model_validator(mode="before")
    @classmethod
    def drop_computed_fields(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if key not in cls.model_computed_fields}
        return data


class EncounterEntry(_ComputedRecord):
    """One roster line: a monster and how many of it."""

    monster: MonsterRecord
    count: int = Field(default=1, ge=1)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def xp(self) -> int:
        """XP of a single monster (0 when its CR has no table entry)."""
        return self.monster.xp or 0

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_xp(self) -> int:
        return self.xp * self.count


def _percent(part: int, whole: int) -> int:
    """Percentage rounded half up."""
    if whole <= 0:
        return 0
    return math.floor(part / whole * 100 + 0.5)


class EncounterResult(_ComputedRecord):
    """A generated encounter.

    Entries are unique by monster name; repeats are expressed through
    ``count``. An empty roster is a valid result meaning nothing fit the
    budget.
    """

    request: EncounterRequest
    entries: tuple[EncounterEntry, ...] = ()
    xp_budget: int = Field(ge=0)
    min_cr: float
    max_cr: float
    win_chance: int = Field(ge=0, le=100)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_xp(self) -> int:
        return sum(entry.total_xp for entry in self.entries)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_monsters(self) -> int:
        return sum(entry.count for entry in self.entries)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def budget_utilization(self) -> float:
        """Total XP as a fraction of the budget."""
        if self.xp_budget <= 0:
            return 0.0
        return self.total_xp / self.xp_budget

    @computed_field  # type: ignore[prop-decorator]
    @property
    def budget_used_percent(self) -> int:
        return _percent(self.total_xp, self.xp_budget)

    @property
    def is_empty(self) -> bool:
        """True when no monster fit the budget."""
        return not self.entries


class NoEligibleMonsters(_ComputedRecord):
    """Outcome when no catalog monster falls inside the CR window."""

    request: EncounterRequest
    min_cr: float
    max_cr: float

    @computed_field  # type: ignore[prop-decorator]
    @property
    def message(self) -> str:
        return f"No monsters found in CR range {_format_cr(self.min_cr)}-{_format_cr(self.max_cr)}"

    def to_error(self) -> NoEligibleMonstersError:
        """Convert to an exception for callers that prefer raising."""
        return NoEligibleMonstersError(self.message, min_cr=self.min_cr, max_cr=self.max_cr)


def _format_cr(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


EncounterOutcome = EncounterResult | NoEligibleMonsters
"""Return type of encounter generation."""


# =============================================================================
# Saved Encounters
# =============================================================================


class SavedEncounterEntry(BaseModel):
    """A roster line stored as a plain record."""

    model_config = ConfigDict(extra="ignore")

    name: str
    index: str = ""
    cr: str = "0"
    xp: int = Field(default=0, ge=0)
    count: int = Field(default=1, ge=1)
    type: str = ""
    size: str = ""

    @classmethod
    def from_entry(cls, entry: EncounterEntry) -> SavedEncounterEntry:
        monster = entry.monster
        return cls(
            name=monster.name,
            index=monster.index,
            cr=monster.cr_label,
            xp=entry.xp,
            count=entry.count,
            type=monster.type,
            size=monster.size,
        )


class SavedEncounter(BaseModel):
    """An encounter saved to an account, optionally filed in a folder.

    Custom encounters carry no party parameters.
    """

    model_config = ConfigDict(extra="ignore")

    id: str = Field(default_factory=lambda: str(int(datetime.now(timezone.utc).timestamp() * 1000)))
    name: str = Field(min_length=1, max_length=200)
    folder: str = ""
    kind: EncounterKind = EncounterKind.GENERATED
    entries: list[SavedEncounterEntry] = Field(default_factory=list)
    total_xp: int = Field(default=0, ge=0)
    xp_budget: int = Field(default=0, ge=0)
    party_level: int | None = None
    party_size: int | None = None
    difficulty: Difficulty | None = None
    win_chance: int = Field(default=50, ge=0, le=100)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator("name", "folder", mode="before")
    @classmethod
    def strip_text(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_monsters(self) -> int:
        return sum(entry.count for entry in self.entries)

    @classmethod
    def from_result(cls, result: EncounterResult, name: str, folder: str = "") -> SavedEncounter:
        """Snapshot a generated encounter for saving."""
        request = result.request
        return cls(
            name=name,
            folder=folder,
            kind=EncounterKind.GENERATED,
            entries=[SavedEncounterEntry.from_entry(entry) for entry in result.entries],
            total_xp=result.total_xp,
            xp_budget=result.xp_budget,
            party_level=request.party_level,
            party_size=request.party_size,
            difficulty=request.difficulty,
            win_chance=result.win_chance,
        )


def default_encounter_name(monster_names: list[str], max_length: int = 30) -> str:
    """Suggest a save name from the roster: names joined, truncated with '...'."""
    joined = ", ".join(monster_names)
    if len(joined) > max_length:
        return joined[:max_length] + "..."
    return joined


__all__ = [
    "EncounterRequest",
    "EncounterEntry",
    "EncounterResult",
    "NoEligibleMonsters",
    "EncounterOutcome",
    "SavedEncounterEntry",
    "SavedEncounter",
    "default_encounter_name",
]
