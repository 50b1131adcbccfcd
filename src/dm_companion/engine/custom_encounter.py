"""Hand-built encounters and saved-encounter folders."""

from __future__ import annotations

from collections.abc import Iterable

from dm_companion.core.constants import CUSTOM_ENCOUNTER_WIN_CHANCE
from dm_companion.core.exceptions import EncounterError
from dm_companion.core.logging import get_logger
from dm_companion.models.encounter import (
    EncounterEntry,
    SavedEncounter,
    SavedEncounterEntry,
    default_encounter_name,
)
from dm_companion.models.enums import EncounterKind
from dm_companion.models.monster import MonsterRecord


logger = get_logger(__name__)


class CustomEncounter:
    """A monster roster assembled by hand.

    Monsters are unique by name; adding one already present increments its
    count. Monsters whose CR has no XP entry count as 0 XP.

    Example:
        >>> encounter = CustomEncounter()
        >>> encounter.add(goblin)
        >>> encounter.add(goblin)
        >>> encounter.total_monsters
        2
    """

    def __init__(self) -> None:
        self._monsters: dict[str, MonsterRecord] = {}
        self._counts: dict[str, int] = {}

    def _require(self, name: str) -> None:
        if name not in self._counts:
            raise EncounterError(f"Monster not in encounter: {name}", details={"name": name})

    def add(self, monster: MonsterRecord) -> None:
        """Add a monster, or one more of it if already present."""
        if monster.name in self._counts:
            self._counts[monster.name] += 1
        else:
            self._monsters[monster.name] = monster
            self._counts[monster.name] = 1

    def increment(self, name: str) -> None:
        """Add one more of a monster already in the roster.

        Raises:
            EncounterError: If the monster is not in the roster.
        """
        self._require(name)
        self._counts[name] += 1

    def decrement(self, name: str) -> None:
        """Remove one of a monster; the entry is dropped at zero.

        Raises:
            EncounterError: If the monster is not in the roster.
        """
        self._require(name)
        self._counts[name] -= 1
        if self._counts[name] <= 0:
            self.remove(name)

    def remove(self, name: str) -> None:
        """Drop a monster entirely.

        Raises:
            EncounterError: If the monster is not in the roster.
        """
        self._require(name)
        del self._counts[name]
        del self._monsters[name]

    def clear(self) -> None:
        self._counts.clear()
        self._monsters.clear()

    @property
    def entries(self) -> tuple[EncounterEntry, ...]:
        return tuple(
            EncounterEntry(monster=self._monsters[name], count=count)
            for name, count in self._counts.items()
        )

    @property
    def total_xp(self) -> int:
        return sum(entry.total_xp for entry in self.entries)

    @property
    def total_monsters(self) -> int:
        return sum(self._counts.values())

    @property
    def win_chance(self) -> int:
        return CUSTOM_ENCOUNTER_WIN_CHANCE

    def __len__(self) -> int:
        return len(self._counts)

    def __bool__(self) -> bool:
        return bool(self._counts)

    def to_saved(self, name: str | None = None, folder: str = "") -> SavedEncounter:
        """Snapshot the roster for saving.

        Args:
            name: Save name; defaults to the monster names joined.
            folder: Optional folder to file it under.

        Raises:
            EncounterError: If the roster is empty.
        """
        if not self._counts:
            raise EncounterError("Add at least one monster before saving")

        total_xp = self.total_xp
        saved = SavedEncounter(
            name=name or default_encounter_name(list(self._counts)),
            folder=folder,
            kind=EncounterKind.CUSTOM,
            entries=[SavedEncounterEntry.from_entry(entry) for entry in self.entries],
            total_xp=total_xp,
            xp_budget=total_xp,
            win_chance=CUSTOM_ENCOUNTER_WIN_CHANCE,
        )
        logger.info("Custom encounter saved", name=saved.name, folder=saved.folder, total_xp=total_xp)
        return saved


# =============================================================================
# Folders
# =============================================================================


def folders(saved: Iterable[SavedEncounter]) -> list[str]:
    """Distinct non-empty folder names in first-seen order."""
    seen: dict[str, None] = {}
    for encounter in saved:
        if encounter.folder:
            seen.setdefault(encounter.folder, None)
    return list(seen)


def in_folder(saved: Iterable[SavedEncounter], folder: str = "") -> list[SavedEncounter]:
    """Saved encounters filed under a folder; an empty folder selects all."""
    if not folder:
        return list(saved)
    return [encounter for encounter in saved if encounter.folder == folder]


__all__ = [
    "CustomEncounter",
    "folders",
    "in_folder",
]
