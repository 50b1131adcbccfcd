"""Account and per-user data models.

An account holds a name, an optional plaintext password and the user's
data blob: the character sheet, resource counters, selected feats, saved
encounters and saved dice tray configurations.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from dm_companion.core.constants import DICE_TRAY_SIDES
from dm_companion.models.character import ResourceCounter
from dm_companion.models.encounter import SavedEncounter


class DiceConfiguration(BaseModel):
    """A saved dice tray pool, e.g. two d6 and one d20."""

    model_config = ConfigDict(extra="ignore")

    id: str = Field(default_factory=lambda: str(int(datetime.now(timezone.utc).timestamp() * 1000)))
    name: str = ""
    dice: dict[int, int] = Field(default_factory=dict)

    @field_validator("dice", mode="after")
    @classmethod
    def validate_dice(cls, value: dict[int, int]) -> dict[int, int]:
        """Only tray die sizes with positive counts are kept."""
        for sides, count in value.items():
            if sides not in DICE_TRAY_SIDES:
                msg = f"Unsupported die size: d{sides}"
                raise ValueError(msg)
            if count < 0:
                msg = f"Negative die count for d{sides}: {count}"
                raise ValueError(msg)
        return {sides: value[sides] for sides in DICE_TRAY_SIDES if value.get(sides, 0) > 0}

    @computed_field  # type: ignore[prop-decorator]
    @property
    def default_name(self) -> str:
        """Pool written out as '2d6 + 1d20'; d100 is shown as 'd%'."""
        parts = [
            f"{count}d{'%' if sides == 100 else sides}"
            for sides, count in self.dice.items()
        ]
        return " + ".join(parts)

    @property
    def is_empty(self) -> bool:
        return not self.dice


class AccountData(BaseModel):
    """Everything a user saves between sessions."""

    model_config = ConfigDict(extra="allow")

    character: dict[str, Any] = Field(default_factory=dict)
    counters: list[ResourceCounter] = Field(default_factory=list)
    feats: list[str] = Field(default_factory=list)
    encounters: list[SavedEncounter] = Field(default_factory=list)
    dice_configs: list[DiceConfiguration] = Field(default_factory=list)


class Account(BaseModel):
    """A named account.

    Passwords are stored and compared as plaintext; an empty password
    means the account is open.
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1, max_length=100)
    password: str = ""
    data: AccountData = Field(default_factory=AccountData)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def has_password(self) -> bool:
        return bool(self.password)

    def check_password(self, password: str | None) -> bool:
        """Plaintext comparison; open accounts accept anything."""
        if not self.has_password:
            return True
        return password == self.password


__all__ = [
    "DiceConfiguration",
    "AccountData",
    "Account",
]
