"""Monster catalog entry model.

Challenge ratings arrive either as numbers (0.125) or as the strings used on
stat blocks ("1/8"); both are normalized to a float for range comparisons.
"""

from __future__ import annotations

import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator, model_validator

from dm_companion.core.exceptions import ValidationError
from dm_companion.rules.tables import xp_for_cr


# =============================================================================
# Challenge Rating Parsing
# =============================================================================

_FRACTIONAL_CRS: dict[str, float] = {
    "1/8": 0.125,
    "1/4": 0.25,
    "1/2": 0.5,
}

_MAX_CR = 30


def parse_challenge_rating(value: Any) -> float:
    """Convert a catalog challenge rating to a float.

    Args:
        value: A number (0, 0.125, 0.25, 0.5 or an integer 1-30) or a
            string ("1/8", "1/4", "1/2", "0"-"30").

    Returns:
        Numeric challenge rating.

    Raises:
        ValidationError: If the value is not a recognised challenge rating.

    Example:
        >>> parse_challenge_rating("1/4")
        0.25
    """
    if isinstance(value, str):
        text = value.strip()
        if text in _FRACTIONAL_CRS:
            return _FRACTIONAL_CRS[text]
        if re.fullmatch(r"\d+", text):
            value = int(text)
        else:
            try:
                value = float(text)
            except ValueError as exc:
                raise ValidationError(
                    f"Invalid challenge rating: {value!r}",
                    field_name="challenge_rating",
                    invalid_value=value,
                ) from exc

    if isinstance(value, bool) or not isinstance(value, int | float):
        raise ValidationError(
            f"Invalid challenge rating: {value!r}",
            field_name="challenge_rating",
            invalid_value=value,
        )

    if value in _FRACTIONAL_CRS.values() or (float(value).is_integer() and 0 <= value <= _MAX_CR):
        return float(value)

    raise ValidationError(
        f"Challenge rating out of range: {value!r}",
        field_name="challenge_rating",
        invalid_value=value,
    )


def format_challenge_rating(challenge_rating: float) -> str:
    """Render a numeric CR the way stat blocks print it ("1/4", "5")."""
    for label, number in _FRACTIONAL_CRS.items():
        if challenge_rating == number:
            return label
    return str(int(challenge_rating))


# =============================================================================
# Monster Record
# =============================================================================


class MonsterRecord(BaseModel):
    """A read-only monster catalog entry.

    Attributes:
        name: Display name, unique within a catalog.
        index: SRD index slug (e.g. "adult-red-dragon").
        challenge_rating: Numeric challenge rating.
        type: Creature type (e.g. "dragon").
        size: Size category (e.g. "Huge").
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    name: str = Field(min_length=1, max_length=200)
    index: str = ""
    challenge_rating: float = Field(alias="cr")
    type: str = ""
    size: str = ""

    @model_validator(mode="before")
    @classmethod
    def accept_either_cr_key(cls, data: Any) -> Any:
        """Catalog files use 'challenge_rating'; summaries use 'cr'."""
        if isinstance(data, dict) and "cr" not in data and "challenge_rating" in data:
            data = {**data, "cr": data["challenge_rating"]}
            del data["challenge_rating"]
        return data

    @field_validator("challenge_rating", mode="before")
    @classmethod
    def parse_cr(cls, value: Any) -> float:
        """Accept both numeric and stat-block challenge ratings."""
        try:
            return parse_challenge_rating(value)
        except ValidationError as exc:
            raise ValueError(exc.message) from exc

    @model_validator(mode="after")
    def default_index(self) -> MonsterRecord:
        """Derive the SRD-style index from the name when absent."""
        if not self.index:
            slug = re.sub(r"[^a-z0-9]+", "-", self.name.lower()).strip("-")
            object.__setattr__(self, "index", slug)
        return self

    @computed_field  # type: ignore[prop-decorator]
    @property
    def cr_label(self) -> str:
        """Challenge rating as printed on a stat block."""
        return format_challenge_rating(self.challenge_rating)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def xp(self) -> int | None:
        """XP award from the CR table, or None when the CR has no entry."""
        return xp_for_cr(self.challenge_rating)


__all__ = [
    "parse_challenge_rating",
    "format_challenge_rating",
    "MonsterRecord",
]
