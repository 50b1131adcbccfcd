"""Monster catalog loading and the D&D 5e SRD API client.

The catalog is read-only to the rest of the application. It can be built
from the monster cache file (``{"monsters": {index: {...}}}``), from the
grouped summary (``{"monsters_by_cr": {"0.25": [...]}}``) or fetched from
the SRD API. Monsters are always ordered by name.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Iterator, Mapping
from pathlib import Path
from typing import Any

import requests
from pydantic import ValidationError as PydanticValidationError
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)
from tenacity.wait import wait_base

from dm_companion.core.config import SrdApiSettings, get_settings
from dm_companion.core.exceptions import CatalogError
from dm_companion.core.logging import get_logger
from dm_companion.models.monster import MonsterRecord, parse_challenge_rating


logger = get_logger(__name__)


# =============================================================================
# Monster Catalog
# =============================================================================


class MonsterCatalog:
    """An ordered, name-keyed, read-only collection of monsters.

    Iteration yields monsters sorted by name (case-insensitive), which is
    the tie-break order used by encounter generation.
    """

    def __init__(self, monsters: Iterable[MonsterRecord] = ()) -> None:
        by_name: dict[str, MonsterRecord] = {}
        for monster in monsters:
            by_name[monster.name] = monster
        self._monsters = tuple(sorted(by_name.values(), key=lambda monster: monster.name.lower()))
        self._by_index = {monster.index.lower(): monster for monster in self._monsters}
        self._by_name = {monster.name.lower(): monster for monster in self._monsters}

    # -------------------------------------------------------------------------
    # Loaders
    # -------------------------------------------------------------------------

    @classmethod
    def from_cache_file(cls, path: str | Path | None = None) -> MonsterCatalog:
        """Load the monster cache file.

        Args:
            path: Cache file; the configured monster_cache_path when None.

        Raises:
            CatalogError: If the file is missing, not JSON or malformed.
        """
        cache_path = Path(path) if path is not None else get_settings().storage.monster_cache_path
        try:
            payload = json.loads(cache_path.read_text(encoding="utf-8"))
        except FileNotFoundError as exc:
            raise CatalogError("Monster cache file not found", source=str(cache_path)) from exc
        except json.JSONDecodeError as exc:
            raise CatalogError(f"Monster cache is not valid JSON: {exc}", source=str(cache_path)) from exc

        catalog = cls.from_cache_payload(payload, source=str(cache_path))
        logger.info("Monster catalog loaded", source=str(cache_path), monsters=len(catalog))
        return catalog

    @classmethod
    def from_cache_payload(cls, payload: Any, *, source: str | None = None) -> MonsterCatalog:
        """Build from a parsed cache document ``{"monsters": {index: {...}}}``.

        Raises:
            CatalogError: If the document or an entry is malformed.
        """
        if not isinstance(payload, Mapping) or not isinstance(payload.get("monsters"), Mapping):
            raise CatalogError("Monster cache has no 'monsters' mapping", source=source)

        records = []
        for index, entry in payload["monsters"].items():
            if isinstance(entry, Mapping) and "index" not in entry:
                entry = {**entry, "index": index}
            records.append(_to_record(entry, source))
        return cls(records)

    @classmethod
    def from_monsters_by_cr(cls, payload: Any, *, source: str | None = None) -> MonsterCatalog:
        """Build from the grouped summary ``{"monsters_by_cr": {cr: [...]}}``.

        Each group key is the challenge rating; entries carry name, index,
        type and size.

        Raises:
            CatalogError: If the document or an entry is malformed.
        """
        if not isinstance(payload, Mapping) or not isinstance(payload.get("monsters_by_cr"), Mapping):
            raise CatalogError("Monster summary has no 'monsters_by_cr' mapping", source=source)

        records = []
        for cr, group in payload["monsters_by_cr"].items():
            if not isinstance(group, list):
                raise CatalogError(f"CR group {cr!r} is not a list", source=source)
            for entry in group:
                if isinstance(entry, Mapping):
                    entry = {**entry, "cr": cr}
                records.append(_to_record(entry, source))
        return cls(records)

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def __iter__(self) -> Iterator[MonsterRecord]:
        return iter(self._monsters)

    def __len__(self) -> int:
        return len(self._monsters)

    def __contains__(self, index_or_name: object) -> bool:
        return isinstance(index_or_name, str) and self.get(index_or_name) is not None

    def get(self, index_or_name: str) -> MonsterRecord | None:
        """Find a monster by index, then by name, ignoring case."""
        key = index_or_name.strip().lower()
        return self._by_index.get(key) or self._by_name.get(key)

    def search(self, term: str) -> list[MonsterRecord]:
        """Monsters whose name or type contains the term (case-insensitive)."""
        needle = term.strip().lower()
        return [
            monster
            for monster in self._monsters
            if needle in monster.name.lower() or needle in monster.type.lower()
        ]

    def filter_by_cr(self, challenge_rating: float | str) -> list[MonsterRecord]:
        """Monsters with exactly this challenge rating.

        Raises:
            ValidationError: If the challenge rating is not recognised.
        """
        target = parse_challenge_rating(challenge_rating)
        return [monster for monster in self._monsters if monster.challenge_rating == target]

    def filter_by_type(self, monster_type: str) -> list[MonsterRecord]:
        """Monsters of a creature type (case-insensitive)."""
        wanted = monster_type.strip().lower()
        return [monster for monster in self._monsters if monster.type.lower() == wanted]

    def challenge_ratings(self) -> list[float]:
        """Distinct challenge ratings in ascending order."""
        return sorted({monster.challenge_rating for monster in self._monsters})

    def by_challenge_rating(self) -> dict[float, list[MonsterRecord]]:
        """Monsters grouped by challenge rating, ascending."""
        groups: dict[float, list[MonsterRecord]] = {cr: [] for cr in self.challenge_ratings()}
        for monster in self._monsters:
            groups[monster.challenge_rating].append(monster)
        return groups


def _to_record(entry: Any, source: str | None) -> MonsterRecord:
    try:
        return MonsterRecord.model_validate(entry)
    except PydanticValidationError as exc:
        name = entry.get("name") if isinstance(entry, Mapping) else None
        raise CatalogError(
            f"Invalid monster entry: {exc.error_count()} validation error(s)",
            source=source,
            details={"monster": name},
        ) from exc


# =============================================================================
# SRD API Client
# =============================================================================


class SrdApiClient:
    """Client for the monster endpoints of the D&D 5e SRD API.

    Connection errors and timeouts are retried with exponential backoff;
    HTTP error statuses are not. Nothing fetched is written to disk.

    Example:
        >>> client = SrdApiClient()
        >>> dragon = client.get_monster("adult-red-dragon")
    """

    def __init__(
        self,
        settings: SrdApiSettings | None = None,
        *,
        session: requests.Session | None = None,
        wait: wait_base | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            settings: API settings; the application settings when None.
            session: HTTP session to use (a new one when None).
            wait: Backoff between retries (exponential 2-10s when None).
        """
        self.settings = settings or get_settings().srd
        self._session = session or requests.Session()
        self._get_json = retry(
            retry=retry_if_exception_type((requests.ConnectionError, requests.Timeout)),
            stop=stop_after_attempt(self.settings.max_retries),
            wait=wait or wait_exponential(multiplier=1, min=2, max=10),
            reraise=True,
        )(self._get_json_once)

    def _get_json_once(self, path: str) -> Any:
        url = f"{self.settings.base_url}/{path.lstrip('/')}"
        logger.debug("SRD request", url=url)
        response = self._session.get(url, timeout=self.settings.timeout_seconds)
        response.raise_for_status()
        return response.json()

    def _fetch(self, path: str) -> Any:
        try:
            return self._get_json(path)
        except requests.RequestException as exc:
            raise CatalogError(f"SRD API request failed: {exc}", source=path) from exc
        except ValueError as exc:
            raise CatalogError(f"SRD API returned invalid JSON: {exc}", source=path) from exc

    def list_monsters(self) -> list[dict[str, str]]:
        """List monster references (index, name, url).

        Raises:
            CatalogError: On HTTP failure or an unexpected payload.
        """
        payload = self._fetch("monsters")
        results = payload.get("results") if isinstance(payload, Mapping) else None
        if not isinstance(results, list):
            raise CatalogError("SRD monster list has no 'results'", source="monsters")
        return results

    def get_monster(self, index: str) -> MonsterRecord:
        """Fetch one monster.

        Raises:
            CatalogError: On HTTP failure or an invalid monster payload.
        """
        path = f"monsters/{index}"
        return _to_record(self._fetch(path), path)

    def fetch_catalog(self) -> MonsterCatalog:
        """Fetch every monster; ones that fail individually are skipped.

        Raises:
            CatalogError: If the monster list itself cannot be fetched.
        """
        references = self.list_monsters()
        logger.info("Fetching monster details", total=len(references))

        monsters = []
        for reference in references:
            try:
                monsters.append(self.get_monster(reference["index"]))
            except (CatalogError, KeyError) as exc:
                logger.warning("Failed to fetch monster", monster=reference.get("name"), error=str(exc))

        catalog = MonsterCatalog(monsters)
        logger.info("Monster catalog fetched", monsters=len(catalog), skipped=len(references) - len(monsters))
        return catalog


__all__ = [
    "MonsterCatalog",
    "SrdApiClient",
]
