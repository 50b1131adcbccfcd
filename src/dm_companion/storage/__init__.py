"""Persistence: accounts, user sessions and the monster catalog."""

from __future__ import annotations

from dm_companion.storage.catalog import MonsterCatalog, SrdApiClient
from dm_companion.storage.database import AccountRecord, AccountStore, get_account_store
from dm_companion.storage.session import UserSession


__all__ = [
    "AccountRecord",
    "AccountStore",
    "get_account_store",
    "UserSession",
    "MonsterCatalog",
    "SrdApiClient",
]
