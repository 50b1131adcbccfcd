"""SQLite persistence for accounts.

Each account row holds the account name, its plaintext password and the
user's data blob (character sheet, counters, feats, saved encounters and
dice configurations) serialized as JSON.

Storage location: ``settings.storage.database_path`` (data/accounts.db)
"""

from __future__ import annotations

import sqlite3
from collections.abc import Callable, Generator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

from dm_companion.core.config import get_settings
from dm_companion.core.exceptions import (
    AccountExistsError,
    AccountNotFoundError,
    ValidationError,
)
from dm_companion.core.logging import get_logger
from dm_companion.models.account import Account, AccountData, DiceConfiguration
from dm_companion.models.encounter import SavedEncounter

logger = get_logger(__name__)


# =============================================================================
# Data Classes
# =============================================================================


@dataclass
class AccountRecord:
    """Row of the accounts table.

    Attributes:
        name: Unique account name.
        password: Plaintext password ('' when open).
        data_json: Serialized AccountData.
        created_at: When the account was created.
        updated_at: When the data was last written.
    """

    name: str
    password: str
    data_json: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_row(cls, row: tuple[Any, ...]) -> AccountRecord:
        """Create from database row."""
        return cls(
            name=row[0],
            password=row[1],
            data_json=row[2],
            created_at=datetime.fromisoformat(row[3]),
            updated_at=datetime.fromisoformat(row[4]),
        )

    def to_account(self) -> Account:
        """Parse the stored JSON into an Account."""
        return Account(
            name=self.name,
            password=self.password,
            data=AccountData.model_validate_json(self.data_json),
        )


# =============================================================================
# Account Store
# =============================================================================


class AccountStore:
    """SQLite store for user accounts.

    Every operation opens its own connection and runs in one transaction,
    so read-modify-write updates of a single account are atomic.
    """

    SCHEMA_VERSION = 1

    def __init__(self, db_path: str | Path | None = None) -> None:
        """Initialize the store.

        Args:
            db_path: Path to database file. If None, uses the configured path.
        """
        if db_path is None:
            self.db_path = get_settings().storage.database_path
        else:
            self.db_path = Path(db_path)

        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

        logger.info(f"Account store initialized at {self.db_path}")

    @contextmanager
    def _get_connection(self) -> Generator[sqlite3.Connection, None, None]:
        """Get a database connection with proper cleanup."""
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _init_schema(self) -> None:
        """Initialize database schema."""
        with self._get_connection() as conn:
            cursor = conn.cursor()

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS schema_version (
                    version INTEGER PRIMARY KEY
                )
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS accounts (
                    name TEXT PRIMARY KEY,
                    password TEXT NOT NULL DEFAULT '',
                    data_json TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)

            cursor.execute("""
                INSERT OR REPLACE INTO schema_version (version) VALUES (?)
            """, (self.SCHEMA_VERSION,))

    def _fetch(self, conn: sqlite3.Connection, name: str) -> AccountRecord:
        cursor = conn.cursor()
        cursor.execute("""
            SELECT name, password, data_json, created_at, updated_at
            FROM accounts WHERE name = ?
        """, (name,))
        row = cursor.fetchone()
        if row is None:
            raise AccountNotFoundError("Account not found", account_name=name)
        return AccountRecord.from_row(tuple(row))

    def _modify_data(self, name: str, mutate: Callable[[AccountData], AccountData]) -> Account:
        """Read, transform and write an account's data in one transaction."""
        with self._get_connection() as conn:
            record = self._fetch(conn, name)
            account = record.to_account()
            data = mutate(account.data)
            conn.execute("""
                UPDATE accounts SET data_json = ?, updated_at = ? WHERE name = ?
            """, (data.model_dump_json(), datetime.now().isoformat(), name))
        return account.model_copy(update={"data": data})

    # =========================================================================
    # Account Operations
    # =========================================================================

    def create_account(self, name: str, password: str = "") -> Account:
        """Create a new account with empty data.

        Args:
            name: Account name (must be non-empty).
            password: Optional plaintext password.

        Returns:
            The created account.

        Raises:
            ValidationError: If the name is empty.
            AccountExistsError: If the name is taken.
        """
        if not name or not name.strip():
            raise ValidationError("Account name is required", field_name="name", invalid_value=name)

        account = Account(name=name, password=password or "")
        now = datetime.now().isoformat()
        try:
            with self._get_connection() as conn:
                conn.execute("""
                    INSERT INTO accounts (name, password, data_json, created_at, updated_at)
                    VALUES (?, ?, ?, ?, ?)
                """, (account.name, account.password, account.data.model_dump_json(), now, now))
        except sqlite3.IntegrityError as exc:
            raise AccountExistsError("Account already exists", account_name=name) from exc

        logger.info(f"Created account: {name}")
        return account

    def get_account(self, name: str) -> Account:
        """Get an account by name.

        Raises:
            AccountNotFoundError: If no account has this name.
        """
        with self._get_connection() as conn:
            return self._fetch(conn, name).to_account()

    def list_accounts(self) -> list[Account]:
        """Get all accounts in creation order."""
        with self._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("""
                SELECT name, password, data_json, created_at, updated_at
                FROM accounts ORDER BY rowid
            """)
            return [AccountRecord.from_row(tuple(row)).to_account() for row in cursor.fetchall()]

    def update_data(self, name: str, data: AccountData) -> Account:
        """Replace an account's data blob.

        Raises:
            AccountNotFoundError: If no account has this name.
        """
        account = self._modify_data(name, lambda _current: data)
        logger.debug("Account data updated", account=name)
        return account

    def delete_account(self, name: str) -> None:
        """Delete an account.

        Raises:
            AccountNotFoundError: If no account has this name.
        """
        with self._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM accounts WHERE name = ?", (name,))
            deleted = cursor.rowcount > 0

        if not deleted:
            raise AccountNotFoundError("Account not found", account_name=name)
        logger.info(f"Deleted account: {name}")

    def verify_password(self, name: str, password: str | None) -> bool:
        """Plaintext password check; accounts without a password always pass.

        Raises:
            AccountNotFoundError: If no account has this name.
        """
        return self.get_account(name).check_password(password)

    # =========================================================================
    # Saved Encounters & Dice Configurations
    # =========================================================================

    def save_encounters(self, name: str, encounters: list[SavedEncounter]) -> None:
        """Replace an account's saved encounters."""
        self._modify_data(name, lambda data: data.model_copy(update={"encounters": list(encounters)}))
        logger.debug("Encounters saved", account=name, count=len(encounters))

    def get_encounters(self, name: str) -> list[SavedEncounter]:
        return self.get_account(name).data.encounters

    def save_dice_configs(self, name: str, configs: list[DiceConfiguration]) -> None:
        """Replace an account's saved dice configurations."""
        self._modify_data(name, lambda data: data.model_copy(update={"dice_configs": list(configs)}))
        logger.debug("Dice configurations saved", account=name, count=len(configs))

    def get_dice_configs(self, name: str) -> list[DiceConfiguration]:
        return self.get_account(name).data.dice_configs

    def get_account_count(self) -> int:
        """Get total number of accounts."""
        with self._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT COUNT(*) FROM accounts")
            return cursor.fetchone()[0]


# =============================================================================
# Singleton Instance
# =============================================================================


_store_instance: AccountStore | None = None


def get_account_store() -> AccountStore:
    """Get the global account store instance.

    Returns:
        AccountStore singleton instance.
    """
    global _store_instance

    if _store_instance is None:
        _store_instance = AccountStore()

    return _store_instance


__all__ = [
    "AccountRecord",
    "AccountStore",
    "get_account_store",
]
