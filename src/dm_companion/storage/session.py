"""User session lifecycle.

A session is created on login, owns the user's AccountData while the user
works, writes it back to the store when dirty (explicitly, on an autosave
interval, or on logout) and refuses further use after logout.

Example:
    >>> with UserSession.login(store, "alice", "secret") as session:
    ...     session.data.feats.append("Alert")
    ...     session.mark_dirty()
    ... # flushed on exit; discarded if the block raises
"""

from __future__ import annotations

import time
from types import TracebackType

from dm_companion.core.config import get_settings
from dm_companion.core.exceptions import AuthenticationError, SessionStateError
from dm_companion.core.logging import bind_context, clear_context, get_logger
from dm_companion.models.account import AccountData
from dm_companion.storage.database import AccountStore


logger = get_logger(__name__)


class UserSession:
    """The logged-in user's working copy of their account data.

    Attributes:
        account_name: Name of the logged-in account.
        autosave_interval: Seconds between autosaves.
    """

    def __init__(
        self,
        store: AccountStore,
        account_name: str,
        data: AccountData,
        *,
        autosave_interval: float | None = None,
        now: float | None = None,
    ) -> None:
        """Initialize a session. Prefer ``UserSession.login``.

        Args:
            store: Store the data is flushed to.
            account_name: Logged-in account.
            data: The account data loaded at login.
            autosave_interval: Seconds between autosaves (from settings
                when omitted).
            now: Monotonic timestamp of login (``time.monotonic()`` when
                omitted).
        """
        self._store = store
        self.account_name = account_name
        self._data = data
        self._dirty = False
        self._closed = False
        if autosave_interval is None:
            autosave_interval = get_settings().session.autosave_interval_seconds
        self.autosave_interval = autosave_interval
        self._last_flush = time.monotonic() if now is None else now

    @classmethod
    def login(
        cls,
        store: AccountStore,
        account_name: str,
        password: str | None = None,
        *,
        autosave_interval: float | None = None,
        now: float | None = None,
    ) -> UserSession:
        """Log in and load the account's data.

        Raises:
            AccountNotFoundError: If the account does not exist.
            AuthenticationError: If the password does not match.
        """
        account = store.get_account(account_name)
        if not account.check_password(password):
            logger.warning("Login rejected", account=account_name)
            raise AuthenticationError("Incorrect password", details={"account_name": account_name})

        bind_context(account=account_name)
        logger.info("User logged in", account=account_name)
        return cls(
            store,
            account_name,
            account.data,
            autosave_interval=autosave_interval,
            now=now,
        )

    def _ensure_open(self) -> None:
        if self._closed:
            raise SessionStateError(
                "Session has been logged out",
                details={"account_name": self.account_name},
            )

    @property
    def data(self) -> AccountData:
        """The user's data; call ``mark_dirty`` after changing it."""
        self._ensure_open()
        return self._data

    @data.setter
    def data(self, value: AccountData) -> None:
        self._ensure_open()
        self._data = value
        self._dirty = True

    @property
    def is_dirty(self) -> bool:
        return self._dirty

    @property
    def is_open(self) -> bool:
        return not self._closed

    def mark_dirty(self) -> None:
        """Record that the data has unsaved changes."""
        self._ensure_open()
        self._dirty = True

    def flush(self, now: float | None = None) -> bool:
        """Write the data to the store if it has unsaved changes.

        Returns:
            True if a write happened.
        """
        self._ensure_open()
        if not self._dirty:
            return False
        self._store.update_data(self.account_name, self._data)
        self._dirty = False
        self._last_flush = time.monotonic() if now is None else now
        logger.debug("Session flushed", account=self.account_name)
        return True

    def autosave_if_due(self, now: float | None = None) -> bool:
        """Flush when the autosave interval has elapsed since the last flush.

        Args:
            now: Monotonic timestamp (``time.monotonic()`` when omitted).

        Returns:
            True if a write happened.
        """
        self._ensure_open()
        current = time.monotonic() if now is None else now
        if current - self._last_flush < self.autosave_interval:
            return False
        if not self._dirty:
            self._last_flush = current
            return False
        return self.flush(now=current)

    def logout(self) -> None:
        """Flush pending changes and close the session. Idempotent."""
        if self._closed:
            return
        self.flush()
        self._close()

    def _close(self) -> None:
        self._closed = True
        logger.info("User logged out", account=self.account_name)
        clear_context()

    def __enter__(self) -> UserSession:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        """Log out; if the block raised, close without flushing."""
        if exc_type is None:
            self.logout()
            return
        if self._closed:
            return
        if self._dirty:
            logger.warning(
                "Unsaved changes discarded",
                account=self.account_name,
                error=exc_type.__name__,
            )
        self._close()


__all__ = ["UserSession"]
