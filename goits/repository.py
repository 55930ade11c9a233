"""Storage interfaces the services depend on.

Each method takes ``tx``: an open transaction handle to work within, or
``None`` to use the repository's own connection.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Any

from goits.domain import Account, AccountBalance, EntryType, JournalEntry, TransferEvent


class AccountRepository(ABC):
    """Persistence of accounts."""

    @abstractmethod
    def create_account(self, tx: Any, account: Account) -> None:
        """Store a new account."""

    @abstractmethod
    def get_account_by_id(self, tx: Any, account_id: int) -> Account | None:
        """Return the account with ``account_id``, or None if there is none."""

    @abstractmethod
    def account_exists(self, tx: Any, account_id: int) -> bool:
        """Tell whether an account with ``account_id`` is stored."""


class AccountBalanceRepository(ABC):
    """Persistence of account balance projections."""

    @abstractmethod
    def get_account_balance(self, tx: Any, account_id: int) -> AccountBalance | None:
        """Return the balance of ``account_id``, or None if there is none."""

    @abstractmethod
    def upsert_account_balance(self, tx: Any, balance: AccountBalance) -> None:
        """Insert the balance or replace the stored one for the same account."""


class TransferEventRepository(ABC):
    """Persistence of transfer events."""

    @abstractmethod
    def save_transfer_event(self, tx: Any, event: TransferEvent) -> None:
        """Store the event and set its ``event_id`` to the assigned identifier."""


class JournalRepository(ABC):
    """Persistence of journal entries."""

    @abstractmethod
    def save_journal_entry(self, tx: Any, entry: JournalEntry) -> None:
        """Store a journal entry."""

    @abstractmethod
    def get_totals_by_entry_type(self, tx: Any) -> dict[EntryType, Decimal]:
        """Return the summed amounts of all entries, keyed by entry type."""