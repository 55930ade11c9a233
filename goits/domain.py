"""Ledger records shared by the services and the storage layer."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ServiceError(Exception):
    """Raised when a ledger operation is refused or cannot be completed."""


class EntryType(str, enum.Enum):
    """Side of a double-entry journal line."""

    DEBIT = "debit"
    CREDIT = "credit"

    def __str__(self) -> str:
        return self.value


@dataclass
class Account:
    """An account known to the ledger."""

    id: int
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)


@dataclass
class AccountBalance:
    """The current balance projection of one account."""

    account_id: int
    balance: Decimal = Decimal(0)
    version: int = 0
    last_event_id: int = 0
    updated_at: datetime = field(default_factory=_utcnow)


@dataclass
class TransferEvent:
    """A recorded movement of funds between two accounts."""

    transfer_id: str
    from_account_id: int
    to_account_id: int
    amount: Decimal
    event_type: str
    event_id: int = 0
    created_at: datetime = field(default_factory=_utcnow)


@dataclass
class JournalEntry:
    """One side of a double-entry booking."""

    transaction_id: str
    account_id: int
    amount: Decimal
    type: EntryType
    source_event_id: int = 0
    entry_id: int = 0
    created_at: datetime = field(default_factory=_utcnow)