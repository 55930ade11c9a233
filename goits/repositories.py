"""SQL implementations of the storage interfaces."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from decimal import Decimal
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from goits.domain import Account, AccountBalance, EntryType, JournalEntry, TransferEvent
from goits.models import AccountBalanceRow, AccountRow, JournalEntryRow, TransferEventRow
from goits.repository import (
    AccountBalanceRepository,
    AccountRepository,
    JournalRepository,
    TransferEventRepository,
)


class StorageError(Exception):
    """Raised when the database fails or rejects a storage operation."""


@contextmanager
def _storage_errors(message: str) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        raise StorageError(f"{message}: {exc}") from exc


class _SqlRepository:
    """Shared handling of the ``tx`` argument.

    ``tx`` is an open :class:`Session` to work within; when it is None a
    short-lived session on the repository's engine is used and committed.
    """

    def __init__(self, engine: Any) -> None:
        self._engine = engine

    @contextmanager
    def _session(self, tx: Session | None) -> Iterator[Session]:
        if tx is not None:
            yield tx
            return
        with Session(self._engine, expire_on_commit=False) as session, session.begin():
            yield session


class SqlAccountRepository(_SqlRepository, AccountRepository):
    """Accounts stored in the ``accounts`` table."""

    def create_account(self, tx: Session | None, account: Account) -> None:
        row = AccountRow(
            id=account.id or None,
            created_at=account.created_at,
            updated_at=account.updated_at,
        )
        with _storage_errors("failed to create account"), self._session(tx) as session:
            session.add(row)
            session.flush()

    def get_account_by_id(self, tx: Session | None, account_id: int) -> Account | None:
        with _storage_errors("failed to get account by ID"), self._session(tx) as session:
            row = session.get(AccountRow, account_id)
            if row is None:
                return None
            return Account(id=row.id, created_at=row.created_at, updated_at=row.updated_at)

    def account_exists(self, tx: Session | None, account_id: int) -> bool:
        query = select(func.count()).select_from(AccountRow).where(AccountRow.id == account_id)
        with _storage_errors("failed to check account existence"), self._session(tx) as session:
            return (session.scalar(query) or 0) > 0


class SqlAccountBalanceRepository(_SqlRepository, AccountBalanceRepository):
    """Balances stored in the ``account_balances`` table."""

    def get_account_balance(self, tx: Session | None, account_id: int) -> AccountBalance | None:
        with _storage_errors("failed to get account balance"), self._session(tx) as session:
            row = session.get(AccountBalanceRow, account_id)
            if row is None:
                return None
            return AccountBalance(
                account_id=row.account_id,
                balance=Decimal(row.balance),
                version=row.version,
                last_event_id=row.last_event_id,
                updated_at=row.updated_at,
            )

    def upsert_account_balance(self, tx: Session | None, balance: AccountBalance) -> None:
        row = AccountBalanceRow(
            account_id=balance.account_id,
            balance=Decimal(balance.balance),
            version=balance.version,
            last_event_id=balance.last_event_id,
            updated_at=balance.updated_at,
        )
        with _storage_errors("failed to upsert account balance"), self._session(tx) as session:
            session.merge(row)
            session.flush()


class SqlTransferEventRepository(_SqlRepository, TransferEventRepository):
    """Events stored in the ``transfer_events`` table."""

    def save_transfer_event(self, tx: Session | None, event: TransferEvent) -> None:
        row = TransferEventRow(
            event_id=event.event_id or None,
            transfer_id=event.transfer_id,
            from_account_id=event.from_account_id,
            to_account_id=event.to_account_id,
            amount=Decimal(event.amount),
            event_type=event.event_type,
            created_at=event.created_at,
        )
        with _storage_errors("failed to save transfer event"), self._session(tx) as session:
            session.add(row)
            session.flush()
            event.event_id = row.event_id


class SqlJournalRepository(_SqlRepository, JournalRepository):
    """Journal lines stored in the ``journal_entries`` table."""

    def save_journal_entry(self, tx: Session | None, entry: JournalEntry) -> None:
        row = JournalEntryRow(
            entry_id=entry.entry_id or None,
            transaction_id=entry.transaction_id,
            account_id=entry.account_id,
            amount=Decimal(entry.amount),
            type=EntryType(entry.type).value,
            source_event_id=entry.source_event_id,
            created_at=entry.created_at,
        )
        with _storage_errors("failed to save journal entry"), self._session(tx) as session:
            session.add(row)
            session.flush()

    def get_totals_by_entry_type(self, tx: Session | None) -> dict[EntryType, Decimal]:
        query = select(JournalEntryRow.type, func.sum(JournalEntryRow.amount)).group_by(
            JournalEntryRow.type
        )
        with _storage_errors("failed to get totals by entry type"), self._session(tx) as session:
            rows = session.execute(query).all()
        return {EntryType(kind): Decimal(total or 0) for kind, total in rows}