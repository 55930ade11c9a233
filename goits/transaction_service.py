"""Moving funds between accounts with double-entry journal lines."""

from __future__ import annotations

import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

from goits.domain import AccountBalance, EntryType, JournalEntry, ServiceError, TransferEvent
from goits.repository import (
    AccountBalanceRepository,
    AccountRepository,
    JournalRepository,
    TransferEventRepository,
)

TRANSFER_PROCESSED = "TransferProcessed"


@contextmanager
def _wrapped(message: str) -> Iterator[None]:
    try:
        yield
    except Exception as exc:
        raise ServiceError(f"{message}: {exc}") from exc


class TransactionService:
    """Validates transfers and records their event, journal lines and balances."""

    def __init__(
        self,
        account_repo: AccountRepository,
        account_balance_repo: AccountBalanceRepository,
        transfer_event_repo: TransferEventRepository,
        journal_repo: JournalRepository,
    ) -> None:
        self._accounts = account_repo
        self._balances = account_balance_repo
        self._events = transfer_event_repo
        self._journal = journal_repo

    def process_transfer(
        self,
        tx: Any,
        source_account_id: int,
        destination_account_id: int,
        amount: Decimal,
    ) -> None:
        """Move ``amount`` from the source account to the destination within ``tx``."""
        amount = Decimal(amount)
        if amount <= 0:
            raise ServiceError("transfer amount must be positive")
        if source_account_id == destination_account_id:
            raise ServiceError("source and destination accounts cannot be the same")

        with _wrapped("failed to check source account"):
            source_exists = self._accounts.account_exists(tx, source_account_id)
        if not source_exists:
            raise ServiceError("source account not found")

        with _wrapped("failed to check destination account"):
            destination_exists = self._accounts.account_exists(tx, destination_account_id)
        if not destination_exists:
            raise ServiceError("destination account not found")

        with _wrapped("failed to get source account balance"):
            source_balance = self._balances.get_account_balance(tx, source_account_id)
        if source_balance is None:
            raise ServiceError("source account balance not found")
        if source_balance.balance < amount:
            raise ServiceError("insufficient balance in source account")

        with _wrapped("failed to get destination account balance"):
            destination_balance = self._balances.get_account_balance(tx, destination_account_id)
        if destination_balance is None:
            raise ServiceError("destination account balance not found")

        now = datetime.now(timezone.utc)
        transfer_id = str(uuid.uuid4())

        event = TransferEvent(
            transfer_id=transfer_id,
            from_account_id=source_account_id,
            to_account_id=destination_account_id,
            amount=amount,
            event_type=TRANSFER_PROCESSED,
            created_at=now,
        )
        with _wrapped("failed to save transfer event"):
            self._events.save_transfer_event(tx, event)

        for account_id, entry_type in (
            (source_account_id, EntryType.DEBIT),
            (destination_account_id, EntryType.CREDIT),
        ):
            entry = JournalEntry(
                transaction_id=transfer_id,
                account_id=account_id,
                amount=amount,
                type=entry_type,
                source_event_id=event.event_id,
                created_at=now,
            )
            with _wrapped(f"failed to save {entry_type.value} journal entry"):
                self._journal.save_journal_entry(tx, entry)

        updates = (
            ("source", source_balance, source_balance.balance - amount),
            ("destination", destination_balance, destination_balance.balance + amount),
        )
        for side, current, new_amount in updates:
            updated = AccountBalance(
                account_id=current.account_id,
                balance=new_amount,
                version=current.version + 1,
                last_event_id=event.event_id,
                updated_at=now,
            )
            with _wrapped(f"failed to update {side} account balance"):
                self._balances.upsert_account_balance(tx, updated)