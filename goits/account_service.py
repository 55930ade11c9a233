"""Opening accounts and reading them back."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

from goits.domain import Account, AccountBalance, ServiceError
from goits.repository import AccountBalanceRepository, AccountRepository


@contextmanager
def _wrapped(message: str) -> Iterator[None]:
    try:
        yield
    except Exception as exc:
        raise ServiceError(f"{message}: {exc}") from exc


class AccountService:
    """Creates accounts with an initial balance and looks them up."""

    def __init__(
        self,
        account_repo: AccountRepository,
        account_balance_repo: AccountBalanceRepository,
    ) -> None:
        self._accounts = account_repo
        self._balances = account_balance_repo

    def create_account(self, tx: Any, account_id: int, initial_balance: Decimal) -> Account:
        """Open account ``account_id`` holding ``initial_balance`` within ``tx``."""
        initial_balance = Decimal(initial_balance)
        if initial_balance < 0:
            raise ServiceError("initial balance cannot be negative")

        with _wrapped("failed to check for existing account"):
            exists = self._accounts.account_exists(tx, account_id)
        if exists:
            raise ServiceError("account with this ID already exists")

        now = datetime.now(timezone.utc)
        account = Account(id=account_id, created_at=now, updated_at=now)
        with _wrapped("failed to create account"):
            self._accounts.create_account(tx, account)

        balance = AccountBalance(
            account_id=account_id,
            balance=initial_balance,
            version=1,
            last_event_id=0,
            updated_at=datetime.now(timezone.utc),
        )
        with _wrapped("failed to create initial balance"):
            self._balances.upsert_account_balance(tx, balance)

        return account

    def get_account_by_id(self, account_id: int) -> Account | None:
        """Return the account, or None if it does not exist."""
        with _wrapped("failed to get account"):
            return self._accounts.get_account_by_id(None, account_id)

    def get_account_balance(self, account_id: int) -> AccountBalance | None:
        """Return the account's balance, or None if it has none."""
        with _wrapped("failed to get account balance"):
            return self._balances.get_account_balance(None, account_id)