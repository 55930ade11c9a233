from decimal import Decimal

import pytest

from goits.domain import Account, AccountBalance, EntryType, ServiceError
from goits.repository import (
    AccountBalanceRepository,
    AccountRepository,
    JournalRepository,
    TransferEventRepository,
)
from goits.transaction_service import TransactionService

TX = object()
EVENT_ID = 7


class FakeAccounts(AccountRepository):
    def __init__(self, existing=()):
        self.existing = set(existing)
        self.checked = []

    def create_account(self, tx, account):
        self.existing.add(account.id)

    def get_account_by_id(self, tx, account_id):
        return Account(id=account_id) if account_id in self.existing else None

    def account_exists(self, tx, account_id):
        self.checked.append((tx, account_id))
        return account_id in self.existing


class FakeBalances(AccountBalanceRepository):
    def __init__(self, balances=None):
        self.balances = dict(balances or {})
        self.fetched = []
        self.upserts = []

    def get_account_balance(self, tx, account_id):
        self.fetched.append((tx, account_id))
        return self.balances.get(account_id)

    def upsert_account_balance(self, tx, balance):
        self.upserts.append((tx, balance))
        self.balances[balance.account_id] = balance


class FakeEvents(TransferEventRepository):
    def __init__(self, fail=False):
        self.saved = []
        self.fail = fail

    def save_transfer_event(self, tx, event):
        if self.fail:
            raise RuntimeError("disk full")
        event.event_id = EVENT_ID
        self.saved.append((tx, event))


class FakeJournal(JournalRepository):
    def __init__(self):
        self.entries = []

    def save_journal_entry(self, tx, entry):
        self.entries.append((tx, entry))

    def get_totals_by_entry_type(self, tx):
        return {}


def make_service(accounts=None, balances=None, events=None, journal=None):
    accounts = accounts or FakeAccounts()
    balances = balances or FakeBalances()
    events = events or FakeEvents()
    journal = journal or FakeJournal()
    svc = TransactionService(accounts, balances, events, journal)
    return svc, accounts, balances, events, journal


def standard_balances():
    return FakeBalances(
        {
            1: AccountBalance(account_id=1, balance=Decimal(500), version=1),
            2: AccountBalance(account_id=2, balance=Decimal(200), version=1),
        }
    )


def test_process_transfer_success():
    svc, accounts, balances, events, journal = make_service(
        accounts=FakeAccounts({1, 2}), balances=standard_balances()
    )

    svc.process_transfer(TX, 1, 2, Decimal(100))

    assert accounts.checked == [(TX, 1), (TX, 2)]
    assert balances.fetched == [(TX, 1), (TX, 2)]
    assert len(events.saved) == 1
    event_tx, event = events.saved[0]
    assert event_tx is TX
    assert event.event_type == "TransferProcessed"
    assert (event.from_account_id, event.to_account_id, event.amount) == (1, 2, Decimal(100))

    assert len(journal.entries) == 2
    debit, credit = (entry for _, entry in journal.entries)
    assert (debit.type, debit.account_id) == (EntryType.DEBIT, 1)
    assert (credit.type, credit.account_id) == (EntryType.CREDIT, 2)
    assert debit.transaction_id == credit.transaction_id == event.transfer_id
    assert debit.source_event_id == credit.source_event_id == EVENT_ID

    assert len(balances.upserts) == 2
    assert all(tx is TX for tx, _ in balances.upserts)
    assert balances.balances[1].balance == Decimal(400)
    assert balances.balances[2].balance == Decimal(300)
    assert balances.balances[1].version == 2
    assert balances.balances[2].version == 2
    assert balances.balances[1].last_event_id == EVENT_ID


def test_process_transfer_conserves_total_balance():
    svc, _, balances, _, _ = make_service(
        accounts=FakeAccounts({1, 2}), balances=standard_balances()
    )
    before = balances.balances[1].balance + balances.balances[2].balance

    svc.process_transfer(TX, 1, 2, Decimal("123.45"))

    assert balances.balances[1].balance + balances.balances[2].balance == before


def test_transfer_ids_are_unique():
    svc, _, _, events, _ = make_service(
        accounts=FakeAccounts({1, 2}), balances=standard_balances()
    )
    svc.process_transfer(TX, 1, 2, Decimal(10))
    svc.process_transfer(TX, 1, 2, Decimal(10))
    ids = {event.transfer_id for _, event in events.saved}
    assert len(ids) == 2


def test_process_transfer_negative_amount():
    svc, accounts, _, _, _ = make_service()
    with pytest.raises(ServiceError, match="transfer amount must be positive"):
        svc.process_transfer(TX, 1, 2, Decimal(-50))
    assert accounts.checked == []


def test_process_transfer_zero_amount():
    svc, _, _, _, _ = make_service()
    with pytest.raises(ServiceError, match="transfer amount must be positive"):
        svc.process_transfer(TX, 1, 2, Decimal(0))


def test_process_transfer_same_account():
    svc, _, _, _, _ = make_service()
    with pytest.raises(ServiceError, match="source and destination accounts cannot be the same"):
        svc.process_transfer(TX, 1, 1, Decimal(100))


def test_process_transfer_insufficient_balance():
    balances = FakeBalances({1: AccountBalance(account_id=1, balance=Decimal(50), version=1)})
    svc, accounts, balances, events, journal = make_service(
        accounts=FakeAccounts({1, 2}), balances=balances
    )
    with pytest.raises(ServiceError, match="insufficient balance"):
        svc.process_transfer(TX, 1, 2, Decimal(100))
    assert accounts.checked == [(TX, 1), (TX, 2)]
    assert balances.fetched == [(TX, 1)]
    assert events.saved == []
    assert journal.entries == []


def test_process_transfer_source_account_not_found():
    svc, accounts, _, _, _ = make_service(accounts=FakeAccounts({2}))
    with pytest.raises(ServiceError, match="source account not found"):
        svc.process_transfer(TX, 1, 2, Decimal(100))
    assert accounts.checked == [(TX, 1)]


def test_process_transfer_destination_account_not_found():
    svc, accounts, _, _, _ = make_service(accounts=FakeAccounts({1}))
    with pytest.raises(ServiceError, match="destination account not found"):
        svc.process_transfer(TX, 1, 2, Decimal(100))
    assert accounts.checked == [(TX, 1), (TX, 2)]


def test_process_transfer_missing_destination_balance():
    balances = FakeBalances({1: AccountBalance(account_id=1, balance=Decimal(500), version=1)})
    svc, _, _, _, _ = make_service(accounts=FakeAccounts({1, 2}), balances=balances)
    with pytest.raises(ServiceError, match="destination account balance not found"):
        svc.process_transfer(TX, 1, 2, Decimal(100))


def test_process_transfer_wraps_repository_failure():
    svc, _, balances, _, journal = make_service(
        accounts=FakeAccounts({1, 2}),
        balances=standard_balances(),
        events=FakeEvents(fail=True),
    )
    with pytest.raises(ServiceError, match="failed to save transfer event: disk full"):
        svc.process_transfer(TX, 1, 2, Decimal(100))
    assert journal.entries == []
    assert balances.upserts == []