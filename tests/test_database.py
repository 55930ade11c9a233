import logging
from datetime import datetime, timezone

import pytest
from sqlalchemy import func, inspect, select

from goits.config import ConfigError, DatabaseConfig
from goits.database import build_url, open_database
from goits.domain import Account
from goits.models import AccountRow
from goits.repositories import SqlAccountRepository, StorageError

PASSWORD = "password"


def _cfg(port="5433"):
    return DatabaseConfig(
        host="db.example.com",
        port=port,
        user="user",
        password=PASSWORD,
        dbname="ledger",
        sslmode="require",
        timezone="UTC",
    )


@pytest.fixture
def db():
    database = open_database(None, logging.getLogger("goits.test"), url="sqlite://")
    yield database
    database.dispose()


def _now():
    return datetime.now(timezone.utc)


def test_build_url_carries_every_setting():
    cfg = _cfg()
    url = build_url(cfg)
    assert url.host == cfg.host
    assert url.port == 5433
    assert url.username == cfg.user
    assert url.password == cfg.password
    assert url.database == cfg.dbname
    assert url.query["sslmode"] == cfg.sslmode
    assert cfg.timezone in url.query["options"]


def test_build_url_rejects_non_numeric_port():
    with pytest.raises(ConfigError):
        build_url(_cfg(port="abc"))


def test_open_database_creates_all_tables(db):
    tables = set(inspect(db.engine).get_table_names())
    assert tables == {"accounts", "account_balances", "transfer_events", "journal_entries"}


def test_open_database_logs_migrations(caplog):
    with caplog.at_level(logging.INFO, logger="goits.test"):
        database = open_database(None, logging.getLogger("goits.test"), url="sqlite://")
    database.dispose()
    messages = [record.getMessage() for record in caplog.records]
    assert "Running database migrations..." in messages
    assert "Database migrations completed." in messages
    dsn_records = [r for r in caplog.records if r.getMessage() == "Database DSN"]
    assert dsn_records[0].dsn == "sqlite://"


def test_open_database_requires_cfg_or_url():
    with pytest.raises(ConfigError):
        open_database(None, logging.getLogger("goits.test"))


def test_open_database_reports_connection_failure(tmp_path):
    url = f"sqlite:///{tmp_path / 'missing' / 'ledger.db'}"
    with pytest.raises(StorageError, match="failed to connect to database"):
        open_database(None, logging.getLogger("goits.test"), url=url)


def test_transaction_commits_on_success(db):
    now = _now()
    with db.transaction() as session:
        session.add(AccountRow(id=7, created_at=now, updated_at=now))
    with db.transaction() as session:
        row = session.get(AccountRow, 7)
        assert row.id == 7


def test_transaction_rolls_back_on_error(db):
    now = _now()
    with pytest.raises(RuntimeError):
        with db.transaction() as session:
            session.add(AccountRow(id=8, created_at=now, updated_at=now))
            session.flush()
            raise RuntimeError("abort")
    with db.transaction() as session:
        count = session.scalar(select(func.count()).select_from(AccountRow))
    assert count == 0


def test_repository_works_inside_transaction(db):
    repo = SqlAccountRepository(db.engine)
    with db.transaction() as session:
        repo.create_account(session, Account(id=3))
        assert repo.account_exists(session, 3) is True
    assert repo.account_exists(None, 3) is True
    assert repo.account_exists(None, 4) is False