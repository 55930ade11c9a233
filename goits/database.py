"""Opening the ledger database and running units of work against it."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from sqlalchemy import create_engine
from sqlalchemy.engine import URL, Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from goits.config import ConfigError, DatabaseConfig
from goits.models import Base
from goits.repositories import StorageError


@dataclass(frozen=True)
class Database:
    """An open database: the engine and a way to run transactions on it."""

    engine: Engine

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """Yield a session whose work is committed on success and rolled back on error."""
        with Session(self.engine, expire_on_commit=False) as session, session.begin():
            yield session

    def dispose(self) -> None:
        """Close every pooled connection."""
        self.engine.dispose()


def build_url(cfg: DatabaseConfig) -> URL:
    """Return the PostgreSQL connection URL described by ``cfg``."""
    try:
        port = int(cfg.port)
    except ValueError as exc:
        raise ConfigError(f"invalid database port: {cfg.port!r}") from exc
    return URL.create(
        drivername="postgresql",
        username=cfg.user,
        password=cfg.password,
        host=cfg.host,
        port=port,
        database=cfg.dbname,
        query={"sslmode": cfg.sslmode, "options": f"-c timezone={cfg.timezone}"},
    )


def open_database(
    cfg: DatabaseConfig | None,
    logger: logging.Logger | None = None,
    url: str | URL | None = None,
) -> Database:
    """Connect to the database and create any missing tables.

    ``url`` overrides the PostgreSQL address built from ``cfg``.
    """
    log = logger if logger is not None else logging.getLogger("goits")
    if url is not None:
        target = make_url(url)
    elif cfg is not None:
        target = build_url(cfg)
    else:
        raise ConfigError("either a database configuration or a URL is required")

    log.info("Database DSN", extra={"dsn": target.render_as_string(hide_password=True)})

    try:
        engine = create_engine(target)
        with engine.connect():
            pass
    except (SQLAlchemyError, ImportError) as exc:
        raise StorageError(f"failed to connect to database: {exc}") from exc

    log.info("Running database migrations...")
    try:
        Base.metadata.create_all(engine)
    except SQLAlchemyError as exc:
        engine.dispose()
        raise StorageError(f"failed to auto migrate database: {exc}") from exc
    log.info("Database migrations completed.")

    return Database(engine=engine)