"""Command that starts the ledger HTTP server."""

from __future__ import annotations

import argparse
import logging
from collections.abc import Sequence

from goits.account_service import AccountService
from goits.config import ConfigError, load_config
from goits.database import open_database
from goits.handlers import create_app
from goits.integrity_service import IntegrityService
from goits.logger import new_logger
from goits.repositories import (
    SqlAccountBalanceRepository,
    SqlAccountRepository,
    SqlJournalRepository,
    SqlTransferEventRepository,
    StorageError,
)
from goits.transaction_service import TransactionService


def init_logger() -> logging.Logger:
    """Create the application logger and announce start-up."""
    logger = new_logger("info")
    logger.info("Starting goits application...")
    return logger


def parse_listen_address(port: str) -> tuple[str, int]:
    """Split a ``[host]:port`` listen address; an empty host means every interface."""
    host, sep, number = port.rpartition(":")
    if not sep:
        host, number = "", port
    host = host.strip("[]") or "0.0.0.0"
    if not (number.isascii() and number.isdigit()) or int(number) > 65535:
        raise ConfigError(f"invalid listen address: {port!r}")
    return host, int(number)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the server until it stops; return the process exit status."""
    parser = argparse.ArgumentParser(
        prog="goits",
        description="Serve the ledger API; settings come from the environment.",
    )
    parser.parse_args(argv)

    logger = init_logger()

    try:
        cfg = load_config()
    except ConfigError as exc:
        logger.error("Failed to load configuration", extra={"error": str(exc)})
        return 1

    try:
        db = open_database(cfg.database, logger)
    except (ConfigError, StorageError) as exc:
        logger.error("Failed to connect to database", extra={"error": str(exc)})
        return 1

    try:
        accounts = SqlAccountRepository(db.engine)
        balances = SqlAccountBalanceRepository(db.engine)
        events = SqlTransferEventRepository(db.engine)
        journal = SqlJournalRepository(db.engine)

        app = create_app(
            AccountService(accounts, balances),
            TransactionService(accounts, balances, events, journal),
            IntegrityService(journal),
            logger,
            db,
        )

        logger.info("Server starting", extra={"port": cfg.server.port})
        try:
            host, port = parse_listen_address(cfg.server.port)
            app.run(host=host, port=port)
        except (ConfigError, OSError) as exc:
            logger.error("Failed to start server", extra={"error": str(exc)})
            return 1
    finally:
        db.dispose()
    return 0