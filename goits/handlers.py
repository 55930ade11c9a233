"""HTTP handlers and the application that routes to them."""

from __future__ import annotations

import json
import logging
from decimal import Decimal
from typing import Any

from flask import Flask, Response, jsonify, request

from goits.account_service import AccountService
from goits.apidocs import swagger_spec
from goits.database import Database
from goits.dto import (
    CreateAccountRequest,
    CreateTransactionRequest,
    GetAccountResponse,
    RequestError,
)
from goits.integrity_service import IntegrityService
from goits.transaction_service import TransactionService

_UINT_MAX = 2**64 - 1

Reply = tuple[Response, int] | tuple[str, int]


def _reject_constant(name: str) -> Any:
    raise ValueError(f"unsupported JSON constant {name}")


def _json_body() -> Any:
    raw = request.get_data()
    try:
        return json.loads(raw or b"", parse_float=Decimal, parse_constant=_reject_constant)
    except ValueError as exc:
        raise RequestError(f"invalid JSON body: {exc}") from exc


def _error(message: str, status: int) -> tuple[Response, int]:
    return jsonify({"error": message}), status


def _parse_account_id(text: str) -> int | None:
    if not (text.isascii() and text.isdigit()):
        return None
    value = int(text)
    if value == 0 or value > _UINT_MAX:
        return None
    return value


class AccountHandler:
    """Opens accounts and reports them."""

    def __init__(self, account_service: AccountService, log: logging.Logger, db: Database) -> None:
        self._service = account_service
        self._log = log
        self._db = db

    def create_account(self) -> Reply:
        try:
            req = CreateAccountRequest.from_json(_json_body())
        except RequestError as exc:
            self._log.error("Invalid request body for CreateAccount", extra={"error": str(exc)})
            return _error(str(exc), 400)

        try:
            with self._db.transaction() as tx:
                account = self._service.create_account(
                    tx, req.account_id, req.initial_balance
                )
        except Exception as exc:
            self._log.error(
                "Failed to create account",
                extra={"account_id": req.account_id, "error": str(exc)},
            )
            return _error(str(exc), 500)

        self._log.info("Account created successfully", extra={"account_id": account.id})
        return "", 201

    def get_account(self, account_id: str) -> Reply:
        parsed = _parse_account_id(account_id)
        if parsed is None:
            self._log.error(
                "Invalid account ID format - must be a positive integer",
                extra={"account_id": account_id},
            )
            return _error("Account ID must be a positive integer", 400)

        try:
            account = self._service.get_account_by_id(parsed)
        except Exception as exc:
            self._log.error(
                "Failed to get account", extra={"account_id": account_id, "error": str(exc)}
            )
            return _error(str(exc), 500)
        if account is None:
            self._log.info("Account not found", extra={"account_id": account_id})
            return _error("Account not found", 404)

        try:
            balance = self._service.get_account_balance(parsed)
        except Exception as exc:
            self._log.error(
                "Failed to get account balance",
                extra={"account_id": account_id, "error": str(exc)},
            )
            return _error(str(exc), 500)
        if balance is None:
            self._log.info("Account balance not found", extra={"account_id": account_id})
            return _error("Account balance not found", 404)

        res = GetAccountResponse(
            account_id=account.id,
            balance=balance.balance,
            version=balance.version,
            updated_at=balance.updated_at,
        )
        self._log.info("Account retrieved successfully", extra={"account_id": account.id})
        return jsonify(res.to_dict()), 200


class TransactionHandler:
    """Accepts transfers between accounts."""

    def __init__(
        self, transaction_service: TransactionService, log: logging.Logger, db: Database
    ) -> None:
        self._service = transaction_service
        self._log = log
        self._db = db

    def create_transaction(self) -> Reply:
        try:
            req = CreateTransactionRequest.from_json(_json_body())
        except RequestError as exc:
            self._log.error(
                "Invalid request body for CreateTransaction", extra={"error": str(exc)}
            )
            return _error(str(exc), 400)

        details = {
            "source_account_id": req.source_account_id,
            "destination_account_id": req.destination_account_id,
            "amount": str(req.amount),
        }
        try:
            with self._db.transaction() as tx:
                self._service.process_transfer(
                    tx, req.source_account_id, req.destination_account_id, req.amount
                )
        except Exception as exc:
            self._log.error(
                "Failed to process transaction", extra={**details, "error": str(exc)}
            )
            return _error(str(exc), 500)

        self._log.info("Transaction processed successfully", extra=details)
        return "", 201


class IntegrityHandler:
    """Reports whether the journal's debits and credits balance."""

    def __init__(
        self, integrity_service: IntegrityService, log: logging.Logger, db: Database
    ) -> None:
        self._service = integrity_service
        self._log = log
        self._db = db

    def check_integrity(self) -> Reply:
        try:
            result = self._service.verify_double_bookkeeping()
        except Exception as exc:
            self._log.error(
                "Failed to verify double bookkeeping integrity", extra={"error": str(exc)}
            )
            return _error(str(exc), 500)

        data = result.to_dict()
        if result.is_valid:
            self._log.info(
                "Double bookkeeping integrity verified successfully",
                extra={
                    "total_debits": data["total_debits"],
                    "total_credits": data["total_credits"],
                },
            )
        else:
            self._log.warning(
                "Double bookkeeping integrity check failed",
                extra={
                    "total_debits": data["total_debits"],
                    "total_credits": data["total_credits"],
                    "difference": data["difference"],
                },
            )
        return jsonify(data), 200


def create_app(
    account_service: AccountService,
    transaction_service: TransactionService,
    integrity_service: IntegrityService,
    log: logging.Logger | None,
    db: Database,
) -> Flask:
    """Return the web application serving the ledger API."""
    logger = log if log is not None else logging.getLogger("goits")
    app = Flask("goits")

    accounts = AccountHandler(account_service, logger, db)
    transactions = TransactionHandler(transaction_service, logger, db)
    integrity = IntegrityHandler(integrity_service, logger, db)

    app.add_url_rule(
        "/accounts", "create_account", accounts.create_account, methods=["POST"]
    )
    app.add_url_rule(
        "/accounts/<account_id>", "get_account", accounts.get_account, methods=["GET"]
    )
    app.add_url_rule(
        "/transactions",
        "create_transaction",
        transactions.create_transaction,
        methods=["POST"],
    )
    app.add_url_rule(
        "/integrity/check", "check_integrity", integrity.check_integrity, methods=["GET"]
    )
    app.add_url_rule(
        "/swagger/doc.json",
        "swagger_doc",
        lambda: jsonify(swagger_spec()),
        methods=["GET"],
    )
    return app