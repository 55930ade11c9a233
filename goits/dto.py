"""Request and response bodies of the HTTP API."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any

_UINT_MAX = 2**64 - 1


class RequestError(Exception):
    """Raised when a request body does not describe a valid request."""


def _format_decimal(value: Decimal) -> str:
    if value == 0:
        return "0"
    text = format(value, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def _object(data: Any) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise RequestError("request body must be a JSON object")
    return data


def _uint(data: Mapping[str, Any], key: str) -> int:
    value = data.get(key)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise RequestError(f"{key} must be a non-negative integer")
    if not 0 <= value <= _UINT_MAX:
        raise RequestError(f"{key} must be a non-negative integer")
    return value


def _decimal(data: Mapping[str, Any], key: str) -> Decimal:
    value = data.get(key)
    if value is None:
        return Decimal(0)
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal, str)):
        raise RequestError(f"{key} must be a decimal number")
    if isinstance(value, float):
        value = repr(value)
    try:
        result = Decimal(value)
    except InvalidOperation:
        raise RequestError(f"{key} must be a decimal number") from None
    if not result.is_finite():
        raise RequestError(f"{key} must be a finite decimal number")
    return result


@dataclass(frozen=True)
class CreateAccountRequest:
    """Body of a request to open an account."""

    account_id: int = 0
    initial_balance: Decimal = Decimal(0)

    @classmethod
    def from_json(cls, data: Any) -> CreateAccountRequest:
        """Build the request from decoded JSON; absent fields default to zero."""
        body = _object(data)
        return cls(
            account_id=_uint(body, "account_id"),
            initial_balance=_decimal(body, "initial_balance"),
        )


@dataclass(frozen=True)
class GetAccountResponse:
    """Body of the reply describing one account."""

    account_id: int
    balance: Decimal
    version: int
    updated_at: datetime

    def to_dict(self) -> dict[str, Any]:
        """Return JSON-ready data, the balance as a decimal string."""
        return {
            "account_id": self.account_id,
            "balance": _format_decimal(Decimal(self.balance)),
            "version": self.version,
            "updated_at": self.updated_at.isoformat(),
        }


@dataclass(frozen=True)
class CreateTransactionRequest:
    """Body of a request to transfer funds."""

    source_account_id: int = 0
    destination_account_id: int = 0
    amount: Decimal = Decimal(0)

    @classmethod
    def from_json(cls, data: Any) -> CreateTransactionRequest:
        """Build the request from decoded JSON; absent fields default to zero."""
        body = _object(data)
        return cls(
            source_account_id=_uint(body, "source_account_id"),
            destination_account_id=_uint(body, "destination_account_id"),
            amount=_decimal(body, "amount"),
        )