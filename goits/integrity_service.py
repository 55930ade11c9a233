"""Checking that the journal's debits and credits balance."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from goits.domain import EntryType, ServiceError
from goits.repository import JournalRepository


def _format_decimal(value: Decimal) -> str:
    if value == 0:
        return "0"
    text = format(value, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


@dataclass(frozen=True)
class IntegrityResult:
    """Outcome of a double-bookkeeping check."""

    is_valid: bool
    total_debits: Decimal
    total_credits: Decimal
    difference: Decimal

    def to_dict(self) -> dict[str, Any]:
        """Return the result as JSON-ready data, amounts as decimal strings."""
        return {
            "is_valid": self.is_valid,
            "total_debits": _format_decimal(self.total_debits),
            "total_credits": _format_decimal(self.total_credits),
            "difference": _format_decimal(self.difference),
        }


class IntegrityService:
    """Verifies that total debits equal total credits."""

    def __init__(self, journal_repo: JournalRepository) -> None:
        self._journal = journal_repo

    def verify_double_bookkeeping(self) -> IntegrityResult:
        """Sum the journal by entry type and compare the two sides."""
        try:
            totals = self._journal.get_totals_by_entry_type(None)
        except Exception as exc:
            raise ServiceError(f"failed to get totals by entry type: {exc}") from exc

        debits = Decimal(totals.get(EntryType.DEBIT, Decimal(0)))
        credits = Decimal(totals.get(EntryType.CREDIT, Decimal(0)))
        difference = debits - credits
        return IntegrityResult(
            is_valid=difference == 0,
            total_debits=debits,
            total_credits=credits,
            difference=difference,
        )