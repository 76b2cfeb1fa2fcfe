"""
Immutable data models / schemas for the micro-savings engine.

These dataclasses serve as typed containers that travel between
the route → service → util layers.  No business logic lives here;
``to_dict`` exists only for the JSON adapter.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import List, Union

from microsave.utils.financial import decimal_to_float
from microsave.utils.time_utils import format_timestamp


#Raw input atoms
@dataclass(frozen=True)
class Expense:
    """Single raw expense row as received from the client."""
    timestamp: str
    amount: Decimal


#Enriched transaction (output of the rounding engine)
@dataclass(frozen=True)
class Transaction:
    """
    A transaction with ceiling and remanent attached.

    Produced once by the builder and never mutated; later stages
    build adjusted copies with :func:`dataclasses.replace`.

    ``raw_date`` keeps the date string exactly as supplied; duplicate
    detection compares it verbatim.
    """
    date: datetime
    amount: Decimal
    ceiling: Decimal
    remanent: Decimal
    raw_date: str = field(default="", compare=False)

    @property
    def date_key(self) -> str:
        return self.raw_date or format_timestamp(self.date)

    def to_dict(self) -> dict:
        return {
            "date": format_timestamp(self.date),
            "amount": decimal_to_float(self.amount),
            "ceiling": decimal_to_float(self.ceiling),
            "remanent": decimal_to_float(self.remanent),
        }


#Parser output
@dataclass(frozen=True)
class ParseResult:
    """Output of the transaction builder service."""
    transactions: List[Transaction]
    total_amount: Decimal
    total_ceiling: Decimal
    total_remanent: Decimal

    def to_dict(self) -> dict:
        return {
            "transactions": [t.to_dict() for t in self.transactions],
            "totalAmount": decimal_to_float(self.total_amount),
            "totalCeiling": decimal_to_float(self.total_ceiling),
            "totalRemanent": decimal_to_float(self.total_remanent),
        }


#Validation output
@dataclass(frozen=True)
class InvalidTransaction:
    """A transaction that failed one or more validation rules."""
    transaction: Transaction
    message: str

    def to_dict(self) -> dict:
        d = self.transaction.to_dict()
        d["message"] = self.message
        return d


@dataclass(frozen=True)
class ValidationResult:
    """Output of the transaction validator service."""
    valid: List[Transaction]
    invalid: List[InvalidTransaction]
    duplicates: List[InvalidTransaction]

    def to_dict(self) -> dict:
        return {
            "valid": [t.to_dict() for t in self.valid],
            "invalid": [t.to_dict() for t in self.invalid],
            "duplicates": [t.to_dict() for t in self.duplicates],
        }


#Temporal rule definitions
@dataclass(frozen=True)
class QRule:
    """Replace *remanent* with *fixed* for transactions in [start, end]."""
    fixed: Decimal
    start: datetime
    end: datetime


@dataclass(frozen=True)
class PRule:
    """Add *extra* to *remanent* for transactions in [start, end]."""
    extra: Decimal
    start: datetime
    end: datetime


@dataclass(frozen=True)
class KRange:
    """Reporting bucket; a transaction belongs to it iff start <= date <= end."""
    start: datetime
    end: datetime
    raw_start: str = ""
    raw_end: str = ""


#Temporal filter output
@dataclass(frozen=True)
class FilteredTransaction:
    """A transaction inside at least one K range; remanent is the effective one."""
    transaction: Transaction

    def to_dict(self) -> dict:
        return self.transaction.to_dict()


@dataclass(frozen=True)
class RejectedTransaction:
    """A transaction outside every K range, with the reason it was rejected."""
    transaction: Transaction
    reason: str

    def to_dict(self) -> dict:
        d = self.transaction.to_dict()
        d["message"] = self.reason
        return d


FilterOutcome = Union[FilteredTransaction, RejectedTransaction]


@dataclass(frozen=True)
class FilterResult:
    """Output of the temporal constraints filter service."""
    valid: List[FilteredTransaction]
    invalid: List[RejectedTransaction]

    def to_dict(self) -> dict:
        return {
            "valid": [t.to_dict() for t in self.valid],
            "invalid": [t.to_dict() for t in self.invalid],
        }


#Returns output schemas
@dataclass(frozen=True)
class SavingsByDate:
    """
    Aggregate and projected return for one K period.

    ``start`` and ``end`` are stored as the **original input strings** so that
    calendar oddities like ``"2023-11-31"`` are echoed back verbatim.
    """
    start: str
    end: str
    amount: Decimal
    profit: Decimal
    tax_benefit: Decimal

    def to_dict(self) -> dict:
        return {
            "start": self.start,
            "end": self.end,
            "amount": decimal_to_float(self.amount),
            "profit": decimal_to_float(self.profit),
            "taxBenefit": decimal_to_float(self.tax_benefit),
        }


@dataclass(frozen=True)
class ReturnsResult:
    """Output of the returns service for either scheme."""
    total_transaction_amount: Decimal
    total_ceiling: Decimal
    savings_by_dates: List[SavingsByDate]

    def to_dict(self) -> dict:
        return {
            "totalTransactionAmount": decimal_to_float(self.total_transaction_amount),
            "totalCeiling": decimal_to_float(self.total_ceiling),
            "savingsByDates": [s.to_dict() for s in self.savings_by_dates],
        }
