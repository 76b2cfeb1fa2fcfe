"""
Transaction builder service.

Responsibility: enrich raw expense data with *ceiling* and *remanent*
and aggregate totals.  Pure business logic – no I/O.
"""

from __future__ import annotations

import logging
from typing import List

from microsave.models.schemas import Expense, ParseResult, Transaction
from microsave.utils.financial import (
    ZERO,
    compute_ceiling,
    compute_remanent,
    to_decimal,
)
from microsave.utils.time_utils import parse_timestamp

logger = logging.getLogger(__name__)


def build_transaction(expense: Expense) -> Transaction:
    """Round a single expense up to its ceiling and attach the remanent."""
    amount = to_decimal(expense.amount)
    ceiling = compute_ceiling(amount)
    return Transaction(
        date=parse_timestamp(expense.timestamp),
        amount=amount,
        ceiling=ceiling,
        remanent=compute_remanent(ceiling, amount),
        raw_date=expense.timestamp,
    )


def build_transactions(expenses: List[Expense]) -> ParseResult:
    """
    Convert a list of raw expenses into enriched transactions.

    For each expense:
    * ``ceiling``  = next multiple of 100 above amount (100 for amount <= 0)
    * ``remanent`` = ceiling - amount

    Also returns aggregate totals:
    * ``totalAmount``
    * ``totalCeiling``
    * ``totalRemanent``

    Parameters
    ----------
    expenses:
        Raw expense records (timestamp + amount).

    Returns
    -------
    ParseResult
        Enriched transactions, in input order, and aggregate totals.

    Raises
    ------
    ParseError
        If any timestamp cannot be parsed.  No partial result is returned.
    """
    transactions: List[Transaction] = []
    total_amount = ZERO
    total_ceiling = ZERO
    total_remanent = ZERO

    for exp in expenses:
        t = build_transaction(exp)
        transactions.append(t)
        total_amount += t.amount
        total_ceiling += t.ceiling
        total_remanent += t.remanent

    logger.debug(
        "Parsed %d expenses (amount=%s, ceiling=%s, remanent=%s)",
        len(transactions), total_amount, total_ceiling, total_remanent,
    )

    return ParseResult(
        transactions=transactions,
        total_amount=total_amount,
        total_ceiling=total_ceiling,
        total_remanent=total_remanent,
    )
