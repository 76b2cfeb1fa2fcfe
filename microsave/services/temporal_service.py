"""
Temporal constraints service: the period rule engine.

Three classes of date-range rules act on a transaction list:

Q – fixed override
    Replace the remanent with ``fixed``.  When several Q ranges contain the
    date, the one with the **latest start** wins; identical starts resolve to
    the one listed first.

P – additive extra
    Add ``extra`` to the (possibly Q-replaced) remanent for **every** P range
    containing the date.

K – grouping
    Reporting buckets.  Membership is independent of Q/P, inclusive at both
    ends, and not exclusive: overlapping K ranges each count the transaction.

Public entry-points
-------------------
apply_temporal_filter(q, p, k, transactions)
    Per-transaction K-membership classification (``:filter`` endpoint).

compute_groups(q, p, k, transactions)
    Per-K sums of effective remanents (input to the returns pipeline).
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from microsave.models.schemas import (
    FilteredTransaction,
    FilterOutcome,
    FilterResult,
    KRange,
    PRule,
    QRule,
    RejectedTransaction,
    SavingsByDate,
    Transaction,
)
from microsave.utils.financial import ZERO
from microsave.utils.time_utils import is_within_range

logger = logging.getLogger(__name__)

OUTSIDE_K_MESSAGE = "Transaction date is outside all k period ranges"


# ── Rule engine ──────────────────────────────────────────────────────────────

def best_q_rule(dt: datetime, q_rules: List[QRule]) -> Optional[QRule]:
    """
    Return the Q rule with the latest *start* date that contains *dt*.

    If two rules share the same start date, the first one in the list wins.
    """
    matching: List[QRule] = [
        r for r in q_rules if is_within_range(dt, r.start, r.end)
    ]
    if not matching:
        return None
    # max() keeps the first of equal keys
    return max(matching, key=lambda r: r.start)


def total_p_extra(dt: datetime, p_rules: List[PRule]) -> Decimal:
    """Sum *extra* from every P rule whose range contains *dt*."""
    return sum(
        (r.extra for r in p_rules if is_within_range(dt, r.start, r.end)),
        ZERO,
    )


def effective_remanent(
    dt: datetime,
    remanent: Decimal,
    q_rules: List[QRule],
    p_rules: List[PRule],
) -> Decimal:
    """Apply the Q override, then the stacked P extras, to *remanent*."""
    best_q = best_q_rule(dt, q_rules)
    if best_q is not None:
        remanent = best_q.fixed
    return remanent + total_p_extra(dt, p_rules)


def in_k_range(dt: datetime, k: KRange) -> bool:
    return is_within_range(dt, k.start, k.end)


def adjust_transaction(
    txn: Transaction,
    q_rules: List[QRule],
    p_rules: List[PRule],
) -> Transaction:
    """Copy of *txn* whose remanent is the effective remanent."""
    return replace(
        txn, remanent=effective_remanent(txn.date, txn.remanent, q_rules, p_rules)
    )


# ── Public API: filter ───────────────────────────────────────────────────────

def classify_transaction(
    txn: Transaction,
    q_rules: List[QRule],
    p_rules: List[PRule],
    k_ranges: List[KRange],
) -> FilterOutcome:
    """
    Adjust *txn* under Q/P and decide its K membership.

    An empty *k_ranges* list places no grouping constraint, so every
    transaction is accepted.
    """
    adjusted = adjust_transaction(txn, q_rules, p_rules)
    if not k_ranges or any(in_k_range(txn.date, k) for k in k_ranges):
        return FilteredTransaction(transaction=adjusted)
    return RejectedTransaction(transaction=adjusted, reason=OUTSIDE_K_MESSAGE)


def apply_temporal_filter(
    q_rules: List[QRule],
    p_rules: List[PRule],
    k_ranges: List[KRange],
    transactions: List[Transaction],
) -> FilterResult:
    """
    Apply Q → P rules to every transaction and gate it on K membership.

    Parameters
    ----------
    q_rules, p_rules, k_ranges:
        Temporal constraint definitions (any of them may be empty).
    transactions:
        Already-enriched transaction records.

    Returns
    -------
    FilterResult
        ``valid`` – adjusted transactions inside at least one K range
        (all of them when *k_ranges* is empty).
        ``invalid`` – adjusted transactions outside every K range.
    """
    valid: List[FilteredTransaction] = []
    invalid: List[RejectedTransaction] = []

    for txn in transactions:
        outcome = classify_transaction(txn, q_rules, p_rules, k_ranges)
        if isinstance(outcome, FilteredTransaction):
            valid.append(outcome)
        else:
            invalid.append(outcome)

    logger.debug(
        "Filtered %d transactions: %d valid, %d outside K",
        len(transactions), len(valid), len(invalid),
    )

    return FilterResult(valid=valid, invalid=invalid)


# ── Public API: aggregation ──────────────────────────────────────────────────

def compute_groups(
    q_rules: List[QRule],
    p_rules: List[PRule],
    k_ranges: List[KRange],
    transactions: List[Transaction],
) -> List[SavingsByDate]:
    """
    Sum effective remanents per K range.

    One entry per K range, in input order.  A transaction contributes to
    every K range that contains it.  ``profit`` and ``tax_benefit`` are left
    at zero for the returns service to fill in.
    """
    adjusted = [adjust_transaction(t, q_rules, p_rules) for t in transactions]

    groups: List[SavingsByDate] = []
    for k in k_ranges:
        amount = sum(
            (t.remanent for t in adjusted if in_k_range(t.date, k)),
            ZERO,
        )
        groups.append(
            SavingsByDate(
                start=k.raw_start,
                end=k.raw_end,
                amount=amount,
                profit=ZERO,
                tax_benefit=ZERO,
            )
        )

    logger.debug("Grouped %d transactions into %d K ranges", len(transactions), len(groups))
    return groups
