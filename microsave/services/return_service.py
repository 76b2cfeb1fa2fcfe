"""
Returns calculation service.

Implements compound-growth projections for two investment vehicles:

* **NPS** (National Pension System) – 7.11 % p.a.; includes tax-benefit.
* **Index fund**                     – 14.49 % p.a.; tax-benefit = 0.

Pipeline per call
-----------------
1. Track totalTransactionAmount and totalCeiling across all supplied transactions.
2. Sum effective remanents (Q override, then P extras) per K period.
3. Compound-grow each K-bucket sum, deflate by inflation, compute tax benefit.

Assumptions
-----------
* ``wage`` received here is the **monthly** wage; annual income is ``wage × 12``.
* ``inflation`` received here is a **decimal** rate (caller divides % by 100);
  a non-positive value falls back to 5.5 %.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from decimal import Decimal
from typing import List

from microsave.models.schemas import (
    KRange,
    PRule,
    QRule,
    ReturnsResult,
    SavingsByDate,
    Transaction,
)
from microsave.services.temporal_service import compute_groups
from microsave.utils.financial import (
    MONTHS_PER_YEAR,
    ZERO,
    Scheme,
    compound_grow,
    compute_nps_deduction,
    compute_tax_benefit,
    inflation_adjusted,
    resolve_inflation,
    resolve_investment_years,
    round_money,
    to_decimal,
)

logger = logging.getLogger(__name__)


def project_savings(
    group: SavingsByDate,
    scheme: Scheme,
    years: int,
    inflation: Decimal,
    annual_income: Decimal,
) -> SavingsByDate:
    """
    Fill profit and tax benefit into one aggregated K group.

    profit = inflation_adjusted(future_value) − principal
    """
    principal = group.amount
    future_value = compound_grow(principal, scheme.annual_rate, years)
    real_value = inflation_adjusted(future_value, inflation, years)
    profit = real_value - principal

    tax_benefit = ZERO
    if scheme.tax_deductible:
        deduction = compute_nps_deduction(principal, annual_income)
        tax_benefit = compute_tax_benefit(annual_income, deduction)

    return replace(
        group,
        amount=round_money(principal),
        profit=round_money(profit),
        tax_benefit=round_money(tax_benefit),
    )


def calculate_returns(
    scheme: Scheme,
    age: int,
    wage: Decimal,
    inflation: Decimal,
    q_rules: List[QRule],
    p_rules: List[PRule],
    k_ranges: List[KRange],
    transactions: List[Transaction],
) -> ReturnsResult:
    """
    Full returns projection pipeline.

    Parameters
    ----------
    scheme:
        :data:`~microsave.utils.financial.NPS` or
        :data:`~microsave.utils.financial.INDEX`.
    age:
        Current age of the investor.
    wage:
        **Monthly** gross salary.
    inflation:
        Annual inflation rate as a **decimal** (e.g. ``Decimal("0.055")`` for 5.5 %).
    q_rules, p_rules, k_ranges:
        Temporal constraint definitions.
    transactions:
        Enriched transactions (ceiling + remanent already set).

    Returns
    -------
    ReturnsResult
        Aggregate totals and per-K savings projections, money rounded to 2 places.
    """
    years = resolve_investment_years(age)
    annual_income = to_decimal(wage) * MONTHS_PER_YEAR
    rate = resolve_inflation(to_decimal(inflation))

    groups = compute_groups(q_rules, p_rules, k_ranges, transactions)
    savings_by_dates = [
        project_savings(g, scheme, years, rate, annual_income) for g in groups
    ]

    total_amount = sum((t.amount for t in transactions), ZERO)
    total_ceiling = sum((t.ceiling for t in transactions), ZERO)

    logger.debug(
        "Projected %s returns over %d years for %d K periods",
        scheme.name, years, len(savings_by_dates),
    )

    return ReturnsResult(
        total_transaction_amount=round_money(total_amount),
        total_ceiling=round_money(total_ceiling),
        savings_by_dates=savings_by_dates,
    )
