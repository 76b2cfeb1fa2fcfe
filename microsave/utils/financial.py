"""
Financial utility functions.

All monetary values use :class:`decimal.Decimal` so that ceilings, tax
bands and tolerance checks never suffer from IEEE-754 drift.  Values are
quantized to 2 places only when they are presented.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_CEILING, ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Union

from microsave.errors import ParseError


# ── Constants ────────────────────────────────────────────────────────────────

HUNDRED = Decimal("100")
ZERO = Decimal("0")
ONE = Decimal("1")
CENT = Decimal("0.01")

NPS_ANNUAL_RATE = Decimal("0.0711")
INDEX_ANNUAL_RATE = Decimal("0.1449")
NPS_MAX_ABSOLUTE = Decimal("200000")
NPS_WAGE_FRACTION = Decimal("0.10")
DEFAULT_INFLATION = Decimal("0.055")
MONTHS_PER_YEAR = 12

RETIREMENT_AGE = 60
MIN_INVESTMENT_YEARS = 5

# Tax slab boundaries (INR)
_SLAB_7L = Decimal("700000")
_SLAB_10L = Decimal("1000000")
_SLAB_12L = Decimal("1200000")
_SLAB_15L = Decimal("1500000")


# ── Investment schemes ───────────────────────────────────────────────────────

@dataclass(frozen=True)
class Scheme:
    """An investment vehicle: its annual rate and whether it earns a tax deduction."""
    name: str
    annual_rate: Decimal
    tax_deductible: bool


NPS = Scheme(name="nps", annual_rate=NPS_ANNUAL_RATE, tax_deductible=True)
INDEX = Scheme(name="index", annual_rate=INDEX_ANNUAL_RATE, tax_deductible=False)


# ── Ceiling & remanent ───────────────────────────────────────────────────────

def compute_ceiling(amount: Decimal) -> Decimal:
    """
    Compute the *next* multiple of 100 above *amount*.

    Non-positive amounts always round to 100, and an exact multiple moves
    up to the following one.

    Examples
    --------
    >>> compute_ceiling(Decimal("150.75"))
    Decimal('200')
    >>> compute_ceiling(Decimal("200"))
    Decimal('300')
    >>> compute_ceiling(Decimal("-40"))
    Decimal('100')
    """
    if amount <= ZERO:
        return HUNDRED
    if amount % HUNDRED == ZERO:
        return amount + HUNDRED
    return (amount / HUNDRED).to_integral_value(rounding=ROUND_CEILING) * HUNDRED


def compute_remanent(ceiling: Decimal, amount: Decimal) -> Decimal:
    """Return ``ceiling - amount``."""
    return ceiling - amount


def investment_cap(monthly_wage: Decimal) -> Decimal:
    """Largest remanent a single transaction may carry: min(10 % of annual income, ₹2 L)."""
    return min(monthly_wage * MONTHS_PER_YEAR * NPS_WAGE_FRACTION, NPS_MAX_ABSOLUTE)


# ── Tax calculations ─────────────────────────────────────────────────────────

def calculate_tax(income: Decimal) -> Decimal:
    """
    Compute income tax under the simplified progressive slabs.

    Slabs
    -----
    0  – 7 L  :  0 %
    7  – 10 L : 10 %
    10 – 12 L : 15 %
    12 – 15 L : 20 %
    15 L +    : 30 %
    """
    if income <= ZERO:
        return ZERO

    tax = ZERO

    if income > _SLAB_7L:
        band = min(income, _SLAB_10L) - _SLAB_7L
        tax += band * Decimal("0.10")

    if income > _SLAB_10L:
        band = min(income, _SLAB_12L) - _SLAB_10L
        tax += band * Decimal("0.15")

    if income > _SLAB_12L:
        band = min(income, _SLAB_15L) - _SLAB_12L
        tax += band * Decimal("0.20")

    if income > _SLAB_15L:
        band = income - _SLAB_15L
        tax += band * Decimal("0.30")

    return tax


def compute_nps_deduction(invested: Decimal, annual_income: Decimal) -> Decimal:
    """
    NPS deduction = min(invested, 10 % of annual income, ₹2 L).
    """
    return min(invested, annual_income * NPS_WAGE_FRACTION, NPS_MAX_ABSOLUTE)


def compute_tax_benefit(annual_income: Decimal, deduction: Decimal) -> Decimal:
    """
    Tax saving from NPS deduction.

    taxBenefit = tax(income) - tax(income - deduction)
    """
    return calculate_tax(annual_income) - calculate_tax(annual_income - deduction)


# ── Compound interest ────────────────────────────────────────────────────────

def compound_grow(principal: Decimal, rate: Decimal, years: int) -> Decimal:
    """
    Future value: principal × (1 + rate)^years, compounded annually.
    """
    return principal * (ONE + rate) ** years


def inflation_adjusted(nominal: Decimal, inflation: Decimal, years: int) -> Decimal:
    """
    Real value: nominal / (1 + inflation)^years.
    """
    return nominal / (ONE + inflation) ** years


def resolve_inflation(inflation: Decimal) -> Decimal:
    """Use the supplied rate when positive, otherwise the 5.5 % default."""
    return inflation if inflation > ZERO else DEFAULT_INFLATION


def resolve_investment_years(age: int) -> int:
    """
    Return years until retirement (60).  Exactly 5 once already at or past 60.
    """
    if age >= RETIREMENT_AGE:
        return MIN_INVESTMENT_YEARS
    return RETIREMENT_AGE - age


# ── Serialisation helpers ────────────────────────────────────────────────────

def round_money(value: Decimal) -> Decimal:
    """Quantize to 2 decimal places (half-up) for presentation."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def decimal_to_float(value: Decimal) -> float:
    """Convert Decimal → float for JSON serialisation."""
    return float(value)


def to_decimal(value: Union[int, float, str, Decimal]) -> Decimal:
    """
    Safely convert a raw value to :class:`~decimal.Decimal`.

    Raises
    ------
    ParseError
        If *value* cannot be interpreted as a finite decimal number.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool) or value is None:
        raise ParseError(f"Cannot convert {value!r} to Decimal")
    try:
        result = Decimal(str(value))
    except (InvalidOperation, ValueError) as exc:
        raise ParseError(f"Cannot convert {value!r} to Decimal: {exc}") from exc
    if not result.is_finite():
        raise ParseError(f"Cannot convert {value!r} to Decimal: not a finite number")
    return result
