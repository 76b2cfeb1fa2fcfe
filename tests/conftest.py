from decimal import Decimal

import pytest

from microsave import create_app
from microsave.models.schemas import KRange, PRule, QRule, Transaction
from microsave.utils.time_utils import parse_timestamp

BASE = "/blackrock/challenge/v1"


@pytest.fixture
def app():
    app = create_app()
    app.config.update(TESTING=True)
    return app


@pytest.fixture
def client(app):
    return app.test_client()


def txn(date, amount, ceiling, remanent):
    return Transaction(
        date=parse_timestamp(date),
        amount=Decimal(str(amount)),
        ceiling=Decimal(str(ceiling)),
        remanent=Decimal(str(remanent)),
        raw_date=date,
    )


def q_rule(fixed, start, end):
    return QRule(fixed=Decimal(str(fixed)), start=parse_timestamp(start), end=parse_timestamp(end))


def p_rule(extra, start, end):
    return PRule(extra=Decimal(str(extra)), start=parse_timestamp(start), end=parse_timestamp(end))


def k_range(start, end):
    return KRange(start=parse_timestamp(start), end=parse_timestamp(end), raw_start=start, raw_end=end)


@pytest.fixture
def example_transactions():
    """The four-expense worked example, already rounded up."""
    return [
        txn("2023-10-12 20:15:00", 250, 300, 50),
        txn("2023-02-28 15:49:00", 375, 400, 25),
        txn("2023-07-01 21:59:00", 620, 700, 80),
        txn("2023-12-17 08:09:00", 480, 500, 20),
    ]


@pytest.fixture
def example_q():
    return [q_rule(0, "2023-07-01 00:00:00", "2023-07-31 23:59:00")]


@pytest.fixture
def example_p():
    return [p_rule(25, "2023-10-01 08:00:00", "2023-12-31 19:59:00")]


@pytest.fixture
def example_k():
    return [
        k_range("2023-03-01 00:00:00", "2023-11-30 23:59:00"),
        k_range("2023-01-01 00:00:00", "2023-12-31 23:59:00"),
    ]
