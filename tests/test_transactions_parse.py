from decimal import Decimal

import pytest
from flask.testing import FlaskClient

from microsave.errors import ParseError
from microsave.models.schemas import Expense
from microsave.services.transaction_service import build_transactions


def test_transactions_parse(client: FlaskClient):
    payload = [
        {
            "date": "2024-03-15 10:30:00",
            "amount": 150.75
        }
    ]

    response = client.post(
        "/blackrock/challenge/v1/transactions:parse",
        json=payload
    )

    assert response.status_code == 200

    data = response.get_json()

    assert len(data["transactions"]) == 1
    assert data["transactions"][0]["amount"] == 150.75
    assert data["transactions"][0]["ceiling"] == 200
    assert data["transactions"][0]["remanent"] == 49.25
    assert "X-Response-Time-Ms" in response.headers


def test_transactions_parse_worked_example(client: FlaskClient):
    payload = {
        "expenses": [
            {"timestamp": "2023-10-12T20:15", "amount": 250},
            {"timestamp": "2023-02-28 15:49:20", "amount": 375},
            {"timestamp": "2023-07-01 21:59:00", "amount": 620},
            {"timestamp": "2023-12-17 08:09:45", "amount": 480},
        ]
    }

    response = client.post("/blackrock/challenge/v1/transactions:parse", json=payload)

    assert response.status_code == 200
    data = response.get_json()

    assert [t["ceiling"] for t in data["transactions"]] == [300, 400, 700, 500]
    assert [t["remanent"] for t in data["transactions"]] == [50, 25, 80, 20]
    assert data["transactions"][0]["date"] == "2023-10-12 20:15:00"
    assert data["totalAmount"] == 1725
    assert data["totalCeiling"] == 1900
    assert data["totalRemanent"] == 175


def test_transactions_parse_rejects_bad_timestamp(client: FlaskClient):
    payload = [{"date": "12/10/2023 20:15", "amount": 250}]

    response = client.post("/blackrock/challenge/v1/transactions:parse", json=payload)

    assert response.status_code == 422
    assert response.get_json()["error"] == "ParseError"


def test_transactions_parse_rejects_empty_list(client: FlaskClient):
    response = client.post("/blackrock/challenge/v1/transactions:parse", json=[])

    assert response.status_code == 422
    assert response.get_json()["error"] == "ConfigurationError"


def test_transactions_parse_rejects_non_json(client: FlaskClient):
    response = client.post(
        "/blackrock/challenge/v1/transactions:parse",
        data="not json",
        content_type="text/plain",
    )

    assert response.status_code == 400


def test_build_transactions_keeps_input_order_and_totals():
    expenses = [
        Expense(timestamp="2023-01-01 00:00:00", amount=Decimal("100")),
        Expense(timestamp="2023-01-02 00:00:00", amount=Decimal("-40")),
        Expense(timestamp="2023-01-03 00:00:00", amount=Decimal("1519")),
    ]

    result = build_transactions(expenses)

    assert [t.ceiling for t in result.transactions] == [200, 100, 1600]
    assert [t.remanent for t in result.transactions] == [100, 140, 81]
    assert result.total_amount == Decimal("1579")
    assert result.total_ceiling == Decimal("1900")
    assert result.total_remanent == Decimal("321")


def test_build_transactions_empty():
    result = build_transactions([])

    assert result.transactions == []
    assert result.total_amount == 0
    assert result.total_remanent == 0


def test_build_transactions_aborts_on_bad_timestamp():
    expenses = [
        Expense(timestamp="2023-01-01 00:00:00", amount=Decimal("10")),
        Expense(timestamp="yesterday", amount=Decimal("10")),
    ]

    with pytest.raises(ParseError):
        build_transactions(expenses)
