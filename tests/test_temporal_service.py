from decimal import Decimal

from conftest import k_range, p_rule, q_rule, txn

from microsave.models.schemas import FilteredTransaction, RejectedTransaction
from microsave.services.temporal_service import (
    apply_temporal_filter,
    best_q_rule,
    classify_transaction,
    compute_groups,
    effective_remanent,
)
from microsave.utils.time_utils import parse_timestamp

JUNE_15 = parse_timestamp("2023-06-15 10:00:00")


def test_worked_example_effective_remanents(example_transactions, example_q, example_p, example_k):
    result = apply_temporal_filter(example_q, example_p, example_k, example_transactions)

    assert result.invalid == []
    assert [v.transaction.remanent for v in result.valid] == [75, 25, 0, 45]
    # amount and ceiling are carried over untouched
    assert [v.transaction.ceiling for v in result.valid] == [300, 400, 700, 500]


def test_filter_does_not_mutate_input(example_transactions, example_q, example_p, example_k):
    before = list(example_transactions)

    apply_temporal_filter(example_q, example_p, example_k, example_transactions)

    assert example_transactions == before
    assert [t.remanent for t in example_transactions] == [50, 25, 80, 20]


def test_latest_q_start_wins_regardless_of_order():
    early = q_rule(50, "2023-06-01 00:00:00", "2023-06-30 23:59:00")
    late = q_rule(99, "2023-06-10 00:00:00", "2023-06-30 23:59:00")

    assert best_q_rule(JUNE_15, [early, late]) is late
    assert best_q_rule(JUNE_15, [late, early]) is late


def test_equal_q_starts_first_listed_wins():
    first = q_rule(10, "2023-06-01 00:00:00", "2023-06-30 23:59:00")
    second = q_rule(20, "2023-06-01 00:00:00", "2023-06-20 23:59:00")

    assert best_q_rule(JUNE_15, [first, second]) is first
    assert best_q_rule(JUNE_15, [second, first]) is second


def test_q_not_containing_date_is_ignored():
    later_but_elsewhere = q_rule(99, "2023-06-20 00:00:00", "2023-06-30 23:59:00")
    covering = q_rule(7, "2023-06-01 00:00:00", "2023-06-30 23:59:00")

    assert best_q_rule(JUNE_15, [later_but_elsewhere, covering]) is covering


def test_p_extras_stack_in_any_order():
    p_rules = [
        p_rule(10, "2023-06-01 00:00:00", "2023-06-30 23:59:00"),
        p_rule(15, "2023-06-01 00:00:00", "2023-06-30 23:59:00"),
    ]

    assert effective_remanent(JUNE_15, Decimal("50"), [], p_rules) == Decimal("75")
    assert effective_remanent(JUNE_15, Decimal("50"), [], p_rules[::-1]) == Decimal("75")


def test_p_adds_on_top_of_q_override():
    q_rules = [q_rule(5, "2023-06-01 00:00:00", "2023-06-30 23:59:00")]
    p_rules = [p_rule(10, "2023-06-01 00:00:00", "2023-06-30 23:59:00")]

    assert effective_remanent(JUNE_15, Decimal("80"), q_rules, p_rules) == Decimal("15")


def test_empty_rules_leave_remanent_unchanged():
    assert effective_remanent(JUNE_15, Decimal("42.5"), [], []) == Decimal("42.5")


def test_k_membership_is_inclusive_at_both_ends():
    k = [k_range("2023-06-15 10:00:00", "2023-06-20 18:30:00")]
    at_start = txn("2023-06-15 10:00:00", 250, 300, 50)
    at_end = txn("2023-06-20 18:30:00", 250, 300, 50)
    just_after = txn("2023-06-20 18:30:01", 250, 300, 50)

    assert isinstance(classify_transaction(at_start, [], [], k), FilteredTransaction)
    assert isinstance(classify_transaction(at_end, [], [], k), FilteredTransaction)
    outcome = classify_transaction(just_after, [], [], k)
    assert isinstance(outcome, RejectedTransaction)
    assert outcome.reason == "Transaction date is outside all k period ranges"


def test_empty_k_accepts_everything(example_transactions):
    result = apply_temporal_filter([], [], [], example_transactions)

    assert len(result.valid) == 4
    assert result.invalid == []


def test_compute_groups_sums_per_k_in_input_order(example_transactions, example_q, example_p, example_k):
    groups = compute_groups(example_q, example_p, example_k, example_transactions)

    assert [g.amount for g in groups] == [75, 145]
    assert [g.start for g in groups] == ["2023-03-01 00:00:00", "2023-01-01 00:00:00"]
    assert all(g.profit == 0 and g.tax_benefit == 0 for g in groups)


def test_compute_groups_counts_transaction_in_every_overlapping_k(example_transactions):
    k = [
        k_range("2023-01-01 00:00:00", "2023-12-31 23:59:59"),
        k_range("2023-01-01 00:00:00", "2023-12-31 23:59:59"),
        k_range("2024-01-01 00:00:00", "2024-12-31 23:59:59"),
    ]

    groups = compute_groups([], [], k, example_transactions)

    assert [g.amount for g in groups] == [175, 175, 0]


def test_compute_groups_without_k_is_empty(example_transactions):
    assert compute_groups([], [], [], example_transactions) == []
