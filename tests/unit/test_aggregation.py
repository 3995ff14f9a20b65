# -*- coding: utf-8 -*-
"""
Test Aggregation Engine

Regras de classificação por tipo/status e totais derivados do dashboard.
"""

import logging
from datetime import date, datetime, timezone
from decimal import Decimal

from pinee.services.aggregation import aggregate, compute_buckets


class TestClassification:
    def test_empty_list_is_all_zero(self):
        totals = aggregate([])

        assert totals.income_confirmed == 0
        assert totals.income_pending == 0
        assert totals.expense_paid == 0
        assert totals.expense_pending == 0
        assert totals.invested_total == 0
        assert totals.consolidated_balance == 0
        assert totals.projected_balance == 0
        assert totals.recent_transactions == []
        assert totals.chart_series == []

    def test_income_statuses(self, make_record):
        records = [
            make_record(type="income", status="received", amount=100),
            make_record(type="income", status="consolidated", amount=200),
            make_record(type="income", status="paid", amount=300),
            make_record(type="income", status="pending", amount=50),
            make_record(type="income", status="whatever", amount=7),
        ]
        buckets = compute_buckets(records)

        assert buckets.income_confirmed == Decimal("600")
        assert buckets.income_pending == Decimal("57")
        assert buckets.income_confirmed + buckets.income_pending == sum(r.amount for r in records)

    def test_expense_with_unknown_status_is_in_no_bucket(self, make_record):
        records = [
            make_record(type="expense", status="paid", amount=10),
            make_record(type="expense", status="unpaid", amount=20),
            make_record(type="expense", status="scheduled", amount=999),
        ]
        buckets = compute_buckets(records)

        assert buckets.expense_paid == Decimal("10")
        assert buckets.expense_pending == Decimal("20")

    def test_investment_always_counted(self, make_record):
        records = [
            make_record(type="investment", status="invested", amount=100),
            make_record(type="investment", status="pending", amount=40),
            make_record(type="investment", status="invested", amount=60, source_transaction_id="inc1"),
        ]
        buckets = compute_buckets(records)

        assert buckets.invested_total == Decimal("200")
        assert buckets.transferred_from_income == Decimal("60")

    def test_empty_source_id_is_not_a_transfer(self, make_record):
        buckets = compute_buckets([make_record(type="investment", amount=80, source_transaction_id="")])
        assert buckets.transferred_from_income == 0

    def test_unknown_type_is_ignored_and_logged(self, make_record, caplog):
        with caplog.at_level(logging.WARNING, logger="pinee.services.aggregation"):
            totals = aggregate([make_record(type="transfer", amount=500)])

        assert totals.projected_balance == 0
        assert totals.invested_total == 0
        assert "tipo desconhecido" in caplog.text


class TestDerivedTotals:
    def test_example_scenario(self, make_record):
        records = [
            make_record(type="income", status="received", amount=1000),
            make_record(type="expense", status="paid", amount=300),
            make_record(type="investment", status="invested", amount=200, source_transaction_id="tx1"),
        ]
        totals = aggregate(records)

        assert totals.income_confirmed == Decimal("1000")
        assert totals.expense_paid == Decimal("300")
        assert totals.invested_total == Decimal("200")
        assert compute_buckets(records).transferred_from_income == Decimal("200")
        assert totals.projected_balance == Decimal("500")
        assert totals.consolidated_balance == Decimal("500")

    def test_projected_balance_identity(self, make_record):
        records = [
            make_record(type="income", status="pending", amount="123.45"),
            make_record(type="income", status="received", amount="10.10"),
            make_record(type="expense", status="unpaid", amount="3.33"),
            make_record(type="expense", status="paid", amount="7.07"),
            make_record(type="investment", amount="1.01", source_transaction_id="x"),
        ]
        totals = aggregate(records)
        buckets = compute_buckets(records)

        assert totals.projected_balance == (
            (totals.income_confirmed + totals.income_pending)
            - (totals.expense_paid + totals.expense_pending)
            - buckets.transferred_from_income
        )

    def test_consolidated_uses_its_own_list_and_only_confirmed(self, make_record):
        selection = [make_record(type="income", status="pending", amount=500)]
        consolidated = [
            make_record(type="income", status="received", amount=1000),
            make_record(type="income", status="pending", amount=400),
            make_record(type="expense", status="paid", amount=100),
            make_record(type="expense", status="unpaid", amount=50),
            make_record(type="investment", amount=30, source_transaction_id="inc"),
        ]
        totals = aggregate(selection, consolidated)

        assert totals.projected_balance == Decimal("500")
        assert totals.consolidated_balance == Decimal("870")

    def test_idempotent(self, make_record):
        records = [
            make_record(type="income", status="received", amount=10, date="2024-02-02"),
            make_record(type="expense", status="paid", amount=3, date="2024-02-01"),
        ]
        assert aggregate(records) == aggregate(records)

    def test_does_not_mutate_input(self, make_record):
        records = [make_record(), make_record(type="income", status="received")]
        snapshot = list(records)
        aggregate(records)
        assert records == snapshot


class TestRecentTransactions:
    def test_top_five_by_created_at(self, make_record):
        records = [
            make_record(created_at=datetime(2024, 2, day, tzinfo=timezone.utc)) for day in (3, 1, 7, 5, 2, 6, 4)
        ]
        recent = aggregate(records).recent_transactions

        assert [r.created_at.day for r in recent] == [7, 6, 5, 4, 3]

    def test_ties_keep_input_order(self, make_record):
        same = datetime(2024, 2, 1, tzinfo=timezone.utc)
        records = [make_record(id=f"t{i}", created_at=same) for i in range(3)]

        assert [r.id for r in aggregate(records).recent_transactions] == ["t0", "t1", "t2"]


class TestChartSeries:
    def test_buckets_by_day_sorted(self, make_record):
        records = [
            make_record(type="expense", status="paid", amount=30, date="2024-02-10"),
            make_record(type="income", status="received", amount=100, date="2024-02-03"),
            make_record(type="expense", status="unpaid", amount=20, date="2024-02-10"),
            make_record(type="income", status="pending", amount=5, date="2024-02-10"),
            make_record(type="investment", amount=999, date="2024-02-05"),
        ]
        series = aggregate(records).chart_series

        assert [p.date for p in series] == [date(2024, 2, 3), date(2024, 2, 10)]
        assert series[0].income == Decimal("100") and series[0].expense == 0
        assert series[1].income == Decimal("5") and series[1].expense == Decimal("50")

    def test_days_strictly_increasing_and_income_sum(self, make_record):
        records = [
            make_record(type="income", status="received", amount=day, date=f"2024-03-{day:02d}")
            for day in (9, 1, 9, 20, 1)
        ]
        series = aggregate(records).chart_series
        dates = [p.date for p in series]

        assert dates == sorted(set(dates))
        assert sum(p.income for p in series) == sum(r.amount for r in records)

    def test_unparsable_date_only_leaves_the_series(self, make_record):
        records = [
            make_record(type="income", status="received", amount=100, date="2024-02-31"),
            make_record(type="income", status="received", amount=50, date="2024-02-01"),
        ]
        totals = aggregate(records)

        assert totals.income_confirmed == Decimal("150")
        assert [p.income for p in totals.chart_series] == [Decimal("50")]

    def test_investment_only_day_is_not_synthesized(self, make_record):
        series = aggregate([make_record(type="investment", amount=10, date="2024-02-02")]).chart_series
        assert series == []
