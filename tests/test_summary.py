"""
Summary Totals Tests
"""

import asyncio
import random
from decimal import Decimal

import pytest

from bookkeeping.errors import NotFoundError
from bookkeeping.reports.summary import (
    SummaryTotals,
    fetch_summary,
    load_snapshot,
    save_snapshot,
    summarize,
)

from conftest import add_cost, add_sale, days_ago


class TestSummarize:
    """Tests for summarize."""

    def test_totals_and_counts(self):
        sales = [
            {"price": Decimal("1000"), "quantity": 2},
            {"price": Decimal("250.50"), "quantity": 4},
        ]
        costs = [{"amount": Decimal("300")}, {"amount": Decimal("199.99")}, {"amount": 0}]

        totals = summarize(sales, costs)

        assert totals.total_sales == Decimal("3002.00")
        assert totals.total_costs == Decimal("499.99")
        assert totals.sales_count == 2
        assert totals.costs_count == 3
        assert totals.profit_loss == Decimal("2502.01")

    def test_independent_of_row_order(self):
        sales = [{"price": Decimal(p), "quantity": q} for p, q in [("10", 1), ("7.25", 3), ("100", 2)]]
        costs = [{"amount": Decimal(a)} for a in ["1", "2.5", "30"]]
        shuffled_sales = sales[:]
        shuffled_costs = costs[:]
        random.Random(7).shuffle(shuffled_sales)
        random.Random(7).shuffle(shuffled_costs)

        assert summarize(sales, costs) == summarize(shuffled_sales, shuffled_costs)

    def test_empty(self):
        totals = summarize([], [])

        assert totals == SummaryTotals()
        assert totals.to_dict()["profit_loss"] == 0.0


class TestFetchSummary:
    """Tests for fetch_summary and the report snapshot."""

    def test_unbounded_by_default(self, store, user_ctx, other_ctx):
        """Test summary covers old rows, unlike the daily window."""
        add_sale(store, user_ctx.user_id, 100, 3, created_at=days_ago(1))
        add_sale(store, user_ctx.user_id, 50, 1, created_at=days_ago(400))
        add_cost(store, user_ctx.user_id, 80, created_at=days_ago(200))
        add_cost(store, other_ctx.user_id, 1000)

        totals = asyncio.run(fetch_summary(store, user_ctx))

        assert totals.total_sales == Decimal("350")
        assert totals.total_costs == Decimal("80")
        assert totals.sales_count == 2
        assert totals.costs_count == 1

    def test_window(self, store, user_ctx):
        add_sale(store, user_ctx.user_id, 100, 1, created_at=days_ago(1))
        add_sale(store, user_ctx.user_id, 100, 1, created_at=days_ago(40))

        totals = asyncio.run(fetch_summary(store, user_ctx, lookback_days=30))

        assert totals.sales_count == 1

    def test_snapshot_missing_is_not_found(self, store, user_ctx):
        with pytest.raises(NotFoundError):
            load_snapshot(store, user_ctx)

    def test_snapshot_upsert_keeps_one_row(self, store, user_ctx):
        save_snapshot(store, user_ctx, SummaryTotals(Decimal("100"), Decimal("40"), 1, 1))
        save_snapshot(store, user_ctx, SummaryTotals(Decimal("300"), Decimal("40"), 2, 1))

        row = load_snapshot(store, user_ctx)

        assert row["total_sales"] == Decimal("300")
        assert row["profit_loss"] == Decimal("260")
        assert row["sales_count"] == 2
        assert len(store.select("reports", eq={"user_id": user_ctx.user_id})) == 1
