"""
Daily Report Tests

Tests for per-day aggregation, the lookback window and derived figures.
"""

import asyncio
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from bookkeeping.errors import AuthenticationError, NotFoundError, RemoteCallError
from bookkeeping.reports.daily import (
    DailyReport,
    aggregate_daily,
    fetch_daily_reports,
    find_daily_report,
)
from bookkeeping.reports.formatting import format_date
from bookkeeping.store.identity import SessionContext
from bookkeeping.store.record_store import RecordStore

from conftest import add_cost, add_sale, days_ago


def ts(year, month, day, hour=10):
    return datetime(year, month, day, hour, tzinfo=timezone.utc)


class TestAggregateDaily:
    """Tests for aggregate_daily."""

    def test_sales_and_costs_on_same_day(self):
        """Test the worked example: 2 x 1000 sales against 500 costs."""
        sales = [{"created_at": ts(2024, 1, 1), "price": Decimal("1000"), "quantity": 2}]
        costs = [{"created_at": ts(2024, 1, 1), "amount": Decimal("500")}]

        reports = aggregate_daily(sales, costs, "UTC")

        assert len(reports) == 1
        report = reports[0]
        assert report.date == "1/1/2024"
        assert report.total_sales == Decimal("2000")
        assert report.total_costs == Decimal("500")
        assert report.net_profit == Decimal("1500")
        assert report.profit_margin == 75.0

    def test_cost_only_day_has_zero_margin(self):
        """Test a day without sales yields margin 0, not an error."""
        costs = [{"created_at": ts(2024, 3, 2), "amount": Decimal("250")}]

        reports = aggregate_daily([], costs, "UTC")

        assert reports[0].total_sales == Decimal("0")
        assert reports[0].total_costs == Decimal("250")
        assert reports[0].profit_margin == 0.0
        assert reports[0].net_profit == Decimal("-250")

    def test_one_report_per_distinct_date(self):
        """Test disjoint dates each get exactly one entry with the missing side at zero."""
        sales = [
            {"created_at": ts(2024, 2, 1), "price": 100, "quantity": 1},
            {"created_at": ts(2024, 2, 1, 15), "price": 50, "quantity": 3},
            {"created_at": ts(2024, 2, 3), "price": 10, "quantity": 10},
        ]
        costs = [
            {"created_at": ts(2024, 2, 2), "amount": 40},
            {"created_at": ts(2024, 2, 2, 18), "amount": 60},
        ]

        reports = aggregate_daily(sales, costs, "UTC")
        by_date = {r.date: r for r in reports}

        assert set(by_date) == {"2/1/2024", "2/2/2024", "2/3/2024"}
        assert by_date["2/1/2024"].total_sales == Decimal("250")
        assert by_date["2/1/2024"].total_costs == Decimal("0")
        assert by_date["2/2/2024"].total_sales == Decimal("0")
        assert by_date["2/2/2024"].total_costs == Decimal("100")
        assert by_date["2/3/2024"].total_sales == Decimal("100")

    def test_sorted_newest_first_across_year_boundary(self):
        """Test ordering uses parsed dates, not string order."""
        sales = [
            {"created_at": ts(2023, 12, 31), "price": 1, "quantity": 1},
            {"created_at": ts(2024, 1, 2), "price": 1, "quantity": 1},
            {"created_at": ts(2024, 1, 10), "price": 1, "quantity": 1},
        ]

        reports = aggregate_daily(sales, [], "UTC")

        assert [r.date for r in reports] == ["1/10/2024", "1/2/2024", "12/31/2023"]

    def test_day_follows_viewer_time_zone(self):
        """Test a late UTC timestamp lands on the next local day east of UTC."""
        sales = [{"created_at": ts(2024, 5, 1, 23), "price": 10, "quantity": 1}]
        east_africa = timezone(timedelta(hours=3))

        assert aggregate_daily(sales, [], "UTC")[0].date == "5/1/2024"
        assert aggregate_daily(sales, [], east_africa)[0].date == "5/2/2024"

    def test_iso_string_timestamps(self):
        """Test rows carrying ISO strings are accepted."""
        sales = [{"created_at": "2024-06-15T08:30:00+00:00", "price": "12.50", "quantity": 2}]

        reports = aggregate_daily(sales, [], "UTC")

        assert reports[0].date == "6/15/2024"
        assert reports[0].total_sales == Decimal("25.00")

    def test_empty_input(self):
        assert aggregate_daily([], [], "UTC") == []

    def test_to_dict(self):
        report = DailyReport(date="1/1/2024", total_sales=Decimal("300"), total_costs=Decimal("100"))

        data = report.to_dict()

        assert data["net_profit"] == 200.0
        assert data["profit_margin"] == 66.67


class TestFindDailyReport:
    """Tests for find_daily_report."""

    def test_accepts_dashed_key(self):
        reports = [DailyReport(date="1/5/2024"), DailyReport(date="1/4/2024")]

        assert find_daily_report(reports, "1-4-2024").date == "1/4/2024"

    def test_missing_day(self):
        with pytest.raises(NotFoundError):
            find_daily_report([DailyReport(date="1/5/2024")], "1/6/2024")

    def test_malformed_key(self):
        with pytest.raises(ValueError):
            find_daily_report([], "yesterday")


class TestFetchDailyReports:
    """Tests for fetch_daily_reports against the record store."""

    def test_window_and_ownership(self, store: RecordStore, user_ctx: SessionContext, other_ctx: SessionContext):
        """Test only the user's rows inside the window are aggregated."""
        add_sale(store, user_ctx.user_id, 1000, 2, created_at=days_ago(1))
        add_cost(store, user_ctx.user_id, 500, created_at=days_ago(1))
        add_sale(store, user_ctx.user_id, 999, 1, created_at=days_ago(30))
        add_sale(store, other_ctx.user_id, 5000, 1, created_at=days_ago(1))

        reports = asyncio.run(fetch_daily_reports(store, user_ctx, lookback_days=7, tz="UTC"))

        assert len(reports) == 1
        assert reports[0].date == format_date(days_ago(1), "UTC")
        assert reports[0].total_sales == Decimal("2000")
        assert reports[0].total_costs == Decimal("500")

    def test_unbounded_window(self, store: RecordStore, user_ctx: SessionContext):
        add_sale(store, user_ctx.user_id, 10, 1, created_at=days_ago(1))
        add_sale(store, user_ctx.user_id, 10, 1, created_at=days_ago(90))

        reports = asyncio.run(fetch_daily_reports(store, user_ctx, lookback_days=None, tz="UTC"))

        assert len(reports) == 2

    def test_failed_read_aborts_without_partial_result(self, store: RecordStore, user_ctx: SessionContext):
        """Test a failing cost read fails the whole aggregation."""

        class FailingCostsStore(RecordStore):
            async def fetch(self, table, **filters):
                if table == "costs":
                    raise RemoteCallError("Select on costs failed")
                return await super().fetch(table, **filters)

        add_sale(store, user_ctx.user_id, 10, 1, created_at=days_ago(1))
        failing = FailingCostsStore(store.engine)

        with pytest.raises(RemoteCallError) as excinfo:
            asyncio.run(fetch_daily_reports(failing, user_ctx, tz="UTC"))

        assert "Please try again" in excinfo.value.message

    def test_requires_identity(self, store: RecordStore, policy):
        with pytest.raises(AuthenticationError):
            asyncio.run(fetch_daily_reports(store, SessionContext(None, policy)))
