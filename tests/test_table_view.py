"""
Table View Tests

Tests for sorting and filtering the sales and cost tables.
"""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from bookkeeping.models import Sale
from bookkeeping.reports.table_view import (
    COST_FIELDS,
    SALE_FIELDS,
    SortDirection,
    filter_rows,
    sort_rows,
)


@pytest.fixture
def sales() -> list[dict]:
    def row(id_, description, quantity, price, day):
        return {
            "id": id_,
            "user_id": "u1",
            "description": description,
            "quantity": quantity,
            "price": Decimal(price),
            "created_at": datetime(2024, 1, day, 9, tzinfo=timezone.utc),
        }

    return [
        row(1, "Exercise Books", 5, "1500", 3),
        row(2, "Blue Pens", 2, "500", 1),
        row(3, "Printer Paper", 5, "12000", 2),
        row(4, "Red pens", 1, "500", 3),
        row(5, "Stapler", 2, "7000", 1),
    ]


class TestSortRows:
    """Tests for sort_rows."""

    def test_ascending_by_number(self, sales):
        ordered = sort_rows(sales, "price", SortDirection.ASC)

        assert [r["id"] for r in ordered] == [2, 4, 1, 5, 3]

    def test_descending_keeps_ties_in_input_order(self, sales):
        """Test ties keep relative input order in both directions."""
        asc = [r["id"] for r in sort_rows(sales, "quantity", "asc")]
        desc = [r["id"] for r in sort_rows(sales, "quantity", "desc")]

        assert asc == [4, 2, 5, 1, 3]
        assert desc == [1, 3, 2, 5, 4]

    def test_by_text(self, sales):
        ordered = sort_rows(sales, "description", "asc")

        assert [r["description"] for r in ordered][:2] == ["Blue Pens", "Exercise Books"]

    def test_does_not_mutate_input(self, sales):
        before = [r["id"] for r in sales]
        sort_rows(sales, "price", "desc")

        assert [r["id"] for r in sales] == before

    def test_works_on_models(self, sales):
        models = [Sale(**row) for row in sales]

        ordered = sort_rows(models, "created_at", "desc")

        assert [m.id for m in ordered] == [1, 4, 3, 2, 5]

    def test_unknown_field(self, sales):
        with pytest.raises(ValueError):
            sort_rows(sales, "user_id", "asc")

    def test_amount_only_on_costs(self):
        with pytest.raises(ValueError):
            sort_rows([], "price", "asc", COST_FIELDS)


class TestFilterRows:
    """Tests for filter_rows."""

    def test_description_case_insensitive(self, sales):
        matched = filter_rows(sales, {"description": "PENS"})

        assert [r["id"] for r in matched] == [2, 4]

    def test_no_match_is_empty(self, sales):
        assert filter_rows(sales, {"description": "laptop"}) == []

    def test_date_substring(self, sales):
        matched = filter_rows(sales, {"created_at": "1/3/2024"}, SALE_FIELDS, "UTC")

        assert [r["id"] for r in matched] == [1, 4]

    def test_conjunction(self, sales):
        matched = filter_rows(sales, {"description": "pens", "created_at": "1/1/"})

        assert [r["id"] for r in matched] == [2]

    def test_empty_filters_keep_everything(self, sales):
        assert filter_rows(sales, {"description": None, "created_at": ""}) == sales

    def test_unknown_filter_field(self, sales):
        with pytest.raises(ValueError):
            filter_rows(sales, {"colour": "red"})

    def test_filter_and_sort_commute(self, sales):
        filtered_then_sorted = sort_rows(filter_rows(sales, {"quantity": "5"}), "price", "desc")
        sorted_then_filtered = filter_rows(sort_rows(sales, "price", "desc"), {"quantity": "5"})

        assert filtered_then_sorted == sorted_then_filtered
        assert [r["id"] for r in filtered_then_sorted] == [3, 1]

    def test_idempotent(self, sales):
        once = filter_rows(sales, {"description": "e"})

        assert filter_rows(once, {"description": "e"}) == once
