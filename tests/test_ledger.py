"""
Ledger and User Management Tests
"""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from bookkeeping.errors import AuthorizationError, InvalidInputError, NotFoundError
from bookkeeping.ledger import CostLedger, SalesLedger
from bookkeeping.models import NewSale, Role
from bookkeeping.users import UserManager

from conftest import PASSWORD, add_cost, add_sale, days_ago


class TestSalesLedger:
    """Tests for SalesLedger."""

    def test_add_returns_created_row(self, store, user_ctx):
        ledger = SalesLedger(store)

        sale = ledger.add(user_ctx, NewSale(description="  Pencils ", quantity=12, price=Decimal("300")))

        assert sale.id > 0
        assert sale.user_id == user_ctx.user_id
        assert sale.description == "Pencils"
        assert sale.total == Decimal("3600")
        assert sale.created_at.tzinfo is not None

    def test_add_from_dict_validates(self, store, user_ctx):
        ledger = SalesLedger(store)

        with pytest.raises(ValidationError):
            ledger.add(user_ctx, {"description": "Pencils", "quantity": 0, "price": 300})
        with pytest.raises(ValidationError):
            ledger.add(user_ctx, {"description": "Pencils", "quantity": 1, "price": -1})
        with pytest.raises(ValidationError):
            ledger.add(user_ctx, {"description": "   ", "quantity": 1, "price": 1})

    def test_list_newest_first_and_scoped(self, store, user_ctx, other_ctx):
        add_sale(store, user_ctx.user_id, 10, description="old", created_at=days_ago(3))
        add_sale(store, user_ctx.user_id, 10, description="new", created_at=days_ago(1))
        add_sale(store, other_ctx.user_id, 10, description="theirs")

        sales = SalesLedger(store).list_entries(user_ctx)

        assert [s.description for s in sales] == ["new", "old"]

    def test_delete_is_owner_scoped(self, store, user_ctx, other_ctx):
        ledger = SalesLedger(store)
        mine = add_sale(store, user_ctx.user_id, 10)

        with pytest.raises(NotFoundError):
            ledger.delete(other_ctx, mine["id"])

        ledger.delete(user_ctx, mine["id"])
        assert ledger.list_entries(user_ctx) == []

    def test_submit_daily_report_counts_today(self, store, user_ctx):
        add_sale(store, user_ctx.user_id, 10)
        add_sale(store, user_ctx.user_id, 10, created_at=days_ago(3))

        result = SalesLedger(store).submit_daily_report(user_ctx, "UTC")

        assert result["count"] == 1


class TestCostLedger:
    """Tests for CostLedger."""

    def test_today_and_recent(self, store, user_ctx):
        ledger = CostLedger(store)
        add_cost(store, user_ctx.user_id, 5, description="yesterday", created_at=days_ago(1))
        for i in range(12):
            add_cost(store, user_ctx.user_id, i, description=f"today {i}")

        assert len(ledger.today(user_ctx, "UTC")) == 12
        recent = ledger.recent(user_ctx, limit=10)
        assert len(recent) == 10
        assert all(c.description.startswith("today") for c in recent)

    def test_add_cost(self, store, user_ctx):
        cost = CostLedger(store).add(user_ctx, {"description": "Rent", "amount": "250000"})

        assert cost.amount == Decimal("250000")


class TestUserManager:
    """Tests for UserManager."""

    def test_list_requires_admin(self, store, provider, user_ctx, admin_ctx):
        users = UserManager(store, provider)

        with pytest.raises(AuthorizationError):
            users.list_users(user_ctx)
        emails = [p.email for p in users.list_users(admin_ctx)]
        assert emails == ["clerk@example.com", "owner@example.com"]

    def test_set_and_toggle_role(self, store, provider, user_ctx, admin_ctx):
        users = UserManager(store, provider)

        assert users.set_role(admin_ctx, user_ctx.user_id, "admin").role == Role.ADMIN
        assert users.toggle_role(admin_ctx, user_ctx.user_id).role == Role.USER

    def test_invalid_role(self, store, provider, user_ctx, admin_ctx):
        with pytest.raises(InvalidInputError):
            UserManager(store, provider).set_role(admin_ctx, user_ctx.user_id, "superuser")

    def test_unknown_user(self, store, provider, admin_ctx):
        with pytest.raises(NotFoundError):
            UserManager(store, provider).set_role(admin_ctx, "missing", Role.ADMIN)

    def test_create_user(self, store, provider, admin_ctx):
        identity = UserManager(store, provider).create_user(admin_ctx, "hire@example.com", PASSWORD)

        assert store.select_one("profiles", eq={"id": identity.user_id})["role"] == "user"
