"""
Table Definitions

SQLAlchemy Core tables for the logical record store tables.
"""

from datetime import datetime, timezone

from sqlalchemy import (
    Column,
    DateTime,
    Integer,
    MetaData,
    Numeric,
    String,
    Table,
    Text,
)

metadata = MetaData()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


sales = Table(
    "sales",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("user_id", String(36), nullable=False, index=True),
    Column("description", Text, nullable=False),
    Column("quantity", Integer, nullable=False),
    Column("price", Numeric(14, 2), nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False, default=utcnow, index=True),
)

costs = Table(
    "costs",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("user_id", String(36), nullable=False, index=True),
    Column("description", Text, nullable=False),
    Column("amount", Numeric(14, 2), nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False, default=utcnow, index=True),
)

profiles = Table(
    "profiles",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("email", String(255), nullable=False),
    Column("role", String(16), nullable=False, default="user"),
)

# One summary snapshot per user
reports = Table(
    "reports",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("user_id", String(36), nullable=False, unique=True),
    Column("total_sales", Numeric(16, 2), nullable=False, default=0),
    Column("total_costs", Numeric(16, 2), nullable=False, default=0),
    Column("profit_loss", Numeric(16, 2), nullable=False, default=0),
    Column("sales_count", Integer, nullable=False, default=0),
    Column("costs_count", Integer, nullable=False, default=0),
    Column("created_at", DateTime(timezone=True), nullable=False, default=utcnow),
    Column("updated_at", DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow),
)

auth_users = Table(
    "auth_users",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("email", String(255), nullable=False, unique=True),
    Column("password_hash", String(255), nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False, default=utcnow),
)

TABLES = {table.name: table for table in (sales, costs, profiles, reports, auth_users)}
