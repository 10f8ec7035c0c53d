"""
Formatting Module

Currency, date and percentage formatting shared by reports and exports.
"""

from datetime import datetime, timezone, tzinfo
from decimal import ROUND_HALF_UP, Decimal
from zoneinfo import ZoneInfo

DEFAULT_CURRENCY = "TZS"

# Month/day/year without zero padding, e.g. 1/5/2024
DATE_KEY_FORMAT = "%m/%d/%Y"


def resolve_timezone(tz: tzinfo | str | None) -> tzinfo:
    """Turn a zone name (or None) into a tzinfo."""
    if tz is None or tz == "UTC":
        return timezone.utc
    if isinstance(tz, str):
        return ZoneInfo(tz)
    return tz


def to_local(ts: datetime | str, tz: tzinfo | str | None = None) -> datetime:
    """Convert a timestamp to the viewer's time zone.

    Naive timestamps and ISO strings without an offset are taken as UTC.
    """
    if isinstance(ts, str):
        ts = datetime.fromisoformat(ts.replace("Z", "+00:00"))
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(resolve_timezone(tz))


def format_date(ts: datetime | str, tz: tzinfo | str | None = None) -> str:
    """Calendar date of a timestamp in the viewer's zone, as M/D/YYYY."""
    local = to_local(ts, tz)
    return f"{local.month}/{local.day}/{local.year}"


def parse_date_key(key: str) -> datetime:
    """Parse a M/D/YYYY date key (dashes also accepted)."""
    return datetime.strptime(key.replace("-", "/"), DATE_KEY_FORMAT)


def format_currency(amount: Decimal | float | int, currency: str = DEFAULT_CURRENCY) -> str:
    """Format an amount with thousands separators and no fraction digits."""
    rounded = Decimal(str(amount)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return f"{currency} {rounded:,.0f}"


def format_percent(value: float) -> str:
    return f"{value:.2f}%"
