# fastapi-backend/src/kiosk/formatting.py
from __future__ import annotations

from datetime import datetime
from typing import Callable


def format_currency(value: float, symbol: str = "$") -> str:
    """Format ``value`` as money, e.g. ``$1,234.50`` or ``-$12.00``."""
    amount = float(value or 0)
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.2f}"


def currency_formatter(symbol: str = "$") -> Callable[[float], str]:
    return lambda value: format_currency(value, symbol)


def format_chart_date(ts: datetime) -> str:
    # axis labels are month/day without zero padding, e.g. 1/5
    return f"{ts.month}/{ts.day}"
