# fastapi-backend/src/kiosk/stats.py
from __future__ import annotations

import math
from typing import Iterable, List, Optional, Sequence

from .formatting import format_chart_date
from .models import IndicatorRecord, Plan


def percent_change(current: Optional[float], previous: Optional[float]) -> Optional[str]:
    """
    Percent change from ``previous`` to ``current``, rounded to a whole number.

    Positive changes carry an explicit ``+`` (``"+10"``); zero and negative
    changes are rendered as-is (``"0"``, ``"-4"``). Returns ``None`` when
    either side is missing or the baseline is zero, since no finite
    percentage exists in those cases.
    """
    if current is None or previous is None or previous == 0:
        return None

    # half-up rounding, so -2.5 becomes -2 and 2.5 becomes 3
    change = math.floor((current - previous) / previous * 100 + 0.5)
    return f"+{change}" if change > 0 else str(change)


def latest_indicator(indicators: Sequence[IndicatorRecord]) -> Optional[IndicatorRecord]:
    return indicators[-1] if indicators else None


def monthly_recurring_revenue_change(
    indicators: Sequence[IndicatorRecord], baseline: Optional[IndicatorRecord]
) -> Optional[str]:
    latest = latest_indicator(indicators)
    if latest is None or baseline is None:
        return None
    return percent_change(latest.monthly_recurring_revenue, baseline.monthly_recurring_revenue)


def yearly_recurring_revenue_change(
    indicators: Sequence[IndicatorRecord], baseline: Optional[IndicatorRecord]
) -> Optional[str]:
    latest = latest_indicator(indicators)
    if latest is None or baseline is None:
        return None
    return percent_change(latest.yearly_recurring_revenue, baseline.yearly_recurring_revenue)


def total_trial_users(generic_trial_users: int, plans: Iterable[Plan]) -> int:
    return generic_trial_users + sum(plan.trialing for plan in plans)


def chart_dates(indicators: Sequence[IndicatorRecord]) -> List[str]:
    return [format_chart_date(indicator.created_at) for indicator in indicators]
