"""Pytest configuration and fixtures for kiosk metrics tests."""

from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List
from unittest.mock import AsyncMock

import pytest

from kiosk.charts import ChartStore
from kiosk.models import IndicatorRecord, PerformanceIndicators, Plan, RevenueSummary
from kiosk.presenter import MetricsPresenter

START = datetime(2024, 1, 1)


def make_indicator(day: int = 0, mrr: float = 100.0, **overrides: Any) -> IndicatorRecord:
    """Build an indicator row ``day`` days after 2024-01-01."""
    row: Dict[str, Any] = {
        "created_at": (START + timedelta(days=day)).strftime("%Y-%m-%d %H:%M:%S"),
        "monthly_recurring_revenue": mrr,
        "yearly_recurring_revenue": mrr * 12,
        "daily_volume": mrr / 10,
        "new_users": day % 7,
    }
    row.update(overrides)
    return IndicatorRecord.model_validate(row)


@pytest.fixture
def indicator_factory() -> Callable[..., IndicatorRecord]:
    return make_indicator


@pytest.fixture
def series_factory() -> Callable[[int], List[IndicatorRecord]]:
    """Ascending series of ``length`` days with MRR 100, 101, 102, ..."""

    def _series(length: int) -> List[IndicatorRecord]:
        return [make_indicator(i, mrr=100.0 + i) for i in range(length)]

    return _series


@pytest.fixture
def source() -> AsyncMock:
    """Metrics source whose four fetches all succeed."""
    mock = AsyncMock()
    mock.get_revenue.return_value = RevenueSummary.model_validate(
        {"monthlyRecurringRevenue": 110.0, "yearlyRecurringRevenue": 1320.0, "totalVolume": 5000.0}
    )
    mock.get_plans.return_value = [
        Plan(id="basic", name="Basic", trialing=3),
        Plan(id="pro", name="Pro", trialing=2),
    ]
    mock.get_trial_users.return_value = 4
    mock.get_performance_indicators.return_value = PerformanceIndicators(
        indicators=[make_indicator(0, mrr=100.0), make_indicator(1, mrr=110.0)],
        last_month=make_indicator(-30, mrr=100.0),
        last_year=make_indicator(-365, mrr=50.0),
    )
    return mock


@pytest.fixture
def store() -> ChartStore:
    return ChartStore()


@pytest.fixture
def presenter(source: AsyncMock, store: ChartStore) -> MetricsPresenter:
    return MetricsPresenter(source=source, renderer=store)

