# fastapi-backend/src/reports/kiosk_metrics.py
# | Card Name                        | Visual Type | Transport | Purpose / Data Shown                        |
# | -------------------------------- | ----------- | --------- | ------------------------------------------- |
# | MonthlyRecurringRevenueChartCard | line_chart  | http      | MRR over the trailing 30 days               |
# | YearlyRecurringRevenueChartCard  | line_chart  | http      | ARR over the trailing 30 days               |
# | DailyVolumeChartCard             | line_chart  | http      | Daily payment volume, trailing 14 days      |
# | NewUsersChartCard                | line_chart  | http      | New registrations per day, trailing 14 days |

from cereon_sdk.fastapi import BaseCard, ChartCardRecord

from typing import Any, Dict, List

from kiosk.charts import (
    DAILY_VOLUME_CHART,
    MONTHLY_RECURRING_REVENUE_CHART,
    NEW_USERS_CHART,
    YEARLY_RECURRING_REVENUE_CHART,
    ChartSpec,
)
from kiosk.runtime import get_presenter


async def _chart_rows(spec: ChartSpec) -> List[Dict[str, Any]]:
    """Load the metrics tab if needed and zip the chart into recharts rows."""
    presenter = get_presenter()
    await presenter.activate(presenter.tab_id)

    chart = spec.build(presenter.indicators, presenter.currency_symbol)
    values = chart["datasets"][0]["data"]
    return [{"date": label, spec.field: value} for label, value in zip(chart["labels"], values)]


class MonthlyRecurringRevenueChartCard(BaseCard[ChartCardRecord]):
    kind = "recharts:line"
    card_id = "kiosk_monthly_recurring_revenue"
    report_id = "kiosk_metrics"
    route_prefix = "/cards"
    response_model = ChartCardRecord
    transport = "http"

    @classmethod
    async def handler(cls, ctx=None) -> List[ChartCardRecord]:
        rows = await _chart_rows(MONTHLY_RECURRING_REVENUE_CHART)
        payload = {
            "kind": "line",
            "report_id": cls.report_id,
            "card_id": cls.card_id,
            "data": {"data": rows},
        }
        return [cls.response_model(**payload)]


class YearlyRecurringRevenueChartCard(BaseCard[ChartCardRecord]):
    kind = "recharts:line"
    card_id = "kiosk_yearly_recurring_revenue"
    report_id = "kiosk_metrics"
    route_prefix = "/cards"
    response_model = ChartCardRecord
    transport = "http"

    @classmethod
    async def handler(cls, ctx=None) -> List[ChartCardRecord]:
        rows = await _chart_rows(YEARLY_RECURRING_REVENUE_CHART)
        payload = {
            "kind": "line",
            "report_id": cls.report_id,
            "card_id": cls.card_id,
            "data": {"data": rows},
        }
        return [cls.response_model(**payload)]


class DailyVolumeChartCard(BaseCard[ChartCardRecord]):
    kind = "recharts:line"
    card_id = "kiosk_daily_volume"
    report_id = "kiosk_metrics"
    route_prefix = "/cards"
    response_model = ChartCardRecord
    transport = "http"

    @classmethod
    async def handler(cls, ctx=None) -> List[ChartCardRecord]:
        rows = await _chart_rows(DAILY_VOLUME_CHART)
        payload = {
            "kind": "line",
            "report_id": cls.report_id,
            "card_id": cls.card_id,
            "data": {"data": rows},
        }
        return [cls.response_model(**payload)]


class NewUsersChartCard(BaseCard[ChartCardRecord]):
    kind = "recharts:line"
    card_id = "kiosk_new_users"
    report_id = "kiosk_metrics"
    route_prefix = "/cards"
    response_model = ChartCardRecord
    transport = "http"

    @classmethod
    async def handler(cls, ctx=None) -> List[ChartCardRecord]:
        rows = await _chart_rows(NEW_USERS_CHART)
        payload = {
            "kind": "line",
            "report_id": cls.report_id,
            "card_id": cls.card_id,
            "data": {"data": rows},
        }
        return [cls.response_model(**payload)]
