# fastapi-backend/src/kiosk/charts.py
from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence

from .formatting import currency_formatter
from .models import IndicatorRecord
from .stats import chart_dates

ValueOf = Callable[[IndicatorRecord], float]
ScaleLabelFormatter = Callable[[float], str]

BASE_CHART_DATASET: Dict[str, Any] = {
    "label": "Dataset",
    "fillColor": "rgba(151,187,205,0.2)",
    "strokeColor": "rgba(151,187,205,1)",
    "pointColor": "rgba(151,187,205,1)",
    "pointStrokeColor": "#fff",
    "pointHighlightFill": "#fff",
    "pointHighlightStroke": "rgba(151,187,205,1)",
}

# number of evenly spaced y-axis ticks rendered when a chart is serialized
AXIS_TICKS = 5


def trailing(items: Sequence[Any], days: int) -> List[Any]:
    """Return the last ``min(days, len(items))`` items, oldest first."""
    if days <= 0:
        return []
    return list(items[-days:])


def build_chart(
    indicators: Sequence[IndicatorRecord],
    days: int,
    value_of: ValueOf,
    scale_label_formatter: Optional[ScaleLabelFormatter] = None,
) -> Dict[str, Any]:
    """
    Build a ``{labels, datasets, options}`` payload for the trailing window.

    ``data`` always holds the raw values; ``scale_label_formatter`` is only
    handed to the renderer (as ``options["scaleLabel"]``) for axis text.
    """
    window = trailing(indicators, days)

    dataset = copy.deepcopy(BASE_CHART_DATASET)
    dataset["data"] = [value_of(indicator) for indicator in window]

    options: Dict[str, Any] = {"responsive": True}
    if scale_label_formatter is not None:
        options["scaleLabel"] = scale_label_formatter

    return {
        "labels": chart_dates(window),
        "datasets": [dataset],
        "options": options,
    }


@dataclass(frozen=True)
class ChartSpec:
    chart_id: str
    title: str
    days: int
    field: str
    currency: bool = False

    def value_of(self, indicator: IndicatorRecord) -> float:
        return getattr(indicator, self.field)

    def build(self, indicators: Sequence[IndicatorRecord], currency_symbol: str = "$") -> Dict[str, Any]:
        formatter = currency_formatter(currency_symbol) if self.currency else None
        return build_chart(indicators, self.days, self.value_of, formatter)


MONTHLY_RECURRING_REVENUE_CHART = ChartSpec(
    chart_id="monthlyRecurringRevenueChart",
    title="Monthly Recurring Revenue",
    days=30,
    field="monthly_recurring_revenue",
    currency=True,
)
YEARLY_RECURRING_REVENUE_CHART = ChartSpec(
    chart_id="yearlyRecurringRevenueChart",
    title="Yearly Recurring Revenue",
    days=30,
    field="yearly_recurring_revenue",
    currency=True,
)
DAILY_VOLUME_CHART = ChartSpec(
    chart_id="dailyVolumeChart",
    title="Daily Volume",
    days=14,
    field="daily_volume",
    currency=True,
)
NEW_USERS_CHART = ChartSpec(
    chart_id="newUsersChart",
    title="New Users",
    days=14,
    field="new_users",
)

CHART_SPECS: List[ChartSpec] = [
    MONTHLY_RECURRING_REVENUE_CHART,
    YEARLY_RECURRING_REVENUE_CHART,
    DAILY_VOLUME_CHART,
    NEW_USERS_CHART,
]


class ChartRenderer(Protocol):
    def draw(self, chart_id: str, chart: Dict[str, Any]) -> None: ...

    def get(self, chart_id: str) -> Optional[Dict[str, Any]]: ...

    def all(self) -> Dict[str, Dict[str, Any]]: ...


class ChartStore:
    """
    Renderer that keeps the most recently drawn payload per chart id.

    The HTTP surface reads from here; a redraw replaces the previous chart.
    """

    def __init__(self) -> None:
        self._charts: Dict[str, Dict[str, Any]] = {}

    def draw(self, chart_id: str, chart: Dict[str, Any]) -> None:
        self._charts[chart_id] = chart

    def get(self, chart_id: str) -> Optional[Dict[str, Any]]:
        return self._charts.get(chart_id)

    def all(self) -> Dict[str, Dict[str, Any]]:
        return dict(self._charts)

    def clear(self) -> None:
        self._charts.clear()


def axis_ticks(values: Sequence[float], count: int = AXIS_TICKS) -> List[float]:
    top = max(values) if values else 0
    if top <= 0 or count < 2:
        return [0.0]
    step = top / (count - 1)
    return [round(step * i, 2) for i in range(count)]


def serialize_chart(chart: Dict[str, Any]) -> Dict[str, Any]:
    """
    Make a chart payload JSON-safe.

    The scale label formatter cannot cross the wire, so it is replaced by the
    formatted y-axis tick labels it would have produced.
    """
    options = dict(chart.get("options") or {})
    formatter = options.pop("scaleLabel", None)

    values: List[float] = []
    for dataset in chart.get("datasets", []):
        values.extend(dataset.get("data", []))

    ticks = axis_ticks(values)
    if formatter is not None:
        options["scaleLabels"] = [formatter(tick) for tick in ticks]
    else:
        options["scaleLabels"] = [f"{tick:g}" for tick in ticks]

    return {
        "labels": list(chart.get("labels", [])),
        "datasets": [dict(dataset) for dataset in chart.get("datasets", [])],
        "options": options,
    }
