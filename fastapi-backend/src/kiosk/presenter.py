# fastapi-backend/src/kiosk/presenter.py
from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Dict, List, Optional, Protocol

from . import stats
from .charts import CHART_SPECS, ChartRenderer, ChartStore
from .models import IndicatorRecord, PerformanceIndicators, Plan, RevenueSummary

logger = logging.getLogger("kiosk.presenter")

DEFAULT_TAB_ID = "metrics"


class MetricsSource(Protocol):
    async def get_revenue(self) -> RevenueSummary: ...

    async def get_plans(self) -> List[Plan]: ...

    async def get_trial_users(self) -> int: ...

    async def get_performance_indicators(self) -> PerformanceIndicators: ...


class MetricsPresenter:
    """
    State holder for the kiosk metrics tab.

    ``activate`` loads the four metric sources at most once per view
    lifetime; everything else is derived from current state on read.
    """

    def __init__(
        self,
        source: MetricsSource,
        renderer: Optional[ChartRenderer] = None,
        tab_id: str = DEFAULT_TAB_ID,
        currency_symbol: str = "$",
    ) -> None:
        self.source = source
        self.renderer = renderer if renderer is not None else ChartStore()
        self.tab_id = tab_id
        self.currency_symbol = currency_symbol
        self._generation = 0
        self._load_task: Optional["asyncio.Future[None]"] = None
        self._init_state()

    def _init_state(self) -> None:
        self.monthly_recurring_revenue: float = 0.0
        self.yearly_recurring_revenue: float = 0.0
        self.total_volume: float = 0.0
        self.generic_trial_users: int = 0

        self.indicators: List[IndicatorRecord] = []
        self.last_months_indicators: Optional[IndicatorRecord] = None
        self.last_years_indicators: Optional[IndicatorRecord] = None

        self.plans: List[Plan] = []
        self.loaded = False

    def reset(self) -> None:
        """
        Discard fetched state and drawn charts so the next activation loads again.

        A load still in flight when this runs is left to finish, but its
        results are dropped.
        """
        self._generation += 1
        self._load_task = None
        self._init_state()
        clear = getattr(self.renderer, "clear", None)
        if clear is not None:
            clear()

    async def activate(self, tab: str) -> bool:
        """
        Handle the given tab becoming active.

        Returns True when this call ran a load. Non-matching tabs and an
        already loaded presenter are no-ops; an activation during a load waits
        for that load to finish and then returns False.
        """
        if tab != self.tab_id:
            return False

        if self._load_task is not None and not self._load_task.done():
            await asyncio.shield(self._load_task)
            return False

        if self.loaded:
            return False

        self._load_task = asyncio.ensure_future(self._load_all(self._generation))
        await asyncio.shield(self._load_task)
        return True

    async def _load_all(self, generation: int) -> None:
        await asyncio.gather(
            self._load("revenue", self.source.get_revenue(), self._apply_revenue, generation),
            self._load("plans", self.source.get_plans(), self._apply_plans, generation),
            self._load("trialing", self.source.get_trial_users(), self._apply_trial_users, generation),
            self._load(
                "performance indicators",
                self.source.get_performance_indicators(),
                self._apply_performance_indicators,
                generation,
            ),
        )

    async def _load(self, name: str, fetch: Awaitable[Any], apply, generation: int) -> None:
        try:
            result = await fetch
        except Exception as e:
            # a failed source keeps its defaults; the others still land
            logger.warning("Failed to load %s: %s", name, e)
            return
        if generation != self._generation:
            logger.debug("Dropping %s loaded before a reset", name)
            return
        apply(result)

    def _apply_revenue(self, revenue: RevenueSummary) -> None:
        self.yearly_recurring_revenue = revenue.yearly_recurring_revenue
        self.monthly_recurring_revenue = revenue.monthly_recurring_revenue
        self.total_volume = revenue.total_volume
        self.loaded = True

    def _apply_plans(self, plans: List[Plan]) -> None:
        self.plans = list(plans)

    def _apply_trial_users(self, count: int) -> None:
        self.generic_trial_users = count

    def _apply_performance_indicators(self, payload: PerformanceIndicators) -> None:
        self.indicators = list(payload.indicators)
        self.last_months_indicators = payload.last_month
        self.last_years_indicators = payload.last_year
        self.draw_charts()

    def build_charts(self) -> Dict[str, Dict[str, Any]]:
        return {spec.chart_id: spec.build(self.indicators, self.currency_symbol) for spec in CHART_SPECS}

    def draw_charts(self) -> None:
        for chart_id, chart in self.build_charts().items():
            self.renderer.draw(chart_id, chart)
        logger.debug("Drew %d charts from %d indicators", len(CHART_SPECS), len(self.indicators))

    @property
    def monthly_change_in_monthly_recurring_revenue(self) -> Optional[str]:
        return stats.monthly_recurring_revenue_change(self.indicators, self.last_months_indicators)

    @property
    def yearly_change_in_monthly_recurring_revenue(self) -> Optional[str]:
        return stats.monthly_recurring_revenue_change(self.indicators, self.last_years_indicators)

    @property
    def monthly_change_in_yearly_recurring_revenue(self) -> Optional[str]:
        return stats.yearly_recurring_revenue_change(self.indicators, self.last_months_indicators)

    @property
    def yearly_change_in_yearly_recurring_revenue(self) -> Optional[str]:
        return stats.yearly_recurring_revenue_change(self.indicators, self.last_years_indicators)

    @property
    def total_trial_users(self) -> int:
        return stats.total_trial_users(self.generic_trial_users, self.plans)

    @property
    def available_chart_dates(self) -> List[str]:
        return stats.chart_dates(self.indicators)

    def summary(self) -> Dict[str, Any]:
        return {
            "loaded": self.loaded,
            "monthlyRecurringRevenue": self.monthly_recurring_revenue,
            "yearlyRecurringRevenue": self.yearly_recurring_revenue,
            "totalVolume": self.total_volume,
            "genericTrialUsers": self.generic_trial_users,
            "totalTrialUsers": self.total_trial_users,
            "monthlyChangeInMonthlyRecurringRevenue": self.monthly_change_in_monthly_recurring_revenue,
            "yearlyChangeInMonthlyRecurringRevenue": self.yearly_change_in_monthly_recurring_revenue,
            "monthlyChangeInYearlyRecurringRevenue": self.monthly_change_in_yearly_recurring_revenue,
            "yearlyChangeInYearlyRecurringRevenue": self.yearly_change_in_yearly_recurring_revenue,
            "plans": [plan.model_dump() for plan in self.plans],
        }
