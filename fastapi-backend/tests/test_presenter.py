"""Tests for the metrics presenter: activation, fetch orchestration and derived state."""

import asyncio
from typing import Dict
from unittest.mock import AsyncMock

import pytest

from kiosk.charts import CHART_SPECS, ChartStore
from kiosk.client import KioskFetchError
from kiosk.models import PerformanceIndicators, RevenueSummary
from kiosk.presenter import MetricsPresenter


def fetch_counts(source: AsyncMock) -> Dict[str, int]:
    return {
        "revenue": source.get_revenue.await_count,
        "plans": source.get_plans.await_count,
        "trialing": source.get_trial_users.await_count,
        "indicators": source.get_performance_indicators.await_count,
    }


class TestActivationGate:
    """Test when activation triggers fetches."""

    @pytest.mark.asyncio
    async def test_matching_tab_fetches_everything(self, presenter: MetricsPresenter, source: AsyncMock) -> None:
        """The metrics tab issues all four fetches once."""
        assert await presenter.activate("metrics") is True

        assert fetch_counts(source) == {"revenue": 1, "plans": 1, "trialing": 1, "indicators": 1}
        assert presenter.loaded is True

    @pytest.mark.asyncio
    @pytest.mark.parametrize("tab", ["settings", "users", "", "Metrics"])
    async def test_other_tabs_never_fetch(self, presenter: MetricsPresenter, source: AsyncMock, tab: str) -> None:
        """Any other tab identifier is ignored."""
        assert await presenter.activate(tab) is False

        assert sum(fetch_counts(source).values()) == 0
        assert presenter.loaded is False

    @pytest.mark.asyncio
    async def test_second_activation_is_a_no_op(self, presenter: MetricsPresenter, source: AsyncMock) -> None:
        """Once loaded, re-selecting the tab does not fetch again."""
        await presenter.activate("metrics")
        assert await presenter.activate("metrics") is False

        assert fetch_counts(source) == {"revenue": 1, "plans": 1, "trialing": 1, "indicators": 1}

    @pytest.mark.asyncio
    async def test_zero_revenue_still_counts_as_loaded(self, presenter: MetricsPresenter, source: AsyncMock) -> None:
        """A real zero ARR does not make the presenter look unloaded."""
        source.get_revenue.return_value = RevenueSummary()

        await presenter.activate("metrics")
        assert presenter.yearly_recurring_revenue == 0
        assert await presenter.activate("metrics") is False
        assert source.get_revenue.await_count == 1

    @pytest.mark.asyncio
    async def test_custom_tab_id(self, source: AsyncMock) -> None:
        """The presenter reacts to its own configured tab id."""
        presenter = MetricsPresenter(source=source, tab_id="kiosk-metrics")

        assert await presenter.activate("metrics") is False
        assert await presenter.activate("kiosk-metrics") is True

    @pytest.mark.asyncio
    async def test_activation_while_loading_waits_for_the_load(
        self, presenter: MetricsPresenter, source: AsyncMock
    ) -> None:
        """A second signal during a load waits for it instead of starting another."""
        release = asyncio.Event()
        revenue = source.get_revenue.return_value

        async def slow_revenue() -> RevenueSummary:
            await release.wait()
            return revenue

        source.get_revenue.side_effect = slow_revenue

        first = asyncio.create_task(presenter.activate("metrics"))
        await asyncio.sleep(0)
        second = asyncio.create_task(presenter.activate("metrics"))
        await asyncio.sleep(0)
        assert not second.done()

        release.set()
        assert await first is True
        assert await second is False
        assert source.get_revenue.await_count == 1
        assert source.get_performance_indicators.await_count == 1

    @pytest.mark.asyncio
    async def test_concurrent_activations_see_loaded_state(
        self, presenter: MetricsPresenter, source: AsyncMock, series_factory
    ) -> None:
        """Every concurrent activation returns only after the indicators land."""

        async def slow_indicators() -> PerformanceIndicators:
            await asyncio.sleep(0.01)
            return PerformanceIndicators(indicators=series_factory(20))

        source.get_performance_indicators.side_effect = slow_indicators

        async def activate_and_count() -> int:
            await presenter.activate("metrics")
            return len(presenter.indicators)

        counts = await asyncio.gather(*(activate_and_count() for _ in range(4)))

        assert counts == [20, 20, 20, 20]
        assert source.get_performance_indicators.await_count == 1

    @pytest.mark.asyncio
    async def test_reset_during_load_drops_results(
        self, presenter: MetricsPresenter, source: AsyncMock, store: ChartStore
    ) -> None:
        """A load that finishes after reset() leaves the presenter empty."""
        release = asyncio.Event()
        revenue = source.get_revenue.return_value

        async def slow_revenue() -> RevenueSummary:
            await release.wait()
            return revenue

        source.get_revenue.side_effect = slow_revenue

        first = asyncio.create_task(presenter.activate("metrics"))
        await asyncio.sleep(0.01)
        presenter.reset()
        release.set()
        await first

        assert presenter.loaded is False
        assert presenter.yearly_recurring_revenue == 0
        assert presenter.indicators == []
        assert presenter.plans == []
        assert presenter.generic_trial_users == 0
        assert store.all() == {}

    @pytest.mark.asyncio
    async def test_activation_after_reset_during_load_fetches_again(
        self, presenter: MetricsPresenter, source: AsyncMock
    ) -> None:
        """After a reset the next activation starts a fresh load."""
        release = asyncio.Event()
        revenue = source.get_revenue.return_value

        calls = []

        async def first_call_is_slow() -> RevenueSummary:
            calls.append(1)
            if len(calls) == 1:
                await release.wait()
            return revenue

        source.get_revenue.side_effect = first_call_is_slow

        stale = asyncio.create_task(presenter.activate("metrics"))
        await asyncio.sleep(0)
        presenter.reset()

        assert await presenter.activate("metrics") is True
        assert presenter.loaded is True
        assert len(presenter.indicators) == 2

        release.set()
        await stale
        assert presenter.loaded is True
        assert source.get_revenue.await_count == 2

    @pytest.mark.asyncio
    async def test_reset_allows_reload(self, presenter: MetricsPresenter, source: AsyncMock, store: ChartStore) -> None:
        """reset() clears state and drawn charts; the next activation fetches again."""
        await presenter.activate("metrics")
        presenter.reset()

        assert presenter.loaded is False
        assert presenter.indicators == []
        assert presenter.plans == []
        assert store.all() == {}

        assert await presenter.activate("metrics") is True
        assert source.get_revenue.await_count == 2


class TestFetchFailures:
    """Test that a failing source leaves its defaults and spares the others."""

    @pytest.mark.asyncio
    async def test_failed_revenue_keeps_defaults(self, presenter: MetricsPresenter, source: AsyncMock) -> None:
        """Revenue failure leaves zeros and the presenter unloaded."""
        source.get_revenue.side_effect = KioskFetchError("/revenue", "HTTP 500")

        assert await presenter.activate("metrics") is True
        assert presenter.monthly_recurring_revenue == 0
        assert presenter.yearly_recurring_revenue == 0
        assert presenter.total_volume == 0
        assert presenter.loaded is False

        # the other three still landed
        assert presenter.generic_trial_users == 4
        assert len(presenter.plans) == 2
        assert len(presenter.indicators) == 2

    @pytest.mark.asyncio
    async def test_failed_revenue_can_retry_on_next_activation(
        self, presenter: MetricsPresenter, source: AsyncMock
    ) -> None:
        """Without a successful revenue load the gate stays open."""
        source.get_revenue.side_effect = [KioskFetchError("/revenue", "timeout"), source.get_revenue.return_value]

        await presenter.activate("metrics")
        assert await presenter.activate("metrics") is True
        assert presenter.loaded is True

    @pytest.mark.asyncio
    async def test_failed_indicators_degrade_gracefully(
        self, presenter: MetricsPresenter, source: AsyncMock, store: ChartStore
    ) -> None:
        """No indicators means unavailable changes and no charts drawn."""
        source.get_performance_indicators.side_effect = KioskFetchError("/performance-indicators", "boom")

        await presenter.activate("metrics")

        assert presenter.indicators == []
        assert presenter.last_months_indicators is None
        assert presenter.monthly_change_in_monthly_recurring_revenue is None
        assert presenter.yearly_change_in_yearly_recurring_revenue is None
        assert presenter.available_chart_dates == []
        assert store.all() == {}
        assert presenter.loaded is True

    @pytest.mark.asyncio
    async def test_failed_plans_and_trials(self, presenter: MetricsPresenter, source: AsyncMock) -> None:
        """Trial totals fall back to zero and an empty plan list."""
        source.get_plans.side_effect = KioskFetchError("/plans", "boom")
        source.get_trial_users.side_effect = RuntimeError("unexpected")

        await presenter.activate("metrics")

        assert presenter.plans == []
        assert presenter.generic_trial_users == 0
        assert presenter.total_trial_users == 0

    @pytest.mark.asyncio
    async def test_everything_fails(self, presenter: MetricsPresenter, source: AsyncMock) -> None:
        """All four failing leaves a fully default, readable state."""
        for fetch in (source.get_revenue, source.get_plans, source.get_trial_users, source.get_performance_indicators):
            fetch.side_effect = KioskFetchError("/x", "down")

        await presenter.activate("metrics")
        summary = presenter.summary()

        assert summary["loaded"] is False
        assert summary["totalTrialUsers"] == 0
        assert summary["monthlyChangeInMonthlyRecurringRevenue"] is None


class TestDerivedState:
    """Test statistics and charts derived after a load."""

    @pytest.mark.asyncio
    async def test_percent_changes(self, presenter: MetricsPresenter) -> None:
        """Latest MRR 110 vs last month 100 and last year 50."""
        await presenter.activate("metrics")

        assert presenter.monthly_change_in_monthly_recurring_revenue == "+10"
        assert presenter.yearly_change_in_monthly_recurring_revenue == "+120"
        assert presenter.monthly_change_in_yearly_recurring_revenue == "+10"
        assert presenter.yearly_change_in_yearly_recurring_revenue == "+120"

    @pytest.mark.asyncio
    async def test_missing_baselines(self, presenter: MetricsPresenter, source: AsyncMock, indicator_factory) -> None:
        """Absent snapshots make the matching changes unavailable."""
        source.get_performance_indicators.return_value = PerformanceIndicators(
            indicators=[indicator_factory(0, mrr=120)],
            last_month=indicator_factory(-30, mrr=100),
        )

        await presenter.activate("metrics")

        assert presenter.monthly_change_in_monthly_recurring_revenue == "+20"
        assert presenter.yearly_change_in_monthly_recurring_revenue is None
        assert presenter.yearly_change_in_yearly_recurring_revenue is None

    @pytest.mark.asyncio
    async def test_total_trial_users(self, presenter: MetricsPresenter) -> None:
        """Generic trials plus every plan's trials."""
        await presenter.activate("metrics")
        assert presenter.total_trial_users == 4 + 3 + 2

    def test_defaults_before_load(self, presenter: MetricsPresenter) -> None:
        """Derived values are well defined before any fetch."""
        assert presenter.total_trial_users == 0
        assert presenter.available_chart_dates == []
        assert presenter.monthly_change_in_monthly_recurring_revenue is None
        assert all(chart["labels"] == [] for chart in presenter.build_charts().values())

    @pytest.mark.asyncio
    async def test_charts_drawn_after_indicators(self, presenter: MetricsPresenter, store: ChartStore) -> None:
        """All four charts are handed to the renderer once indicators arrive."""
        await presenter.activate("metrics")

        drawn = store.all()
        assert sorted(drawn) == sorted(spec.chart_id for spec in CHART_SPECS)
        mrr_chart = drawn["monthlyRecurringRevenueChart"]
        assert mrr_chart["labels"] == ["1/1", "1/2"]
        assert mrr_chart["datasets"][0]["data"] == [100.0, 110.0]
        assert mrr_chart["options"]["scaleLabel"](110) == "$110.00"

    @pytest.mark.asyncio
    async def test_long_series_is_windowed(self, presenter: MetricsPresenter, source: AsyncMock, series_factory, store: ChartStore) -> None:
        """Charts only show the trailing window of a long series."""
        source.get_performance_indicators.return_value = PerformanceIndicators(indicators=series_factory(60))

        await presenter.activate("metrics")

        assert len(store.get("monthlyRecurringRevenueChart")["labels"]) == 30
        assert len(store.get("newUsersChart")["labels"]) == 14
        assert len(presenter.available_chart_dates) == 60

    @pytest.mark.asyncio
    async def test_summary(self, presenter: MetricsPresenter) -> None:
        """summary() reports the revenue totals and derived figures."""
        await presenter.activate("metrics")
        summary = presenter.summary()

        assert summary["loaded"] is True
        assert summary["monthlyRecurringRevenue"] == 110.0
        assert summary["yearlyRecurringRevenue"] == 1320.0
        assert summary["totalVolume"] == 5000.0
        assert summary["genericTrialUsers"] == 4
        assert summary["totalTrialUsers"] == 9
        assert summary["monthlyChangeInMonthlyRecurringRevenue"] == "+10"
        assert [plan["id"] for plan in summary["plans"]] == ["basic", "pro"]

    def test_default_renderer_is_a_store(self, source: AsyncMock) -> None:
        """Without a renderer the presenter keeps charts in memory."""
        assert isinstance(MetricsPresenter(source=source).renderer, ChartStore)
