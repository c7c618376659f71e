"""
Kiosk metrics: revenue and user-growth figures for the operator dashboard.

``MetricsPresenter`` loads the kiosk endpoints once per view, derives the
period-over-period changes and draws the four trailing-window charts.
"""

from .charts import CHART_SPECS, ChartSpec, ChartStore, build_chart, serialize_chart  # noqa: F401
from .client import KioskClient, KioskFetchError  # noqa: F401
from .mock import MockKioskClient  # noqa: F401
from .models import IndicatorRecord, PerformanceIndicators, Plan, RevenueSummary  # noqa: F401
from .presenter import MetricsPresenter  # noqa: F401
from .stats import percent_change, total_trial_users  # noqa: F401
