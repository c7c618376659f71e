# fastapi-backend/src/kiosk/mock.py
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import numpy as np

from .models import PerformanceIndicators, Plan, RevenueSummary


def _synth_walk(rng: np.random.Generator, days: int, base: float, growth: float, noise: float) -> np.ndarray:
    steps = 1 + growth + rng.normal(0, noise, size=days)
    return np.maximum(0, base * np.cumprod(steps))


def synth_performance_indicators(days: int = 400, seed: Optional[int] = 0) -> Dict[str, Any]:
    """
    Synthesize a ``/performance-indicators`` payload.

    ``days`` rows ending today, with ``last_month``/``last_year`` picked from
    the series 30 and 365 days back (``None`` when the series is too short).
    """
    rng = np.random.default_rng(seed)
    today = datetime.now(timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0)

    mrr = _synth_walk(rng, days, base=5000, growth=0.003, noise=0.01)
    volume = np.maximum(0, mrr / 30 * (1 + rng.normal(0, 0.25, size=days)))
    new_users = rng.poisson(12, size=days)

    rows: List[Dict[str, Any]] = []
    for i in range(days):
        day = today - timedelta(days=days - i - 1)
        rows.append(
            {
                "created_at": day.strftime("%Y-%m-%d %H:%M:%S"),
                "monthly_recurring_revenue": round(float(mrr[i]), 2),
                "yearly_recurring_revenue": round(float(mrr[i]) * 12, 2),
                "daily_volume": round(float(volume[i]), 2),
                "new_users": int(new_users[i]),
            }
        )

    return {
        "indicators": rows,
        "last_month": rows[-31] if days > 30 else None,
        "last_year": rows[-366] if days > 365 else None,
    }


class MockKioskClient:
    """Drop-in for ``KioskClient`` that serves synthesized data."""

    def __init__(self, days: int = 400, seed: Optional[int] = 0) -> None:
        self._payload = PerformanceIndicators.model_validate(synth_performance_indicators(days, seed))
        self._plans = [
            Plan(id="basic", name="Basic", subscribers=120, trialing=14),
            Plan(id="pro", name="Pro", subscribers=48, trialing=6),
            Plan(id="team", name="Team", subscribers=9, trialing=1),
        ]

    async def __aenter__(self) -> "MockKioskClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        return None

    async def get_revenue(self) -> RevenueSummary:
        latest = self._payload.indicators[-1] if self._payload.indicators else None
        if latest is None:
            return RevenueSummary()
        return RevenueSummary(
            monthly_recurring_revenue=latest.monthly_recurring_revenue,
            yearly_recurring_revenue=latest.yearly_recurring_revenue,
            total_volume=round(sum(i.daily_volume for i in self._payload.indicators), 2),
        )

    async def get_plans(self) -> List[Plan]:
        return list(self._plans)

    async def get_trial_users(self) -> int:
        return 7

    async def get_performance_indicators(self) -> PerformanceIndicators:
        return self._payload.model_copy(deep=True)
