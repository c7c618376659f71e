# fastapi-backend/src/kiosk/runtime.py
from __future__ import annotations

import logging
from functools import lru_cache
from typing import Union

from settings import AppSettings, get_settings

from .charts import ChartStore
from .client import KioskClient
from .mock import MockKioskClient
from .presenter import MetricsPresenter

logger = logging.getLogger("kiosk.runtime")


def build_source(settings: AppSettings) -> Union[KioskClient, MockKioskClient]:
    if settings.use_mock_data:
        logger.info("Serving synthesized kiosk metrics (%d days)", settings.mock_days)
        return MockKioskClient(days=settings.mock_days, seed=settings.mock_seed)
    return KioskClient(settings.kiosk_base_url, timeout=settings.kiosk_request_timeout)


def build_presenter(settings: AppSettings) -> MetricsPresenter:
    return MetricsPresenter(
        source=build_source(settings),
        renderer=ChartStore(),
        tab_id=settings.kiosk_tab_id,
        currency_symbol=settings.currency_symbol,
    )


@lru_cache(maxsize=1)
def get_presenter() -> MetricsPresenter:
    """Process-wide presenter backing the HTTP surface."""
    return build_presenter(get_settings())
