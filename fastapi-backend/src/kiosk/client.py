# fastapi-backend/src/kiosk/client.py
from __future__ import annotations

import logging
from typing import Any, List, Optional

import httpx
from pydantic import ValidationError

from .models import PerformanceIndicators, Plan, RevenueSummary

logger = logging.getLogger("kiosk.client")

PERFORMANCE_INDICATORS_PATH = "/spark/kiosk/performance-indicators"
REVENUE_PATH = f"{PERFORMANCE_INDICATORS_PATH}/revenue"
PLANS_PATH = f"{PERFORMANCE_INDICATORS_PATH}/plans"
TRIALING_PATH = f"{PERFORMANCE_INDICATORS_PATH}/trialing"


class KioskFetchError(RuntimeError):
    """Raised when a kiosk endpoint cannot be fetched or its body is unusable."""

    def __init__(self, path: str, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path


class KioskClient:
    """
    Thin async client for the kiosk performance-indicator endpoints.

    Each method issues one GET and returns parsed models. Transport errors,
    non-2xx responses and malformed bodies all surface as ``KioskFetchError``.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            headers={"Accept": "application/json"},
            transport=transport,
        )

    async def __aenter__(self) -> "KioskClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _get_json(self, path: str) -> Any:
        try:
            r = await self._client.get(path)
            r.raise_for_status()
            payload = r.json()
        except httpx.HTTPStatusError as e:
            logger.warning("GET %s returned %s", path, e.response.status_code)
            raise KioskFetchError(path, f"HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.warning("GET %s failed: %s", path, e)
            raise KioskFetchError(path, str(e) or type(e).__name__) from e
        except ValueError as e:
            logger.warning("GET %s returned a non-JSON body", path)
            raise KioskFetchError(path, "invalid JSON body") from e

        logger.debug("GET %s ok", path)
        return payload

    async def get_revenue(self) -> RevenueSummary:
        payload = await self._get_json(REVENUE_PATH)
        try:
            return RevenueSummary.model_validate(payload)
        except ValidationError as e:
            raise KioskFetchError(REVENUE_PATH, f"unexpected payload: {e}") from e

    async def get_plans(self) -> List[Plan]:
        payload = await self._get_json(PLANS_PATH)
        if not isinstance(payload, list):
            raise KioskFetchError(PLANS_PATH, "expected a JSON array")
        try:
            return [Plan.model_validate(item) for item in payload]
        except ValidationError as e:
            raise KioskFetchError(PLANS_PATH, f"unexpected payload: {e}") from e

    async def get_trial_users(self) -> int:
        payload = await self._get_json(TRIALING_PATH)
        # bools are ints in Python; a JSON true/false is not a count
        if isinstance(payload, bool) or not isinstance(payload, (int, float)) or payload < 0:
            raise KioskFetchError(TRIALING_PATH, "expected a non-negative count")
        return int(payload)

    async def get_performance_indicators(self) -> PerformanceIndicators:
        payload = await self._get_json(PERFORMANCE_INDICATORS_PATH)
        try:
            return PerformanceIndicators.model_validate(payload)
        except ValidationError as e:
            raise KioskFetchError(PERFORMANCE_INDICATORS_PATH, f"unexpected payload: {e}") from e
