# fastapi-backend/src/main.py
import logging
from typing import Any, Dict, List, Optional
from contextlib import asynccontextmanager

import uvicorn
from pydantic import BaseModel
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from fastapi import Depends, FastAPI, HTTPException

from settings import get_settings
from cards import ALL_KIOSK_CARDS
from kiosk.charts import CHART_SPECS, serialize_chart
from kiosk.presenter import MetricsPresenter
from kiosk.runtime import get_presenter


settings = get_settings()

LOG_LEVEL = (settings.log_level or "INFO").upper()
HOST = settings.host
PORT = int(settings.port)

logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger("main")


class MetricsSummaryResponse(BaseModel):
    loaded: bool
    monthlyRecurringRevenue: float
    yearlyRecurringRevenue: float
    totalVolume: float
    genericTrialUsers: int
    totalTrialUsers: int
    monthlyChangeInMonthlyRecurringRevenue: Optional[str] = None
    yearlyChangeInMonthlyRecurringRevenue: Optional[str] = None
    monthlyChangeInYearlyRecurringRevenue: Optional[str] = None
    yearlyChangeInYearlyRecurringRevenue: Optional[str] = None
    plans: List[Dict[str, Any]] = []


class ActivationResponse(BaseModel):
    tab: str
    fetched: bool
    metrics: MetricsSummaryResponse


class ChartResponse(BaseModel):
    chart_id: str
    labels: List[str]
    datasets: List[Dict[str, Any]]
    options: Dict[str, Any]


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        logger.info("Starting application...")
        try:
            for CardCls in ALL_KIOSK_CARDS:
                try:
                    CardCls(app).as_route(app=app)
                    logger.info(
                        "Registered card route: %s/%s", CardCls.route_prefix, CardCls.card_id
                    )
                except Exception as e:
                    logger.exception(
                        "Failed to register route for %s: %s",
                        getattr(CardCls, "card_id", repr(CardCls)),
                        e,
                    )
        except Exception:
            logger.exception("Unexpected error while registering kiosk card routes")

        logger.info("Application startup complete")
        yield
    finally:
        # only close a presenter that was actually built
        if get_presenter.cache_info().currsize:
            await get_presenter().source.aclose()
        logger.info("Application shutdown complete")


app = FastAPI(
    title="Kiosk Metrics Server",
    version=settings.app_version,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins or ["*"],
    allow_credentials=bool(settings.cors_allow_credentials),
    allow_methods=settings.cors_allow_methods or ["*"],
    allow_headers=settings.cors_allow_headers or ["*"],
)


@app.get("/", response_class=JSONResponse)
async def root():
    return JSONResponse({"ok": True, "service": "kiosk-metrics"})


@app.get("/health", response_class=JSONResponse)
async def health():
    return JSONResponse({"ok": True})


@app.post("/kiosk/tabs/{tab}", response_model=ActivationResponse)
async def activate_tab(tab: str, presenter: MetricsPresenter = Depends(get_presenter)):
    """
    Activation signal from the hosting shell.

    Only the metrics tab triggers a load, and only until one has succeeded.
    """
    fetched = await presenter.activate(tab)
    if fetched:
        logger.info("Loaded kiosk metrics for tab %s (loaded=%s)", tab, presenter.loaded)
    return ActivationResponse(tab=tab, fetched=fetched, metrics=presenter.summary())


@app.post("/kiosk/reset", response_model=MetricsSummaryResponse)
async def reset_metrics(presenter: MetricsPresenter = Depends(get_presenter)):
    presenter.reset()
    return presenter.summary()


@app.get("/kiosk/metrics", response_model=MetricsSummaryResponse)
async def metrics_summary(presenter: MetricsPresenter = Depends(get_presenter)):
    return presenter.summary()


@app.get("/kiosk/charts", response_model=List[ChartResponse])
async def list_charts(presenter: MetricsPresenter = Depends(get_presenter)):
    """Charts drawn by the last indicator load, in display order."""
    drawn = presenter.renderer.all()
    return [
        ChartResponse(chart_id=spec.chart_id, **serialize_chart(drawn[spec.chart_id]))
        for spec in CHART_SPECS
        if spec.chart_id in drawn
    ]


@app.get("/kiosk/charts/{chart_id}", response_model=ChartResponse)
async def get_chart(chart_id: str, presenter: MetricsPresenter = Depends(get_presenter)):
    chart = presenter.renderer.get(chart_id)
    if chart is None:
        raise HTTPException(status_code=404, detail=f"Chart not drawn: {chart_id}")
    return ChartResponse(chart_id=chart_id, **serialize_chart(chart))


if __name__ == "__main__":
    logger.info("Starting %s on %s:%d", app.title, HOST, PORT)
    uvicorn.run(app, host=HOST, port=PORT, log_level=LOG_LEVEL.lower())
