"""Sentinel DataOps — FastAPI service entry point."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from functools import partial

import uvicorn
from fastapi import FastAPI
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

from sentinel.config import settings
from sentinel.detection.correlator import propose_alerts
from sentinel.healing.diagnosis import diagnose
from sentinel.ingestion.parser import parse_logs
from sentinel.llm import build_llm
from sentinel.middleware import MetricsMiddleware
from sentinel.orchestrator import Orchestrator
from sentinel.routers import alerts, chat, health, logs, metrics
from sentinel.telemetry.logging import setup_logging
from sentinel.telemetry.tracing import setup_tracing

logger = logging.getLogger("sentinel")


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(level=settings.log_level, otlp_endpoint=settings.otlp_endpoint)
    logger.info("Initializing Sentinel orchestrator...")

    # LLM is optional: collaborators degrade to empty results and fallbacks
    try:
        llm = build_llm(settings)
    except ValueError:
        logger.exception("LLM initialization failed — continuing without inference")
        llm = None
    if llm is None:
        logger.warning(
            "No LLM available for provider=%s — parsing, correlation and diagnosis are degraded",
            settings.llm_provider,
        )
    else:
        logger.info("LLM ready: provider=%s model=%s", settings.llm_provider, settings.llm_model)

    orchestrator = Orchestrator(
        parse=partial(parse_logs, llm),
        propose=partial(propose_alerts, llm),
        diagnose=partial(diagnose, llm),
        cfg=settings,
    )
    await orchestrator.start()

    app.state.llm = llm
    app.state.orchestrator = orchestrator
    logger.info("Sentinel ready — listening on %s:%d", settings.host, settings.port)

    yield

    await orchestrator.stop()
    logger.info("Sentinel shut down")


app = FastAPI(
    title="Sentinel DataOps",
    description="Autonomous incident detection and self-healing for data-platform logs",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(MetricsMiddleware)

app.include_router(health.router)
app.include_router(logs.router)
app.include_router(alerts.router)
app.include_router(chat.router)
app.include_router(metrics.router)

if settings.otlp_endpoint:
    setup_tracing(otlp_endpoint=settings.otlp_endpoint)
    FastAPIInstrumentor.instrument_app(app)


def run() -> None:
    uvicorn.run("sentinel.main:app", host=settings.host, port=settings.port)
