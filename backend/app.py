from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from time import perf_counter
from typing import Optional
from uuid import uuid4

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel

from backend.kv_store import build_store
from backend.logging_config import configure_logging
from backend.observability import METRICS, render_prometheus_metrics
from backend.runtime_config import log_format, validate_runtime_environment, wheel_settings
from pipeline.prize_wheel import AsyncioScheduler, HistoryLog, ItemRegistry, SpinSession


@asynccontextmanager
async def app_lifespan(_: FastAPI) -> AsyncIterator[None]:
    validate_runtime_environment("api")
    configure_logging(log_format())
    yield


app = FastAPI(title="Prize Wheel API", lifespan=app_lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

LOGGER = logging.getLogger("prize_wheel.api")


@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    request_id = request.headers.get("x-request-id") or str(uuid4())
    request.state.request_id = request_id

    started_at = perf_counter()
    response = await call_next(request)
    duration_ms = (perf_counter() - started_at) * 1000

    response.headers["x-request-id"] = request_id
    LOGGER.info(
        "request.complete",
        extra={
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "duration_ms": round(duration_ms, 2),
        },
    )
    return response


class AddItemRequest(BaseModel):
    label: str


_WHEEL: Optional[SpinSession] = None


def _iso_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def build_wheel() -> SpinSession:
    store = build_store()
    settings = wheel_settings()
    return SpinSession(
        ItemRegistry(store),
        HistoryLog(store),
        AsyncioScheduler(),
        spin_duration_ms=settings.spin_duration_ms,
        extra_full_spins=settings.extra_full_spins,
        on_settle=lambda outcome: METRICS.increment_outcome(outcome.label),
    )


def get_wheel() -> SpinSession:
    global _WHEEL
    if _WHEEL is None:
        _WHEEL = build_wheel()
    return _WHEEL


@app.get("/health")
def health() -> dict:
    return {"status": "ok", "time": _iso_now()}


@app.get("/health/ready")
def readiness() -> JSONResponse:
    checks: dict[str, dict[str, str]] = {}
    overall_status = "ok"

    try:
        build_store().ping()
        checks["store"] = {"status": "ok"}
    except Exception as exc:
        overall_status = "degraded"
        checks["store"] = {"status": "error", "reason": str(exc)}

    status_code = 200 if overall_status == "ok" else 503
    return JSONResponse(
        status_code=status_code,
        content={
            "status": overall_status,
            "time": _iso_now(),
            "checks": checks,
        },
    )


@app.get("/ops/metrics")
def ops_metrics() -> dict:
    return {"status": "ok", "metrics": METRICS.snapshot()}


@app.get("/ops/metrics/prometheus")
def ops_metrics_prometheus() -> PlainTextResponse:
    return PlainTextResponse(
        content=render_prometheus_metrics(METRICS.snapshot()),
        media_type="text/plain; version=0.0.4; charset=utf-8",
    )


# Wheel endpoints are async so they share the event loop thread with the
# settle callbacks scheduled by AsyncioScheduler.


@app.get("/wheel")
async def wheel_snapshot() -> dict:
    return get_wheel().snapshot()


@app.post("/wheel/spin")
async def spin_wheel() -> dict:
    wheel = get_wheel()
    started = wheel.spin()
    if started:
        METRICS.increment_spin_started()
    else:
        METRICS.increment_spin_refused(wheel.last_refusal or "unknown")
    return {"started": started, "wheel": wheel.snapshot()}


@app.post("/wheel/reset")
async def reset_wheel() -> dict:
    wheel = get_wheel()
    return {"reset": wheel.reset(), "wheel": wheel.snapshot()}


@app.get("/items")
async def list_items() -> dict:
    return {"items": [item.to_dict() for item in get_wheel().registry.items]}


@app.post("/items")
async def add_item(payload: AddItemRequest) -> dict:
    registry = get_wheel().registry
    item = registry.add(payload.label)
    return {
        "added": item is not None,
        "item": item.to_dict() if item else None,
        "items": [entry.to_dict() for entry in registry.items],
    }


@app.delete("/items/{item_id}")
async def remove_item(item_id: int) -> dict:
    wheel = get_wheel()
    if wheel.registry.get(item_id) is None:
        raise HTTPException(status_code=404, detail="Item not found.")
    removed = wheel.registry.remove(item_id)
    return {
        "removed": removed,
        "items": [entry.to_dict() for entry in wheel.registry.items],
    }


@app.delete("/items")
async def clear_items() -> dict:
    registry = get_wheel().registry
    return {"cleared": registry.clear(), "items": [entry.to_dict() for entry in registry.items]}


@app.get("/history")
async def list_history() -> dict:
    return {"history": [entry.to_dict() for entry in get_wheel().history.entries]}


@app.delete("/history")
async def clear_history() -> dict:
    wheel = get_wheel()
    wheel.clear_history()
    return {"history": []}
