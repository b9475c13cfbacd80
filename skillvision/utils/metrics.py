"""
Lightweight in-process metrics: counters and histograms for OpenAI call
duration, generation outcomes and pipeline failures by kind.

Exposed as a JSON snapshot on /metrics.
"""

import time
from collections import defaultdict
from contextlib import asynccontextmanager
from typing import Dict, Any

from skillvision.utils.logger import get_logger

logger = get_logger("metrics")

_counters: Dict[str, int] = defaultdict(int)
_histograms: Dict[str, list] = defaultdict(list)

MAX_HISTOGRAM_SAMPLES = 500  # Rolling window


def inc(name: str, value: int = 1) -> None:
    """Increment a counter."""
    _counters[name] += value


def observe(name: str, value: float) -> None:
    """Record a histogram observation (e.g., duration)."""
    bucket = _histograms[name]
    bucket.append(value)
    if len(bucket) > MAX_HISTOGRAM_SAMPLES:
        _histograms[name] = bucket[-MAX_HISTOGRAM_SAMPLES:]


@asynccontextmanager
async def track_duration(service: str, operation: str = "call"):
    """
    Context manager that tracks call duration and success/failure.

    Usage:
        async with track_duration("openai", "generate"):
            result = await openai_call(...)
    """
    start = time.monotonic()
    try:
        yield
    except Exception:
        duration_ms = (time.monotonic() - start) * 1000
        observe(f"{service}.{operation}.duration_ms", duration_ms)
        inc(f"{service}.{operation}.error")
        logger.warning(
            "metrics.call",
            extra={"service": service, "duration_ms": round(duration_ms, 1), "status": "error"},
        )
        raise
    duration_ms = (time.monotonic() - start) * 1000
    observe(f"{service}.{operation}.duration_ms", duration_ms)
    inc(f"{service}.{operation}.success")
    logger.info(
        "metrics.call",
        extra={"service": service, "duration_ms": round(duration_ms, 1), "status": "success"},
    )


def _percentile(values: list, pct: float) -> float:
    ordered = sorted(values)
    index = min(len(ordered) - 1, int(round(pct * (len(ordered) - 1))))
    return round(ordered[index], 1)


def get_snapshot() -> Dict[str, Any]:
    """Counters plus p50/p95/max for each histogram."""
    histograms = {}
    for name, values in _histograms.items():
        if not values:
            continue
        histograms[name] = {
            "count": len(values),
            "p50": _percentile(values, 0.5),
            "p95": _percentile(values, 0.95),
            "max": round(max(values), 1),
        }
    return {"counters": dict(_counters), "histograms": histograms}


def reset() -> None:
    _counters.clear()
    _histograms.clear()
