"""
OpenAI call guard - circuit breaker, concurrency cap, timeout and optional
retry around the one outbound dependency.

    gw = get_gateway()
    result = await gw.execute(client.chat.completions.create, model=..., messages=...)

A timeout surfaces as asyncio.TimeoutError and a rejected call as
CircuitOpenError; the generative client maps both to UpstreamUnavailable.
"""
import asyncio
import random
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Optional

import openai

from skillvision.config import get_settings
from skillvision.utils.logger import get_logger
from skillvision.utils.metrics import inc, observe

logger = get_logger("gateway")

# Worth another attempt when retries are enabled
_TRANSIENT_ERRORS = (
    asyncio.TimeoutError,
    ConnectionError,
    openai.APIConnectionError,
    openai.RateLimitError,
    openai.InternalServerError,
)


@dataclass(frozen=True)
class GatewayConfig:
    max_concurrent: int = 10
    timeout_seconds: float = 45.0
    max_retries: int = 0
    failure_threshold: int = 5
    recovery_seconds: float = 30.0
    base_backoff_seconds: float = 1.0


def default_gateway_config() -> GatewayConfig:
    settings = get_settings()
    return GatewayConfig(
        max_concurrent=settings.openai_max_concurrent,
        timeout_seconds=settings.openai_timeout_seconds,
        max_retries=settings.openai_max_retries,
    )


class CircuitState(str, Enum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


class CircuitOpenError(Exception):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"{name} circuit is open, call rejected")


class ServiceGateway:
    """
    Guards calls to one upstream.

    After `failure_threshold` consecutive failures the circuit opens and calls
    are rejected until `recovery_seconds` pass. The next call is let through as a
    trial: success closes the circuit, failure reopens it.
    """

    def __init__(self, config: Optional[GatewayConfig] = None, name: str = "openai") -> None:
        self.name = name
        self.config = config or default_gateway_config()
        self.state = CircuitState.CLOSED
        self.failures = 0
        self.opened_at = 0.0
        self._semaphore = asyncio.Semaphore(self.config.max_concurrent)

    def _admit(self) -> None:
        if self.state != CircuitState.OPEN:
            return
        if time.monotonic() - self.opened_at < self.config.recovery_seconds:
            inc(f"{self.name}.circuit_rejected")
            raise CircuitOpenError(self.name)
        self.state = CircuitState.HALF_OPEN
        logger.info("circuit.half_open", extra={"service": self.name})

    def _record_success(self) -> None:
        if self.state != CircuitState.CLOSED:
            logger.info("circuit.closed", extra={"service": self.name})
        self.state = CircuitState.CLOSED
        self.failures = 0

    def _record_failure(self) -> None:
        self.failures += 1
        if self.state == CircuitState.HALF_OPEN or self.failures >= self.config.failure_threshold:
            self.state = CircuitState.OPEN
            self.opened_at = time.monotonic()
            logger.warning("circuit.open", extra={"service": self.name, "error": f"{self.failures} failures"})

    async def execute(self, fn: Callable[..., Awaitable[Any]], *args: Any, **kwargs: Any) -> Any:
        start = time.monotonic()
        attempts = 1 + self.config.max_retries
        for attempt in range(1, attempts + 1):
            self._admit()
            try:
                async with self._semaphore:
                    result = await asyncio.wait_for(fn(*args, **kwargs), timeout=self.config.timeout_seconds)
            except Exception as exc:
                self._record_failure()
                inc(f"{self.name}.error")
                if attempt < attempts and isinstance(exc, _TRANSIENT_ERRORS):
                    wait = self.config.base_backoff_seconds * (2 ** (attempt - 1))
                    wait += random.uniform(0, wait * 0.5)
                    logger.warning(
                        "gateway.retry",
                        extra={"service": self.name, "attempt": attempt, "wait_seconds": round(wait, 2),
                               "error": str(exc)[:200]},
                    )
                    await asyncio.sleep(wait)
                    continue
                logger.error(
                    "gateway.failed",
                    extra={"service": self.name, "attempt": attempt, "error_type": type(exc).__name__,
                           "error": str(exc)[:200]},
                )
                raise

            self._record_success()
            inc(f"{self.name}.success")
            observe(f"{self.name}.duration_ms", (time.monotonic() - start) * 1000)
            return result

    def circuit_state(self) -> str:
        return self.state.value


_gateway: Optional[ServiceGateway] = None


def get_gateway() -> ServiceGateway:
    global _gateway
    if _gateway is None:
        _gateway = ServiceGateway()
    return _gateway
