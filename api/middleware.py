"""Latency and failure simulation for resource routes."""

import asyncio
import random
from collections.abc import Awaitable, Callable, Iterable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from core.log import get_logger

logger = get_logger(__name__)


class SimulationMiddleware(BaseHTTPMiddleware):
    """Delays resource requests and fails a share of them with a 500."""

    def __init__(
        self,
        app: ASGIApp,
        resource_paths: Iterable[str],
        delay_ms: int = 0,
        error_rate: float = 0.0,
        rng: random.Random | None = None,
    ) -> None:
        super().__init__(app)
        self.resource_paths = tuple(resource_paths)
        self.delay_ms = delay_ms
        self.error_rate = error_rate
        self.rng = rng or random.Random()

    def _is_resource(self, path: str) -> bool:
        return any(
            path == prefix or path.startswith(f"{prefix}/")
            for prefix in self.resource_paths
        )

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        if not self._is_resource(request.url.path):
            return await call_next(request)

        if self.delay_ms > 0:
            await asyncio.sleep(self.delay_ms / 1000)

        if self.error_rate > 0 and self.rng.random() < self.error_rate:
            logger.info(f"Simulated failure for {request.method} {request.url.path}")
            return JSONResponse(
                status_code=500, content={"detail": "Simulated server error"}
            )

        return await call_next(request)
