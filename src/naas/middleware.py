"""Starlette/FastAPI adapter around the chaos engine."""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI
from starlette.middleware import Middleware
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from .chaos import ChaosEngine, ChaosRequest, ChaosResponse, Handled
from .config import get_settings


def render_response(decision: ChaosResponse) -> Response:
    """Turn an injected error into a Starlette response."""
    if isinstance(decision.body, dict):
        return JSONResponse(decision.body, status_code=decision.status_code, headers=decision.headers)
    return Response(content=decision.body, status_code=decision.status_code, headers=decision.headers)


class ChaosMiddleware(BaseHTTPMiddleware):
    """Asks the engine about every request and writes injected errors.

    Engine faults are not caught here; they propagate to the application's
    own exception handling.
    """

    def __init__(self, app: ASGIApp, engine: ChaosEngine) -> None:
        super().__init__(app)
        self.engine = engine

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        chaos_request = ChaosRequest(method=request.method, path=request.url.path, raw=request)
        decision = await self.engine.decide(chaos_request)

        if isinstance(decision, ChaosResponse):
            return render_response(decision)
        if isinstance(decision, Handled):
            if isinstance(decision.response, Response):
                return decision.response
            return Response(status_code=204)
        return await call_next(request)


def create_naas(options: dict[str, Any] | None = None, **kwargs: Any) -> Middleware:
    """Build a middleware entry for ``FastAPI(middleware=[...])``.

    Keyword arguments are engine options; ``environment``, ``rng`` and ``sleep``
    are passed to the engine. The environment defaults to the one in Settings.
    """
    kwargs.setdefault("environment", get_settings().environment)
    engine = ChaosEngine(options, **kwargs)
    return Middleware(ChaosMiddleware, engine=engine)


def install_chaos(app: FastAPI, engine: ChaosEngine) -> ChaosEngine:
    """Add chaos middleware backed by ``engine`` to an existing app."""
    app.add_middleware(ChaosMiddleware, engine=engine)
    return engine
