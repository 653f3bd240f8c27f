"""Per-request chaos decisions and runtime controls."""

from __future__ import annotations

import asyncio
import inspect
import random
import threading
from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any

from .decisions import PASS_THROUGH, ChaosRequest, ChaosResponse, Handled, PassThrough
from .delay import Sleeper, plan_delay, sleep_ms
from .eligibility import should_apply_chaos
from .errors import HookFault, ProcessingFault
from .formatting import CONTENT_TYPES, format_body
from .logsink import LogSink, resolve_log_sink
from .schema import EngineConfig, ErrorDefinition, canonical_options, merge_config, validate_config
from .selection import select_error

VERSION = "1.0.0"
DEFAULT_ENVIRONMENT = "development"

Decision = PassThrough | Handled | ChaosResponse


@dataclass(frozen=True)
class EngineState:
    """One published snapshot: config, its log sink and the rate saved by disable()."""

    config: EngineConfig
    sink: LogSink
    saved_error_rate: float | None = None


class ChaosEngine:
    """Decides, per request, whether to pass it through or answer with a synthetic error.

    All requests read the same published ``EngineState``. Updates build a new
    validated snapshot and swap it in under a lock, so a request always sees
    either the old or the new configuration in full.
    """

    def __init__(
        self,
        options: Mapping[str, Any] | EngineConfig | None = None,
        *,
        environment: str | None = None,
        rng: random.Random | None = None,
        sleep: Sleeper = asyncio.sleep,
        **overrides: Any,
    ):
        if isinstance(options, EngineConfig):
            config = merge_config(options, overrides) if overrides else options
        else:
            config = validate_config({**(options or {}), **overrides})
        self.environment = environment or DEFAULT_ENVIRONMENT
        self.rng = rng or random.Random()
        self._sleep = sleep
        self._lock = threading.Lock()
        self._state = EngineState(config=config, sink=resolve_log_sink(config.logging))

    @property
    def config(self) -> EngineConfig:
        return self._state.config

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def disabled(self) -> bool:
        return self._state.saved_error_rate is not None

    # ------------------------------------------------------------------
    # Request evaluation
    # ------------------------------------------------------------------

    async def decide(self, request: ChaosRequest) -> Decision:
        """Evaluate one request against the current snapshot.

        Raises HookFault if a custom hook fails and ProcessingFault for any
        other unexpected error; both are logged before propagating.
        """
        state = self._state
        config = state.config

        for hook in config.custom_chaos:
            try:
                result = hook(request)
                if inspect.isawaitable(result):
                    result = await result
            except Exception as exc:
                self._log(state, "error", "NaaS middleware error", {"error": str(exc), "path": request.path})
                raise HookFault(str(exc), path=request.path, method=request.method) from exc
            if result is False:
                return Handled(request.response)

        try:
            if not should_apply_chaos(request, config, self.environment, self.rng):
                return PASS_THROUGH

            delay_ms = plan_delay(config.delays, self.rng)
            if delay_ms is not None:
                await sleep_ms(delay_ms, self._sleep)

            error = select_error(config.errors, self.rng)
            self._log(
                state,
                "info",
                "NaaS chaos applied",
                {
                    "path": request.path,
                    "method": request.method,
                    "errorCode": error.code,
                    "errorMessage": error.message,
                },
            )
            return self._build_response(config, error, request, delay_ms)
        except Exception as exc:
            self._log(state, "error", "NaaS middleware error", {"error": str(exc), "path": request.path})
            raise ProcessingFault(str(exc), path=request.path, method=request.method) from exc

    def _build_response(
        self,
        config: EngineConfig,
        error: ErrorDefinition,
        request: ChaosRequest,
        delay_ms: int | None,
    ) -> ChaosResponse:
        content_type = CONTENT_TYPES[config.response_format]
        headers = {"X-Chaos-Engineering": "NaaS", "X-NaaS-Version": VERSION}
        headers.update(config.custom_headers)
        headers = {name: value for name, value in headers.items() if name.lower() != "content-type"}
        headers["Content-Type"] = content_type

        return ChaosResponse(
            status_code=error.code,
            headers=headers,
            body=format_body(config.response_format, error, request, VERSION),
            content_type=content_type,
            error=error,
            delay_ms=delay_ms,
        )

    def _log(self, state: EngineState, level: str, message: str, data: dict[str, Any]) -> None:
        state.sink.log(level, message, data)

    # ------------------------------------------------------------------
    # Runtime controls
    # ------------------------------------------------------------------

    def update_config(self, partial: Mapping[str, Any]) -> EngineConfig:
        """Merge ``partial`` into the current config and publish it.

        Raises ConfigError and keeps the current config if the result is invalid.
        An explicit error rate given while disabled replaces the saved one.
        """
        changes = canonical_options(partial)
        with self._lock:
            state = self._state
            config = merge_config(state.config, changes)
            sink = resolve_log_sink(config.logging) if "logging" in changes else state.sink
            saved = None if "error_rate" in changes else state.saved_error_rate
            self._state = EngineState(config=config, sink=sink, saved_error_rate=saved)
        return config

    def disable(self) -> None:
        """Suspend injection; repeated calls keep the originally saved rate."""
        with self._lock:
            state = self._state
            if state.saved_error_rate is not None:
                return
            self._state = replace(
                state,
                config=state.config.model_copy(update={"error_rate": 0}),
                saved_error_rate=state.config.error_rate,
            )

    def enable(self) -> None:
        """Restore the error rate saved by disable(); no-op if not disabled."""
        with self._lock:
            state = self._state
            if state.saved_error_rate is None:
                return
            self._state = replace(
                state,
                config=state.config.model_copy(update={"error_rate": state.saved_error_rate}),
                saved_error_rate=None,
            )

    def get_stats(self) -> dict[str, Any]:
        """Snapshot of the current config, environment and engine version."""
        state = self._state
        return {
            "config": state.config.model_dump(),
            "environment": self.environment,
            "version": VERSION,
            "disabled": state.saved_error_rate is not None,
        }
