"""Per-request inputs and decision outcomes exchanged with the adapter."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .schema import ErrorDefinition


@dataclass
class ChaosRequest:
    """What the engine needs to know about an incoming request.

    ``raw`` carries the framework request for custom hooks. A hook that handles
    the request itself may leave its response in ``response``.
    """

    method: str
    path: str
    raw: Any = None
    response: Any = None


@dataclass(frozen=True)
class PassThrough:
    """The request continues unmodified to its normal handler."""


PASS_THROUGH = PassThrough()


@dataclass(frozen=True)
class Handled:
    """A custom hook produced the response; the engine did nothing else."""

    response: Any = None


@dataclass(frozen=True)
class ChaosResponse:
    """A synthetic error the adapter must write as the complete response."""

    status_code: int
    headers: dict[str, str]
    body: Any
    content_type: str
    error: ErrorDefinition
    delay_ms: int | None = None
