"""Error body formats for injected responses."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any
from xml.sax.saxutils import escape

from .decisions import ChaosRequest
from .schema import ErrorDefinition

CONTENT_TYPES = {
    "json": "application/json",
    "xml": "application/xml",
    "plain": "text/plain",
}


def iso_timestamp(now: datetime | None = None) -> str:
    now = now or datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_envelope(error: ErrorDefinition, request: ChaosRequest, version: str, timestamp: str) -> dict[str, Any]:
    return {
        "error": {
            "code": error.code,
            "message": error.message,
            "timestamp": timestamp,
            "path": request.path,
            "method": request.method,
            "chaos": True,
            "naas": version,
        }
    }


def format_body(
    response_format: str,
    error: ErrorDefinition,
    request: ChaosRequest,
    version: str,
    now: datetime | None = None,
) -> Any:
    """Render the body for ``response_format``: a dict for json, a string otherwise."""
    if response_format == "plain":
        return error.message

    timestamp = iso_timestamp(now)
    if response_format == "xml":
        return (
            '<?xml version="1.0"?>\n'
            "<error>\n"
            f"  <code>{error.code}</code>\n"
            f"  <message>{escape(error.message)}</message>\n"
            f"  <timestamp>{timestamp}</timestamp>\n"
            f"  <path>{escape(request.path)}</path>\n"
            f"  <method>{escape(request.method)}</method>\n"
            "</error>"
        )

    return build_envelope(error, request, version, timestamp)
