"""Pydantic models for the chaos engine configuration."""

from __future__ import annotations

import math
import re
from collections.abc import Mapping, Sequence
from typing import Any, Callable, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator
from pydantic.alias_generators import to_camel

from .errors import ConfigError

RoutePattern = Union[str, re.Pattern]

DEFAULT_METHODS = ["GET", "POST", "PUT", "DELETE", "PATCH"]


class _Model(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="forbid",
        allow_inf_nan=False,
        arbitrary_types_allowed=True,
    )


class ErrorDefinition(_Model):
    """One entry of the error catalog."""

    code: int = Field(gt=0)
    message: str = Field(min_length=1)
    weight: float | None = Field(None, ge=0, allow_inf_nan=False)
    normalized_weight: float = 0.0

    @model_validator(mode="before")
    @classmethod
    def _require_code_and_message(cls, data: Any) -> Any:
        if isinstance(data, Mapping) and (not data.get("code") or not data.get("message")):
            raise ValueError("Each error must have a code and message")
        return data

    @property
    def effective_weight(self) -> float:
        return self.weight or 1


DEFAULT_ERRORS = [
    ErrorDefinition(code=500, message="Internal Server Error", weight=30),
    ErrorDefinition(code=503, message="Service Unavailable", weight=25),
    ErrorDefinition(code=502, message="Bad Gateway", weight=20),
    ErrorDefinition(code=504, message="Gateway Timeout", weight=10),
    ErrorDefinition(code=429, message="Too Many Requests", weight=10),
    ErrorDefinition(code=404, message="Not Found", weight=3),
    ErrorDefinition(code=403, message="Forbidden", weight=2),
]


class DelayPolicy(_Model):
    """Probabilistic latency added before an injected error is returned."""

    enabled: bool = True
    min: int = Field(100, ge=0)  # milliseconds
    max: int = Field(5000, ge=0)
    probability: float = Field(30, ge=0, le=100, allow_inf_nan=False)

    @model_validator(mode="after")
    def _check_bounds(self) -> DelayPolicy:
        if self.max < self.min:
            raise ValueError("Delay max must be greater than or equal to min")
        return self


class LoggingSettings(_Model):
    enabled: bool = True
    level: Literal["debug", "info", "warn", "warning", "error"] = "info"
    logger: Any = None


class EngineConfig(_Model):
    """A complete, validated engine configuration snapshot."""

    error_rate: float = Field(10, allow_inf_nan=False)
    target_routes: list[RoutePattern] = []
    exclude_routes: list[RoutePattern] = []
    target_methods: list[str] = Field(default_factory=lambda: list(DEFAULT_METHODS))
    errors: list[ErrorDefinition] = Field(default_factory=lambda: list(DEFAULT_ERRORS), validate_default=True)
    delays: DelayPolicy = Field(default_factory=DelayPolicy)
    response_format: Literal["json", "xml", "plain"] = "json"
    custom_headers: dict[str, str] = {}
    environments: list[str] = Field(default_factory=lambda: ["development", "testing", "production"])
    custom_chaos: list[Callable[..., Any]] = []
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @field_validator("error_rate")
    @classmethod
    def _check_error_rate(cls, value: float) -> float:
        if value < 0 or value > 100:
            raise ValueError("Error rate must be between 0 and 100")
        return value

    @field_validator("errors", mode="before")
    @classmethod
    def _check_catalog(cls, value: Any) -> Any:
        if isinstance(value, (str, bytes)) or not isinstance(value, Sequence) or len(value) == 0:
            raise ValueError("Errors configuration must be a non-empty list")
        return value

    @field_validator("errors")
    @classmethod
    def _normalize_catalog(cls, value: list[ErrorDefinition]) -> list[ErrorDefinition]:
        return normalize_weights(value)

    @field_validator("target_methods")
    @classmethod
    def _upper_methods(cls, value: list[str]) -> list[str]:
        return [method.upper() for method in value]


def normalize_weights(catalog: Sequence[ErrorDefinition]) -> list[ErrorDefinition]:
    """Return copies of the catalog entries with normalized_weight recomputed."""
    total = sum(error.effective_weight for error in catalog)
    if not math.isfinite(total):
        raise ValueError("Error weights must add up to a finite total")
    return [
        error.model_copy(update={"normalized_weight": error.effective_weight / total})
        for error in catalog
    ]


def _format_validation_error(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err["loc"])
        msg = err["msg"].removeprefix("Value error, ")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts)


def canonical_options(options: Mapping[str, Any]) -> dict[str, Any]:
    """Map camelCase aliases onto field names so merges never hold both spellings."""
    by_alias = {field.alias: name for name, field in EngineConfig.model_fields.items()}
    canonical: dict[str, Any] = {}
    for key, value in options.items():
        name = by_alias.get(key, key)
        if name not in EngineConfig.model_fields:
            raise ConfigError(f"Unknown configuration option: {key}")
        canonical[name] = value
    return canonical


def validate_config(options: Mapping[str, Any] | EngineConfig | None = None) -> EngineConfig:
    """Validate raw options into an EngineConfig, raising ConfigError on any problem."""
    if isinstance(options, EngineConfig):
        return options
    data = canonical_options(options or {})
    try:
        return EngineConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(_format_validation_error(exc)) from exc


def merge_config(current: EngineConfig, partial: Mapping[str, Any]) -> EngineConfig:
    """Overlay the top-level fields in ``partial`` on ``current`` and re-validate."""
    data = {name: getattr(current, name) for name in EngineConfig.model_fields}
    data.update(canonical_options(partial))
    try:
        return EngineConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(_format_validation_error(exc)) from exc
