"""Chaos decision engine: eligibility, weighted error selection and delay injection."""

from .decisions import PASS_THROUGH, ChaosRequest, ChaosResponse, Handled, PassThrough
from .engine import VERSION, ChaosEngine, EngineState
from .errors import ChaosError, ChaosFault, ConfigError, HookFault, ProcessingFault
from .logsink import LogSink, resolve_log_sink
from .schema import DelayPolicy, EngineConfig, ErrorDefinition, LoggingSettings, validate_config

__all__ = [
    "PASS_THROUGH",
    "VERSION",
    "ChaosEngine",
    "ChaosError",
    "ChaosFault",
    "ChaosRequest",
    "ChaosResponse",
    "ConfigError",
    "DelayPolicy",
    "EngineConfig",
    "EngineState",
    "ErrorDefinition",
    "Handled",
    "HookFault",
    "LogSink",
    "LoggingSettings",
    "PassThrough",
    "ProcessingFault",
    "resolve_log_sink",
    "validate_config",
]
