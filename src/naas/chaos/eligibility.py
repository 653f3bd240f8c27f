"""Decides whether a request is subject to chaos under the current configuration."""

from __future__ import annotations

import random

from .decisions import ChaosRequest
from .routes import matches_any
from .schema import EngineConfig


def should_apply_chaos(
    request: ChaosRequest,
    config: EngineConfig,
    environment: str,
    rng: random.Random,
) -> bool:
    """Run the filters in order and, if they all pass, roll against the error rate.

    Rates of exactly 0 and 100 never touch the random source.
    """
    if config.error_rate == 0:
        return False

    if environment not in config.environments:
        return False

    if request.method.upper() not in config.target_methods:
        return False

    if matches_any(request.path, config.exclude_routes):
        return False

    if config.target_routes and not matches_any(request.path, config.target_routes):
        return False

    if config.error_rate == 100:
        return True

    return rng.random() * 100 < config.error_rate
