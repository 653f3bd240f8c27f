"""Weighted random choice over the error catalog."""

from __future__ import annotations

import random
from collections.abc import Sequence

from .schema import ErrorDefinition


def select_error(catalog: Sequence[ErrorDefinition], rng: random.Random) -> ErrorDefinition:
    """Pick an entry by walking the cumulative normalized weights."""
    draw = rng.random()
    cumulative = 0.0
    for error in catalog:
        cumulative += error.normalized_weight
        if draw <= cumulative:
            return error
    # Rounding can leave the total a hair under the draw
    return catalog[0]
