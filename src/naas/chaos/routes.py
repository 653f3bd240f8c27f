"""Route pattern matching for target and exclude lists."""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import Any


def matches_route(path: str, pattern: Any) -> bool:
    """Return True if ``path`` matches a literal/prefix string or a compiled regex."""
    if isinstance(pattern, str):
        return path == pattern or path.startswith(pattern)
    if isinstance(pattern, re.Pattern):
        return pattern.search(path) is not None
    return False


def matches_any(path: str, patterns: Iterable[Any]) -> bool:
    return any(matches_route(path, pattern) for pattern in patterns)
