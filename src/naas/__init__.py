"""NaaS: probabilistic error and latency injection for ASGI services."""

from .chaos import VERSION as __version__
from .chaos import ChaosEngine, ConfigError
from .middleware import ChaosMiddleware, create_naas, install_chaos

__all__ = ["ChaosEngine", "ChaosMiddleware", "ConfigError", "create_naas", "install_chaos", "__version__"]
