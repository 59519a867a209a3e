from .config import (
    ClientConfig,
    TelemetryConfig,
    TransportConfig,
    get_app_env,
    load_config,
)

__all__ = [
    "ClientConfig",
    "TelemetryConfig",
    "TransportConfig",
    "get_app_env",
    "load_config",
]
