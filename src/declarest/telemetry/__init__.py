from .config import (
    add_service_name,
    configure_structlog,
    get_logger,
    get_tracer,
    setup_from_config,
    setup_telemetry,
)

__all__ = [
    "add_service_name",
    "configure_structlog",
    "get_logger",
    "get_tracer",
    "setup_telemetry",
    "setup_from_config",
]
