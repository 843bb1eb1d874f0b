# Utils module
from .observability import (
    Logger,
    MetricsRegistry,
    StructlogConfig,
    RUN_ID,
    get_metrics,
    initialize_observability,
)

__all__ = [
    "Logger",
    "MetricsRegistry",
    "StructlogConfig",
    "RUN_ID",
    "get_metrics",
    "initialize_observability",
]
