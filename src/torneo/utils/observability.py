# src/torneo/utils/observability.py
import logging
import sys
from typing import Optional
import structlog
import contextvars
from prometheus_client import Counter, Histogram, Gauge, CollectorRegistry

from ..config.settings import ObservabilitySettings

# Run ID shared by every log line of one analysis
RUN_ID = contextvars.ContextVar('run_id', default=None)


def _stderr_logger(*args):
    # sys.stderr is looked up on every call, never stored
    return structlog.PrintLogger(sys.stderr)


class MetricsRegistry:
    """Centralized metrics management."""

    def __init__(self):
        self.registry = CollectorRegistry()
        self._init_metrics()

    def _init_metrics(self):
        """Initialize all metrics with proper naming conventions."""

        # HISTOGRAMS (timing data)
        self.stage_duration = Histogram(
            'analysis_stage_duration_seconds',
            'Duration of one analysis stage in seconds',
            labelnames=['stage'],
            buckets=(0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0),
            registry=self.registry
        )

        # COUNTERS (monotonic increases)
        self.analysis_runs = Counter(
            'analysis_runs_total',
            'Total number of analysis runs',
            labelnames=['status'],  # 'success' or 'failure'
            registry=self.registry
        )

        self.tokens_scanned = Counter(
            'tokens_scanned_total',
            'Tokens produced by the scanner',
            registry=self.registry
        )

        self.diagnostics = Counter(
            'diagnostics_total',
            'Diagnostics reported by the front end',
            labelnames=['stage', 'kind'],
            registry=self.registry
        )

        # GAUGES (point-in-time snapshots)
        self.last_analysis_timestamp = Gauge(
            'last_analysis_timestamp_unix',
            'Unix timestamp of the last completed analysis',
            registry=self.registry
        )


class StructlogConfig:
    """Structured logging configuration."""

    @staticmethod
    def configure(env: str = 'development', log_level: str = 'INFO', log_format: Optional[str] = None):
        """
        Configure structlog with environment-appropriate settings.

        Production (or log_format='json'): JSON output
        Development: Console output (human-readable)
        """
        if log_format is None:
            log_format = 'json' if env == 'production' else 'console'

        shared_processors = [
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt='iso'),
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
        ]

        if log_format == 'json':
            processors = shared_processors + [
                structlog.processors.dict_tracebacks,
                structlog.processors.JSONRenderer(),
            ]
        else:
            processors = shared_processors + [
                structlog.dev.ConsoleRenderer(),
            ]

        structlog.configure(
            processors=processors,
            wrapper_class=structlog.make_filtering_bound_logger(
                logging.getLevelName(log_level)
            ),
            context_class=dict,
            logger_factory=_stderr_logger,
            cache_logger_on_first_use=False,
        )


class Logger:
    """Wrapper for structured logging with context awareness."""

    def __init__(self, module_name: str):
        self.logger = structlog.get_logger(module_name)
        self.module_name = module_name

    def log_event(self, event: str, **kwargs):
        """Log structured event with automatic context."""
        ctx = {'run_id': RUN_ID.get(), 'module': self.module_name}
        ctx.update(kwargs)
        return self.logger.info(event, **ctx)

    def log_error(self, event: str, exc_info=None, **kwargs):
        """Log error with exception info."""
        ctx = {'run_id': RUN_ID.get(), 'module': self.module_name}
        ctx.update(kwargs)
        return self.logger.error(event, exc_info=exc_info, **ctx)


def initialize_observability(config: Optional[ObservabilitySettings] = None):
    """One-stop initialization for logging and metrics."""
    global METRICS
    config = config or ObservabilitySettings()
    StructlogConfig.configure(
        env=config.environment,
        log_level=config.log_level,
        log_format=config.log_format,
    )
    METRICS = MetricsRegistry()

    logger = structlog.get_logger(__name__)
    logger.debug(
        'observability_initialized',
        environment=config.environment,
        log_format=config.log_format,
        metrics_enabled=config.enable_metrics,
    )

    return METRICS, config


# Global metrics instance
METRICS = None


def get_metrics() -> MetricsRegistry:
    """Lazy-load metrics singleton."""
    if METRICS is None:
        initialize_observability()
    return METRICS
