# tests/unit/test_observability.py
import pytest
from unittest.mock import MagicMock, patch

from torneo.config import ObservabilitySettings
from torneo.utils import observability
from torneo.utils.observability import RUN_ID, Logger, MetricsRegistry, get_metrics, initialize_observability


class TestObservability:

    @pytest.fixture
    def mock_logger(self):
        return MagicMock()

    def test_logger_event_structure(self, mock_logger):
        """Log events include required context fields."""
        with patch("structlog.get_logger", return_value=mock_logger):
            logger = Logger("test_module")
            token = RUN_ID.set("run-123")
            try:
                logger.log_event("test_event", custom_field=123)
            finally:
                RUN_ID.reset(token)

            mock_logger.info.assert_called_once()
            call_args = mock_logger.info.call_args
            assert call_args[0][0] == "test_event"

            kwargs = call_args[1]
            assert kwargs["module"] == "test_module"
            assert kwargs["custom_field"] == 123
            assert kwargs["run_id"] == "run-123"

    def test_logger_error_capture(self, mock_logger):
        """Error logs capture exception info."""
        with patch("structlog.get_logger", return_value=mock_logger):
            logger = Logger("test_module")
            try:
                raise ValueError("Oops")
            except ValueError as e:
                logger.log_error("test_error", exc_info=e)

            mock_logger.error.assert_called_once()
            kwargs = mock_logger.error.call_args[1]
            assert kwargs["exc_info"] is not None
            assert kwargs["run_id"] is None

    def test_metrics_registry_initialization(self):
        """Metrics registry initializes standard metrics."""
        registry = MetricsRegistry()
        assert registry.stage_duration is not None
        assert registry.analysis_runs is not None
        assert registry.tokens_scanned is not None
        assert registry.diagnostics is not None

    def test_registries_are_isolated(self):
        first, second = MetricsRegistry(), MetricsRegistry()
        first.tokens_scanned.inc(5)
        assert second.registry.get_sample_value("tokens_scanned_total") == 0.0
        assert first.registry.get_sample_value("tokens_scanned_total") == 5.0

    def test_initialize_replaces_global_metrics(self, monkeypatch):
        monkeypatch.setattr(observability, "METRICS", None)
        metrics, config = initialize_observability(ObservabilitySettings(log_format="json"))
        assert get_metrics() is metrics
        assert config.log_format == "json"

    def test_get_metrics_is_lazy_singleton(self, monkeypatch):
        monkeypatch.setattr(observability, "METRICS", None)
        assert get_metrics() is get_metrics()
