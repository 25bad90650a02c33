import asyncio
import logging
import os
from unittest.mock import patch

import pytest

from shortlist.models.settings import get_settings
from shortlist.utils.exceptions import (
    ConfigurationError,
    ExceptionContext,
    ExternalServiceError,
    ExtractionError,
    ScoringError,
    ValidationError,
    map_to_http_exception,
)
from shortlist.utils.logging_config import (
    PerformanceMonitor,
    configure_for_environment,
    get_logger,
    log_api_call,
    log_function_call,
    setup_logging,
)


class TestExceptions:
    """Test cases for custom exceptions"""

    def test_to_dict(self):
        exc = ValidationError("bad input", field="jd", cause=KeyError("jd"))
        data = exc.to_dict()
        assert data["error_type"] == "ValidationError"
        assert data["error_code"] == "VALIDATION_ERROR"
        assert data["details"] == {"field": "jd"}
        assert "cause" in data

    @pytest.mark.parametrize("exc,status", [
        (ValidationError("x"), 400),
        (ConfigurationError("x"), 500),
        (ExtractionError("x"), 500),
        (ScoringError("x"), 500),
        (ExternalServiceError("x", service_name="ollama"), 502),
    ])
    def test_http_mapping(self, exc, status):
        http_exc = map_to_http_exception(exc)
        assert http_exc.status_code == status
        assert http_exc.detail["message"] == "x"


class TestExceptionContext:
    """Test cases for ExceptionContext wrapping"""

    def test_foreign_error_becomes_scoring_error(self):
        with pytest.raises(ScoringError) as info:
            with ExceptionContext("process_resume", resume="a.pdf"):
                raise ValueError("nope")
        assert info.value.details == {"resume": "a.pdf", "operation": "process_resume"}
        assert isinstance(info.value.cause, ValueError)
        assert info.value.message == "process_resume failed: nope"

    def test_custom_error_class(self):
        with pytest.raises(ExtractionError):
            with ExceptionContext("read_pdf", error_cls=ExtractionError):
                raise OSError("truncated")

    def test_logs_when_given_a_logger(self, caplog):
        logger = get_logger("context_test")
        with caplog.at_level(logging.ERROR, logger="shortlist.context_test"):
            with pytest.raises(ScoringError):
                with ExceptionContext("rank", logger=logger):
                    raise KeyError("score")
        assert any("rank failed" in r.message for r in caplog.records)

    def test_other_errors_become_scoring_errors(self):
        with pytest.raises(ScoringError):
            with ExceptionContext("score"):
                raise RuntimeError("boom")

    def test_custom_errors_pass_through(self):
        with pytest.raises(ExtractionError):
            with ExceptionContext("extract"):
                raise ExtractionError("bad pdf")

    def test_no_error_is_untouched(self):
        with ExceptionContext("noop") as ctx:
            value = 1
        assert value == 1
        assert ctx.operation == "noop"


class TestLogging:
    """Test cases for logging helpers"""

    def test_logger_prefix(self):
        assert get_logger("scoring").name == "shortlist.scoring"
        assert get_logger("shortlist.scoring").name == "shortlist.scoring"

    def test_file_logging_splits_errors(self, tmp_path):
        log_file = tmp_path / "svc.log"
        try:
            setup_logging(level="INFO", log_file=str(log_file), enable_console=False)
            get_logger("file_test").info("scored 3 resumes")
            get_logger("file_test").error("scoring failed")
            assert "scored 3 resumes" in log_file.read_text(encoding="utf-8")
            errors = (tmp_path / "svc_errors.log").read_text(encoding="utf-8")
            assert "scoring failed" in errors
            assert "scored 3 resumes" not in errors
        finally:
            configure_for_environment()

    def test_testing_environment_has_no_file_handler(self):
        with patch.dict(os.environ, {"ENVIRONMENT": "testing"}):
            assert configure_for_environment() == "testing"
        root = logging.getLogger()
        assert root.level == logging.WARNING
        assert not any(isinstance(h, logging.FileHandler) for h in root.handlers)

    def test_performance_monitor_logs(self, caplog):
        logger = get_logger("perf_test")
        with caplog.at_level(logging.INFO, logger="shortlist.perf_test"):
            with PerformanceMonitor("unit", logger, threshold_ms=10000):
                pass
        assert any("unit completed" in r.message for r in caplog.records)

    def test_performance_monitor_warns_when_slow(self, caplog):
        logger = get_logger("perf_test")
        with caplog.at_level(logging.WARNING, logger="shortlist.perf_test"):
            with PerformanceMonitor("slow unit", logger, threshold_ms=0) as monitor:
                sum(range(1000))
        assert monitor.elapsed_ms >= 0
        assert any("slow unit took" in r.message for r in caplog.records)

    def test_log_function_call_reraises(self, caplog):
        @log_function_call
        def explode():
            raise RuntimeError("boom")

        with caplog.at_level(logging.ERROR):
            with pytest.raises(RuntimeError):
                explode()
        assert any("explode raised" in r.message for r in caplog.records)

    def test_log_api_call(self, caplog):
        @log_api_call("score")
        async def endpoint():
            return "ok"

        with caplog.at_level(logging.INFO, logger="shortlist.api.score"):
            assert asyncio.run(endpoint()) == "ok"
        messages = [r.message for r in caplog.records]
        assert "API score started" in messages
        assert any(m.startswith("API score completed in") for m in messages)


class TestSettings:
    """Test cases for environment-driven settings"""

    def test_defaults(self):
        with patch.dict(os.environ, {"MAX_CONCURRENT": "4"}):
            assert get_settings().processing.max_concurrent == 4

    @pytest.mark.parametrize("value", ["abc", "0"])
    def test_invalid_value_raises_configuration_error(self, value):
        with patch.dict(os.environ, {"MAX_CONCURRENT": value}):
            with pytest.raises(ConfigurationError) as info:
                get_settings()
        assert "Invalid environment configuration" in info.value.message
        assert map_to_http_exception(info.value).status_code == 500
