"""
Tests for the logging module.
"""

import json
import logging
from unittest.mock import patch

import pytest
import structlog


class TestConfigureLogging:
    """Tests for configure_logging function."""

    def test_configure_development_mode(self):
        from core.logging import configure_logging

        configure_logging(json_logs=False, log_level="DEBUG")

    def test_configure_log_level(self):
        from core.logging import configure_logging

        configure_logging(log_level="WARNING")

        assert logging.getLogger().level == logging.WARNING

    def test_redis_logger_quietened(self):
        from core.logging import configure_logging

        configure_logging(log_level="DEBUG")

        assert logging.getLogger("redis").level == logging.WARNING

    def test_configure_from_settings(self):
        from config.settings import get_settings_for_testing
        from core.logging import configure_logging_from_settings

        configure_logging_from_settings(get_settings_for_testing(log_level="error", json_logs=True))

        assert logging.getLogger().level == logging.ERROR

    def test_production_forces_json(self):
        from config.settings import get_settings_for_testing
        from core.logging import configure_logging_from_settings

        settings = get_settings_for_testing(environment="production", json_logs=False)
        with patch("core.logging.configure_logging") as configure:
            configure_logging_from_settings(settings)

        assert configure.call_args.kwargs["json_logs"] is True


class TestGetLogger:
    """Tests for get_logger function."""

    def test_get_named_logger(self):
        from core.logging import get_logger

        logger = get_logger("challenge_search.writer")

        assert hasattr(logger, "info")
        assert hasattr(logger, "debug")

    def test_logger_can_log(self):
        from core.logging import configure_logging, get_logger

        configure_logging(json_logs=False, log_level="DEBUG")
        logger = get_logger("test")

        logger.info("Inserting challenge", challenge_id="c1")
        logger.debug("Planned search", facets=["query"], result_key=None)


class TestContextBinding:
    """Tests for context binding functions."""

    def test_bind_and_unbind(self):
        from core.logging import bind_context, unbind_context

        structlog.contextvars.clear_contextvars()
        bind_context(reconcile_run="r1", challenge_id="c1")
        unbind_context("challenge_id")

        ctx = structlog.contextvars.get_contextvars()
        assert ctx.get("reconcile_run") == "r1"
        assert "challenge_id" not in ctx

        unbind_context("reconcile_run")
        assert "reconcile_run" not in structlog.contextvars.get_contextvars()


class TestJSONOutput:
    """Tests for JSON logging output."""

    def test_json_output_is_valid_json(self, capsys):
        from core.logging import configure_logging, get_logger

        configure_logging(json_logs=True, log_level="INFO")
        logger = get_logger("json_test")

        logger.info("Reconciled search index", removed=1, upserted=3)

        captured = capsys.readouterr()
        for line in captured.out.strip().split("\n"):
            if line:
                data = json.loads(line)
                assert "event" in data


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
