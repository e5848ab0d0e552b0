"""Tests for engine settings and logging setup."""

import json
import logging

import pytest
from pydantic import ValidationError

from calculator.tax_calculator import compute_all
from config import EngineSettings, JsonFormatter, ReadableFormatter, configure_logging, get_logger
from factories import make_return


@pytest.fixture
def root_logger():
    """Restore the root logger after a test reconfigures it."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


class TestEngineSettings:

    def test_defaults(self, settings):
        assert settings.default_tax_year == 2025
        assert settings.log_level == "INFO"
        assert settings.log_json is False
        assert settings.strict_state_modules is False

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("TAX_ENGINE_STRICT_STATE_MODULES", "true")
        monkeypatch.setenv("TAX_ENGINE_DEFAULT_TAX_YEAR", "2026")
        monkeypatch.setenv("TAX_ENGINE_LOG_LEVEL", "debug")

        settings = EngineSettings(_env_file=None)

        assert settings.strict_state_modules is True
        assert settings.default_tax_year == 2026
        assert settings.log_level == "DEBUG"

    def test_unprefixed_variables_ignored(self, monkeypatch):
        monkeypatch.setenv("STRICT_STATE_MODULES", "true")
        assert EngineSettings(_env_file=None).strict_state_modules is False

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            EngineSettings(_env_file=None, log_level="loud")


class TestConfigureLogging:

    def test_readable_output(self, root_logger, settings):
        configure_logging(settings=settings)

        assert root_logger.level == logging.INFO
        assert len(root_logger.handlers) == 1
        assert isinstance(root_logger.handlers[0].formatter, ReadableFormatter)

    def test_json_output_and_level(self, root_logger, settings):
        configure_logging(level="warning", json_output=True, settings=settings)

        assert root_logger.level == logging.WARNING
        assert isinstance(root_logger.handlers[0].formatter, JsonFormatter)

    def test_json_formatter_record(self):
        record = logging.LogRecord("calculator.engine", logging.INFO, __file__, 10, "Line %s", ("24",), None)
        record.extra_data = {"tax_year": 2025}

        data = json.loads(JsonFormatter().format(record))

        assert data["level"] == "INFO"
        assert data["logger"] == "calculator.engine"
        assert data["message"] == "Line 24"
        assert data["tax_year"] == 2025

    def test_readable_formatter_appends_extras(self):
        record = logging.LogRecord("calculator.engine", logging.WARNING, __file__, 10, "done", (), None)
        record.extra_data = {"state": "CA"}

        line = ReadableFormatter().format(record)

        assert "[calculator.engine] done" in line
        assert line.endswith("| state=CA")


class TestContextLogger:

    def test_context_merged_into_extra_data(self, caplog):
        log = get_logger("calculator.test", tax_year=2025, state=None)

        with caplog.at_level(logging.INFO, logger="calculator.test"):
            log.info("computed", extra={"extra_data": {"nodes": 12}})

        record = caplog.records[-1]
        assert record.extra_data == {"tax_year": 2025, "nodes": 12}

    def test_call_site_values_win(self, caplog):
        log = get_logger("calculator.test", state="CA")

        with caplog.at_level(logging.INFO, logger="calculator.test"):
            log.info("computed", extra={"extra_data": {"state": "NY"}})

        assert caplog.records[-1].extra_data == {"state": "NY"}

    def test_compute_all_logs_with_return_context(self, caplog, federal_only_registry, settings):
        """Warnings are logged per finding, then one summary record."""
        model = make_return(wages=50000, state="OR")

        with caplog.at_level(logging.INFO, logger="calculator.tax_calculator"):
            compute_all(model, registry=federal_only_registry, settings=settings)

        records = [r for r in caplog.records if r.name == "calculator.tax_calculator"]
        assert [r.levelno for r in records] == [logging.WARNING, logging.INFO]
        assert records[0].extra_data["code"] == "STATE_NOT_SUPPORTED"
        summary = records[-1].extra_data
        assert summary["tax_year"] == 2025
        assert summary["filing_status"] == "single"
        assert summary["states"] == 0
        assert summary["schedules"] == "B"
