"""Tests for config and logging."""

import json
import logging
import os
import sys
from datetime import date
from decimal import Decimal
from pathlib import Path
from unittest.mock import patch

import pytest

from collection_engine.config import (
    AgreementConfig,
    DashboardConfig,
    EngineConfig,
    OutputConfig,
    SchedulingConfig,
)
from collection_engine.exceptions import ConfigurationError
from collection_engine.logging import (
    JsonFormatter,
    ReferenceDateFilter,
    get_logger,
    setup_logging,
)
from collection_engine.models.collection import RemainderPolicy


class TestSchedulingConfig:
    """Tests for SchedulingConfig."""

    def test_default_values(self) -> None:
        """Test default configuration values."""
        config = SchedulingConfig()

        assert config.max_installments == 60
        assert config.max_interval_days == 365
        assert config.default_interval_days == 30
        assert config.remainder_policy == RemainderPolicy.NONE


class TestOtherConfigs:
    """Tests for agreement, dashboard and output configs."""

    def test_agreement_defaults(self) -> None:
        config = AgreementConfig()
        assert config.max_installments == 60
        assert config.default_interest_rate_percent == Decimal("0")

    def test_dashboard_defaults(self) -> None:
        config = DashboardConfig()
        assert config.upcoming_window_days == 7
        assert config.top_debtors_limit == 5
        assert config.monthly_recovery_goal == Decimal("50000")

    def test_output_defaults(self) -> None:
        config = OutputConfig()
        assert config.json_output_dir == Path("output")
        assert config.pretty_json is False


class TestEngineConfig:
    """Tests for EngineConfig."""

    def test_default_values(self) -> None:
        config = EngineConfig()

        assert isinstance(config.scheduling, SchedulingConfig)
        assert config.seed is None
        assert config.log_level == "INFO"

    def test_from_env_default(self) -> None:
        """Test creating config from an empty environment."""
        with patch.dict(os.environ, {}, clear=True):
            config = EngineConfig.from_env()

        assert config.scheduling.max_installments == 60
        assert config.agreement.default_interest_rate_percent == Decimal("0")
        assert config.dashboard.top_debtors_limit == 5
        assert config.seed is None
        assert config.log_level == "INFO"

    def test_from_env_custom(self) -> None:
        """Test creating config from custom environment variables."""
        env_vars = {
            "COLLECTION_MAX_INSTALLMENTS": "24",
            "COLLECTION_MAX_INTERVAL_DAYS": "90",
            "COLLECTION_DEFAULT_INTERVAL_DAYS": "15",
            "COLLECTION_REMAINDER_POLICY": "last_installment",
            "COLLECTION_AGREEMENT_MAX_INSTALLMENTS": "12",
            "COLLECTION_AGREEMENT_INTEREST": "1.5",
            "COLLECTION_UPCOMING_DAYS": "10",
            "COLLECTION_TOP_DEBTORS": "3",
            "COLLECTION_RECOVERY_GOAL": "75000.00",
            "SEED": "12345",
            "OUTPUT_DIR": "/data/output",
            "PRETTY_JSON": "true",
            "LOG_LEVEL": "DEBUG",
        }

        with patch.dict(os.environ, env_vars, clear=True):
            config = EngineConfig.from_env()

        assert config.scheduling.max_installments == 24
        assert config.scheduling.max_interval_days == 90
        assert config.scheduling.default_interval_days == 15
        assert config.scheduling.remainder_policy == RemainderPolicy.LAST_INSTALLMENT
        assert config.agreement.max_installments == 12
        assert config.agreement.default_interest_rate_percent == Decimal("1.5")
        assert config.dashboard.upcoming_window_days == 10
        assert config.dashboard.top_debtors_limit == 3
        assert config.dashboard.monthly_recovery_goal == Decimal("75000.00")
        assert config.seed == 12345
        assert config.output.json_output_dir == Path("/data/output")
        assert config.output.pretty_json is True
        assert config.log_level == "DEBUG"

    @pytest.mark.parametrize(
        "name,value",
        [
            ("COLLECTION_MAX_INSTALLMENTS", "many"),
            ("COLLECTION_REMAINDER_POLICY", "SPREAD"),
            ("COLLECTION_RECOVERY_GOAL", "lots"),
            ("SEED", "abc"),
        ],
    )
    def test_from_env_invalid(self, name: str, value: str) -> None:
        with patch.dict(os.environ, {name: value}, clear=True):
            with pytest.raises(ConfigurationError):
                EngineConfig.from_env()


@pytest.fixture
def restore_logging():
    """Put root handlers and package level back after a test reconfigures logging."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    package_level = logging.getLogger("collection_engine").level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    logging.getLogger("collection_engine").setLevel(package_level)


@pytest.mark.usefixtures("restore_logging")
class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_setup_logging_default(self) -> None:
        setup_logging()
        assert logging.getLogger("collection_engine").level == logging.INFO

    def test_setup_logging_debug(self) -> None:
        setup_logging(level="DEBUG")
        assert logging.getLogger().level == logging.DEBUG

    def test_setup_logging_invalid_level(self) -> None:
        """Test logging with invalid level defaults to INFO."""
        setup_logging(level="INVALID")
        assert logging.getLogger().level == logging.INFO

    def test_setup_logging_json_format(self) -> None:
        setup_logging(format_type="json")
        assert any(isinstance(h.formatter, JsonFormatter) for h in logging.getLogger().handlers)

    def test_setup_logging_replaces_handlers(self) -> None:
        root = logging.getLogger()
        root.addHandler(logging.StreamHandler())
        root.addHandler(logging.StreamHandler())

        setup_logging()

        assert len(root.handlers) == 1

    def test_faker_quieted(self) -> None:
        setup_logging(level="DEBUG")
        assert logging.getLogger("faker").level == logging.WARNING

    def test_reference_date_filter_attached(self) -> None:
        setup_logging(reference_date=date(2025, 6, 15))

        (handler,) = logging.getLogger().handlers
        (date_filter,) = [f for f in handler.filters if isinstance(f, ReferenceDateFilter)]
        assert date_filter.reference_date == date(2025, 6, 15)


class TestReferenceDateFilter:
    def _record(self) -> logging.LogRecord:
        return logging.LogRecord("collection_engine", logging.INFO, __file__, 1, "msg", (), None)

    def test_stamps_as_of(self) -> None:
        record = self._record()

        assert ReferenceDateFilter(date(2025, 6, 15)).filter(record) is True
        assert record.as_of == "2025-06-15"

    def test_placeholder_without_date(self) -> None:
        record = self._record()
        ReferenceDateFilter().filter(record)
        assert record.as_of == "-"


class TestJsonFormatter:
    """Tests for JsonFormatter."""

    def _record(self, **kwargs) -> logging.LogRecord:
        return logging.LogRecord(
            name="collection_engine.test",
            level=logging.WARNING,
            pathname=__file__,
            lineno=1,
            msg="Excluding title %s",
            args=("t1",),
            exc_info=kwargs.get("exc_info"),
        )

    def test_format_basic(self) -> None:
        data = json.loads(JsonFormatter().format(self._record()))

        assert data["level"] == "WARNING"
        assert data["logger"] == "collection_engine.test"
        assert data["message"] == "Excluding title t1"
        assert "timestamp" in data
        assert "as_of" not in data

    def test_format_as_of(self) -> None:
        record = self._record()
        ReferenceDateFilter(date(2025, 6, 15)).filter(record)

        data = json.loads(JsonFormatter().format(record))

        assert data["as_of"] == "2025-06-15"

    def test_format_extra(self) -> None:
        record = self._record()
        record.extra = {"title_id": "t1", "amount": Decimal("10.00")}

        data = json.loads(JsonFormatter().format(record))

        assert data["title_id"] == "t1"
        assert data["amount"] == "10.00"

    def test_format_exception(self) -> None:
        try:
            raise ValueError("boom")
        except ValueError:
            record = self._record(exc_info=sys.exc_info())

        data = json.loads(JsonFormatter().format(record))
        assert "ValueError: boom" in data["exception"]


class TestGetLogger:
    def test_get_logger(self) -> None:
        assert get_logger("collection_engine.engine").name == "collection_engine.engine"
