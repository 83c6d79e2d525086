"""Unit tests for logging and OpenTelemetry resource configuration."""

import json
import logging
import os
from unittest.mock import patch

import pytest

from restaurant_order_service.observability.config import (
    configure_logging,
    get_service_resource,
)


@pytest.mark.unit
class TestGetServiceResource:
    """Tests for get_service_resource function."""

    @patch.dict(os.environ, {"ENVIRONMENT": "test"}, clear=True)
    def test_default_attributes(self) -> None:
        """Test that the resource names the order service and default layout."""
        attributes = get_service_resource().attributes

        assert attributes["service.name"] == "order-svc"
        assert attributes["service.namespace"] == "restaurant"
        assert attributes["deployment.environment"] == "test"
        assert attributes["restaurant.table_count"] == "4"
        assert attributes["restaurant.table_capacity"] == "4"

    @patch.dict(
        os.environ,
        {"OTEL_SERVICE_NAME": "patio-terminal", "TABLE_COUNT": "8", "TABLE_CAPACITY": "2"},
        clear=True,
    )
    def test_attributes_follow_environment(self) -> None:
        """Test that service name and table layout come from the environment."""
        attributes = get_service_resource().attributes

        assert attributes["service.name"] == "patio-terminal"
        assert attributes["restaurant.table_count"] == "8"
        assert attributes["restaurant.table_capacity"] == "2"


@pytest.mark.unit
class TestConfigureLogging:
    """Tests for configure_logging function."""

    def setup_method(self) -> None:
        """Remember the root logger state."""
        root_logger = logging.getLogger()
        self._handlers = root_logger.handlers[:]
        self._level = root_logger.level

    def teardown_method(self) -> None:
        """Restore the root logger state."""
        root_logger = logging.getLogger()
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)
        for handler in self._handlers:
            root_logger.addHandler(handler)
        root_logger.setLevel(self._level)

    @patch.dict(os.environ, {}, clear=True)
    def test_installs_single_json_handler(self) -> None:
        """Test that existing handlers are replaced by one JSON handler."""
        logging.getLogger().addHandler(logging.NullHandler())

        configure_logging("WARNING")

        root_logger = logging.getLogger()
        assert len(root_logger.handlers) == 1
        assert root_logger.level == logging.WARNING

    @patch.dict(os.environ, {"LOG_LEVEL": "debug"}, clear=True)
    def test_environment_level_wins(self) -> None:
        """Test that LOG_LEVEL overrides the level passed in."""
        configure_logging("WARNING")

        assert logging.getLogger().level == logging.DEBUG

    @patch.dict(os.environ, {}, clear=True)
    def test_log_lines_carry_service_and_table(self) -> None:
        """Test that a formatted line names the service and keeps extra fields."""
        configure_logging("INFO")
        formatter = logging.getLogger().handlers[0].formatter
        record = logging.LogRecord(
            name="restaurant_order_service.services.order_workflow",
            level=logging.INFO,
            pathname=__file__,
            lineno=1,
            msg="place_order rejected: Table 1 is full",
            args=None,
            exc_info=None,
        )
        record.table_id = 1
        record.error_code = "capacity_exceeded"

        line = json.loads(formatter.format(record))

        assert line["service"] == "order-svc"
        assert line["level"] == "INFO"
        assert line["logger"] == "restaurant_order_service.services.order_workflow"
        assert line["message"] == "place_order rejected: Table 1 is full"
        assert line["table_id"] == 1
        assert line["error_code"] == "capacity_exceeded"
