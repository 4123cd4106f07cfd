"""Tests for correlation-aware logging."""

import logging

from element_query.shared import CorrelationLogger, get_logger, set_package_log_level


class TestCorrelationLogger:
    """Test structured extra data on log records."""

    def test_component_defaults_to_module_name(self):
        """Test the component is derived from the logger name."""
        logger = get_logger("element_query.path.compiler")

        assert isinstance(logger, CorrelationLogger)
        assert logger.component == "compiler"
        assert logger.correlation_id is None

    def test_records_carry_correlation_info(self, caplog):
        """Test component, correlation id and extra data reach the record."""
        logger = get_logger("element_query.test", "req-42", "tester")

        with caplog.at_level(logging.INFO, logger="element_query"):
            logger.info("hello", extra={"expression": "//a"})

        record = caplog.records[-1]
        assert record.getMessage() == "hello"
        assert record.component == "tester"
        assert record.correlation_id == "req-42"
        assert record.expression == "//a"

    def test_is_enabled_for(self):
        """Test level checks reflect the underlying logger."""
        logger = get_logger("element_query.level_check")
        logger.logger.setLevel(logging.ERROR)

        assert logger.is_enabled_for(logging.ERROR)
        assert not logger.is_enabled_for(logging.DEBUG)


class TestPackageLogLevel:
    """Test package-wide level configuration."""

    def test_set_package_log_level(self):
        """Test the package root logger level is applied."""
        package_logger = logging.getLogger("element_query")
        previous = package_logger.level
        try:
            set_package_log_level("ERROR")
            assert package_logger.level == logging.ERROR
        finally:
            package_logger.setLevel(previous)
